"""
Shared utilities for the privilege decision engine.

This package aggregates common building blocks consumed by the engine:

- config: Engine configuration via pydantic-settings
- logging: Structured logging with request correlation
- errors: Canonical error base type and response payload

Do not import from the privileges package into shared/.
"""
