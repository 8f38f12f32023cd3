"""
In-process privilege decision engine.

A decision compares the privilege a subject holds over a resource's owner
(a relation label resolved through a ``RelationRegistry``) against the
access level the resource demands for an action, optionally narrowed by a
least-privilege delegation token.

Modules of interest:
- levels: Privilege and AccessLevel scales and the default vocabulary.
- contracts: Subject, Resource and Delegatee capability interfaces.
- registry: Context-scoped relation resolution.
- checker: The decision algorithm.
- rules: Delegation token and decision models.
- resources: Map-backed abstract resources.
- bootstrap: Settings and logging wiring.

The engine performs no I/O. Populate registries and tokens during a
single-threaded warmup and treat them as read-only afterwards.
"""

from .bootstrap import Engine, setup
from .checker import Checker, new_checker
from .contracts import (
    Delegatee, DynamicResource, Resource, StaticResource, Subject
)
from .errors import (
    ConfigurationError, PermissionDenied, UnknownContextError, UnknownRelationError
)
from .levels import AccessLevel, Privilege
from .registry import RelationRegistry, new_registry
from .resources import AbstractResource, ResourceStore
from .rules.models import Decision, RuleEffect, RuleKey
from .rules.token import LeastPrivilegeToken, new_token

__all__ = [
    "AbstractResource",
    "AccessLevel",
    "Checker",
    "ConfigurationError",
    "Decision",
    "Delegatee",
    "DynamicResource",
    "Engine",
    "LeastPrivilegeToken",
    "PermissionDenied",
    "Privilege",
    "RelationRegistry",
    "Resource",
    "ResourceStore",
    "RuleEffect",
    "RuleKey",
    "StaticResource",
    "Subject",
    "UnknownContextError",
    "UnknownRelationError",
    "new_checker",
    "new_registry",
    "new_token",
    "setup",
]
