"""
Error taxonomy for the privilege engine.

``ConfigurationError``, ``UnknownContextError`` and ``UnknownRelationError``
signal broken policy wiring and are raised. ``PermissionDenied`` is the
ordinary negative outcome and travels inside a ``Decision`` instead.
"""

from typing import Dict, Any, Optional

from shared.errors import PrivilegeException


class ConfigurationError(PrivilegeException):
    """Wiring defects: bad resource shape, owner used as context, misuse."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


class UnknownContextError(PrivilegeException):
    """A relation was resolved in a context that was never registered."""

    def __init__(self, context_name: str, details: Optional[Dict[str, Any]] = None):
        self.context_name = context_name
        details = {"context": context_name, **(details or {})}
        super().__init__("UNKNOWN_CONTEXT", f"unknown context {context_name}", details)


class UnknownRelationError(PrivilegeException):
    """A relation matched neither the context map nor the defaults."""

    def __init__(self, relation: str, context_name: str, details: Optional[Dict[str, Any]] = None):
        self.relation = relation
        self.context_name = context_name
        details = {"relation": relation, "context": context_name, **(details or {})}
        super().__init__(
            "UNKNOWN_RELATION",
            f"unknown relation {relation} in context {context_name}",
            details
        )


class PermissionDenied(PrivilegeException):
    """The subject may not perform the action on the resource."""

    def __init__(self, subject: str, action: str, resource: str, details: Optional[Dict[str, Any]] = None):
        self.subject = subject
        self.action = action
        self.resource = resource
        details = {"subject": subject, "action": action, "resource": resource, **(details or {})}
        super().__init__(
            "PERMISSION_DENIED",
            f"{subject} does not have the permission to {action} {resource}",
            details
        )
