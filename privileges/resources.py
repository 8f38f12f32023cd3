"""
Map-backed resources for callers that do not model their own resource types.
"""

import threading
from typing import Any, Dict, Optional

from .contracts import ActionPath, StaticResource, Subject, join_action, normalize_action
from .errors import ConfigurationError
from .levels import AccessLevel


class AbstractResource(StaticResource):
    """Resource described by a name and a per-action access-level table.

    Actions without an entry require ``AccessLevel.NOT_SUPPORT``.
    """

    def __init__(self, name: str):
        if not name:
            raise ConfigurationError("abstract resource name must be non-empty")
        self._name = name
        self._context: Any = None
        self._owner: Optional[Subject] = None
        self.permissions: Dict[str, int] = {}

    def name(self) -> str:
        return self._name

    def context(self) -> Any:
        return self._context

    def owner(self) -> Optional[Subject]:
        return self._owner

    def set_context(self, context: Any):
        self._context = context

    def set_owner(self, owner: Optional[Subject]):
        self._owner = owner

    def set_permission(self, level: int, *action: str):
        """Require ``level`` for ``action``."""
        self.permissions[join_action(normalize_action(action))] = level

    def permission(self, action: ActionPath) -> int:
        return self.permissions.get(join_action(action), AccessLevel.NOT_SUPPORT)

    def __repr__(self) -> str:
        return f"AbstractResource({self._name!r})"


class ResourceStore:
    """Keeps one abstract resource per name."""

    def __init__(self):
        self.resources: Dict[str, AbstractResource] = {}
        self._lock = threading.Lock()

    def abstract_resource(self, name: str) -> AbstractResource:
        """Return the resource called ``name``, creating it on first use."""
        with self._lock:
            if name not in self.resources:
                self.resources[name] = AbstractResource(name)
            return self.resources[name]

    def __contains__(self, name: str) -> bool:
        return name in self.resources

    def __len__(self) -> int:
        return len(self.resources)
