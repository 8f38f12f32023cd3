"""
Capability contracts consumed by the decision engine.

Subjects, resources and contexts are identified by an explicit ``name()``
accessor. A resource implements exactly one of ``StaticResource`` (level
depends on the action) or ``DynamicResource`` (level depends on the action
and the requesting subject).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from .errors import ConfigurationError

# Joins action segments into a single key; forbidden inside a segment.
ACTION_SEPARATOR = "_"

# Stable name of the global context.
GLOBAL_CONTEXT = ""

ANONYMOUS = "anonymous"

ActionPath = Tuple[str, ...]


class Subject(ABC):
    """An entity that wants to perform actions on resources."""

    @abstractmethod
    def name(self) -> str:
        """Stable identity of the subject."""

    @abstractmethod
    def relation(self, context: Any, other: Optional["Subject"]) -> str:
        """Relation label of this subject over ``other`` within ``context``."""


class Resource(ABC):
    """An entity protected from illegal actions."""

    @abstractmethod
    def name(self) -> str:
        """Stable identity of the resource, usable as a token scope."""

    @abstractmethod
    def context(self) -> Any:
        """Scope selecting the relation vocabulary, or None for global."""

    @abstractmethod
    def owner(self) -> Optional[Subject]:
        """Owner of the resource, or None."""


class StaticResource(Resource):
    """Resource whose access level depends only on the action."""

    @abstractmethod
    def permission(self, action: ActionPath) -> int:
        """Access level required to perform ``action``."""


class DynamicResource(Resource):
    """Resource whose access level depends on the action and the subject."""

    @abstractmethod
    def permission(self, subject: Optional[Subject], action: ActionPath) -> int:
        """Access level required for ``subject`` to perform ``action``."""


class Delegatee(ABC):
    """Narrows a subject's privilege to a bounded set of actions."""

    @abstractmethod
    def evaluate(self, relation: str, resource: Resource, action: ActionPath) -> bool:
        """Whether the delegation covers (relation, resource, action)."""


class ResourceKind(str, Enum):
    """Resource capability variants."""
    STATIC = "static"
    DYNAMIC = "dynamic"


def resource_kind(resource: Any) -> ResourceKind:
    """Return which permission shape ``resource`` implements."""
    is_static = isinstance(resource, StaticResource)
    is_dynamic = isinstance(resource, DynamicResource)

    if is_static and is_dynamic:
        raise ConfigurationError(
            "a resource must implement exactly one of StaticResource or DynamicResource",
            {"resource": type(resource).__name__}
        )
    if is_static:
        return ResourceKind.STATIC
    if is_dynamic:
        return ResourceKind.DYNAMIC

    raise ConfigurationError(
        "expected an object implementing StaticResource or DynamicResource",
        {"resource": type(resource).__name__}
    )


def name_of(value: Any) -> str:
    """Stable name of a context, scope, subject or resource.

    ``None`` is the global context and maps to the empty name. Strings name
    themselves; any other value must expose ``name()``.
    """
    if value is None:
        return GLOBAL_CONTEXT

    if isinstance(value, str):
        return value

    accessor = getattr(value, "name", None)
    if not callable(accessor):
        raise ConfigurationError(
            "value must be None, a string, or expose name()",
            {"type": type(value).__name__}
        )

    name = accessor()
    if not isinstance(name, str) or not name:
        raise ConfigurationError(
            "name() must return a non-empty string",
            {"type": type(value).__name__}
        )
    return name


def subject_name(subject: Optional[Subject]) -> str:
    if subject is None:
        return ANONYMOUS
    return name_of(subject)


def normalize_action(segments: Iterable[str]) -> ActionPath:
    """Validate action segments and return them as a tuple."""
    action = tuple(segments)

    for segment in action:
        if not isinstance(segment, str) or not segment:
            raise ConfigurationError(
                "action segments must be non-empty strings",
                {"action": list(action)}
            )
        if ACTION_SEPARATOR in segment:
            raise ConfigurationError(
                f"action segment {segment!r} contains the separator {ACTION_SEPARATOR!r}",
                {"action": list(action)}
            )

    return action


def join_action(action: ActionPath) -> str:
    """Join an action path into its single-string key."""
    return ACTION_SEPARATOR.join(action)


def parse_action(key: str) -> ActionPath:
    """Inverse of ``join_action``."""
    if not key:
        return ()
    return tuple(key.split(ACTION_SEPARATOR))
