"""
Rule data models for delegation tokens and decisions.
"""

from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field

from ..contracts import ActionPath, join_action
from ..errors import PermissionDenied

WILDCARD = ""


class RuleEffect(str, Enum):
    """Rule effect types."""
    ALLOW = "allow"
    DENY = "deny"

    @classmethod
    def of(cls, allowed: bool) -> "RuleEffect":
        return cls.ALLOW if allowed else cls.DENY


@dataclass(frozen=True)
class RuleKey:
    """Composite token key; an empty component is a wildcard."""
    action: ActionPath = ()
    relation: str = WILDCARD
    scope: str = WILDCARD

    def __str__(self) -> str:
        return ".".join([join_action(self.action), self.relation, self.scope])


class TokenRule(BaseModel):
    """Serializable view of one token rule."""
    action: List[str] = Field(default_factory=list, description="Action segments, empty for any action")
    relation: str = Field(WILDCARD, description="Relation label, empty for any relation")
    scope: str = Field(WILDCARD, description="Resource or context name, empty for any scope")
    effect: RuleEffect = Field(..., description="Rule effect")

    @classmethod
    def from_key(cls, key: RuleKey, effect: RuleEffect) -> "TokenRule":
        return cls(action=list(key.action), relation=key.relation, scope=key.scope, effect=effect)


@dataclass
class TokenMatch:
    """Outcome of matching one (relation, resource, action) against a token."""
    allowed: bool
    matched_keys: List[RuleKey] = field(default_factory=list)
    banned_by: Optional[RuleKey] = None


@dataclass
class Decision:
    """Result of one privilege decision."""
    allowed: bool
    subject: str
    action: ActionPath
    resource: str
    relation: str = WILDCARD
    privilege: Optional[int] = None
    required_level: Optional[int] = None
    delegated: Optional[bool] = None
    reason: Optional[str] = None
    error: Optional[PermissionDenied] = None
    evaluation_time_ms: float = 0.0

    def __bool__(self) -> bool:
        return self.allowed

    def raise_for_denial(self):
        """Raise the carried PermissionDenied, if any."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "subject": self.subject,
            "action": join_action(self.action),
            "resource": self.resource,
            "relation": self.relation,
            "privilege": self.privilege,
            "required_level": self.required_level,
            "delegated": self.delegated,
            "reason": self.reason,
        }
