"""
Example subjects and resources for exercising the engine in tests.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .contracts import ActionPath, DynamicResource, StaticResource, Subject
from .levels import AccessLevel, Privilege
from .registry import RelationRegistry


@dataclass
class User(Subject):
    """A user; ``role`` short-circuits relation lookup when set."""
    user_id: str
    role: Optional[str] = None

    def name(self) -> str:
        return f"user:{self.user_id}"

    def relation(self, context: Any, other: Optional[Subject]) -> str:
        # Self is context independent and evaluated first.
        if isinstance(other, User) and other.user_id == self.user_id:
            return "self"

        if self.role:
            return self.role

        if context is None:
            if isinstance(other, Group) and other.is_member(self):
                return "groupMember"
            return "anyone"

        if isinstance(context, Group):
            if not context.is_member(self):
                return "anyone"
            if isinstance(other, User) and context.is_member(other):
                return "sameGroup"

        return "anyone"


@dataclass
class Group(Subject):
    """A group of users. Every group shares the scope name ``group``."""
    members: List[User] = field(default_factory=list)

    def name(self) -> str:
        return "group"

    def relation(self, context: Any, other: Optional[Subject]) -> str:
        # A group doesn't have any privilege over other subjects.
        return "anyone"

    def is_member(self, user: User) -> bool:
        return any(m.user_id == user.user_id for m in self.members)


@dataclass
class GroupPost(StaticResource):
    """A post written by ``author`` inside ``group``."""
    author: User
    group: Group

    def name(self) -> str:
        return "group_post"

    def context(self) -> Any:
        return self.group

    def owner(self) -> Optional[Subject]:
        return self.author

    def permission(self, action: ActionPath) -> int:
        if len(action) != 1:
            return AccessLevel.NOT_SUPPORT

        if action[0] == "update":
            return AccessLevel.HIGH_SECRET
        if action[0] == "delete":
            return AccessLevel.LOW_SECRET
        if action[0] == "read":
            return AccessLevel.LOW_PRIVATE
        return AccessLevel.NOT_SUPPORT


@dataclass
class Avatar(DynamicResource):
    """Public avatar that hides itself from banned users."""
    user: User
    banned: List[User] = field(default_factory=list)

    def name(self) -> str:
        return "avatar"

    def context(self) -> Any:
        return None

    def owner(self) -> Optional[Subject]:
        return self.user

    def permission(self, subject: Optional[Subject], action: ActionPath) -> int:
        if tuple(action) != ("read",):
            return AccessLevel.NOT_SUPPORT

        if isinstance(subject, User) and any(b.user_id == subject.user_id for b in self.banned):
            return AccessLevel.NOT_SUPPORT
        return AccessLevel.PUBLIC


class TestDataFactory:
    """Factory for creating test data."""

    __test__ = False

    @staticmethod
    def create_registry() -> RelationRegistry:
        """Registry with the group vocabulary used by the examples."""
        registry = RelationRegistry()
        registry.register_relation(None, "banned", Privilege.BAD_RELATION)
        registry.register_relation(None, "groupMember", Privilege.LOW_FAMILIAR)
        registry.register_relation(Group(), "anyone", Privilege.ANYONE)
        registry.register_relation(Group(), "sameGroup", Privilege.LOW_FAMILIAR)
        registry.register_relation(Group(), "self", Privilege.SELF)
        return registry

    @staticmethod
    def create_test_users() -> List[User]:
        """Create test users."""
        return [
            User("alice"),
            User("bob"),
            User("carol"),
            User("root", role="admin"),
            User("mod", role="moderator"),
        ]
