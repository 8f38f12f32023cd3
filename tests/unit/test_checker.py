"""
Unit tests for the Checker decision engine.
"""

from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

from privileges.checker import Checker, new_checker
from privileges.contracts import Delegatee, DynamicResource, Resource, StaticResource, Subject
from privileges.errors import ConfigurationError, PermissionDenied, UnknownContextError, UnknownRelationError
from privileges.levels import AccessLevel, Privilege
from privileges.registry import RelationRegistry
from privileges.resources import AbstractResource
from privileges.testing import Avatar, User


class FixedSubject(Subject):
    """Subject that always reports the same relation."""

    def __init__(self, relation_label: str, subject_id: str = "fixed"):
        self.relation_label = relation_label
        self.subject_id = subject_id
        self.calls = []

    def name(self) -> str:
        return self.subject_id

    def relation(self, context: Any, other: Optional[Subject]) -> str:
        self.calls.append((context, other))
        return self.relation_label


class ShapelessResource(Resource):
    """Resource implementing neither permission variant."""

    def name(self) -> str:
        return "shapeless"

    def context(self) -> Any:
        return None

    def owner(self) -> Optional[Subject]:
        return None


class BothShapesResource(StaticResource, DynamicResource):
    """Resource claiming both permission variants."""

    def name(self) -> str:
        return "both"

    def context(self) -> Any:
        return None

    def owner(self) -> Optional[Subject]:
        return None

    def permission(self, *args) -> int:
        return AccessLevel.PUBLIC


class StubDelegatee(Delegatee):
    """Delegatee answering a fixed value and recording its calls."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.calls = []

    def evaluate(self, relation, resource, action) -> bool:
        self.calls.append((relation, resource, action))
        return self.answer


class TestChecker:
    """Test cases for Checker."""

    @pytest.fixture
    def registry(self):
        """Create RelationRegistry instance."""
        return RelationRegistry()

    @pytest.fixture
    def resource(self):
        """Abstract resource requiring LOW_SECRET to update."""
        resource = AbstractResource("document")
        resource.set_permission(AccessLevel.LOW_SECRET, "update")
        resource.set_permission(AccessLevel.PUBLIC, "read")
        return resource

    @pytest.mark.parametrize("privilege", list(Privilege))
    @pytest.mark.parametrize("level", list(AccessLevel))
    def test_ordinal_comparison(self, registry, privilege, level):
        """Without a delegatee the decision is privilege >= level."""
        label = privilege.name.replace("_", "").lower()
        resource = AbstractResource("document")
        resource.set_permission(level, "act")

        decision = new_checker(FixedSubject(label), registry).perform("act").decide(resource)

        assert decision.allowed is (privilege >= level)
        assert decision.privilege == privilege
        assert decision.required_level == level

    def test_not_support_denies_owner(self, registry):
        """Undefined actions deny even the owner."""
        owner = User("alice")
        resource = AbstractResource("document")
        resource.set_owner(owner)

        decision = new_checker(owner, registry).perform("archive").decide(resource)

        assert decision.allowed is False
        assert decision.privilege == Privilege.SELF
        assert decision.required_level == AccessLevel.NOT_SUPPORT

    def test_allow_carries_no_error(self, registry, resource):
        """Allowed decisions are truthy and carry no error."""
        decision = new_checker(FixedSubject("admin"), registry).perform("update").decide(resource)

        assert decision
        assert decision.error is None
        decision.raise_for_denial()

    def test_denial_carries_permission_denied(self, registry, resource):
        """Denials are returned, not raised."""
        decision = new_checker(FixedSubject("anyone", "bob"), registry).perform("update").decide(resource)

        assert not decision
        assert isinstance(decision.error, PermissionDenied)
        assert decision.error.code == "PERMISSION_DENIED"
        assert decision.error.details["subject"] == "bob"
        assert decision.error.details["action"] == "update"
        assert decision.error.details["resource"] == "document"

        with pytest.raises(PermissionDenied):
            decision.raise_for_denial()

    def test_parameterized_action_joined_in_error(self, registry):
        """Multi-segment actions are reported joined."""
        resource = AbstractResource("account")
        resource.set_permission(AccessLevel.HIGH_SECRET, "create", "admin")

        decision = new_checker(FixedSubject("moderator"), registry).perform("create", "admin").decide(resource)

        assert decision.allowed is False
        assert decision.action == ("create", "admin")
        assert decision.error.action == "create_admin"

    def test_owner_equal_to_context_is_configuration_error(self, registry):
        """Owner used as context never reaches comparison."""
        owner = User("alice")
        subject = FixedSubject("self")
        resource = AbstractResource("document")
        resource.set_owner(owner)
        resource.set_context(owner)
        resource.set_permission(AccessLevel.PUBLIC, "read")

        with pytest.raises(ConfigurationError):
            new_checker(subject, registry).perform("read").decide(resource)

        assert subject.calls == []

    def test_none_owner_and_none_context_allowed(self, registry):
        """The owner check only applies to non-None owners."""
        resource = AbstractResource("document")
        resource.set_permission(AccessLevel.PUBLIC, "read")

        decision = new_checker(FixedSubject("anyone"), registry).perform("read").decide(resource)

        assert decision.allowed is True

    def test_shapeless_resource(self, registry):
        """Resources must implement a permission variant."""
        with pytest.raises(ConfigurationError):
            new_checker(FixedSubject("self"), registry).perform("read").decide(ShapelessResource())

    def test_resource_with_both_shapes(self, registry):
        """Resources must implement exactly one permission variant."""
        with pytest.raises(ConfigurationError):
            new_checker(FixedSubject("self"), registry).perform("read").decide(BothShapesResource())

    def test_plain_object_is_not_a_resource(self, registry):
        """Duck-typed objects are rejected."""
        with pytest.raises(ConfigurationError):
            new_checker(FixedSubject("self"), registry).perform("read").decide(MagicMock())

    def test_dynamic_resource_receives_subject(self, registry):
        """Dynamic resources compute the level from the subject."""
        alice, carol = User("alice"), User("carol")
        avatar = Avatar(user=alice, banned=[carol])

        assert new_checker(alice, registry).perform("read").decide(avatar).allowed is True
        assert new_checker(User("bob"), registry).perform("read").decide(avatar).allowed is True
        assert new_checker(carol, registry).perform("read").decide(avatar).allowed is False

    def test_anonymous_subject(self, registry, resource):
        """Anonymous requests resolve to ANYONE without the registry."""
        registry.resolve_relation = MagicMock()

        read = new_checker(None, registry).perform("read").decide(resource)
        update = new_checker(None, registry).perform("update").decide(resource)

        assert read.allowed is True
        assert read.privilege == Privilege.ANYONE
        assert read.subject == "anonymous"
        assert update.allowed is False
        registry.resolve_relation.assert_not_called()

    def test_subject_receives_context_and_owner(self, registry):
        """Subjects are asked for their relation against (context, owner)."""
        owner = User("alice")
        registry.register_relation("workspace", "member", Privilege.LOW_FAMILIAR)
        resource = AbstractResource("document")
        resource.set_owner(owner)
        resource.set_context("workspace")
        resource.set_permission(AccessLevel.LOW_PRIVATE, "read")
        subject = FixedSubject("Member")

        decision = new_checker(subject, registry).perform("read").decide(resource)

        assert subject.calls == [("workspace", owner)]
        assert decision.relation == "member"
        assert decision.allowed is True

    def test_unknown_context_propagates(self, registry):
        """Unregistered named contexts raise."""
        resource = AbstractResource("document")
        resource.set_context("workspace")
        resource.set_permission(AccessLevel.PUBLIC, "read")

        with pytest.raises(UnknownContextError):
            new_checker(FixedSubject("anyone"), registry).perform("read").decide(resource)

    def test_unknown_relation_propagates(self, registry, resource):
        """Unknown relations raise."""
        with pytest.raises(UnknownRelationError):
            new_checker(FixedSubject("stranger"), registry).perform("read").decide(resource)

    def test_non_string_relation(self, registry, resource):
        """Subjects must return relation labels."""
        subject = FixedSubject(Privilege.ADMIN)

        with pytest.raises(ConfigurationError):
            new_checker(subject, registry).perform("read").decide(resource)

    def test_bad_relation_denied_public(self, registry, resource):
        """The bottom privilege is below every legitimate access level."""
        registry.register_relation(None, "bannedRelation", Privilege.BAD_RELATION)

        decision = new_checker(FixedSubject("bannedrelation"), registry).perform("read").decide(resource)

        assert decision.allowed is False
        assert decision.privilege == Privilege.BAD_RELATION

    def test_delegatee_veto_wins(self, registry, resource):
        """A delegatee answering False denies regardless of privilege."""
        delegatee = StubDelegatee(False)

        decision = (
            new_checker(FixedSubject("Self"), registry)
            .delegate(delegatee)
            .perform("update")
            .decide(resource)
        )

        assert decision.allowed is False
        assert decision.delegated is False
        assert decision.reason == "Delegatee vetoed the action"
        assert delegatee.calls == [("self", resource, ("update",))]

    def test_delegatee_cannot_grant(self, registry, resource):
        """A delegatee answering True never lifts a failing privilege."""
        decision = (
            new_checker(FixedSubject("anyone"), registry)
            .perform("update")
            .delegate(StubDelegatee(True))
            .decide(resource)
        )

        assert decision.allowed is False
        assert decision.delegated is True
        assert decision.reason == "Privilege below required access level"

    def test_delegatee_allows_with_privilege(self, registry, resource):
        """Privilege and delegation both satisfied."""
        decision = (
            new_checker(FixedSubject("admin"), registry)
            .perform("update")
            .delegate(StubDelegatee(True))
            .decide(resource)
        )

        assert decision.allowed is True

    def test_anonymous_delegation_uses_empty_relation(self, registry, resource):
        """Anonymous requests present the wildcard relation to the delegatee."""
        delegatee = StubDelegatee(True)

        new_checker(None, registry).perform("read").delegate(delegatee).decide(resource)

        assert delegatee.calls == [("", resource, ("read",))]

    def test_invalid_delegatee(self, registry):
        """Delegatees must implement the Delegatee contract."""
        with pytest.raises(ConfigurationError):
            new_checker(None, registry).delegate(object())

    def test_registry_required(self):
        """A registry must be supplied explicitly."""
        with pytest.raises(ConfigurationError):
            Checker.configure(None, {})

    def test_registry_required_on_direct_construction(self):
        """The constructor validates the registry as configure does."""
        with pytest.raises(ConfigurationError):
            Checker(None, {})
        with pytest.raises(ConfigurationError):
            new_checker(User("alice"), None)

    def test_invalid_action_segments(self, registry):
        """Action segments are validated when set."""
        with pytest.raises(ConfigurationError):
            new_checker(None, registry).perform("create_admin")
        with pytest.raises(ConfigurationError):
            new_checker(None, registry).perform("create", "")

    def test_checker_is_single_use(self, registry, resource):
        """A checker decides exactly once."""
        checker = new_checker(FixedSubject("admin"), registry).perform("read")
        checker.decide(resource)

        with pytest.raises(ConfigurationError):
            checker.decide(resource)

    def test_decision_to_dict(self, registry, resource):
        """Decisions expose diagnostics."""
        decision = new_checker(FixedSubject("admin", "root"), registry).perform("update").decide(resource)

        data = decision.to_dict()

        assert data["allowed"] is True
        assert data["subject"] == "root"
        assert data["action"] == "update"
        assert data["resource"] == "document"
        assert data["privilege"] == int(Privilege.ADMIN)
        assert data["required_level"] == int(AccessLevel.LOW_SECRET)
        assert decision.evaluation_time_ms >= 0
