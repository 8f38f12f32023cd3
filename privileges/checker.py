"""
Decision engine: decides whether a subject may perform an action on a resource.
"""

import time
from typing import Optional

from shared.logging import get_logger
from .contracts import (
    ActionPath, Delegatee, Resource, ResourceKind, Subject,
    join_action, name_of, normalize_action, resource_kind, subject_name
)
from .errors import ConfigurationError, PermissionDenied
from .levels import Privilege
from .registry import RelationRegistry
from .rules.models import WILDCARD, Decision


class Checker:
    """One-shot privilege check.

    Build with ``Checker.configure``, set the action with ``perform``,
    optionally attach a delegatee, then call ``decide`` exactly once.
    """

    def __init__(self, subject: Optional[Subject], registry: RelationRegistry, log_decisions: bool = True):
        if not isinstance(registry, RelationRegistry):
            raise ConfigurationError("a RelationRegistry is required", {"registry": type(registry).__name__})

        self.logger = get_logger("privileges.checker")
        self.subject = subject
        self.registry = registry
        self.action: ActionPath = ()
        self.delegatee: Optional[Delegatee] = None
        self.log_decisions = log_decisions
        self._consumed = False

    @classmethod
    def configure(cls, subject: Optional[Subject], registry: RelationRegistry, log_decisions: bool = True) -> "Checker":
        """Create a checker for ``subject``; ``None`` is an anonymous request."""
        return cls(subject, registry, log_decisions)

    def perform(self, *action: str) -> "Checker":
        """Set the action path and return the checker."""
        self.action = normalize_action(action)
        return self

    def delegate(self, delegatee: Delegatee) -> "Checker":
        """Attach a delegatee that may veto the decision."""
        if not isinstance(delegatee, Delegatee):
            raise ConfigurationError("delegatee must implement Delegatee", {"delegatee": type(delegatee).__name__})
        self.delegatee = delegatee
        return self

    def decide(self, resource: Resource) -> Decision:
        """Decide whether the subject may perform the action on ``resource``.

        Wiring defects raise; a denial is returned inside the decision.
        """
        if self._consumed:
            raise ConfigurationError("checker has already been used for a decision")
        self._consumed = True

        start_time = time.time()

        if resource_kind(resource) == ResourceKind.STATIC:
            required_level = resource.permission(self.action)
        else:
            required_level = resource.permission(self.subject, self.action)

        context = resource.context()
        owner = resource.owner()

        if owner is not None and context == owner:
            raise ConfigurationError(
                "do not use the owner as the context, set the context to None instead",
                {"resource": name_of(resource)}
            )

        if self.subject is None:
            relation = WILDCARD
            privilege = Privilege.ANYONE
        else:
            relation = self.subject.relation(context, owner)
            if not isinstance(relation, str):
                raise ConfigurationError(
                    "relation() must return a string",
                    {"subject": subject_name(self.subject)}
                )
            relation = relation.lower()
            privilege = self.registry.resolve_relation(context, relation)

        delegated = None
        if self.delegatee is not None:
            delegated = self.delegatee.evaluate(relation, resource, self.action)

        allowed = privilege >= required_level and delegated is not False

        if allowed:
            reason = "Privilege satisfies access level"
        elif delegated is False:
            reason = "Delegatee vetoed the action"
        else:
            reason = "Privilege below required access level"

        decision = Decision(
            allowed=allowed,
            subject=subject_name(self.subject),
            action=self.action,
            resource=name_of(resource),
            relation=relation,
            privilege=int(privilege),
            required_level=int(required_level),
            delegated=delegated,
            reason=reason,
            evaluation_time_ms=(time.time() - start_time) * 1000
        )

        if not allowed:
            decision.error = PermissionDenied(
                decision.subject,
                join_action(self.action),
                decision.resource,
                {"reason": reason}
            )

        if self.log_decisions:
            self.logger.debug("Privilege decision", **decision.to_dict())

        return decision


def new_checker(subject: Optional[Subject], registry: RelationRegistry, log_decisions: bool = True) -> Checker:
    """Create a checker for ``subject`` backed by ``registry``."""
    return Checker.configure(subject, registry, log_decisions)
