"""
Least-privilege delegation token.
"""

from typing import Any, Dict, List, Optional

from shared.logging import get_logger
from ..contracts import ActionPath, Delegatee, Resource, name_of, normalize_action
from ..errors import ConfigurationError
from .models import WILDCARD, RuleEffect, RuleKey, TokenMatch, TokenRule


class LeastPrivilegeToken(Delegatee):
    """Delegatee that denies everything not explicitly allowed.

    Rules are keyed by (action, relation, scope), where any component may be
    a wildcard. A matching ban always wins over any number of allows.
    Build the token once, then treat it as read-only.
    """

    def __init__(self, log_evaluations: bool = True):
        self.logger = get_logger("privileges.token")
        self.rules: Dict[RuleKey, RuleEffect] = {}
        self.log_evaluations = log_evaluations
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """Reject any further rule changes."""
        self._frozen = True

    def set_rule(self, relation: str, scope: Any, action: ActionPath, allowed: bool):
        """Store a rule at the exact key, replacing any previous one.

        Use an empty relation to match every relation, a ``None`` or empty
        scope to match every scope, and an empty action to match every
        action.
        """
        if self._frozen:
            raise ConfigurationError("token is frozen")

        key = RuleKey(
            action=normalize_action(action),
            relation=(relation or WILDCARD).lower(),
            scope=name_of(scope),
        )
        effect = RuleEffect.of(allowed)
        self.rules[key] = effect

        if self.log_evaluations:
            self.logger.debug("Token rule set", key=str(key), effect=effect.value)

    def allow_action(self, *action: str):
        """Allow the action for every relation in every scope."""
        self.set_rule(WILDCARD, None, action, True)

    def allow_scope(self, scope: Any):
        """Allow every action for every relation in scope."""
        self.set_rule(WILDCARD, scope, (), True)

    def allow_relation(self, relation: str, scope: Any):
        """Allow every action for relation in scope."""
        self.set_rule(relation, scope, (), True)

    def allow_action_in_scope(self, scope: Any, *action: str):
        """Allow the action for every relation in scope."""
        self.set_rule(WILDCARD, scope, action, True)

    def allow(self, relation: str, scope: Any, *action: str):
        """Allow the action for relation in scope."""
        self.set_rule(relation, scope, action, True)

    def ban_action(self, *action: str):
        """Ban the action for every relation in every scope."""
        self.set_rule(WILDCARD, None, action, False)

    def ban_scope(self, scope: Any):
        """Ban every action for every relation in scope."""
        self.set_rule(WILDCARD, scope, (), False)

    def ban_relation(self, relation: str, scope: Any):
        """Ban every action for relation in scope."""
        self.set_rule(relation, scope, (), False)

    def ban_action_in_scope(self, scope: Any, *action: str):
        """Ban the action for every relation in scope."""
        self.set_rule(WILDCARD, scope, action, False)

    def ban(self, relation: str, scope: Any, *action: str):
        """Ban the action for relation in scope."""
        self.set_rule(relation, scope, action, False)

    def candidate_keys(self, relation: str, resource: Resource, action: ActionPath) -> List[RuleKey]:
        """The nine keys that may govern a request, in precedence order."""
        relation = (relation or WILDCARD).lower()
        resource_name = name_of(resource)
        context_name = name_of(resource.context())
        action = tuple(action)

        return [
            # Full-parameter keys.
            RuleKey(action, relation, resource_name),
            RuleKey(action, relation, context_name),

            # Partial keys.
            RuleKey((), relation, resource_name),
            RuleKey((), relation, context_name),
            RuleKey(action, WILDCARD, resource_name),
            RuleKey(action, WILDCARD, context_name),

            # One-parameter keys.
            RuleKey((), WILDCARD, resource_name),
            RuleKey((), WILDCARD, context_name),
            RuleKey(action, WILDCARD, WILDCARD),
        ]

    def explain(self, relation: str, resource: Resource, action: ActionPath) -> TokenMatch:
        """Match a request against the rules and report which keys applied."""
        matched: List[RuleKey] = []
        seen_allow = False

        for key in self.candidate_keys(relation, resource, action):
            effect = self.rules.get(key)
            if effect is None:
                continue

            matched.append(key)
            if effect == RuleEffect.DENY:
                return TokenMatch(allowed=False, matched_keys=matched, banned_by=key)
            seen_allow = True

        return TokenMatch(allowed=seen_allow, matched_keys=matched)

    def evaluate(self, relation: str, resource: Resource, action: ActionPath) -> bool:
        """Whether the token covers the request."""
        match = self.explain(relation, resource, action)

        if not self.log_evaluations:
            return match.allowed

        self.logger.debug(
            "Token evaluation result",
            relation=relation,
            resource=name_of(resource),
            allowed=match.allowed,
            matched_keys=[str(k) for k in match.matched_keys],
            banned_by=str(match.banned_by) if match.banned_by else None
        )

        return match.allowed

    def get_rule(self, relation: str, scope: Any, action: ActionPath) -> Optional[RuleEffect]:
        """Get the rule stored at an exact key."""
        key = RuleKey(tuple(action), (relation or WILDCARD).lower(), name_of(scope))
        return self.rules.get(key)

    def list_rules(self) -> List[TokenRule]:
        """All rules as serializable models."""
        return [TokenRule.from_key(key, effect) for key, effect in self.rules.items()]

    def get_token_stats(self) -> Dict[str, Any]:
        """Get token statistics."""
        return {
            "total_rules": len(self.rules),
            "allow_rules": len([e for e in self.rules.values() if e == RuleEffect.ALLOW]),
            "ban_rules": len([e for e in self.rules.values() if e == RuleEffect.DENY]),
            "frozen": self._frozen,
        }

    def clear_all_rules(self):
        """Clear all rules from the token."""
        if self._frozen:
            raise ConfigurationError("token is frozen")
        self.rules.clear()
        self.logger.info("All token rules cleared")


def new_token(log_evaluations: bool = True) -> LeastPrivilegeToken:
    """Create an empty token; it denies everything until rules are added."""
    return LeastPrivilegeToken(log_evaluations)
