"""
Relation registry: resolves relation labels to privileges per context.
"""

import threading
from typing import Any, Dict, List, Optional

from shared.config import BaseConfig
from shared.logging import get_logger
from .contracts import GLOBAL_CONTEXT, name_of
from .errors import ConfigurationError, UnknownContextError, UnknownRelationError
from .levels import DEFAULT_RELATIONS


class RelationRegistry:
    """Two-level mapping context-name -> relation -> privilege.

    The default vocabulary is consulted as a fallback in every open context.
    A named context opens on its first registration; the global context is
    always open. Register during a single-threaded warmup, then read.
    """

    def __init__(self, freeze_on_first_resolve: bool = False):
        self.logger = get_logger("privileges.registry")
        self.relations: Dict[str, Dict[str, int]] = {}
        self.defaults: Dict[str, int] = dict(DEFAULT_RELATIONS)
        self.freeze_on_first_resolve = freeze_on_first_resolve
        self._frozen = False
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: BaseConfig) -> "RelationRegistry":
        """Build a registry honouring the configured freeze policy."""
        return cls(freeze_on_first_resolve=config.freeze_registry_on_first_resolve)

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """Reject any further registration."""
        with self._lock:
            if not self._frozen:
                self._frozen = True
                self.logger.info("Relation registry frozen", contexts=len(self.relations))

    def register_relation(self, context: Any, relation: str, privilege: int):
        """Register ``relation`` with ``privilege`` in ``context``."""
        if not isinstance(relation, str) or not relation:
            raise ConfigurationError("relation must be a non-empty string", {"relation": relation})
        if isinstance(privilege, bool) or not isinstance(privilege, int):
            raise ConfigurationError("privilege must be an integer", {"privilege": repr(privilege)})

        context_name = name_of(context)
        relation = relation.lower()

        with self._lock:
            if self._frozen:
                raise ConfigurationError(
                    "relation registry is frozen",
                    {"context": context_name, "relation": relation}
                )
            self.relations.setdefault(context_name, {})[relation] = privilege

        self.logger.debug(
            "Relation registered",
            context=context_name,
            relation=relation,
            privilege=int(privilege)
        )

    def resolve_relation(self, context: Any, relation: str) -> int:
        """Resolve ``relation`` in ``context`` to a privilege."""
        if self.freeze_on_first_resolve and not self._frozen:
            self.freeze()

        if not isinstance(relation, str):
            raise ConfigurationError("relation must be a string", {"relation": repr(relation)})

        context_name = name_of(context)
        relation = relation.lower()

        context_map = self.relations.get(context_name)
        if context_map is None and context_name != GLOBAL_CONTEXT:
            raise UnknownContextError(context_name)

        if context_map and relation in context_map:
            return context_map[relation]

        if relation in self.defaults:
            return self.defaults[relation]

        raise UnknownRelationError(relation, context_name)

    def is_open(self, context: Any) -> bool:
        """Whether relations can be resolved in ``context``."""
        context_name = name_of(context)
        return context_name == GLOBAL_CONTEXT or context_name in self.relations

    def contexts(self) -> List[str]:
        """Names of all explicitly registered contexts."""
        return sorted(self.relations)

    def relations_for(self, context: Any) -> Dict[str, int]:
        """Registered relations of ``context``, without the defaults."""
        return dict(self.relations.get(name_of(context), {}))

    def get_registry_stats(self) -> Dict[str, Any]:
        """Get registry statistics."""
        return {
            "contexts": len(self.relations),
            "registered_relations": sum(len(m) for m in self.relations.values()),
            "default_relations": len(self.defaults),
            "frozen": self._frozen,
        }


def new_registry(config: Optional[BaseConfig] = None) -> RelationRegistry:
    """Create a registry, optionally configured from settings."""
    if config is None:
        return RelationRegistry()
    return RelationRegistry.from_config(config)
