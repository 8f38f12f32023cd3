"""
Engine bootstrap: wires settings, logging and the relation registry.
"""

from dataclasses import dataclass
from typing import Optional

from shared.config import BaseConfig, get_config
from shared.logging import configure_logging, get_logger
from .checker import Checker
from .contracts import Subject
from .registry import RelationRegistry
from .resources import ResourceStore
from .rules.token import LeastPrivilegeToken


@dataclass
class Engine:
    """Process-level collaborators shared by every decision."""
    config: BaseConfig
    registry: RelationRegistry
    resources: ResourceStore

    def check(self, subject: Optional[Subject]) -> Checker:
        """Start a decision for ``subject`` against this engine's registry."""
        return Checker.configure(subject, self.registry, self.config.log_decisions)

    def token(self) -> LeastPrivilegeToken:
        """Create an empty token that follows this engine's logging settings."""
        return LeastPrivilegeToken(self.config.log_decisions)


def setup(config: Optional[BaseConfig] = None) -> Engine:
    """Configure logging and build the registry from settings."""
    if config is None:
        config = get_config()

    configure_logging(config.service_name, config.log_level)

    engine = Engine(
        config=config,
        registry=RelationRegistry.from_config(config),
        resources=ResourceStore(),
    )

    get_logger(f"{config.service_name}.bootstrap").info(
        "Privilege engine configured",
        env=config.env,
        freeze_registry_on_first_resolve=config.freeze_registry_on_first_resolve
    )
    return engine
