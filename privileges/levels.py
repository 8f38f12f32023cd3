"""
Ordinal privilege and access-level scales.

Privileges and access levels share one numeric space so a decision is a
plain integer comparison. ``AccessLevel.NOT_SUPPORT`` sits above every
recommended privilege, so an undefined action denies without a special
branch.
"""

from enum import IntEnum
from typing import Dict


class Privilege(IntEnum):
    """Recommended privileges, weakest first."""
    BAD_RELATION = 0
    ANYONE = 1
    LOW_FAMILIAR = 2
    MEDIUM_FAMILIAR = 3
    HIGH_FAMILIAR = 4
    TOP_FAMILIAR = 5
    LOCAL_MODERATOR = 6
    MODERATOR = 7
    LOCAL_ADMIN = 8
    ADMIN = 9
    SELF = 10


class AccessLevel(IntEnum):
    """Recommended access levels, least restrictive first."""
    PUBLIC = 1
    LOW_PRIVATE = 2
    MEDIUM_PRIVATE = 3
    HIGH_PRIVATE = 4
    TOP_PRIVATE = 5
    LOW_CONFIDENTIAL = 6
    HIGH_CONFIDENTIAL = 7
    LOW_SECRET = 8
    HIGH_SECRET = 9
    TOP_SECRET = 10
    NOT_SUPPORT = 11


# Relations available in every context, keyed by normalized label.
DEFAULT_RELATIONS: Dict[str, Privilege] = {
    privilege.name.replace("_", "").lower(): privilege
    for privilege in Privilege
}
