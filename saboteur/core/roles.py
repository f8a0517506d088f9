"""
Role definitions and the role-count table for the Saboteur game.
"""

from enum import Enum
from typing import Dict, List, Tuple

from .exceptions import ValidationError


class Team(Enum):
    """Player team affiliation."""
    EMPLOYEES = "employees"  # Faction A
    SABOTEURS = "saboteurs"  # Faction B


class RoleType(Enum):
    """Player role types."""
    WORKER = "worker"
    PROTECTOR = "protector"
    INVESTIGATOR = "investigator"
    SABOTEUR = "saboteur"

    def __str__(self) -> str:
        return self.value

    @property
    def team(self) -> Team:
        """Team this role plays for."""
        return Team.SABOTEURS if self is RoleType.SABOTEUR else Team.EMPLOYEES

    @property
    def is_saboteur(self) -> bool:
        return self is RoleType.SABOTEUR

    @property
    def has_night_action(self) -> bool:
        """Check if role has a night phase action."""
        return self is not RoleType.WORKER


# Role counts per roster size, in order Worker/Protector/Investigator/Saboteur
ROLE_TABLE: Dict[int, Tuple[int, int, int, int]] = {
    6: (2, 1, 1, 2),
    7: (3, 1, 1, 2),
    8: (4, 1, 1, 2),
    9: (4, 1, 1, 3),
    10: (5, 1, 1, 3),
}

# Small rosters are only used for testing and local development
FALLBACK_ROLE_TABLE: Dict[int, Tuple[int, int, int, int]] = {
    4: (1, 1, 1, 1),
    5: (2, 1, 1, 1),
}

ROLE_ORDER = (RoleType.WORKER, RoleType.PROTECTOR, RoleType.INVESTIGATOR, RoleType.SABOTEUR)

MIN_PLAYERS = min(FALLBACK_ROLE_TABLE)
MAX_PLAYERS = max(ROLE_TABLE)


def get_role_counts(player_count: int) -> Dict[RoleType, int]:
    """
    Get the number of each role for a roster of the given size.

    Raises:
        ValidationError: If no table entry exists for the roster size
    """
    counts = ROLE_TABLE.get(player_count) or FALLBACK_ROLE_TABLE.get(player_count)
    if counts is None:
        raise ValidationError(
            f"Unsupported roster size: {player_count} "
            f"(supported: {MIN_PLAYERS}-{MAX_PLAYERS})"
        )
    return dict(zip(ROLE_ORDER, counts))


def get_role_distribution(player_count: int) -> List[RoleType]:
    """
    Get the unshuffled role multiset for a roster of the given size.
    e.g. 6 players: 2 workers, 1 protector, 1 investigator, 2 saboteurs
    """
    distribution: List[RoleType] = []
    for role_type, count in get_role_counts(player_count).items():
        distribution.extend([role_type] * count)
    return distribution
