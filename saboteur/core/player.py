"""
Player class representing a game participant.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum

from .roles import RoleType, Team


class LifeState(Enum):
    """Player life state in the game."""
    ALIVE = "alive"
    ELIMINATED = "eliminated"  # Removed by a saboteur at night
    REMOVED_BY_VOTE = "removed_by_vote"


@dataclass(frozen=True)
class LifeStatus:
    """Life state tagged with the round it changed in."""
    state: LifeState = LifeState.ALIVE
    round_number: Optional[int] = None

    @classmethod
    def alive(cls) -> "LifeStatus":
        return cls()

    @classmethod
    def eliminated_in(cls, round_number: int) -> "LifeStatus":
        return cls(LifeState.ELIMINATED, round_number)

    @classmethod
    def removed_by_vote(cls, round_number: int) -> "LifeStatus":
        return cls(LifeState.REMOVED_BY_VOTE, round_number)

    @property
    def is_alive(self) -> bool:
        return self.state == LifeState.ALIVE

    def eliminated_this_round(self, round_number: int) -> bool:
        """True if a saboteur removed the player during the given round."""
        return self.state == LifeState.ELIMINATED and self.round_number == round_number

    def to_dict(self) -> Dict[str, Any]:
        return {"state": self.state.value, "round": self.round_number}


@dataclass
class Player:
    """Represents a player in a room."""
    player_id: int
    nickname: str
    room_id: int
    is_automated: bool = False
    is_host: bool = False
    is_ready: bool = False
    seat: int = 0  # Join order within the store

    role: Optional[RoleType] = None
    life: LifeStatus = field(default_factory=LifeStatus.alive)
    protected_round: Optional[int] = None  # Round the player is shielded in

    def __str__(self) -> str:
        role = self.role.value if self.role else "unassigned"
        return f"{self.nickname} ({role})"

    @property
    def is_alive(self) -> bool:
        """Check if player is alive."""
        return self.life.is_alive

    @property
    def is_saboteur(self) -> bool:
        return self.role is RoleType.SABOTEUR

    @property
    def team(self) -> Optional[Team]:
        return self.role.team if self.role else None

    def is_protected(self, round_number: int) -> bool:
        """Protection only holds for the round it was granted in."""
        return self.protected_round is not None and self.protected_round == round_number

    def to_dict(self, reveal_role: bool = True) -> Dict[str, Any]:
        """Serialize the player; hidden roles are reported as None."""
        return {
            "playerId": self.player_id,
            "nickname": self.nickname,
            "roomId": self.room_id,
            "isAutomated": self.is_automated,
            "isHost": self.is_host,
            "isReady": self.is_ready,
            "role": self.role.value if (self.role and reveal_role) else None,
            "life": self.life.to_dict(),
            "isAlive": self.is_alive,
        }
