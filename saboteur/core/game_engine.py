"""
Round state shared by the setup, night, voting and judging handlers.
"""

from enum import Enum
from typing import Dict, Any
from dataclasses import dataclass


class GamePhase(Enum):
    """Current game phase."""
    NIGHT = "night"
    DAY = "day"
    GAME_OVER = "game_over"


class GameResult(Enum):
    """Game outcome. The integer value is the result code handed to clients."""
    ONGOING = 0
    FACTION_A_WIN = 1  # Employees (every non-saboteur role)
    FACTION_B_WIN = 2  # Saboteurs

    @property
    def is_terminal(self) -> bool:
        return self is not GameResult.ONGOING


@dataclass
class RoundState:
    """Per-room record of the round counter, phase and last outcome."""
    room_id: int
    round_number: int = 1
    phase: GamePhase = GamePhase.NIGHT
    message: str = ""
    result: GameResult = GameResult.ONGOING

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "roomId": self.room_id,
            "roundNo": self.round_number,
            "phase": self.phase.value,
            "msg": self.message,
            "result": self.result.value,
        }
