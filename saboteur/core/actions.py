"""
Round-scoped records: night actions, tallies and ballots.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Voter and candidate id of a padded ballot
INVALID_BALLOT_ID = 0


class ActionKind(Enum):
    """Round-scoped work that may resolve at most once per round.

    The values are persisted as part of the ledger key and must not change.
    """
    PROTECT = "protect"
    ELIMINATE = "eliminate"
    TALLY = "tally"
    ADVANCE = "advance"


class ActionOutcome(Enum):
    PROTECTED = "protected"
    ELIMINATED = "eliminated"
    BLOCKED = "blocked"
    TALLIED = "tallied"
    ADVANCED = "advanced"


ActionKey = Tuple[int, int, str]


@dataclass(frozen=True)
class ActionRecord:
    """Outcome of one round-scoped action."""
    room_id: int
    round_number: int
    kind: ActionKind
    outcome: ActionOutcome
    actor_id: Optional[int] = None
    target_id: Optional[int] = None

    @property
    def key(self) -> ActionKey:
        return (self.room_id, self.round_number, self.kind.value)


@dataclass(frozen=True)
class Ballot:
    """A day vote. voter_id == candidate_id == 0 marks an invalid ballot."""
    voter_id: int
    candidate_id: int
    room_id: int
    round_number: int

    @classmethod
    def invalid(cls, room_id: int, round_number: int) -> "Ballot":
        return cls(INVALID_BALLOT_ID, INVALID_BALLOT_ID, room_id, round_number)

    @property
    def is_invalid(self) -> bool:
        return self.candidate_id == INVALID_BALLOT_ID

    def to_dict(self) -> dict:
        return {
            "voter": self.voter_id,
            "candidacy": self.candidate_id,
            "roomId": self.room_id,
            "roundNo": self.round_number,
        }
