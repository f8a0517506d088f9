"""
Exceptions for game rule violations.

Every error carries a stable ``kind`` tag and a human-readable message so
that the transport layer can hand it back to the caller unchanged.
"""

from typing import Optional


class GameError(Exception):
    """Base class for all local game failures."""

    kind = "GameError"
    status_code = 400
    default_message = "The request could not be processed."

    def __init__(self, message: str = "", room_id: Optional[int] = None):
        self.message = message or self.default_message
        self.room_id = room_id
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(GameError):
    """Missing or malformed room, player or round."""
    kind = "ValidationError"
    default_message = "Invalid request."


class StateConflictError(GameError):
    """A round-scoped action was already resolved."""
    kind = "StateConflictError"
    status_code = 409
    default_message = "This action has already been resolved."


class AlreadyAssignedError(StateConflictError):
    kind = "AlreadyAssignedError"
    default_message = "Roles have already been assigned in this room."


class AlreadyActedError(StateConflictError):
    kind = "AlreadyActedError"
    default_message = "This action was already taken this round."


class EligibilityError(GameError):
    """Actor or target fails a role or life-status precondition."""
    kind = "EligibilityError"
    status_code = 422
    default_message = "Player is not eligible."


class NoActorAliveError(EligibilityError):
    kind = "NoActorAliveError"
    default_message = "No living player can take this action."


class TargetNotEligibleError(EligibilityError):
    kind = "TargetNotEligibleError"
    default_message = "The selected player cannot be targeted."


class PermissionDeniedError(GameError):
    """A non-host invoked a host-only operation."""
    kind = "PermissionError"
    status_code = 403
    default_message = "Only the host can make this request."


class IncompleteVotingError(GameError):
    """Tally attempted before every living player has a ballot."""
    kind = "IncompleteVotingError"
    status_code = 409

    def __init__(self, expected: int, actual: int, room_id: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Voting is incomplete: {actual} ballots for {expected} living players.",
            room_id=room_id,
        )


class GameStatusMissingError(GameError):
    kind = "GameStatusMissingError"
    status_code = 404
    default_message = "No game status is stored for this room."


class RosterUnavailableError(GameError):
    kind = "RosterUnavailableError"
    status_code = 404
    default_message = "The room roster could not be read."
