"""
Core game components: round state, players, roles, errors and the judge.
"""

from .game_engine import RoundState, GamePhase, GameResult
from .player import Player, LifeStatus, LifeState
from .roles import RoleType, Team, get_role_counts, get_role_distribution
from .actions import ActionKind, ActionOutcome, ActionRecord, Ballot, INVALID_BALLOT_ID
from .room import Room
from .judge import Judge, WinEvaluation, decide_result
from .exceptions import (
    GameError,
    ValidationError,
    StateConflictError,
    AlreadyAssignedError,
    AlreadyActedError,
    EligibilityError,
    NoActorAliveError,
    TargetNotEligibleError,
    PermissionDeniedError,
    IncompleteVotingError,
    GameStatusMissingError,
    RosterUnavailableError,
)

__all__ = [
    'RoundState',
    'GamePhase',
    'GameResult',
    'Player',
    'LifeStatus',
    'LifeState',
    'RoleType',
    'Team',
    'get_role_counts',
    'get_role_distribution',
    'ActionKind',
    'ActionOutcome',
    'ActionRecord',
    'Ballot',
    'INVALID_BALLOT_ID',
    'Room',
    'Judge',
    'WinEvaluation',
    'decide_result',
    'GameError',
    'ValidationError',
    'StateConflictError',
    'AlreadyAssignedError',
    'AlreadyActedError',
    'EligibilityError',
    'NoActorAliveError',
    'TargetNotEligibleError',
    'PermissionDeniedError',
    'IncompleteVotingError',
    'GameStatusMissingError',
    'RosterUnavailableError',
]
