"""
Phase handlers for setup, night and voting.
"""

from .setup_phase import SetupPhaseHandler
from .night_phase import NightPhaseHandler, InvestigationResult
from .voting import VotingHandler, VoteOutcome, PaddingResult, TallyResult, rank_ballots

__all__ = [
    'SetupPhaseHandler',
    'NightPhaseHandler',
    'InvestigationResult',
    'VotingHandler',
    'VoteOutcome',
    'PaddingResult',
    'TallyResult',
    'rank_ballots',
]
