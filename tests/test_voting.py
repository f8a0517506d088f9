"""
Tests for day voting: ballots, padding and tally.
"""

import pytest

from saboteur.core import (
    GamePhase, GameResult, LifeState, RoleType, INVALID_BALLOT_ID,
    AlreadyActedError, IncompleteVotingError, NoActorAliveError,
    PermissionDeniedError, TargetNotEligibleError, ValidationError,
)
from saboteur.core.player import LifeStatus
from saboteur.phases import VoteOutcome, rank_ballots

from conftest import vote_all


@pytest.mark.parametrize("counts, expected", [
    ({1: 3, 2: 3}, (VoteOutcome.TIE, None)),
    ({1: 4, 2: 2, INVALID_BALLOT_ID: 1}, (VoteOutcome.ELIMINATED, 1)),
    ({INVALID_BALLOT_ID: 5, 1: 2}, (VoteOutcome.INVALID_MAJORITY, None)),
    ({INVALID_BALLOT_ID: 2, 1: 2}, (VoteOutcome.INVALID_MAJORITY, None)),
    ({INVALID_BALLOT_ID: 6}, (VoteOutcome.INVALID_MAJORITY, None)),
    ({3: 5, 1: 1}, (VoteOutcome.ELIMINATED, 3)),
])
def test_rank_ballots(counts, expected):
    assert rank_ballots(counts) == expected


def test_cast_vote_records_ballot(service, store, room_id):
    ballot = service.cast_vote(room_id, 1, 5, 1)

    assert ballot.voter_id == 5
    assert ballot.candidate_id == 1
    assert store.ballots.ballots(room_id, 1) == [ballot]
    assert service.has_votes(room_id)


def test_duplicate_vote_rejected(service, room_id):
    service.cast_vote(room_id, 1, 5, 1)
    with pytest.raises(AlreadyActedError):
        service.cast_vote(room_id, 1, 5, 2)


def test_vote_validation(service, store, room_id):
    store.roster.mark_removed(room_id, 6, LifeStatus.eliminated_in(1))

    with pytest.raises(ValidationError):
        service.cast_vote(room_id, 1, 42, 1)
    with pytest.raises(NoActorAliveError):
        service.cast_vote(room_id, 1, 6, 1)
    with pytest.raises(TargetNotEligibleError):
        service.cast_vote(room_id, 1, 5, 6)
    with pytest.raises(ValidationError):
        service.cast_vote(room_id, 2, 5, 1)  # Not the current round

    assert not service.has_votes(room_id)


def test_padding_fills_missing_ballots(service, store, seat):
    """Two automated players and one silent human among six living players."""
    room_id = seat(automated=[5, 6])
    vote_all(service, room_id, 1, {1: 3, 2: 3, 3: 1})

    result = service.pad_and_auto_vote(room_id, 1, 1)

    assert result.auto_votes == 2
    assert result.invalid_ballots == 1
    ballots = store.ballots.ballots(room_id, 1)
    assert len(ballots) == 6
    assert sum(1 for b in ballots if b.is_invalid) == 1
    assert {b.voter_id for b in ballots if not b.is_invalid} == {1, 2, 3, 5, 6}
    assert store.round_states.get(room_id).phase == GamePhase.DAY


def test_padding_is_idempotent(service, store, room_id):
    first = service.pad_and_auto_vote(room_id, 1, 1)
    second = service.pad_and_auto_vote(room_id, 1, 1)

    assert first.invalid_ballots == 6
    assert second.invalid_ballots == 0
    assert second.auto_votes == 0
    assert len(store.ballots.ballots(room_id, 1)) == 6


def test_voting_closed_after_padding(service, room_id):
    service.pad_and_auto_vote(room_id, 1, 1)
    with pytest.raises(AlreadyActedError):
        service.cast_vote(room_id, 1, 4, 1)


def test_padding_is_host_only(service, room_id):
    with pytest.raises(PermissionDeniedError):
        service.pad_and_auto_vote(room_id, 1, 2)


def test_tally_requires_every_ballot(service, room_id):
    vote_all(service, room_id, 1, {1: 3, 2: 3, 3: 1})

    with pytest.raises(IncompleteVotingError) as exc_info:
        service.tally_votes(room_id, 1)

    assert exc_info.value.expected == 6
    assert exc_info.value.actual == 3


def test_tally_removes_leading_candidate(service, store, room_id):
    vote_all(service, room_id, 1, {1: 5, 2: 5, 3: 1, 4: 1, 5: 1, 6: 1})

    result = service.tally_votes(room_id, 1)

    assert result.outcome == VoteOutcome.ELIMINATED
    assert result.eliminated_id == 1
    assert result.eliminated_role == RoleType.SABOTEUR
    assert "saboteur" in result.message
    assert result.counts == {5: 2, 1: 4}
    assert result.result_code == GameResult.ONGOING.value

    removed = store.roster.player(room_id, 1)
    assert removed.life.state == LifeState.REMOVED_BY_VOTE
    assert removed.life.round_number == 1
    # Ballots are cleared once counted
    assert not service.has_votes(room_id)
    assert store.round_states.get(room_id).message == result.message


def test_tally_tie_removes_nobody(service, store, room_id):
    vote_all(service, room_id, 1, {1: 5, 2: 5, 3: 5, 4: 1, 5: 1, 6: 1})

    result = service.tally_votes(room_id, 1)

    assert result.outcome == VoteOutcome.TIE
    assert result.eliminated_id is None
    assert len(store.roster.living_players(room_id)) == 6


def test_tally_invalid_majority_removes_nobody(service, store, room_id):
    service.cast_vote(room_id, 1, 1, 5)
    service.pad_and_auto_vote(room_id, 1, 1)

    result = service.tally_votes(room_id, 1)

    assert result.outcome == VoteOutcome.INVALID_MAJORITY
    assert len(store.roster.living_players(room_id)) == 6


def test_tally_runs_once_per_round(service, room_id):
    service.pad_and_auto_vote(room_id, 1, 1)
    service.tally_votes(room_id, 1)

    with pytest.raises(AlreadyActedError):
        service.tally_votes(room_id, 1)


def test_tally_reports_lean_without_ending_game(service, store, seat):
    """Result code leans toward the saboteurs but the game is not over."""
    room_id = seat([RoleType.SABOTEUR, RoleType.PROTECTOR, RoleType.INVESTIGATOR, RoleType.WORKER])
    service.eliminate(room_id, 1, 4)
    vote_all(service, room_id, 1, {1: 3, 2: 3, 3: 2})

    result = service.tally_votes(room_id, 1)

    assert result.eliminated_id == 3
    assert result.result_code == GameResult.FACTION_B_WIN.value
    state = store.round_states.get(room_id)
    assert state.phase != GamePhase.GAME_OVER
    assert state.result == GameResult.ONGOING
