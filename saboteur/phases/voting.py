"""
Day voting: ballot collection, automated votes, invalid-ballot padding and tally.
"""

import random
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from ..core import (
    Judge, GamePhase, RoleType, LifeStatus, ActionKind, ActionOutcome, ActionRecord, Ballot,
    INVALID_BALLOT_ID, AlreadyActedError, IncompleteVotingError, NoActorAliveError,
    TargetNotEligibleError, ValidationError,
)
from ..agents import RandomAgent
from ..store.base import GameStore

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class VoteOutcome(Enum):
    ELIMINATED = "eliminated"
    TIE = "tie"
    INVALID_MAJORITY = "invalid_majority"


def rank_ballots(counts: Mapping[int, int]) -> Tuple[VoteOutcome, Optional[int]]:
    """
    Decide the day vote from candidate -> ballot counts.

    Invalid ballots never win a seat in the ranking, but when they match or
    outnumber the leading candidate nobody is removed.

    Returns:
        (outcome, candidate id to remove or None)
    """
    invalid = counts.get(INVALID_BALLOT_ID, 0)
    ranked = sorted(
        ((candidate, count) for candidate, count in counts.items()
         if candidate != INVALID_BALLOT_ID and count > 0),
        key=lambda item: item[1],
        reverse=True,
    )

    if not ranked or invalid >= ranked[0][1]:
        return VoteOutcome.INVALID_MAJORITY, None
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return VoteOutcome.TIE, None
    return VoteOutcome.ELIMINATED, ranked[0][0]


@dataclass
class PaddingResult:
    auto_votes: int
    invalid_ballots: int
    message: str

    def to_dict(self) -> dict:
        return {"autoVotes": self.auto_votes, "invalidBallots": self.invalid_ballots, "msg": self.message}


@dataclass
class TallyResult:
    """Outcome of a day vote. result_code leans toward a winner but ends nothing."""
    message: str
    result_code: int
    outcome: VoteOutcome
    eliminated_id: Optional[int] = None
    eliminated_role: Optional[RoleType] = None
    counts: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "msg": self.message,
            "result": self.result_code,
            "outcome": self.outcome.value,
            "eliminatedId": self.eliminated_id,
            "eliminatedRole": self.eliminated_role.value if self.eliminated_role else None,
            "counts": {str(candidate): count for candidate, count in self.counts.items()},
        }


class VotingHandler:
    """Handles the day vote for a room."""

    def __init__(self, store: GameStore, judge: Judge, rng: Optional[random.Random] = None,
                 event_emitter: Optional['EventEmitter'] = None):
        self.store = store
        self.judge = judge
        self.random = rng or random.Random()
        self.event_emitter = event_emitter

    def cast_vote(self, room_id: int, round_number: int, voter_id: int, candidate_id: int) -> Ballot:
        """Record one player's ballot for the current round."""
        with self.store.transaction(room_id):
            self.judge.require_current_round(room_id, round_number)

            voter = self.store.roster.player(room_id, voter_id)
            if voter is None:
                raise ValidationError(f"Player {voter_id} is not in room {room_id}.", room_id=room_id)
            if not voter.is_alive:
                raise NoActorAliveError(f"Player {voter_id} can no longer vote.", room_id=room_id)
            if self.store.ballots.is_sealed(room_id, round_number):
                raise AlreadyActedError(
                    f"Voting for round {round_number} is already closed.", room_id=room_id
                )

            ballots = self.store.ballots.ballots(room_id, round_number)
            if any(b.voter_id == voter_id for b in ballots):
                raise AlreadyActedError(
                    f"Player {voter_id} already voted in round {round_number}.", room_id=room_id
                )

            candidate = self.store.roster.player(room_id, candidate_id)
            if candidate is None or not candidate.is_alive:
                raise TargetNotEligibleError(
                    f"Player {candidate_id} cannot receive votes.", room_id=room_id
                )

            ballot = Ballot(voter_id, candidate_id, room_id, round_number)
            self.store.ballots.cast(ballot)

        if self.event_emitter:
            self.event_emitter.emit_vote(room_id, round_number, voter_id, candidate_id)
        return ballot

    def pad_and_auto_vote(self, room_id: int, round_number: int, host_id: int) -> PaddingResult:
        """
        Host-only: let automated players vote, then pad every missing ballot
        with an invalid one so that ballots == living players.

        Seals the round; running it again changes nothing.
        """
        with self.store.transaction(room_id):
            state = self.judge.require_current_round(room_id, round_number)
            self.judge.require_host(room_id, host_id)

            if self.store.ballots.is_sealed(room_id, round_number):
                return PaddingResult(0, 0, "Ballots for this round are already complete.")

            living = self.store.roster.living_players(room_id)
            voters = {b.voter_id for b in self.store.ballots.ballots(room_id, round_number)}
            agent = RandomAgent(self.random)

            auto_votes = 0
            for player in living:
                if player.is_automated and player.player_id not in voters:
                    candidate = agent.choose_target(living)
                    self.store.ballots.cast(
                        Ballot(player.player_id, candidate.player_id, room_id, round_number)
                    )
                    voters.add(player.player_id)
                    auto_votes += 1

            invalid_ballots = 0
            for player in living:
                if player.player_id not in voters:
                    self.store.ballots.cast(Ballot.invalid(room_id, round_number))
                    invalid_ballots += 1

            self.store.ballots.seal(room_id, round_number)
            state.phase = GamePhase.DAY
            self.store.round_states.save(state)

        message = (f"{invalid_ballots} invalid ballot(s) recorded.\n"
                   f"{auto_votes} automated player(s) voted.")
        print(f"[SYSTEM] Room {room_id} round {round_number}: {message}")
        if self.event_emitter:
            self.event_emitter.emit_votes_padded(room_id, round_number, auto_votes, invalid_ballots)
        return PaddingResult(auto_votes, invalid_ballots, message)

    def tally_votes(self, room_id: int, round_number: int) -> TallyResult:
        """
        Count the round's ballots and apply the decision.

        Raises:
            IncompleteVotingError: If ballots != living players
            AlreadyActedError: If the round was already tallied
        """
        with self.store.transaction(room_id):
            state = self.judge.require_current_round(room_id, round_number)

            if self.store.ledger.get(room_id, round_number, ActionKind.TALLY) is not None:
                raise AlreadyActedError(
                    f"Round {round_number} has already been tallied.", room_id=room_id
                )

            ballots = self.store.ballots.ballots(room_id, round_number)
            living = self.store.roster.living_players(room_id)
            if len(ballots) != len(living):
                raise IncompleteVotingError(len(living), len(ballots), room_id=room_id)

            counts = Counter(b.candidate_id for b in ballots)
            outcome, candidate_id = rank_ballots(counts)

            removed = None
            if outcome == VoteOutcome.ELIMINATED:
                removed = self.store.roster.player(room_id, candidate_id)
                if removed is None or not removed.is_alive:
                    raise TargetNotEligibleError(
                        f"Player {candidate_id} cannot be removed by vote.", room_id=room_id
                    )

            claimed = self.store.ledger.claim(ActionRecord(
                room_id=room_id,
                round_number=round_number,
                kind=ActionKind.TALLY,
                outcome=ActionOutcome.TALLIED,
                target_id=candidate_id,
            ))
            if not claimed:
                raise AlreadyActedError(
                    f"Round {round_number} has already been tallied.", room_id=room_id
                )

            if removed is not None:
                self.store.roster.mark_removed(
                    room_id, removed.player_id, LifeStatus.removed_by_vote(round_number)
                )
            self.store.ballots.purge_round(room_id, round_number)

            if outcome == VoteOutcome.INVALID_MAJORITY:
                message = "Invalid ballots carried the vote. Nobody was dismissed."
            elif outcome == VoteOutcome.TIE:
                message = "The vote is tied. Nobody was dismissed."
            elif removed.is_saboteur:
                message = f"The staff vote caught the industrial saboteur [ {removed.nickname} ]."
            else:
                message = f"The staff vote got the loyal [ {removed.nickname} ] dismissed."

            result_code = self.judge.current_lean(room_id).value
            state.message = message
            self.store.round_states.save(state)

        print(f"[VOTE COUNT] Room {room_id} round {round_number}: {dict(counts)}")
        if self.event_emitter:
            self.event_emitter.emit_vote_results(
                room_id, round_number, dict(counts), outcome.value,
                removed.player_id if removed else None,
            )
            if removed is not None:
                self.event_emitter.emit_elimination(room_id, removed.player_id, "vote", round_number)
        self.judge.announce(message, room_id)

        return TallyResult(
            message=message,
            result_code=result_code,
            outcome=outcome,
            eliminated_id=removed.player_id if removed else None,
            eliminated_role=removed.role if removed else None,
            counts=dict(counts),
        )

    def has_votes(self, room_id: int) -> bool:
        """Whether any ballot is stored for the room."""
        return self.store.ballots.has_any(room_id)
