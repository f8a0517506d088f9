"""
Game service: one entry point per room-level operation.
"""

import random
from typing import List, Optional, Tuple

from .config.game_config import GameConfig, default_config
from .core import Judge, Player, RoleType, Ballot, ValidationError, WinEvaluation
from .lobby import RoomManager
from .phases import (
    SetupPhaseHandler, NightPhaseHandler, VotingHandler,
    InvestigationResult, PaddingResult, TallyResult,
)
from .store import GameStore, InMemoryGameStore
from .web.event_emitter import EventEmitter


class GameService:
    """Main game controller, shared by the web server and the CLI."""

    def __init__(self, store: Optional[GameStore] = None, config: GameConfig = default_config,
                 rng: Optional[random.Random] = None, event_emitter: Optional[EventEmitter] = None):
        self.config = config
        self.store = store or InMemoryGameStore(config.ai_player_id_base)
        self.event_emitter = event_emitter

        if rng is None:
            rng = random.Random(config.random_seed)
        self.random = rng

        self.judge = Judge(self.store, config, event_emitter=event_emitter)
        self.rooms = RoomManager(self.store, self.judge, config)
        self.setup_handler = SetupPhaseHandler(self.store, self.judge, rng, event_emitter=event_emitter)
        self.night_handler = NightPhaseHandler(self.store, self.judge, rng, event_emitter=event_emitter)
        self.voting_handler = VotingHandler(self.store, self.judge, rng, event_emitter=event_emitter)

    # Round state machine

    def assign_roles(self, room_id: int) -> List[Tuple[int, RoleType]]:
        return self.setup_handler.assign_roles(room_id)

    def protect(self, room_id: int, actor_id: Optional[int] = None, target_id: Optional[int] = None) -> str:
        return self.night_handler.protect(room_id, actor_id, target_id)

    def eliminate(self, room_id: int, actor_id: Optional[int] = None, target_id: Optional[int] = None) -> str:
        return self.night_handler.eliminate(room_id, actor_id, target_id)

    def investigate(self, room_id: int, actor_id: int, target_id: int) -> InvestigationResult:
        return self.night_handler.investigate(room_id, actor_id, target_id)

    def cast_vote(self, room_id: int, round_number: int, voter_id: int, candidate_id: int) -> Ballot:
        return self.voting_handler.cast_vote(room_id, round_number, voter_id, candidate_id)

    def pad_and_auto_vote(self, room_id: int, round_number: int, host_id: int) -> PaddingResult:
        return self.voting_handler.pad_and_auto_vote(room_id, round_number, host_id)

    def tally_votes(self, room_id: int, round_number: int) -> TallyResult:
        return self.voting_handler.tally_votes(room_id, round_number)

    def evaluate_win(self, room_id: int, caller_id: Optional[int] = None) -> WinEvaluation:
        return self.judge.evaluate_win(room_id, caller_id)

    # Read-only queries

    def round_number(self, room_id: int) -> int:
        return self.judge.require_round_state(room_id).round_number

    def has_votes(self, room_id: int) -> bool:
        return self.voting_handler.has_votes(room_id)

    def users(self, room_id: int) -> List[Player]:
        return self.store.roster.players(room_id)

    def user_info(self, room_id: int, player_id: int) -> Player:
        player = self.store.roster.player(room_id, player_id)
        if player is None:
            raise ValidationError(f"Player {player_id} is not in room {room_id}.", room_id=room_id)
        return player

    def winners(self, room_id: int) -> List[Player]:
        return self.judge.winners(room_id)
