"""
Judge/Moderator: announcements, shared precondition checks and the win
condition evaluator.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, TYPE_CHECKING

from .actions import ActionKind, ActionOutcome, ActionRecord
from .exceptions import GameStatusMissingError, PermissionDeniedError, ValidationError
from .game_engine import GamePhase, GameResult, RoundState
from .player import Player
from .roles import Team
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..store.base import GameStore
    from ..web.event_emitter import EventEmitter


RESULT_MESSAGES = {
    GameResult.FACTION_A_WIN: "Every saboteur has been caught. The employees win!",
    GameResult.FACTION_B_WIN: "The saboteurs now match the loyal staff. The saboteurs win!",
}


@dataclass
class WinEvaluation:
    """Result of a win condition check."""
    message: str
    result: GameResult
    next_round: Optional[int] = None
    saboteurs_alive: int = 0
    others_alive: int = 0

    def to_dict(self) -> dict:
        return {
            "msg": self.message,
            "result": self.result.value,
            "nextRound": self.next_round,
            "saboteurs": self.saboteurs_alive,
            "employees": self.others_alive,
        }


def decide_result(saboteurs_alive: int, others_alive: int) -> GameResult:
    """
    Decide the game result from living head counts.

    Saboteurs win as soon as the rest of the staff no longer outnumbers them;
    the employees win once no saboteur is left.
    """
    if others_alive <= saboteurs_alive:
        return GameResult.FACTION_B_WIN
    if saboteurs_alive == 0:
        return GameResult.FACTION_A_WIN
    return GameResult.ONGOING


class Judge:
    """Judge/Moderator that enforces rules and decides when the game ends."""

    def __init__(self, store: 'GameStore', config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.store = store
        self.config = config
        self.event_emitter = event_emitter
        self.announcements: List[str] = []

    def announce(self, message: str, room_id: Optional[int] = None) -> None:
        """Make a judge announcement."""
        if self.config.use_judge_announcements:
            self.announcements.append(message)
            print(f"[JUDGE] {message}")
            if self.event_emitter:
                state = self.store.round_states.get(room_id) if room_id is not None else None
                self.event_emitter.emit_announcement(
                    message,
                    room_id,
                    state.phase.value if state else None,
                    state.round_number if state else None,
                )

    def require_round_state(self, room_id: int) -> RoundState:
        state = self.store.round_states.get(room_id)
        if state is None:
            raise GameStatusMissingError(
                f"Room {room_id} has no stored game status.", room_id=room_id
            )
        return state

    def require_active_round(self, room_id: int) -> RoundState:
        state = self.require_round_state(room_id)
        if state.is_over:
            raise ValidationError(f"The game in room {room_id} is already over.", room_id=room_id)
        return state

    def require_current_round(self, room_id: int, round_number: int) -> RoundState:
        """Reject requests addressed to any round but the current one."""
        state = self.require_active_round(room_id)
        if state.round_number != round_number:
            raise ValidationError(
                f"Room {room_id} is in round {state.round_number}, not round {round_number}.",
                room_id=room_id,
            )
        return state

    def require_host(self, room_id: int, player_id: Optional[int]) -> Player:
        player = self.store.roster.player(room_id, player_id) if player_id is not None else None
        if player is None or not player.is_host:
            raise PermissionDeniedError(
                f"Player {player_id} is not the host of room {room_id}.", room_id=room_id
            )
        return player

    def is_host(self, room_id: int, player_id: Optional[int]) -> bool:
        if player_id is None:
            return False
        player = self.store.roster.player(room_id, player_id)
        return player is not None and player.is_host

    def head_count(self, room_id: int) -> Tuple[int, int]:
        """Return (living saboteurs, living others)."""
        living = self.store.roster.living_players(room_id)
        saboteurs = sum(1 for p in living if p.is_saboteur)
        return saboteurs, len(living) - saboteurs

    def current_lean(self, room_id: int) -> GameResult:
        return decide_result(*self.head_count(room_id))

    def evaluate_win(self, room_id: int, caller_id: Optional[int] = None) -> WinEvaluation:
        """
        Check the win condition for a room.

        On an ongoing game every call by the host advances the round by one;
        the advance record keeps two racing host calls from skipping a round.
        Anyone else gets the verdict without side effects.
        """
        with self.store.transaction(room_id):
            state = self.require_round_state(room_id)
            saboteurs, others = self.head_count(room_id)

            if state.is_over:
                return WinEvaluation(state.message, state.result, None, saboteurs, others)

            print(f"[SYSTEM] Room {room_id} round {state.round_number}: "
                  f"saboteurs={saboteurs} employees={others}")

            result = decide_result(saboteurs, others)
            state.result = result

            if result.is_terminal:
                state.phase = GamePhase.GAME_OVER
                state.message = RESULT_MESSAGES[result]
                self.store.round_states.save(state)
                self.store.rooms.set_in_progress(room_id, False)
                self.announce(state.message, room_id)
                if self.event_emitter:
                    self.event_emitter.emit_game_over(room_id, result.value, state.round_number)
                return WinEvaluation(state.message, result, None, saboteurs, others)

            self.store.round_states.save(state)

            next_round = None
            if self.is_host(room_id, caller_id):
                claimed = self.store.ledger.claim(ActionRecord(
                    room_id=room_id,
                    round_number=state.round_number,
                    kind=ActionKind.ADVANCE,
                    outcome=ActionOutcome.ADVANCED,
                    actor_id=caller_id,
                ))
                if claimed:
                    next_round = self.store.round_states.advance(room_id)
                    self.announce(f"Round {next_round} begins. Night falls on the office.", room_id)
                    if self.event_emitter:
                        self.event_emitter.emit_round_advanced(room_id, next_round)

            message = f"No winner yet: {saboteurs} saboteur(s) and {others} employee(s) remain."
            return WinEvaluation(message, result, next_round, saboteurs, others)

    def winners(self, room_id: int) -> List[Player]:
        """Players of the winning faction, living or not. Empty while ongoing."""
        state = self.require_round_state(room_id)
        if state.result == GameResult.FACTION_A_WIN:
            team = Team.EMPLOYEES
        elif state.result == GameResult.FACTION_B_WIN:
            team = Team.SABOTEURS
        else:
            return []
        return [p for p in self.store.roster.players(room_id) if p.team == team]
