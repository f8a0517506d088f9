"""
Event emitter for recording game events to files.
"""

from typing import Dict, Any, Optional, List, Tuple
from threading import Lock

from .run_recorder import RunRecorder


class EventEmitter:
    """Event emitter that records game events to files."""

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder or RunRecorder()
        self._lock = Lock()

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it to file."""
        if self.run_recorder:
            try:
                with self._lock:
                    self.run_recorder.record_event(event_type, data)
            except OSError as e:
                # Don't let recording errors break the game
                print(f"Error recording event: {e}")

    def emit_roles_assigned(self, room_id: int, assignments: List[Tuple[int, str]]) -> None:
        """Emit role assignment event."""
        self._emit("roles_assigned", {
            "room_id": room_id,
            "assignments": {str(player_id): role for player_id, role in assignments},
        })

    def emit_night_action(self, room_id: int, round_number: int, kind: str, actor_id: Optional[int],
                          target_id: int, outcome: str, automated: bool) -> None:
        """Emit protect / eliminate resolution event."""
        self._emit("night_action", {
            "room_id": room_id,
            "round": round_number,
            "kind": kind,
            "actor": actor_id,
            "target": target_id,
            "outcome": outcome,
            "automated": automated,
        })

    def emit_investigation(self, room_id: int, round_number: int, actor_id: int,
                           target_id: int, is_saboteur: bool) -> None:
        """Emit Investigator check event."""
        self._emit("investigation", {
            "room_id": room_id,
            "round": round_number,
            "actor": actor_id,
            "target": target_id,
            "is_saboteur": is_saboteur,
        })

    def emit_vote(self, room_id: int, round_number: int, voter_id: int, candidate_id: int) -> None:
        """Emit individual vote event."""
        self._emit("vote", {
            "room_id": room_id,
            "round": round_number,
            "voter": voter_id,
            "candidate": candidate_id,
        })

    def emit_votes_padded(self, room_id: int, round_number: int, auto_votes: int, invalid_ballots: int) -> None:
        """Emit automated votes and invalid ballot padding event."""
        self._emit("votes_padded", {
            "room_id": room_id,
            "round": round_number,
            "auto_votes": auto_votes,
            "invalid_ballots": invalid_ballots,
        })

    def emit_vote_results(self, room_id: int, round_number: int, vote_counts: Dict[int, int],
                          outcome: str, eliminated: Optional[int]) -> None:
        """Emit voting results event."""
        self._emit("vote_results", {
            "room_id": room_id,
            "round": round_number,
            "vote_counts": {str(candidate): count for candidate, count in vote_counts.items()},
            "outcome": outcome,
            "eliminated": eliminated,
        })

    def emit_elimination(self, room_id: int, player_id: int, reason: str, round_number: int) -> None:
        """Emit player elimination event."""
        self._emit("elimination", {
            "room_id": room_id,
            "player_id": player_id,
            "reason": reason,
            "round": round_number,
        })

    def emit_round_advanced(self, room_id: int, round_number: int) -> None:
        self._emit("round_advanced", {
            "room_id": room_id,
            "round": round_number,
        })

    def emit_announcement(self, message: str, room_id: Optional[int], phase: Optional[str],
                          round_number: Optional[int]) -> None:
        """Emit judge announcement event."""
        self._emit("announcement", {
            "message": message,
            "room_id": room_id,
            "phase": phase,
            "round": round_number,
        })

    def emit_game_over(self, room_id: int, result: int, round_number: int) -> None:
        """Emit game over event."""
        self._emit("game_over", {
            "room_id": room_id,
            "result": result,
            "round": round_number,
        })
