"""
Setup phase handler: shuffles and binds roles once per game.
"""

import random
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..core import (
    Judge, RoleType, get_role_distribution, AlreadyAssignedError, RosterUnavailableError,
)
from ..store.base import GameStore

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


class SetupPhaseHandler:
    """Handles role assignment at game start."""

    def __init__(self, store: GameStore, judge: Judge, rng: Optional[random.Random] = None,
                 event_emitter: Optional['EventEmitter'] = None):
        self.store = store
        self.judge = judge
        self.random = rng or random.Random()
        self.event_emitter = event_emitter

    def assign_roles(self, room_id: int) -> List[Tuple[int, RoleType]]:
        """
        Shuffle the role table for the roster size and give every player one role.

        Returns:
            (player_id, role) pairs in seat order

        Raises:
            RosterUnavailableError: If the room has no players
            AlreadyAssignedError: If any player already holds a role
            ValidationError: If the roster size has no role table entry
        """
        with self.store.transaction(room_id):
            players = self.store.roster.players(room_id)
            if not players:
                raise RosterUnavailableError(
                    f"No roster could be read for room {room_id}.", room_id=room_id
                )

            already = [p.player_id for p in players if p.role is not None]
            if already:
                raise AlreadyAssignedError(
                    f"Players {already} in room {room_id} already hold a role.", room_id=room_id
                )

            roles = get_role_distribution(len(players))
            self.random.shuffle(roles)

            if self.store.round_states.get(room_id) is None:
                self.store.round_states.create(room_id)

            assignments = []
            for player, role in zip(players, roles):
                self.store.roster.assign_role(room_id, player.player_id, role)
                assignments.append((player.player_id, role))

        print(f"[SYSTEM] Roles assigned in room {room_id} ({len(assignments)} players).")
        self.judge.announce("Roles have been handed out. Night falls on the office.", room_id)
        if self.event_emitter:
            self.event_emitter.emit_roles_assigned(
                room_id, [(player_id, role.value) for player_id, role in assignments]
            )
        return assignments
