"""
Lobby operations that populate the roster before a game and tear it down after.
"""

from typing import List, Optional

from ..core import (
    Judge, Player, Room, GameStatusMissingError, PermissionDeniedError,
    StateConflictError, ValidationError,
)
from ..config.game_config import GameConfig, default_config
from ..store.base import GameStore


class RoomManager:
    """Room entry and exit, automated fill-in, game start and teardown."""

    def __init__(self, store: GameStore, judge: Judge, config: GameConfig = default_config):
        self.store = store
        self.judge = judge
        self.config = config

    def _require_room(self, room_id: int) -> Room:
        room = self.store.rooms.get(room_id)
        if room is None:
            raise ValidationError(f"Room {room_id} does not exist.", room_id=room_id)
        return room

    def _check_capacity(self, max_players: int) -> None:
        if not self.config.min_room_players <= max_players <= self.config.max_room_players:
            raise ValidationError(
                f"Rooms hold {self.config.min_room_players} to "
                f"{self.config.max_room_players} players, not {max_players}."
            )

    def list_rooms(self) -> List[Room]:
        return self.store.rooms.all()

    def create_room(self, host_id: int, nickname: str, title: str, password: str = "",
                    max_players: Optional[int] = None, is_automated: bool = False) -> Room:
        """Open a room with the creator seated as its host."""
        if max_players is None:
            max_players = self.config.default_max_players
        self._check_capacity(max_players)
        if host_id <= 0:
            raise ValidationError(f"Invalid player id: {host_id}")
        if self.store.roster.find(host_id) is not None:
            raise ValidationError(f"Player {host_id} is already in a room.")

        room = self.store.rooms.create(title, password, max_players)
        try:
            with self.store.transaction(room.room_id):
                self.store.roster.add_player(Player(
                    player_id=host_id,
                    nickname=nickname,
                    room_id=room.room_id,
                    is_automated=is_automated,
                    is_host=True,
                    is_ready=True,
                ))
        except ValidationError:
            # The host was seated elsewhere in the meantime
            self.store.rooms.delete(room.room_id)
            raise
        print(f"[SYSTEM] Room {room.room_id} opened by player {host_id}.")
        return room

    def enter_room(self, room_id: int, player_id: int, nickname: str, password: str = "") -> Player:
        with self.store.transaction(room_id):
            if player_id <= 0 or self.store.roster.find(player_id) is not None:
                raise ValidationError(f"Player {player_id} cannot enter a room.", room_id=room_id)
            room = self.store.rooms.get(room_id)
            if (room is None or room.in_progress
                    or len(self.store.roster.players(room_id)) >= room.max_players):
                raise ValidationError(
                    f"Room {room_id} has already started or cannot be entered.", room_id=room_id
                )
            if room.password != password:
                raise PermissionDeniedError("The room password does not match.", room_id=room_id)

            return self.store.roster.add_player(Player(
                player_id=player_id, nickname=nickname, room_id=room_id,
            ))

    def exit_room(self, room_id: int, player_id: int) -> Optional[int]:
        """
        Leave a room that has not started.

        The longest-seated remaining member inherits the host seat, and an
        empty room is removed.

        Returns:
            The new host's id when the host left, else None
        """
        with self.store.transaction(room_id):
            room = self._require_room(room_id)
            leaving = self.store.roster.player(room_id, player_id)
            if leaving is None:
                raise ValidationError(f"Player {player_id} is not in room {room_id}.", room_id=room_id)
            if room.in_progress:
                raise StateConflictError("Players cannot leave once the game has started.",
                                         room_id=room_id)

            self.store.roster.remove_player(room_id, player_id)
            remaining = self.store.roster.players(room_id)

            new_host = None
            if leaving.is_host and remaining:
                new_host = remaining[0].player_id
                self.store.roster.set_host(room_id, new_host)

            if not remaining:
                self.store.rooms.delete(room_id)
        return new_host

    def set_ready(self, room_id: int, player_id: int, ready: bool = True) -> Player:
        with self.store.transaction(room_id):
            player = self.store.roster.player(room_id, player_id)
            if player is None:
                raise ValidationError(f"Player {player_id} is not in room {room_id}.", room_id=room_id)
            self.store.roster.set_ready(room_id, player_id, ready)
            return player

    def change_max_players(self, room_id: int, max_players: int) -> Room:
        with self.store.transaction(room_id):
            room = self._require_room(room_id)
            self._check_capacity(max_players)
            if max_players < len(self.store.roster.players(room_id)):
                raise ValidationError(
                    f"Room {room_id} already holds more than {max_players} players.", room_id=room_id
                )
            room.max_players = max_players
            self.store.rooms.save(room)
            return room

    def fill_with_ai(self, room_id: int) -> List[Player]:
        """Seat automated players in every free seat. Returns the added players."""
        with self.store.transaction(room_id):
            room = self._require_room(room_id)
            gap = room.max_players - len(self.store.roster.players(room_id))

            added = []
            for i in range(1, gap + 1):
                added.append(self.store.roster.add_player(Player(
                    player_id=self.store.roster.allocate_automated_id(),
                    nickname=f"{self.config.ai_nickname_prefix}_{room_id}_{i}",
                    room_id=room_id,
                    is_automated=True,
                    is_ready=True,
                )))

        if added:
            print(f"[SYSTEM] Seated {len(added)} automated player(s) in room {room_id}.")
        return added

    def start_game(self, room_id: int, host_id: int) -> str:
        """
        Host-only: start once every human is ready, filling free seats with
        automated players. Creates the room's round state at round 1.
        """
        with self.store.transaction(room_id):
            room = self._require_room(room_id)
            self.judge.require_host(room_id, host_id)
            if room.in_progress:
                raise StateConflictError(f"Room {room_id} is already playing.", room_id=room_id)

            players = self.store.roster.players(room_id)
            if any(not p.is_ready for p in players if not p.is_automated):
                raise ValidationError("Not every player is ready.", room_id=room_id)

            short = len(players) < room.max_players
            if short:
                self.fill_with_ai(room_id)

            if self.store.round_states.get(room_id) is None:
                self.store.round_states.create(room_id)
            self.store.rooms.set_in_progress(room_id, True)

            message = "The game has started. Nobody may leave until it ends."
            if short:
                message = "Empty seats were filled with automated players. " + message

        self.judge.announce(message, room_id)
        return message

    def delete_game(self, room_id: int) -> None:
        """Purge every record of a room: roster, ballots, action records, round state."""
        with self.store.transaction(room_id):
            if self.store.round_states.get(room_id) is None and self.store.rooms.get(room_id) is None:
                raise GameStatusMissingError(f"Room {room_id} has no game to delete.", room_id=room_id)

            self.store.roster.purge(room_id)
            self.store.ballots.purge(room_id)
            self.store.ledger.purge(room_id)
            self.store.round_states.delete(room_id)
            self.store.rooms.delete(room_id)
        print(f"[SYSTEM] Room {room_id} deleted.")
