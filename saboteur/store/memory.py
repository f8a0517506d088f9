"""
In-memory store used by the CLI, the bundled web server and the tests.
"""

import itertools
from collections import defaultdict
from threading import Lock, RLock
from typing import Dict, List, Optional, Set, Tuple

from ..core.actions import ActionKey, ActionKind, ActionRecord, Ballot
from ..core.exceptions import ValidationError
from ..core.game_engine import GamePhase, RoundState
from ..core.player import LifeStatus, Player
from ..core.roles import RoleType
from ..core.room import Room
from .base import (
    ActionLedger, BallotBox, GameStore, RoomDirectory, RosterAccessor, RoundStateStore,
)


class InMemoryRoster(RosterAccessor):
    """Players keyed by id; a player belongs to one room at a time."""

    def __init__(self, automated_id_base: int = 900000):
        self._players: Dict[int, Player] = {}
        self._seats = itertools.count(1)
        self._automated_ids = itertools.count(automated_id_base + 1)

    def players(self, room_id: int) -> List[Player]:
        members = [p for p in self._players.values() if p.room_id == room_id]
        return sorted(members, key=lambda p: p.seat)

    def player(self, room_id: int, player_id: int) -> Optional[Player]:
        player = self._players.get(player_id)
        if player is None or player.room_id != room_id:
            return None
        return player

    def find(self, player_id: int) -> Optional[Player]:
        return self._players.get(player_id)

    def add_player(self, player: Player) -> Player:
        if player.player_id in self._players:
            raise ValidationError(f"Player {player.player_id} is already in a room.")
        player.seat = next(self._seats)
        self._players[player.player_id] = player
        return player

    def remove_player(self, room_id: int, player_id: int) -> None:
        if self.player(room_id, player_id) is not None:
            del self._players[player_id]

    def _require(self, room_id: int, player_id: int) -> Player:
        player = self.player(room_id, player_id)
        if player is None:
            raise ValidationError(f"Player {player_id} is not in room {room_id}.")
        return player

    def assign_role(self, room_id: int, player_id: int, role: RoleType) -> None:
        self._require(room_id, player_id).role = role

    def set_protection(self, room_id: int, player_id: int, round_number: Optional[int]) -> None:
        self._require(room_id, player_id).protected_round = round_number

    def mark_removed(self, room_id: int, player_id: int, status: LifeStatus) -> None:
        self._require(room_id, player_id).life = status

    def set_host(self, room_id: int, player_id: int) -> None:
        player = self._require(room_id, player_id)
        player.is_host = True
        player.is_ready = True

    def set_ready(self, room_id: int, player_id: int, ready: bool) -> None:
        self._require(room_id, player_id).is_ready = ready

    def allocate_automated_id(self) -> int:
        return next(self._automated_ids)

    def purge(self, room_id: int) -> None:
        for player in self.players(room_id):
            del self._players[player.player_id]


class InMemoryRoundStates(RoundStateStore):

    def __init__(self):
        self._states: Dict[int, RoundState] = {}

    def get(self, room_id: int) -> Optional[RoundState]:
        return self._states.get(room_id)

    def create(self, room_id: int) -> RoundState:
        state = RoundState(room_id=room_id)
        self._states[room_id] = state
        return state

    def save(self, state: RoundState) -> None:
        self._states[state.room_id] = state

    def advance(self, room_id: int) -> int:
        state = self._states[room_id]
        state.round_number += 1
        state.phase = GamePhase.NIGHT
        return state.round_number

    def delete(self, room_id: int) -> None:
        self._states.pop(room_id, None)


class InMemoryActionLedger(ActionLedger):

    def __init__(self):
        self._records: Dict[ActionKey, ActionRecord] = {}
        self._lock = Lock()

    def claim(self, record: ActionRecord) -> bool:
        with self._lock:
            if record.key in self._records:
                return False
            self._records[record.key] = record
            return True

    def get(self, room_id: int, round_number: int, kind: ActionKind) -> Optional[ActionRecord]:
        return self._records.get((room_id, round_number, kind.value))

    def purge(self, room_id: int) -> None:
        with self._lock:
            for key in [k for k in self._records if k[0] == room_id]:
                del self._records[key]


class InMemoryBallotBox(BallotBox):

    def __init__(self):
        self._ballots: Dict[Tuple[int, int], List[Ballot]] = defaultdict(list)
        self._sealed: Set[Tuple[int, int]] = set()

    def cast(self, ballot: Ballot) -> None:
        self._ballots[(ballot.room_id, ballot.round_number)].append(ballot)

    def ballots(self, room_id: int, round_number: int) -> List[Ballot]:
        return list(self._ballots.get((room_id, round_number), []))

    def has_any(self, room_id: int) -> bool:
        return any(ballots for (room, _), ballots in self._ballots.items() if room == room_id)

    def seal(self, room_id: int, round_number: int) -> None:
        self._sealed.add((room_id, round_number))

    def is_sealed(self, room_id: int, round_number: int) -> bool:
        return (room_id, round_number) in self._sealed

    def purge_round(self, room_id: int, round_number: int) -> None:
        self._ballots.pop((room_id, round_number), None)

    def purge(self, room_id: int) -> None:
        for key in [k for k in self._ballots if k[0] == room_id]:
            del self._ballots[key]
        self._sealed = {key for key in self._sealed if key[0] != room_id}


class InMemoryRoomDirectory(RoomDirectory):

    def __init__(self):
        self._rooms: Dict[int, Room] = {}
        self._room_ids = itertools.count(1)

    def get(self, room_id: int) -> Optional[Room]:
        return self._rooms.get(room_id)

    def create(self, title: str, password: str, max_players: int) -> Room:
        room = Room(room_id=next(self._room_ids), title=title, password=password,
                    max_players=max_players)
        self._rooms[room.room_id] = room
        return room

    def save(self, room: Room) -> None:
        self._rooms[room.room_id] = room

    def set_in_progress(self, room_id: int, in_progress: bool) -> None:
        room = self._rooms.get(room_id)
        if room is not None:
            room.in_progress = in_progress

    def delete(self, room_id: int) -> None:
        self._rooms.pop(room_id, None)

    def all(self) -> List[Room]:
        return list(self._rooms.values())


class InMemoryGameStore(GameStore):
    """All collaborators in process memory, one re-entrant lock per room."""

    def __init__(self, automated_id_base: int = 900000):
        self.roster = InMemoryRoster(automated_id_base)
        self.round_states = InMemoryRoundStates()
        self.ledger = InMemoryActionLedger()
        self.ballots = InMemoryBallotBox()
        self.rooms = InMemoryRoomDirectory()
        self._room_locks: Dict[int, RLock] = {}
        self._locks_guard = Lock()

    def transaction(self, room_id: int) -> RLock:
        with self._locks_guard:
            lock = self._room_locks.get(room_id)
            if lock is None:
                lock = self._room_locks[room_id] = RLock()
        return lock
