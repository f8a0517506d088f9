"""
Collaborator interfaces the game core reads and writes through.

The core never owns storage. Anything that implements these interfaces
(a database, a key-value store, the in-memory store used for tests and the
CLI) can back a game, as long as ``GameStore.transaction`` serializes work
on a room and ``ActionLedger.claim`` is an atomic conditional insert.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional

from ..core.actions import ActionKind, ActionRecord, Ballot
from ..core.game_engine import RoundState
from ..core.player import LifeStatus, Player
from ..core.roles import RoleType
from ..core.room import Room


class RosterAccessor(ABC):
    """Players of each room and their membership flags."""

    @abstractmethod
    def players(self, room_id: int) -> List[Player]:
        """All players in the room, in seat order."""

    def living_players(self, room_id: int) -> List[Player]:
        return [p for p in self.players(room_id) if p.is_alive]

    @abstractmethod
    def player(self, room_id: int, player_id: int) -> Optional[Player]:
        """A single room member, or None."""

    @abstractmethod
    def find(self, player_id: int) -> Optional[Player]:
        """Look a player up regardless of room."""

    @abstractmethod
    def add_player(self, player: Player) -> Player:
        pass

    @abstractmethod
    def remove_player(self, room_id: int, player_id: int) -> None:
        pass

    @abstractmethod
    def assign_role(self, room_id: int, player_id: int, role: RoleType) -> None:
        pass

    @abstractmethod
    def set_protection(self, room_id: int, player_id: int, round_number: Optional[int]) -> None:
        pass

    @abstractmethod
    def mark_removed(self, room_id: int, player_id: int, status: LifeStatus) -> None:
        pass

    @abstractmethod
    def set_host(self, room_id: int, player_id: int) -> None:
        pass

    @abstractmethod
    def set_ready(self, room_id: int, player_id: int, ready: bool) -> None:
        pass

    @abstractmethod
    def allocate_automated_id(self) -> int:
        """Reserve a player id for an automated player."""

    @abstractmethod
    def purge(self, room_id: int) -> None:
        pass


class RoundStateStore(ABC):
    """One RoundState per room."""

    @abstractmethod
    def get(self, room_id: int) -> Optional[RoundState]:
        pass

    @abstractmethod
    def create(self, room_id: int) -> RoundState:
        pass

    @abstractmethod
    def save(self, state: RoundState) -> None:
        pass

    @abstractmethod
    def advance(self, room_id: int) -> int:
        """Increment the round counter and return the new round number."""

    @abstractmethod
    def delete(self, room_id: int) -> None:
        pass


class ActionLedger(ABC):
    """Round-scoped action records keyed by (room, round, kind)."""

    @abstractmethod
    def claim(self, record: ActionRecord) -> bool:
        """Insert the record unless its key exists. Returns False if it did."""

    @abstractmethod
    def get(self, room_id: int, round_number: int, kind: ActionKind) -> Optional[ActionRecord]:
        pass

    @abstractmethod
    def purge(self, room_id: int) -> None:
        pass


class BallotBox(ABC):
    """Day ballots per (room, round)."""

    @abstractmethod
    def cast(self, ballot: Ballot) -> None:
        pass

    @abstractmethod
    def ballots(self, room_id: int, round_number: int) -> List[Ballot]:
        pass

    @abstractmethod
    def has_any(self, room_id: int) -> bool:
        pass

    @abstractmethod
    def seal(self, room_id: int, round_number: int) -> None:
        """Close the round to further human ballots."""

    @abstractmethod
    def is_sealed(self, room_id: int, round_number: int) -> bool:
        pass

    @abstractmethod
    def purge_round(self, room_id: int, round_number: int) -> None:
        pass

    @abstractmethod
    def purge(self, room_id: int) -> None:
        pass


class RoomDirectory(ABC):

    @abstractmethod
    def get(self, room_id: int) -> Optional[Room]:
        pass

    @abstractmethod
    def create(self, title: str, password: str, max_players: int) -> Room:
        pass

    @abstractmethod
    def save(self, room: Room) -> None:
        pass

    @abstractmethod
    def set_in_progress(self, room_id: int, in_progress: bool) -> None:
        pass

    @abstractmethod
    def delete(self, room_id: int) -> None:
        pass

    @abstractmethod
    def all(self) -> List[Room]:
        pass


class GameStore(ABC):
    """Bundle of collaborators plus the per-room unit of work."""

    roster: RosterAccessor
    round_states: RoundStateStore
    ledger: ActionLedger
    ballots: BallotBox
    rooms: RoomDirectory

    @abstractmethod
    def transaction(self, room_id: int) -> AbstractContextManager:
        """
        Serialize all reads and writes on a room.

        Operations validate everything inside the transaction before their
        first write, so a failure leaves the room untouched.
        """
