"""
Pytest fixtures for Saboteur game tests.
"""

import random
import pytest
from typing import Iterable, List, Optional

from saboteur.core import Player, RoleType
from saboteur.config.game_config import GameConfig
from saboteur.service import GameService
from saboteur.store import InMemoryGameStore


# Seat order used by most tests: players 1-2 sabotage, 3 protects, 4 investigates
STANDARD_ROLES = [
    RoleType.SABOTEUR,
    RoleType.SABOTEUR,
    RoleType.PROTECTOR,
    RoleType.INVESTIGATOR,
    RoleType.WORKER,
    RoleType.WORKER,
]


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        use_judge_announcements=False,  # Disable for cleaner test output
        record_runs=False,
        random_seed=7,
    )


@pytest.fixture
def rng():
    """Seeded random source so automated choices are reproducible."""
    return random.Random(42)


@pytest.fixture
def store(game_config):
    return InMemoryGameStore(game_config.ai_player_id_base)


@pytest.fixture
def service(store, game_config, rng):
    return GameService(store, game_config, rng)


@pytest.fixture
def seat(store):
    """
    Factory that seats players 1..N with the given roles in a fresh room and
    creates its round state, skipping the lobby. Player 1 is the host.
    """
    def _seat(roles: Optional[List[RoleType]] = None, automated: Iterable[int] = ()) -> int:
        roles = STANDARD_ROLES if roles is None else roles
        automated = set(automated)
        room = store.rooms.create("Test office", "", max(len(roles), 6))
        for player_id, role in enumerate(roles, start=1):
            store.roster.add_player(Player(
                player_id=player_id,
                nickname=f"p{player_id}",
                room_id=room.room_id,
                is_automated=player_id in automated,
                is_host=player_id == 1,
                is_ready=True,
                role=role,
            ))
        store.round_states.create(room.room_id)
        store.rooms.set_in_progress(room.room_id, True)
        return room.room_id

    return _seat


@pytest.fixture
def room_id(seat):
    """Standard six-player room of humans."""
    return seat()


def vote_all(service, room_id: int, round_number: int, choices: dict) -> None:
    """Cast one ballot per voter from a {voter: candidate} mapping."""
    for voter, candidate in choices.items():
        service.cast_vote(room_id, round_number, voter, candidate)
