"""
Tests for role tables and role assignment.
"""

import random
import pytest
from collections import Counter

from saboteur.core import (
    Player, RoleType, get_role_counts, get_role_distribution,
    AlreadyAssignedError, RosterUnavailableError, ValidationError,
)
from saboteur.service import GameService
from saboteur.store import InMemoryGameStore


def _seat_unassigned(store, count):
    room = store.rooms.create("Setup", "", 6)
    for player_id in range(1, count + 1):
        store.roster.add_player(Player(player_id=player_id, nickname=f"p{player_id}", room_id=room.room_id))
    return room.room_id


@pytest.mark.parametrize("count", range(4, 11))
def test_role_table_sizes(count):
    counts = get_role_counts(count)
    assert sum(counts.values()) == count
    assert counts[RoleType.PROTECTOR] == 1
    assert counts[RoleType.INVESTIGATOR] == 1


def test_role_counts_for_six():
    assert get_role_counts(6) == {
        RoleType.WORKER: 2,
        RoleType.PROTECTOR: 1,
        RoleType.INVESTIGATOR: 1,
        RoleType.SABOTEUR: 2,
    }
    assert get_role_counts(10)[RoleType.SABOTEUR] == 3


@pytest.mark.parametrize("count", [0, 3, 11])
def test_unsupported_roster_size(count):
    with pytest.raises(ValidationError):
        get_role_distribution(count)


def test_assign_roles_matches_table(service, store):
    room_id = _seat_unassigned(store, 8)

    assignments = service.assign_roles(room_id)

    assert [pid for pid, _ in assignments] == list(range(1, 9))
    assert Counter(role for _, role in assignments) == Counter(get_role_distribution(8))
    assert all(p.role is not None for p in store.roster.players(room_id))
    # Round state is created when the lobby did not do it
    assert service.round_number(room_id) == 1


def test_assign_roles_only_once(service, store):
    room_id = _seat_unassigned(store, 6)
    service.assign_roles(room_id)

    with pytest.raises(AlreadyAssignedError):
        service.assign_roles(room_id)


def test_assign_roles_empty_roster(service):
    with pytest.raises(RosterUnavailableError):
        service.assign_roles(77)


def test_assign_roles_unsupported_size(service, store):
    room_id = _seat_unassigned(store, 3)

    with pytest.raises(ValidationError):
        service.assign_roles(room_id)
    assert all(p.role is None for p in store.roster.players(room_id))


def test_seeded_assignment_is_reproducible(game_config):
    results = []
    for _ in range(2):
        store = InMemoryGameStore()
        service = GameService(store, game_config, random.Random(2024))
        results.append(service.assign_roles(_seat_unassigned(store, 10)))

    assert results[0] == results[1]
