"""
Tests for night phase handler.
"""

import threading
import pytest

from saboteur.core import (
    ActionKind, ActionOutcome, GamePhase, LifeState, RoleType,
    AlreadyActedError, NoActorAliveError, TargetNotEligibleError, ValidationError,
)
from saboteur.core.player import LifeStatus


def test_eliminate_unprotected_target(service, store, room_id):
    """An unshielded target is dismissed and the round message records it."""
    message = service.eliminate(room_id, 1, 5)

    target = store.roster.player(room_id, 5)
    assert not target.is_alive
    assert target.life.state == LifeState.ELIMINATED
    assert target.life.eliminated_this_round(1)
    assert "p5" in message
    assert store.round_states.get(room_id).message == message

    record = store.ledger.get(room_id, 1, ActionKind.ELIMINATE)
    assert record.outcome == ActionOutcome.ELIMINATED
    assert record.actor_id == 1
    assert record.target_id == 5


def test_protection_blocks_elimination(service, store, room_id):
    """Protect then eliminate on the same target in the same round."""
    service.protect(room_id, 3, 5)
    assert store.roster.player(room_id, 5).is_protected(1)

    message = service.eliminate(room_id, 1, 5)

    target = store.roster.player(room_id, 5)
    assert target.is_alive
    assert "stopped" in message
    # The shield is consumed by the blocked attempt
    assert target.protected_round is None
    assert store.ledger.get(room_id, 1, ActionKind.ELIMINATE).outcome == ActionOutcome.BLOCKED


def test_protection_does_not_carry_over(service, store, room_id):
    """A shield from an earlier round has no effect."""
    store.roster.set_protection(room_id, 5, 1)
    store.round_states.advance(room_id)

    service.eliminate(room_id, 1, 5)

    assert not store.roster.player(room_id, 5).is_alive
    assert store.roster.player(room_id, 5).life.round_number == 2


def test_protector_may_shield_self(service, store, room_id):
    service.protect(room_id, 3, 3)
    assert store.roster.player(room_id, 3).is_protected(1)


def test_one_elimination_per_round(service, store, room_id):
    """A second elimination in the same round fails and changes nothing."""
    service.eliminate(room_id, 1, 5)

    with pytest.raises(AlreadyActedError):
        service.eliminate(room_id, 1, 6)
    with pytest.raises(AlreadyActedError):
        service.eliminate(room_id, 2, 6)

    assert store.roster.player(room_id, 6).is_alive


def test_one_protection_per_round(service, store, room_id):
    service.protect(room_id, 3, 5)
    with pytest.raises(AlreadyActedError):
        service.protect(room_id, 3, 6)

    # The rejected call leaves the first shield as it was
    assert not store.roster.player(room_id, 6).is_protected(1)
    assert store.roster.player(room_id, 5).is_protected(1)
    assert store.ledger.get(room_id, 1, ActionKind.PROTECT).target_id == 5


def test_racing_eliminations_resolve_once(service, store, room_id):
    """Both saboteurs act at once; exactly one wins the round's elimination."""
    barrier = threading.Barrier(2)
    outcomes = []

    def act(actor_id, target_id):
        barrier.wait()
        try:
            service.eliminate(room_id, actor_id, target_id)
            outcomes.append("ok")
        except AlreadyActedError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=act, args=args) for args in ((1, 5), (2, 6))]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["conflict", "ok"]
    dismissed = [pid for pid in (5, 6) if not store.roster.player(room_id, pid).is_alive]
    assert len(dismissed) == 1
    assert store.ledger.get(room_id, 1, ActionKind.ELIMINATE).target_id == dismissed[0]


def test_night_closed_once_ballots_are_sealed(service, store, room_id):
    """After padding no one can be dismissed, so the tally still adds up."""
    service.pad_and_auto_vote(room_id, 1, 1)

    with pytest.raises(ValidationError):
        service.eliminate(room_id, 1, 5)
    with pytest.raises(ValidationError):
        service.protect(room_id, 3, 5)

    assert store.roster.player(room_id, 5).is_alive
    assert store.ledger.get(room_id, 1, ActionKind.ELIMINATE) is None
    service.tally_votes(room_id, 1)


def test_night_closed_during_day(service, store, room_id):
    store.round_states.get(room_id).phase = GamePhase.DAY

    with pytest.raises(ValidationError):
        service.eliminate(room_id, 1, 5)


def test_night_reopens_after_host_advance(service, store, room_id):
    service.pad_and_auto_vote(room_id, 1, 1)
    service.tally_votes(room_id, 1)
    service.evaluate_win(room_id, 1)

    service.eliminate(room_id, 1, 5)
    assert store.roster.player(room_id, 5).life.eliminated_this_round(2)


def test_new_round_allows_new_actions(service, store, room_id):
    service.eliminate(room_id, 1, 5)
    store.round_states.advance(room_id)

    service.eliminate(room_id, 1, 6)
    assert not store.roster.player(room_id, 6).is_alive


def test_dead_target_rejected_without_side_effects(service, store, room_id):
    store.roster.mark_removed(room_id, 5, LifeStatus.removed_by_vote(1))

    with pytest.raises(TargetNotEligibleError):
        service.eliminate(room_id, 1, 5)

    assert store.ledger.get(room_id, 1, ActionKind.ELIMINATE) is None
    # The failed attempt does not use up the round's elimination
    service.eliminate(room_id, 1, 6)


def test_unknown_target_rejected(service, room_id):
    with pytest.raises(TargetNotEligibleError):
        service.protect(room_id, 3, 99)


def test_dead_actor_rejected(service, store, room_id):
    store.roster.mark_removed(room_id, 3, LifeStatus.eliminated_in(1))

    with pytest.raises(NoActorAliveError):
        service.protect(room_id, 3, 5)


def test_wrong_role_cannot_act(service, room_id):
    with pytest.raises(NoActorAliveError):
        service.protect(room_id, 5, 6)
    with pytest.raises(NoActorAliveError):
        service.eliminate(room_id, 4, 6)


def test_automated_saboteur_blocked_while_human_alive(service, store, seat):
    """Automated saboteurs only act once no human saboteur is alive."""
    room_id = seat(automated=[2])

    with pytest.raises(NoActorAliveError):
        service.eliminate(room_id)
    with pytest.raises(NoActorAliveError):
        service.eliminate(room_id, 2, 5)

    store.roster.mark_removed(room_id, 1, LifeStatus.removed_by_vote(1))
    service.eliminate(room_id, target_id=5)

    record = store.ledger.get(room_id, 1, ActionKind.ELIMINATE)
    assert record.actor_id == 2


def test_automated_protector_picks_living_target(service, store, seat):
    room_id = seat(automated=[3])
    store.roster.mark_removed(room_id, 6, LifeStatus.removed_by_vote(1))

    service.protect(room_id)

    record = store.ledger.get(room_id, 1, ActionKind.PROTECT)
    assert record.actor_id == 3
    assert record.target_id in {p.player_id for p in store.roster.living_players(room_id)}
    assert store.roster.player(room_id, record.target_id).is_protected(1)


def test_no_automated_actor_when_role_is_human(service, room_id):
    with pytest.raises(NoActorAliveError):
        service.protect(room_id)


def test_investigate_reveals_alignment(service, store, room_id):
    result = service.investigate(room_id, 4, 1)
    assert result.is_saboteur
    assert "is a saboteur" in result.message

    result = service.investigate(room_id, 4, 5)
    assert not result.is_saboteur
    assert "is not a saboteur" in result.message

    # Investigation is read-only
    assert store.round_states.get(room_id).message == ""


def test_investigate_requires_investigator(service, room_id):
    with pytest.raises(NoActorAliveError):
        service.investigate(room_id, 5, 1)


def test_actions_rejected_after_game_over(service, store, room_id):
    state = store.round_states.get(room_id)
    state.phase = GamePhase.GAME_OVER

    with pytest.raises(ValidationError):
        service.eliminate(room_id, 1, 5)
    with pytest.raises(ValidationError):
        service.investigate(room_id, 4, 1)


def test_role_capabilities():
    assert RoleType.SABOTEUR.has_night_action
    assert not RoleType.WORKER.has_night_action
    assert RoleType.SABOTEUR.is_saboteur
    assert not RoleType.PROTECTOR.is_saboteur
