"""
Night phase handler for protection, elimination and investigation.
"""

import random
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from ..core import (
    Judge, GamePhase, Player, RoleType, LifeStatus, ActionKind, ActionOutcome, ActionRecord,
    AlreadyActedError, NoActorAliveError, ValidationError,
)
from ..agents import BaseAgent, ExplicitTarget, RandomAgent
from ..store.base import GameStore

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter


# Role that owns each round-scoped night capability
ACTION_ROLES: Dict[ActionKind, RoleType] = {
    ActionKind.PROTECT: RoleType.PROTECTOR,
    ActionKind.ELIMINATE: RoleType.SABOTEUR,
}


@dataclass
class InvestigationResult:
    """Private answer for the Investigator."""
    target_id: int
    is_saboteur: bool
    message: str

    def to_dict(self) -> dict:
        return {"targetId": self.target_id, "isSaboteur": self.is_saboteur, "msg": self.message}


class NightPhaseHandler:
    """Handles night phase operations: protection, elimination and investigation."""

    def __init__(self, store: GameStore, judge: Judge, rng: Optional[random.Random] = None,
                 event_emitter: Optional['EventEmitter'] = None):
        self.store = store
        self.judge = judge
        self.random = rng or random.Random()
        self.event_emitter = event_emitter

    def protect(self, room_id: int, actor_id: Optional[int] = None, target_id: Optional[int] = None) -> str:
        """
        Shield one living player from elimination for the current round.

        Without ``actor_id`` an automated Protector acts; without ``target_id``
        the target is drawn at random among living players.
        """
        return self._resolve(room_id, ActionKind.PROTECT, actor_id, self._agent_for(target_id))

    def eliminate(self, room_id: int, actor_id: Optional[int] = None, target_id: Optional[int] = None) -> str:
        """
        Dismiss one living player unless the Protector shielded them this round.

        Without ``actor_id`` an automated Saboteur acts, which is only allowed
        while no human Saboteur is alive.
        """
        return self._resolve(room_id, ActionKind.ELIMINATE, actor_id, self._agent_for(target_id))

    def investigate(self, room_id: int, actor_id: int, target_id: int) -> InvestigationResult:
        """Reveal to the Investigator whether the target is a Saboteur. Read-only."""
        with self.store.transaction(room_id):
            state = self.judge.require_active_round(room_id)
            actor = self._select_actor(room_id, RoleType.INVESTIGATOR, actor_id)
            target = ExplicitTarget(target_id).choose_target(self.store.roster.living_players(room_id))

        is_saboteur = target.is_saboteur
        if is_saboteur:
            message = f"[ {target.nickname} ] is a saboteur."
        else:
            message = f"[ {target.nickname} ] is not a saboteur."

        print(f"[INVESTIGATOR] Player {actor.player_id} checks player {target.player_id}.")
        if self.event_emitter:
            self.event_emitter.emit_investigation(
                room_id, state.round_number, actor.player_id, target.player_id, is_saboteur
            )
        return InvestigationResult(target.player_id, is_saboteur, message)

    def _agent_for(self, target_id: Optional[int]) -> BaseAgent:
        if target_id is None:
            return RandomAgent(self.random)
        return ExplicitTarget(target_id)

    def _select_actor(self, room_id: int, role: RoleType, actor_id: Optional[int]) -> Player:
        """
        Find the living player who acts for ``role``.

        ``actor_id=None`` selects an automated holder. Automated holders never
        act while a human holder of the same role is alive.
        """
        holders = [p for p in self.store.roster.living_players(room_id) if p.role is role]
        if not holders:
            raise NoActorAliveError(f"No living {role.value} in room {room_id}.", room_id=room_id)

        human_alive = any(not p.is_automated for p in holders)

        if actor_id is None:
            automated = [p for p in holders if p.is_automated]
            if human_alive or not automated:
                raise NoActorAliveError(
                    f"No automated {role.value} may act in room {room_id}.", room_id=room_id
                )
            return automated[0]

        actor = next((p for p in holders if p.player_id == actor_id), None)
        if actor is None:
            raise NoActorAliveError(
                f"Player {actor_id} is not a living {role.value} in room {room_id}.", room_id=room_id
            )
        if actor.is_automated and human_alive:
            raise NoActorAliveError(
                f"A human {role.value} is alive in room {room_id}.", room_id=room_id
            )
        return actor

    def _resolve(self, room_id: int, kind: ActionKind, actor_id: Optional[int], agent: BaseAgent) -> str:
        """
        Resolve one round-scoped night action.

        All checks run before the ledger claim; the claim is the only
        first-writer-wins point, so a racing second call fails with
        AlreadyActedError and leaves every record untouched.
        """
        with self.store.transaction(room_id):
            state = self.judge.require_active_round(room_id)
            round_number = state.round_number
            if state.phase == GamePhase.DAY or self.store.ballots.is_sealed(room_id, round_number):
                raise ValidationError(
                    f"Night actions are closed for round {round_number} in room {room_id}.",
                    room_id=room_id,
                )
            actor = self._select_actor(room_id, ACTION_ROLES[kind], actor_id)

            if self.store.ledger.get(room_id, round_number, kind) is not None:
                raise AlreadyActedError(
                    f"The {kind.value} action was already taken in round {round_number}.",
                    room_id=room_id,
                )

            target = agent.choose_target(self.store.roster.living_players(room_id))

            if kind == ActionKind.PROTECT:
                outcome = ActionOutcome.PROTECTED
            elif target.is_protected(round_number):
                outcome = ActionOutcome.BLOCKED
            else:
                outcome = ActionOutcome.ELIMINATED

            record = ActionRecord(
                room_id=room_id,
                round_number=round_number,
                kind=kind,
                outcome=outcome,
                actor_id=actor.player_id,
                target_id=target.player_id,
            )
            if not self.store.ledger.claim(record):
                raise AlreadyActedError(
                    f"The {kind.value} action was already taken in round {round_number}.",
                    room_id=room_id,
                )

            if outcome == ActionOutcome.PROTECTED:
                self.store.roster.set_protection(room_id, target.player_id, round_number)
                message = f"[ {target.nickname} ] is shielded from the saboteurs for one night."
            elif outcome == ActionOutcome.BLOCKED:
                self.store.roster.set_protection(room_id, target.player_id, None)
                message = f"A wise protector stopped the unfair dismissal of [ {target.nickname} ]."
            else:
                self.store.roster.mark_removed(
                    room_id, target.player_id, LifeStatus.eliminated_in(round_number)
                )
                message = f"A saboteur got the loyal [ {target.nickname} ] dismissed overnight."

            if kind == ActionKind.ELIMINATE:
                state.message = message
                self.store.round_states.save(state)

        tag = "AI_" if actor.is_automated else "USER_"
        print(f"[{tag}{ACTION_ROLES[kind].value.upper()}] {message}")
        if self.event_emitter:
            self.event_emitter.emit_night_action(
                room_id, round_number, kind.value, actor.player_id, target.player_id,
                outcome.value, actor.is_automated,
            )
            if outcome == ActionOutcome.ELIMINATED:
                self.event_emitter.emit_elimination(room_id, target.player_id, "night", round_number)
        if kind == ActionKind.ELIMINATE:
            self.judge.announce(message, room_id)
        return message
