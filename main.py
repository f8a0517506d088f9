"""
Main entry point: simulate an all-automated game or serve the HTTP API.
"""

import argparse
import os
import random
from dataclasses import replace
from typing import Optional

from dotenv import load_dotenv

from saboteur.config import GameConfig, default_config, load_config
from saboteur.core import GameResult, EligibilityError, StateConflictError, WinEvaluation
from saboteur.service import GameService
from saboteur.web import EventEmitter, RunRecorder

load_dotenv()

HOST_ID = 1


class SaboteurGame:
    """Runs one room of automated players from role assignment to a result."""

    def __init__(self, config: Optional[GameConfig] = None, event_emitter: Optional[EventEmitter] = None,
                 run_name: Optional[str] = None, player_count: Optional[int] = None):
        # Work on a copy so the generated seed never leaks into default_config
        self.config = replace(config or default_config)

        if event_emitter is None and self.config.record_runs:
            run_recorder = RunRecorder(self.config.runs_dir)
            run_name = run_recorder.create_run(run_name)
            event_emitter = EventEmitter(run_recorder)
            print(f"Recording game to: {self.config.runs_dir}/{run_name}/")
        self.event_emitter = event_emitter
        self.run_recorder = event_emitter.run_recorder if event_emitter else None

        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)

        self.service = GameService(
            config=self.config,
            rng=random.Random(self.config.random_seed),
            event_emitter=self.event_emitter,
        )
        self.player_count = player_count or self.config.default_max_players
        room = self.service.rooms.create_room(
            HOST_ID, "host", "Simulated office",
            max_players=self.player_count, is_automated=True,
        )
        self.room_id = room.room_id

    def run_game(self) -> GameResult:
        """
        Run the complete game until win condition or the round limit.
        Returns the final result (ONGOING if the limit was hit).
        """
        self.service.rooms.start_game(self.room_id, HOST_ID)
        assignments = self.service.assign_roles(self.room_id)
        saboteurs = [pid for pid, role in assignments if role.is_saboteur]

        if self.run_recorder:
            self.run_recorder.save_metadata({
                "room_id": self.room_id,
                "players": [pid for pid, _ in assignments],
                "roles": {str(pid): role.value for pid, role in assignments},
                "config": {
                    "max_rounds": self.config.max_rounds,
                    "random_seed": self.config.random_seed,
                },
            })

        print("=" * 60)
        print("SABOTEUR GAME - Starting")
        print("=" * 60)
        print(f"Players: {[pid for pid, _ in assignments]}")
        print(f"Saboteurs: {saboteurs}")
        print("=" * 60)

        evaluation: Optional[WinEvaluation] = None
        for _ in range(self.config.max_rounds):
            round_no = self.service.round_number(self.room_id)
            print(f"\n--- ROUND {round_no} ---")

            self._run_night()
            evaluation = self.service.evaluate_win(self.room_id)
            if evaluation.result.is_terminal:
                break

            self.service.pad_and_auto_vote(self.room_id, round_no, HOST_ID)
            self.service.tally_votes(self.room_id, round_no)
            evaluation = self.service.evaluate_win(self.room_id, HOST_ID)
            if evaluation.result.is_terminal:
                break

        result = evaluation.result if evaluation else GameResult.ONGOING
        self._print_game_summary(result)
        return result

    def _run_night(self) -> None:
        """Automated protector first, then the automated saboteur."""
        for action in (self.service.protect, self.service.eliminate):
            try:
                action(self.room_id)
            except (StateConflictError, EligibilityError) as e:
                # Losing an action is a no-op for the round
                print(f"[SYSTEM] {e.message}")

    def _print_game_summary(self, result: GameResult) -> None:
        print("\n" + "=" * 60)
        if result == GameResult.FACTION_A_WIN:
            print("GAME OVER - EMPLOYEES WIN!")
        elif result == GameResult.FACTION_B_WIN:
            print("GAME OVER - SABOTEURS WIN!")
        else:
            print(f"GAME STOPPED - no winner after {self.config.max_rounds} rounds")
        print("=" * 60)
        for player in self.service.users(self.room_id):
            status = "alive" if player.is_alive else player.life.state.value
            print(f"  {player}: {status}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Saboteur round engine")
    parser.add_argument(
        "--config",
        type=str,
        default=os.getenv("SABOTEUR_CONFIG"),
        help="Path to YAML config file (defaults to $SABOTEUR_CONFIG)"
    )
    parser.add_argument("--serve", action="store_true", help="Serve the HTTP API instead of simulating")
    parser.add_argument("--host", type=str, default=None, help="Server host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Server port (overrides config)")
    parser.add_argument("--players", type=int, default=None, help="Number of simulated players")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (overrides config)")
    parser.add_argument("--run-name", type=str, default=None, help="Name of the recorded run directory")
    parser.add_argument("--quiet", action="store_true", help="Disable judge announcements")
    args = parser.parse_args()

    config = replace(load_config(args.config))
    if args.seed is not None:
        config.random_seed = args.seed
    if args.quiet:
        config.use_judge_announcements = False

    if args.serve:
        from saboteur.web.game_server import GameServer

        event_emitter = None
        if config.record_runs:
            run_recorder = RunRecorder(config.runs_dir)
            run_recorder.create_run(args.run_name)
            event_emitter = EventEmitter(run_recorder)
        service = GameService(config=config, event_emitter=event_emitter)
        server = GameServer(
            service,
            port=args.port or config.server_port,
            host=args.host or config.server_host,
        )
        server.start()
        return

    game = SaboteurGame(config, run_name=args.run_name, player_count=args.players)
    game.run_game()


if __name__ == "__main__":
    main()
