"""
Tests for run recording of game events.
"""

import json

from saboteur.config.game_config import GameConfig
from saboteur.web import EventEmitter, RunRecorder

from main import SaboteurGame


def _events(run_dir):
    return list(RunRecorder(str(run_dir.parent)).load_events(run_dir.name))


def test_events_written_in_sequence(tmp_path):
    recorder = RunRecorder(str(tmp_path))
    recorder.create_run("unit")
    emitter = EventEmitter(recorder)

    emitter.emit_vote(1, 1, 5, 2)
    emitter.emit_elimination(1, 2, "vote", 1)

    events = _events(tmp_path / "unit")
    assert [e["event_type"] for e in events] == ["vote", "elimination"]
    assert [e["sequence"] for e in events] == [0, 1]
    assert events[1]["data"] == {"room_id": 1, "player_id": 2, "reason": "vote", "round": 1}


def test_events_dropped_before_run(tmp_path):
    recorder = RunRecorder(str(tmp_path))
    recorder.record_event("vote", {})
    assert list(tmp_path.iterdir()) == []


def test_simulated_game_is_recorded(tmp_path):
    config = GameConfig(
        use_judge_announcements=True,
        record_runs=True,
        runs_dir=str(tmp_path),
        max_rounds=50,
        random_seed=3,
    )
    game = SaboteurGame(config, run_name="sim")
    result = game.run_game()

    run_dir = tmp_path / "sim"
    metadata = json.loads((run_dir / "metadata.json").read_text())
    assert metadata["config"]["random_seed"] == 3
    assert len(metadata["players"]) == 6

    event_types = [e["event_type"] for e in _events(run_dir)]
    assert event_types.count("roles_assigned") == 1
    assert "night_action" in event_types
    assert "announcement" in event_types
    assert event_types[-1] == "game_over" or "game_over" not in event_types

    runs = RunRecorder(str(tmp_path)).list_runs()
    assert runs[0]["name"] == "sim"
    if result.is_terminal:
        assert runs[0]["game_outcome"] in {"Employees Win", "Saboteurs Win"}
