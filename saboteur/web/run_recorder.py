"""
Run recorder: one directory per recorded game, holding an append-only
``events.jsonl`` stream and a ``metadata.json`` snapshot.
"""

import json
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional

from ..core.game_engine import GameResult

EVENTS_FILE = "events.jsonl"
METADATA_FILE = "metadata.json"

OUTCOME_LABELS = {
    GameResult.FACTION_A_WIN: "Employees Win",
    GameResult.FACTION_B_WIN: "Saboteurs Win",
}


class RunRecorder:
    """Writes the events of the current run and summarizes past runs."""

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.current_run_dir: Optional[Path] = None
        self._lock = Lock()
        self._sequence = 0

    @property
    def events_file(self) -> Optional[Path]:
        return self.current_run_dir / EVENTS_FILE if self.current_run_dir else None

    @property
    def metadata_file(self) -> Optional[Path]:
        return self.current_run_dir / METADATA_FILE if self.current_run_dir else None

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Start a new run directory and reset the event sequence.

        Args:
            run_name: Directory name; a timestamped name is generated if None

        Returns:
            The run name
        """
        run_name = run_name or datetime.now().strftime("run_%Y%m%d_%H%M%S")
        with self._lock:
            self.current_run_dir = self.runs_dir / run_name
            self.current_run_dir.mkdir(exist_ok=True)
            self._sequence = 0
        return run_name

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Append one event line. Events recorded before ``create_run`` are dropped."""
        if self.current_run_dir is None:
            return

        with self._lock:
            line = json.dumps({
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": self._sequence,
            })
            self._sequence += 1
            with open(self.events_file, 'a') as f:
                f.write(line + '\n')

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        if self.current_run_dir is None:
            return
        with self._lock:
            with open(self.metadata_file, 'w') as f:
                json.dump(metadata, f, indent=2)

    def get_run_path(self) -> Optional[Path]:
        return self.current_run_dir

    def load_events(self, run_name: str) -> Iterator[Dict[str, Any]]:
        """Yield the recorded events of a run in sequence order."""
        events_file = self.runs_dir / run_name / EVENTS_FILE
        if not events_file.exists():
            return
        with open(events_file, 'r') as f:
            for line in f:
                if line.strip():
                    yield json.loads(line)

    def list_runs(self) -> List[Dict[str, Any]]:
        """List recorded runs, newest name first, with event counts and outcome."""
        if not self.runs_dir.exists():
            return []
        return [
            self._summarize(run_dir)
            for run_dir in sorted(self.runs_dir.iterdir(), reverse=True)
            if run_dir.is_dir()
        ]

    def _summarize(self, run_dir: Path) -> Dict[str, Any]:
        metadata_file = run_dir / METADATA_FILE
        summary: Dict[str, Any] = {
            "name": run_dir.name,
            "path": str(run_dir),
            "has_metadata": metadata_file.exists(),
            "has_events": (run_dir / EVENTS_FILE).exists(),
        }
        if summary["has_metadata"]:
            with open(metadata_file, 'r') as f:
                summary["metadata"] = json.load(f)

        if summary["has_events"]:
            event_count = 0
            for event in self.load_events(run_dir.name):
                event_count += 1
                if event.get("event_type") == "game_over":
                    result = GameResult(event.get("data", {}).get("result", 0))
                    summary["game_outcome"] = OUTCOME_LABELS.get(result, "Unfinished")
            summary["event_count"] = event_count
        return summary
