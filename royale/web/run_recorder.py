"""
Run recorder that saves match events to files.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class RunRecorder:
    """Records match events to files in a run directory."""

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.current_run_dir: Optional[Path] = None
        self.events_file: Optional[Path] = None
        self.metadata_file: Optional[Path] = None
        self._lock = Lock()
        self._event_count = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Create a new run directory.

        Args:
            run_name: Optional custom run name. If None, generates timestamp-based name.

        Returns:
            The run name (directory name)
        """
        if run_name is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            run_name = f"match_{timestamp}"

        self.current_run_dir = self.runs_dir / run_name
        self.current_run_dir.mkdir(exist_ok=True)

        self.events_file = self.current_run_dir / "events.jsonl"
        self.metadata_file = self.current_run_dir / "metadata.json"
        self._event_count = 0

        return run_name

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Record an event to the events file (JSONL format).

        Args:
            event_type: Type of event
            data: Event data
        """
        if not self.events_file:
            return

        with self._lock:
            event = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": self._event_count
            }
            self._event_count += 1

            with open(self.events_file, 'a') as f:
                f.write(json.dumps(event) + '\n')

    @property
    def event_count(self) -> int:
        return self._event_count

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        """
        Save run metadata to metadata.json.

        Args:
            metadata: Metadata dictionary
        """
        if not self.metadata_file:
            return

        with self._lock:
            with open(self.metadata_file, 'w') as f:
                json.dump(metadata, f, indent=2)

    def get_run_path(self) -> Optional[Path]:
        """Get the current run directory path."""
        return self.current_run_dir

    def read_events(self, run_name: str, since: int = 0) -> List[Dict[str, Any]]:
        """Events of a run, skipping the first `since` lines."""
        events_file = self.runs_dir / run_name / "events.jsonl"
        events = []
        with open(events_file, 'r') as f:
            for position, line in enumerate(f, start=1):
                if position > since and line.strip():
                    events.append(json.loads(line))
        return events

    def list_runs(self) -> List[Dict[str, Any]]:
        """
        List all available runs.

        Returns:
            List of run info dictionaries
        """
        runs: List[Dict[str, Any]] = []
        if not self.runs_dir.exists():
            return runs

        for run_dir in sorted(self.runs_dir.iterdir(), reverse=True):
            if not run_dir.is_dir():
                continue

            metadata_file = run_dir / "metadata.json"
            events_file = run_dir / "events.jsonl"

            run_info: Dict[str, Any] = {
                "name": run_dir.name,
                "path": str(run_dir),
                "has_metadata": metadata_file.exists(),
                "has_events": events_file.exists(),
            }

            if metadata_file.exists():
                try:
                    with open(metadata_file, 'r') as f:
                        run_info["metadata"] = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    logger.warning("Unreadable metadata in %s: %s", run_dir.name, e)

            # Count events and extract match outcome
            if events_file.exists():
                event_count = 0
                outcome = None
                with open(events_file, 'r') as f:
                    for line in f:
                        if not line.strip():
                            continue
                        event_count += 1
                        try:
                            event = json.loads(line)
                        except json.JSONDecodeError:
                            continue
                        if event.get("event_type") == "match_over":
                            winner = event.get("data", {}).get("winner_id")
                            outcome = f"Winner: {winner}" if winner else "No winner"

                run_info["event_count"] = event_count
                if outcome:
                    run_info["match_outcome"] = outcome

            runs.append(run_info)

        return runs
