"""
Tick scheduler driving the periodic match tasks.

All periodic work (zone shrink, zone damage, display refresh, countdown) is
registered here under a name so each task can be started, rescheduled and
cancelled on its own. The scheduler does not own a thread; whoever drives the
match calls tick() at a fixed rate.
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# One tick is ~50ms of match time
TICKS_PER_SECOND = 20


@dataclass
class ScheduledTask:
    """A named periodic registration."""
    name: str
    callback: Callable[[], None]
    interval: int
    next_run: int
    runs: int = 0


class TickScheduler:
    """Runs named periodic callbacks on a shared tick counter."""

    def __init__(self):
        self.current_tick = 0
        self._tasks: Dict[str, ScheduledTask] = {}
        self._lock = Lock()

    def schedule(self, name: str, callback: Callable[[], None], interval: int,
                 delay: Optional[int] = None) -> bool:
        """
        Register a periodic task.

        Args:
            name: Unique task name
            callback: Called with no arguments every `interval` ticks
            interval: Ticks between runs (clamped to at least 1)
            delay: Ticks before the first run (defaults to `interval`)

        Returns:
            False if a task with this name is already registered
        """
        interval = max(1, int(interval))
        first_delay = interval if delay is None else max(0, int(delay))
        with self._lock:
            if name in self._tasks:
                return False
            self._tasks[name] = ScheduledTask(
                name=name,
                callback=callback,
                interval=interval,
                next_run=self.current_tick + first_delay,
            )
        return True

    def reschedule(self, name: str, interval: int) -> bool:
        """Change a task's interval. The next run is pulled in if it would now be late."""
        interval = max(1, int(interval))
        with self._lock:
            task = self._tasks.get(name)
            if task is None:
                return False
            task.interval = interval
            task.next_run = min(task.next_run, self.current_tick + interval)
        return True

    def cancel(self, name: str) -> bool:
        with self._lock:
            return self._tasks.pop(name, None) is not None

    def cancel_all(self) -> None:
        with self._lock:
            self._tasks.clear()

    def is_scheduled(self, name: str) -> bool:
        with self._lock:
            return name in self._tasks

    def get_interval(self, name: str) -> Optional[int]:
        with self._lock:
            task = self._tasks.get(name)
            return task.interval if task else None

    def task_names(self) -> List[str]:
        with self._lock:
            return list(self._tasks)

    def tick(self) -> int:
        """
        Advance one tick and run every task that is due.

        Returns:
            Number of callbacks run
        """
        with self._lock:
            self.current_tick += 1
            due = [t for t in self._tasks.values() if t.next_run <= self.current_tick]

        ran = 0
        for task in due:
            with self._lock:
                # An earlier callback this tick may have cancelled or replaced it
                if self._tasks.get(task.name) is not task:
                    continue
                task.next_run = self.current_tick + task.interval
                task.runs += 1

            try:
                task.callback()
            except Exception:
                logger.exception("Scheduled task '%s' failed on tick %d", task.name, self.current_tick)
            ran += 1
        return ran

    def advance(self, ticks: int) -> None:
        """Run `ticks` consecutive ticks."""
        for _ in range(ticks):
            self.tick()
