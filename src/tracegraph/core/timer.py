"""Stopwatch used to time traced calls."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime

DEFAULT_TIMER_ID = "default"


@dataclass
class _Lap:
    started: float = 0.0
    stopped: float = 0.0
    start_date: datetime | None = None
    end_date: datetime | None = None


class ExecutionTimer:
    """Measures one or more named executions.

    Durations come from ``time.perf_counter``; the start and end dates are
    wall-clock UTC timestamps taken at the same moments.
    """

    def __init__(self, execution_id: str = DEFAULT_TIMER_ID) -> None:
        self._laps: dict[str, _Lap] = {execution_id: _Lap()}

    def start(self, execution_id: str = DEFAULT_TIMER_ID) -> None:
        self._laps[execution_id] = _Lap(started=time.perf_counter(), start_date=datetime.now(UTC))

    def stop(self, execution_id: str = DEFAULT_TIMER_ID) -> None:
        lap = self._laps.get(execution_id)
        if lap is None or lap.start_date is None:
            return
        lap.stopped = time.perf_counter()
        lap.end_date = datetime.now(UTC)

    def get_duration(self, execution_id: str = DEFAULT_TIMER_ID) -> float | None:
        """Duration in milliseconds. Stops a still-running timer."""
        lap = self._laps.get(execution_id)
        if lap is None or lap.start_date is None:
            return None
        if lap.end_date is None:
            self.stop(execution_id)
        return (lap.stopped - lap.started) * 1000.0

    def get_start_date(self, execution_id: str = DEFAULT_TIMER_ID) -> datetime | None:
        lap = self._laps.get(execution_id)
        return lap.start_date if lap is not None else None

    def get_end_date(self, execution_id: str = DEFAULT_TIMER_ID) -> datetime | None:
        lap = self._laps.get(execution_id)
        return lap.end_date if lap is not None else None

    def get_elapsed_time(self, execution_id: str = DEFAULT_TIMER_ID) -> str | None:
        duration = self.get_duration(execution_id)
        if duration is None:
            return None
        return format_elapsed(duration)


def format_elapsed(duration_ms: float) -> str:
    """Render a millisecond duration as e.g. ``"1 minute 2 seconds 5 ms"``."""
    milliseconds = int(duration_ms % 1000)
    seconds = int(duration_ms // 1000 % 60)
    minutes = int(duration_ms // (1000 * 60) % 60)
    hours = int(duration_ms // (1000 * 60 * 60) % 24)

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes > 1 else ''}")
    if seconds > 0:
        parts.append(f"{seconds} second{'s' if seconds > 1 else ''}")
    if milliseconds > 0 or not parts:
        parts.append(f"{milliseconds} ms")
    return " ".join(parts)
