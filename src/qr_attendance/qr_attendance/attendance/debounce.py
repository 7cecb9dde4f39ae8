from __future__ import annotations

import threading
import time
from typing import Callable

from ..core.constants import DEFAULT_SCAN_COOLDOWN_SECONDS


class ScanDebouncer:
    """Drops repeats of the same QR read from the same station within a cooldown.

    Camera scanners report one physical code many times per second. This is a
    station-level filter only; the resolver stays correct without it.

    Station ids come from the client, so entries older than the cooldown are
    swept out at most once per cooldown window.
    """

    def __init__(
        self,
        cooldown_seconds: float = DEFAULT_SCAN_COOLDOWN_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._cooldown = float(cooldown_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._last: dict[str, tuple[str, float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._last)

    def accept(self, station_id: str, raw_payload: str) -> bool:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self._cooldown:
                self._sweep(now)
            last = self._last.get(station_id)
            if last is not None and last[0] == raw_payload and now - last[1] < self._cooldown:
                return False
            self._last[station_id] = (raw_payload, now)
            return True

    def _sweep(self, now: float) -> None:
        self._last = {
            station: entry for station, entry in self._last.items() if now - entry[1] < self._cooldown
        }
        self._last_sweep = now
