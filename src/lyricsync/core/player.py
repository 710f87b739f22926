"""Playback engine capability surface.

The sync core only needs an async position query plus basic transport
controls. Any embeddable player can be wrapped to satisfy PlaybackEngine.
"""

import asyncio
import time
from typing import Callable, Optional, Protocol, runtime_checkable

from ..exceptions import PlaybackError


@runtime_checkable
class PlaybackEngine(Protocol):
    """Minimal player surface the sync core depends on."""

    @property
    def is_playing(self) -> bool: ...

    @property
    def duration(self) -> float: ...

    async def get_current_time(self) -> float: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, time: float) -> None: ...

    def set_volume(self, volume: int) -> None: ...


class SimulatedPlayer:
    """A player whose position advances with the wall clock while playing.

    Used by the CLI follow-along mode and by tests. `latency` delays every
    position query, and `rate` lets the media clock run faster or slower
    than the wall clock.
    """

    def __init__(
        self,
        duration: float,
        *,
        latency: float = 0.0,
        rate: float = 1.0,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        if duration < 0:
            raise PlaybackError("Duration cannot be negative")
        self._duration = duration
        self.latency = latency
        self.rate = rate
        self.volume = 80
        self.error: Optional[str] = None
        self._time_fn = time_fn
        self._position = 0.0
        self._started_at: Optional[float] = None

    @property
    def is_playing(self) -> bool:
        return self._started_at is not None and not self.ended

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        if self._started_at is None:
            return self._position
        elapsed = (self._time_fn() - self._started_at) * self.rate
        return min(self._duration, self._position + elapsed)

    @property
    def ended(self) -> bool:
        return self.position >= self._duration

    async def get_current_time(self) -> float:
        if self.error:
            raise PlaybackError(self.error)
        if self.latency:
            await asyncio.sleep(self.latency)
        return self.position

    def play(self) -> None:
        if self._started_at is None:
            self._started_at = self._time_fn()

    def pause(self) -> None:
        self._position = self.position
        self._started_at = None

    def seek(self, time: float) -> None:
        playing = self._started_at is not None
        self._position = max(0.0, min(self._duration, time))
        self._started_at = self._time_fn() if playing else None

    def set_volume(self, volume: int) -> None:
        self.volume = max(0, min(100, int(volume)))
