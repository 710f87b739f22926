"""Playback clock tracking.

The playback engine can only be asked for its position asynchronously, and
those answers arrive late and jittery. The tracker keeps a baseline (last
sampled media time + the monotonic instant it was captured) and linearly
extrapolates from it at a fixed tick rate. A slower resync task re-samples the
engine and replaces the baseline, which bounds extrapolation error to roughly
one resync interval.

Two asyncio tasks run while tracking:
- tick: ~30 times a second, extrapolates and reports the time
- resync: samples immediately, then once per interval

Both share one immutable ClockBaseline. Replacing it is a single reference
assignment, so a tick never sees a half-updated baseline.
"""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..config import RESYNC_INTERVAL, SAMPLE_TIMEOUT, TICK_RATE
from ..utils.logging import get_logger
from .models import ClockBaseline

logger = get_logger(__name__)

GetCurrentTime = Callable[[], Awaitable[float]]
TickCallback = Callable[[float], None]


class ClockState(str, Enum):
    IDLE = "idle"
    TRACKING = "tracking"


class PlaybackClock:
    """Smooth, drift-corrected playback time from an async time source."""

    def __init__(
        self,
        get_current_time: GetCurrentTime,
        on_tick: Optional[TickCallback] = None,
        *,
        tick_rate: int = TICK_RATE,
        resync_interval: float = RESYNC_INTERVAL,
        sample_timeout: float = SAMPLE_TIMEOUT,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        self._get_current_time = get_current_time
        self.on_tick = on_tick
        self.tick_interval = 1.0 / tick_rate
        self.resync_interval = resync_interval
        self.sample_timeout = sample_timeout
        self._time_fn = time_fn

        self._baseline = ClockBaseline(media_time=0.0, captured_at=time_fn())
        self._state = ClockState.IDLE
        # Bumped on every start and cancellation; samples started under an older
        # generation are dropped instead of committed.
        self._generation = 0
        self._closed = False
        self._tick_task: Optional[asyncio.Task] = None
        self._resync_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is ClockState.TRACKING

    @property
    def baseline(self) -> ClockBaseline:
        return self._baseline

    def current_time(self) -> float:
        """Extrapolated media time; frozen at the baseline while idle."""
        baseline = self._baseline
        if self._state is ClockState.IDLE:
            return baseline.media_time
        return baseline.extrapolate(self._time_fn())

    # ------------------------
    # Sampling
    # ------------------------
    async def sample(self) -> bool:
        """Ask the engine for its position and commit it as the new baseline.

        Returns False when the sample failed, timed out, or was made stale by
        a cancellation while it was in flight. The previous baseline is kept.
        """
        generation = self._generation
        try:
            media_time = await asyncio.wait_for(
                self._get_current_time(), timeout=self.sample_timeout
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Playback time sample failed, extrapolating: {e!r}")
            return False

        if self._closed or generation != self._generation:
            logger.debug("Discarding playback time sample that arrived after cancel")
            return False

        self._baseline = ClockBaseline(
            media_time=float(media_time), captured_at=self._time_fn()
        )
        return True

    def tick(self) -> float:
        """Extrapolate once and report the result."""
        estimated = self.current_time()
        if self.on_tick is not None:
            self.on_tick(estimated)
        return estimated

    # ------------------------
    # Scheduled tasks
    # ------------------------
    async def _tick_loop(self) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Playback tick callback failed")
            await asyncio.sleep(self.tick_interval)

    def _resync_delay(self, started_at: float) -> float:
        """Time left in the current resync period; sample latency counts toward it."""
        elapsed = self._time_fn() - started_at
        return max(0.0, self.resync_interval - elapsed)

    async def _resync_loop(self) -> None:
        while True:
            started_at = self._time_fn()
            await self.sample()
            await asyncio.sleep(self._resync_delay(started_at))

    def _cancel_tasks(self) -> None:
        self._generation += 1
        for task in (self._tick_task, self._resync_task):
            if task is not None and not task.done():
                task.cancel()
        self._tick_task = None
        self._resync_task = None

    # ------------------------
    # State transitions
    # ------------------------
    def start(self) -> None:
        """Enter TRACKING. Must be called from a running event loop."""
        if self._closed:
            raise RuntimeError("PlaybackClock is closed")
        if self._state is ClockState.TRACKING:
            return

        # Extrapolate from where we stopped until the first sample lands
        self._baseline = ClockBaseline(
            media_time=self._baseline.media_time, captured_at=self._time_fn()
        )
        self._generation += 1
        self._state = ClockState.TRACKING
        self._tick_task = asyncio.create_task(self._tick_loop())
        self._resync_task = asyncio.create_task(self._resync_loop())
        logger.debug("Playback clock tracking")

    async def pause(self) -> float:
        """Enter IDLE, re-sample once and push a final update.

        The displayed position freezes on the engine's real position rather
        than on the last extrapolated guess.
        """
        if self._state is ClockState.TRACKING:
            self._baseline = ClockBaseline(
                media_time=self.current_time(), captured_at=self._time_fn()
            )
        self._cancel_tasks()
        self._state = ClockState.IDLE

        await self.sample()
        final_time = self._baseline.media_time
        if (
            self.on_tick is not None
            and not self._closed
            and self._state is ClockState.IDLE
        ):
            self.on_tick(final_time)
        logger.debug(f"Playback clock idle at {final_time:.2f}s")
        return final_time

    async def set_playing(self, is_playing: bool) -> None:
        if is_playing:
            self.start()
        elif self._state is ClockState.TRACKING:
            await self.pause()

    def cancel(self) -> None:
        """Stop all scheduled work immediately; no further callbacks fire."""
        self._closed = True
        self._cancel_tasks()
        self._state = ClockState.IDLE

    async def close(self) -> None:
        tasks = [t for t in (self._tick_task, self._resync_task) if t is not None]
        self.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
