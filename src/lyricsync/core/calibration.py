"""Auto-calibration of the lyrics offset against the video clock.

Two layers, tried in order:

Layer 1 (primary): caption anchoring
- Find when the first vocal caption starts in the video
- Compare with the first lyric timestamp

Layer 2 (fallback): duration comparison
- Compare the lyrics' track duration with the video duration
- The difference is assumed to be mostly intro footage

The manual offset is caller-owned and always added on top.
"""

import math
from typing import Optional, Sequence, Tuple

from ..config import DURATION_DIFF_THRESHOLD, INTRO_SLACK, OFFSET_STEP_MS
from ..utils.logging import get_logger
from .captions import find_first_vocal_timestamp
from .models import CalibrationResult, CaptionSegment, LyricLine

logger = get_logger(__name__)


def _round_half_up(ms: float) -> int:
    """Round to the nearest millisecond, halves toward +infinity."""
    return math.floor(ms + 0.5)


def compute_auto_offset(
    lines: Sequence[LyricLine],
    video_duration: float,
    track_duration: float = 0.0,
    captions: Sequence[CaptionSegment] = (),
) -> Tuple[int, bool]:
    """Return (auto_offset_ms, is_calibrated)."""
    if not lines or video_duration <= 0:
        return 0, False

    if captions:
        first_vocal = find_first_vocal_timestamp(captions)
        if first_vocal is not None:
            offset_ms = _round_half_up((lines[0].time - first_vocal) * 1000)
            logger.debug(
                f"Caption anchor: first lyric {lines[0].time:.2f}s, "
                f"first vocal {first_vocal:.2f}s -> {offset_ms}ms"
            )
            return offset_ms, True

    if track_duration > 0:
        diff = video_duration - track_duration
        if diff > DURATION_DIFF_THRESHOLD:
            intro = max(0.0, diff - INTRO_SLACK)
            offset_ms = _round_half_up(-intro * 1000)
            logger.debug(
                f"Duration fallback: video {video_duration:.1f}s vs track "
                f"{track_duration:.1f}s -> {offset_ms}ms"
            )
            return offset_ms, True

    return 0, True


def calibrate(
    lines: Sequence[LyricLine],
    video_duration: float,
    track_duration: float = 0.0,
    captions: Sequence[CaptionSegment] = (),
    manual_offset_ms: int = 0,
) -> CalibrationResult:
    """Compute the full calibration result. Pure function of its inputs."""
    auto_offset_ms, is_calibrated = compute_auto_offset(
        lines, video_duration, track_duration, captions
    )
    return CalibrationResult(
        auto_offset_ms=auto_offset_ms,
        is_calibrated=is_calibrated,
        manual_offset_ms=manual_offset_ms,
    )


class Calibrator:
    """Keeps the automatic offset current while preserving the manual one."""

    def __init__(self, step_ms: int = OFFSET_STEP_MS):
        self.step_ms = step_ms
        self._manual_offset_ms = 0
        self._inputs: Optional[tuple] = None
        self._auto: Tuple[int, bool] = (0, False)

    def update(
        self,
        lines: Sequence[LyricLine],
        video_duration: float,
        track_duration: float = 0.0,
        captions: Sequence[CaptionSegment] = (),
    ) -> CalibrationResult:
        """Recompute the automatic offset if any input changed."""
        inputs = (tuple(lines), video_duration, track_duration, tuple(captions))
        if inputs != self._inputs:
            self._inputs = inputs
            self._auto = compute_auto_offset(
                lines, video_duration, track_duration, captions
            )
            if self._auto[1]:
                logger.info(f"Auto offset: {self._auto[0]}ms")
        return self.result

    @property
    def result(self) -> CalibrationResult:
        auto_offset_ms, is_calibrated = self._auto
        return CalibrationResult(
            auto_offset_ms=auto_offset_ms,
            is_calibrated=is_calibrated,
            manual_offset_ms=self._manual_offset_ms,
        )

    @property
    def manual_offset_ms(self) -> int:
        return self._manual_offset_ms

    @property
    def total_offset_ms(self) -> int:
        return self.result.total_offset_ms

    def set_offset(self, offset_ms: int) -> None:
        self._manual_offset_ms = int(offset_ms)

    def adjust_offset(self, delta_ms: Optional[int] = None) -> int:
        """Nudge the manual offset by delta_ms (default: one step)."""
        self._manual_offset_ms += self.step_ms if delta_ms is None else delta_ms
        return self._manual_offset_ms

    def reset_offset(self) -> None:
        self._manual_offset_ms = 0
