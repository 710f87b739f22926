"""Core lyrics synchronization modules."""

from .models import (
    CalibrationResult,
    CaptionSegment,
    ClockBaseline,
    FetchedLyrics,
    LrcCandidate,
    LyricLine,
    LyricsState,
    LyricWord,
    StoredLyrics,
    SyncedLineState,
    SyncSnapshot,
    VideoInfo,
)
from .calibration import Calibrator, calibrate
from .clock import ClockState, PlaybackClock
from .lrc import get_lrc_duration, parse_lrc
from .resolver import LineResolver, resolve
from .session import KaraokeSession, SelectionHandoff

__all__ = [
    "CalibrationResult",
    "CaptionSegment",
    "ClockBaseline",
    "FetchedLyrics",
    "LrcCandidate",
    "LyricLine",
    "LyricsState",
    "LyricWord",
    "StoredLyrics",
    "SyncedLineState",
    "SyncSnapshot",
    "VideoInfo",
    "Calibrator",
    "calibrate",
    "ClockState",
    "PlaybackClock",
    "get_lrc_duration",
    "parse_lrc",
    "LineResolver",
    "resolve",
    "KaraokeSession",
    "SelectionHandoff",
]
