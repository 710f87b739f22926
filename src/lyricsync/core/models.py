"""Data models for synchronized lyrics and playback state."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class LyricWord:
    """A single word with timing information."""

    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def validate(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError("Word end_time must be >= start_time")


@dataclass(frozen=True)
class LyricLine:
    """A timestamped lyric line with its word-level sub-timeline."""

    time: float
    end_time: float
    text: str
    words: Tuple[LyricWord, ...] = ()

    @property
    def duration(self) -> float:
        return self.end_time - self.time

    def validate(self) -> None:
        if self.end_time < self.time:
            raise ValueError("Line end_time must be >= time")
        for w in self.words:
            w.validate()
            if w.start_time < self.time or w.end_time > self.end_time:
                raise ValueError("Word timing outside line bounds")


@dataclass(frozen=True)
class CaptionSegment:
    """An independently timed caption, used as a calibration anchor."""

    start_ms: int
    duration_ms: int
    text: str

    @property
    def start(self) -> float:
        return self.start_ms / 1000


@dataclass(frozen=True)
class CalibrationResult:
    """Offset between lyric timestamps and the video clock.

    A positive offset means lyric timestamps are later than the vocal onset
    in the video: synced time = playback time + total_offset_ms / 1000.
    """

    auto_offset_ms: int = 0
    is_calibrated: bool = False
    manual_offset_ms: int = 0

    @property
    def total_offset_ms(self) -> int:
        return self.auto_offset_ms + self.manual_offset_ms


@dataclass(frozen=True)
class ClockBaseline:
    """Last authoritative media time and the monotonic instant it was taken."""

    media_time: float
    captured_at: float

    def extrapolate(self, now: float) -> float:
        return self.media_time + (now - self.captured_at)


@dataclass(frozen=True)
class SyncedLineState:
    """Which line and word are active, and how far through the line we are."""

    current_line_index: int = -1
    active_word_index: int = -1
    word_progress: float = 0.0


@dataclass(frozen=True)
class SyncSnapshot:
    """Full resolver output for one tracker tick."""

    state: SyncedLineState
    current_time: float
    synced_time: float
    current_line: Optional[LyricLine] = None
    next_line: Optional[LyricLine] = None

    @property
    def current_line_index(self) -> int:
        return self.state.current_line_index

    @property
    def active_word_index(self) -> int:
        return self.state.active_word_index

    @property
    def word_progress(self) -> float:
        return self.state.word_progress


@dataclass(frozen=True)
class LrcCandidate:
    """A search result from LRCLIB carrying synced lyrics."""

    id: int
    track_name: str
    artist_name: str
    album_name: str = ""
    duration: float = 0.0
    synced_lyrics: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "LrcCandidate":
        return cls(
            id=int(data.get("id") or 0),
            track_name=data.get("trackName") or "Unknown",
            artist_name=data.get("artistName") or "Unknown",
            album_name=data.get("albumName") or "",
            duration=float(data.get("duration") or 0),
            synced_lyrics=data.get("syncedLyrics") or "",
        )

    @property
    def display_title(self) -> str:
        return f"{self.artist_name} - {self.track_name}"


@dataclass(frozen=True)
class VideoInfo:
    """Metadata for a YouTube video."""

    video_id: str
    title: str = ""
    duration: float = 0.0
    uploader: str = ""
    caption_url: Optional[str] = None


# =============================================================================
# Lyrics sources
# =============================================================================


@dataclass(frozen=True)
class StoredLyrics:
    """Lyrics already in hand, e.g. picked from a search result."""

    lyrics_text: str
    duration: float = 0.0
    track_name: str = ""
    artist_name: str = ""

    @classmethod
    def from_candidate(cls, candidate: LrcCandidate) -> "StoredLyrics":
        return cls(
            lyrics_text=candidate.synced_lyrics,
            duration=candidate.duration,
            track_name=candidate.track_name,
            artist_name=candidate.artist_name,
        )


@dataclass(frozen=True)
class FetchedLyrics:
    """Lyrics to be looked up from the video's own metadata."""

    video_id: str


LyricsSource = Union[StoredLyrics, FetchedLyrics]


@dataclass
class LyricsState:
    """Lyrics resolved from any source into one uniform shape."""

    lines: Tuple[LyricLine, ...] = ()
    error: Optional[str] = None
    raw_title: str = ""
    lrc_duration: float = 0.0
    track_duration: float = 0.0
    caption_segments: List[CaptionSegment] = field(default_factory=list)
    source: str = ""

    @property
    def has_lyrics(self) -> bool:
        return bool(self.lines)
