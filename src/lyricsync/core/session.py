"""Karaoke session: lyrics loading, calibration and playback tracking.

A session owns one player, resolves a lyrics source into a LyricsState,
keeps the calibration offset current, and drives the line resolver from the
playback clock.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

from ..config import (
    FETCH_FAILED_MESSAGE,
    LRC_DURATION_BUFFER,
    NO_LYRICS_MESSAGE,
    NO_VIDEO_ID_MESSAGE,
)
from ..exceptions import LyricsError, LyricSyncError
from ..utils.logging import get_logger
from .calibration import Calibrator
from .captions import captions_to_lines, fetch_caption_events, parse_caption_events
from .clock import PlaybackClock
from .lrc import get_lrc_duration, parse_lrc
from .lrclib import LyricsFetcher
from .models import (
    CalibrationResult,
    FetchedLyrics,
    LyricsSource,
    LyricsState,
    StoredLyrics,
    SyncSnapshot,
    VideoInfo,
)
from .player import PlaybackEngine
from .resolver import LineResolver
from .youtube_metadata import get_video_info

logger = get_logger(__name__)

VideoInfoFn = Callable[[str], VideoInfo]
CaptionFn = Callable[[VideoInfo], List[Dict[str, Any]]]


class SelectionHandoff:
    """Carries at most one picked song from the search view to the player.

    Set on selection, read once by the destination, cleared on read.
    """

    def __init__(self) -> None:
        self._pending: Optional[StoredLyrics] = None

    def offer(self, selection: StoredLyrics) -> None:
        self._pending = selection

    def take(self) -> Optional[StoredLyrics]:
        selection, self._pending = self._pending, None
        return selection

    @property
    def has_pending(self) -> bool:
        return self._pending is not None


def source_for(video_id: str, handoff: Optional[SelectionHandoff] = None) -> LyricsSource:
    """Stored lyrics when a selection was handed over, otherwise fetch by id."""
    selection = handoff.take() if handoff is not None else None
    if selection is not None:
        return selection
    return FetchedLyrics(video_id=video_id)


def load_stored_lyrics(source: StoredLyrics) -> LyricsState:
    lines = parse_lrc(source.lyrics_text)
    title = (
        f"{source.artist_name} - {source.track_name}"
        if source.artist_name and source.track_name
        else source.track_name
    )
    if not lines:
        return LyricsState(error=NO_LYRICS_MESSAGE, raw_title=title, source="stored")
    return LyricsState(
        lines=lines,
        raw_title=title,
        lrc_duration=get_lrc_duration(lines) + LRC_DURATION_BUFFER,
        track_duration=source.duration,
        source="stored",
    )


async def resolve_lyrics_source(
    source: LyricsSource,
    fetcher: LyricsFetcher,
    *,
    video_info_fn: VideoInfoFn = get_video_info,
    caption_fn: CaptionFn = fetch_caption_events,
    caption_fallback: bool = False,
    force: bool = False,
) -> LyricsState:
    """Resolve either lyrics source into one LyricsState.

    Never raises for missing data or network trouble; the outcome is
    reported through LyricsState.error instead.
    """
    if isinstance(source, StoredLyrics):
        return load_stored_lyrics(source)

    if not source.video_id:
        return LyricsState(error=NO_VIDEO_ID_MESSAGE)

    try:
        info = await asyncio.to_thread(video_info_fn, source.video_id)
    except LyricSyncError as e:
        logger.warning(f"Could not read video metadata: {e}")
        return LyricsState(error=FETCH_FAILED_MESSAGE, source="lrclib")

    events_task = asyncio.create_task(asyncio.to_thread(caption_fn, info))
    try:
        candidate = await fetcher.fetch(
            info.video_id, info.title, info.duration, force=force
        )
    except LyricsError as e:
        logger.warning(f"{e}")
        events_task.cancel()
        return LyricsState(error=FETCH_FAILED_MESSAGE, raw_title=info.title, source="lrclib")

    segments = parse_caption_events(await events_task)
    lines = parse_lrc(candidate.synced_lyrics) if candidate else ()
    source_name = "lrclib"

    if not lines and caption_fallback and segments:
        logger.info("No synced lyrics; showing captions instead")
        lines = captions_to_lines(segments)
        source_name = "captions"

    if not lines:
        return LyricsState(
            error=NO_LYRICS_MESSAGE,
            raw_title=info.title,
            caption_segments=segments,
            source=source_name,
        )

    logger.info(f"Loaded {len(lines)} lyric lines for {info.video_id}")
    return LyricsState(
        lines=lines,
        raw_title=info.title,
        lrc_duration=get_lrc_duration(lines) + LRC_DURATION_BUFFER,
        track_duration=candidate.duration if candidate else 0.0,
        caption_segments=segments,
        source=source_name,
    )


class KaraokeSession:
    """Wires a player to the lyrics, calibration and resolver."""

    def __init__(
        self,
        player: PlaybackEngine,
        *,
        on_change: Optional[Callable[[SyncSnapshot], None]] = None,
        fetcher: Optional[LyricsFetcher] = None,
        calibrator: Optional[Calibrator] = None,
        **clock_options: Any,
    ):
        self.player = player
        self.fetcher = fetcher or LyricsFetcher()
        self.calibrator = calibrator or Calibrator()
        self.resolver = LineResolver(on_change=on_change)
        self.clock = PlaybackClock(
            player.get_current_time, self._on_tick, **clock_options
        )
        self.lyrics = LyricsState()
        self.player_error: Optional[str] = None
        self._source: Optional[LyricsSource] = None

    # ------------------------
    # Lyrics
    # ------------------------
    async def load_lyrics(
        self, source: Optional[LyricsSource] = None, *, force: bool = False, **kwargs: Any
    ) -> LyricsState:
        """Load lyrics from a source; with force, retry the previous source."""
        if source is not None:
            self._source = source
        if self._source is None:
            raise LyricsError("No lyrics source to load")

        self.lyrics = await resolve_lyrics_source(
            self._source, self.fetcher, force=force, **kwargs
        )
        self.resolver.set_lines(self.lyrics.lines)
        self.recalibrate()
        return self.lyrics

    def recalibrate(self) -> CalibrationResult:
        return self.calibrator.update(
            self.lyrics.lines,
            self.player.duration,
            self.lyrics.track_duration,
            self.lyrics.caption_segments,
        )

    @property
    def calibration(self) -> CalibrationResult:
        return self.calibrator.result

    # ------------------------
    # Manual offset
    # ------------------------
    def adjust_offset(self, delta_ms: Optional[int] = None) -> int:
        offset = self.calibrator.adjust_offset(delta_ms)
        self._refresh()
        return offset

    def reset_offset(self) -> None:
        self.calibrator.reset_offset()
        self._refresh()

    # ------------------------
    # Playback
    # ------------------------
    def _on_tick(self, current_time: float) -> None:
        # Embedded players may report their duration only once playback starts
        self.recalibrate()
        self.resolver.update(current_time, self.calibrator.total_offset_ms)

    def _refresh(self) -> None:
        self._on_tick(self.clock.current_time())

    async def play(self) -> None:
        self.recalibrate()
        self.player.play()
        self.clock.start()

    async def pause(self) -> None:
        self.player.pause()
        await self.clock.pause()

    async def toggle(self) -> None:
        if self.clock.is_tracking:
            await self.pause()
        else:
            await self.play()

    async def sync_playing_state(self) -> None:
        """Follow a play/pause change that happened in the player itself."""
        await self.clock.set_playing(self.player.is_playing)

    def report_player_error(self, message: str) -> None:
        self.player_error = message
        self.clock.cancel()

    @property
    def display_error(self) -> Optional[str]:
        """Player errors come first: a broken video outranks missing lyrics."""
        return self.player_error or self.lyrics.error

    @property
    def snapshot(self) -> SyncSnapshot:
        return self.resolver.snapshot

    async def close(self) -> None:
        await self.clock.close()
