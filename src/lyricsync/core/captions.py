"""Caption parsing and vocal-onset anchoring.

Captions are timed independently of the lyrics and are usually denser and
less accurate. They are used to find when singing starts in the video, which
anchors the calibration offset.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import requests  # type: ignore[import-untyped]

from ..exceptions import FetchError
from ..utils.logging import get_logger
from .fetch import fetch_json
from .models import CaptionSegment, LyricLine, LyricWord, VideoInfo

logger = get_logger(__name__)

_FILLER_TEXTS = {"music", "applause"}


def parse_caption_events(events: Iterable[Dict[str, Any]]) -> List[CaptionSegment]:
    """Turn raw caption events (json3 format) into caption segments."""
    segments: List[CaptionSegment] = []
    for event in events:
        segs = event.get("segs") or []
        if not segs:
            continue
        text = "".join(s.get("utf8") or "" for s in segs).strip()
        if not text or text == "\n":
            continue
        segments.append(
            CaptionSegment(
                start_ms=int(event.get("tStartMs") or 0),
                duration_ms=int(event.get("dDurationMs") or 0),
                text=text,
            )
        )
    return segments


def _is_filler(text: str) -> bool:
    """Bracketed annotations like [Music] and very short captions."""
    text = text.lower().strip()
    return (
        text.startswith("[")
        or text.startswith("(")
        or text in _FILLER_TEXTS
        or len(text) < 2
    )


def find_first_vocal_timestamp(captions: Sequence[CaptionSegment]) -> Optional[float]:
    """Return when singing starts (seconds), judged from captions.

    Falls back to the first caption when every caption looks like filler.
    """
    if not captions:
        return None

    for caption in captions:
        if not _is_filler(caption.text):
            return caption.start
    return captions[0].start


def captions_to_lines(captions: Sequence[CaptionSegment]) -> Tuple[LyricLine, ...]:
    """Convert caption segments into display lines with an even word split."""
    lines: List[LyricLine] = []
    for cap in captions:
        start = cap.start_ms / 1000
        duration = cap.duration_ms / 1000
        text = " ".join(cap.text.split())
        word_texts = text.split()
        word_duration = duration / len(word_texts) if word_texts else 0.0

        words = tuple(
            LyricWord(
                text=word,
                start_time=start + i * word_duration,
                end_time=start + (i + 1) * word_duration,
            )
            for i, word in enumerate(word_texts)
        )
        lines.append(LyricLine(time=start, end_time=start + duration, text=text, words=words))
    return tuple(lines)


def fetch_caption_events(
    video_info: VideoInfo, session: Optional[requests.Session] = None
) -> List[Dict[str, Any]]:
    """Fetch raw caption events for a video. Returns [] on any failure."""
    if not video_info.caption_url:
        logger.debug(f"No caption track for {video_info.video_id}")
        return []

    try:
        data = fetch_json(video_info.caption_url, session=session, max_retries=1)
    except FetchError as e:
        logger.debug(f"Caption fetch failed for {video_info.video_id}: {e}")
        return []

    events = data.get("events") if isinstance(data, dict) else None
    if not isinstance(events, list):
        return []
    logger.debug(f"Fetched {len(events)} caption events for {video_info.video_id}")
    return events
