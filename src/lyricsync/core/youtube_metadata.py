"""YouTube metadata extraction helpers."""

import re
from typing import Any, Dict, Optional, Tuple

from ..config import CAPTION_LANGUAGE
from ..exceptions import LyricSyncError
from ..utils.logging import get_logger
from .models import VideoInfo

logger = get_logger(__name__)

_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.|m\.)?youtube\.com/watch\?(?:.*&)?v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
]

_TITLE_NOISE_PATTERNS = [
    r"\s*[(\[]Official\s*(Music\s*)?Video[)\]]",
    r"\s*[(\[]Official\s*Audio[)\]]",
    r"\s*[(\[]Official\s*Lyric\s*Video[)\]]",
    r"\s*[(\[]Lyric\s*Video[)\]]",
    r"\s*[(\[]Lyrics?[)\]]",
    r"\s*[(\[]Audio[)\]]",
    r"\s*[(\[](HD|HQ|4K)[)\]]",
    r"\s*\(4K\s*Remaster\)",
    r"\s*\(Clip\s*Officiel\)",
    r"\s*\(Clip\s*Video\)",
    r"\s*\(Video\s*Clip\)",
    r"\s*【[^】]*】",
    r"\s+(ft|feat)\.?\s+.+$",
]

_TITLE_SEPARATORS = [" - ", " – ", " — ", " | "]


def extract_video_id(url: str) -> Optional[str]:
    """Extract the 11-character YouTube video id from a URL, or None."""
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def is_valid_youtube_url(url: str) -> bool:
    return extract_video_id(url) is not None


def parse_youtube_title(video_title: str) -> Tuple[str, str]:
    """Parse (artist, track) from a YouTube video title.

    Returns an empty artist when the title has no recognizable separator.
    """
    if not video_title:
        return "", ""

    cleaned = video_title
    for pattern in _TITLE_NOISE_PATTERNS:
        cleaned = re.sub(pattern, "", cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.strip()

    for sep in _TITLE_SEPARATORS:
        if sep in cleaned:
            artist, _, track = cleaned.partition(sep)
            if artist.strip() and track.strip():
                return artist.strip(), track.strip()

    return "", cleaned


def build_search_query(video_title: str) -> Tuple[str, str]:
    """Return (query, track_name) for a lyrics search from a video title."""
    artist, track = parse_youtube_title(video_title)
    query = f"{artist} {track}" if artist else video_title
    return query, track


def _pick_caption_url(info: Dict[str, Any], language: str) -> Optional[str]:
    """Find a json3 caption track URL, preferring uploaded over automatic."""
    for key in ("subtitles", "automatic_captions"):
        tracks = info.get(key) or {}
        for lang, formats in tracks.items():
            if lang != language and not lang.startswith(f"{language}-"):
                continue
            for fmt in formats or []:
                if fmt.get("ext") == "json3" and fmt.get("url"):
                    return fmt["url"]
    return None


def _load_yt_dlp_module():
    try:
        import yt_dlp

        return yt_dlp
    except ImportError as e:
        raise LyricSyncError("yt_dlp required for YouTube metadata") from e


def get_video_info(video_id: str, language: str = CAPTION_LANGUAGE) -> VideoInfo:
    """Get YouTube video metadata without downloading."""
    yt_dlp = _load_yt_dlp_module()

    ydl_opts = {
        "quiet": True,
        "no_warnings": True,
        "extract_flat": False,
        "skip_download": True,
    }

    url = f"https://www.youtube.com/watch?v={video_id}"
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=False)
    except Exception as e:
        logger.warning(f"Failed to get YouTube metadata for {video_id}: {e}")
        raise LyricSyncError(f"Failed to get YouTube metadata: {e}") from e

    return VideoInfo(
        video_id=video_id,
        title=info.get("title") or "",
        duration=float(info.get("duration") or 0),
        uploader=info.get("uploader") or info.get("channel") or "",
        caption_url=_pick_caption_url(info, language),
    )
