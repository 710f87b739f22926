"""Validation utilities."""

import logging

from ..config import MAX_MANUAL_OFFSET_MS
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_youtube_url(url: str) -> str:
    """Validate a YouTube URL and return its video id."""
    from ..core.youtube_metadata import extract_video_id

    if not url:
        raise ValidationError("URL cannot be empty")

    video_id = extract_video_id(url.strip())
    if video_id is None:
        raise ValidationError(f"Invalid YouTube URL: {url}")
    return video_id


def validate_offset(offset_ms: int) -> int:
    """Validate a manual lyrics offset in milliseconds."""
    if abs(offset_ms) > MAX_MANUAL_OFFSET_MS:
        raise ValidationError(
            f"Offset must be within +/-{MAX_MANUAL_OFFSET_MS}ms, got {offset_ms}"
        )
    return int(offset_ms)


def validate_duration(duration: float) -> float:
    """Validate a media duration in seconds."""
    if duration < 0:
        raise ValidationError(f"Duration cannot be negative: {duration}")
    return float(duration)
