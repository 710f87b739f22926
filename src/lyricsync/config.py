"""Configuration settings for Lyricsync."""

import os

from .exceptions import ConfigError

# Playback tracking (can be overridden via environment variables)
TICK_RATE = int(os.getenv("LYRICSYNC_TICK_RATE", "30"))  # updates per second
RESYNC_INTERVAL = float(os.getenv("LYRICSYNC_RESYNC_INTERVAL", "1.0"))
SAMPLE_TIMEOUT = float(os.getenv("LYRICSYNC_SAMPLE_TIMEOUT", "2.0"))

# Lyrics timing
DEFAULT_LINE_DURATION = 4.0  # Tail given to the final lyric line
LRC_DURATION_BUFFER = 5.0
DIPHTHONG_WEIGHT = 0.3  # Partial correction for adjacent vowels in syllable counts

# Calibration
OFFSET_STEP_MS = int(os.getenv("LYRICSYNC_OFFSET_STEP_MS", "200"))
MAX_MANUAL_OFFSET_MS = 60_000
DURATION_DIFF_THRESHOLD = 1.0  # Seconds of padding before duration fallback kicks in
INTRO_SLACK = 0.5

# Network
FETCH_TIMEOUT = float(os.getenv("LYRICSYNC_FETCH_TIMEOUT", "20"))
REQUEST_TIMEOUT = float(os.getenv("LYRICSYNC_REQUEST_TIMEOUT", "8"))
LRCLIB_SEARCH_URL = os.getenv(
    "LYRICSYNC_LRCLIB_URL", "https://lrclib.net/api/search"
)
LRCLIB_MAX_RESULTS = 20
CAPTION_LANGUAGE = os.getenv("LYRICSYNC_CAPTION_LANGUAGE", "en")
USER_AGENT = "lyricsync/0.1 (https://github.com/lyricsync/lyricsync)"

# User-facing messages
NO_LYRICS_MESSAGE = "No synchronized lyrics found for this song"
FETCH_FAILED_MESSAGE = "Failed to load lyrics. Please try again."
NO_VIDEO_ID_MESSAGE = "No video ID provided"


def validate_config() -> None:
    """Validate configuration values."""
    if TICK_RATE <= 0:
        raise ConfigError("Invalid tick rate")

    if RESYNC_INTERVAL <= 0:
        raise ConfigError("Invalid resync interval")

    if SAMPLE_TIMEOUT <= 0:
        raise ConfigError("Invalid sample timeout")

    if OFFSET_STEP_MS <= 0:
        raise ConfigError("Invalid offset step")

    if FETCH_TIMEOUT <= 0 or REQUEST_TIMEOUT <= 0:
        raise ConfigError("Invalid network timeout")


# Validate config on import
validate_config()
