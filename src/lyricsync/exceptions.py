"""Custom exceptions for Lyricsync."""

class LyricSyncError(Exception):
    """Base exception for Lyricsync."""
    pass

class LyricsError(LyricSyncError):
    """Error fetching or loading lyrics."""
    pass

class FetchError(LyricSyncError):
    """HTTP request failed after all retries."""
    pass

class PlaybackError(LyricSyncError):
    """Terminal error reported by the playback engine."""
    pass

class ValidationError(LyricSyncError):
    """Invalid input parameters."""
    pass

class ConfigError(LyricSyncError):
    """Invalid configuration values."""
    pass
