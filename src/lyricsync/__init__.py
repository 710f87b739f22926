"""Lyricsync - synchronized karaoke lyrics for YouTube videos."""

__version__ = "0.1.0"
