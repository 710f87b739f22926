"""Test data models."""

import dataclasses

import pytest

from lyricsync.core.models import (
    CalibrationResult,
    ClockBaseline,
    LrcCandidate,
    LyricLine,
    LyricsState,
    LyricWord,
    SyncedLineState,
    SyncSnapshot,
)


class TestLyricWord:
    def test_duration(self):
        assert LyricWord("hi", 1.0, 1.5).duration == 0.5

    def test_validate(self):
        with pytest.raises(ValueError):
            LyricWord("hi", 2.0, 1.0).validate()

    def test_frozen(self):
        word = LyricWord("hi", 1.0, 1.5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            word.text = "bye"


class TestLyricLine:
    def test_validate_word_bounds(self):
        line = LyricLine(1.0, 3.0, "a b", (LyricWord("a", 1.0, 2.0), LyricWord("b", 2.0, 3.5)))
        with pytest.raises(ValueError, match="outside line bounds"):
            line.validate()

    def test_validate_ok(self):
        line = LyricLine(1.0, 3.0, "a b", (LyricWord("a", 1.0, 2.0), LyricWord("b", 2.0, 3.0)))
        line.validate()
        assert line.duration == 2.0


def test_calibration_total():
    result = CalibrationResult(auto_offset_ms=-19500, is_calibrated=True, manual_offset_ms=200)
    assert result.total_offset_ms == -19300
    assert CalibrationResult().total_offset_ms == 0


def test_clock_baseline_extrapolate():
    assert ClockBaseline(media_time=10.0, captured_at=100.0).extrapolate(101.25) == 11.25


def test_snapshot_delegates_to_state():
    snapshot = SyncSnapshot(
        state=SyncedLineState(2, 1, 0.25), current_time=4.0, synced_time=5.0
    )
    assert (snapshot.current_line_index, snapshot.active_word_index) == (2, 1)
    assert snapshot.word_progress == 0.25


def test_candidate_from_api_defaults():
    candidate = LrcCandidate.from_api({"id": 9, "trackName": None, "duration": None})
    assert candidate.track_name == "Unknown"
    assert candidate.artist_name == "Unknown"
    assert candidate.duration == 0.0
    assert candidate.synced_lyrics == ""


def test_lyrics_state_defaults_are_independent():
    a, b = LyricsState(), LyricsState()
    a.caption_segments.append("x")
    assert b.caption_segments == []
    assert not a.has_lyrics
