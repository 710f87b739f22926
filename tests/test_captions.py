import pytest
import requests

from lyricsync.core.captions import (
    captions_to_lines,
    fetch_caption_events,
    find_first_vocal_timestamp,
    parse_caption_events,
)
from lyricsync.core.models import CaptionSegment, VideoInfo


def test_parse_caption_events(caption_events_yesterday):
    segments = parse_caption_events(caption_events_yesterday)
    assert [s.text for s in segments] == ["[Music]", "yesterday", "all my troubles"]
    assert segments[1].start_ms == 2000
    assert segments[1].start == 2.0
    assert segments[2].duration_ms == 4000


def test_parse_caption_events_tolerates_missing_fields():
    segments = parse_caption_events([{"segs": [{"utf8": "hi there"}]}, {}])
    assert segments == [CaptionSegment(start_ms=0, duration_ms=0, text="hi there")]


def test_parse_caption_events_null_text():
    events = [
        {"tStartMs": 1000, "segs": [{"utf8": None}]},
        {"tStartMs": 2000, "segs": [{"utf8": "hello"}, {"utf8": None}, {}]},
    ]
    assert parse_caption_events(events) == [CaptionSegment(2000, 0, "hello")]


class TestFirstVocal:
    def test_skips_filler(self, caption_events_yesterday):
        segments = parse_caption_events(caption_events_yesterday)
        assert find_first_vocal_timestamp(segments) == 2.0

    @pytest.mark.parametrize("filler", ["[Music]", "(applause)", "Music", "APPLAUSE", "a"])
    def test_filler_kinds(self, filler):
        segments = [
            CaptionSegment(1000, 500, filler),
            CaptionSegment(4000, 500, "hello darkness"),
        ]
        assert find_first_vocal_timestamp(segments) == 4.0

    def test_all_filler_falls_back_to_first(self):
        segments = [CaptionSegment(500, 1000, "[Music]"), CaptionSegment(1500, 500, "(applause)")]
        assert find_first_vocal_timestamp(segments) == 0.5

    def test_empty(self):
        assert find_first_vocal_timestamp([]) is None


def test_captions_to_lines():
    lines = captions_to_lines([CaptionSegment(2000, 3000, "hello  big world")])
    line = lines[0]
    assert (line.time, line.end_time, line.text) == (2.0, 5.0, "hello big world")
    assert [w.start_time for w in line.words] == pytest.approx([2.0, 3.0, 4.0])
    assert line.words[-1].end_time == pytest.approx(5.0)


class TestFetchCaptionEvents:
    def test_no_caption_track(self, make_session):
        session = make_session()
        assert fetch_caption_events(VideoInfo("abc"), session=session) == []
        assert session.calls == []

    def test_returns_events(self, make_session, make_response, caption_events_yesterday):
        session = make_session(make_response({"events": caption_events_yesterday}))
        info = VideoInfo("abc", caption_url="https://example.com/captions")
        assert fetch_caption_events(info, session=session) == caption_events_yesterday
        assert session.calls[0]["url"] == "https://example.com/captions"

    def test_failure_returns_empty(self, make_session, no_retry_sleep):
        session = make_session(
            requests.ConnectionError("down"), requests.ConnectionError("down")
        )
        info = VideoInfo("abc", caption_url="https://example.com/captions")
        assert fetch_caption_events(info, session=session) == []
        assert len(session.calls) == 2

    def test_unexpected_payload(self, make_session, make_response):
        session = make_session(make_response({"wireMagic": "pb3"}))
        info = VideoInfo("abc", caption_url="https://example.com/captions")
        assert fetch_caption_events(info, session=session) == []
