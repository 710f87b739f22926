"""Test configuration and fixtures.

Provides reusable fixtures for:
- LRC (synced lyrics) text
- YouTube caption events
- LRCLIB search responses and fake HTTP sessions
- A controllable fake clock for playback tracking
"""

import os

import pytest
import requests


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# Fakes
# =============================================================================


class FakeClock:
    """Monotonic time source the test moves by hand."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, json_data=None, status_code=200):
        self._json_data = json_data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if isinstance(self._json_data, Exception):
            raise self._json_data
        return self._json_data


class FakeSession:
    """Replays canned responses (or raises canned exceptions) in order."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if not self._responses:
            raise requests.ConnectionError("no response")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_session():
    def _make(*responses):
        return FakeSession(responses)

    return _make


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def no_retry_sleep(monkeypatch):
    """Make retry backoff instant."""
    from lyricsync.utils import retry

    monkeypatch.setattr(retry.time, "sleep", lambda *_: None)


# =============================================================================
# Basic Fixtures
# =============================================================================


@pytest.fixture
def sample_youtube_url():
    """Sample YouTube URL for testing."""
    return "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


# =============================================================================
# LRC (Synced Lyrics) Fixtures
# =============================================================================


@pytest.fixture
def lrc_bohemian_rhapsody():
    """Synced LRC lyrics for Bohemian Rhapsody (simplified)."""
    return """[ar:Queen]
[ti:Bohemian Rhapsody]
[al:A Night at the Opera]
[length:05:54]

[00:00.00]Is this the real life?
[00:04.00]Is this just fantasy?
[00:08.00]Caught in a landslide
[00:11.00]No escape from reality
[00:15.00]Open your eyes
[00:19.00]Look up to the skies and see
[00:25.00]I'm just a poor boy
[00:27.00]I need no sympathy
[00:31.00]Because I'm easy come, easy go
[00:35.00]Little high, little low
[00:39.00]Any way the wind blows
[00:43.00]Doesn't really matter to me, to me
[05:50.00]Nothing really matters
[05:54.00]"""


@pytest.fixture
def lrc_yesterday():
    """Synced LRC lyrics for Yesterday (simplified)."""
    return """[ar:The Beatles]
[ti:Yesterday]
[al:Help!]
[length:02:05]

[00:05.00]Yesterday
[00:09.00]All my troubles seemed so far away
[00:15.00]Now it looks as though they're here to stay
[00:21.00]Oh, I believe in yesterday"""


@pytest.fixture
def lrc_no_timestamps():
    """Plain lyrics without any timing."""
    return """Yesterday
All my troubles seemed so far away"""


# =============================================================================
# Caption Fixtures
# =============================================================================


@pytest.fixture
def caption_events_yesterday():
    """json3 caption events whose first sung caption starts at 2s."""
    return [
        {"tStartMs": 0, "dDurationMs": 1500, "segs": [{"utf8": "[Music]"}]},
        {"tStartMs": 1500, "dDurationMs": 100, "segs": [{"utf8": "\n"}]},
        {"tStartMs": 2000, "dDurationMs": 3000, "segs": [{"utf8": "yesterday"}]},
        {"tStartMs": 6000, "dDurationMs": 4000,
         "segs": [{"utf8": "all my "}, {"utf8": "troubles"}]},
        {"tStartMs": 10000, "dDurationMs": 500},
    ]


# =============================================================================
# LRCLIB Fixtures
# =============================================================================


@pytest.fixture
def lrclib_results_yesterday(lrc_yesterday):
    """Raw LRCLIB search results: two synced versions and one plain."""
    return [
        {
            "id": 1,
            "trackName": "Yesterday",
            "artistName": "The Beatles",
            "albumName": "Help!",
            "duration": 125,
            "syncedLyrics": lrc_yesterday,
        },
        {
            "id": 2,
            "trackName": "Yesterday (Live)",
            "artistName": "The Beatles",
            "albumName": "Live at the BBC",
            "duration": 160,
            "syncedLyrics": lrc_yesterday,
        },
        {
            "id": 3,
            "trackName": "Yesterday",
            "artistName": "Cover Band",
            "albumName": "",
            "duration": 130,
            "syncedLyrics": None,
            "plainLyrics": "Yesterday",
        },
    ]
