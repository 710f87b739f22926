"""Synced lyrics lookup against the LRCLIB search API."""

import asyncio
from typing import Callable, Dict, List, Optional, Sequence

import requests  # type: ignore[import-untyped]

from ..config import FETCH_TIMEOUT, LRCLIB_MAX_RESULTS, LRCLIB_SEARCH_URL, REQUEST_TIMEOUT
from ..exceptions import FetchError, LyricsError
from ..utils.logging import get_logger
from .fetch import fetch_json
from .models import LrcCandidate
from .youtube_metadata import build_search_query

logger = get_logger(__name__)

SearchFn = Callable[[str], List[LrcCandidate]]


def search_lrclib(
    query: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = REQUEST_TIMEOUT,
) -> List[LrcCandidate]:
    """Search LRCLIB and return only results that carry synced lyrics.

    Raises FetchError when the request fails; an empty list means the
    search worked but found nothing usable.
    """
    data = fetch_json(
        LRCLIB_SEARCH_URL, params={"q": query}, timeout=timeout, session=session
    )
    if not isinstance(data, list):
        return []

    candidates = [
        LrcCandidate.from_api(item)
        for item in data
        if isinstance(item, dict) and item.get("syncedLyrics")
    ]
    logger.debug(f"LRCLIB: {len(candidates)} synced results for '{query}'")
    return candidates[:LRCLIB_MAX_RESULTS]


def pick_best_match(
    candidates: Sequence[LrcCandidate], expected_duration: float
) -> Optional[LrcCandidate]:
    """Pick the candidate whose duration is closest to the expected one.

    With no usable expected duration the first candidate wins. Ties keep
    search order.
    """
    if not candidates:
        return None
    if expected_duration <= 0:
        return candidates[0]
    return min(candidates, key=lambda c: abs(expected_duration - c.duration))


def find_lyrics(
    video_title: str,
    video_duration: float,
    search_fn: SearchFn = search_lrclib,
) -> Optional[LrcCandidate]:
    """Search by "artist track", falling back to the bare track name."""
    query, track_name = build_search_query(video_title)
    results = search_fn(query)

    if not results and track_name and track_name != query:
        logger.debug(f"No results for '{query}', retrying with '{track_name}'")
        results = search_fn(track_name)

    best = pick_best_match(results, video_duration)
    if best:
        logger.info(
            f"Matched lyrics: {best.display_title} "
            f"({best.duration:.0f}s, video {video_duration:.0f}s)"
        )
    else:
        logger.info(f"No synced lyrics found for '{video_title}'")
    return best


class LyricsFetcher:
    """Runs lyrics lookups with a deadline and remembers completed loads.

    Once a key has loaded successfully, later requests for it return the
    remembered result instead of hitting the network again. Failed loads
    are not remembered, so they can be retried.
    """

    def __init__(self, search_fn: SearchFn = search_lrclib, timeout: float = FETCH_TIMEOUT):
        self.search_fn = search_fn
        self.timeout = timeout
        self._loaded: Dict[str, Optional[LrcCandidate]] = {}

    def is_loaded(self, key: str) -> bool:
        return key in self._loaded

    def forget(self, key: str) -> None:
        self._loaded.pop(key, None)

    async def fetch(
        self, key: str, video_title: str, video_duration: float, *, force: bool = False
    ) -> Optional[LrcCandidate]:
        if not force and key in self._loaded:
            logger.debug(f"Using loaded lyrics for {key}")
            return self._loaded[key]

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(find_lyrics, video_title, video_duration, self.search_fn),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise LyricsError(f"Lyrics lookup timed out after {self.timeout:.0f}s") from e
        except FetchError as e:
            raise LyricsError(f"Lyrics lookup failed: {e}") from e

        self._loaded[key] = result
        return result
