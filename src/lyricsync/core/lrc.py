"""LRC parsing and LyricLine creation.

This module handles:
- LRC timestamp parsing
- Extracting (timestamp, text) pairs from LRC text
- Building LyricLine objects with syllable-weighted word timings
"""

import re
from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_LINE_DURATION
from .models import LyricLine
from .syllables import distribute_time_by_syllables

# ----------------------
# LRC timestamp regex
# ----------------------
_LRC_TS_RE = re.compile(
    r"""
    \[                      # opening bracket
    (?P<min>\d{2,})         # minutes
    :
    (?P<sec>\d{2})          # seconds
    [.:]
    (?P<frac>\d{2,3})       # centiseconds or milliseconds
    \]                      # closing bracket
    """,
    re.VERBOSE,
)

_HAS_TS_RE = re.compile(r"\[\d{2,}:\d{2}[.:]\d{2,3}\]")


def has_timestamps(lrc_text: str) -> bool:
    """Check if LRC text contains at least one line timestamp."""
    if not lrc_text:
        return False
    return bool(_HAS_TS_RE.search(lrc_text))


# ----------------------
# LRC timestamp parsing
# ----------------------
def parse_lrc_timestamp(ts: str) -> Optional[float]:
    """Parse a single LRC timestamp like [01:23.45] to seconds."""
    if not ts:
        return None
    match = _LRC_TS_RE.fullmatch(ts.strip())
    if not match:
        return None
    return _match_to_seconds(match)


def _match_to_seconds(match: "re.Match[str]") -> float:
    minutes = int(match.group("min"))
    seconds = int(match.group("sec"))
    frac = match.group("frac")
    return minutes * 60 + seconds + int(frac) / (10 ** len(frac))


def parse_lrc_with_timing(lrc_text: str) -> List[Tuple[float, str]]:
    """Parse LRC format and extract (timestamp, text) tuples sorted by time.

    A line with several leading timestamps (a repeated chorus) produces one
    entry per timestamp.
    """
    if not lrc_text:
        return []

    lines: List[Tuple[float, str]] = []
    for line in lrc_text.splitlines():
        line = line.strip()

        timestamps: List[float] = []
        pos = 0
        match = _LRC_TS_RE.match(line, pos)
        while match:
            timestamps.append(_match_to_seconds(match))
            pos = match.end()
            match = _LRC_TS_RE.match(line, pos)

        if not timestamps:
            continue

        text_part = line[pos:].strip()
        if not text_part:
            continue

        lines.extend((ts, text_part) for ts in timestamps)

    # sorted() is stable, so equal timestamps keep their source order
    return sorted(lines, key=lambda item: item[0])


# ----------------------
# Line creation from LRC
# ----------------------
def create_lines_from_timings(
    timed_lines: Sequence[Tuple[float, str]],
    tail_duration: float = DEFAULT_LINE_DURATION,
) -> Tuple[LyricLine, ...]:
    """Create LyricLine objects from sorted (timestamp, text) pairs."""
    lines: List[LyricLine] = []
    for i, (start_time, text) in enumerate(timed_lines):
        if i + 1 < len(timed_lines):
            end_time = timed_lines[i + 1][0]
        else:
            end_time = start_time + tail_duration

        words = distribute_time_by_syllables(text.split(), start_time, end_time)
        lines.append(
            LyricLine(time=start_time, end_time=end_time, text=text, words=tuple(words))
        )

    return tuple(lines)


def parse_lrc(lrc_text: str) -> Tuple[LyricLine, ...]:
    """Parse LRC text into lyric lines.

    Returns an empty tuple when the text has no usable timestamped lines;
    callers treat that as "no synchronized lyrics".
    """
    return create_lines_from_timings(parse_lrc_with_timing(lrc_text))


def get_lrc_duration(lines: Sequence[LyricLine]) -> float:
    """Duration covered by the lyrics: end of the final line."""
    if not lines:
        return 0.0
    return lines[-1].end_time
