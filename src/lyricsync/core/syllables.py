"""Syllable estimation used to weight word timing inside a lyric line.

The counts are a vowel-group heuristic that works reasonably for English and
Romance languages. Only the relative weights matter: a three-syllable word
should get more of the line than a one-syllable word.
"""

import re
from typing import List, Sequence

from ..config import DIPHTHONG_WEIGHT
from .models import LyricWord

_NON_LETTER_RE = re.compile(r"[^a-zà-ÿ]")
_VOWEL_GROUP_RE = re.compile(r"[aeiouyàáâãäåæèéêëìíîïòóôõöøùúûüýÿ]+")
_DIPHTHONG_RE = re.compile(r"[aeiou]{2}")


def count_syllables(word: str, diphthong_weight: float = DIPHTHONG_WEIGHT) -> int:
    """Estimate the number of syllables in a word (always >= 1)."""
    w = _NON_LETTER_RE.sub("", word.lower())
    if len(w) <= 2:
        return 1

    count = len(_VOWEL_GROUP_RE.findall(w)) or 1

    # Silent 'e' at the end (English), but not "-le" as in "table"
    if w.endswith("e") and not w.endswith("le") and count > 1:
        count -= 1

    # Not every vowel pair is a diphthong, so only subtract a fraction
    diphthongs = len(_DIPHTHONG_RE.findall(w))
    count -= int(diphthongs * diphthong_weight)

    return max(1, count)


def distribute_time_by_syllables(
    words: Sequence[str], line_start: float, line_end: float
) -> List[LyricWord]:
    """Split [line_start, line_end) across words proportionally to syllables.

    Words are laid out back to back; the last word ends exactly at line_end.
    """
    if not words:
        return []

    line_duration = line_end - line_start
    syllable_counts = [count_syllables(w) for w in words]
    total_syllables = sum(syllable_counts)

    result: List[LyricWord] = []
    current = line_start
    for i, (text, syllables) in enumerate(zip(words, syllable_counts)):
        if i == len(words) - 1:
            end = line_end
        else:
            end = current + line_duration * (syllables / total_syllables)
        result.append(LyricWord(text=text, start_time=current, end_time=end))
        current = end
    return result
