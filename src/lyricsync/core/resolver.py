"""Map a synced playback time to the active lyric line and word."""

from typing import Callable, Optional, Sequence

from .models import LyricLine, LyricWord, SyncedLineState, SyncSnapshot


def find_line_index(lines: Sequence[LyricLine], synced_time: float) -> int:
    """Index of the last line starting at or before synced_time, else -1.

    Scans backward, so when two lines share a timestamp the later-indexed
    line wins.
    """
    for i in range(len(lines) - 1, -1, -1):
        if synced_time >= lines[i].time:
            return i
    return -1


def find_word_index(words: Sequence[LyricWord], synced_time: float) -> int:
    for i in range(len(words) - 1, -1, -1):
        if synced_time >= words[i].start_time:
            return i
    return -1


def line_progress(line: LyricLine, synced_time: float) -> float:
    """Fraction of the line elapsed, clamped to [0, 1]; 0 for empty lines."""
    duration = line.end_time - line.time
    if duration <= 0:
        return 0.0
    return max(0.0, min(1.0, (synced_time - line.time) / duration))


def resolve(lines: Sequence[LyricLine], synced_time: float) -> SyncedLineState:
    """Compute the active line/word state for a synced time."""
    index = find_line_index(lines, synced_time)
    if index < 0:
        return SyncedLineState()

    line = lines[index]
    return SyncedLineState(
        current_line_index=index,
        active_word_index=find_word_index(line.words, synced_time),
        word_progress=line_progress(line, synced_time),
    )


class LineResolver:
    """Resolve every tick, but only notify when the line or word changes.

    Progress and times are refreshed on every update regardless.
    """

    def __init__(
        self,
        lines: Sequence[LyricLine] = (),
        on_change: Optional[Callable[[SyncSnapshot], None]] = None,
    ):
        self.lines = tuple(lines)
        self.on_change = on_change
        self._snapshot = SyncSnapshot(
            state=SyncedLineState(), current_time=0.0, synced_time=0.0
        )

    def set_lines(self, lines: Sequence[LyricLine]) -> None:
        """Replace the lyrics wholesale, e.g. after a new load."""
        self.lines = tuple(lines)
        self._snapshot = SyncSnapshot(
            state=SyncedLineState(),
            current_time=self._snapshot.current_time,
            synced_time=self._snapshot.synced_time,
        )

    def update(self, current_time: float, offset_ms: int = 0) -> SyncSnapshot:
        synced_time = current_time + offset_ms / 1000
        state = resolve(self.lines, synced_time)
        index = state.current_line_index

        previous = self._snapshot.state
        snapshot = SyncSnapshot(
            state=state,
            current_time=current_time,
            synced_time=synced_time,
            current_line=self.lines[index] if index >= 0 else None,
            next_line=(
                self.lines[index + 1]
                if index >= 0 and index + 1 < len(self.lines)
                else None
            ),
        )
        self._snapshot = snapshot

        changed = (
            state.current_line_index != previous.current_line_index
            or state.active_word_index != previous.active_word_index
        )
        if changed and self.on_change is not None:
            self.on_change(snapshot)
        return snapshot

    @property
    def snapshot(self) -> SyncSnapshot:
        return self._snapshot

    @property
    def current_line(self) -> Optional[LyricLine]:
        return self._snapshot.current_line

    @property
    def next_line(self) -> Optional[LyricLine]:
        return self._snapshot.next_line

    @property
    def current_line_index(self) -> int:
        return self._snapshot.current_line_index

    @property
    def active_word_index(self) -> int:
        return self._snapshot.active_word_index

    @property
    def word_progress(self) -> float:
        return self._snapshot.word_progress
