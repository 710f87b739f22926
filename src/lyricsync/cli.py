"""Command-line interface using Click."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import OFFSET_STEP_MS
from .exceptions import LyricSyncError
from .core.calibration import calibrate as compute_calibration
from .core.captions import parse_caption_events
from .core.lrc import get_lrc_duration, parse_lrc
from .core.lrclib import pick_best_match, search_lrclib
from .core.models import FetchedLyrics, StoredLyrics, SyncSnapshot
from .core.player import SimulatedPlayer
from .core.session import KaraokeSession
from .utils.logging import setup_logging
from .utils.validation import validate_duration, validate_offset, validate_youtube_url


def _read_lyrics_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _format_time(seconds: float) -> str:
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    return f"{sign}{int(seconds // 60):02d}:{seconds % 60:05.2f}"


def _print_snapshot(snapshot: SyncSnapshot) -> None:
    line = snapshot.current_line
    if line is None:
        click.echo(f"[{_format_time(snapshot.synced_time)}] ...")
        return

    words = [w.text for w in line.words]
    active = snapshot.active_word_index
    if 0 <= active < len(words):
        words[active] = click.style(words[active], bold=True, fg="yellow")
    click.echo(f"[{_format_time(snapshot.synced_time)}] {' '.join(words)}")
    if snapshot.next_line is not None and active <= 0:
        click.echo(click.style(f"           next: {snapshot.next_line.text}", dim=True))


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """Lyricsync - synchronized karaoke lyrics for YouTube videos."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('lrc_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--words', is_flag=True, help='Show word-level timings')
@click.option('--as-json', 'as_json', is_flag=True, help='Print lines as JSON')
def parse(lrc_file, words, as_json):
    """Parse an LRC file and show its timeline."""
    lines = parse_lrc(_read_lyrics_file(lrc_file))
    if not lines:
        click.echo("No synchronized lyrics found in file")
        sys.exit(1)

    if as_json:
        payload = [
            {
                "time": line.time,
                "end_time": line.end_time,
                "text": line.text,
                "words": [
                    {"text": w.text, "start_time": w.start_time, "end_time": w.end_time}
                    for w in line.words
                ],
            }
            for line in lines
        ]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for line in lines:
        click.echo(f"{_format_time(line.time)} - {_format_time(line.end_time)}  {line.text}")
        if words:
            for w in line.words:
                click.echo(
                    f"    {_format_time(w.start_time)} - {_format_time(w.end_time)}  {w.text}"
                )
    click.echo(f"{len(lines)} lines, duration {_format_time(get_lrc_duration(lines))}")


@cli.command()
@click.argument('query')
@click.option('--duration', type=float, default=0.0,
              help='Expected track duration in seconds, used to pick the best match')
@click.pass_context
def search(ctx, query, duration):
    """Search LRCLIB for synced lyrics."""
    logger = ctx.obj['logger']
    try:
        candidates = search_lrclib(query)
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if not candidates:
        click.echo("No synchronized lyrics found")
        return

    best = pick_best_match(candidates, duration)
    for c in candidates:
        marker = "*" if c is best else " "
        click.echo(f"{marker} [{c.id}] {c.display_title} ({c.duration:.0f}s)")


@cli.command()
@click.argument('lrc_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--video-duration', type=float, required=True,
              help='Measured video duration in seconds')
@click.option('--track-duration', type=float, default=0.0,
              help='Track duration reported by the lyrics source')
@click.option('--captions', 'captions_file', type=click.Path(exists=True, dir_okay=False),
              help='Caption events JSON (json3 format) used as a vocal anchor')
@click.option('--offset', type=int, default=0, help='Manual offset in milliseconds')
@click.pass_context
def calibrate(ctx, lrc_file, video_duration, track_duration, captions_file, offset):
    """Estimate the lyrics offset against a video."""
    logger = ctx.obj['logger']
    try:
        validate_duration(video_duration)
        validate_duration(track_duration)
        offset = validate_offset(offset)
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    lines = parse_lrc(_read_lyrics_file(lrc_file))
    segments = []
    if captions_file:
        try:
            data = json.loads(Path(captions_file).read_text(encoding="utf-8"))
        except ValueError as e:
            logger.error(f"❌ Invalid captions file: {e}")
            sys.exit(1)
        events = data.get("events", []) if isinstance(data, dict) else data
        if not isinstance(events, list):
            logger.error("❌ Invalid captions file: expected a list of caption events")
            sys.exit(1)
        segments = parse_caption_events(ev for ev in events if isinstance(ev, dict))

    result = compute_calibration(lines, video_duration, track_duration, segments, offset)
    click.echo(f"Auto offset:   {result.auto_offset_ms}ms")
    click.echo(f"Manual offset: {result.manual_offset_ms}ms")
    click.echo(f"Total offset:  {result.total_offset_ms}ms")
    click.echo(f"Calibrated:    {'yes' if result.is_calibrated else 'no'}")


async def _follow_along(session: KaraokeSession, player: SimulatedPlayer,
                        limit: Optional[float]) -> None:
    await session.play()
    try:
        while not player.ended:
            if limit is not None and player.position >= limit:
                break
            await asyncio.sleep(0.1)
        await session.pause()
    finally:
        await session.close()


@cli.command()
@click.argument('lrc_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--video-duration', type=float, default=0.0,
              help='Simulated video length (defaults to the lyrics length)')
@click.option('--track-duration', type=float, default=0.0,
              help='Track duration reported by the lyrics source')
@click.option('--offset', type=int, default=0, help='Manual offset in milliseconds')
@click.option('--start', type=float, default=0.0, help='Start position in seconds')
@click.option('--rate', type=float, default=1.0,
              help='Simulated playback rate (the tracker corrects the drift)')
@click.option('--seconds', type=float, default=None, help='Stop after this position')
@click.pass_context
def play(ctx, lrc_file, video_duration, track_duration, offset, start, rate, seconds):
    """Follow along with an LRC file on a simulated player."""
    logger = ctx.obj['logger']
    lyrics_text = _read_lyrics_file(lrc_file)
    lines = parse_lrc(lyrics_text)
    if not lines:
        logger.error("❌ No synchronized lyrics found in file")
        sys.exit(1)

    player = SimulatedPlayer(video_duration or get_lrc_duration(lines), rate=rate)
    player.seek(start)
    session = KaraokeSession(player, on_change=_print_snapshot)

    async def _run() -> None:
        state = await session.load_lyrics(
            StoredLyrics(lyrics_text=lyrics_text, duration=track_duration)
        )
        if state.error:
            raise LyricSyncError(state.error)
        session.calibrator.set_offset(validate_offset(offset))
        logger.info(
            f"Offset: {session.calibration.total_offset_ms}ms "
            f"(auto {session.calibration.auto_offset_ms}ms, step {OFFSET_STEP_MS}ms)"
        )
        await _follow_along(session, player, seconds)

    try:
        asyncio.run(_run())
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("")


@cli.command()
@click.argument('url')
@click.option('--captions/--no-captions', default=False,
              help='Fall back to video captions when no synced lyrics exist')
@click.pass_context
def lookup(ctx, url, captions):
    """Find synced lyrics for a YouTube video and calibrate them."""
    logger = ctx.obj['logger']
    try:
        video_id = validate_youtube_url(url)
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    async def _run() -> None:
        from .core.youtube_metadata import get_video_info

        info = await asyncio.to_thread(get_video_info, video_id)
        player = SimulatedPlayer(info.duration)
        session = KaraokeSession(player)
        state = await session.load_lyrics(
            FetchedLyrics(video_id=video_id),
            video_info_fn=lambda _id: info,
            caption_fallback=captions,
        )
        click.echo(f"Video:  {info.title} ({info.duration:.0f}s)")
        if session.display_error:
            click.echo(f"Lyrics: {session.display_error}")
            return
        result = session.calibration
        click.echo(f"Lyrics: {len(state.lines)} lines from {state.source} "
                   f"(track {state.track_duration:.0f}s)")
        click.echo(f"Captions: {len(state.caption_segments)} segments")
        click.echo(f"Offset: {result.total_offset_ms}ms "
                   f"(calibrated: {'yes' if result.is_calibrated else 'no'})")

    try:
        asyncio.run(_run())
    except LyricSyncError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    cli()
