"""
CLI interface for the track recorder.

Usage:
    track-recorder serve --port 8000
    track-recorder status
    track-recorder replay ride.gpx --interval 0.2
    track-recorder export --out-dir ./exports
    track-recorder repair
    track-recorder clear
"""

import asyncio
from pathlib import Path
from typing import Optional

import click

from track_recorder.config import settings
from track_recorder.features.tracking import (
    DirectoryFileSink,
    EmptyExportError,
    GPXReplaySource,
    PushGeoSource,
    SinkError,
    SourceError,
    TrackRecorder,
)
from track_recorder.features.tracking.ports import GeoSampleSource


def _build_recorder(source: Optional[GeoSampleSource] = None) -> TrackRecorder:
    recorder = TrackRecorder.from_settings(source or PushGeoSource(), settings)
    recorder.restore()
    return recorder


def _echo_status(recorder: TrackRecorder) -> None:
    status = recorder.status()
    click.echo(f"{status.toggle_label} {status.state} ({status.points_count} points)")
    click.echo(status.distance_text)
    click.echo(status.coords_text)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level):
    """GPS track recorder."""
    from track_recorder.main import setup_logging
    setup_logging(log_level)


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
def serve(host, port):
    """Run the HTTP API."""
    import uvicorn
    uvicorn.run("track_recorder.main:app", host=host, port=port)


@cli.command()
def status():
    """Show the stored track."""
    _echo_status(_build_recorder())


@cli.command()
@click.argument("gpx_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--interval",
    default=None,
    type=float,
    help="Seconds between replayed points (default: REPLAY_INTERVAL_SECONDS)"
)
def replay(gpx_file, interval):
    """
    Record a GPX file as if it were a live position stream.

    Points are appended to the stored track, exactly like a live
    recording resumed after a restart.
    """
    if interval is None:
        interval = settings.replay_interval_seconds
    source = GPXReplaySource(gpx_file, interval_seconds=interval)
    recorder = _build_recorder(source)

    try:
        asyncio.run(_run_replay(recorder, source))
    except SourceError as e:
        raise click.ClickException(str(e))

    _echo_status(recorder)


async def _run_replay(recorder: TrackRecorder, source: GPXReplaySource) -> None:
    recorder.store.start()
    try:
        await source.wait_finished()
    finally:
        recorder.store.stop()
        await recorder.persistence.flush()
        await recorder.notifications.drain()


@cli.command()
@click.option(
    "--out-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the GPX file (default: EXPORT_DIR)"
)
def export(out_dir):
    """Write the stored track as a GPX file."""
    recorder = _build_recorder()
    if out_dir is not None:
        recorder.exporter.sink = DirectoryFileSink(out_dir)

    try:
        _, location = recorder.save_to_file()
    except (EmptyExportError, SinkError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Трек сохранен в файл: {location}")


@cli.command()
def repair():
    """Recompute the stored distance from the stored points."""
    recorder = _build_recorder()
    track = recorder.repository.get()
    if track is None:
        click.echo("Nothing stored.")
        return

    repaired = track.recalculated()
    recorder.repository.save(repaired)
    click.echo(
        f"Distance: {track.total_distance_km:.3f} km -> {repaired.total_distance_km:.3f} km"
    )


@cli.command()
@click.confirmation_option(prompt="Erase the recorded track?")
def clear():
    """Erase the stored track."""
    recorder = _build_recorder()
    recorder.store.clear()
    click.echo("Трек очищен.")


if __name__ == "__main__":
    cli()
