"""Typer CLI definition for alarmhorn."""

import asyncio
import logging
from pathlib import Path

import typer

from .audio.player import Player
from .config import AlarmHornConfig, generate_config, get_config_path, load_config
from .errors import (
    IndicatorError,
    PlaybackError,
    PlayerNotAvailableError,
    StationNotFoundError,
    UnknownAlarmKindError,
)
from .indicator.controller import IndicatorController
from .indicator.outputs import create_gpio_outputs
from .logging_setup import configure_logging
from .media.gongs import GongTable
from .models import AlarmKind

app = typer.Typer(help="Announce station alarms on lights and speakers")

CONFIG_OPTION = typer.Option(
    None, "-c", "--config", help="Config file (default ~/.config/alarmhorn/config.toml)"
)
DEBUG_OPTION = typer.Option(False, "--debug", help="Verbose logging and error messages")


def _fail(message: str, error: Exception, debug: bool) -> None:
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {message}: {error}", err=True)
    raise typer.Exit(1) from None


def _setup(config_path: Path | None, debug: bool) -> AlarmHornConfig:
    config = load_config(config_path)
    configure_logging("DEBUG" if debug else config.logging.level, config.logging.file)
    return config


def build_playlist(gongs: GongTable, kind: AlarmKind, speech: Path | None) -> list[Path]:
    """Return the files to play for a manual audio check, in order."""
    playlist = []
    gong = gongs.path_for(kind)
    if gong is not None:
        playlist.append(gong)
    if speech is not None:
        playlist.append(speech)
    return playlist


@app.command()
def run(
    config_path: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Listen for new alarms and announce them until stopped."""
    from .service import run_client

    config = _setup(config_path, debug)
    logging.getLogger(__name__).info("Starting alarmhorn client, please wait")

    try:
        asyncio.run(run_client(config))
    except StationNotFoundError as e:
        _fail("Station lookup failed", e, debug)
    except IndicatorError as e:
        _fail("Indicator setup failed", e, debug)
    except ValueError as e:
        _fail("Invalid configuration", e, debug)
    except KeyboardInterrupt:
        raise typer.Exit(0) from None


@app.command("init-config")
def init_config(
    config_path: Path | None = CONFIG_OPTION,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Write the default config file."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)", err=True)
        raise typer.Exit(1)
    typer.echo(f"Config written to {generate_config(path)}")


@app.command()
def flash(
    seconds: float = typer.Option(5.0, "-s", "--seconds", help="How long to flash"),
    config_path: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Flash the configured indicator lights, then switch them off."""
    config = _setup(config_path, debug)
    if seconds <= 0:
        typer.echo("Error: --seconds must be positive", err=True)
        raise typer.Exit(1)

    try:
        indicator = IndicatorController(
            create_gpio_outputs(config.indicator.pins), config.indicator.duration
        )
    except IndicatorError as e:
        _fail("Indicator setup failed", e, debug)

    async def _flash() -> None:
        indicator.start_flashing(seconds)
        try:
            while indicator.is_flashing:
                await asyncio.sleep(0.1)
        finally:
            indicator.close()

    typer.echo(f"Flashing {len(indicator.outputs)} light(s) for {seconds:g} seconds")
    try:
        asyncio.run(_flash())
    except KeyboardInterrupt:
        raise typer.Exit(0) from None


@app.command()
def play(
    kind: str = typer.Argument(..., help="Alarm type, e.g. ZUGALARM"),
    speech: Path | None = typer.Option(
        None, "--speech", help="Local speech file played after the gong"
    ),
    config_path: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Play the gong for an alarm type through the configured player."""
    config = _setup(config_path, debug)

    try:
        alarm_kind = AlarmKind.parse(kind.upper())
        gongs = GongTable.from_overrides(config.audio.assets_dir, config.gongs)
    except (UnknownAlarmKindError, ValueError) as e:
        _fail("Invalid alarm type", e, debug)

    playlist = build_playlist(gongs, alarm_kind, speech)
    if not playlist:
        typer.echo(f"Nothing to play for {alarm_kind.value}")
        raise typer.Exit(0)

    missing = [str(p) for p in playlist if not p.exists()]
    if missing:
        typer.echo(f"Error: File not found: {', '.join(missing)}", err=True)
        raise typer.Exit(1)

    player = Player(config.audio.player, config.audio.arguments)
    try:
        asyncio.run(player.play(playlist))
    except PlayerNotAvailableError as e:
        _fail("Player not available", e, debug)
    except PlaybackError as e:
        _fail("Failed to play audio", e, debug)

    typer.echo(f"Played {', '.join(str(p) for p in playlist)}")
