"""Configuration management for alarmhorn.

Loads configuration from ~/.config/alarmhorn/config.toml.
Priority chain: env vars > config file > built-in defaults.
"""

import logging
import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .paths import get_cache_dir, get_config_dir, get_data_dir, get_state_dir

DEFAULT_LED_DURATION = 30
DEFAULT_STARTUP_DURATION = 5
DEFAULT_PLAYER = "vlc.exe" if sys.platform == "win32" else "vlc"
DEFAULT_PLAYER_ARGUMENTS = ("-Idummy", "{files}", "vlc://quit")

DEFAULT_CONFIG = """\
# alarmhorn configuration
#
# Required values are left empty; fill them in and start again.

[google]
# Firebase / Google Cloud project holding the stations collection
project_id = ""

# Service account key file (JSON) used for Firestore and Cloud Storage
service_account_key = ""

# Cloud Storage bucket holding the rendered speech clips
bucket = ""

[station]
# Document id below stations/ whose alarms are announced
id = ""

[indicator]
# BCM pin numbers of the indicator lights, e.g. [17, 27]. Empty = no lights.
pins = []

# Seconds the lights stay on after an alarm
duration = 30

# Seconds the lights flash at startup
startup_duration = 5

[audio]
# External playback program and its arguments; "{files}" expands to the
# ordered list of files to play.
# player = "vlc"
# arguments = ["-Idummy", "{files}", "vlc://quit"]

# Directory holding the gong files and the startup sound
# assets_dir = "~/.local/share/alarmhorn/assets"

# Startup sound inside assets_dir ("" disables it)
startup_sound = "startup.mp3"

# Where downloaded speech clips are kept
# cache_dir = "~/.cache/alarmhorn/media"

[gongs]
# Override the gong file per alarm type ("" = no gong)
# EINZELFAHRZEUGALARM = "einzelfahrzeug-alarm_mit_gong.wav"
# VORALARM = "vor-alarm_mit_gong.wav"
# ZUGALARM = "zug-alarm_mit_gong.wav"
# KEINER = ""

[logging]
# DEBUG, INFO, WARNING or ERROR
level = "INFO"

# Log file ("" disables file logging)
# file = "~/.local/state/alarmhorn/alarmhorn.log"

# Every value above can be overridden with environment variables:
#   ALARMHORN_PROJECT_ID, ALARMHORN_SERVICE_ACCOUNT_KEY, ALARMHORN_BUCKET,
#   ALARMHORN_STATION_ID, ALARMHORN_LED_PINS (comma separated),
#   ALARMHORN_LED_DURATION, ALARMHORN_LOG_LEVEL
"""


@dataclass(frozen=True)
class GoogleConfig:
    """Google Cloud access configuration."""

    project_id: str
    service_account_key: Path
    bucket: str


@dataclass(frozen=True)
class StationConfig:
    """Station whose alarms are announced."""

    id: str

    @property
    def document_path(self) -> str:
        return f"stations/{self.id}"

    @property
    def alarms_path(self) -> str:
        return f"stations/{self.id}/alarms"


@dataclass(frozen=True)
class IndicatorConfig:
    """Indicator light configuration."""

    pins: tuple[int, ...] = ()
    duration: float = DEFAULT_LED_DURATION
    startup_duration: float = DEFAULT_STARTUP_DURATION


@dataclass(frozen=True)
class AudioConfig:
    """Playback program and media locations."""

    player: str
    arguments: tuple[str, ...]
    assets_dir: Path
    startup_sound: str
    cache_dir: Path


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    file: Path | None


@dataclass(frozen=True)
class AlarmHornConfig:
    """Top-level alarmhorn configuration."""

    google: GoogleConfig
    station: StationConfig
    indicator: IndicatorConfig
    audio: AudioConfig
    logging: LoggingConfig
    gongs: dict[str, str] = field(default_factory=dict)


_cached_config: AlarmHornConfig | None = None


def get_config_path() -> Path:
    """Return the default config file location."""
    return get_config_dir() / "config.toml"


def generate_config(path: Path | None = None) -> Path:
    """Generate default config file (defaults to ~/.config/alarmhorn/config.toml)."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def reset_config_cache() -> None:
    """Forget the cached configuration so the next load re-reads the file."""
    global _cached_config
    _cached_config = None


def _fail(messages: list[str], path: Path) -> None:
    for message in messages:
        print(message, file=sys.stderr)
    print(f"Edit {path} or delete it to regenerate.", file=sys.stderr)
    raise SystemExit(1)


def _expand(value: str) -> Path:
    return Path(value).expanduser()


def parse_pins(value: Any) -> tuple[int, ...]:
    """Parse indicator pins from a TOML list or a comma separated string.

    Raises:
        ValueError: If any element is not an integer.
    """
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        items: list[Any] = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, list | tuple):
        items = list(value)
    else:
        raise ValueError(f"pins must be a list of integers, got {value!r}")

    pins = []
    for item in items:
        if isinstance(item, bool):
            raise ValueError(f"pins contains non numeric element {item!r}")
        try:
            pins.append(int(item))
        except (TypeError, ValueError):
            raise ValueError(f"pins contains non numeric element {item!r}") from None
    return tuple(pins)


def parse_duration(value: Any, name: str = "duration") -> float:
    """Parse a positive number of seconds.

    Raises:
        ValueError: If the value is not a positive number.
    """
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} is non numeric: {value!r}") from None
    if seconds <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return seconds


def load_config(path: Path | None = None) -> AlarmHornConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and exits so the user
    can fill in the required values before proceeding.

    Args:
        path: Config file to read (defaults to ~/.config/alarmhorn/config.toml)

    Returns:
        Loaded and validated AlarmHornConfig.

    Raises:
        SystemExit: If config is missing (after generating) or invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    path = path or get_config_path()
    if not path.exists():
        generated = generate_config(path)
        print(
            f"No config found. Generated {generated}, fill it in and run again.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            _fail([f"Invalid config file: {e}"], path)

    google = data.get("google", {})
    station = data.get("station", {})
    indicator = data.get("indicator", {})
    audio = data.get("audio", {})
    gongs = data.get("gongs", {})
    logging_cfg = data.get("logging", {})

    project_id = os.getenv("ALARMHORN_PROJECT_ID", google.get("project_id", ""))
    key_file = os.getenv(
        "ALARMHORN_SERVICE_ACCOUNT_KEY", google.get("service_account_key", "")
    )
    bucket = os.getenv("ALARMHORN_BUCKET", google.get("bucket", ""))
    station_id = os.getenv("ALARMHORN_STATION_ID", station.get("id", ""))

    # Validate required fields
    missing = []
    if not project_id:
        missing.append("google.project_id")
    if not key_file:
        missing.append("google.service_account_key")
    if not bucket:
        missing.append("google.bucket")
    if not station_id:
        missing.append("station.id")

    if missing:
        _fail([f"Missing required config values: {', '.join(missing)}"], path)

    errors = []
    try:
        pins = parse_pins(os.getenv("ALARMHORN_LED_PINS", indicator.get("pins")))
    except ValueError as e:
        errors.append(f"Invalid indicator.pins: {e}")
        pins = ()
    try:
        duration = parse_duration(
            os.getenv("ALARMHORN_LED_DURATION", indicator.get("duration", DEFAULT_LED_DURATION))
        )
        startup_duration = parse_duration(
            indicator.get("startup_duration", DEFAULT_STARTUP_DURATION),
            "startup_duration",
        )
    except ValueError as e:
        errors.append(f"Invalid indicator setting: {e}")
        duration = startup_duration = 0.0

    arguments = audio.get("arguments", list(DEFAULT_PLAYER_ARGUMENTS))
    if not isinstance(arguments, list) or not all(isinstance(a, str) for a in arguments):
        errors.append("Invalid audio.arguments: must be a list of strings")
        arguments = []

    if not isinstance(gongs, dict) or not all(
        isinstance(v, str) for v in gongs.values()
    ):
        errors.append("Invalid [gongs] table: values must be file names")
        gongs = {}

    level = str(os.getenv("ALARMHORN_LOG_LEVEL", logging_cfg.get("level", "INFO"))).upper()
    if not isinstance(logging.getLevelName(level), int):
        errors.append(f"Invalid logging.level: {level}")

    if errors:
        _fail(errors, path)

    log_file = logging_cfg.get("file")
    if log_file is None:
        log_path: Path | None = get_state_dir() / "alarmhorn.log"
    else:
        log_path = _expand(log_file) if log_file else None

    _cached_config = AlarmHornConfig(
        google=GoogleConfig(
            project_id=project_id,
            service_account_key=_expand(key_file),
            bucket=bucket,
        ),
        station=StationConfig(id=station_id),
        indicator=IndicatorConfig(
            pins=pins,
            duration=duration,
            startup_duration=startup_duration,
        ),
        audio=AudioConfig(
            player=audio.get("player", DEFAULT_PLAYER),
            arguments=tuple(arguments),
            assets_dir=_expand(audio["assets_dir"])
            if audio.get("assets_dir")
            else get_data_dir(),
            startup_sound=audio.get("startup_sound", "startup.mp3"),
            cache_dir=_expand(audio["cache_dir"])
            if audio.get("cache_dir")
            else get_cache_dir(),
        ),
        logging=LoggingConfig(
            level=level,
            file=log_path,
        ),
        gongs=dict(gongs),
    )

    return _cached_config
