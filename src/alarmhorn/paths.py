"""XDG-compliant directory paths for alarmhorn."""

import os
from pathlib import Path


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    base = os.environ.get(env_var)
    return (Path(base) if base else fallback) / "alarmhorn"


def get_config_dir() -> Path:
    """Get XDG-compliant configuration directory.

    Priority:
    1. $XDG_CONFIG_HOME/alarmhorn/
    2. ~/.config/alarmhorn/

    Returns:
        Path to configuration directory (not created)
    """
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config")


def get_cache_dir() -> Path:
    """Get XDG-compliant cache directory for downloaded speech clips.

    Priority:
    1. $XDG_CACHE_HOME/alarmhorn/media/
    2. ~/.cache/alarmhorn/media/

    Returns:
        Path to media cache directory (not created)
    """
    return _xdg_dir("XDG_CACHE_HOME", Path.home() / ".cache") / "media"


def get_data_dir() -> Path:
    """Get XDG-compliant data directory holding the gong assets.

    Priority:
    1. $XDG_DATA_HOME/alarmhorn/assets/
    2. ~/.local/share/alarmhorn/assets/
    """
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share") / "assets"


def get_state_dir() -> Path:
    """Get XDG-compliant state directory for the log file."""
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state")
