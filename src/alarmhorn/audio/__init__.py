"""Audio playback package for alarmhorn.

This package plays local audio files through an external program.
"""

from .player import Player

__all__ = ["Player"]
