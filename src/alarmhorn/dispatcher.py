"""Alarm dispatcher: lights first, then gong and speech.

Coordinates IndicatorController, GongTable, MediaCache and Player for one
dispatch decision at a time.
"""

import logging
from pathlib import Path
from typing import Any

from .audio.player import Player
from .errors import DownloadError, PlaybackError, PlayerNotAvailableError
from .indicator.controller import IndicatorController
from .media.cache import MediaCache
from .media.gongs import GongTable
from .models import DispatchDecision

logger = logging.getLogger(__name__)


class AlarmDispatcher:
    """Announces alarms on the indicator lights and the speaker.

    The lights go on before any media is resolved so a slow download never
    delays the visible alert. Audio failures are logged and never undo the
    lights.

    Example:
        dispatcher = AlarmDispatcher(indicator, gongs, cache, player)
        result = await dispatcher.handle(
            DispatchDecision(kind=AlarmKind.ZUGALARM, remote_audio_path="clips/1.mp3")
        )
        # Returns: {"flashed": True, "played": [".../zug-alarm_mit_gong.wav",
        #           ".../clips/1.mp3"], "error": None}
    """

    def __init__(
        self,
        indicator: IndicatorController,
        gongs: GongTable,
        cache: MediaCache,
        player: Player,
    ) -> None:
        self.indicator = indicator
        self.gongs = gongs
        self.cache = cache
        self.player = player

    async def handle(self, decision: DispatchDecision) -> dict[str, Any]:
        """Announce one alarm.

        Args:
            decision: Alarm to announce

        Returns:
            Dictionary with dispatch results:
                {
                    "flashed": bool,       # True if the lights were switched on
                    "played": list[str],   # Files played successfully, in order
                    "error": str | None    # First audio failure, if any
                }
        """
        context = f"alarm {decision.document_id or '?'} ({decision.kind.value})"
        result: dict[str, Any] = {"flashed": False, "played": [], "error": None}

        try:
            self.indicator.start_flashing()
            result["flashed"] = True
        except Exception as e:
            logger.error(f"Failed to switch on lights for {context}: {e}")

        playlist: list[Path] = []

        gong_path = self.gongs.path_for(decision.kind)
        if gong_path is None:
            logger.debug(f"No gong for {context}")
        elif not gong_path.exists():
            result["error"] = f"Could not find gong {decision.kind.value} at {gong_path}"
            logger.error(f"{result['error']} for {context}")
        else:
            playlist.append(gong_path)

        if decision.remote_audio_path:
            try:
                playlist.append(await self.cache.resolve(decision.remote_audio_path))
            except (DownloadError, ValueError) as e:
                result["error"] = result["error"] or str(e)
                logger.error(f"Could not fetch speech clip for {context}: {e}")

        if not playlist:
            logger.debug(f"Nothing to play for {context}")
            return result

        logger.debug(f"Playing {', '.join(str(p) for p in playlist)} for {context}")
        try:
            await self.player.play(playlist)
            result["played"] = [str(p) for p in playlist]
        except PlayerNotAvailableError as e:
            result["error"] = result["error"] or str(e)
            logger.error(f"Could not play {context}: {e}")
        except PlaybackError as e:
            result["error"] = result["error"] or str(e)
            logger.error(f"Could not play {context}: {e}")
            if e.stderr:
                logger.debug(f"Player stderr for {context}: {e.stderr.strip()}")

        return result
