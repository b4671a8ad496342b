"""Alarm service: serial processing of change-feed diffs.

The change feed calls back from its own thread. Diffs are moved onto the
event loop and queued; a single worker drains the queue so every diff is
processed to completion, playback included, before the next one starts.
"""

import asyncio
import logging
import signal
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .audio.player import Player
from .config import AlarmHornConfig
from .dispatcher import AlarmDispatcher
from .feed.base import ChangeFeed, Unsubscribe
from .feed.classifier import ChangeFeedClassifier
from .indicator.controller import IndicatorController
from .models import ChangeEvent

logger = logging.getLogger(__name__)


class AlarmService:
    """Runs the alarm pipeline: feed -> classifier -> dispatcher."""

    def __init__(
        self,
        feed: ChangeFeed,
        dispatcher: AlarmDispatcher,
        classifier: ChangeFeedClassifier | None = None,
        startup_sound: Path | None = None,
        startup_duration: float = 5.0,
    ) -> None:
        """Initialize service.

        Args:
            feed: Source of alarm diffs
            dispatcher: Announces classified alarms
            classifier: Classifier for this subscription (a fresh one by default)
            startup_sound: Optional sound played once by startup()
            startup_duration: Seconds the lights flash during startup()
        """
        self.feed = feed
        self.dispatcher = dispatcher
        self.classifier = classifier or ChangeFeedClassifier()
        self.startup_sound = startup_sound
        self.startup_duration = startup_duration

        self.diff_queue: asyncio.Queue[list[ChangeEvent]] = asyncio.Queue()
        self.worker_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unsubscribe: Unsubscribe | None = None

    @property
    def indicator(self) -> IndicatorController:
        return self.dispatcher.indicator

    @property
    def player(self) -> Player:
        return self.dispatcher.player

    def submit(self, diff: Iterable[ChangeEvent]) -> None:
        """Queue a diff for processing. Safe to call from any thread."""
        if self._loop is None:
            raise RuntimeError("AlarmService has not been started")
        self._loop.call_soon_threadsafe(self.diff_queue.put_nowait, list(diff))

    async def process_diff(self, diff: list[ChangeEvent]) -> list[dict[str, Any]]:
        """Classify one diff and announce its alarms in order.

        A failing alarm is logged and skipped; the rest of the diff is still
        announced.
        """
        results = []
        for decision in self.classifier.classify(diff):
            try:
                results.append(await self.dispatcher.handle(decision))
            except Exception as e:
                logger.error(
                    f"Error announcing alarm {decision.document_id or '?'} "
                    f"({decision.kind.value}): {e}"
                )
        return results

    async def process_queue(self) -> None:
        """Process queued diffs serially to prevent audio overlap."""
        while True:
            diff = await self.diff_queue.get()
            try:
                await self.process_diff(diff)
            except Exception as e:
                logger.error(f"Error processing alarm diff: {e}")
            finally:
                self.diff_queue.task_done()

    async def startup(self) -> None:
        """Flash the lights and play the startup sound, ignoring audio failures."""
        self.indicator.start_flashing(self.startup_duration)

        if self.startup_sound is None:
            return
        if not self.startup_sound.exists():
            logger.warning(f"Startup sound not found at {self.startup_sound}")
            return

        logger.debug(f"Playing startup sound from {self.startup_sound}")
        await self.player.play_quietly([self.startup_sound])

    async def start(self) -> None:
        """Start the worker and subscribe to the feed."""
        self._loop = asyncio.get_running_loop()
        self.worker_task = asyncio.create_task(self.process_queue())
        self._unsubscribe = self.feed.subscribe(self.submit)

    async def stop(self) -> None:
        """Unsubscribe, stop the worker and release the lights.

        A playback in progress is not terminated; its process keeps running
        until it exits on its own.
        """
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception as e:
                logger.warning(f"Failed to unsubscribe from change feed: {e}")
            self._unsubscribe = None

        if self.worker_task is not None:
            self.worker_task.cancel()
            try:
                await self.worker_task
            except asyncio.CancelledError:
                pass
            self.worker_task = None

        self.indicator.close()

    async def run(self, stop_event: asyncio.Event) -> None:
        """Run until ``stop_event`` is set, then shut down."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop()


def build_service(config: AlarmHornConfig) -> tuple[AlarmService, Any]:
    """Create every component from configuration.

    Returns:
        The service and the Firestore client (needed for the station lookup)

    Raises:
        IndicatorError: If a configured pin cannot be used
        ValueError: If the gong table is invalid
    """
    from .feed.firestore import FirestoreChangeFeed, create_client
    from .indicator.outputs import create_gpio_outputs
    from .media.blobstore import GcsBlobStore
    from .media.cache import MediaCache
    from .media.gongs import GongTable

    gongs = GongTable.from_overrides(config.audio.assets_dir, config.gongs)
    outputs = create_gpio_outputs(config.indicator.pins)
    indicator = IndicatorController(outputs, config.indicator.duration)
    player = Player(config.audio.player, config.audio.arguments)

    client = create_client(config.google.service_account_key, config.google.project_id)
    blob_store = GcsBlobStore.from_service_account(
        config.google.service_account_key,
        config.google.project_id,
        config.google.bucket,
    )
    cache = MediaCache(blob_store, config.audio.cache_dir)
    feed = FirestoreChangeFeed(client, config.station.alarms_path)

    startup_sound = (
        config.audio.assets_dir / config.audio.startup_sound
        if config.audio.startup_sound
        else None
    )

    service = AlarmService(
        feed=feed,
        dispatcher=AlarmDispatcher(indicator, gongs, cache, player),
        startup_sound=startup_sound,
        startup_duration=config.indicator.startup_duration,
    )
    return service, client


async def run_client(config: AlarmHornConfig) -> None:
    """Run the alarm client until SIGTERM or SIGINT.

    Raises:
        StationNotFoundError: If the station document does not exist
        IndicatorError: If a configured pin cannot be used
    """
    from .feed.firestore import get_station

    service, client = build_service(config)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def handle_signal() -> None:
        logger.info("Received shutdown signal")
        service.indicator.force_off()
        stop_event.set()

    # Use asyncio's signal handler instead of signal.signal()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    try:
        await service.startup()

        station = await asyncio.to_thread(get_station, client, config.station.document_path)
        logger.info(
            f'Starting listener for new alarms at station "{station.get("name", config.station.id)}" '
            f'in project "{config.google.project_id}"'
        )

        await service.run(stop_event)
    finally:
        service.indicator.close()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)
        logger.info("Alarm client stopped")
