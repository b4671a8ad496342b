"""Indicator light controller: flash for a while, then switch off."""

import asyncio
import logging
from collections.abc import Iterable

from ..config import DEFAULT_LED_DURATION
from .outputs import OutputLine

logger = logging.getLogger(__name__)


class IndicatorController:
    """Two-state timer over a set of indicator outputs.

    Off -> start_flashing(d) -> Flashing(now + d) -> deadline -> Off.

    Calling start_flashing() while flashing restarts the countdown from the
    new duration; the most recent trigger always wins. The deadline is
    scheduled on the running event loop, so it fires on time even while
    the loop awaits a long playback.

    With no outputs configured the controller still tracks its state and
    accepts every call.
    """

    def __init__(
        self,
        outputs: Iterable[OutputLine] = (),
        default_duration: float = DEFAULT_LED_DURATION,
    ) -> None:
        """Initialize controller and switch every output off.

        Args:
            outputs: Output lines owned by this controller
            default_duration: Seconds to flash when no duration is given

        Raises:
            ValueError: If default_duration is not positive
        """
        if default_duration <= 0:
            raise ValueError(f"default_duration must be positive, got {default_duration}")

        self.outputs = list(outputs)
        self.default_duration = default_duration
        self._timer: asyncio.TimerHandle | None = None
        self._active_until: float | None = None
        self._released = False

        if not self.outputs:
            logger.info("No indicator pins configured, lights won't flash on new alarms")

        self._set_all(False)

    @property
    def is_flashing(self) -> bool:
        return self._active_until is not None

    @property
    def active_until(self) -> float | None:
        """Deadline on the event loop clock, or None when off."""
        return self._active_until

    def start_flashing(self, duration: float | None = None) -> None:
        """Switch the lights on for ``duration`` seconds (default duration if None).

        Must be called from within the running event loop.

        Raises:
            ValueError: If duration is not positive
        """
        if duration is None:
            duration = self.default_duration
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        if self._released:
            logger.debug("Indicator outputs already released, ignoring flash request")
            return

        loop = asyncio.get_running_loop()
        logger.debug(f"Starting lights for {duration} seconds")

        self._cancel_timer()
        self._set_all(True)
        self._active_until = loop.time() + duration
        self._timer = loop.call_later(duration, self._on_deadline)

    def force_off(self, release: bool = False) -> None:
        """Switch the lights off now and cancel any pending deadline.

        Args:
            release: Also release the outputs (final shutdown only)
        """
        self._cancel_timer()
        self._active_until = None

        if self._released:
            return

        self._set_all(False)

        if release:
            for output in self.outputs:
                output.close()
            self._released = True
            logger.debug("Indicator outputs released")

    def close(self) -> None:
        """Switch off and release every output."""
        self.force_off(release=True)

    def _on_deadline(self) -> None:
        self._timer = None
        self._active_until = None
        logger.debug("Light duration elapsed, switching off")
        self._set_all(False)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_all(self, active: bool) -> None:
        logger.debug(f"Setting lights to {'ON' if active else 'OFF'}")
        for output in self.outputs:
            output.set(active)
