"""Digital output lines driving the indicator lights."""

import logging
from abc import ABC, abstractmethod

from ..errors import IndicatorError

logger = logging.getLogger(__name__)


class OutputLine(ABC):
    """A single digital output that can be driven active or inactive."""

    pin: int

    @abstractmethod
    def set(self, active: bool) -> None:
        """Drive the line to the active (True) or inactive (False) level."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the line so the underlying hardware resource is freed."""
        pass


class GpioOutput(OutputLine):
    """Raspberry Pi GPIO output addressed by BCM pin number (RPi.GPIO)."""

    def __init__(self, pin: int) -> None:
        """Configure ``pin`` as an output, initially inactive.

        Raises:
            IndicatorError: If RPi.GPIO is missing or the pin cannot be set up
        """
        self.pin = pin
        try:
            # Only importable on a Raspberry Pi, so load it on first use
            import RPi.GPIO as GPIO

            GPIO.setwarnings(False)
            GPIO.setmode(GPIO.BCM)
            GPIO.setup(pin, GPIO.OUT, initial=GPIO.LOW)
        except (ImportError, RuntimeError, ValueError) as e:
            raise IndicatorError(f"Cannot use GPIO pin {pin} as output: {e}", pin, e) from e

        self._gpio = GPIO

    def set(self, active: bool) -> None:
        self._gpio.output(self.pin, self._gpio.HIGH if active else self._gpio.LOW)

    def close(self) -> None:
        self._gpio.cleanup(self.pin)
        logger.debug(f"Released GPIO pin {self.pin}")


def create_gpio_outputs(pins: tuple[int, ...] | list[int]) -> list[OutputLine]:
    """Create one GpioOutput per pin.

    Raises:
        IndicatorError: If any pin cannot be configured; pins configured
            before the failure are released again
    """
    outputs: list[OutputLine] = []
    try:
        for pin in pins:
            outputs.append(GpioOutput(pin))
    except IndicatorError:
        for output in outputs:
            output.close()
        raise
    return outputs
