"""Unit tests for GPIO output lines with a mocked RPi.GPIO module."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from alarmhorn.errors import IndicatorError
from alarmhorn.indicator.outputs import GpioOutput, create_gpio_outputs


@pytest.fixture
def mock_gpio():
    """Mock RPi.GPIO so the tests run off a Raspberry Pi."""
    gpio = MagicMock()
    gpio.HIGH = 1
    gpio.LOW = 0
    rpi = MagicMock()
    rpi.GPIO = gpio
    with patch.dict(sys.modules, {"RPi": rpi, "RPi.GPIO": gpio}):
        yield gpio


class TestGpioOutput:
    """Test GpioOutput against the RPi.GPIO API."""

    def test_setup_configures_output_low(self, mock_gpio: MagicMock) -> None:
        """Test the pin is set up as BCM output, initially low."""
        GpioOutput(17)

        mock_gpio.setmode.assert_called_once_with(mock_gpio.BCM)
        mock_gpio.setup.assert_called_once_with(17, mock_gpio.OUT, initial=0)

    def test_set_drives_levels(self, mock_gpio: MagicMock) -> None:
        """Test active and inactive map to HIGH and LOW."""
        output = GpioOutput(17)

        output.set(True)
        output.set(False)

        assert [c.args for c in mock_gpio.output.call_args_list] == [(17, 1), (17, 0)]

    def test_close_cleans_up_pin(self, mock_gpio: MagicMock) -> None:
        """Test close() releases only this pin."""
        GpioOutput(22).close()

        mock_gpio.cleanup.assert_called_once_with(22)

    def test_setup_failure_raises_indicator_error(self, mock_gpio: MagicMock) -> None:
        """Test hardware errors become IndicatorError."""
        mock_gpio.setup.side_effect = RuntimeError("No access to /dev/mem")

        with pytest.raises(IndicatorError, match="Cannot use GPIO pin 4") as exc_info:
            GpioOutput(4)

        assert exc_info.value.pin == 4


class TestCreateGpioOutputs:
    """Test building outputs from configured pins."""

    def test_no_pins_needs_no_gpio(self) -> None:
        """Test an empty pin list never touches RPi.GPIO."""
        assert create_gpio_outputs([]) == []

    def test_one_output_per_pin(self, mock_gpio: MagicMock) -> None:
        """Test pins map to outputs in order."""
        outputs = create_gpio_outputs([17, 27])

        assert [o.pin for o in outputs] == [17, 27]

    def test_partial_failure_releases_earlier_pins(self, mock_gpio: MagicMock) -> None:
        """Test a bad pin releases the pins configured before it."""
        mock_gpio.setup.side_effect = [None, ValueError("invalid channel")]

        with pytest.raises(IndicatorError):
            create_gpio_outputs([17, 99])

        mock_gpio.cleanup.assert_called_once_with(17)
