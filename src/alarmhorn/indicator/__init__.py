"""Indicator light package for alarmhorn."""

from .controller import IndicatorController
from .outputs import GpioOutput, OutputLine, create_gpio_outputs

__all__ = ["GpioOutput", "IndicatorController", "OutputLine", "create_gpio_outputs"]
