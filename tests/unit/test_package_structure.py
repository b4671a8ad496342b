"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that alarmhorn package can be imported."""
    import alarmhorn

    assert alarmhorn.__version__ == "0.1.0"


def test_lazy_service_export() -> None:
    """Test that AlarmService is reachable from the package root."""
    import alarmhorn
    from alarmhorn.service import AlarmService

    assert alarmhorn.AlarmService is AlarmService


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from alarmhorn.__main__ import main

    # Should be able to import the main function
    assert callable(main)
