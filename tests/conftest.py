"""Pytest configuration and fixtures for alarmhorn tests."""

import sys
from pathlib import Path

import pytest

# Add src and tests to path so test modules can import alarmhorn and test_helpers
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from alarmhorn.config import reset_config_cache  # noqa: E402
from alarmhorn.models import AlarmKind  # noqa: E402
from alarmhorn.media.gongs import DEFAULT_GONGS, GongTable  # noqa: E402
from test_helpers import FakeBlobStore, FakeOutput  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at a per-test temp dir and clear the config cache."""
    for var in ("XDG_CONFIG_HOME", "XDG_CACHE_HOME", "XDG_DATA_HOME", "XDG_STATE_HOME"):
        monkeypatch.setenv(var, str(tmp_path / var.lower()))
    for var in (
        "ALARMHORN_PROJECT_ID",
        "ALARMHORN_SERVICE_ACCOUNT_KEY",
        "ALARMHORN_BUCKET",
        "ALARMHORN_STATION_ID",
        "ALARMHORN_LED_PINS",
        "ALARMHORN_LED_DURATION",
        "ALARMHORN_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)

    reset_config_cache()
    yield tmp_path
    reset_config_cache()


@pytest.fixture
def outputs() -> list[FakeOutput]:
    """Two fake indicator outputs."""
    return [FakeOutput(17), FakeOutput(27)]


@pytest.fixture
def blob_store() -> FakeBlobStore:
    """Blob store holding one rendered speech clip."""
    return FakeBlobStore({"clips/1.mp3": b"ID3 speech clip"})


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    """Assets directory containing every default gong file."""
    path = tmp_path / "assets"
    path.mkdir()
    for filename in DEFAULT_GONGS.values():
        if filename is not None:
            (path / filename).write_bytes(b"RIFF gong")
    (path / "startup.mp3").write_bytes(b"ID3 startup")
    return path


@pytest.fixture
def gongs(assets_dir: Path) -> GongTable:
    """Default gong table over the test assets."""
    return GongTable(assets_dir)


@pytest.fixture
def zug_gong(assets_dir: Path) -> Path:
    return assets_dir / DEFAULT_GONGS[AlarmKind.ZUGALARM]
