"""Unit tests for Player command building and error handling."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from alarmhorn.audio.player import Player
from alarmhorn.errors import PlaybackError, PlayerNotAvailableError


def make_process(returncode: int, stdout: bytes = b"", stderr: bytes = b"") -> MagicMock:
    """Mock asyncio subprocess with fixed output."""
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


class TestPlayerLookup:
    """Test locating the playback program."""

    def test_program_is_located_once(self) -> None:
        """Test shutil.which runs at construction only."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc") as mock_which:
            player = Player()
            player.build_command(["a.wav"])
            player.build_command(["b.wav"])

        mock_which.assert_called_once_with("vlc")
        assert player.available is True

    @pytest.mark.asyncio
    async def test_missing_program_fails_every_call_without_spawning(self) -> None:
        """Test a missing player raises PlayerNotAvailableError immediately."""
        with patch("alarmhorn.audio.player.shutil.which", return_value=None):
            player = Player("vlc")

        assert player.available is False
        with patch("alarmhorn.audio.player.asyncio.create_subprocess_exec") as mock_exec:
            for _ in range(2):
                with pytest.raises(PlayerNotAvailableError):
                    await player.play(["gong.wav"])
            mock_exec.assert_not_called()


class TestBuildCommand:
    """Test command line construction."""

    def test_default_vlc_command(self) -> None:
        """Test files are placed between -Idummy and vlc://quit."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc"):
            player = Player()

        command = player.build_command([Path("/a/gong.wav"), "/b/speech.mp3"])

        assert command == ["/usr/bin/vlc", "-Idummy", "/a/gong.wav", "/b/speech.mp3", "vlc://quit"]

    def test_files_appended_without_placeholder(self) -> None:
        """Test files go last when the arguments have no {files}."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/mpg123"):
            player = Player("mpg123", ["-q"])

        assert player.build_command(["x.mp3", "y.mp3"]) == ["/usr/bin/mpg123", "-q", "x.mp3", "y.mp3"]


class TestPlay:
    """Test play() outcomes."""

    @pytest.mark.asyncio
    async def test_exit_zero_is_success(self) -> None:
        """Test a zero exit code resolves with captured stdout."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc"):
            player = Player()

        with patch(
            "alarmhorn.audio.player.asyncio.create_subprocess_exec",
            AsyncMock(return_value=make_process(0, b"done\n")),
        ) as mock_exec:
            output = await player.play(["gong.wav", "speech.mp3"])

        assert output == "done\n"
        # One process for the whole playlist
        mock_exec.assert_awaited_once()
        args = mock_exec.await_args.args
        assert args == ("/usr/bin/vlc", "-Idummy", "gong.wav", "speech.mp3", "vlc://quit")

    @pytest.mark.asyncio
    async def test_nonzero_exit_carries_stderr(self) -> None:
        """Test a nonzero exit raises PlaybackError with the error stream."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc"):
            player = Player()

        with patch(
            "alarmhorn.audio.player.asyncio.create_subprocess_exec",
            AsyncMock(return_value=make_process(1, b"", b"cannot open audio device\n")),
        ):
            with pytest.raises(PlaybackError, match="vlc failed with code 1") as exc_info:
                await player.play(["gong.wav"])

        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "cannot open audio device\n"

    @pytest.mark.asyncio
    async def test_spawn_failure_raises_playback_error(self) -> None:
        """Test OS errors while spawning become PlaybackError."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc"):
            player = Player()

        with patch(
            "alarmhorn.audio.player.asyncio.create_subprocess_exec",
            AsyncMock(side_effect=PermissionError("not executable")),
        ):
            with pytest.raises(PlaybackError, match="Failed to start vlc") as exc_info:
                await player.play(["gong.wav"])

        assert exc_info.value.returncode is None
        assert isinstance(exc_info.value.original_error, PermissionError)

    @pytest.mark.asyncio
    async def test_empty_playlist_raises_value_error(self) -> None:
        """Test play() refuses to spawn with no files."""
        with patch("alarmhorn.audio.player.shutil.which", return_value="/usr/bin/vlc"):
            player = Player()

        with pytest.raises(ValueError, match="No audio files provided"):
            await player.play([])

    @pytest.mark.asyncio
    async def test_play_quietly_swallows_failures(self) -> None:
        """Test play_quietly logs instead of raising."""
        with patch("alarmhorn.audio.player.shutil.which", return_value=None):
            player = Player()

        assert await player.play_quietly(["startup.mp3"]) is False
