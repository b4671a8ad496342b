"""Audio player driving an external playback program (VLC by default)."""

import asyncio
import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from ..config import DEFAULT_PLAYER, DEFAULT_PLAYER_ARGUMENTS
from ..errors import PlaybackError, PlayerNotAvailableError

logger = logging.getLogger(__name__)

FILES_PLACEHOLDER = "{files}"


class Player:
    """Plays local audio files through an external program.

    The program is looked up once at construction. Each play() call spawns
    it exactly once with every file, so the files are rendered back-to-back
    in a single invocation.
    """

    def __init__(
        self,
        program: str = DEFAULT_PLAYER,
        arguments: Sequence[str] = DEFAULT_PLAYER_ARGUMENTS,
    ) -> None:
        """Initialize the player and locate the playback program.

        Args:
            program: Program name (looked up on PATH) or path
            arguments: Command line arguments; ``{files}`` expands to the
                ordered file list (files are appended when it is absent)
        """
        self.program = program
        self.arguments = tuple(arguments)
        self.executable = shutil.which(program)

        if self.executable is None:
            logger.error(
                f"Could not find {program} on this device. Please install it "
                "and make sure its installation folder is on PATH"
            )

    @property
    def available(self) -> bool:
        return self.executable is not None

    def build_command(self, paths: Sequence[str | Path]) -> list[str]:
        """Build the full command line for playing ``paths`` in order."""
        if self.executable is None:
            raise PlayerNotAvailableError(f"Playback program {self.program} not available")

        files = [str(p) for p in paths]
        command = [self.executable]
        if FILES_PLACEHOLDER in self.arguments:
            for argument in self.arguments:
                if argument == FILES_PLACEHOLDER:
                    command.extend(files)
                else:
                    command.append(argument)
        else:
            command.extend(self.arguments)
            command.extend(files)
        return command

    async def play(self, paths: Sequence[str | Path]) -> str:
        """Play files in order and wait for the program to exit.

        Args:
            paths: Local audio files, in playback order

        Returns:
            Captured standard output of the program

        Raises:
            ValueError: If no files are given
            PlayerNotAvailableError: If the program was not found at startup
            PlaybackError: If the program cannot be spawned or exits nonzero
        """
        if not paths:
            raise ValueError("No audio files provided")

        command = self.build_command(paths)
        logger.debug(f"Running player: {' '.join(command)}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except OSError as e:
            raise PlaybackError(f"Failed to start {self.program}: {e}", original_error=e) from e

        out_text = stdout.decode(errors="replace")
        err_text = stderr.decode(errors="replace")

        if proc.returncode != 0:
            raise PlaybackError(
                f"{self.program} failed with code {proc.returncode}: {err_text.strip()}",
                returncode=proc.returncode,
                stdout=out_text,
                stderr=err_text,
            )

        if err_text.strip():
            logger.debug(f"{self.program} stderr: {err_text.strip()}")
        return out_text

    async def play_quietly(self, paths: Sequence[str | Path]) -> bool:
        """Play files, logging instead of raising on failure.

        Returns:
            True if playback succeeded
        """
        try:
            await self.play(paths)
        except (ValueError, PlayerNotAvailableError, PlaybackError) as e:
            logger.error(f"Could not play {', '.join(str(p) for p in paths) or 'nothing'}: {e}")
            return False
        return True
