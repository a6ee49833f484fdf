# src/osai_core/playback/player.py

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path

from ..core.errors import PlaybackError

logger = logging.getLogger(__name__)


def build_argv(command: str, handoff_path: Path) -> list[str]:
    """shlex-split a command line; "{lyric}" is replaced by the handoff path."""
    return [part.replace("{lyric}", str(handoff_path)) for part in shlex.split(command)]


class CommandPlayback:
    """
    Playback through external commands.

    Runs synth_command (voice synthesis from the handoff file) and then
    play_command (audio output). Either may be empty, in which case it is
    skipped. A non-zero exit status raises PlaybackError.
    """

    def __init__(self, synth_command: str = "", play_command: str = "") -> None:
        self.synth_command = (synth_command or "").strip()
        self.play_command = (play_command or "").strip()

    async def _run(self, command: str, handoff_path: Path) -> None:
        argv = build_argv(command, handoff_path)
        if not argv:
            return

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise PlaybackError(f"Failed to execute command {command!r}: {e}") from e

        stdout, stderr = await proc.communicate()
        if stdout:
            logger.debug("%s stdout: %s", argv[0], stdout.decode("utf-8", "replace").strip())
        if stderr:
            logger.debug("%s stderr: %s", argv[0], stderr.decode("utf-8", "replace").strip())

        if proc.returncode != 0:
            raise PlaybackError(f"Command {command!r} exited with status {proc.returncode}")

    async def play(self, handoff_path: Path) -> None:
        """Run only the play command (replay whatever synthesis last produced)."""
        if self.play_command:
            await self._run(self.play_command, handoff_path)
        else:
            logger.info("No play command configured; handoff left at %s", handoff_path)

    async def render_and_play(self, handoff_path: Path) -> None:
        if self.synth_command:
            await self._run(self.synth_command, handoff_path)
        await self.play(handoff_path)
