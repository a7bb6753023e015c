"""Allow-listed execution of external commands.

Only git is ever run. Anything else is rejected before a process is spawned.
"""

import subprocess
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from gitref.exceptions import CommandExecutionError, UnsupportedCommandError
from gitref.log import get_logger

logger = get_logger(__name__)


class CommandType(str, Enum):
    """Commands the runner is allowed to execute."""

    GIT = "git"


def validate_command(cmd: "CommandType | str") -> CommandType:
    """Return ``cmd`` as a CommandType, or raise UnsupportedCommandError."""
    try:
        return CommandType(cmd)
    except ValueError:
        raise UnsupportedCommandError(f'Unsupported command "{cmd}"') from None


@runtime_checkable
class ProcessRunner(Protocol):
    def execute(self, base_dir: Path, cmd: "CommandType | str", *args: str) -> bytes:
        ...


class SubprocessRunner:
    """Runs allow-listed commands with subprocess."""

    def execute(self, base_dir: Path, cmd: "CommandType | str", *args: str) -> bytes:
        """Run ``cmd args...`` in ``base_dir`` and return combined stdout/stderr.

        Raises:
            UnsupportedCommandError: If ``cmd`` is not an allowed command
            CommandExecutionError: If the command exits non-zero or cannot start
        """
        command = validate_command(cmd)
        try:
            result = subprocess.run(
                [command.value, *args],
                cwd=base_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise CommandExecutionError(f"could not run {command.value}: {e}") from e

        if result.returncode != 0:
            output = result.stdout.decode(errors="replace").strip()
            raise CommandExecutionError(
                f"{command.value} exited with status {result.returncode}: {output}",
                returncode=result.returncode,
                output=result.stdout,
            )
        return result.stdout
