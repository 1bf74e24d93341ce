"""Injectable external command execution.

Everything that spawns a process (version probes, package managers) goes
through a CommandRunner so it can be swapped for a fake in tests.
"""

import logging
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one finished command.

    Attributes:
        args: Command line that was run
        returncode: Process exit status
        stdout: Captured standard output
        stderr: Captured standard error
    """

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True when the command exited with status 0."""
        return self.returncode == 0


class CommandRunner(Protocol):
    """Runs a command to completion and captures its output.

    Implementations raise OSError when the executable cannot be started and
    subprocess.TimeoutExpired when it does not finish in time.
    """

    def __call__(self, args: Sequence[str], timeout: float | None = None) -> CommandResult: ...


def run_command(args: Sequence[str], timeout: float | None = None) -> CommandResult:
    """Default CommandRunner backed by subprocess.run.

    Output that is not valid UTF-8 is decoded with replacement characters.
    """
    logger.debug("Running: %s", " ".join(args))
    completed = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        errors="replace",
        timeout=timeout,
        check=False,
    )
    return CommandResult(
        args=tuple(args),
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


# Resolves an executable name to its full path, or None (shutil.which shape)
WhichFunc = Callable[[str], str | None]
