"""Modern CLI tool availability probe.

Each tool is checked independently: a lookup or version failure for one tool
never affects the others, and version problems degrade to "unknown" instead
of raising.
"""

import logging
import shutil
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from claude_forge.models.tools import TOOL_BINARIES, ProbeResult
from claude_forge.utils.process import CommandRunner, WhichFunc, run_command

logger = logging.getLogger(__name__)

UNKNOWN_VERSION = "unknown"


@dataclass
class ToolCheck:
    """Result of checking a single tool.

    Attributes:
        name: Tool binary name
        available: Whether the tool is on PATH
        path: Resolved executable path if available
        version: First line of `<tool> --version`, "unknown" on failure
    """

    name: str
    available: bool
    path: str | None = None
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.name,
            "available": self.available,
            "path": self.path,
            "version": self.version,
        }


class ToolsProbe:
    """Checks which external executables are installed.

    Usage:
        probe = ToolsProbe()
        result = probe.probe_all()
        if not result.is_installed("rg"):
            ...
    """

    def __init__(
        self,
        which: WhichFunc = shutil.which,
        runner: CommandRunner = run_command,
        timeout: float = 10,
    ) -> None:
        """Initialize the probe.

        Args:
            which: PATH lookup function
            runner: Command runner used for version checks
            timeout: Timeout in seconds for version checks
        """
        self._which = which
        self._runner = runner
        self.timeout = timeout

    def locate(self, tool: str) -> str | None:
        """Resolve a tool on PATH, treating lookup errors as not found."""
        try:
            return self._which(tool)
        except OSError as e:
            logger.debug("PATH lookup for %s failed: %s", tool, e)
            return None

    def is_installed(self, tool: str) -> bool:
        """Check if a tool is available on PATH."""
        return self.locate(tool) is not None

    def probe(self, tools: Iterable[str]) -> ProbeResult:
        """Check each named tool for presence on PATH.

        Args:
            tools: Executable names

        Returns:
            ProbeResult mapping each name to its installed flag
        """
        installed = {tool: self.is_installed(tool) for tool in tools}
        logger.debug("Probe result: %s", installed)
        return ProbeResult(installed)

    def probe_all(self) -> ProbeResult:
        """Probe every tool in the modern CLI tool catalog."""
        return self.probe(TOOL_BINARIES)

    def version(self, tool: str, version_args: list[str] | None = None) -> str | None:
        """Get the self-reported version of a tool.

        Args:
            tool: Executable name
            version_args: Arguments that print the version (default: ["--version"])

        Returns:
            None if the tool is not installed, the first line of its version
            output otherwise, or "unknown" if running it fails
        """
        if not self.is_installed(tool):
            return None

        if version_args is None:
            version_args = ["--version"]

        try:
            result = self._runner([tool, *version_args], timeout=self.timeout)
        except (subprocess.TimeoutExpired, OSError, UnicodeError) as e:
            logger.debug("Version check for %s failed: %s", tool, e)
            return UNKNOWN_VERSION

        if not result.ok:
            logger.debug("Version check for %s exited with %d", tool, result.returncode)
            return UNKNOWN_VERSION

        output = result.stdout.strip() or result.stderr.strip()
        return output.split("\n")[0].strip() if output else UNKNOWN_VERSION

    def check(self, tool: str, with_version: bool = True) -> ToolCheck:
        """Check availability, location and (optionally) version of a tool."""
        path = self.locate(tool)
        if path is None:
            return ToolCheck(name=tool, available=False)

        version = self.version(tool) if with_version else None
        return ToolCheck(name=tool, available=True, path=path, version=version)

    def check_all(self, with_version: bool = True) -> list[ToolCheck]:
        """Check every catalog tool."""
        return [self.check(tool, with_version=with_version) for tool in TOOL_BINARIES]
