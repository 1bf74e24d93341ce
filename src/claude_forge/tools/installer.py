"""Installs missing modern CLI tools through the platform package manager.

Platform selection:
- macOS: brew install <formula>
- Linux: sudo apt install -y <package> when apt exists, else cargo install <crate>
- Anything else: cargo install <crate>

Updates use the same package manager: brew upgrade, apt --only-upgrade, or a
cargo reinstall of the latest crate.
"""

import logging
import subprocess
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from claude_forge.models.tools import TOOL_CATALOG, ToolSpec
from claude_forge.tools.probe import ToolsProbe
from claude_forge.utils.logging import get_logger
from claude_forge.utils.process import CommandRunner, run_command

logger = get_logger(__name__)


class ToolInstallError(Exception):
    """Raised when a package manager fails to install a tool."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        exit_code: int | None = None,
        stderr: str | None = None,
        action: str = "install",
    ) -> None:
        self.tool_name = tool_name
        self.exit_code = exit_code
        self.stderr = stderr
        full_message = f"Failed to {action} {tool_name}: {message}"
        if exit_code is not None:
            full_message += f" (exit code: {exit_code})"
        super().__init__(full_message)


class InstallStatus(Enum):
    """Per-tool outcome of an install or update run."""

    ALREADY_INSTALLED = "already installed"
    WOULD_INSTALL = "would install"
    INSTALLED = "installed"
    WOULD_UPDATE = "would update"
    UPDATED = "updated"
    NOT_INSTALLED = "not installed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class InstallOutcome:
    """What happened to one tool during an install or update run."""

    tool: ToolSpec
    status: InstallStatus
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "tool": self.tool.binary,
            "status": self.status.value,
            "message": self.message,
        }


def detect_platform() -> str:
    """Return "macos", "linux", "windows" or "unknown"."""
    if sys.platform == "darwin":
        return "macos"
    if sys.platform.startswith("linux"):
        return "linux"
    if sys.platform in ("win32", "cygwin"):
        return "windows"
    return "unknown"


class ToolsInstaller:
    """Installs catalog tools that the probe reports as missing.

    Usage:
        installer = ToolsInstaller()
        for outcome in installer.install_missing(skip=["dust"], dry_run=True):
            print(outcome.tool.binary, outcome.status.value)
    """

    def __init__(
        self,
        probe: ToolsProbe | None = None,
        runner: CommandRunner = run_command,
        platform: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the installer.

        Args:
            probe: Probe used for installed checks and package manager lookup
            runner: Command runner for package manager invocations
            platform: Override for platform detection
            timeout: Optional timeout per package manager invocation
        """
        self.probe = probe or ToolsProbe(runner=runner)
        self._runner = runner
        self.platform = platform or detect_platform()
        self.timeout = timeout

    def install_missing(
        self,
        skip: Iterable[str] = (),
        dry_run: bool = False,
        tools: Iterable[ToolSpec] = TOOL_CATALOG,
    ) -> list[InstallOutcome]:
        """Install every missing tool, continuing past individual failures.

        Args:
            skip: Binary or display names to leave alone
            dry_run: Report what would be installed without running anything
            tools: Catalog entries to consider

        Returns:
            One outcome per tool, in catalog order
        """
        skipped = set(skip)
        outcomes: list[InstallOutcome] = []

        for spec in tools:
            if spec.binary in skipped or spec.display_name in skipped:
                outcomes.append(InstallOutcome(spec, InstallStatus.SKIPPED))
                continue

            if self.probe.is_installed(spec.binary):
                outcomes.append(InstallOutcome(spec, InstallStatus.ALREADY_INSTALLED))
                continue

            if dry_run:
                command = " ".join(self.install_command(spec))
                outcomes.append(InstallOutcome(spec, InstallStatus.WOULD_INSTALL, command))
                continue

            try:
                self.install(spec)
            except ToolInstallError as e:
                outcomes.append(InstallOutcome(spec, InstallStatus.FAILED, str(e)))
            else:
                outcomes.append(InstallOutcome(spec, InstallStatus.INSTALLED))
            _log_outcome(outcomes[-1])

        return outcomes

    def update(
        self,
        skip: Iterable[str] = (),
        dry_run: bool = False,
        tools: Iterable[ToolSpec] = TOOL_CATALOG,
    ) -> list[InstallOutcome]:
        """Upgrade every installed tool, continuing past individual failures.

        Tools that are not installed are reported as NOT_INSTALLED and left
        alone; `install_missing` is the way to get them.

        Args:
            skip: Binary or display names to leave alone
            dry_run: Report what would be updated without running anything
            tools: Catalog entries to consider

        Returns:
            One outcome per tool, in catalog order
        """
        skipped = set(skip)
        outcomes: list[InstallOutcome] = []

        for spec in tools:
            if spec.binary in skipped or spec.display_name in skipped:
                outcomes.append(InstallOutcome(spec, InstallStatus.SKIPPED))
                continue

            if not self.probe.is_installed(spec.binary):
                outcomes.append(InstallOutcome(spec, InstallStatus.NOT_INSTALLED))
                continue

            command = self.update_command(spec)
            if dry_run:
                outcomes.append(InstallOutcome(spec, InstallStatus.WOULD_UPDATE, " ".join(command)))
                continue

            try:
                self._run(spec, command, action="update")
            except ToolInstallError as e:
                outcomes.append(InstallOutcome(spec, InstallStatus.FAILED, str(e)))
            else:
                outcomes.append(InstallOutcome(spec, InstallStatus.UPDATED))
            _log_outcome(outcomes[-1])

        return outcomes

    def install_command(self, spec: ToolSpec) -> list[str]:
        """Primary install command for a tool on this platform."""
        if self.platform == "macos":
            return ["brew", "install", spec.brew_package]
        if self.platform == "linux" and self.probe.is_installed("apt"):
            return ["sudo", "apt", "install", "-y", spec.apt_package]
        return ["cargo", "install", spec.cargo_package]

    def update_command(self, spec: ToolSpec) -> list[str]:
        """Upgrade command for a tool on this platform."""
        if self.platform == "macos":
            return ["brew", "upgrade", spec.brew_package]
        if self.platform == "linux" and self.probe.is_installed("apt"):
            return ["sudo", "apt", "install", "--only-upgrade", "-y", spec.apt_package]
        return ["cargo", "install", "--force", spec.cargo_package]

    def install(self, spec: ToolSpec) -> None:
        """Install one tool.

        On Linux a failed apt install falls back to cargo.

        Raises:
            ToolInstallError: If every attempted package manager fails
        """
        command = self.install_command(spec)
        try:
            self._run(spec, command)
        except ToolInstallError:
            if command[0] == "cargo":
                raise
            if self.platform != "linux":
                raise
            logger.debug("apt install of %s failed, trying cargo", spec.apt_package)
            self._run(spec, ["cargo", "install", spec.cargo_package])

    def _run(self, spec: ToolSpec, command: list[str], action: str = "install") -> None:
        """Run one package manager command, raising ToolInstallError on failure."""
        try:
            result = self._runner(command, timeout=self.timeout)
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ToolInstallError(spec.display_name, f"could not run {command[0]}: {e}", action=action) from e

        if not result.ok:
            raise ToolInstallError(
                spec.display_name,
                f"{command[0]} {action} failed",
                exit_code=result.returncode,
                stderr=result.stderr.strip() or None,
                action=action,
            )


def _log_outcome(outcome: InstallOutcome) -> None:
    """Log a finished install or update, with the outcome as JSON fields."""
    if outcome.status is InstallStatus.FAILED:
        logger.structured(logging.WARNING, outcome.message, **outcome.to_dict())
    else:
        logger.structured(logging.INFO, f"{outcome.status.value}: {outcome.tool.display_name}", **outcome.to_dict())
