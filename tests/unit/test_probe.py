"""Unit tests for the modern CLI tools probe."""

import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from claude_forge.models.tools import TOOL_BINARIES, TOOL_CATALOG, ProbeResult, get_tool
from claude_forge.tools.probe import UNKNOWN_VERSION, ToolsProbe
from claude_forge.utils.process import CommandResult, run_command


class TestProbeResult:
    """Tests for the ProbeResult mapping."""

    def test_missing_key_reads_as_not_installed(self) -> None:
        """Test that unprobed tools are not installed."""
        result = ProbeResult({"rg": True})

        assert result.is_installed("rg")
        assert not result.is_installed("fd")

    def test_is_read_only(self) -> None:
        """Test that a probe result cannot be modified."""
        result = ProbeResult({"rg": True})

        with pytest.raises(TypeError):
            result["rg"] = False  # type: ignore[index]

    def test_counts_and_missing(self) -> None:
        """Test installed count and missing tools in catalog order."""
        result = ProbeResult({"rg": True, "bat": True, "dust": False})

        assert result.installed_count() == 2
        assert [t.binary for t in result.missing()] == ["fd", "eza", "dust"]

    def test_all_and_none(self) -> None:
        """Test the convenience constructors."""
        assert ProbeResult.all_installed().installed_count() == len(TOOL_CATALOG)
        assert ProbeResult.none_installed().installed_count() == 0
        assert set(ProbeResult.none_installed()) == set(TOOL_BINARIES)

    def test_get_tool(self) -> None:
        """Test catalog lookup by binary and project name."""
        assert get_tool("rg").display_name == "ripgrep"
        assert get_tool("ripgrep").binary == "rg"
        with pytest.raises(KeyError):
            get_tool("exa")


class TestToolsProbe:
    """Tests for ToolsProbe with fake PATH lookup and runner."""

    def test_probe_all(self, make_which: Callable, fake_runner: Callable) -> None:
        """Test that probe_all reports each catalog tool."""
        probe = ToolsProbe(which=make_which(["rg", "bat"]), runner=fake_runner)

        result = probe.probe_all()

        assert dict(result) == {"rg": True, "fd": False, "bat": True, "eza": False, "dust": False}

    def test_lookup_error_is_not_installed(self, fake_runner: Callable) -> None:
        """Test that a failing PATH lookup for one tool does not affect others."""

        def which(name: str) -> str | None:
            if name == "fd":
                raise OSError("permission denied")
            return f"/bin/{name}"

        result = ToolsProbe(which=which, runner=fake_runner).probe(["rg", "fd", "bat"])

        assert dict(result) == {"rg": True, "fd": False, "bat": True}

    def test_version_first_line(self, make_which: Callable, make_runner: type) -> None:
        """Test that the version is the first line of --version output."""
        runner = make_runner({"rg": CommandResult(("rg",), 0, stdout="ripgrep 14.1.0\n-SIMD\n")})
        probe = ToolsProbe(which=make_which(["rg"]), runner=runner)

        assert probe.version("rg") == "ripgrep 14.1.0"
        assert runner.calls == [("rg", "--version")]

    def test_version_not_installed(self, make_which: Callable, make_runner: type) -> None:
        """Test that a missing tool has no version and is not run."""
        runner = make_runner()
        probe = ToolsProbe(which=make_which([]), runner=runner)

        assert probe.version("rg") is None
        assert runner.calls == []

    @pytest.mark.parametrize(
        "response",
        [
            subprocess.TimeoutExpired(cmd="bat", timeout=10),
            OSError("exec format error"),
            CommandResult(("bat",), 1, stderr="boom"),
            CommandResult(("bat",), 0, stdout="  \n"),
            UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte"),
        ],
        ids=["timeout", "oserror", "nonzero", "empty", "undecodable"],
    )
    def test_version_failures_degrade_to_unknown(
        self,
        response: object,
        make_which: Callable,
        make_runner: type,
    ) -> None:
        """Test that version check failures yield "unknown"."""
        probe = ToolsProbe(which=make_which(["bat"]), runner=make_runner({"bat": response}))

        assert probe.version("bat") == UNKNOWN_VERSION

    def test_timeout_passed_to_runner(self, make_which: Callable) -> None:
        """Test that the configured timeout reaches the runner."""
        seen: list[float | None] = []

        def runner(args, timeout=None):  # noqa: ANN001, ANN202
            seen.append(timeout)
            return CommandResult(tuple(args), 0, stdout="eza v0.18.0")

        ToolsProbe(which=make_which(["eza"]), runner=runner, timeout=3).version("eza")

        assert seen == [3]

    def test_check_all(self, make_which: Callable, make_runner: type) -> None:
        """Test combined availability, path and version checks."""
        runner = make_runner({"fd": CommandResult(("fd",), 0, stdout="fd 9.0.0")})
        probe = ToolsProbe(which=make_which(["fd"]), runner=runner)

        checks = {c.name: c for c in probe.check_all()}

        assert checks["fd"].available
        assert checks["fd"].path == "/usr/bin/fd"
        assert checks["fd"].version == "fd 9.0.0"
        assert not checks["rg"].available
        assert checks["rg"].to_dict() == {"name": "rg", "available": False, "path": None, "version": None}

    def test_check_without_version(self, make_which: Callable, make_runner: type) -> None:
        """Test that with_version=False never runs the tool."""
        runner = make_runner()
        probe = ToolsProbe(which=make_which(list(TOOL_BINARIES)), runner=runner)

        checks = probe.check_all(with_version=False)

        assert all(c.available and c.version is None for c in checks)
        assert runner.calls == []


@pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
class TestRealProcesses:
    """Tests that spawn real executables through the default runner."""

    @pytest.fixture
    def odd_tool(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
        """An executable on PATH whose version output is not valid UTF-8."""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        script = bin_dir / "oddtool"
        script.write_text("#!/bin/sh\nprintf 'oddtool \\377\\376 1.0\\n'\n")
        script.chmod(0o755)
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
        return "oddtool"

    def test_undecodable_output_is_replaced(self, odd_tool: str) -> None:
        """Test that invalid UTF-8 output is decoded with replacement characters."""
        result = run_command([odd_tool, "--version"], timeout=10)

        assert result.ok
        assert result.stdout == "oddtool �� 1.0\n"

    def test_version_of_undecodable_output(self, odd_tool: str) -> None:
        """Test that such a tool still reports a version line."""
        assert ToolsProbe().version(odd_tool) == "oddtool �� 1.0"
