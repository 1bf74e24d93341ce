"""Integration tests for the generated hook scripts.

Hooks read a JSON payload on stdin and must exit 0 whether or not their
optional downstream tool exists or succeeds.
"""

import json
import os
import shutil
import subprocess
from pathlib import Path

import pytest

from claude_forge.models.artifacts import ArtifactKind
from claude_forge.templates.registry import TemplateRegistry

pytestmark = pytest.mark.skipif(shutil.which("bash") is None, reason="bash not available")

HOOKS = ["format", "lint", "custom-hook"]


def _write_hook(directory: Path, name: str) -> Path:
    script = directory / f"{name}.sh"
    script.write_text(TemplateRegistry().artifact(ArtifactKind.HOOK, name))
    script.chmod(0o755)
    return script


def _run(script: Path, payload: str, path_dirs: list[Path]) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PATH"] = os.pathsep.join([*(str(d) for d in path_dirs), "/usr/bin", "/bin"])
    return subprocess.run(
        ["bash", str(script)],
        input=payload,
        capture_output=True,
        text=True,
        env=env,
        timeout=30,
        check=False,
    )


def _fake_tool(bin_dir: Path, name: str, exit_code: int, log: Path) -> None:
    tool = bin_dir / name
    tool.write_text(f'#!/bin/sh\necho "$@" >> "{log}"\nexit {exit_code}\n')
    tool.chmod(0o755)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Directory prepended to PATH for fake tools."""
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


class TestHookExitStatus:
    """Hooks never fail the tool call they are attached to."""

    @pytest.mark.parametrize("name", HOOKS)
    def test_invalid_json(self, name: str, tmp_path: Path, bin_dir: Path) -> None:
        """Test that malformed input still exits 0."""
        result = _run(_write_hook(tmp_path, name), "{not json", [bin_dir])

        assert result.returncode == 0

    @pytest.mark.parametrize("name", HOOKS)
    def test_empty_input(self, name: str, tmp_path: Path, bin_dir: Path) -> None:
        """Test that empty stdin exits 0."""
        assert _run(_write_hook(tmp_path, name), "", [bin_dir]).returncode == 0

    @pytest.mark.parametrize("name", ["format", "lint"])
    def test_tool_missing(self, name: str, tmp_path: Path, bin_dir: Path) -> None:
        """Test that a missing downstream tool exits 0."""
        payload = json.dumps({"tool_input": {"file_path": str(tmp_path / "a.ts")}})

        assert _run(_write_hook(tmp_path, name), payload, [bin_dir]).returncode == 0

    @pytest.mark.parametrize(("name", "tool"), [("format", "prettier"), ("lint", "eslint")])
    def test_tool_failure(self, name: str, tool: str, tmp_path: Path, bin_dir: Path) -> None:
        """Test that a failing downstream tool exits 0."""
        _fake_tool(bin_dir, tool, 2, tmp_path / "calls.log")
        payload = json.dumps({"tool_input": {"file_path": str(tmp_path / "a.ts")}})

        assert _run(_write_hook(tmp_path, name), payload, [bin_dir]).returncode == 0


@pytest.mark.skipif(shutil.which("jq") is None, reason="jq not available")
class TestHookPayload:
    """Hooks pass the edited file to their tool."""

    @pytest.mark.parametrize("key", ["file_path", "file"])
    def test_format_receives_file(self, key: str, tmp_path: Path, bin_dir: Path) -> None:
        """Test that prettier gets the path from either payload key."""
        log = tmp_path / "calls.log"
        _fake_tool(bin_dir, "prettier", 0, log)
        jq = shutil.which("jq")
        assert jq is not None
        os.symlink(jq, bin_dir / "jq")
        target = tmp_path / "src.ts"
        payload = json.dumps({"tool_input": {key: str(target)}})

        result = _run(_write_hook(tmp_path, "format"), payload, [bin_dir])

        assert result.returncode == 0
        assert log.read_text().strip() == f"--write {target}"
