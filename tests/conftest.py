"""Shared pytest fixtures for claude-forge tests.

Fixtures are organized by category:
- Project fixtures: temporary project directories with marker files
- Probe fixtures: canned probe results
- Process fixtures: fake PATH lookup and command runners
"""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from claude_forge.models.tools import ProbeResult
from claude_forge.utils.process import CommandResult

# =============================================================================
# Project Fixtures
# =============================================================================


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a project directory containing the given files.

    Usage:
        project = make_project("Cargo.toml", **{"package.json": "{}"})
    """
    counter = {"n": 0}

    def _make(*markers: str, **files: str) -> Path:
        counter["n"] += 1
        project = tmp_path / f"project{counter['n']}"
        project.mkdir()
        for marker in markers:
            (project / marker).write_text("")
        for name, content in files.items():
            (project / name).write_text(content)
        return project

    return _make


@pytest.fixture
def rust_project(make_project: Callable[..., Path]) -> Path:
    """A project with only Cargo.toml."""
    return make_project("Cargo.toml")


# =============================================================================
# Probe Fixtures
# =============================================================================


@pytest.fixture
def all_installed() -> ProbeResult:
    """Probe result with every catalog tool installed."""
    return ProbeResult.all_installed()


@pytest.fixture
def none_installed() -> ProbeResult:
    """Probe result with no catalog tool installed."""
    return ProbeResult.none_installed()


# =============================================================================
# Process Fixtures
# =============================================================================


class FakeRunner:
    """CommandRunner that records calls and replays canned results.

    responses maps the first argument (the executable) to a CommandResult or
    an exception instance to raise.
    """

    def __init__(self, responses: dict[str, CommandResult | BaseException] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, args: Sequence[str], timeout: float | None = None) -> CommandResult:
        self.calls.append(tuple(args))
        response = self.responses.get(args[0])
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return CommandResult(args=tuple(args), returncode=0)
        return response


def fake_which(installed: Sequence[str]) -> Callable[[str], str | None]:
    """PATH lookup that finds exactly the given executables."""

    def _which(name: str) -> str | None:
        return f"/usr/bin/{name}" if name in installed else None

    return _which


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Fake command runner where every command succeeds silently."""
    return FakeRunner()


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """The FakeRunner class, for tests that need canned responses."""
    return FakeRunner


@pytest.fixture
def make_which() -> Callable[[Sequence[str]], Callable[[str], str | None]]:
    """Factory for fake PATH lookups."""
    return fake_which
