"""Unit tests for the configuration generator."""

import json
import os
import stat
from collections.abc import Callable
from pathlib import Path, PurePosixPath

import pytest

from claude_forge.config import ArtifactsConfig, FeaturesConfig, ForgeConfig
from claude_forge.core.detector import LanguageNotDetectedError
from claude_forge.core.generator import ConfigGenerator, build_settings, register_hook
from claude_forge.models.language import Language, UnsupportedLanguageError
from claude_forge.models.tools import ProbeResult


@pytest.fixture
def generator() -> ConfigGenerator:
    """Generator with default configuration."""
    return ConfigGenerator()


class TestPlan:
    """Tests for building the generation plan."""

    def test_full_plan(self, generator: ConfigGenerator, all_installed: ProbeResult) -> None:
        """Test every file of a full plan, in order."""
        files = generator.plan(Language.RUST, all_installed)

        assert [str(f.path) for f in files] == [
            ".claude/CLAUDE.md",
            ".claude/config.json",
            ".claudeignore",
            ".claude/agents/code-reviewer.md",
            ".claude/agents/security-scanner.md",
            ".claude/commands/analyze.md",
            ".claude/commands/refactor.md",
            ".claude/hooks/format.sh",
        ]

    def test_only_hooks_are_executable(self, generator: ConfigGenerator, all_installed: ProbeResult) -> None:
        """Test the executable flag."""
        files = generator.plan(Language.GO, all_installed)

        assert [f.path.name for f in files if f.executable] == ["format.sh"]

    def test_minimal_plan(self, generator: ConfigGenerator, none_installed: ProbeResult) -> None:
        """Test that minimal mode plans the memory document and ignore file only."""
        files = generator.plan(Language.PYTHON, none_installed, minimal=True)

        assert [f.path for f in files] == [PurePosixPath(".claude/CLAUDE.md"), PurePosixPath(".claudeignore")]

    def test_memory_document_is_composed(self, generator: ConfigGenerator, none_installed: ProbeResult) -> None:
        """Test that the memory document carries banner and rendered section."""
        memory = generator.plan(Language.TYPESCRIPT, none_installed)[0].content

        assert memory.startswith("<!-- claude-forge: ⚠️ No modern CLI tools installed (0/5)")
        assert "# TypeScript Project Memory" in memory
        assert memory.count("Consider installing") == 5

    def test_settings_document(self, generator: ConfigGenerator, all_installed: ProbeResult) -> None:
        """Test the settings JSON content."""
        settings = json.loads(generator.plan(Language.ELIXIR, all_installed)[1].content)

        assert settings == {
            "version": "1.0",
            "language": "elixir",
            "features": {"sdd_workflow": True, "modern_cli_tools": True},
            "hooks": {"PostToolUse": ".claude/hooks/format.sh"},
        }

    def test_configured_artifacts(self, all_installed: ProbeResult) -> None:
        """Test that configured agents, commands and hooks are planned."""
        config = ForgeConfig(
            artifacts=ArtifactsConfig(
                agents=["docs-writer"],
                commands=[],
                hooks={"PostToolUse": "lint", "PreToolUse": "lint"},
            ),
            features=FeaturesConfig(sdd_workflow=False),
        )
        files = ConfigGenerator(config=config).plan(Language.JAVA, all_installed)

        paths = [str(f.path) for f in files]
        assert ".claude/agents/docs-writer.md" in paths
        assert paths.count(".claude/hooks/lint.sh") == 1
        assert not any("commands/" in p for p in paths)
        settings = build_settings(Language.JAVA, config)
        assert settings["features"]["sdd_workflow"] is False
        assert settings["hooks"] == {"PostToolUse": ".claude/hooks/lint.sh", "PreToolUse": ".claude/hooks/lint.sh"}


class TestGenerate:
    """Tests for writing the plan."""

    def test_writes_files_and_directories(
        self,
        generator: ConfigGenerator,
        rust_project: Path,
        all_installed: ProbeResult,
    ) -> None:
        """Test that generate writes the plan and the artifact directories."""
        written = generator.generate(rust_project, Language.RUST, all_installed)

        assert (rust_project / ".claude" / "CLAUDE.md").is_file()
        assert (rust_project / ".claudeignore").is_file()
        assert len(written) == 8
        for directory in ("agents", "commands", "hooks"):
            assert (rust_project / ".claude" / directory).is_dir()

    def test_minimal_still_creates_directories(
        self,
        generator: ConfigGenerator,
        tmp_path: Path,
        none_installed: ProbeResult,
    ) -> None:
        """Test that minimal mode creates empty artifact directories."""
        generator.generate(tmp_path, Language.GO, none_installed, minimal=True)

        assert (tmp_path / ".claude" / "hooks").is_dir()
        assert list((tmp_path / ".claude" / "hooks").iterdir()) == []
        assert not (tmp_path / ".claude" / "config.json").exists()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_hook_is_executable(self, generator: ConfigGenerator, tmp_path: Path, all_installed: ProbeResult) -> None:
        """Test the hook script mode."""
        generator.generate(tmp_path, Language.RUST, all_installed)

        mode = (tmp_path / ".claude" / "hooks" / "format.sh").stat().st_mode
        assert mode & stat.S_IXUSR

    def test_refuses_overwrite_without_force(
        self,
        generator: ConfigGenerator,
        tmp_path: Path,
        all_installed: ProbeResult,
    ) -> None:
        """Test that existing files are preserved unless forced."""
        (tmp_path / ".claudeignore").write_text("mine\n")

        with pytest.raises(FileExistsError):
            generator.generate(tmp_path, Language.RUST, all_installed)

        assert (tmp_path / ".claudeignore").read_text() == "mine\n"
        assert not (tmp_path / ".claude").exists()

        generator.generate(tmp_path, Language.RUST, all_installed, force=True)
        assert (tmp_path / ".claudeignore").read_text() != "mine\n"


class TestResolveLanguage:
    """Tests for explicit vs detected language."""

    def test_explicit_wins(self, generator: ConfigGenerator, rust_project: Path) -> None:
        """Test that an explicit language skips detection."""
        assert generator.resolve_language(rust_project, explicit="python") is Language.PYTHON
        assert generator.resolve_language(rust_project, explicit=Language.GO) is Language.GO

    def test_detected(self, generator: ConfigGenerator, rust_project: Path) -> None:
        """Test that detection runs without an explicit language."""
        assert generator.resolve_language(rust_project) is Language.RUST

    def test_not_detected_propagates(self, generator: ConfigGenerator, tmp_path: Path) -> None:
        """Test that LanguageNotDetectedError reaches the caller."""
        with pytest.raises(LanguageNotDetectedError):
            generator.resolve_language(tmp_path)

    def test_bad_explicit(self, generator: ConfigGenerator, tmp_path: Path) -> None:
        """Test that an unknown explicit language raises."""
        with pytest.raises(UnsupportedLanguageError):
            generator.resolve_language(tmp_path, explicit="fortran")


class TestRegisterHook:
    """Tests for adding hooks to an existing settings document."""

    def test_adds_event(self, tmp_path: Path) -> None:
        """Test registering a new event keeps existing keys."""
        settings_path = tmp_path / "config.json"
        settings_path.write_text(json.dumps({"version": "1.0", "hooks": {"PostToolUse": "a.sh"}}))

        assert register_hook(settings_path, "PreToolUse", ".claude/hooks/b.sh")

        data = json.loads(settings_path.read_text())
        assert data["version"] == "1.0"
        assert data["hooks"] == {"PostToolUse": "a.sh", "PreToolUse": ".claude/hooks/b.sh"}

    def test_missing_settings(self, tmp_path: Path) -> None:
        """Test that a missing settings document is reported, not created."""
        assert not register_hook(tmp_path / "config.json", "Stop", "x.sh")
        assert not (tmp_path / "config.json").exists()

    def test_invalid_settings(self, tmp_path: Path) -> None:
        """Test that invalid JSON raises ValueError."""
        settings_path = tmp_path / "config.json"
        settings_path.write_text("{")

        with pytest.raises(ValueError, match="Invalid config.json"):
            register_hook(settings_path, "Stop", "x.sh")


def test_plan_does_not_touch_filesystem(make_project: Callable[..., Path]) -> None:
    """Test that planning never touches the filesystem."""
    project = make_project("go.mod")

    ConfigGenerator().plan(Language.GO, ProbeResult())

    assert sorted(p.name for p in project.iterdir()) == ["go.mod"]
