"""Configuration generator (orchestrator).

Sequences detection (or takes an explicit language), resolves templates,
composes the memory document and hands the finished plan to the file writer.
The whole plan is built in memory first, so a failure while planning leaves
the target directory untouched.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import Any

from claude_forge.config import ForgeConfig
from claude_forge.core.detector import LanguageDetector
from claude_forge.models.artifacts import ARTIFACT_DIRECTORIES, ArtifactKind, GeneratedFile
from claude_forge.models.language import Language, parse_language
from claude_forge.templates.composer import DocumentComposer
from claude_forge.templates.registry import TemplateRegistry
from claude_forge.utils.fs import FileWriter, ensure_directory

logger = logging.getLogger(__name__)

MEMORY_DOCUMENT_NAME = "CLAUDE.md"
SETTINGS_DOCUMENT_NAME = "config.json"
SETTINGS_VERSION = "1.0"


def build_settings(language: Language, config: ForgeConfig) -> dict[str, Any]:
    """Settings document content for a language and configuration."""
    return {
        "version": SETTINGS_VERSION,
        "language": language.value,
        "features": {
            "sdd_workflow": config.features.sdd_workflow,
            "modern_cli_tools": config.features.modern_cli_tools,
        },
        "hooks": {
            event: hook_script_path(config, name) for event, name in config.artifacts.hooks.items()
        },
    }


def hook_script_path(config: ForgeConfig, name: str) -> str:
    """Project-relative path of a hook script, as referenced from settings."""
    return str(artifact_path(config, ArtifactKind.HOOK, name))


def artifact_path(config: ForgeConfig, kind: ArtifactKind, name: str) -> PurePosixPath:
    """Project-relative path of a named artifact."""
    if kind.directory is None:
        raise ValueError(f"{kind.value} is not a named artifact kind")
    return PurePosixPath(config.output.directory, kind.directory, f"{name}{kind.suffix}")


class ConfigGenerator:
    """Builds and writes the assistant configuration for a project.

    Usage:
        generator = ConfigGenerator()
        language = generator.resolve_language(project_dir, explicit=None)
        generator.generate(project_dir, language, probe.probe_all())
    """

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        composer: DocumentComposer | None = None,
        config: ForgeConfig | None = None,
        detector: LanguageDetector | None = None,
        writer: FileWriter | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            registry: Template catalog
            composer: Memory document composer (shares the registry's
                environment by default)
            config: claude-forge configuration (defaults if None)
            detector: Language detector
            writer: File writer
        """
        self.registry = registry or TemplateRegistry()
        self.composer = composer or DocumentComposer(env=self.registry.environment)
        self.config = config or ForgeConfig()
        self.detector = detector or LanguageDetector()
        self.writer = writer or FileWriter()

    def resolve_language(self, target: Path, explicit: Language | str | None = None) -> Language:
        """Explicit language if given, otherwise the detected one.

        Raises:
            UnsupportedLanguageError: If explicit is not a known language
            LanguageNotDetectedError: If detection finds no markers
        """
        if explicit is not None:
            return explicit if isinstance(explicit, Language) else parse_language(explicit)
        return self.detector.detect(target)

    def plan(
        self,
        language: Language,
        probe_result: Mapping[str, bool],
        minimal: bool = False,
    ) -> list[GeneratedFile]:
        """Build the generation plan in memory.

        Args:
            language: Project language
            probe_result: Tool name -> installed flags
            minimal: Only the memory document and the ignore file

        Returns:
            Files to write, paths relative to the project root
        """
        output_dir = PurePosixPath(self.config.output.directory)

        memory = self.composer.compose(self.registry.memory_document(language), probe_result)
        files = [GeneratedFile(output_dir / MEMORY_DOCUMENT_NAME, memory)]

        if not minimal:
            settings = build_settings(language, self.config)
            files.append(
                GeneratedFile(
                    output_dir / SETTINGS_DOCUMENT_NAME,
                    json.dumps(settings, indent=2, ensure_ascii=False) + "\n",
                )
            )

        files.append(
            GeneratedFile(
                PurePosixPath(self.config.output.ignore_file),
                self.registry.resolve(ArtifactKind.IGNORE_FILE),
            )
        )

        if not minimal:
            files.extend(self._named_artifacts())

        logger.debug("Planned %d files for %s", len(files), language.display_name)
        return files

    def generate(
        self,
        target: Path,
        language: Language,
        probe_result: Mapping[str, bool],
        minimal: bool = False,
        force: bool = False,
    ) -> list[Path]:
        """Plan and write the configuration under target.

        The agents/commands/hooks directories are always created, even in
        minimal mode.

        Returns:
            Paths written

        Raises:
            FileExistsError: If a planned file exists and force is False
        """
        files = self.plan(language, probe_result, minimal=minimal)
        written = self.writer.write(target, files, force=force)

        claude_dir = target / self.config.output.directory
        for directory in ARTIFACT_DIRECTORIES:
            ensure_directory(claude_dir / directory)

        logger.info("Generated %d files for %s project in %s", len(written), language.display_name, target)
        return written

    def _named_artifacts(self) -> list[GeneratedFile]:
        """Agents, commands and hooks configured as defaults."""
        requested: list[tuple[ArtifactKind, str]] = [
            *((ArtifactKind.AGENT, name) for name in self.config.artifacts.agents),
            *((ArtifactKind.COMMAND, name) for name in self.config.artifacts.commands),
            *((ArtifactKind.HOOK, name) for name in self.config.artifacts.hooks.values()),
        ]

        files: list[GeneratedFile] = []
        seen: set[PurePosixPath] = set()
        for kind, name in requested:
            path = artifact_path(self.config, kind, name)
            if path in seen:
                continue
            seen.add(path)
            files.append(
                GeneratedFile(
                    path,
                    self.registry.artifact(kind, name),
                    executable=kind is ArtifactKind.HOOK,
                )
            )
        return files


def register_hook(settings_path: Path, event: str, script: str) -> bool:
    """Add (or replace) an event -> script entry in a settings document.

    Returns:
        False if the settings document does not exist, True once updated

    Raises:
        ValueError: If the settings document is not a JSON object
    """
    if not settings_path.is_file():
        return False

    try:
        settings = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {settings_path.name}: {e}") from e

    if not isinstance(settings, dict):
        raise ValueError(f"Invalid {settings_path.name}: expected a JSON object")

    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        hooks = {}
        settings["hooks"] = hooks
    hooks[event] = script

    settings_path.write_text(json.dumps(settings, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    logger.debug("Registered %s hook %s in %s", event, script, settings_path)
    return True
