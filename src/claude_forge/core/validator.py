"""Structural validation of a generated .claude directory.

Only structure is checked: file presence, settings JSON shape and the
artifact subdirectories. Document prose is never inspected.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from claude_forge.core.generator import MEMORY_DOCUMENT_NAME, SETTINGS_DOCUMENT_NAME
from claude_forge.models.artifacts import ARTIFACT_DIRECTORIES

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS_KEYS = ("version", "language")


@dataclass
class ValidationSummary:
    """Artifact counts of a .claude directory.

    Attributes:
        path: Directory that was inspected
        counts: Subdirectory name -> number of files in it
        has_settings: Whether config.json exists
    """

    path: Path
    counts: dict[str, int] = field(default_factory=dict)
    has_settings: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "path": str(self.path),
            "counts": dict(self.counts),
            "has_settings": self.has_settings,
        }


class ConfigValidator:
    """Checks a .claude directory for structural problems.

    Usage:
        errors = ConfigValidator().validate(Path(".claude"))
        if errors:
            ...
    """

    def validate(self, claude_dir: Path) -> list[str]:
        """Return a list of problems (empty when valid)."""
        if not claude_dir.is_dir():
            return [f"Configuration directory not found: {claude_dir}"]

        errors: list[str] = []

        if not (claude_dir / MEMORY_DOCUMENT_NAME).is_file():
            errors.append(f"Missing {MEMORY_DOCUMENT_NAME}")

        settings_path = claude_dir / SETTINGS_DOCUMENT_NAME
        if settings_path.exists():
            errors.extend(self._validate_settings(settings_path))

        for directory in ARTIFACT_DIRECTORIES:
            if not (claude_dir / directory).is_dir():
                errors.append(f"Missing {directory}/ directory")

        for error in errors:
            logger.debug("Validation problem in %s: %s", claude_dir, error)
        return errors

    def summary(self, claude_dir: Path) -> ValidationSummary:
        """Count files per artifact subdirectory."""
        result = ValidationSummary(
            path=claude_dir,
            has_settings=(claude_dir / SETTINGS_DOCUMENT_NAME).is_file(),
        )
        for directory in ARTIFACT_DIRECTORIES:
            subdir = claude_dir / directory
            if subdir.is_dir():
                result.counts[directory] = sum(1 for p in subdir.iterdir() if p.is_file())
            else:
                result.counts[directory] = 0
        return result

    @staticmethod
    def _validate_settings(settings_path: Path) -> list[str]:
        try:
            data = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return [f"Invalid {SETTINGS_DOCUMENT_NAME}: {e}"]

        if not isinstance(data, dict):
            return [f"Invalid {SETTINGS_DOCUMENT_NAME}: expected a JSON object"]

        return [
            f"{SETTINGS_DOCUMENT_NAME} is missing '{key}'"
            for key in REQUIRED_SETTINGS_KEYS
            if key not in data
        ]
