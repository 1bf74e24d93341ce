"""Project language detection from marker files.

Detection is deterministic: markers are checked at the directory root only
(no recursion, no content sniffing beyond the package manifest) and the first
language in LANGUAGE_PROFILES order with a matching marker wins.
"""

import json
import logging
from pathlib import Path
from typing import Any

from claude_forge.models.language import (
    GENERIC_MANIFEST,
    LANGUAGE_PROFILES,
    TYPE_CHECKER_CONFIG,
    TYPE_CHECKER_PACKAGE,
    Language,
    LanguageProfile,
)

logger = logging.getLogger(__name__)

# Manifest dependency name -> framework label, checked in order
FRAMEWORK_MARKERS: tuple[tuple[str, str], ...] = (
    ("next", "Next.js"),
    ("react", "React"),
    ("vue", "Vue"),
    ("express", "Express"),
    ("fastify", "Fastify"),
    ("nestjs", "NestJS"),
)


class LanguageNotDetectedError(Exception):
    """Raised when no supported language has a marker file in the directory."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Could not detect project language in {path}")


class LanguageDetector:
    """Identifies a project's language from files at its root.

    Usage:
        detector = LanguageDetector()
        try:
            language = detector.detect(Path("."))
        except LanguageNotDetectedError:
            language = fallback
    """

    def __init__(self, profiles: tuple[LanguageProfile, ...] = LANGUAGE_PROFILES) -> None:
        """Initialize the detector.

        Args:
            profiles: Languages to consider, in priority order
        """
        self.profiles = profiles

    def detect(self, path: Path) -> Language:
        """Detect the language of the project rooted at path.

        Args:
            path: Project root directory

        Returns:
            First language in priority order with a marker present

        Raises:
            LanguageNotDetectedError: If no marker of any language is present
        """
        for profile in self.profiles:
            found = self._present_markers(path, profile)
            if not found:
                continue

            if profile.language is Language.TYPESCRIPT and found == [GENERIC_MANIFEST]:
                # A bare package.json only counts as TypeScript with the
                # typescript package declared; otherwise fall through to JavaScript.
                if not self.is_typescript_project(path):
                    continue

            logger.debug("Detected %s in %s (markers: %s)", profile.display_name, path, found)
            return profile.language

        raise LanguageNotDetectedError(path)

    def is_typescript_project(self, path: Path) -> bool:
        """Check for tsconfig.json or a typescript (dev)dependency."""
        if (path / TYPE_CHECKER_CONFIG).is_file():
            return True

        manifest = _read_manifest(path)
        if manifest is None:
            return False

        for section in ("dependencies", "devDependencies"):
            deps = manifest.get(section)
            if isinstance(deps, dict) and TYPE_CHECKER_PACKAGE in deps:
                return True

        return False

    def detect_framework(self, path: Path) -> str | None:
        """Best-effort framework label from the package manifest.

        Never raises; returns None when there is no manifest, it cannot be
        parsed, or no known framework is a dependency.
        """
        manifest = _read_manifest(path)
        if manifest is None:
            return None

        deps = manifest.get("dependencies")
        if not isinstance(deps, dict):
            return None

        for dependency, framework in FRAMEWORK_MARKERS:
            if dependency in deps:
                return framework

        return None

    @staticmethod
    def _present_markers(path: Path, profile: LanguageProfile) -> list[str]:
        """Marker filenames of profile that exist directly inside path."""
        return [marker for marker in profile.markers if (path / marker).exists()]


def _read_manifest(path: Path) -> dict[str, Any] | None:
    """Parse package.json at path, or None if missing/unreadable/not an object."""
    manifest_path = path / GENERIC_MANIFEST
    if not manifest_path.is_file():
        return None

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable manifest %s: %s", manifest_path, e)
        return None

    return data if isinstance(data, dict) else None


def detect_language(path: Path) -> Language:
    """Convenience wrapper around LanguageDetector.detect."""
    return LanguageDetector().detect(path)
