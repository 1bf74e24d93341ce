"""claude-forge data models.

- Language / LanguageProfile: supported languages and their marker files
- ToolSpec / ProbeResult: modern CLI tool catalog and probe results
- ArtifactKind / GeneratedFile: scaffold categories and generation plan entries
"""

from claude_forge.models.artifacts import ARTIFACT_DIRECTORIES, ArtifactKind, GeneratedFile
from claude_forge.models.language import (
    LANGUAGE_PROFILES,
    Language,
    LanguageProfile,
    UnsupportedLanguageError,
    get_profile,
    parse_language,
)
from claude_forge.models.tools import TOOL_BINARIES, TOOL_CATALOG, ProbeResult, ToolSpec, get_tool

__all__ = [
    "ARTIFACT_DIRECTORIES",
    "ArtifactKind",
    "GeneratedFile",
    "LANGUAGE_PROFILES",
    "Language",
    "LanguageProfile",
    "UnsupportedLanguageError",
    "get_profile",
    "parse_language",
    "TOOL_BINARIES",
    "TOOL_CATALOG",
    "ProbeResult",
    "ToolSpec",
    "get_tool",
]
