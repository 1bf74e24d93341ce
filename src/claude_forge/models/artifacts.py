"""Artifact kinds and generated-file entries."""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath


class ArtifactKind(Enum):
    """Category of generated scaffold text."""

    AGENT = "agent"
    COMMAND = "command"
    HOOK = "hook"
    MEMORY_DOCUMENT = "memory-document"
    IGNORE_FILE = "ignore-file"

    @property
    def directory(self) -> str | None:
        """Subdirectory of the .claude directory holding named artifacts."""
        return _DIRECTORIES.get(self)

    @property
    def suffix(self) -> str:
        """File suffix of named artifacts of this kind."""
        return ".sh" if self is ArtifactKind.HOOK else ".md"


_DIRECTORIES = {
    ArtifactKind.AGENT: "agents",
    ArtifactKind.COMMAND: "commands",
    ArtifactKind.HOOK: "hooks",
}

# Subdirectories every .claude directory must contain
ARTIFACT_DIRECTORIES: tuple[str, ...] = ("agents", "commands", "hooks")


@dataclass(frozen=True)
class GeneratedFile:
    """One file of a generation plan.

    Attributes:
        path: Path relative to the project root (POSIX separators)
        content: Full file text
        executable: Whether the file should be marked executable
    """

    path: PurePosixPath
    content: str
    executable: bool = False

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON output."""
        return {
            "path": str(self.path),
            "bytes": len(self.content.encode("utf-8")),
            "executable": self.executable,
        }
