"""Writes a generation plan to disk."""

import logging
import stat
from collections.abc import Sequence
from pathlib import Path

from claude_forge.models.artifacts import GeneratedFile

logger = logging.getLogger(__name__)

EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def make_executable(path: Path) -> None:
    """Add execute permission for user, group and others."""
    mode = path.stat().st_mode
    path.chmod(mode | EXECUTABLE_BITS)


class FileWriter:
    """Materializes GeneratedFile entries under a project root.

    Existing files are only replaced with force=True; the check runs for the
    whole plan before anything is written.
    """

    def write(
        self,
        root: Path,
        files: Sequence[GeneratedFile],
        force: bool = False,
    ) -> list[Path]:
        """Write every file of a plan.

        Args:
            root: Project root the plan's relative paths are resolved against
            files: Files to write
            force: Overwrite existing files

        Returns:
            Absolute paths written, in plan order

        Raises:
            FileExistsError: If a target exists and force is False
        """
        targets = [(root / Path(f.path), f) for f in files]

        if not force:
            existing = [str(target) for target, _ in targets if target.exists()]
            if existing:
                raise FileExistsError(f"Refusing to overwrite: {', '.join(existing)}")

        written: list[Path] = []
        for target, generated in targets:
            ensure_directory(target.parent)
            target.write_text(generated.content, encoding="utf-8")
            if generated.executable:
                make_executable(target)
            logger.debug("Wrote %s", target)
            written.append(target)

        return written
