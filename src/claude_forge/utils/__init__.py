"""claude-forge utility modules.

- fs: Writing generation plans to disk
- logging: Standardized logging with human/verbose/JSON modes
- process: Injectable external command execution
"""

from claude_forge.utils.fs import FileWriter, ensure_directory
from claude_forge.utils.logging import configure_from_cli, get_logger, setup_logging
from claude_forge.utils.process import CommandResult, CommandRunner, run_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "FileWriter",
    "configure_from_cli",
    "ensure_directory",
    "get_logger",
    "run_command",
    "setup_logging",
]
