"""claude-forge - Claude Code configuration generator.

Detects a project's language from marker files and scaffolds a .claude
directory (memory document, settings, agents, commands, hooks) plus a
.claudeignore file. The memory document's CLI tool section is rendered for
the modern tools (rg, fd, bat, eza, dust) actually installed on the machine.
"""

__version__ = "0.1.0"
