"""Entry point for running claude-forge as a module.

Usage:
    python -m claude_forge [command] [options]

Example:
    python -m claude_forge init --yes
    python -m claude_forge tools check -v
"""

from claude_forge.cli import app

if __name__ == "__main__":
    app()
