"""claude-forge templates.

Built-in template text lives in templates/builtin as package data. The
registry resolves it by artifact kind; the composer splices the rendered CLI
tool section into memory documents.
"""

from claude_forge.templates.composer import DocumentComposer, splice_section
from claude_forge.templates.registry import TemplateRegistry

__all__ = ["DocumentComposer", "TemplateRegistry", "splice_section"]
