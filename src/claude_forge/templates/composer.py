"""Memory document composition.

Renders the CLI tool usage section for the current probe result and splices
it into a memory document template:

1. One block per catalog tool: a mandatory-use directive when installed, an
   install suggestion that keeps the legacy command otherwise.
2. A remediation block listing install commands, only if something is missing.
3. The section replaces the document's existing "CLI Tool Usage" section, from
   its heading up to the next level 1/2 heading (or end of document). Documents
   without that heading get the section appended.
4. A one-line status banner comment is prepended.

Headings are located by a line scan that skips fenced code blocks, so the
`# comment` lines of shell snippets are never mistaken for headings. Everything
outside the replaced range is kept byte-for-byte, which makes composing an
already composed document with the same probe result a no-op.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass

from jinja2 import Environment

from claude_forge.models.tools import TOOL_CATALOG, ProbeResult, ToolSpec
from claude_forge.templates.registry import create_environment

logger = logging.getLogger(__name__)

SECTION_TEMPLATE = "sections/cli_tools.md.j2"
SECTION_TITLE = "## 🚫 CLI Tool Usage (When Using Bash)"
BANNER_PREFIX = "<!-- claude-forge:"
BANNER_SUFFIX = " -->"
INSTALL_COMMAND = "claude-forge tools install"
CHECK_COMMAND = "claude-forge tools check"

_SECTION_HEADING_RE = re.compile(r"^##[ \t]+.*CLI Tool Usage")
_BOUNDARY_HEADING_RE = re.compile(r"^#{1,2}(?:[ \t]|$)")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})(.*)$")


@dataclass(frozen=True)
class ToolBlock:
    """Render input for one tool of the section."""

    tool: ToolSpec
    installed: bool


class DocumentComposer:
    """Composes memory documents from a template and a probe result.

    Usage:
        composer = DocumentComposer()
        document = composer.compose(template_text, probe.probe_all())
    """

    def __init__(
        self,
        env: Environment | None = None,
        tools: tuple[ToolSpec, ...] = TOOL_CATALOG,
    ) -> None:
        """Initialize the composer.

        Args:
            env: Jinja2 environment holding the section template
            tools: Tool catalog to render
        """
        self._env = env or create_environment()
        self.tools = tools

    def compose(self, base_document: str, probe_result: Mapping[str, bool]) -> str:
        """Produce the final memory document.

        Args:
            base_document: Memory document template (or a previous output)
            probe_result: Tool name -> installed flags

        Returns:
            Banner line followed by the document with the section spliced in
        """
        probe = _as_probe_result(probe_result)
        body = strip_banner(base_document)
        document = splice_section(body, self.render_section(probe))
        return f"{self.banner(probe)}\n{document}"

    def render_section(self, probe_result: Mapping[str, bool]) -> str:
        """Render the CLI tool usage section, ending with a single newline."""
        probe = _as_probe_result(probe_result)
        blocks = [ToolBlock(tool=spec, installed=probe.is_installed(spec.binary)) for spec in self.tools]
        missing = probe.missing(self.tools)

        template = self._env.get_template(SECTION_TEMPLATE)
        rendered = template.render(
            blocks=blocks,
            missing=missing,
            install_command=INSTALL_COMMAND,
        )
        return rendered.rstrip("\n") + "\n"

    def status_line(self, probe_result: Mapping[str, bool]) -> str:
        """Summarize how many catalog tools are installed."""
        probe = _as_probe_result(probe_result)
        total = len(self.tools)
        installed = probe.installed_count(self.tools)

        if installed == total:
            return f"✅ All modern CLI tools installed ({installed}/{total})"
        if installed == 0:
            return f"⚠️ No modern CLI tools installed (0/{total}). Run `{INSTALL_COMMAND}`"
        return (
            f"ℹ️ {installed}/{total} modern CLI tools installed. "
            f"Run `{CHECK_COMMAND}` to see details"
        )

    def banner(self, probe_result: Mapping[str, bool]) -> str:
        """Status line wrapped as a single-line comment."""
        return f"{BANNER_PREFIX} {self.status_line(probe_result)}{BANNER_SUFFIX}"


def strip_banner(document: str) -> str:
    """Remove a leading status banner line, if present."""
    if not document.startswith(BANNER_PREFIX):
        return document
    _, newline, rest = document.partition("\n")
    return rest if newline else ""


def find_section(document: str) -> tuple[int, int] | None:
    """Locate the CLI tool usage section.

    Returns:
        (start, end) character offsets of the section, from the start of its
        heading line to the start of the next level 1/2 heading outside a code
        fence (or len(document)), or None if there is no such heading
    """
    start: int | None = None
    offset = 0
    fence: str | None = None

    for line in document.splitlines(keepends=True):
        fence_match = _FENCE_RE.match(line)
        if fence_match and fence is None:
            marker, info = fence_match.groups()
            # Backtick fences may not carry backticks in their info string
            if not (marker[0] == "`" and "`" in info):
                fence = marker
        elif fence_match and fence is not None:
            marker, info = fence_match.groups()
            if _closes_fence(marker, info, fence):
                fence = None
        elif fence is None:
            if start is None:
                if _SECTION_HEADING_RE.match(line):
                    start = offset
            elif _BOUNDARY_HEADING_RE.match(line):
                return start, offset
        offset += len(line)

    if start is None:
        return None
    return start, len(document)


def _closes_fence(marker: str, info: str, fence: str) -> bool:
    """A fence closes on a bare run of its own character, at least as long."""
    return marker[0] == fence[0] and len(marker) >= len(fence) and not info.strip()


def splice_section(document: str, section: str) -> str:
    """Replace (or append) the CLI tool usage section of a document.

    Args:
        document: Markdown document
        section: Rendered section, ending with a newline

    Returns:
        New document; text outside the section is unchanged
    """
    bounds = find_section(document)

    if bounds is None:
        logger.debug("No CLI tool usage heading found, appending section")
        if not document:
            return section
        if document.endswith("\n\n"):
            separator = ""
        elif document.endswith("\n"):
            separator = "\n"
        else:
            separator = "\n\n"
        return f"{document}{separator}{section}"

    start, end = bounds
    if end == len(document):
        return document[:start] + section
    return document[:start] + section + "\n" + document[end:]


def _as_probe_result(probe_result: Mapping[str, bool]) -> ProbeResult:
    if isinstance(probe_result, ProbeResult):
        return probe_result
    return ProbeResult(probe_result)
