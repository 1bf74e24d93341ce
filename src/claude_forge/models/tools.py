"""Modern CLI tool catalog and probe results.

The catalog pairs each modern tool with the legacy command it replaces. Its
order is the order used everywhere tools are listed: rendered sections,
remediation blocks, installer runs and `tools check` output.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class ToolSpec:
    """One modern CLI tool and the legacy command it supersedes.

    Attributes:
        binary: Executable name looked up on PATH (e.g. "rg")
        display_name: Project name (e.g. "ripgrep")
        category: Section label in the memory document
        usage: Recommended invocation of the modern tool
        legacy: Legacy command name (e.g. "grep")
        legacy_usage: Equivalent invocation of the legacy command
        description: One-line description
        install_hint: Install command shown to the user
        brew_package: Homebrew formula
        apt_package: Debian/Ubuntu package
        cargo_package: crates.io package
        benefit: Why to install, shown in the suggestion line
    """

    binary: str
    display_name: str
    category: str
    usage: str
    legacy: str
    legacy_usage: str
    description: str
    install_hint: str
    brew_package: str
    apt_package: str
    cargo_package: str
    benefit: str


TOOL_CATALOG: tuple[ToolSpec, ...] = (
    ToolSpec(
        binary="rg",
        display_name="ripgrep",
        category="Text Search",
        usage="rg pattern",
        legacy="grep",
        legacy_usage="grep pattern",
        description="Fast text search",
        install_hint="brew install ripgrep  # or: cargo install ripgrep",
        brew_package="ripgrep",
        apt_package="ripgrep",
        cargo_package="ripgrep",
        benefit="faster text search",
    ),
    ToolSpec(
        binary="fd",
        display_name="fd",
        category="File Search",
        usage="fd pattern",
        legacy="find",
        legacy_usage="find . -name pattern",
        description="Fast file finder",
        install_hint="brew install fd  # or: cargo install fd-find",
        brew_package="fd",
        apt_package="fd-find",
        cargo_package="fd-find",
        benefit="faster file search",
    ),
    ToolSpec(
        binary="bat",
        display_name="bat",
        category="File Viewing",
        usage="bat filename",
        legacy="cat",
        legacy_usage="cat filename",
        description="Cat with syntax highlighting",
        install_hint="brew install bat  # or: cargo install bat",
        brew_package="bat",
        apt_package="bat",
        cargo_package="bat",
        benefit="syntax highlighting",
    ),
    ToolSpec(
        binary="eza",
        display_name="eza",
        category="Directory Listing",
        usage="eza -la --icons --git",
        legacy="ls",
        legacy_usage="ls -la",
        description="Modern ls replacement",
        install_hint="brew install eza  # or: cargo install eza",
        brew_package="eza",
        apt_package="eza",
        cargo_package="eza",
        benefit="better directory listing",
    ),
    ToolSpec(
        binary="dust",
        display_name="dust",
        category="Disk Usage",
        usage="dust -d 2",
        legacy="du",
        legacy_usage="du -sh",
        description="Disk usage analyzer",
        install_hint="brew install dust  # or: cargo install du-dust",
        brew_package="dust",
        apt_package="du-dust",
        cargo_package="du-dust",
        benefit="better disk usage overview",
    ),
)

TOOL_BINARIES: tuple[str, ...] = tuple(spec.binary for spec in TOOL_CATALOG)


def get_tool(name: str) -> ToolSpec:
    """Look up a catalog tool by binary or display name.

    Raises:
        KeyError: If the tool is not in the catalog
    """
    for spec in TOOL_CATALOG:
        if name in (spec.binary, spec.display_name):
            return spec
    raise KeyError(f"Unknown tool: {name}. Known: {', '.join(TOOL_BINARIES)}")


class ProbeResult(Mapping[str, bool]):
    """Read-only tool name -> installed mapping from one probe run.

    Tools that were never probed read as not installed.
    """

    def __init__(self, installed: Mapping[str, bool] | None = None) -> None:
        self._installed = MappingProxyType(dict(installed or {}))

    @classmethod
    def all_installed(cls, tools: Iterable[str] = TOOL_BINARIES) -> "ProbeResult":
        """Probe result reporting every given tool as installed."""
        return cls({name: True for name in tools})

    @classmethod
    def none_installed(cls, tools: Iterable[str] = TOOL_BINARIES) -> "ProbeResult":
        """Probe result reporting every given tool as missing."""
        return cls({name: False for name in tools})

    def __getitem__(self, name: str) -> bool:
        return self._installed[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._installed)

    def __len__(self) -> int:
        return len(self._installed)

    def __repr__(self) -> str:
        return f"ProbeResult({dict(self._installed)!r})"

    def is_installed(self, name: str) -> bool:
        """Return True only if the tool was probed and found."""
        return bool(self._installed.get(name, False))

    def installed_count(self, tools: Iterable[ToolSpec] = TOOL_CATALOG) -> int:
        """Count installed tools among the given catalog entries."""
        return sum(1 for spec in tools if self.is_installed(spec.binary))

    def missing(self, tools: Iterable[ToolSpec] = TOOL_CATALOG) -> list[ToolSpec]:
        """Catalog entries that are not installed, in catalog order."""
        return [spec for spec in tools if not self.is_installed(spec.binary)]
