"""Built-in template catalog.

Static templates ship as package data under templates/builtin and are read
through a Jinja2 PackageLoader. Lookups never fail for a known artifact kind:
languages without a dedicated memory document get a generic one, and unknown
agent/command/hook names get a generic scaffold rendered with the name.
"""

import logging
from types import MappingProxyType

from jinja2 import Environment, PackageLoader, StrictUndefined

from claude_forge.models.artifacts import ArtifactKind
from claude_forge.models.language import Language, parse_language

logger = logging.getLogger(__name__)

# Languages with a dedicated memory document
MEMORY_DOCUMENTS = MappingProxyType(
    {
        Language.RUST: "languages/rust/CLAUDE.md",
        Language.TYPESCRIPT: "languages/typescript/CLAUDE.md",
    }
)

# Generic fallbacks: Python gets its own, every other language the plain one
GENERIC_SCRIPTING_DOCUMENT = "languages/generic/python.md"
GENERIC_DOCUMENT = "languages/generic/default.md"

IGNORE_FILE_TEMPLATE = "ignore/claudeignore"

BUILTIN_ARTIFACTS = MappingProxyType(
    {
        ArtifactKind.AGENT: MappingProxyType(
            {
                "code-reviewer": "agents/code-reviewer.md",
                "security-scanner": "agents/security-scanner.md",
            }
        ),
        ArtifactKind.COMMAND: MappingProxyType(
            {
                "analyze": "commands/analyze.md",
                "refactor": "commands/refactor.md",
            }
        ),
        ArtifactKind.HOOK: MappingProxyType(
            {
                "format": "hooks/format.sh",
                "lint": "hooks/lint.sh",
            }
        ),
    }
)

HOOK_ALIASES = MappingProxyType(
    {
        "prettier-format": "format",
        "eslint-check": "lint",
    }
)

SCAFFOLDS = MappingProxyType(
    {
        ArtifactKind.AGENT: "scaffolds/agent.md.j2",
        ArtifactKind.COMMAND: "scaffolds/command.md.j2",
        ArtifactKind.HOOK: "scaffolds/hook.sh.j2",
    }
)


def create_environment() -> Environment:
    """Jinja2 environment over the package's built-in templates."""
    return Environment(
        loader=PackageLoader("claude_forge", "templates/builtin"),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


class TemplateRegistry:
    """Resolves (artifact kind, name-or-language) to template text.

    Usage:
        registry = TemplateRegistry()
        memory = registry.resolve(ArtifactKind.MEMORY_DOCUMENT, Language.GO)
        agent = registry.resolve(ArtifactKind.AGENT, "docs-writer")
    """

    def __init__(self, env: Environment | None = None) -> None:
        """Initialize the registry.

        Args:
            env: Jinja2 environment (defaults to the built-in templates)
        """
        self._env = env or create_environment()
        self._sources: dict[str, str] = {}

    @property
    def environment(self) -> Environment:
        """The Jinja2 environment templates are loaded from."""
        return self._env

    def resolve(
        self,
        kind: ArtifactKind | str,
        selector: Language | str | None = None,
    ) -> str:
        """Return the template text for an artifact.

        Args:
            kind: Artifact kind (or its string value)
            selector: Language for memory documents, artifact name for
                agents/commands/hooks, ignored for the ignore file

        Returns:
            Template text

        Raises:
            ValueError: If kind is not an artifact kind, or a memory document
                or named artifact is requested without a selector
        """
        kind = ArtifactKind(kind)

        if kind is ArtifactKind.IGNORE_FILE:
            return self._source(IGNORE_FILE_TEMPLATE)

        if selector is None:
            raise ValueError(f"A selector is required for {kind.value} templates")

        if kind is ArtifactKind.MEMORY_DOCUMENT:
            language = selector if isinstance(selector, Language) else parse_language(selector)
            return self.memory_document(language)

        return self.artifact(kind, str(selector))

    def memory_document(self, language: Language) -> str:
        """Memory document for a language, falling back to a generic one."""
        return self._source(self.memory_document_name(language))

    @staticmethod
    def memory_document_name(language: Language) -> str:
        """Template name of the memory document used for a language."""
        if language in MEMORY_DOCUMENTS:
            return MEMORY_DOCUMENTS[language]
        if language is Language.PYTHON:
            return GENERIC_SCRIPTING_DOCUMENT
        return GENERIC_DOCUMENT

    def artifact(self, kind: ArtifactKind, name: str) -> str:
        """Built-in agent/command/hook by name, or a generic scaffold."""
        catalog = BUILTIN_ARTIFACTS.get(kind)
        if catalog is None:
            raise ValueError(f"{kind.value} is not a named artifact kind")

        if kind is ArtifactKind.HOOK:
            name = HOOK_ALIASES.get(name, name)

        if name in catalog:
            return self._source(catalog[name])

        logger.debug("No built-in %s named %r, using generic scaffold", kind.value, name)
        return self._env.get_template(SCAFFOLDS[kind]).render(name=name)

    def is_builtin(self, kind: ArtifactKind, name: str) -> bool:
        """Whether name resolves to a built-in (not a scaffold)."""
        if kind is ArtifactKind.HOOK:
            name = HOOK_ALIASES.get(name, name)
        return name in BUILTIN_ARTIFACTS.get(kind, {})

    @staticmethod
    def builtin_names(kind: ArtifactKind) -> tuple[str, ...]:
        """Names of the built-in artifacts of a kind."""
        return tuple(BUILTIN_ARTIFACTS.get(kind, {}))

    def _source(self, name: str) -> str:
        """Raw (unrendered) text of a built-in template."""
        if name not in self._sources:
            source, _, _ = self._env.loader.get_source(self._env, name)  # type: ignore[union-attr]
            self._sources[name] = source
        return self._sources[name]
