"""Supported project languages and their filesystem evidence.

The language set is closed. LANGUAGE_PROFILES lists every language exactly once,
in detection priority order: compiled/systems languages come before the loosely
typed scripting ecosystems so that, for example, a Rust crate that vendors a
web frontend's package.json is still reported as Rust.
"""

from dataclasses import dataclass
from enum import Enum


class Language(Enum):
    """Project source language."""

    RUST = "rust"
    GO = "go"
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    JAVA = "java"
    ELIXIR = "elixir"
    ERLANG = "erlang"

    @property
    def display_name(self) -> str:
        """Human-readable language name (e.g. "TypeScript")."""
        return get_profile(self).display_name


@dataclass(frozen=True)
class LanguageProfile:
    """Static description of one supported language.

    Attributes:
        language: Language this profile describes
        display_name: Human-readable name
        markers: Marker filenames, checked at the directory root only
        extensions: Source file extensions (without the dot)
        aliases: Accepted spellings for explicit selection (lowercase)
    """

    language: Language
    display_name: str
    markers: tuple[str, ...]
    extensions: tuple[str, ...]
    aliases: tuple[str, ...] = ()

    @property
    def primary_marker(self) -> str:
        """The first, most characteristic marker file."""
        return self.markers[0]


# Detection priority order. Do not sort.
LANGUAGE_PROFILES: tuple[LanguageProfile, ...] = (
    LanguageProfile(
        language=Language.RUST,
        display_name="Rust",
        markers=("Cargo.toml", "Cargo.lock"),
        extensions=("rs",),
        aliases=("rust", "rs"),
    ),
    LanguageProfile(
        language=Language.GO,
        display_name="Go",
        markers=("go.mod", "go.sum"),
        extensions=("go",),
        aliases=("go", "golang"),
    ),
    LanguageProfile(
        language=Language.TYPESCRIPT,
        display_name="TypeScript",
        markers=("tsconfig.json", "package.json"),
        extensions=("ts", "tsx"),
        aliases=("typescript", "ts"),
    ),
    LanguageProfile(
        language=Language.JAVASCRIPT,
        display_name="JavaScript",
        markers=("package.json",),
        extensions=("js", "jsx", "mjs", "cjs"),
        aliases=("javascript", "js"),
    ),
    LanguageProfile(
        language=Language.PYTHON,
        display_name="Python",
        markers=("pyproject.toml", "setup.py", "requirements.txt"),
        extensions=("py",),
        aliases=("python", "py"),
    ),
    LanguageProfile(
        language=Language.JAVA,
        display_name="Java",
        markers=("pom.xml", "build.gradle", "build.gradle.kts"),
        extensions=("java",),
        aliases=("java",),
    ),
    LanguageProfile(
        language=Language.ELIXIR,
        display_name="Elixir",
        markers=("mix.exs",),
        extensions=("ex", "exs"),
        aliases=("elixir", "ex"),
    ),
    LanguageProfile(
        language=Language.ERLANG,
        display_name="Erlang",
        markers=("rebar.config", "rebar.lock"),
        extensions=("erl", "hrl"),
        aliases=("erlang", "erl"),
    ),
)

# Shared between the typed and untyped scripting variants
GENERIC_MANIFEST = "package.json"
TYPE_CHECKER_CONFIG = "tsconfig.json"
TYPE_CHECKER_PACKAGE = "typescript"


class UnsupportedLanguageError(ValueError):
    """Raised when a language name or alias is not recognized."""

    def __init__(self, name: str) -> None:
        self.name = name
        supported = ", ".join(p.display_name for p in LANGUAGE_PROFILES)
        super().__init__(f"Unsupported language: {name}. Supported: {supported}")


def get_profile(language: Language) -> LanguageProfile:
    """Return the profile for a language."""
    for profile in LANGUAGE_PROFILES:
        if profile.language is language:
            return profile
    raise KeyError(language)


def parse_language(name: str) -> Language:
    """Resolve a language from its name or alias (case-insensitive).

    Args:
        name: Language name or alias, e.g. "TypeScript", "ts", "golang"

    Returns:
        Matching Language

    Raises:
        UnsupportedLanguageError: If nothing matches
    """
    key = name.strip().lower()
    for profile in LANGUAGE_PROFILES:
        if key in profile.aliases:
            return profile.language
    raise UnsupportedLanguageError(name)
