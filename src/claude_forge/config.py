"""claude-forge configuration system.

Configuration is YAML-based with per-run CLI overrides (--lang, --minimal).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.claude-forge/config.yaml
3. ./claude-forge.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from claude_forge.models.language import Language, parse_language

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class DefaultsConfig:
    """Defaults applied when the CLI does not say otherwise.

    Attributes:
        language: Language used when detection fails in non-interactive mode
        minimal: Generate only the memory document and ignore file
    """

    language: str = "typescript"
    minimal: bool = False

    def __post_init__(self) -> None:
        """Validate the default language."""
        parse_language(self.language)

    @property
    def fallback_language(self) -> Language:
        """Default language as a Language."""
        return parse_language(self.language)


@dataclass
class OutputConfig:
    """Where generated files go, relative to the project root.

    Attributes:
        directory: Assistant configuration directory
        ignore_file: Ignore-patterns file name
    """

    directory: str = ".claude"
    ignore_file: str = ".claudeignore"


@dataclass
class ArtifactsConfig:
    """Artifacts written by `init` (unless minimal).

    Attributes:
        agents: Agent names
        commands: Command names
        hooks: Hook event name -> hook name
    """

    agents: list[str] = field(default_factory=lambda: ["code-reviewer", "security-scanner"])
    commands: list[str] = field(default_factory=lambda: ["analyze", "refactor"])
    hooks: dict[str, str] = field(default_factory=lambda: {"PostToolUse": "format"})


@dataclass
class FeaturesConfig:
    """Feature flags recorded in the generated settings document."""

    sdd_workflow: bool = True
    modern_cli_tools: bool = True


@dataclass
class ToolsConfig:
    """Modern CLI tool handling.

    Attributes:
        timeout: Timeout in seconds for tool version checks
        skip: Tools never installed by `init` / `tools install`
    """

    timeout: float = 10
    skip: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate tool settings."""
        if self.timeout <= 0:
            raise ValueError(f"tools.timeout must be positive (got {self.timeout})")


@dataclass
class ForgeConfig:
    """Top-level claude-forge configuration.

    Attributes:
        defaults: Fallback language and minimal mode
        output: Output locations
        artifacts: Default agents, commands and hooks
        features: Settings document feature flags
        tools: Tool probing and installation
    """

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    artifacts: ArtifactsConfig = field(default_factory=ArtifactsConfig)
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute ${VAR} references with environment values.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_RE.sub(replace_var, value)

    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find a configuration file in the standard locations.

    Args:
        start_path: Directory to search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".claude-forge" / "config.yaml",
        start_path / "claude-forge.yaml",
    ]

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a mapping section of the config, rejecting other types."""
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return value


def load_config_from_dict(data: dict[str, Any]) -> ForgeConfig:
    """Build a ForgeConfig from parsed YAML.

    Args:
        data: Configuration dictionary

    Returns:
        ForgeConfig instance

    Raises:
        ValueError: On invalid values or unset environment variables
    """
    data = substitute_env_vars(data)
    config = ForgeConfig()

    if "defaults" in data:
        defaults_data = _section(data, "defaults")
        config.defaults = DefaultsConfig(
            language=str(defaults_data.get("language", config.defaults.language)),
            minimal=bool(defaults_data.get("minimal", config.defaults.minimal)),
        )

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputConfig(
            directory=str(output_data.get("directory", config.output.directory)),
            ignore_file=str(output_data.get("ignore_file", config.output.ignore_file)),
        )

    if "artifacts" in data:
        artifacts_data = _section(data, "artifacts")
        hooks = artifacts_data.get("hooks", config.artifacts.hooks) or {}
        if not isinstance(hooks, dict):
            raise ValueError("artifacts.hooks must map event names to hook names")
        config.artifacts = ArtifactsConfig(
            agents=[str(a) for a in artifacts_data.get("agents", config.artifacts.agents) or []],
            commands=[str(c) for c in artifacts_data.get("commands", config.artifacts.commands) or []],
            hooks={str(event): str(name) for event, name in hooks.items()},
        )

    if "features" in data:
        features_data = _section(data, "features")
        config.features = FeaturesConfig(
            sdd_workflow=bool(features_data.get("sdd_workflow", True)),
            modern_cli_tools=bool(features_data.get("modern_cli_tools", True)),
        )

    if "tools" in data:
        tools_data = _section(data, "tools")
        config.tools = ToolsConfig(
            timeout=float(tools_data.get("timeout", config.tools.timeout)),
            skip=[str(t) for t in tools_data.get("skip", []) or []],
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ForgeConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ForgeConfig instance (defaults when no file is found)

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the file is not a YAML mapping or has invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path: Path | None = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return ForgeConfig()

    with open(found_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a YAML mapping: {found_path}")

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return """# claude-forge configuration

# Used when the project language cannot be detected and prompts are disabled
defaults:
  language: "typescript"   # rust, go, typescript, javascript, python, java, elixir, erlang
  minimal: false           # only CLAUDE.md and .claudeignore

output:
  directory: ".claude"
  ignore_file: ".claudeignore"

# Artifacts written by `claude-forge init`
artifacts:
  agents: ["code-reviewer", "security-scanner"]
  commands: ["analyze", "refactor"]
  hooks:
    PostToolUse: "format"

# Feature flags recorded in .claude/config.json
features:
  sdd_workflow: true
  modern_cli_tools: true

# Modern CLI tools (rg, fd, bat, eza, dust)
tools:
  timeout: 10              # seconds, for tool version checks
  skip: []                 # e.g. ["dust"]
"""
