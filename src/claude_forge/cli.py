"""claude-forge CLI interface.

Commands:
- init: Generate the .claude configuration for a project
- detect: Show the detected project language
- add agent|command|hook: Add one artifact to an existing configuration
- tools check|install|update: Inspect, install or upgrade the modern CLI tools
- config show|reset|export: Inspect or remove .claude, write a default config file
- validate: Check the structure of a .claude directory

Short aliases: i (init), a (add), t (tools), c (config).

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
import re
import shutil
from pathlib import Path, PurePosixPath
from typing import Annotated

import typer

from claude_forge import __version__
from claude_forge.config import ForgeConfig, create_default_config, load_config
from claude_forge.core.detector import LanguageDetector, LanguageNotDetectedError
from claude_forge.core.generator import (
    SETTINGS_DOCUMENT_NAME,
    ConfigGenerator,
    artifact_path,
    hook_script_path,
    register_hook,
)
from claude_forge.core.validator import ConfigValidator
from claude_forge.models.artifacts import ArtifactKind, GeneratedFile
from claude_forge.models.language import Language, UnsupportedLanguageError
from claude_forge.models.tools import TOOL_CATALOG
from claude_forge.templates.composer import CHECK_COMMAND, INSTALL_COMMAND, DocumentComposer
from claude_forge.templates.registry import TemplateRegistry
from claude_forge.tools.installer import InstallOutcome, InstallStatus, ToolsInstaller
from claude_forge.tools.probe import ToolsProbe
from claude_forge.utils.fs import FileWriter
from claude_forge.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="claude-forge",
    help="Scaffold Claude Code configuration tailored to your project",
    add_completion=False,
    no_args_is_help=True,
)
add_app = typer.Typer(help="Add an agent, command or hook to the project", no_args_is_help=True)
tools_app = typer.Typer(help="Manage modern CLI tools (rg, fd, bat, eza, dust)", no_args_is_help=True)
config_app = typer.Typer(help="Show, reset or export configuration", no_args_is_help=True)
app.add_typer(add_app, name="add")
app.add_typer(tools_app, name="tools")
app.add_typer(config_app, name="config")

# Short aliases
app.add_typer(add_app, name="a", hidden=True)
app.add_typer(tools_app, name="t", hidden=True)
app.add_typer(config_app, name="c", hidden=True)

# Global state
_config: ForgeConfig | None = None
_logger = get_logger()

# Order offered when the language has to be picked by hand
LANGUAGE_CHOICES: tuple[Language, ...] = (
    Language.TYPESCRIPT,
    Language.JAVASCRIPT,
    Language.PYTHON,
    Language.GO,
    Language.RUST,
    Language.JAVA,
    Language.ELIXIR,
    Language.ERLANG,
)

ARTIFACT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

STATUS_ICONS = {
    InstallStatus.ALREADY_INSTALLED: "✓",
    InstallStatus.WOULD_INSTALL: "→",
    InstallStatus.INSTALLED: "✓",
    InstallStatus.WOULD_UPDATE: "→",
    InstallStatus.UPDATED: "✓",
    InstallStatus.NOT_INSTALLED: "-",
    InstallStatus.SKIPPED: "-",
    InstallStatus.FAILED: "✗",
}


def _get_config() -> ForgeConfig:
    return _config if _config is not None else ForgeConfig()


def _create_probe() -> ToolsProbe:
    return ToolsProbe(timeout=_get_config().tools.timeout)


def _create_installer(probe: ToolsProbe) -> ToolsInstaller:
    return ToolsInstaller(probe=probe)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"claude-forge {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log lines",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """claude-forge - Claude Code configuration generator.

    Detects your project's language and writes a .claude directory with a
    memory document, settings, agents, commands and hooks.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (OSError, ValueError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# init command
# =============================================================================


def _prompt_for_language() -> Language:
    """Ask the user to pick a language from LANGUAGE_CHOICES."""
    typer.echo("\nSupported languages:")
    for index, language in enumerate(LANGUAGE_CHOICES, start=1):
        typer.echo(f"  {index}. {language.display_name}")

    choice = typer.prompt(
        f"\nSelect your project language [1-{len(LANGUAGE_CHOICES)}]",
        default=1,
        type=int,
    )
    if not 1 <= choice <= len(LANGUAGE_CHOICES):
        _logger.error(f"Invalid choice: {choice}")
        raise typer.Exit(1)
    return LANGUAGE_CHOICES[choice - 1]


def _choose_language(
    generator: ConfigGenerator,
    target: Path,
    lang: str | None,
    yes: bool,
) -> Language:
    """Explicit --lang, else detection (confirmed unless --yes), else prompt or default."""
    if lang is not None:
        try:
            return generator.resolve_language(target, explicit=lang)
        except UnsupportedLanguageError as e:
            _logger.error(str(e))
            raise typer.Exit(1)

    try:
        detected = generator.resolve_language(target)
    except LanguageNotDetectedError:
        if yes:
            fallback = _get_config().defaults.fallback_language
            _logger.warning(f"Could not detect language, using {fallback.display_name} as default")
            return fallback
        _logger.info("Could not detect project language")
        return _prompt_for_language()

    typer.echo(f"✓ Detected language: {detected.display_name}")
    if yes or typer.confirm(f"Use {detected.display_name} for this project?", default=True):
        return detected
    return _prompt_for_language()


def _echo_outcomes(outcomes: list[InstallOutcome]) -> None:
    for outcome in outcomes:
        icon = STATUS_ICONS[outcome.status]
        line = f"  {icon} {outcome.tool.binary}: {outcome.status.value}"
        if outcome.message:
            line += f" ({outcome.message})"
        typer.echo(line)


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Target directory (defaults to current directory)",
            exists=True,
            file_okay=False,
        ),
    ] = None,
    lang: Annotated[
        str | None,
        typer.Option(
            "--lang",
            "-l",
            help="Specify language explicitly",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip interactive prompts and use defaults",
        ),
    ] = False,
    no_tools: Annotated[
        bool,
        typer.Option(
            "--no-tools",
            help="Skip modern CLI tools installation",
        ),
    ] = False,
    minimal: Annotated[
        bool,
        typer.Option(
            "--minimal",
            help="Only generate CLAUDE.md and .claudeignore",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing files",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show the files that would be written without writing them",
        ),
    ] = False,
) -> None:
    """Initialize Claude Code configuration for a project.

    Detects the project language (or asks), optionally installs missing
    modern CLI tools, then writes .claude/ and .claudeignore.
    """
    config = _get_config()
    target = path or Path.cwd()
    minimal = minimal or config.defaults.minimal

    typer.echo("🚀 Initializing Claude Code configuration...\n")

    generator = ConfigGenerator(config=config)
    language = _choose_language(generator, target, lang, yes)

    probe = _create_probe()

    install_tools = not no_tools and (
        yes or dry_run or typer.confirm("Install modern CLI tools (rg, fd, bat, eza, dust)?", default=True)
    )

    # Install before probing so the generated document reflects the new state
    if install_tools:
        typer.echo("\n📦 Checking modern CLI tools...")
        installer = _create_installer(probe)
        _echo_outcomes(installer.install_missing(skip=config.tools.skip, dry_run=dry_run))

    probe_result = probe.probe_all()
    status = generator.composer.status_line(probe_result)

    if dry_run:
        files = generator.plan(language, probe_result, minimal=minimal)
        typer.echo(f"\n🔍 Dry run: would write {len(files)} files for {language.display_name}")
        for generated in files:
            suffix = " (executable)" if generated.executable else ""
            typer.echo(f"   {generated.path}{suffix}")
        typer.echo(f"\n{status}")
        raise typer.Exit(0)

    try:
        written = generator.generate(target, language, probe_result, minimal=minimal, force=force)
    except FileExistsError as e:
        _logger.error(str(e))
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)
    except OSError as e:
        _logger.error(f"Failed to write configuration: {e}")
        raise typer.Exit(1)

    typer.echo(f"\n✅ Configuration generated for {language.display_name}")
    for written_path in written:
        typer.echo(f"   {written_path.relative_to(target)}")
    typer.echo(f"\n{status}")
    typer.echo("\n📝 Next steps:")
    typer.echo(f"  1. Review {config.output.directory}/CLAUDE.md and adjust it to your project")
    typer.echo("  2. Add agents and commands with `claude-forge add`")
    typer.echo("  3. Run `claude-forge validate` after editing")


app.command("i", hidden=True)(init)


# =============================================================================
# detect command
# =============================================================================


@app.command()
def detect(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Project directory (defaults to current directory)",
            exists=True,
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Show the detected project language and framework."""
    target = path or Path.cwd()
    detector = LanguageDetector()

    try:
        language = detector.detect(target)
    except LanguageNotDetectedError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    typer.echo(f"Language: {language.display_name}")
    framework = detector.detect_framework(target)
    if framework:
        typer.echo(f"Framework: {framework}")


# =============================================================================
# add commands
# =============================================================================


def _add_artifact(
    kind: ArtifactKind,
    name: str,
    template: Path | None,
    path: Path | None,
) -> PurePosixPath:
    """Write one named artifact into an existing configuration directory."""
    config = _get_config()
    root = path or Path.cwd()
    label = kind.value.capitalize()

    if not ARTIFACT_NAME_RE.match(name):
        _logger.error(f"Invalid {kind.value} name: {name!r}")
        raise typer.Exit(1)

    if not (root / config.output.directory).is_dir():
        _logger.error(f"No {config.output.directory} directory found. Run 'claude-forge init' first.")
        raise typer.Exit(1)

    if template is not None:
        try:
            content = template.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            _logger.error(f"Failed to read template file: {e}")
            raise typer.Exit(1)
    else:
        content = TemplateRegistry().artifact(kind, name)

    relative = artifact_path(config, kind, name)
    try:
        FileWriter().write(root, [GeneratedFile(relative, content, executable=kind is ArtifactKind.HOOK)])
    except FileExistsError:
        _logger.error(f"{label} '{name}' already exists")
        raise typer.Exit(1)
    except OSError as e:
        _logger.error(f"Failed to write {kind.value}: {e}")
        raise typer.Exit(1)

    typer.echo(f"✓ {label} created: {relative}")
    return relative


TemplateOption = Annotated[
    Path | None,
    typer.Option(
        "--template",
        "-t",
        help="Custom template file",
        exists=True,
        dir_okay=False,
    ),
]

PathOption = Annotated[
    Path | None,
    typer.Option(
        "--path",
        "-p",
        help="Project directory (defaults to current directory)",
        exists=True,
        file_okay=False,
    ),
]


@add_app.command("agent")
def add_agent(
    name: Annotated[str, typer.Argument(help="Name of the agent")],
    template: TemplateOption = None,
    path: PathOption = None,
) -> None:
    """Add a custom subagent."""
    _add_artifact(ArtifactKind.AGENT, name, template, path)


@add_app.command("command")
def add_command(
    name: Annotated[str, typer.Argument(help="Name of the command")],
    template: TemplateOption = None,
    path: PathOption = None,
) -> None:
    """Add a slash command."""
    _add_artifact(ArtifactKind.COMMAND, name, template, path)


@add_app.command("hook")
def add_hook(
    name: Annotated[str, typer.Argument(help="Name of the hook")],
    event: Annotated[
        str | None,
        typer.Option(
            "--event",
            "-e",
            help="Hook event to register in config.json (e.g. PostToolUse)",
        ),
    ] = None,
    template: TemplateOption = None,
    path: PathOption = None,
) -> None:
    """Add a hook script, optionally registering it for an event."""
    _add_artifact(ArtifactKind.HOOK, name, template, path)

    if event is None:
        return

    config = _get_config()
    settings_path = (path or Path.cwd()) / config.output.directory / SETTINGS_DOCUMENT_NAME
    try:
        registered = register_hook(settings_path, event, hook_script_path(config, name))
    except (OSError, ValueError) as e:
        _logger.error(f"Failed to register hook: {e}")
        raise typer.Exit(1)

    if registered:
        typer.echo(f"✓ Registered for {event} in {SETTINGS_DOCUMENT_NAME}")
    else:
        _logger.warning(f"No {SETTINGS_DOCUMENT_NAME} found, hook not registered for {event}")


# =============================================================================
# tools commands
# =============================================================================


@tools_app.command("check")
def tools_check(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show version and location of installed tools",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Check which modern CLI tools are installed."""
    probe = _create_probe()
    checks = probe.check_all(with_version=verbose or json_output)
    probe_result = probe.probe_all()
    status = DocumentComposer().status_line(probe_result)

    if json_output:
        payload = {
            "tools": [c.to_dict() for c in checks],
            "installed": probe_result.installed_count(TOOL_CATALOG),
            "total": len(TOOL_CATALOG),
            "status": status,
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    typer.echo("🔍 Checking modern CLI tools...\n")
    for spec, result in zip(TOOL_CATALOG, checks):
        if result.available:
            detail = f" ({result.version})" if verbose and result.version else ""
            typer.echo(f"  ✓ {spec.binary}{detail}")
            if verbose and result.path:
                typer.echo(f"     └─ {result.path}")
        else:
            typer.echo(f"  ✗ {spec.binary}")
            if verbose:
                typer.echo(f"     └─ {spec.install_hint}")

    typer.echo(f"\n{status}")
    if probe_result.missing(TOOL_CATALOG):
        typer.echo(f"Run `{INSTALL_COMMAND}` to install them, then `{CHECK_COMMAND} -v` to verify.")


@tools_app.command("install")
def tools_install(
    skip: Annotated[
        str | None,
        typer.Option(
            "--skip",
            help="Tools to skip (comma-separated, e.g. dust,eza)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be installed without installing",
        ),
    ] = False,
) -> None:
    """Install missing modern CLI tools.

    Exit codes:
        0: Nothing failed
        1: At least one tool failed to install
    """
    skipped = _skip_list(skip)

    typer.echo("📦 Installing modern CLI tools...\n")
    if dry_run:
        typer.echo("🔍 Dry run mode - no changes will be made\n")

    installer = _create_installer(_create_probe())
    outcomes = installer.install_missing(skip=skipped, dry_run=dry_run)
    _echo_outcomes(outcomes)

    failed = [o for o in outcomes if o.status is InstallStatus.FAILED]
    if failed:
        typer.echo(f"\n❌ {len(failed)} tool(s) failed to install")
        raise typer.Exit(1)

    if not dry_run:
        typer.echo("\n✓ Installation complete!")
        typer.echo(f"Run `{CHECK_COMMAND} -v` to verify installation")


@tools_app.command("update")
def tools_update(
    skip: Annotated[
        str | None,
        typer.Option(
            "--skip",
            help="Tools to skip (comma-separated, e.g. dust,eza)",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be updated without updating",
        ),
    ] = False,
) -> None:
    """Upgrade installed modern CLI tools to their latest version.

    Exit codes:
        0: Nothing failed
        1: At least one tool failed to update
    """
    typer.echo("🔄 Updating modern CLI tools...\n")
    if dry_run:
        typer.echo("🔍 Dry run mode - no changes will be made\n")

    installer = _create_installer(_create_probe())
    outcomes = installer.update(skip=_skip_list(skip), dry_run=dry_run)
    _echo_outcomes(outcomes)

    failed = [o for o in outcomes if o.status is InstallStatus.FAILED]
    if failed:
        typer.echo(f"\n❌ {len(failed)} tool(s) failed to update")
        raise typer.Exit(1)

    if not dry_run:
        typer.echo("\n✓ Update complete!")


def _skip_list(skip: str | None) -> list[str]:
    """Configured tools.skip plus a comma-separated --skip value."""
    skipped = list(_get_config().tools.skip)
    if skip:
        skipped.extend(s.strip() for s in skip.split(",") if s.strip())
    return skipped


# =============================================================================
# config commands
# =============================================================================

# Directory levels listed below .claude by `config show`
SHOW_DEPTH = 3


def _echo_tree(directory: Path, depth: int = 0) -> None:
    indent = "  " * depth
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            typer.echo(f"{indent}📁 {entry.name}/")
            if depth + 1 < SHOW_DEPTH:
                _echo_tree(entry, depth + 1)
        else:
            typer.echo(f"{indent}📄 {entry.name}")


@config_app.command("show")
def config_show(path: PathOption = None) -> None:
    """Show the configuration file in use and the .claude directory tree."""
    config = _get_config()
    claude_dir = (path or Path.cwd()) / config.output.directory

    typer.echo("📋 Current Configuration:\n")
    source = config.config_path or "defaults (no config file found)"
    typer.echo(f"Config file: {source}")

    if not claude_dir.is_dir():
        typer.echo(f"No {config.output.directory} directory found. Run 'claude-forge init' first.")
        return

    typer.echo(f"\nDirectory Structure ({claude_dir}):")
    try:
        _echo_tree(claude_dir)
    except OSError as e:
        _logger.error(f"Failed to read {claude_dir}: {e}")
        raise typer.Exit(1)


@config_app.command("reset")
def config_reset(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Delete without asking for confirmation",
        ),
    ] = False,
    path: PathOption = None,
) -> None:
    """Delete the .claude directory so `init` can start over."""
    config = _get_config()
    claude_dir = (path or Path.cwd()) / config.output.directory

    if not claude_dir.is_dir():
        typer.echo(f"No {config.output.directory} directory found, nothing to reset.")
        return

    if not force and not typer.confirm("This will delete all configuration files. Continue?", default=False):
        typer.echo("Reset cancelled.")
        return

    try:
        shutil.rmtree(claude_dir)
    except OSError as e:
        _logger.error(f"Failed to remove {claude_dir}: {e}")
        raise typer.Exit(1)

    typer.echo(f"✓ Removed {claude_dir}")
    typer.echo("\nRun `claude-forge init` to reinitialize.")


@config_app.command("export")
def config_export(
    output: Annotated[
        Path,
        typer.Argument(help="File to write, e.g. claude-forge.yaml"),
    ] = Path("claude-forge.yaml"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite an existing file",
        ),
    ] = False,
) -> None:
    """Write the default claude-forge configuration file."""
    if output.exists() and not force:
        _logger.error(f"Config already exists: {output}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(create_default_config(), encoding="utf-8")
    except OSError as e:
        _logger.error(f"Failed to write {output}: {e}")
        raise typer.Exit(1)

    typer.echo(f"✓ Configuration exported to {output}")


# =============================================================================
# validate command
# =============================================================================


@app.command()
def validate(
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Project directory (defaults to current directory)",
            exists=True,
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Validate the structure of the project's .claude directory."""
    claude_dir = (path or Path.cwd()) / _get_config().output.directory
    validator = ConfigValidator()

    _logger.info(f"Validating: {claude_dir}")
    errors = validator.validate(claude_dir)

    if errors:
        typer.echo("❌ Configuration is invalid")
        for error in errors:
            typer.echo(f"   • {error}")
        raise typer.Exit(1)

    summary = validator.summary(claude_dir)
    typer.echo(f"✅ Configuration is valid: {claude_dir}")
    for directory, count in summary.counts.items():
        typer.echo(f"   {directory}: {count}")


if __name__ == "__main__":
    app()
