"""Modern CLI tool support.

- probe: PATH/version checks for the tool catalog
- installer: package-manager driven installation of missing tools
"""

from claude_forge.tools.installer import InstallOutcome, InstallStatus, ToolInstallError, ToolsInstaller
from claude_forge.tools.probe import ToolCheck, ToolsProbe

__all__ = [
    "InstallOutcome",
    "InstallStatus",
    "ToolInstallError",
    "ToolsInstaller",
    "ToolCheck",
    "ToolsProbe",
]
