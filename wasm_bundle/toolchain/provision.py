"""Packaging tool provisioning."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from requests import Session

from ..errors import CommandFailedError, CommandNotFoundError, ProvisioningError
from ..process import CommandRunner
from ..schemas.config import ToolchainConfig
from ..utils import resolve_path
from .locks import resolve_tool_version

logger = logging.getLogger(__name__)

_VERSION_PATTERN = re.compile(r"(\d+\.\d+\.\d+(?:-[0-9A-Za-z.\-]+)?)")


@dataclass(slots=True)
class ToolStatus:
    """Outcome of a provisioning run."""

    tool: str
    version: Optional[str]
    path: Optional[Path]
    installed: bool
    version_source: str
    lock_path: Optional[Path] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "tool": self.tool,
            "version": self.version,
            "path": str(self.path) if self.path else None,
            "installed": self.installed,
            "version_source": self.version_source,
            "lock_path": str(self.lock_path) if self.lock_path else None,
        }


def parse_version(output: str) -> Optional[str]:
    match = _VERSION_PATTERN.search(output)
    return match.group(1) if match else None


def installed_version(tool: str, runner: CommandRunner) -> Optional[str]:
    """Return the version reported by ``tool --version`` or ``None`` if it cannot run."""

    if runner.which(tool) is None:
        return None
    try:
        output = runner.capture([tool, "--version"])
    except (CommandFailedError, CommandNotFoundError):
        return None
    return parse_version(output)


def build_install_command(config: ToolchainConfig, version: Optional[str]) -> List[str]:
    command = [config.installer, "install", config.tool]
    if version:
        command.extend(["--version", version])
    if config.locked:
        command.append("--locked")
    return command


def ensure_tool(
    config: ToolchainConfig,
    *,
    workspace: Path,
    runner: Optional[CommandRunner] = None,
    session: Optional[Session] = None,
    update_lock: bool = False,
) -> ToolStatus:
    """Make sure the packaging tool is runnable, installing it when absent or mismatched."""

    runner = runner or CommandRunner()
    lock_path = resolve_path(config.lock_file, workspace)
    resolution = resolve_tool_version(config, lock_path, session=session, update=update_lock)

    current = installed_version(config.tool, runner)
    if current is not None and (resolution.version is None or current == resolution.version):
        logger.info("%s %s already installed", config.tool, current)
        return ToolStatus(
            tool=config.tool,
            version=current,
            path=runner.which(config.tool),
            installed=False,
            version_source=resolution.source,
            lock_path=resolution.lock_path,
        )

    if current is not None:
        logger.info("Replacing %s %s with %s", config.tool, current, resolution.version)

    command = build_install_command(config, resolution.version)
    try:
        runner.run(command, cwd=workspace)
    except CommandNotFoundError as exc:
        raise ProvisioningError(f"{exc}. A Rust toolchain is required to install {config.tool}.") from exc
    except CommandFailedError as exc:
        raise ProvisioningError(
            f"Installing {config.tool} failed ({config.installer} exited with status {exc.returncode}).",
            exit_code=exc.returncode,
        ) from exc

    confirmed = installed_version(config.tool, runner)
    if confirmed is None:
        raise ProvisioningError(f"{config.tool} was installed but is not runnable from PATH.")
    if resolution.version and confirmed != resolution.version:
        raise ProvisioningError(
            f"{config.tool} reports version {confirmed} after installing {resolution.version}."
        )

    return ToolStatus(
        tool=config.tool,
        version=confirmed,
        path=runner.which(config.tool),
        installed=True,
        version_source=resolution.source,
        lock_path=resolution.lock_path,
    )


__all__ = [
    "ToolStatus",
    "build_install_command",
    "ensure_tool",
    "installed_version",
    "parse_version",
]
