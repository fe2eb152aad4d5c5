"""Error taxonomy for provisioning and bundle runs."""

from __future__ import annotations

from typing import Optional, Sequence


class WasmBundleError(RuntimeError):
    """Base error. Carries the stage it was raised in and the exit status to surface."""

    stage = "bundle"
    default_exit_code = 2

    def __init__(self, message: str, *, exit_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code if exit_code else self.default_exit_code


class ConfigError(WasmBundleError):
    """Raised when the project configuration cannot be loaded or validated."""

    stage = "config"


class ProvisioningError(WasmBundleError):
    """Raised when the packaging tool cannot be installed or run."""

    stage = "provision"


class CompileError(WasmBundleError):
    """Raised when the packaging tool rejects the crate or configuration."""

    stage = "compile"


class AssetError(WasmBundleError):
    """Raised when static assets cannot be merged into a compiled bundle."""

    stage = "assets"


class CommandFailedError(RuntimeError):
    """Raised by command runners when an external process exits non-zero."""

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(f"Command {self.command[0]!r} exited with status {returncode}.")


class CommandNotFoundError(RuntimeError):
    """Raised when an executable is not available on PATH."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(f"Executable not found on PATH: {executable}")


__all__ = [
    "AssetError",
    "CommandFailedError",
    "CommandNotFoundError",
    "CompileError",
    "ConfigError",
    "ProvisioningError",
    "WasmBundleError",
]
