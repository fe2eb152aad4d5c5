"""Toolchain provisioning."""

from .locks import VersionResolution, load_lock, resolve_tool_version
from .provision import ToolStatus, ensure_tool

__all__ = [
    "ToolStatus",
    "VersionResolution",
    "ensure_tool",
    "load_lock",
    "resolve_tool_version",
]
