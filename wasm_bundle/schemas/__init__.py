"""Schema definitions for configuration and bundle metadata."""

from .bundle import BundleFile, BundleManifest, ToolLock
from .config import AssetConfig, BuildConfig, ProjectConfig, ToolchainConfig

__all__ = [
    "AssetConfig",
    "BuildConfig",
    "BundleFile",
    "BundleManifest",
    "ProjectConfig",
    "ToolLock",
    "ToolchainConfig",
]
