"""Build a crate to WebAssembly and bundle it with static web assets."""

__version__ = "0.1.0"
from .build import CompileOutput, MergeResult, build_manifest, compile_crate, merge_assets
from .config import load_project_config
from .errors import (
    AssetError,
    CompileError,
    ConfigError,
    ProvisioningError,
    WasmBundleError,
)
from .pipeline import BuildPipeline, PipelineResult, Stage
from .schemas import AssetConfig, BuildConfig, BundleManifest, ProjectConfig, ToolchainConfig
from .toolchain import ToolStatus, ensure_tool

__all__ = [
    "__version__",
    "AssetConfig",
    "AssetError",
    "BuildConfig",
    "BuildPipeline",
    "BundleManifest",
    "CompileError",
    "CompileOutput",
    "ConfigError",
    "MergeResult",
    "PipelineResult",
    "ProjectConfig",
    "ProvisioningError",
    "Stage",
    "ToolStatus",
    "ToolchainConfig",
    "WasmBundleError",
    "build_manifest",
    "compile_crate",
    "ensure_tool",
    "load_project_config",
    "merge_assets",
]
