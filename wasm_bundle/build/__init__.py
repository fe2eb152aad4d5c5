"""Compile and asset merge steps."""

from .assets import MergeResult, merge_assets
from .compile import CompileOutput, build_command, compile_crate
from .manifest import build_manifest, dump_manifest, load_manifest

__all__ = [
    "CompileOutput",
    "MergeResult",
    "build_command",
    "build_manifest",
    "compile_crate",
    "dump_manifest",
    "load_manifest",
    "merge_assets",
]
