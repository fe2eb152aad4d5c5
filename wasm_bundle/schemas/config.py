"""Pydantic models describing a bundle project."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

CRATES_IO_API = "https://crates.io/api/v1"


class ToolchainConfig(BaseModel):
    tool: str = Field(default="wasm-pack", description="Packaging tool executable and crate name.")
    version: Optional[str] = Field(default=None, description="Exact tool version to install.")
    locked: bool = Field(default=True, description="Install with the tool's locked dependency versions.")
    installer: str = "cargo"
    lock_file: str = "wasm-bundle.lock.json"
    registry_url: str = CRATES_IO_API

    model_config = ConfigDict(extra="forbid", frozen=True)


class BuildConfig(BaseModel):
    target: str = Field(default="web", description="Execution environment the output is shaped for.")
    default_features: bool = False
    features: List[str] = Field(default_factory=lambda: ["wasm"])
    profile: Literal["release", "dev", "profiling"] = "release"
    crate_dir: str = "."
    out_dir: str = "pkg"
    out_name: Optional[str] = None
    extra_args: List[str] = Field(default_factory=list, description="Extra cargo arguments passed after '--'.")
    clean: bool = Field(default=False, description="Remove the output directory before building.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("features")
    @classmethod
    def _strip_features(cls, value: List[str]) -> List[str]:
        return [feature.strip() for feature in value if feature.strip()]


class AssetConfig(BaseModel):
    source_dir: str = "html"
    pattern: str = Field(default="*.*", description="Non-recursive glob matched inside source_dir.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("pattern")
    @classmethod
    def _reject_recursive(cls, value: str) -> str:
        if "/" in value or "\\" in value or "**" in value:
            raise ValueError(f"Asset pattern must match files directly inside source_dir (got '{value}')")
        return value


class ProjectConfig(BaseModel):
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    assets: AssetConfig = Field(default_factory=AssetConfig)

    model_config = ConfigDict(extra="forbid", frozen=True)
