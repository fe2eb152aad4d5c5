"""Pydantic models describing bundle outputs and toolchain locks."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BundleFile(BaseModel):
    path: str = Field(..., description="Path relative to the bundle directory.")
    sha256: str
    size: int
    origin: str = Field(default="compiler", description="'compiler' or 'asset'.")

    model_config = ConfigDict(extra="forbid")


class BundleManifest(BaseModel):
    name: Optional[str] = Field(default=None, description="Package name from the generated package.json.")
    version: Optional[str] = None
    target: Optional[str] = None
    profile: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    default_features: Optional[bool] = None
    tool: Optional[str] = None
    tool_version: Optional[str] = None
    built_at: datetime
    files: List[BundleFile] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ToolLock(BaseModel):
    tool: str
    version: str
    locked: bool = True
    resolved_at: datetime
    source: Optional[str] = Field(default=None, description="Where the version was resolved from.")

    model_config = ConfigDict(extra="forbid")
