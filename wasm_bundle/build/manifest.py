"""Manifest helpers for compiled bundles."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..schemas.bundle import BundleFile, BundleManifest
from ..utils import compute_sha256
from .assets import MergeResult
from .compile import CompileOutput


def build_manifest(
    out_dir: Path,
    *,
    compiled: Optional[CompileOutput] = None,
    merged: Optional[MergeResult] = None,
    tool: Optional[str] = None,
    tool_version: Optional[str] = None,
    built_at: Optional[datetime] = None,
) -> BundleManifest:
    """Describe every file in ``out_dir`` with its checksum."""

    asset_names = set(merged.copied) if merged else set()
    files = [
        BundleFile(
            path=relative,
            sha256=compute_sha256(path),
            size=path.stat().st_size,
            origin="asset" if relative in asset_names else "compiler",
        )
        for path, relative in sorted(
            ((path, path.relative_to(out_dir).as_posix()) for path in out_dir.rglob("*") if path.is_file()),
            key=lambda item: item[1],
        )
    ]

    payload: dict[str, object] = {
        "built_at": built_at or datetime.now(timezone.utc),
        "files": files,
        "tool": tool,
        "tool_version": tool_version,
    }
    if compiled is not None:
        payload.update(
            {
                "name": compiled.package_name,
                "version": compiled.package_version,
                "target": compiled.config.target,
                "profile": compiled.config.profile,
                "features": list(compiled.config.features),
                "default_features": compiled.config.default_features,
            }
        )
    return BundleManifest.model_validate(payload)


def load_manifest(path: Path) -> BundleManifest:
    """Load a manifest from JSON."""

    payload = json.loads(path.read_text(encoding="utf-8"))
    return BundleManifest.model_validate(payload)


def dump_manifest(manifest: BundleManifest, path: Path) -> None:
    """Write a manifest to disk."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(manifest.model_dump_json(indent=2) + "\n", encoding="utf-8")
