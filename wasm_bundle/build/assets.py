"""Asset merge step: copy static files into a compiled bundle."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from ..errors import AssetError
from ..schemas.config import AssetConfig
from ..utils import resolve_path
from .compile import CompileOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeResult:
    source_dir: Path
    destination: Path
    copied: Tuple[str, ...]
    overwritten: Tuple[str, ...]

    def to_dict(self) -> Dict[str, object]:
        return {
            "source_dir": str(self.source_dir),
            "destination": str(self.destination),
            "copied": list(self.copied),
            "overwritten": list(self.overwritten),
        }


def discover_assets(source_dir: Path, pattern: str) -> List[Path]:
    """Return files directly inside ``source_dir`` matching ``pattern``.

    Hidden files are skipped unless the pattern itself starts with a dot, as a
    shell glob would.
    """

    include_hidden = pattern.startswith(".")
    return sorted(
        path
        for path in source_dir.glob(pattern)
        if path.is_file() and (include_hidden or not path.name.startswith("."))
    )


def merge_assets(compiled: CompileOutput, assets: AssetConfig, *, workspace: Path) -> MergeResult:
    """Copy the asset set into the compile step's output directory, overwriting by name."""

    if not isinstance(compiled, CompileOutput):
        raise TypeError("merge_assets requires the CompileOutput of a successful compile step.")

    destination = compiled.out_dir
    source_dir = resolve_path(assets.source_dir, workspace)

    if not source_dir.exists():
        raise AssetError(
            f"Asset directory not found: {source_dir}. "
            f"The compile step succeeded but {destination} has no static assets."
        )
    if not source_dir.is_dir():
        raise AssetError(f"Asset source is not a directory: {source_dir}")
    if not destination.is_dir():
        raise AssetError(
            f"Bundle directory {destination} does not exist; refusing to create it for asset merge."
        )

    files = discover_assets(source_dir, assets.pattern)
    if not files:
        logger.warning("No files matching %r in %s", assets.pattern, source_dir)

    copied: List[str] = []
    overwritten: List[str] = []
    for source in files:
        target = destination / source.name
        if target.exists():
            overwritten.append(source.name)
        try:
            shutil.copy2(source, target)
        except OSError as exc:
            raise AssetError(f"Failed to copy {source} to {target}: {exc}") from exc
        logger.debug("Copied %s -> %s", source, target)
        copied.append(source.name)

    return MergeResult(
        source_dir=source_dir,
        destination=destination,
        copied=tuple(copied),
        overwritten=tuple(overwritten),
    )


__all__ = ["MergeResult", "discover_assets", "merge_assets"]
