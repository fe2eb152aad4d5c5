"""Sequential provision → compile → merge orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from requests import Session

from .build.assets import MergeResult, merge_assets
from .build.compile import CompileOutput, compile_crate
from .build.manifest import build_manifest
from .process import CommandRunner
from .schemas.bundle import BundleManifest
from .schemas.config import ProjectConfig
from .toolchain.provision import ToolStatus, ensure_tool

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    IDLE = "idle"
    PROVISIONING = "provisioning"
    BUILDING = "building"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: Dict[Stage, frozenset[Stage]] = {
    Stage.IDLE: frozenset({Stage.PROVISIONING, Stage.BUILDING}),
    Stage.PROVISIONING: frozenset({Stage.BUILDING, Stage.FAILED}),
    Stage.BUILDING: frozenset({Stage.MERGING, Stage.FAILED}),
    Stage.MERGING: frozenset({Stage.DONE, Stage.FAILED}),
    Stage.DONE: frozenset(),
    Stage.FAILED: frozenset(),
}


@dataclass
class PipelineResult:
    tool: Optional[ToolStatus] = None
    compiled: Optional[CompileOutput] = None
    merged: Optional[MergeResult] = None
    manifest: Optional[BundleManifest] = None
    stages: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": "ok",
            "stages": list(self.stages),
            "tool": self.tool.to_dict() if self.tool else None,
            "compile": self.compiled.to_dict() if self.compiled else None,
            "assets": self.merged.to_dict() if self.merged else None,
            "manifest": self.manifest.model_dump(mode="json") if self.manifest else None,
            "logs": list(self.logs),
        }


class BuildPipeline:
    """Runs one bundle build. A pipeline instance is single-shot; a rerun needs a new instance."""

    def __init__(
        self,
        project: ProjectConfig,
        *,
        workspace: Path,
        runner: Optional[CommandRunner] = None,
        session: Optional[Session] = None,
    ) -> None:
        self.project = project
        self.workspace = workspace
        self.runner = runner or CommandRunner()
        self.session = session
        self.stage = Stage.IDLE
        self.history: List[Stage] = [Stage.IDLE]
        self.failed_stage: Optional[Stage] = None

    def run(self, *, provision: bool = False, update_lock: bool = False) -> PipelineResult:
        if self.stage is not Stage.IDLE:
            raise RuntimeError(f"Pipeline already ran (stage={self.stage.value}); create a new pipeline to rerun.")

        result = PipelineResult()
        try:
            if provision:
                self._advance(Stage.PROVISIONING)
                result.tool = ensure_tool(
                    self.project.toolchain,
                    workspace=self.workspace,
                    runner=self.runner,
                    session=self.session,
                    update_lock=update_lock,
                )
                result.logs.append(f"{result.tool.tool} {result.tool.version} ready")

            self._advance(Stage.BUILDING)
            result.compiled = compile_crate(
                self.project.build,
                workspace=self.workspace,
                tool=self.project.toolchain.tool,
                runner=self.runner,
            )
            result.logs.append(f"Compiled into {result.compiled.out_dir}")

            self._advance(Stage.MERGING)
            result.merged = merge_assets(result.compiled, self.project.assets, workspace=self.workspace)
            result.logs.append(f"Merged {len(result.merged.copied)} asset(s) from {result.merged.source_dir}")

            result.manifest = build_manifest(
                result.compiled.out_dir,
                compiled=result.compiled,
                merged=result.merged,
                tool=self.project.toolchain.tool,
                tool_version=result.tool.version if result.tool else None,
            )
            self._advance(Stage.DONE)
        except Exception:
            self.failed_stage = self.stage
            self._advance(Stage.FAILED)
            raise
        finally:
            result.stages = [stage.value for stage in self.history]
        return result

    def _advance(self, target: Stage) -> None:
        if target not in _TRANSITIONS[self.stage]:
            raise RuntimeError(f"Invalid stage transition {self.stage.value} -> {target.value}")
        logger.debug("Stage %s -> %s", self.stage.value, target.value)
        self.stage = target
        self.history.append(target)


__all__ = ["BuildPipeline", "PipelineResult", "Stage"]
