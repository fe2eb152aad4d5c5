"""Compile step: run the packaging tool against the crate."""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from ..errors import CommandFailedError, CommandNotFoundError, CompileError
from ..process import CommandRunner
from ..schemas.config import BuildConfig
from ..utils import resolve_path

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST = "package.json"


@dataclass(frozen=True, slots=True)
class CompileOutput:
    """Success value of the compile step; the asset merge only accepts this."""

    crate_dir: Path
    out_dir: Path
    artifacts: Tuple[str, ...]
    config: BuildConfig
    package: Mapping[str, object] = field(default_factory=dict)

    @property
    def package_name(self) -> Optional[str]:
        name = self.package.get("name")
        return str(name) if name else None

    @property
    def package_version(self) -> Optional[str]:
        version = self.package.get("version")
        return str(version) if version else None

    def to_dict(self) -> Dict[str, object]:
        return {
            "crate_dir": str(self.crate_dir),
            "out_dir": str(self.out_dir),
            "artifacts": list(self.artifacts),
            "package": {"name": self.package_name, "version": self.package_version},
        }


def build_command(
    config: BuildConfig,
    *,
    crate_dir: Path,
    out_dir: Path,
    tool: str = "wasm-pack",
) -> List[str]:
    """Return the packaging tool invocation for ``config``."""

    command = [
        tool,
        "build",
        str(crate_dir),
        "--target",
        config.target,
        f"--{config.profile}",
        "--out-dir",
        str(out_dir),
    ]
    if config.out_name:
        command.extend(["--out-name", config.out_name])

    cargo_args: List[str] = []
    if not config.default_features:
        cargo_args.append("--no-default-features")
    if config.features:
        cargo_args.extend(["--features", ",".join(config.features)])
    cargo_args.extend(config.extra_args)
    if cargo_args:
        command.append("--")
        command.extend(cargo_args)
    return command


def compile_crate(
    config: BuildConfig,
    *,
    workspace: Path,
    tool: str = "wasm-pack",
    runner: Optional[CommandRunner] = None,
) -> CompileOutput:
    """Compile the crate to WebAssembly and return the populated output directory."""

    runner = runner or CommandRunner()
    crate_dir = resolve_path(config.crate_dir, workspace)
    if not crate_dir.is_dir():
        raise CompileError(f"Crate directory not found: {crate_dir}")
    if not (crate_dir / "Cargo.toml").is_file():
        raise CompileError(f"No Cargo.toml in crate directory: {crate_dir}")

    out_dir = resolve_path(config.out_dir, workspace)
    if config.clean and out_dir.exists():
        logger.info("Removing previous output %s", out_dir)
        try:
            if out_dir.is_dir():
                shutil.rmtree(out_dir)
            else:
                out_dir.unlink()
        except OSError as exc:
            raise CompileError(f"Unable to remove previous output {out_dir}: {exc}") from exc

    command = build_command(config, crate_dir=crate_dir, out_dir=out_dir, tool=tool)
    try:
        runner.run(command, cwd=crate_dir)
    except CommandNotFoundError as exc:
        raise CompileError(f"{exc}. Run 'wasm-bundle install-tools' first.") from exc
    except CommandFailedError as exc:
        raise CompileError(
            f"{tool} build failed with status {exc.returncode}; assets were not merged.",
            exit_code=exc.returncode,
        ) from exc

    if not out_dir.is_dir():
        raise CompileError(f"{tool} exited successfully but did not produce {out_dir}.")

    artifacts = tuple(
        sorted(path.relative_to(out_dir).as_posix() for path in out_dir.rglob("*") if path.is_file())
    )
    logger.info("Compiled %d artifact(s) into %s", len(artifacts), out_dir)
    return CompileOutput(
        crate_dir=crate_dir,
        out_dir=out_dir,
        artifacts=artifacts,
        config=config,
        package=_read_package_manifest(out_dir),
    )


def _read_package_manifest(out_dir: Path) -> Dict[str, object]:
    path = out_dir / PACKAGE_MANIFEST
    if not path.is_file():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return {}
    return payload if isinstance(payload, dict) else {}


__all__ = ["CompileOutput", "build_command", "compile_crate"]
