"""Command-line entry point for wasm-bundle."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .build.manifest import build_manifest, dump_manifest
from .config import load_project_config
from .errors import AssetError, ProvisioningError, WasmBundleError
from .pipeline import BuildPipeline
from .schemas.config import ProjectConfig
from .toolchain.locks import resolve_tool_version
from .toolchain.provision import ensure_tool
from .utils import resolve_optional_path, resolve_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "install-tools":
            return _handle_install_tools(args)
        if args.command == "build-wasm":
            return _handle_build_wasm(args)
        if args.command == "lock":
            return _handle_lock(args)
        if args.command == "manifest":
            return _handle_manifest(args)
    except WasmBundleError as exc:
        print(f"error[{exc.stage}]: {exc}", file=sys.stderr)
        return exc.exit_code

    parser.error(f"Unknown command '{args.command}'")
    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--workspace-root", help="Project root (default: current directory).")
    parser.add_argument("--config", help="Project config file (default: wasm-bundle.yaml if present).")
    parser.add_argument("--json", action="store_true", help="Print the result payload as JSON.")
    parser.add_argument("-v", "--verbose", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wasm-bundle",
        description="Build a crate to WebAssembly and bundle it with static web assets.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    install = subparsers.add_parser("install-tools", help="Install the wasm packaging tool.")
    _add_common_arguments(install)
    install.add_argument("--version", dest="tool_version", help="Exact tool version to install.")
    install.add_argument(
        "--locked",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Install with the tool's locked dependency versions (default from config: on).",
    )
    install.add_argument("--update-lock", action="store_true", help="Re-resolve the pinned version.")

    build = subparsers.add_parser("build-wasm", help="Compile to WebAssembly and merge static assets.")
    _add_common_arguments(build)
    build.add_argument("--install", action="store_true", help="Provision the packaging tool first.")
    build.add_argument("--update-lock", action="store_true", help="With --install, re-resolve the pinned version.")
    build.add_argument("--clean", action="store_true", help="Remove the previous output directory first.")
    build.add_argument("--profile", choices=["release", "dev", "profiling"])
    build.add_argument("--manifest", help="Write the bundle manifest to this path.")

    lock = subparsers.add_parser("lock", help="Resolve and record the packaging tool version.")
    _add_common_arguments(lock)
    lock.add_argument("--update", action="store_true", help="Replace an existing lock.")

    manifest = subparsers.add_parser("manifest", help="Describe an existing bundle directory.")
    _add_common_arguments(manifest)
    manifest.add_argument("--out-dir", help="Bundle directory (default: configured output directory).")
    manifest.add_argument("--output", help="Write the manifest to this path instead of stdout.")

    return parser


def _handle_install_tools(args: argparse.Namespace) -> int:
    workspace, project = _load(args)
    overrides: dict[str, object] = {}
    if args.tool_version:
        overrides["version"] = args.tool_version
    if args.locked is not None:
        overrides["locked"] = args.locked
    toolchain = project.toolchain.model_copy(update=overrides)

    status = ensure_tool(toolchain, workspace=workspace, update_lock=args.update_lock)
    if args.json:
        _print_json(status.to_dict())
    return 0


def _handle_build_wasm(args: argparse.Namespace) -> int:
    workspace, project = _load(args)
    overrides: dict[str, object] = {}
    if args.clean:
        overrides["clean"] = True
    if args.profile:
        overrides["profile"] = args.profile
    if overrides:
        project = project.model_copy(update={"build": project.build.model_copy(update=overrides)})

    pipeline = BuildPipeline(project, workspace=workspace)
    result = pipeline.run(provision=args.install, update_lock=args.update_lock)

    manifest_path = resolve_optional_path(args.manifest, workspace)
    if manifest_path is not None and result.manifest is not None:
        dump_manifest(result.manifest, manifest_path)
        result.logs.append(f"Manifest written to {manifest_path}")

    if args.json:
        _print_json(result.to_dict())
    return 0


def _handle_lock(args: argparse.Namespace) -> int:
    workspace, project = _load(args)
    toolchain = project.toolchain
    if not toolchain.locked and not toolchain.version:
        raise ProvisioningError("Nothing to lock: toolchain.locked is false and no version is pinned.")
    lock_path = resolve_path(toolchain.lock_file, workspace)
    resolution = resolve_tool_version(toolchain, lock_path, update=args.update)
    if args.json:
        _print_json(
            {
                "tool": toolchain.tool,
                "version": resolution.version,
                "source": resolution.source,
                "lock_path": str(resolution.lock_path) if resolution.lock_path else None,
            }
        )
    return 0


def _handle_manifest(args: argparse.Namespace) -> int:
    workspace, project = _load(args)
    out_dir = resolve_path(args.out_dir or project.build.out_dir, workspace)
    if not out_dir.is_dir():
        raise AssetError(f"Bundle directory not found: {out_dir}")

    manifest = build_manifest(out_dir, tool=project.toolchain.tool)
    output_path = resolve_optional_path(args.output, workspace)
    if output_path is not None:
        dump_manifest(manifest, output_path)
    else:
        _print_json(manifest.model_dump(mode="json"))
    return 0


def _load(args: argparse.Namespace) -> tuple[Path, ProjectConfig]:
    workspace = _resolve_workspace(args.workspace_root)
    return workspace, load_project_config(workspace, args.config)


def _resolve_workspace(value: Optional[str]) -> Path:
    return Path(value).resolve() if value else Path.cwd()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _print_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, indent=2, default=str))


if __name__ == "__main__":
    raise SystemExit(main())
