"""Toolchain lockfile helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import requests
from pydantic import ValidationError
from requests import Response, Session
from requests.exceptions import RequestException

from .. import __version__
from ..errors import ProvisioningError
from ..schemas.bundle import ToolLock
from ..schemas.config import ToolchainConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VersionResolution:
    """Version selected for installation and where it came from."""

    version: Optional[str]
    source: str
    lock_path: Optional[Path] = None


def load_lock(path: Path) -> Optional[ToolLock]:
    """Load a lockfile, returning ``None`` when it does not exist."""

    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return ToolLock.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ProvisioningError(f"Corrupt toolchain lock {path}: {exc}") from exc


def dump_lock(lock: ToolLock, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(lock.model_dump_json(indent=2) + "\n", encoding="utf-8")


def fetch_latest_version(
    tool: str,
    *,
    registry_url: str,
    session: Optional[Session] = None,
) -> str:
    """Return the newest stable version of ``tool`` published on the crates registry."""

    request_session = session or requests.Session()
    url = f"{registry_url.rstrip('/')}/crates/{tool}"
    try:
        response: Response = request_session.get(
            url,
            headers={
                "Accept": "application/json",
                "User-Agent": f"wasm-bundle/{__version__}",
            },
            timeout=20,
        )
    except RequestException as exc:
        raise ProvisioningError(f"Registry lookup for '{tool}' failed: {exc}") from exc

    if response.status_code != 200:
        raise ProvisioningError(
            f"Registry lookup for '{tool}' returned {response.status_code}: {response.text or response.reason}"
        )

    try:
        crate = response.json()["crate"]
    except (ValueError, KeyError, TypeError) as exc:
        raise ProvisioningError(f"Unexpected registry response for '{tool}'.") from exc

    version = crate.get("max_stable_version") or crate.get("newest_version") or crate.get("max_version")
    if not version:
        raise ProvisioningError(f"Registry has no published version for '{tool}'.")
    return str(version)


def resolve_tool_version(
    config: ToolchainConfig,
    lock_path: Path,
    *,
    session: Optional[Session] = None,
    update: bool = False,
) -> VersionResolution:
    """Select the tool version to install.

    Precedence: explicit config pin, existing lockfile, registry lookup (only
    when ``locked``; the result is written to the lockfile), then no pin.
    """

    if config.version:
        return VersionResolution(version=config.version, source="config")

    if not update:
        lock = load_lock(lock_path)
        if lock is not None:
            if lock.tool != config.tool:
                raise ProvisioningError(
                    f"Toolchain lock {lock_path} pins '{lock.tool}', expected '{config.tool}'. "
                    "Re-run with --update-lock to replace it."
                )
            logger.debug("Using %s %s from %s", lock.tool, lock.version, lock_path)
            return VersionResolution(version=lock.version, source="lock", lock_path=lock_path)

    if not config.locked:
        return VersionResolution(version=None, source="latest")

    version = fetch_latest_version(config.tool, registry_url=config.registry_url, session=session)
    lock = ToolLock(
        tool=config.tool,
        version=version,
        locked=config.locked,
        resolved_at=datetime.now(timezone.utc),
        source=config.registry_url,
    )
    dump_lock(lock, lock_path)
    logger.info("Locked %s to %s in %s", config.tool, version, lock_path)
    return VersionResolution(version=version, source="registry", lock_path=lock_path)


__all__ = [
    "VersionResolution",
    "dump_lock",
    "fetch_latest_version",
    "load_lock",
    "resolve_tool_version",
]
