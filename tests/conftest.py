from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

import pytest

from wasm_bundle.errors import CommandFailedError, CommandNotFoundError
from wasm_bundle.process import CommandRunner

CRATE_NAME = "terminal_donut_rs"


class FakeRunner(CommandRunner):
    """In-memory stand-in for cargo and wasm-pack."""

    def __init__(
        self,
        *,
        available: Iterable[str] = ("cargo", "wasm-pack"),
        installed: Optional[Dict[str, str]] = None,
        install_version: str = "0.13.1",
        build_outputs: Optional[Dict[str, str]] = None,
        fail: Optional[Dict[str, int]] = None,
    ) -> None:
        super().__init__()
        self.available = set(available)
        self.installed = dict(installed if installed is not None else {"wasm-pack": "0.13.1"})
        self.install_version = install_version
        self.build_outputs = build_outputs
        self.fail = dict(fail or {})
        self.calls: List[List[str]] = []

    def which(self, executable: str) -> Optional[Path]:
        if executable in self.available and (executable == "cargo" or executable in self.installed):
            return Path("/fake/bin") / executable
        return None

    def run(self, command: Sequence[str], *, cwd: Path) -> None:
        command = list(command)
        self.calls.append(command)
        executable = command[0]
        if executable not in self.available:
            raise CommandNotFoundError(executable)
        if executable in self.fail:
            raise CommandFailedError(command, self.fail[executable])
        if executable == "cargo" and command[1:2] == ["install"]:
            self._install(command)
        elif command[1:2] == ["build"]:
            self._build(command)

    def capture(self, command: Sequence[str], *, cwd: Optional[Path] = None) -> str:
        executable = command[0]
        if executable not in self.installed:
            raise CommandNotFoundError(executable)
        return f"{executable} {self.installed[executable]}\n"

    def _install(self, command: List[str]) -> None:
        tool = command[2]
        version = command[command.index("--version") + 1] if "--version" in command else self.install_version
        self.installed[tool] = version
        self.available.add(tool)

    def _build(self, command: List[str]) -> None:
        out_dir = Path(command[command.index("--out-dir") + 1])
        out_dir.mkdir(parents=True, exist_ok=True)
        outputs = self.build_outputs
        if outputs is None:
            outputs = {
                f"{CRATE_NAME}.js": "export default function init() {}\n",
                f"{CRATE_NAME}_bg.wasm": "\0asm",
                f"{CRATE_NAME}.d.ts": "export function wasm_render(): number;\n",
                "package.json": json.dumps({"name": CRATE_NAME, "version": "0.1.0"}),
            }
        for name, content in outputs.items():
            (out_dir / name).write_text(content, encoding="utf-8")

    def commands_for(self, executable: str) -> List[List[str]]:
        return [call for call in self.calls if call[0] == executable]


@pytest.fixture()
def fake_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture()
def crate_workspace(tmp_path: Path) -> Path:
    (tmp_path / "Cargo.toml").write_text(
        f'[package]\nname = "{CRATE_NAME}"\nversion = "0.1.0"\n\n[features]\nwasm = []\n',
        encoding="utf-8",
    )
    html = tmp_path / "html"
    html.mkdir()
    (html / "index.html").write_text("<pre id='screen'></pre>\n", encoding="utf-8")
    (html / "main.js").write_text("import init from './terminal_donut_rs.js';\n", encoding="utf-8")
    return tmp_path
