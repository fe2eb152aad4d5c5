from __future__ import annotations

import sys
from pathlib import Path

import pytest

from wasm_bundle.errors import CommandFailedError, CommandNotFoundError
from wasm_bundle.process import CommandRunner


def test_run_passes_through_exit_status(tmp_path: Path) -> None:
    runner = CommandRunner()

    with pytest.raises(CommandFailedError) as excinfo:
        runner.run([sys.executable, "-c", "raise SystemExit(3)"], cwd=tmp_path)

    assert excinfo.value.returncode == 3
    assert excinfo.value.command[0] == sys.executable


def test_run_succeeds_in_cwd(tmp_path: Path) -> None:
    CommandRunner().run(
        [sys.executable, "-c", "open('marker.txt', 'w').write('ok')"],
        cwd=tmp_path,
    )

    assert (tmp_path / "marker.txt").read_text() == "ok"


def test_missing_executable(tmp_path: Path) -> None:
    runner = CommandRunner()

    assert runner.which("wasm-bundle-no-such-tool") is None
    with pytest.raises(CommandNotFoundError) as excinfo:
        runner.run(["wasm-bundle-no-such-tool", "--version"], cwd=tmp_path)
    assert excinfo.value.executable == "wasm-bundle-no-such-tool"


def test_capture_returns_stdout() -> None:
    output = CommandRunner().capture([sys.executable, "-c", "print('wasm-pack 0.13.1')"])

    assert output.strip() == "wasm-pack 0.13.1"


def test_capture_failure() -> None:
    with pytest.raises(CommandFailedError) as excinfo:
        CommandRunner().capture([sys.executable, "-c", "raise SystemExit(7)"])

    assert excinfo.value.returncode == 7


def test_env_is_forwarded(tmp_path: Path) -> None:
    import os

    env = {**os.environ, "WASM_BUNDLE_MARKER": "forwarded"}
    output = CommandRunner(env=env).capture(
        [sys.executable, "-c", "import os; print(os.environ['WASM_BUNDLE_MARKER'])"]
    )

    assert output.strip() == "forwarded"
