"""External command execution."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .errors import CommandFailedError, CommandNotFoundError

logger = logging.getLogger(__name__)


class CommandRunner:
    """Runs external tools synchronously.

    ``run`` lets the child inherit stdout/stderr so tool diagnostics reach the
    invoker verbatim. ``capture`` is reserved for short probes such as
    ``--version``.
    """

    def __init__(self, *, env: Optional[Mapping[str, str]] = None) -> None:
        self.env = dict(env) if env is not None else None

    def which(self, executable: str) -> Optional[Path]:
        located = shutil.which(executable)
        return Path(located) if located else None

    def run(self, command: Sequence[str], *, cwd: Path) -> None:
        executable = self._require(command[0])
        argv = [str(executable), *command[1:]]
        logger.info("Running: %s (cwd=%s)", shlex.join(command), cwd)
        proc = subprocess.run(argv, cwd=str(cwd), env=self.env, check=False)
        if proc.returncode != 0:
            raise CommandFailedError(command, proc.returncode)

    def capture(self, command: Sequence[str], *, cwd: Optional[Path] = None) -> str:
        executable = self._require(command[0])
        argv = [str(executable), *command[1:]]
        logger.debug("Probing: %s", shlex.join(command))
        proc = subprocess.run(
            argv,
            cwd=str(cwd) if cwd else None,
            env=self.env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
        )
        if proc.returncode != 0:
            raise CommandFailedError(command, proc.returncode)
        return proc.stdout

    def _require(self, executable: str) -> Path:
        located = self.which(executable)
        if located is None:
            raise CommandNotFoundError(executable)
        return located


__all__ = ["CommandRunner"]
