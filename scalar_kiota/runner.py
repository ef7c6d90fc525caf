"""Process runner for the external tools (kiota, dotnet, npm, npx).

``execute`` reports what happened and never raises for a failing tool, which
is what availability checks want. ``run`` is the strict variant used for
every pipeline step: a non-zero exit becomes :class:`ExternalToolError`
carrying the captured stderr.
"""
from __future__ import annotations

import asyncio
import logging
import os
import shutil
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import typer

from .errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    command: str
    args: List[str] = field(default_factory=list)
    returncode: Optional[int] = None  # None when the process never started
    stdout: str = ""
    stderr: str = ""
    duration_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """Runs external commands asynchronously, capturing their output."""

    async def execute(self, command: str, args: Sequence[str] = (), cwd: Optional[str] = None) -> ProcessResult:
        argv = [str(a) for a in args]
        # npm and npx are .cmd shims on Windows
        executable = shutil.which(command) or command
        logger.debug("Running %s %s (cwd=%s)", command, " ".join(argv), cwd or os.getcwd())
        start = time.time()
        try:
            proc = await asyncio.create_subprocess_exec(
                executable,
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            return ProcessResult(command, argv, None, "", str(e), time.time() - start)
        stdout, stderr = await proc.communicate()
        return ProcessResult(
            command,
            argv,
            proc.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
            time.time() - start,
        )

    async def run(self, command: str, args: Sequence[str] = (), cwd: Optional[str] = None) -> ProcessResult:
        result = await self.execute(command, args, cwd)
        if not result.ok:
            raise ExternalToolError(command, result.args, result.stderr, result.returncode)
        return result

    def open_url(self, url: str) -> None:
        """Open ``url`` in the default browser. Best effort: failures are logged."""
        try:
            code = typer.launch(url)
        except OSError as e:
            logger.warning("Could not open %s: %s", url, e)
            return
        if code != 0:
            logger.warning("Browser launcher exited with %s for %s", code, url)


__all__ = ["ProcessResult", "ProcessRunner"]
