"""Error taxonomy for the SDK generation pipeline."""
from __future__ import annotations

from typing import Optional, Sequence


class ScalarKiotaError(Exception):
    """Base class for every pipeline failure."""


class SpecUnavailableError(ScalarKiotaError):
    """The OpenAPI document could not be downloaded from the host."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download OpenAPI spec from {url}: {reason}")


class ExternalToolError(ScalarKiotaError):
    """An external process exited non-zero or could not be started.

    Attributes: ``command``, ``arguments`` (the argv after the command),
    ``stderr`` and ``returncode`` (None when the process never started).
    The argv lives in ``arguments`` because ``args`` is taken by
    ``Exception.args``.
    """

    def __init__(self, command: str, args: Sequence[str], stderr: str, returncode: Optional[int] = None):
        self.command = command
        self.arguments = list(args)
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(f"{self.command_line} failed: {stderr}")

    @property
    def command_line(self) -> str:
        return " ".join([self.command, *self.arguments])


class NoEntryPointError(ScalarKiotaError):
    """The generated TypeScript directory has nothing to bundle."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"No TypeScript entry point found in {directory}")


__all__ = [
    "ScalarKiotaError",
    "SpecUnavailableError",
    "ExternalToolError",
    "NoEntryPointError",
]
