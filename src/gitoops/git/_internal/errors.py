"""Centralized translation of subprocess failures into ExternalToolError."""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager

from gitoops.core.errors import ExternalToolError


class ErrorMapper:
    """Maps subprocess exceptions to domain errors."""

    @staticmethod
    @contextmanager
    def guard(command: list[str]) -> Iterator[None]:
        """Context manager for consistent exception translation."""
        try:
            yield
        except FileNotFoundError as e:
            raise ExternalToolError.tool_missing(command[0]) from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr if isinstance(e.stderr, str) else (e.stderr or b"").decode()
            raise ExternalToolError.command_failed(command, stderr, e.returncode) from e


def git_operation(command: list[str]) -> AbstractContextManager[None]:
    """Wrap one git invocation so failures surface as ExternalToolError."""
    return ErrorMapper.guard(command)
