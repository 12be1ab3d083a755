"""git-oops error types with typed error codes.

Error code ranges:
- 1xxx: Validation (bad input or unmet precondition, exit status 1)
- 2xxx: External tool (git failed or is missing, exit status 2)
- 3xxx: Config
- 9xxx: Internal

Validation errors are always raised before any mutating git call.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Validation (1xxx)
    INVALID_ARGUMENT = 1001
    PRECONDITION_FAILED = 1002
    PROTECTED_BRANCH = 1003
    NOT_A_MERGE = 1004
    MAINLINE_OUT_OF_RANGE = 1005

    # External tool (2xxx)
    COMMAND_FAILED = 2001
    TOOL_NOT_FOUND = 2002
    NOT_A_REPOSITORY = 2003
    CONFLICT = 2004

    # Config (3xxx)
    CONFIG_PARSE_ERROR = 3001
    CONFIG_INVALID_VALUE = 3002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(eq=False)
class GitOopsError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    exit_code: ClassVar[int] = 1

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'NOT_A_MERGE')."""
        return self.code.name

    @property
    def marker(self) -> str | None:
        """Recovery marker name attached in the Recover branch, if any."""
        return self.details.get("marker")

    @property
    def recovery_steps(self) -> list[str]:
        return list(self.details.get("recovery_steps", []))

    def with_recovery(self, *, marker: str | None = None, steps: list[str] | None = None) -> GitOopsError:
        """Return a copy of this error carrying rollback instructions."""
        details = dict(self.details)
        if marker is not None:
            details["marker"] = marker
        if steps:
            details["recovery_steps"] = [*details.get("recovery_steps", []), *steps]
        return dataclasses.replace(self, details=details)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "exit_code": self.exit_code,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ValidationError(GitOopsError):
    """User input or preconditions are invalid. Never leaves partial state."""

    exit_code: ClassVar[int] = 1

    @classmethod
    def invalid_argument(cls, name: str, value: Any, reason: str) -> ValidationError:
        return cls(
            code=ErrorCode.INVALID_ARGUMENT,
            message=reason,
            details={"argument": name, "value": str(value)},
        )

    @classmethod
    def precondition(cls, reason: str, **details: Any) -> ValidationError:
        return cls(code=ErrorCode.PRECONDITION_FAILED, message=reason, details=details)

    @classmethod
    def protected_branch(cls, branch: str) -> ValidationError:
        return cls(
            code=ErrorCode.PROTECTED_BRANCH,
            message=f"Branch '{branch}' appears to be protected. Use --yes to proceed anyway.",
            details={"branch": branch},
        )

    @classmethod
    def not_a_merge(cls, sha: str, parent_count: int) -> ValidationError:
        return cls(
            code=ErrorCode.NOT_A_MERGE,
            message=f"Commit {sha} is not a merge commit ({parent_count} parent(s))",
            details={"sha": sha, "parents": parent_count},
        )

    @classmethod
    def mainline_out_of_range(cls, mainline: int, parent_count: int) -> ValidationError:
        return cls(
            code=ErrorCode.MAINLINE_OUT_OF_RANGE,
            message=f"Invalid mainline {mainline}. Must be between 1 and {parent_count}",
            details={"mainline": mainline, "parents": parent_count},
        )


class ExternalToolError(GitOopsError):
    """The underlying version-control tool rejected or failed a call."""

    exit_code: ClassVar[int] = 2

    @property
    def command(self) -> list[str]:
        return list(self.details.get("command", []))

    @property
    def stderr(self) -> str:
        return str(self.details.get("stderr", ""))

    @classmethod
    def command_failed(cls, command: list[str], stderr: str, returncode: int) -> ExternalToolError:
        diagnostic = stderr.strip() or f"exit status {returncode}"
        return cls(
            code=ErrorCode.COMMAND_FAILED,
            message=f"Git command failed: {' '.join(command)}\n{diagnostic}",
            details={"command": command, "stderr": stderr, "returncode": returncode},
        )

    @classmethod
    def tool_missing(cls, executable: str) -> ExternalToolError:
        return cls(
            code=ErrorCode.TOOL_NOT_FOUND,
            message=f"Git executable not found: {executable}",
            details={"command": [executable]},
        )

    @classmethod
    def not_a_repository(cls, path: str) -> ExternalToolError:
        return cls(
            code=ErrorCode.NOT_A_REPOSITORY,
            message=f"Not a git repository: {path}",
            details={"path": path},
        )


class ConflictError(ExternalToolError):
    """A revert stopped with unmerged paths. Conflicts are reported, never resolved."""

    @property
    def paths(self) -> list[str]:
        return list(self.details.get("paths", []))

    @classmethod
    def unmerged(cls, operation: str, paths: list[str], cause: ExternalToolError) -> ConflictError:
        return cls(
            code=ErrorCode.CONFLICT,
            message=f"{operation} resulted in conflicts: {', '.join(paths)}",
            details={**cause.details, "operation": operation, "paths": paths},
        )


class ConfigError(GitOopsError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> ConfigError:
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class InternalError(GitOopsError):
    """Internal/unexpected errors."""

    exit_code: ClassVar[int] = 2

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> InternalError:
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
