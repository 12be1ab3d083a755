"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (GITOOPS__SECTION__KEY)
3. Global YAML (~/.config/git-oops/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    GITOOPS__<SECTION>__<KEY>=<VALUE>

Examples:
    GITOOPS__LOGGING__LEVEL=DEBUG
    GITOOPS__GIT__REMOTE=upstream
    GITOOPS__WORKFLOWS__SAVE_MESSAGE="wip"
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        GITOOPS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Diagnostics only; user output is not affected.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GitConfig(BaseModel):
    """How the git executable is invoked.

    Env vars:
        GITOOPS__GIT__EXECUTABLE: git binary (default: git)
        GITOOPS__GIT__REMOTE: remote used for best-effort upstream lookup (default: origin)
    """

    executable: str = Field(default="git", description="Git executable name or path.")
    remote: str = Field(
        default="origin",
        description="Remote checked for a same-named branch when no tracking is configured.",
    )

    @field_validator("executable", "remote")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class WorkflowDefaults(BaseModel):
    """Defaults for workflow messages and names.

    Env vars:
        GITOOPS__WORKFLOWS__SAVE_MESSAGE: Commit message for 'save'
        GITOOPS__WORKFLOWS__SPLIT_MESSAGE_TEMPLATE: Per-group message, {group} placeholder
        GITOOPS__WORKFLOWS__BRANCH_PREFIX: Prefix for generated wrong-branch names
    """

    save_message: str = Field(default="WIP: quick save")
    split_message_template: str = Field(default="chore({group}): split from mixed changes")
    branch_prefix: str = Field(default="fix/")
    fallback_bases: list[str] = Field(
        default_factory=lambda: ["main", "master"],
        description="Local branches used as reset base when no upstream is configured.",
    )

    @field_validator("split_message_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if "{group}" not in v:
            raise ValueError("template must contain a {group} placeholder")
        return v


class OopsConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    workflows: WorkflowDefaults = Field(default_factory=WorkflowDefaults)
