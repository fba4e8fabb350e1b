"""Pydantic configuration models for pathgate.

For loading and merging logic, see loader.py.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from pathgate.policy.patterns import ValidationMode, compile_pattern


class PolicyConfig(BaseModel):
    """Configuration for the sandbox policy."""

    base_directory: Path = Field(description="Directory every resolved path must stay within")
    mode: ValidationMode = Field(
        default=ValidationMode.DEFAULT,
        description="Validation mode: strict, allow_relative, default",
    )
    whitelist_pattern: str | None = Field(
        default=None,
        description="Regex replacing the mode's default whitelist pattern",
    )
    enforce_whitelist: bool = Field(
        default=False,
        description="Reject raw paths that do not fully match the whitelist pattern",
    )
    resolve_symlinks: bool = Field(
        default=False,
        description="Recheck containment after resolving symlinks",
    )

    @field_validator("base_directory", mode="before")
    @classmethod
    def validate_base_directory(cls, v: object) -> object:
        """Reject blank values, which Path() would silently turn into '.'."""
        if isinstance(v, str) and not v.strip():
            raise ValueError("base_directory must not be empty")
        return v

    @field_validator("whitelist_pattern")
    @classmethod
    def validate_whitelist_pattern(cls, v: str | None) -> str | None:
        """Validate the override pattern compiles."""
        if v is not None:
            compile_pattern(v)
        return v


class LoggingConfig(BaseModel):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str | None = Field(default=None, description="Directory for log files (console only when unset)")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level is a standard logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid logging level '{v}'. Use DEBUG, INFO, WARNING, ERROR or CRITICAL.")
        return level


class Config(BaseModel):
    """Root configuration for pathgate."""

    policy: PolicyConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    timezone: str = Field(default="UTC", description="Timezone for listing timestamps (e.g., 'Europe/London')")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a valid IANA timezone identifier."""
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, KeyError, ValueError):
            raise ValueError(
                f"Invalid timezone '{v}'. Use IANA timezone identifiers "
                f"(e.g., 'America/Denver', 'Europe/London', 'UTC')."
            )
        return v
