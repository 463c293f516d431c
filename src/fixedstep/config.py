"""Configuration models for game loops and logging."""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DELAY_CLAMP_MS = 200.0

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class GameLoopOptions(BaseModel):
    """Additional options for customizing game loop behavior.

    delay_clamp_ms is the maximum residual delay the loop may carry forward.
    It keeps the loop from hanging when the step function takes longer to
    run than the step interval: anything beyond it is dropped and reported.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    delay_clamp_ms: float = Field(default=DEFAULT_DELAY_CLAMP_MS, gt=0)

    @field_validator("delay_clamp_ms", mode="before")
    @classmethod
    def _default_when_null(cls, value: Any) -> Any:
        return DEFAULT_DELAY_CLAMP_MS if value is None else value

    @classmethod
    def resolve(
        cls, options: Union["GameLoopOptions", Mapping[str, Any], None]
    ) -> "GameLoopOptions":
        """Fill in defaults for missing options."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))


class LogConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name} | {message}"
    file: Optional[str] = None  # log to stderr when unset
    rotation: str = "1 day"
    retention: str = "30 days"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}, expected one of {LOG_LEVELS}")
        return level

    @classmethod
    def resolve(cls, config: Union["LogConfig", Mapping[str, Any], None]) -> "LogConfig":
        if config is None:
            return cls()
        if isinstance(config, cls):
            return config
        return cls.model_validate(dict(config))
