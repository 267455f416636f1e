"""Engine configuration via environment variables."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

LogFormat = Literal["json", "console", ""]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EngineSettings(BaseSettings):
    model_config = {"env_prefix": "MAHJONG_"}

    # claim window timing
    claim_window_seconds: float = Field(default=8.0, gt=0)
    human_advantage_seconds: float = Field(default=6.0, ge=0)

    strict_validation: bool = False
    end_on_wall_exhaustion: bool = True
    stake: float = Field(default=1.0, gt=0)
    max_games: int = Field(default=100, ge=1)

    log_dir: str | None = Field(default=None, min_length=1)

    # Read from LOG_FORMAT / LOG_LEVEL (not MAHJONG_LOG_*), shared with other
    # services on the same host.
    log_format: LogFormat = Field(default="", validation_alias="LOG_FORMAT")
    log_level: LogLevel = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
