"""Configuration module using Pydantic Settings."""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VARIANTS = ("classic", "history", "computer")

# Marks used by the computer variant.
HUMAN_MARK = "X"
COMPUTER_MARK = "O"


class Settings(BaseSettings):
    """Settings read from ``TICTACTOE_*`` environment variables and ``.env``.

    Attributes:
        default_variant: Variant used when none is requested.
        max_games: Cap on games held by the web API at the same time.
        pending_timeout: Seconds a created game may wait for its WebSocket
            before it is dropped.
        log_level: Logging level name.
        host: Bind address of ``tictactoe-serve``.
        port: Bind port of ``tictactoe-serve``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TICTACTOE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    default_variant: Literal["classic", "history", "computer"] = Field(
        default="history", description="Variant used when none is requested"
    )
    max_games: int = Field(default=100, ge=1, description="Maximum number of active games")
    pending_timeout: float = Field(
        default=300.0, gt=0, description="Seconds before an unconnected game is dropped"
    )
    log_level: str = Field(default="INFO", description="Logging level")
    host: str = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=8000, description="Server port")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if not isinstance(v, str):
            return v
        return v.strip().upper()


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
