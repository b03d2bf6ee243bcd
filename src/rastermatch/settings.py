"""Runtime configuration, read from ``RASTERMATCH_*`` environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    backend: Literal["auto", "python", "numpy"] = "auto"

    # reference engine row partitioning
    workers: int = Field(default=1, ge=1)
    row_batch_size: int = Field(default=64, ge=1)

    # below this many pixels "auto" stays on the pure-python engine
    accelerate_min_pixels: int = Field(default=4096, ge=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    model_config = SettingsConfigDict(env_prefix="RASTERMATCH_")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


settings = Settings()
