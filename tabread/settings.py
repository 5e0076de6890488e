"""
Runtime settings, read from TABREAD_* environment variables.
"""

import codecs

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .rules import DEFAULT_ENCODING


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TABREAD_")

    LOG_LEVEL: str = "INFO"
    # code page assumed for delimited text without a byte-order mark
    DEFAULT_ENCODING: str = DEFAULT_ENCODING

    @field_validator("DEFAULT_ENCODING")
    @classmethod
    def known_codec(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown encoding: {v}") from exc
        return v


settings = Settings()
