"""Runtime settings using Pydantic settings.

Settings are loaded from:
1. Environment variables (KVCOLLECTION_* prefix)
2. .env file in current directory
3. Default values
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from kvcollection.encoding import JsonOptions
from kvcollection.iteration import CachingFlags


def _all_bits(flag_type: type[JsonOptions] | type[CachingFlags]) -> int:
    mask = 0
    for member in flag_type:
        mask |= member.value
    return mask


class CollectionSettings(BaseSettings):
    """Defaults applied when callers do not pass explicit flags.

    Environment variables are prefixed with KVCOLLECTION_.
    """

    model_config = SettingsConfigDict(
        env_prefix="KVCOLLECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Serialization
    json_options: int = int(JsonOptions.NONE)
    caching_flags: int = int(CachingFlags.CALL_TOSTRING)

    log_level: str = "INFO"

    @field_validator("json_options")
    @classmethod
    def validate_json_options(cls, v: int) -> int:
        """Reject bits that are not JsonOptions flags."""
        unknown = v & ~_all_bits(JsonOptions)
        if v < 0 or unknown:
            msg = f"Invalid json_options bitmask: {v}"
            raise ValueError(msg)
        return v

    @field_validator("caching_flags")
    @classmethod
    def validate_caching_flags(cls, v: int) -> int:
        """Reject bits that are not CachingFlags flags."""
        unknown = v & ~_all_bits(CachingFlags)
        if v < 0 or unknown:
            msg = f"Invalid caching_flags bitmask: {v}"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            msg = f"Invalid log level: {v}. Must be one of {valid_levels}"
            raise ValueError(msg)
        return upper


@lru_cache
def get_settings() -> CollectionSettings:
    """Get the global settings.

    Settings are cached after first load.
    """
    return CollectionSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (for testing)."""
    get_settings.cache_clear()
