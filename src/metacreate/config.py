"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with METACREATE_ prefix

Example:
    METACREATE_STRICT_TRAPS=true
    METACREATE_EXTRA_TRAPS='["eq", "hash"]'
"""

import functools as _functools

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings


class Settings(_pydantic_settings.BaseSettings):
    """
    metacreate configuration settings.

    All settings can be overridden via environment variables with the
    METACREATE_ prefix.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="METACREATE_",
        extra="ignore",
    )

    strict_traps: bool = _pydantic.Field(
        default=False,
        description="Reject specs that name traps metacreate does not recognize.",
    )

    extra_traps: list[str] = _pydantic.Field(
        default_factory=list,
        description="Additional trap names accepted when strict_traps is enabled.",
    )


@_functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached settings and load them again from the environment."""
    get_settings.cache_clear()
    return get_settings()
