"""
This file contains code to load environment variables from a .env file
and provide application settings using Pydantic's BaseSettings.
The settings are provided as a dependency to enable easy testing.

Pydantic Docs: https://docs.pydantic.dev/latest/concepts/pydantic_settings <br/>
Fast API Docs: https://fastapi.tiangolo.com/advanced/settings
"""

from functools import lru_cache
from typing import Annotated, Literal

from fastapi import Depends
from pydantic_settings import BaseSettings, SettingsConfigDict

# Application settings class.
# These are loaded from a .env file.
# ----------------------------------------------------------------------------------------------------------------------


class Settings(BaseSettings):
    allowed_hosts: list[str] = ["*"]
    cors_origins: list[str] = ["*"]

    debug: bool = False
    logger_name: Literal["console", "json"] = "console"
    logger_level: str = "info"

    jwt_secret_key: str = "local"

    database_url: str = "sqlite+aiosqlite:///./sqlite.db"

    # Seed documents default to the files packaged with the preferences feature.
    preferences_bootstrap_on_startup: bool = True
    preference_groups_seed_path: str | None = None
    preferences_seed_path: str | None = None

    model_config = SettingsConfigDict(env_file=".env")


# Dependency that provides application settings.
# The settings are cached to avoid recreating them on each request.
# ----------------------------------------------------------------------------------------------------------------------


@lru_cache
def get_settings():
    return Settings()


SettingsDep = Annotated[Settings, Depends(get_settings)]
