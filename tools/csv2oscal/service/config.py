"""
Service configuration

Settings are read from the environment (prefix CSV2OSCAL_) or a local .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CSV2OSCAL_",
        env_file=".env",
        extra="ignore"
    )

    app_name: str = "csv2oscal"
    version: str = __version__

    output_dir: Path = Path("dist/oscal")
    default_format: Literal["yaml", "json"] = "yaml"

    max_upload_size: int = 10 * 1024 * 1024  # 10MB


@lru_cache()
def get_settings() -> Settings:
    """Create the Settings instance once and reuse it"""
    return Settings()
