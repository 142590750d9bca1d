from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MOLD_", case_sensitive=False)

    template_suffix: str = ".tmpl"
    templates_dir: Path = Path("templates")
    output_dir_mode: int = 0o750


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
