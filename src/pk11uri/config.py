from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PK11URI_", env_file=".env", extra="ignore")

    # Grammar, enumeration, affinity, vendor-name and duplicate checks
    validation: bool = Field(default=True)

    # SHOULD / SHOULD NOT advisories; off under `python -O`
    advisories: bool = Field(default=__debug__)

    # Logging (CLI)
    log_level: str = "WARNING"
    log_json: bool = False


settings = Settings()
