"""Runtime configuration, read from ``OPENAPI_PROBE_*`` environment variables."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from openapi_probe.generator.request import USER_AGENT
from openapi_probe.logging import LOG_LEVELS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OPENAPI_PROBE_", case_sensitive=False)

    base_url: str = Field(default="")  # overrides the document's server when set
    request_timeout: float = Field(default=30.0)
    verify_ssl: bool = Field(default=True)
    user_agent: str = Field(default=USER_AGENT)
    validate_spec: bool = Field(default=True)
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
