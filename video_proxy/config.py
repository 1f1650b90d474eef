# config.py
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
ENV_PREFIX = "VIDEO_PROXY_"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    connect_timeout: float = Field(default=5.0, gt=0)
    read_timeout: float = Field(default=30.0, gt=0)   # idle gap between reads, not total
    chunk_size: int = Field(default=64 * 1024, gt=0)
    user_agent: str = BROWSER_USER_AGENT
    cache_control: str = "public, max-age=3600"
    public_base_url: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None


def _env(name: str) -> Optional[str]:
    val = os.getenv(ENV_PREFIX + name)
    if val is None or not val.strip():
        return None
    return val.strip()


def load_settings(**overrides) -> Settings:
    """Build settings from the environment (and a .env file if present)."""
    # Look next to where the service runs, not next to this module
    load_dotenv(find_dotenv(usecwd=True))
    values = {}
    for field in Settings.model_fields:
        val = _env(field.upper())
        if val is not None:
            values[field] = val
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
