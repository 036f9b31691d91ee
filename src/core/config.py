"""
Application configuration.

Settings are read once (from environment variables) and then passed around explicitly,
so no layer has to reach for a process-wide store.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel

DEFAULT_DATABASE_URL = "sqlite:///./xiangqi.db"
DEFAULT_ORACLE_URL = "https://api.openai.com/v1"


class OracleSettings(BaseModel):
    """Credentials + model choice for the chat-completions endpoint."""

    base_url: str = DEFAULT_ORACLE_URL
    api_key: str = ""
    model: str = ""
    temperature: float = 0.1
    timeout: float = 30.0

    def is_complete(self) -> bool:
        return bool(self.base_url and self.api_key and self.model)


class Settings(BaseModel):
    database_url: str = DEFAULT_DATABASE_URL
    oracle: OracleSettings = OracleSettings()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables. Unset variables fall back to the defaults."""
    env = os.environ if environ is None else environ
    oracle = OracleSettings(
        base_url=env.get("ORACLE_BASE_URL", DEFAULT_ORACLE_URL),
        api_key=env.get("ORACLE_API_KEY", ""),
        model=env.get("ORACLE_MODEL", ""),
        temperature=float(env.get("ORACLE_TEMPERATURE", "0.1")),
        timeout=float(env.get("ORACLE_TIMEOUT", "30")),
    )
    return Settings(
        database_url=env.get("XIANGQI_DATABASE_URL", DEFAULT_DATABASE_URL),
        oracle=oracle,
    )
