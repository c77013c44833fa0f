"""
Runtime settings for the subtitle server.

Values are read from environment variables or a ``.env`` file in the
working directory.  Only the transport and the HTTP client use them;
URL resolution and subtitle formatting take no configuration.
"""

from __future__ import annotations

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Transport
    TRANSPORT: Literal["stdio", "streamable-http"] = "stdio"
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    # Comma-separated list of allowed browser origins for the HTTP transport
    CORS_ORIGINS: str = "*"

    # System
    LOG_LEVEL: str = "INFO"
    REQUEST_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
