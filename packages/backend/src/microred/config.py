"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with MICRORED_ prefix.
No config files — just env vars (12-factor app style).

Learn: Firestore credentials follow Google's Application Default
Credentials chain unless MICRORED_CREDENTIALS_FILE points at a
service-account JSON file.
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via MICRORED_* env vars."""

    # Document store
    store_backend: Literal["firestore", "memory"] = "firestore"
    firestore_project: str | None = None
    firestore_database: str = "(default)"
    credentials_file: str | None = None

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Logging
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    log_format: Literal["json", "console"] = "console"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    model_config = {"env_prefix": "MICRORED_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """The in-memory store loses everything on restart; keep it out of prod."""
        if self.environment != "development" and self.store_backend == "memory":
            raise ValueError(
                "MICRORED_STORE_BACKEND=memory is only allowed when "
                "MICRORED_ENVIRONMENT=development."
            )
        return self


# Singleton, import this everywhere
settings = Settings()
