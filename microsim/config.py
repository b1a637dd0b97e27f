"""
Configuration — process-level settings and the mutable runtime credential.

Settings are read from the environment (and a local .env file) once at
startup. RuntimeSettings holds the API key and model chosen at runtime; it
lives only in process memory and is never written to the state store.
"""

import os
import threading
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_MODEL = "google/gemini-2.5-flash"


class Settings(BaseModel):
    """Startup configuration for the simulation service."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    db_path: str = "database.db"
    base_url: str = "https://openrouter.ai/api/v1"
    request_timeout_seconds: float = Field(gt=0, default=60.0)
    referer: str = "http://localhost:3000"
    title: str = "MicroSim Family"
    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from environment variables, loading .env first."""
        if dotenv:
            load_dotenv()

        values = {
            "api_key": os.getenv("OPENROUTER_API_KEY"),
            "model": os.getenv("MICROSIM_MODEL"),
            "db_path": os.getenv("MICROSIM_DB_PATH"),
            "base_url": os.getenv("OPENROUTER_BASE_URL"),
            "request_timeout_seconds": os.getenv("MICROSIM_REQUEST_TIMEOUT"),
            "referer": os.getenv("MICROSIM_REFERER"),
            "title": os.getenv("MICROSIM_TITLE"),
            "host": os.getenv("MICROSIM_HOST"),
            "port": os.getenv("MICROSIM_PORT"),
            "log_level": os.getenv("MICROSIM_LOG_LEVEL"),
        }
        origins = os.getenv("MICROSIM_CORS_ORIGINS")
        if origins:
            values["cors_origins"] = [o.strip() for o in origins.split(",") if o.strip()]

        return cls(**{k: v for k, v in values.items() if v is not None})


class RuntimeSettings:
    """
    API key and model selected at runtime.
    Cleared on process restart; seeded from Settings.
    """

    def __init__(self, api_key: str = "", model: str = DEFAULT_MODEL):
        self._lock = threading.Lock()
        self._api_key = api_key
        self._model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "RuntimeSettings":
        return cls(api_key=settings.api_key, model=settings.model)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def model(self) -> str:
        return self._model

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def update(self, api_key: Optional[str] = None, model: Optional[str] = None) -> None:
        """Replace whichever values are given; None leaves a value untouched."""
        with self._lock:
            if api_key is not None:
                self._api_key = api_key
            if model is not None:
                self._model = model
