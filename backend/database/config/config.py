"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, from the file named by
  the `ENV_FILE_PATH` environment variable (default `.env`), the same file the
  admin panel writes.
- Missing required fields raise a validation error at import time, which
  aborts startup (no server without credentials).
- `extra="ignore"`: unknown env vars are ignored (not an error).
- The object is built once and treated as read-only by request handlers.
  Admin edits go to the `.env` file and only take effect after a restart.

Usage
-----
from backend.database.config.config import settings

# Example
secret = settings.SECRET_KEY
openai_model = settings.OPEN_AI_MODEL

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production (K8s/Secrets Manager/etc.).
"""

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENV_FILE = ".env"
OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or the env file. Provides strongly typed access to environment values.

    The env file is `ENV_FILE_PATH` taken from the process environment, so a
    relocated file must be named there rather than inside `.env` itself.
    """

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DB_DRIVER_NAME: str = Field(..., description="Database driver (e.g., `postgresql+psycopg2`, `sqlite`).")
    DB_DATABASE_NAME: str = Field(..., description="Name of the application’s database (file path for SQLite).")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")

    SECRET_KEY: str = Field(..., description="Secret key for signing session tokens.")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(1440, description="Duration (in minutes) before access tokens expire.")

    API_KEY: str = Field(..., description="OpenAI API key used by the general legislative responder.")
    OPEN_AI_MODEL: str = Field("gpt-4o", description="OpenAI chat model name.")
    INTERNAL_LAWS_API_URL: str = Field(
        OPENAI_CHAT_COMPLETIONS_URL,
        description="Chat-completions compatible endpoint answering from the municipal laws base.",
    )
    INTERNAL_LAWS_API_KEY: Optional[str] = Field(None, description="Bearer key for the laws endpoint (defaults to API_KEY).")
    LAWS_API_TIMEOUT: float = Field(60.0, description="Timeout (seconds) for the laws endpoint request.")

    FRONTEND_URL: str = Field("http://localhost:5173", description="Base URL of the frontend client application.")
    ENV_FILE_PATH: str = Field(DEFAULT_ENV_FILE, description="Writable environment file edited from the admin panel.")
    LOG_LEVEL: str = Field("INFO", description="Root logging level.")

    ADMIN_EMAIL: str = Field("admin@cabedelo.pb.gov.br", description="Email of the bootstrap administrator.")
    ADMIN_PASSWORD: Optional[str] = Field(None, description="Password of the bootstrap administrator.")
    ADMIN_NAME: str = Field("Administrador", description="Display name of the bootstrap administrator.")

    def __init__(self, **values):
        values.setdefault("_env_file", os.environ.get("ENV_FILE_PATH", DEFAULT_ENV_FILE))
        super().__init__(**values)


# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the environment and the .env file"""
