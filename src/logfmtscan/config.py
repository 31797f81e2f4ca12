"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """logfmtscan configuration — loaded from env vars / .env file."""

    model_config = SettingsConfigDict(env_prefix="LOGFMTSCAN_", env_file=".env", extra="ignore")

    max_line_bytes: int = Field(default=64 * 1024, ge=1, description="Longest accepted record, in bytes")
    encoding: str = Field(default="utf-8", description="Text encoding used to display keys and values")
    decode_errors: str = Field(default="replace", description="Codec error handler for display (strict|replace|ignore)")
    default_output: str = Field(default="table", description="Default decode output (table|stream|json|logfmt)")
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")


settings = Settings()
