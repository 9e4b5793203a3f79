# core/settings/base.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class OrdersBaseSettings(BaseSettings):
    """Common loading rules: environment first, then an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
