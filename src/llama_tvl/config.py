"""Configuration management for llama-tvl."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="LLAMA_TVL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # DeFi Llama API
    base_url: str = "https://api.llama.fi"
    timeout: float = 30.0

    # Application
    log_level: str = "INFO"


settings = Settings()
