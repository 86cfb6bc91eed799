"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    aws_region: str
    aws_access_key_id: str
    aws_secret_access_key: str
    s3_bucket_name: str
    openai_api_key: str
    openai_model: str = "gpt-4o"
    supabase_url: str
    supabase_service_key: str
    email_address: str
    email_password: str
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    host: str = "0.0.0.0"
    port: int = 9000
    max_upload_bytes: int = 50 * 1024 * 1024
    cors_allow_origins: str = "*"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_cors_origins(raw: str | None) -> list[str]:
    """Parse allowed CORS origins from env."""
    if raw is None:
        return ["*"]
    cleaned = raw.strip()
    if cleaned in {"", "*"}:
        return ["*"]
    origins: list[str] = []
    for chunk in cleaned.split(","):
        value = chunk.strip()
        if value:
            origins.append(value)
    return origins or ["*"]
