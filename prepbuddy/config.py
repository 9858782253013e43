"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env at the project root (parent of prepbuddy/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./prepbuddy.db"

    # Primary provider: OPENAI_API_KEY in .env
    openai_api_key: str = "your-openai-api-key"
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    openai_model: str = "gpt-3.5-turbo"
    # Secondary provider (free tier): GROQ_API_KEY in .env
    groq_api_key: str = "your-groq-api-key"
    groq_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    groq_model: str = "mixtral-8x7b-32768"
    ai_timeout_seconds: float = 60.0
    fallback_word_delay_seconds: float = 0.05

    # Email via SMTP (Gmail app password or any SMTP relay)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    notify_from: str = ""
    daily_reminder_hour: int = 8

    # Comma-separated extra origins for the production frontend
    cors_origins: str = ""

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("openai_api_key", "groq_api_key", "smtp_user", "smtp_password", mode="after")
    @classmethod
    def strip_secret(cls, v: str) -> str:
        return (v or "").strip()


settings = Settings()
