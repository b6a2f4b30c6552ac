"""
Configuration settings for Versus
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

from .secure_config import load_secret_files


class Settings(BaseSettings):
    """Versus configuration settings"""

    # Server Configuration
    server_host: str = "0.0.0.0"
    server_port: int = 8787
    log_level: str = "INFO"

    # Gemini credentials and model
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Generation parameters
    temperature: float = 0.2
    max_output_tokens: int = 800
    response_mime_type: str = "application/json"
    upstream_timeout: float = 60.0

    # Comparison behaviour
    randomize_order: bool = True
    tie_threshold: float = 3.0
    default_retry_after: int = 5  # seconds, used when upstream gives no hint

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )


# Local secret files feed the environment before the global instance is built
load_secret_files()

# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings"""
    return settings
