"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "MaintLog AI"
    app_version: str = "1.0.0"
    debug: bool = True

    # Security (tokens are issued elsewhere, we only verify them)
    secret_key: str = "your-secret-key-change-this-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # 1 day

    # Storage
    storage_type: str = "local"
    local_storage_path: str = "./data"

    # LLM Provider settings
    llm_provider: str = "anthropic"  # "anthropic" or "openai"
    llm_api_key: Optional[str] = None
    llm_model: Optional[str] = None  # uses provider default if not set
    llm_base_url: Optional[str] = None  # uses provider default if not set
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.2
    llm_timeout: float = 120.0

    # Chat
    default_session_title: str = "New chat"
    greeting_message: str = (
        "Hello. Let's create a maintenance record for your equipment. "
        "Please tell me about the problem that occurred. "
        "I will ask about the symptom, the cause and the solution and organize them for you."
    )

    # File uploads
    upload_url_expire_minutes: int = 15
    upload_max_bytes: int = 20 * 1024 * 1024  # 20 MB
    allowed_upload_types: list[str] = ["application/pdf"]

    # Records
    records_default_limit: int = 100

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/maintlog.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all API requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
