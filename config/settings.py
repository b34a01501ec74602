from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Keys
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # LLM Configuration
    llm_provider: str = "anthropic"  # "anthropic" or "openai"
    text_model: Optional[str] = None  # provider default when unset
    vision_model: Optional[str] = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2000

    # Storage Configuration
    data_directory: str = "storage/data"
    storage_quota_bytes: int = 5 * 1024 * 1024  # browser local storage sized

    # Retry Configuration (rate-limit backoff)
    retry_max_attempts: int = 3
    retry_initial_delay: float = 3.0  # seconds, doubled after each attempt

    # Server Configuration
    port: int = 3000
    debug: bool = False  # tracebacks in error responses, development only
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False  # Allow OPENAI_API_KEY or openai_api_key


# Create singleton instance
settings = Settings()
