"""
Application configuration
"""

import os
from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./legal_guide.db"  # Will be overridden by env var

    # Authentication Configuration (tokens are issued by the identity provider)
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    jwt_audience: Optional[str] = None  # e.g. "authenticated"

    # AI Gateway Configuration (OpenAI-compatible chat completions)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_gateway_api_key: Optional[str] = None
    ai_model: str = "google/gemini-3-flash-preview"

    # Dify (RAG chat backend) Configuration
    dify_api_url: str = "https://api.dify.ai/v1"
    dify_api_key: Optional[str] = None
    dify_timeout_seconds: int = 60

    # OCR Configuration
    ocr_languages: str = "eng+nep"
    ocr_max_pdf_pages: int = 5  # Pages beyond this are not rasterized
    ocr_render_scale: float = 2.0

    # Upload
    max_upload_mb: int = 20
    storage_path: str = "./uploads"

    # Chat Configuration
    chat_history_limit: int = 10  # Messages of context sent with each message
    chat_title_max_chars: int = 50

    # Logging Configuration
    log_level: str = "INFO"

    # Rate Limiting Configuration (AI function routes only)
    rate_limit_enabled: bool = True
    rate_limit_qps: int = 20  # Requests per minute per IP

    debug: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()

# Convert storage_path to absolute path to avoid issues with relative paths
# when working directory changes
if not os.path.isabs(settings.storage_path):
    settings.storage_path = os.path.abspath(settings.storage_path)
