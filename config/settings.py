import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ProviderCredentials:
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None


class Config:
    # Model details
    ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-5-sonnet-20241022")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
    LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "4000"))
    LLM_REQUEST_TIMEOUT = float(os.getenv("LLM_REQUEST_TIMEOUT", "120"))

    # Ceiling applied by the HTTP layer, the orchestrator has none
    ANALYSIS_TIMEOUT_SECONDS = float(os.getenv("ANALYSIS_TIMEOUT_SECONDS", "600"))

    # Rate-limit retries inside a provider attempt, off unless configured
    LLM_TRANSIENT_RETRIES = int(os.getenv("LLM_TRANSIENT_RETRIES", "0"))
    LLM_RETRY_WAIT_SECONDS = float(os.getenv("LLM_RETRY_WAIT_SECONDS", "5"))

    EXPORT_DIR = os.getenv("EXPORT_DIR", "./exports")

    FLASK_DEBUG = os.getenv("FLASK_DEBUG", "false").lower() == "true"
    FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
    FLASK_PORT = int(os.getenv("FLASK_PORT", "8000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS Configuration
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    CORS_METHODS = os.getenv("CORS_METHODS", "GET,POST,OPTIONS").split(",")

    @staticmethod
    def provider_credentials() -> ProviderCredentials:
        """Read the vendor keys as they are right now, so rotated keys apply to the next request."""
        return ProviderCredentials(
            anthropic_api_key=(os.getenv("ANTHROPIC_API_KEY") or "").strip() or None,
            openai_api_key=(os.getenv("OPENAI_API_KEY") or "").strip() or None,
        )
