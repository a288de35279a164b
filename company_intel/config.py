"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# Ensure directories exist
DATA_DIR.mkdir(exist_ok=True)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Companies House
    REGISTRY_BASE_URL: str = os.getenv(
        "REGISTRY_BASE_URL", "https://find-and-update.company-information.service.gov.uk"
    ).rstrip("/")

    # LLM (Anthropic)
    ANTHROPIC_API_KEY: str | None = os.getenv("ANTHROPIC_API_KEY")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "claude-3-5-sonnet-20241022")
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "3000"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.3"))
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "60"))
    LLM_MAX_INPUT_CHARS: int = int(os.getenv("LLM_MAX_INPUT_CHARS", "120000"))
    SUMMARY_MAX_TOKENS: int = int(os.getenv("SUMMARY_MAX_TOKENS", "4000"))
    SUMMARY_TEMPERATURE: float = float(os.getenv("SUMMARY_TEMPERATURE", "0.2"))

    # Browser
    HEADLESS: bool = _env_bool("HEADLESS", "true")
    NAV_TIMEOUT: int = int(os.getenv("NAV_TIMEOUT", "45"))
    MIN_SETTLE_MS: int = int(os.getenv("MIN_SETTLE_MS", "1500"))
    MAX_SETTLE_MS: int = int(os.getenv("MAX_SETTLE_MS", "8000"))

    # Scraper
    MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
    RETRY_DELAY: float = float(os.getenv("RETRY_DELAY", "2.0"))
    DEFAULT_MAX_PAGES: int = int(os.getenv("DEFAULT_MAX_PAGES", "10"))
    DEFAULT_MAX_PEOPLE_PAGES: int = int(os.getenv("DEFAULT_MAX_PEOPLE_PAGES", "5"))
    MAX_PAGES_LIMIT: int = int(os.getenv("MAX_PAGES_LIMIT", "50"))
    HYBRID_MAX_ROWS: int = int(os.getenv("HYBRID_MAX_ROWS", "50"))

    # Quality
    QUALITY_MIN_SCORE: int = int(os.getenv("QUALITY_MIN_SCORE", "40"))

    # Supabase
    SUPABASE_URL: str | None = os.getenv("SUPABASE_URL")
    SUPABASE_SERVICE_ROLE: str | None = os.getenv("SUPABASE_SERVICE_ROLE")
    SUPABASE_TABLE: str = os.getenv("SUPABASE_TABLE", "company_reports")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # API Security
    API_KEY: str | None = os.getenv("API_KEY")

    @classmethod
    def validate(cls, require_llm: bool = True, require_supabase: bool = False) -> None:
        """Validate required configuration."""
        errors = []
        if require_llm:
            if not cls.ANTHROPIC_API_KEY:
                errors.append("ANTHROPIC_API_KEY is required")
            elif not cls.ANTHROPIC_API_KEY.startswith("sk-ant-"):
                errors.append("ANTHROPIC_API_KEY appears to be invalid (should start with sk-ant-)")
        if require_supabase:
            if not cls.SUPABASE_URL:
                errors.append("SUPABASE_URL is required")
            if not cls.SUPABASE_SERVICE_ROLE:
                errors.append("SUPABASE_SERVICE_ROLE is required")
        if not cls.REGISTRY_BASE_URL.startswith(("http://", "https://")):
            errors.append("REGISTRY_BASE_URL must be an absolute http(s) URL")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @classmethod
    def supabase_enabled(cls) -> bool:
        return bool(cls.SUPABASE_URL and cls.SUPABASE_SERVICE_ROLE)


config = Config()
