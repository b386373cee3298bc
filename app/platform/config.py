from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Link QR API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # ── HTTP ────────────────────────────────────
    CORS_ORIGINS: List[str] = ["*"]
    MAX_BODY_SIZE: int = 1024 * 1024  # 1 MB

    # ── Domain resolution ───────────────────────
    DNS_TIMEOUT_SECONDS: float = 5.0

    # ── Rate limiting ───────────────────────────
    # requests per minute, keyed by full request path;
    # defaults to GENERATE_RATE_LIMIT on the generate endpoint under API_PREFIX
    RATE_LIMITS: Optional[Dict[str, int]] = None
    GENERATE_RATE_LIMIT: int = 30
    WHITELIST_IPS: List[str] = []
    FORCE_IN_MEMORY_RATE_LIMITER: bool = True
    REDIS_URL: str = "redis://localhost:6379/0"

    # ── Logging ─────────────────────────────────
    LOG_DIR: str = "logs"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @model_validator(mode="after")
    def default_rate_limits(self):
        if self.RATE_LIMITS is None:
            self.RATE_LIMITS = {f"{self.API_PREFIX}/generate": self.GENERATE_RATE_LIMIT}
        return self


settings = Settings()
