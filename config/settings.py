"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = "change-me-jwt-secret-key"       # HMAC secret for auth tokens
    jwt_algorithm: str = "HS256"
    jwt_expiry_seconds: int = 86400                     # 24 hours
    bcrypt_rounds: int = 12

    # ── Database ─────────────────────────────────────────────────────────
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "scholfi"
    accounts_collection: str = "users"
    request_timeout_ms: int = 5000      # bound on every store call
    request_deadline_ms: int = 10000    # backstop for a whole signup/signin

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 5000
    host: str = "0.0.0.0"
    debug: bool = False
    allowed_origins: List[str] = [
        "https://schoolfi.vercel.app",
        "http://localhost:3000",
    ]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000.0

    @property
    def request_deadline_seconds(self) -> float:
        return self.request_deadline_ms / 1000.0


config = Settings()
