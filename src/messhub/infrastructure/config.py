"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass constructed once at process start (from_env) and passed
to the ServiceFactory. Nothing below the composition root reads the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the meal-ordering backend.

    No module-level globals: construct via from_env() or pass explicitly
    in tests.
    """
    # "development", "production" or "test"
    environment: str = "development"

    # Database
    db_path: str = "messhub.db"

    # JWT
    jwt_secret: str = "change-me-in-production"
    jwt_expiry_days: int = 30
    jwt_algorithm: str = "HS256"
    cookie_name: str = "token"

    # Orders. trust_client_prices keeps the per-item price sent by the
    # client; False re-prices every line from the catalog at checkout.
    trust_client_prices: bool = True
    # False lets any status replace any other.
    enforce_status_transitions: bool = True

    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def jwt_expiry_seconds(self) -> int:
        return self.jwt_expiry_days * 24 * 60 * 60

    @classmethod
    def from_env(cls) -> Settings:
        """Build Settings from environment variables (and a .env file if present)."""
        from dotenv import load_dotenv
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            environment=os.getenv("APP_ENV", "development"),
            db_path=os.getenv("DB_PATH", "messhub.db"),
            jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
            jwt_expiry_days=int(os.getenv("JWT_EXPIRY_DAYS", "30")),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            cookie_name=os.getenv("AUTH_COOKIE_NAME", "token"),
            trust_client_prices=_env_flag("TRUST_CLIENT_PRICES", True),
            enforce_status_transitions=_env_flag("ENFORCE_STATUS_TRANSITIONS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
