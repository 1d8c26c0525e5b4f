"""Configuration management with environment variable support."""

import os
import secrets
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: _env_int("RATE_LIMIT_RPM", 60)
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )
    token_max_age: int = field(
        default_factory=lambda: _env_int("TOKEN_MAX_AGE", 86400)
    )


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: _env_int("REDIS_PORT", 6379))
    db: int = field(default_factory=lambda: _env_int("REDIS_DB", 0))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class TableConfig:
    """
    Betting policy for the table.

    Amounts are integer minor units. The reserve floor is not configured
    separately: it always equals the winning payout.
    """

    required_bet: int = field(default_factory=lambda: _env_int("REQUIRED_BET", 100))
    winning_payout: int = field(default_factory=lambda: _env_int("WINNING_PAYOUT", 200))
    min_dealer_stand: int = field(default_factory=lambda: _env_int("MIN_DEALER_STAND", 17))
    dealer_stand_range: int = field(default_factory=lambda: _env_int("DEALER_STAND_RANGE", 5))
    house_seed_funds: int = field(default_factory=lambda: _env_int("HOUSE_SEED_FUNDS", 0))


@dataclass(frozen=True)
class HouseConfig:
    """Ownership of the house bankroll."""

    owner_id: str = field(default_factory=lambda: os.getenv("OWNER_ID", "house"))


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 8000))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    archive_ttl: int = field(default_factory=lambda: _env_int("ARCHIVE_TTL", 7 * 86400))

    redis: RedisConfig = field(default_factory=RedisConfig)
    table: TableConfig = field(default_factory=TableConfig)
    house: HouseConfig = field(default_factory=HouseConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)


# Global configuration instance
config = AppConfig()
