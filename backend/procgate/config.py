"""Gateway Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Endpoints, credentials and pool limits come from the environment (.env supported)
    - get_settings() is cached: one Settings instance per process
    - Pool and timeout values are validated positive at startup, not at first use

Design Decisions:
    - mysql:// URLs accepted and rewritten for the async driver (hosting providers hand
      out the plain scheme)
    - require_bearer_token defaults to False: requests without a token proceed with a
      null identity until the access policy is decided (ADR: open policy, kept explicit)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ASYNC_MYSQL_SCHEME = "mysql+aiomysql://"


class Settings(BaseSettings):
    """Gateway settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Registry and procedure database (one pool for both)
    database_url: str = "mysql+aiomysql://gateway:gateway@db:3306/gateway"
    database_pool_size: int = Field(10, ge=1)
    database_max_overflow: int = Field(0, ge=0)
    database_pool_timeout: float = Field(30.0, gt=0)

    # Upstream identity provider
    upstream_login_url: str = "http://localhost:8080/auth/login"
    upstream_verify_url: str = "http://localhost:8080/auth/verify"
    upstream_login_type: str | None = None
    upstream_timeout_seconds: float = Field(10.0, gt=0)
    upstream_origin: str | None = "http://localhost:5173"
    upstream_user_agent: str | None = "procgate/1.0"

    # Token sessions
    token_session_ttl_seconds: int = Field(43_200, gt=0)
    require_bearer_token: bool = False

    cors_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_mysql_driver(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("mysql://"):
            return _ASYNC_MYSQL_SCHEME + v[len("mysql://"):]
        return v

    def pool_options(self) -> dict:
        """Keyword arguments for DatabaseSessionManager."""
        return {
            "pool_size": self.database_pool_size,
            "max_overflow": self.database_max_overflow,
            "pool_timeout": self.database_pool_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
