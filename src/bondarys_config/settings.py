"""Runtime configuration for the Bondarys identity service.

Every option can come from the process environment. Anything not set there
is read from a dotenv file: the one named by ``BONDARYS_ENV_FILE``, else
``config/.env.dev``, else ``config/.env``. Missing values fall back to the
defaults below, which are only fit for local development.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import SecretStr, computed_field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development-only signing keys; refused in the production profile
DEV_JWT_SECRET = "bondarys-dev-secret-key"  # NOQA: S105
DEV_JWT_REFRESH_SECRET = "bondarys-refresh-secret-key"  # NOQA: S105
PLACEHOLDER_SECRETS = frozenset(
    {
        DEV_JWT_SECRET,
        DEV_JWT_REFRESH_SECRET,
        "changeme",
        "secret",
        "your-secret-key",
    },
)

_ROOT_MARKERS = ("config", ".git")
_CONTAINER_ROOT = Path("/app")


def _find_project_root() -> Path:
    """Walk up from this file to the first directory holding a root marker."""
    here = Path(__file__).resolve()
    for candidate in here.parents:
        if candidate == _CONTAINER_ROOT or any(
            (candidate / marker).is_dir() for marker in _ROOT_MARKERS
        ):
            return candidate
    # src/bondarys_config/settings.py -> repository root
    return here.parents[2]


def get_config_dir() -> Path:
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    explicit = os.environ.get("BONDARYS_ENV_FILE")
    candidates: list[Path] = []
    if explicit:
        path = Path(explicit)
        candidates.append(path if path.is_absolute() else _find_project_root() / path)
    config_dir = get_config_dir()
    candidates += [config_dir / ".env.dev", config_dir / ".env"]
    return next((path for path in candidates if path.exists()), None)


class Settings(BaseSettings):
    """Typed view of the service configuration.

    Environment variable names are the upper-cased field names
    (``JWT_SECRET``, ``DATABASE_DSN`` ...). In the ``production``
    environment the JWT signing keys must be set to real, distinct values;
    construction fails otherwise.
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Bondarys"
    environment: Literal["development", "test", "production"] = "development"

    # JWT (JWT_ prefix)
    jwt_secret: SecretStr = SecretStr(DEV_JWT_SECRET)
    jwt_refresh_secret: SecretStr = SecretStr(DEV_JWT_REFRESH_SECRET)
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    # Upper bound of concurrently whitelisted refresh tokens per account
    refresh_token_max_sessions: int = 10

    # SSO providers
    google_client_id: str = ""
    apple_client_id: str = ""
    facebook_graph_url: str = "https://graph.facebook.com"
    sso_http_timeout: float = 10.0

    # Registration
    registration_requires_email_verification: bool = False

    # Database (POSTGRES_ prefix, or a full DSN)
    database_dsn: str = ""
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr = SecretStr("")
    postgres_db: str = "bondarys"

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Ensure cors_origins is stored as comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = ""
    smtp_from_name: str = "Bondarys"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Password reset
    frontend_base_url: str = "http://localhost:3000"
    password_reset_expire_minutes: int = 60

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _refuse_placeholder_secrets(self) -> Settings:
        if self.environment != "production":
            return self

        access = self.jwt_secret.get_secret_value()
        refresh = self.jwt_refresh_secret.get_secret_value()
        for name, value in (("JWT_SECRET", access), ("JWT_REFRESH_SECRET", refresh)):
            if not value or value in PLACEHOLDER_SECRETS:
                msg = f"{name} must be set to a non-default value in production"
                raise ValueError(msg)
        if access == refresh:
            msg = "JWT_SECRET and JWT_REFRESH_SECRET must differ in production"
            raise ValueError(msg)
        return self

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Database URL, either the explicit DSN or built from components."""
        if self.database_dsn:
            return self.database_dsn
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password.get_secret_value()}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
