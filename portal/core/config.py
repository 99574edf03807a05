import os
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from ..domain.errors import ConfigurationError

STORAGE_BACKENDS = ("json", "sqlite", "memory")
PLACEHOLDER_SECRET = "change-me"


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.app_name = os.getenv("APP_NAME", "Training Portal Admin")
        self.app_version = os.getenv("APP_VERSION", "2.0.0")
        self.app_env = os.getenv("APP_ENV", "development").lower()
        self.debug = self._get_bool("DEBUG", default=False)
        self.log_level = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()
        self.enable_api_logging = self._get_bool("ENABLE_API_LOGGING", default=False)

        self.backend_base_url = self._get("BACKEND_BASE_URL").rstrip("/")
        self.api_timeout = self._get_float("API_TIMEOUT", default=10.0)
        self.api_max_retries = self._get_int("API_MAX_RETRIES", default=3)
        self.api_retry_delay = self._get_float("API_RETRY_DELAY", default=0.5)

        self.auth_token_secret = self._get("AUTH_TOKEN_SECRET")
        self.auth_cookie_name = os.getenv("AUTH_COOKIE_NAME", "auth-token")
        self.token_storage_key = os.getenv("TOKEN_STORAGE_KEY", "admin-token")
        self.session_timeout = self._get_int("SESSION_TIMEOUT", default=60 * 60 * 24)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)

        self.storage_backend = os.getenv("STORAGE_BACKEND", "json").lower()
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}"
            )
        self.data_dir = Path(os.getenv("DATA_DIR", "data")).resolve()

        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        self.admin_default_name = os.getenv("ADMIN_NAME", "Administrator")

        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "")
        self.contact_recipient = os.getenv("CONTACT_RECIPIENT", "noc@neti.com.ph")

        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def validate(self) -> Tuple[List[str], List[str]]:
        """Return ``(errors, warnings)`` for values that parse but look wrong."""
        errors: List[str] = []
        warnings: List[str] = []

        parsed = urlparse(self.backend_base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append("Invalid BACKEND_BASE_URL format. Must be a valid URL.")
        elif self.is_production and parsed.scheme == "http":
            warnings.append("Using HTTP instead of HTTPS in production environment")

        if not self.token_storage_key:
            errors.append("TOKEN_STORAGE_KEY is not configured")
        if self.auth_token_secret == PLACEHOLDER_SECRET:
            warnings.append(
                "AUTH_TOKEN_SECRET is using the placeholder value. Configure a strong secret before deploying."
            )
        if self.app_env == "development" and not self.debug:
            warnings.append("Running in development mode but DEBUG is disabled")
        if self.api_timeout < 1:
            warnings.append("API_TIMEOUT is set to less than 1 second, this may cause issues")
        if self.session_timeout < 60:
            warnings.append("SESSION_TIMEOUT is set to less than 1 minute, this may cause frequent logouts")
        if self.admin_default_email and not self.admin_default_password:
            warnings.append("ADMIN_EMAIL is set without ADMIN_PASSWORD; no default admin will be created")
        return errors, warnings

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise ConfigurationError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError as exc:
            raise ConfigurationError(f"Environment variable {key} must be a number") from exc

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")
