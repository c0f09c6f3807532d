"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY, Firebase credentials
when the Firestore backend is selected) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required_and_backend (secret_key, and Firebase credentials
    when database_backend is 'firestore').
    """

    # App
    app_name: str = "task-dashboard"
    app_version: str = "1.0.0"
    debug: bool = False
    # Language of notification texts and auth error messages: "en" or "vi"
    locale: str = "vi"

    # Backing store: "firestore" (Firebase REST) or "memory" (dev/tests)
    database_backend: str = "firestore"

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    max_upload_size: int = 20 * 1024 * 1024  # 20MB

    # Rate limits (SlowAPI limit strings, per client address)
    sign_in_rate_limit: str = "10/minute"
    write_rate_limit: str = "120/minute"
    attachment_rate_limit: str = "30/minute"

    # Firebase: use key (env) or path (file). For Vercel, use key.
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    # Web API key for Identity Toolkit (email/password sign-in)
    firebase_web_api_key: SecretStr | None = None
    firebase_storage_bucket: str | None = None
    # Polling period for Firestore-backed subscriptions
    firestore_poll_interval_seconds: float = 5.0

    # Reminder sweep
    reminder_enabled: bool = True
    reminder_interval_seconds: int = 60
    reminder_window_minutes: int = 30
    # Mark past-due, unfinished tasks as Overdue during each sweep
    auto_overdue_enabled: bool = False

    # Pagination
    default_page_size: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required_and_backend(self) -> "Settings":
        """Validate required env and backing store selection.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no credentials; data is lost on restart.
        """
        if self.database_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When database_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'firestore' or 'memory', got: {self.database_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.locale not in ("en", "vi"):
            raise ValueError(f"locale must be 'en' or 'vi', got: {self.locale!r}")
        if self.reminder_interval_seconds <= 0:
            raise ValueError("REMINDER_INTERVAL_SECONDS must be positive.")
        if self.reminder_window_minutes <= 0:
            raise ValueError("REMINDER_WINDOW_MINUTES must be positive.")
        return self

    @property
    def cors_origins(self) -> list[str]:
        """Return allowed_origins split into a list (empty entries dropped)."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
