"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific required fields (Firebase credentials,
Cloudinary cloud name, S3 bucket) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_backends checks the values each
    selected store and blob backend needs.
    """

    # App
    app_name: str = "propdesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # Document store: "firestore" (REST API) or "memory" (process-local, dev/tests)
    store_backend: str = "firestore"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    firestore_timeout_seconds: float = 30.0

    # Redis change feed (live snapshots for the Firestore backend)
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    # Used when Redis is disabled or unreachable: subscribers re-query on this interval.
    change_feed_poll_seconds: float = 5.0

    # Blob upload: "cloudinary", "s3" or "local"
    blob_backend: str = "cloudinary"
    cloudinary_cloud_name: str | None = None
    # Must be an unsigned upload preset.
    cloudinary_upload_preset: str = "property_manager_unsigned"
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    s3_public_base_url: str | None = None
    storage_root: str = "/var/propdesk/storage"
    storage_base_url: str = "http://localhost:8000/files"

    # Upload validation
    max_upload_size: int = 20 * 1024 * 1024  # 20MB
    allowed_content_types: str = (
        "image/*,application/pdf,application/msword,"
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document,"
        "application/vnd.ms-excel,"
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    # Identity: opaque user id supplied by the upstream auth layer
    identity_header_name: str = "X-User-ID"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:9002"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def allowed_content_type_list(self) -> list[str]:
        """Comma-separated allowed_content_types as a list (patterns like image/* kept)."""
        return [t.strip() for t in self.allowed_content_types.split(",") if t.strip()]

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate store and blob backend configuration.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Cloudinary: CLOUDINARY_CLOUD_NAME required.
        - S3: S3_BUCKET required.
        """
        if self.store_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When store_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.store_backend != "memory":
            raise ValueError(
                f"store_backend must be 'firestore' or 'memory', got: {self.store_backend!r}"
            )
        if self.blob_backend == "cloudinary":
            if not self.cloudinary_cloud_name:
                raise ValueError(
                    "cloudinary_cloud_name is required when blob_backend is 'cloudinary'. "
                    "Set CLOUDINARY_CLOUD_NAME environment variable or update .env file."
                )
        elif self.blob_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when blob_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.blob_backend != "local":
            raise ValueError(
                f"Invalid blob_backend '{self.blob_backend}'. "
                "Must be one of: 'cloudinary', 's3', 'local'"
            )
        if self.change_feed_poll_seconds <= 0:
            raise ValueError("change_feed_poll_seconds must be positive")
        return self


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
