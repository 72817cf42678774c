"""Central application configuration (Pydantic Settings).

- Loads variables from the .env at the repository root.
- Groups settings by area: App, CORS, Mongo, Auth/JWT, OAuth, Storage.
"""
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the .env at the repository root (independent of CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Configuration values with sensible defaults.

    Every value can be overridden through environment variables (.env).
    """
    # App
    app_name: str = "Notiq API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # CORS (Vite/React on localhost)
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False

    # Where the browser client lives (OAuth redirects land here)
    client_url: str = "http://localhost:5173"
    # Public URL of this server, used to build OAuth callback URLs
    public_base_url: str = "http://localhost:8000"

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "notiq_db"
    mongo_tls: bool = False
    # TLS relax options (dev only)
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # Auth / JWT
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30
    oauth_state_expire_minutes: int = 10
    bcrypt_rounds: int = 10

    # Federated login
    google_client_id: str | None = None
    google_client_secret: str | None = None
    github_client_id: str | None = None
    github_client_secret: str | None = None

    # Object storage (S3 compatible: AWS S3, Cloudflare R2, MinIO)
    storage_bucket: str | None = Field(
        None, validation_alias=AliasChoices("STORAGE_BUCKET", "R2_BUCKET")
    )
    storage_endpoint: str | None = Field(
        None, validation_alias=AliasChoices("STORAGE_ENDPOINT", "R2_ENDPOINT")
    )
    storage_region: str = Field(
        "auto", validation_alias=AliasChoices("STORAGE_REGION", "R2_REGION")
    )
    storage_access_key: str | None = Field(
        None, validation_alias=AliasChoices("STORAGE_ACCESS_KEY", "R2_ACCESS_KEY", "R2_ACCESS_KEY_ID")
    )
    storage_secret_key: str | None = Field(
        None, validation_alias=AliasChoices("STORAGE_SECRET_KEY", "R2_SECRET_KEY", "R2_SECRET_ACCESS_KEY")
    )
    storage_public_base_url: str | None = Field(
        None, validation_alias=AliasChoices("STORAGE_PUBLIC_BASE_URL", "R2_PUBLIC_BASE_URL")
    )
    storage_prefix: str = "notiq-notes/"
    max_upload_mb: int = 10

    # --- Derived helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Return `api_prefix` in a consistent shape.

        - Always starts with '/'
        - No trailing '/' (except when it is just '/')
        - Empty string when unset
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def github_configured(self) -> bool:
        return bool(self.github_client_id and self.github_client_secret)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    def oauth_callback_url(self, provider: str) -> str:
        """Absolute callback URL registered with the identity provider."""
        base = self.public_base_url.rstrip("/")
        return f"{base}{self.api_prefix_normalized}/auth/{provider}/callback"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
