"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Persistence: "memory", "file" or "supabase"
    PERSISTENCE_BACKEND: str = "memory"
    SNAPSHOT_DIR: str = "data"

    # Supabase (only read when PERSISTENCE_BACKEND == "supabase")
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_SNAPSHOT_TABLE: str = "snapshots"

    # Scheduler
    SNAPSHOT_INTERVAL_SECONDS: int = 60

    # Bootstrap super-admin, seeded when the user table is empty
    BOOTSTRAP_ADMIN_USERNAME: str = "admin"
    BOOTSTRAP_ADMIN_SECRET: str = "admin123"
    BOOTSTRAP_ADMIN_REGISTRATION_ID: str = "ADMIN001"

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins(self) -> list[str]:
        """``ALLOWED_ORIGINS`` split on commas; ``*`` allows any origin."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]


settings = Settings()
