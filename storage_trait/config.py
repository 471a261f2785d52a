"""
Configuration module using Pydantic Settings.
Handles backend connection settings and runtime behaviour.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Package settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # App settings
    app_name: str = Field(default="storage-trait", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode, enables developer assertions")
    environment: str = Field(default="production", description="Environment name")

    # Cloud Firestore
    firestore_project_id: Optional[str] = Field(default=None, description="Firestore project ID")
    firestore_database: str = Field(default="(default)", description="Firestore database name")
    use_firestore_emulator: bool = Field(default=False, description="Use Firestore emulator")
    firestore_emulator_host: str = Field(default="localhost:8081", description="Firestore emulator host")
    google_credentials_path: Optional[str] = Field(default=None, description="Path to Google credentials JSON file")

    # Firebase Realtime Database and Storage
    firebase_database_url: Optional[str] = Field(
        default=None,
        description="Realtime Database URL, e.g. https://<project>.firebaseio.com"
    )
    firebase_storage_bucket: Optional[str] = Field(
        default=None,
        description="Storage bucket for record assets, e.g. <project>.appspot.com"
    )
    asset_extension: str = Field(default=".png", description="Extension appended to asset identifiers")

    # Work queues
    background_workers: int = Field(default=1, ge=1, le=32, description="Background queue worker count")

    # Monitoring and logging
    log_level: str = Field(default="INFO", description="Logging level")

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "testing", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Invalid environment. Must be one of: {valid_envs}")
        return v.lower()

    @validator("asset_extension")
    def validate_asset_extension(cls, v):
        """Ensure the asset extension starts with a dot."""
        v = v.strip()
        if not v:
            raise ValueError("Asset extension must not be empty")
        return v if v.startswith(".") else f".{v}"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def assertions_enabled(self) -> bool:
        """Developer assertions fire on critical log events outside production."""
        return self.debug and not self.is_production


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance. Useful for dependency injection."""
    return settings
