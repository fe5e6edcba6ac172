"""Configuration settings for the face authentication core."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    These settings are loaded from environment variables with the following precedence:
    1. Environment variables (prefixed with ``FACEAUTH_``)
    2. .env file
    3. Default values

    Only the service container reads these; the core services receive their
    parameters through constructor arguments.

    Attributes:
        STORE_BACKEND: Identity store backend, ``json`` or ``memory``
        STORE_PATH: Location of the JSON identity store
        DESCRIPTOR_LENGTH: Fixed length of descriptors produced by the upstream model
        MATCH_THRESHOLD: Maximum Euclidean distance for an accepted match (strict)
    """
    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="FACEAUTH_",
    )

    # Core Settings
    PROJECT_NAME: str = "Face Auth"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Identity store settings
    STORE_BACKEND: str = "json"
    STORE_PATH: str = "data/face-auth-users.json"

    # Matching settings
    DESCRIPTOR_LENGTH: int = Field(128, gt=0)
    MATCH_THRESHOLD: float = Field(0.6, gt=0)

    LOG_LEVEL: str = "INFO"


settings = Settings()
