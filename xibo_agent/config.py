"""Configuration settings for the Xibo agent toolset."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    service_name: str = "xibo-agent"
    service_version: str = "1.0.0"
    env: str = "local"

    # Xibo CMS connection
    cms_url: str = Field(default="", description="Base URL of the Xibo CMS")
    xibo_client_id: str = Field(default="", description="OAuth2 client id")
    xibo_client_secret: str = Field(default="", description="OAuth2 client secret")
    xibo_request_timeout: float = 30.0  # seconds
    token_expiry_margin: int = 30  # seconds

    # Generated media
    generated_dir: Path = Path("persistent_data") / "generated"
    image_base_url: str = "http://localhost:4111/ext-api/getImage"

    @property
    def image_history_file(self) -> Path:
        return self.generated_dir / "imageHistory.json"

    # Observability
    log_level: str = "INFO"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8080

    @field_validator("cms_url", "image_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
