"""Application settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables (MAPGEN_*)."""

    model_config = SettingsConfigDict(
        env_prefix="MAPGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(default="*", description="CORS allowed origins")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Map Generation Configuration
    default_map_width: int = Field(default=256, description="Default map width")
    default_map_height: int = Field(default=128, description="Default map height")
    max_map_width: int = Field(default=512, description="Max allowed map width")
    max_map_height: int = Field(default=256, description="Max allowed map height")
    region_target_size: int = Field(default=8, ge=1, description="Provinces per region")
    include_rivers: bool = Field(default=False, description="Export the river layer")

    @property
    def origins(self) -> list:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


settings = Settings()
