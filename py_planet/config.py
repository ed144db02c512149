"""Configuration management."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generation settings pulled from PLANET_* environment variables."""

    # Planet generation
    num_points: int = Field(default=2000, ge=500, le=100000, description="Number of generator points")
    noise_seed: int = Field(default=8675309, ge=0, le=4294967295, description="Seed for the elevation noise")
    point_seed: Optional[str] = Field(default=None, description="Seed for generator point sampling")
    relax_iterations: int = Field(default=1, ge=0, description="Lloyd relaxation iterations")
    hull_tolerance: float = Field(default=1e-6, gt=0, description="Convex hull merge tolerance")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(default="json", description="Logging format")

    model_config = SettingsConfigDict(
        env_prefix="PLANET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
