from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TERRAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Terrain Configuration
    default_size: float = Field(default=100.0, gt=0, description="Terrain side length")
    default_segments: int = Field(default=1024, gt=0, description="Cells per terrain side")
    default_amplitude: float = Field(default=10.0, description="Height displacement scale")
    default_temperature_modifier: float = Field(default=0.5, description="Temperature bias")
    default_humidity_modifier: float = Field(default=-0.3, description="Humidity bias")

    # Height Noise Configuration
    default_scale: float = Field(default=0.01, description="Height noise scale")
    default_octaves: int = Field(default=8, ge=1, description="Height noise octaves")
    default_persistence: float = Field(default=0.4, description="Height noise persistence")
    default_lacunarity: float = Field(default=2.0, description="Height noise lacunarity")

    # Climate Noise Configuration
    climate_resolution: int = Field(default=256, ge=2, description="Climate grid side length")
    climate_scale: float = Field(default=0.01, description="Climate noise scale")
    climate_octaves: int = Field(default=4, ge=1, description="Climate noise octaves")

    # Seeding and Biomes
    seed_range: float = Field(default=10000.0, gt=0, description="Upper bound for drawn seeds")
    biome_table: str = Field(default="default", description="Biome table preset name")


# Instantiate singleton settings object
settings = Settings()
