from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

from ..core.visibility import VisibilityMode

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from ``TOPO_``-prefixed environment variables."""

    # Terrain Configuration
    terrain_width: float = Field(default=10.0, gt=0, description="Terrain extent along x")
    terrain_height: float = Field(default=10.0, gt=0, description="Terrain extent along y")
    segments_x: int = Field(default=100, ge=1, description="Grid cells along x")
    segments_y: int = Field(default=100, ge=1, description="Grid cells along y")
    noise_scale: float = Field(default=0.5, gt=0, description="Base noise frequency")

    # Viewport Configuration
    viewport_width: int = Field(default=1920, gt=0, description="Export canvas width in pixels")
    viewport_height: int = Field(default=1080, gt=0, description="Export canvas height in pixels")

    # Camera Configuration
    camera_fov: float = Field(default=75.0, gt=0, lt=180, description="Vertical field of view in degrees")
    camera_near: float = Field(default=0.1, gt=0, description="Near clip distance")
    camera_far: float = Field(default=1000.0, gt=0, description="Far clip distance")
    camera_x: float = Field(default=0.0, description="Camera position x")
    camera_y: float = Field(default=2.0, description="Camera position y")
    camera_z: float = Field(default=5.0, description="Camera position z")

    # Export Configuration
    stroke: str = Field(default="black", description="Outline stroke colour")
    stroke_width: float = Field(default=0.5, gt=0, description="Outline stroke width")
    visibility_mode: VisibilityMode = Field(default=VisibilityMode.DEPTH, description="Visibility test: depth or strict")
    skip_degenerate: bool = Field(default=False, description="Drop zero-area triangles from export")
    output_file: str = Field(default="topographical-map.svg", description="Default SVG output path")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., console, json)")

    class Config:
        env_prefix = "TOPO_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
