"""
Option groups for terrain synthesis, camera placement and vector export.

These are validated pydantic models; ``from_settings`` builds them from the
environment-backed application settings.
"""

from typing import Tuple

from pydantic import BaseModel, Field, model_validator

from ..core.camera import Camera
from ..core.visibility import VisibilityMode
from .config import Settings


class TerrainSettings(BaseModel):
    """Grid dimensions and base noise frequency."""

    width: float = Field(default=10.0, gt=0, description="Terrain extent along x")
    height: float = Field(default=10.0, gt=0, description="Terrain extent along y")
    segments_x: int = Field(default=100, ge=1, description="Grid cells along x")
    segments_y: int = Field(default=100, ge=1, description="Grid cells along y")
    noise_scale: float = Field(default=0.5, gt=0, description="Base noise frequency")


class CameraSettings(BaseModel):
    """Perspective camera lens and placement."""

    fov: float = Field(default=75.0, gt=0, lt=180, description="Vertical field of view in degrees")
    near: float = Field(default=0.1, gt=0, description="Near clip distance")
    far: float = Field(default=1000.0, gt=0, description="Far clip distance")
    position: Tuple[float, float, float] = Field(
        default=(0.0, 2.0, 5.0), description="Camera position in world space"
    )
    target: Tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0), description="Point the camera looks at"
    )

    @model_validator(mode="after")
    def check_clip_planes(self):
        if self.far <= self.near:
            raise ValueError("far must be greater than near")
        return self

    def build(self, aspect: float) -> Camera:
        """Create the camera for a viewport aspect ratio."""
        return Camera.perspective(
            fov=self.fov,
            aspect=aspect,
            near=self.near,
            far=self.far,
            position=self.position,
            target=self.target,
        )


class ExportSettings(BaseModel):
    """SVG stroke style and triangle filtering."""

    stroke: str = Field(default="black", description="Outline stroke colour")
    stroke_width: float = Field(default=0.5, gt=0, description="Outline stroke width")
    visibility_mode: VisibilityMode = Field(
        default=VisibilityMode.DEPTH, description="Triangle visibility test"
    )
    skip_degenerate: bool = Field(default=False, description="Drop zero-area triangles")


def from_settings(settings: Settings) -> Tuple[TerrainSettings, CameraSettings, ExportSettings]:
    """Split application settings into the three option groups."""
    terrain = TerrainSettings(
        width=settings.terrain_width,
        height=settings.terrain_height,
        segments_x=settings.segments_x,
        segments_y=settings.segments_y,
        noise_scale=settings.noise_scale,
    )
    camera = CameraSettings(
        fov=settings.camera_fov,
        near=settings.camera_near,
        far=settings.camera_far,
        position=(settings.camera_x, settings.camera_y, settings.camera_z),
    )
    export = ExportSettings(
        stroke=settings.stroke,
        stroke_width=settings.stroke_width,
        visibility_mode=settings.visibility_mode,
        skip_degenerate=settings.skip_degenerate,
    )
    return terrain, camera, export
