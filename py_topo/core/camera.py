"""
Camera and world-transform math.

Matrices are 4x4 float64 arrays acting on column vectors, with the OpenGL
clip convention (NDC z in [-1, 1], camera looking down its local -z).
"""

import math
from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from ..exceptions import NonFiniteInputError

EPS = 1e-12


def as_matrix4(matrix, name: str) -> np.ndarray:
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (4, 4):
        raise ValueError(f"{name} must be 4x4, got shape {m.shape}")
    if not np.all(np.isfinite(m)):
        raise NonFiniteInputError(f"{name} contains non-finite values")
    return m


def _normalize(v: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(v))
    if norm < EPS:
        raise ValueError("Cannot normalize a zero-length vector")
    return v / norm


def perspective_matrix(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """
    Perspective projection matrix.

    Args:
        fov: Vertical field of view in degrees
        aspect: Viewport width / height
        near: Near clip distance
        far: Far clip distance

    Returns:
        Projection matrix mapping the view frustum to NDC
    """
    if not 0 < fov < 180:
        raise ValueError(f"fov must be in (0, 180) degrees, got {fov}")
    if aspect <= 0:
        raise ValueError(f"aspect must be positive, got {aspect}")
    if not 0 < near < far:
        raise ValueError(f"Require 0 < near < far, got near={near}, far={far}")

    top = near * math.tan(math.radians(fov) / 2)
    right = top * aspect

    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = near / right
    m[1, 1] = near / top
    m[2, 2] = -(far + near) / (far - near)
    m[2, 3] = -2.0 * far * near / (far - near)
    m[3, 2] = -1.0
    return m


def look_at_matrix(
    eye: Sequence[float], target: Sequence[float], up: Sequence[float] = (0.0, 1.0, 0.0)
) -> np.ndarray:
    """
    Camera world matrix placing the camera at ``eye`` facing ``target``.

    The camera's local -z axis points at the target.
    """
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    z_axis = _normalize(eye - target)
    x_axis = np.cross(up, z_axis)
    if np.linalg.norm(x_axis) < EPS:
        raise ValueError("Up vector is collinear with the viewing direction")
    x_axis = _normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)

    m = np.eye(4, dtype=np.float64)
    m[0:3, 0] = x_axis
    m[0:3, 1] = y_axis
    m[0:3, 2] = z_axis
    m[0:3, 3] = eye
    return m


def rotation_x(angle: float) -> np.ndarray:
    """Rotation about the x axis by ``angle`` radians."""
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.eye(4, dtype=np.float64)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def translation(x: float, y: float, z: float) -> np.ndarray:
    m = np.eye(4, dtype=np.float64)
    m[0:3, 3] = (x, y, z)
    return m


def terrain_model_matrix() -> np.ndarray:
    """World placement of the terrain: the xy grid laid flat, +z up becoming +y."""
    return rotation_x(-math.pi / 2)


@dataclass(frozen=True, eq=False)
class Camera:
    """Read-only camera transform.

    Attributes:
        projection_matrix: View space to clip space
        world_matrix: Camera placement in world space
    """

    projection_matrix: np.ndarray
    world_matrix: np.ndarray
    fov: float = 75.0
    aspect: float = 1.0
    near: float = 0.1
    far: float = 1000.0

    def __post_init__(self):
        object.__setattr__(
            self, "projection_matrix", as_matrix4(self.projection_matrix, "projection_matrix")
        )
        object.__setattr__(self, "world_matrix", as_matrix4(self.world_matrix, "world_matrix"))

    @property
    def view_matrix(self) -> np.ndarray:
        """World space to view space."""
        return np.linalg.inv(self.world_matrix)

    @property
    def view_projection(self) -> np.ndarray:
        """Combined world-to-clip transform."""
        return self.projection_matrix @ self.view_matrix

    @classmethod
    def perspective(
        cls,
        fov: float = 75.0,
        aspect: float = 1.0,
        near: float = 0.1,
        far: float = 1000.0,
        position: Sequence[float] = (0.0, 2.0, 5.0),
        target: Sequence[float] = (0.0, 0.0, 0.0),
        up: Sequence[float] = (0.0, 1.0, 0.0),
    ) -> "Camera":
        """Perspective camera at ``position`` looking at ``target``."""
        return cls(
            projection_matrix=perspective_matrix(fov, aspect, near, far),
            world_matrix=look_at_matrix(position, target, up),
            fov=fov,
            aspect=aspect,
            near=near,
            far=far,
        )

    def with_aspect(self, aspect: float) -> "Camera":
        """Copy of this camera with the projection rebuilt for a new aspect ratio."""
        return replace(
            self,
            projection_matrix=perspective_matrix(self.fov, aspect, self.near, self.far),
            aspect=aspect,
        )
