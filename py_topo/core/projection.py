"""
Projection of mesh vertices to viewport pixels.

A vertex goes through the model matrix, then the camera's view-projection,
then the perspective divide into normalized device coordinates (NDC).
NDC x/y are mapped to pixels with y flipped (screen origin top-left); NDC z
is kept as the depth.
"""

import math
from typing import NamedTuple, Sequence

import numpy as np
import structlog

from ..exceptions import MissingCollaboratorError, NonFiniteInputError
from .camera import Camera, as_matrix4

logger = structlog.get_logger()


class ProjectedPoint(NamedTuple):
    """Screen position in pixels plus NDC depth."""

    x: float
    y: float
    depth: float


def _check_viewport(viewport_width: float, viewport_height: float) -> None:
    for name, value in (("viewport_width", viewport_width), ("viewport_height", viewport_height)):
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} must be positive and finite, got {value!r}")


def _check_camera(camera: Camera) -> None:
    if camera is None:
        raise MissingCollaboratorError("No camera available for projection")


def project(
    vertex: Sequence[float],
    model_matrix: np.ndarray,
    camera: Camera,
    viewport_width: float,
    viewport_height: float,
) -> ProjectedPoint:
    """
    Project one local-space vertex to screen space.

    Args:
        vertex: (x, y, z) in mesh-local coordinates
        model_matrix: Mesh world transform
        camera: Camera providing the view-projection transform
        viewport_width: Viewport width in pixels
        viewport_height: Viewport height in pixels

    Returns:
        ProjectedPoint with pixel x/y and NDC depth

    Raises:
        NonFiniteInputError: If the vertex, a matrix or the result is not finite
    """
    _check_camera(camera)
    _check_viewport(viewport_width, viewport_height)

    v = np.asarray(vertex, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"vertex must have 3 components, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise NonFiniteInputError(f"Vertex {tuple(v.tolist())} is not finite")

    model = as_matrix4(model_matrix, "model_matrix")
    clip = camera.view_projection @ (model @ np.append(v, 1.0))

    w = clip[3]
    if w == 0 or not np.all(np.isfinite(clip)):
        raise NonFiniteInputError(f"Vertex {tuple(v.tolist())} projects to a non-finite point")
    ndc = clip[:3] / w

    return ProjectedPoint(
        x=float((ndc[0] + 1) * viewport_width / 2),
        y=float((-ndc[1] + 1) * viewport_height / 2),
        depth=float(ndc[2]),
    )


def project_vertices(
    positions: np.ndarray,
    model_matrix: np.ndarray,
    camera: Camera,
    viewport_width: float,
    viewport_height: float,
) -> np.ndarray:
    """
    Project every vertex of a mesh.

    Same math as ``project``, applied to all rows at once.

    Args:
        positions: (N, 3) vertex array
        model_matrix: Mesh world transform
        camera: Camera providing the view-projection transform
        viewport_width: Viewport width in pixels
        viewport_height: Viewport height in pixels

    Returns:
        (N, 3) array of (screen_x, screen_y, depth)

    Raises:
        NonFiniteInputError: For the first vertex that is, or projects to,
            a non-finite value
    """
    _check_camera(camera)
    _check_viewport(viewport_width, viewport_height)

    points = np.asarray(positions, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"positions must have shape (N, 3), got {points.shape}")

    bad = np.flatnonzero(~np.all(np.isfinite(points), axis=1))
    if bad.size:
        logger.error("Non-finite vertex", vertex=int(bad[0]))
        raise NonFiniteInputError(f"Vertex {int(bad[0])} is not finite", index=int(bad[0]))

    model = as_matrix4(model_matrix, "model_matrix")
    homo = np.hstack((points, np.ones((len(points), 1), dtype=np.float64)))
    clip = (camera.view_projection @ (model @ homo.T)).T

    w = clip[:, 3]
    bad = np.flatnonzero((w == 0) | ~np.all(np.isfinite(clip), axis=1))
    if bad.size:
        logger.error("Vertex projects to non-finite point", vertex=int(bad[0]))
        raise NonFiniteInputError(
            f"Vertex {int(bad[0])} projects to a non-finite point", index=int(bad[0])
        )
    ndc = clip[:, :3] / w[:, None]

    screen = np.empty((len(points), 3), dtype=np.float64)
    screen[:, 0] = (ndc[:, 0] + 1) * viewport_width / 2
    screen[:, 1] = (-ndc[:, 1] + 1) * viewport_height / 2
    screen[:, 2] = ndc[:, 2]
    return screen
