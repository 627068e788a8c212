"""
Topographical map pipeline: terrain regeneration and SVG export.

``TerrainContext`` bundles everything one terrain instance needs (noise
field, mesh, camera, world transform). ``TopographicMap`` exposes the two
commands an embedding application calls: ``regenerate`` and
``export_vector``.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import structlog

from ..config.render_settings import CameraSettings, ExportSettings, TerrainSettings
from ..exceptions import MissingCollaboratorError
from ..utils.random import next_seed
from .camera import Camera, terrain_model_matrix
from .heightfield import DEFAULT_CONFIG, HeightfieldConfig
from .noise import NoiseField
from .projection import project_vertices
from .terrain_mesh import TerrainMesh, build_plane_grid
from .vector_path import VectorPath, emit, serialize
from .visibility import VisibilityFilter

logger = structlog.get_logger()


@dataclass(eq=False)
class TerrainContext:
    """State of one terrain instance, passed explicitly to each stage."""

    noise: NoiseField
    mesh: Optional[TerrainMesh]
    camera: Optional[Camera]
    model_matrix: np.ndarray = field(default_factory=terrain_model_matrix)
    heightfield: HeightfieldConfig = DEFAULT_CONFIG

    @property
    def seed(self) -> float:
        return self.noise.seed

    def require_collaborators(self) -> None:
        """Fail fast when the mesh or camera is not ready."""
        if self.mesh is None:
            raise MissingCollaboratorError("Terrain mesh has not been provided")
        if self.camera is None:
            raise MissingCollaboratorError("Camera has not been provided")


def regenerate_terrain(context: TerrainContext, seed: Optional[float] = None) -> TerrainContext:
    """
    Re-seed and resynthesize the terrain heights.

    The permutation table is rebuilt for the new seed and every vertex
    elevation recomputed. Topology and camera are left as they are. If any
    step fails, the context keeps its previous seed, table and heights.

    Args:
        context: Terrain to regenerate
        seed: Seed to use, a fresh one is drawn when omitted

    Returns:
        The same context, updated
    """
    if context.mesh is None:
        raise MissingCollaboratorError("Terrain mesh has not been provided")

    if seed is None:
        seed = next_seed()

    noise = NoiseField(seed)
    context.mesh.populate_heights(noise.table, noise.seed, context.heightfield)
    context.noise = noise

    logger.info(
        "Terrain regenerated",
        seed=seed,
        vertices=context.mesh.vertex_count,
        version=context.mesh.version,
    )
    return context


def build_vector_path(
    context: TerrainContext,
    viewport_width: float,
    viewport_height: float,
    visibility: Optional[VisibilityFilter] = None,
    skip_degenerate: bool = False,
) -> VectorPath:
    """Project the mesh and collect visible triangle outlines."""
    context.require_collaborators()
    projected = project_vertices(
        context.mesh.positions,
        context.model_matrix,
        context.camera,
        viewport_width,
        viewport_height,
    )
    return emit(context.mesh, projected, visibility, skip_degenerate)


def export_vector(
    context: TerrainContext,
    viewport_width: float,
    viewport_height: float,
    export: Optional[ExportSettings] = None,
) -> str:
    """
    Render the current terrain as an SVG line drawing.

    Reads the mesh and camera but changes neither, so repeated calls
    with unchanged inputs return identical documents.

    Args:
        context: Terrain to export
        viewport_width: Canvas width in pixels
        viewport_height: Canvas height in pixels
        export: Stroke and visibility options

    Returns:
        SVG document text
    """
    export = export or ExportSettings()
    visibility = VisibilityFilter(export.visibility_mode, viewport_width, viewport_height)
    path = build_vector_path(
        context, viewport_width, viewport_height, visibility, export.skip_degenerate
    )
    document = serialize(
        path, viewport_width, viewport_height, export.stroke, export.stroke_width
    )

    logger.info(
        "Vector export complete",
        seed=context.seed,
        outlines=len(path),
        triangles=context.mesh.triangle_count,
        width=viewport_width,
        height=viewport_height,
    )
    return document


class TopographicMap:
    """
    Command handlers for one terrain instance.

    Example:
        >>> topo = TopographicMap.create(seed=42.0)
        >>> svg = topo.export_vector(800, 600)
        >>> topo.regenerate()
    """

    def __init__(self, context: TerrainContext, export: Optional[ExportSettings] = None):
        self.context = context
        self.export = export or ExportSettings()

    @classmethod
    def create(
        cls,
        seed: Optional[float] = None,
        terrain: Optional[TerrainSettings] = None,
        camera: Optional[CameraSettings] = None,
        export: Optional[ExportSettings] = None,
        aspect: float = 1.0,
    ) -> "TopographicMap":
        """
        Build grid, camera and initial height field.

        Args:
            seed: Initial seed, a fresh one is drawn when omitted
            terrain: Grid dimensions
            camera: Camera placement and lens
            export: Stroke and visibility options
            aspect: Initial viewport aspect ratio
        """
        terrain = terrain or TerrainSettings()
        camera = camera or CameraSettings()

        mesh = build_plane_grid(
            terrain.width, terrain.height, terrain.segments_x, terrain.segments_y
        )
        if seed is None:
            seed = next_seed()
        noise = NoiseField(seed)
        config = HeightfieldConfig(scale=terrain.noise_scale)
        mesh.populate_heights(noise.table, noise.seed, config)

        context = TerrainContext(
            noise=noise,
            mesh=mesh,
            camera=camera.build(aspect),
            heightfield=config,
        )
        logger.info(
            "Terrain created",
            seed=seed,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
        )
        return cls(context, export)

    @property
    def seed(self) -> float:
        return self.context.seed

    @property
    def mesh(self) -> Optional[TerrainMesh]:
        return self.context.mesh

    @property
    def camera(self) -> Optional[Camera]:
        return self.context.camera

    def regenerate(self, seed: Optional[float] = None) -> float:
        """Pick a new seed and resynthesize heights. Returns the seed used."""
        regenerate_terrain(self.context, seed)
        return self.context.seed

    def export_vector(self, viewport_width: float, viewport_height: float) -> str:
        return export_vector(self.context, viewport_width, viewport_height, self.export)

    def resize(self, aspect: float) -> None:
        """Rebuild the camera projection for a new viewport aspect ratio."""
        if self.context.camera is None:
            raise MissingCollaboratorError("Camera has not been provided")
        self.context.camera = self.context.camera.with_aspect(aspect)
