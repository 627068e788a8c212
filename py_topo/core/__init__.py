"""
Core terrain synthesis and projection functionality.
"""

from .noise import NoiseField, build_permutation_table, sample, sample_grid
from .heightfield import HeightfieldConfig, height, heights
from .terrain_mesh import TerrainMesh, build_plane_grid
from .camera import Camera, terrain_model_matrix
from .projection import ProjectedPoint, project, project_vertices
from .visibility import VisibilityFilter, VisibilityMode, is_visible
from .vector_path import VectorPath, count_groups, emit, serialize

__all__ = ['NoiseField', 'build_permutation_table', 'sample', 'sample_grid',
           'HeightfieldConfig', 'height', 'heights',
           'TerrainMesh', 'build_plane_grid',
           'Camera', 'terrain_model_matrix',
           'ProjectedPoint', 'project', 'project_vertices',
           'VisibilityFilter', 'VisibilityMode', 'is_visible',
           'VectorPath', 'count_groups', 'emit', 'serialize']
