"""
Vector path emission and SVG serialization.

Visible triangles become closed three-segment outlines, in index-list
order, all inside one stroked, unfilled ``<path>`` element.
"""

import re
from typing import Callable, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import structlog

from ..exceptions import MissingCollaboratorError, NonFiniteInputError
from .terrain_mesh import TerrainMesh
from .visibility import is_visible

logger = structlog.get_logger()

Point2D = Tuple[float, float]
VisibilityTest = Callable[[Sequence[float], Sequence[float], Sequence[float]], bool]

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DEFAULT_STROKE = "black"
DEFAULT_STROKE_WIDTH = 0.5

_GROUP_PATTERN = re.compile(r"M[^MZ]*Z")


class Outline(NamedTuple):
    """Closed triangle outline in screen space."""

    a: Point2D
    b: Point2D
    c: Point2D

    def to_path_data(self) -> str:
        (ax, ay), (bx, by), (cx, cy) = self
        return f"M{_fmt(ax)},{_fmt(ay)} L{_fmt(bx)},{_fmt(by)} L{_fmt(cx)},{_fmt(cy)} Z"


def _fmt(value: float) -> str:
    """Shortest round-trip text for a coordinate."""
    return repr(float(value))


def _area2(a: Point2D, b: Point2D, c: Point2D) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1])


class VectorPath:
    """Immutable ordered sequence of triangle outlines."""

    __slots__ = ("_outlines",)

    def __init__(self, outlines=()):
        self._outlines = tuple(outlines)

    def __len__(self) -> int:
        return len(self._outlines)

    def __iter__(self) -> Iterator[Outline]:
        return iter(self._outlines)

    def __getitem__(self, i: int) -> Outline:
        return self._outlines[i]

    def __eq__(self, other) -> bool:
        return isinstance(other, VectorPath) and self._outlines == other._outlines

    def __hash__(self) -> int:
        return hash(self._outlines)

    def __repr__(self) -> str:
        return f"VectorPath({len(self)} outlines)"

    @property
    def outlines(self) -> Tuple[Outline, ...]:
        return self._outlines

    def to_path_data(self) -> str:
        """Path data string: one ``M..Z`` group per outline, space separated."""
        return " ".join(outline.to_path_data() for outline in self._outlines)


def emit(
    mesh: TerrainMesh,
    projected: np.ndarray,
    visibility_filter: Optional[VisibilityTest] = None,
    skip_degenerate: bool = False,
) -> VectorPath:
    """
    Collect the outlines of all visible triangles.

    Args:
        mesh: Mesh whose index list defines the triangles
        projected: (N, 3) projected vertices, row i for mesh vertex i
        visibility_filter: Triangle test, ``is_visible`` when omitted
        skip_degenerate: Drop triangles with zero screen-space area

    Returns:
        VectorPath with outlines in mesh index order

    Raises:
        MissingCollaboratorError: If no mesh is given
        NonFiniteInputError: If a visible triangle has a non-finite corner
    """
    if mesh is None:
        raise MissingCollaboratorError("No mesh available for vector emission")

    points = np.asarray(projected, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] < 3 or len(points) != mesh.vertex_count:
        raise ValueError(
            f"Expected ({mesh.vertex_count}, 3) projected points, got shape {points.shape}"
        )

    test = visibility_filter if visibility_filter is not None else is_visible
    outlines = []
    for tri_index, (ia, ib, ic) in enumerate(mesh.indices.tolist()):
        pa, pb, pc = points[ia], points[ib], points[ic]
        if not test(pa, pb, pc):
            continue

        corners = np.array([pa[:2], pb[:2], pc[:2]])
        if not np.all(np.isfinite(corners)):
            raise NonFiniteInputError(
                f"Triangle {tri_index} has a non-finite corner", index=tri_index
            )

        a = (float(pa[0]), float(pa[1]))
        b = (float(pb[0]), float(pb[1]))
        c = (float(pc[0]), float(pc[1]))
        if skip_degenerate and _area2(a, b, c) == 0:
            continue
        outlines.append(Outline(a, b, c))

    logger.debug(
        "Outlines emitted",
        emitted=len(outlines),
        triangles=mesh.triangle_count,
    )
    return VectorPath(outlines)


def serialize(
    path: VectorPath,
    width: float,
    height: float,
    stroke: str = DEFAULT_STROKE,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
) -> str:
    """
    Wrap a vector path in a standalone SVG document.

    Args:
        path: Outlines to draw
        width: Canvas width in pixels
        height: Canvas height in pixels
        stroke: Stroke colour
        stroke_width: Stroke width

    Returns:
        SVG document text
    """
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg width="{_dimension(width)}" height="{_dimension(height)}" xmlns="{SVG_NAMESPACE}">',
        f'    <path d="{path.to_path_data()}" stroke="{stroke}" fill="none" stroke-width="{stroke_width}"/>',
        "</svg>",
    ]
    return "\n".join(parts) + "\n"


def _dimension(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def count_groups(document: str) -> int:
    """Number of closed ``M..Z`` path groups in a document or path string."""
    return len(_GROUP_PATTERN.findall(document))
