"""
Geometry kernel: positional quantities from ordered point sequences.

Points are anything with `x`, `y` and optional `z` attributes (see
schemas.Point), in metres. Every function here is a pure read. Polygon
validity, area and winding come from shapely.
"""

import math
from typing import List, Sequence, Tuple

from shapely.geometry import LinearRing, Polygon

from .config import settings
from .errors import InsufficientPoints, InvalidPolygon


def _z(point) -> float:
    z = getattr(point, "z", None)
    return 0.0 if z is None else z


def is_three_dimensional(points: Sequence) -> bool:
    """True when any point carries an elevation."""
    return any(getattr(p, "z", None) is not None for p in points)


def distance(p1, p2, three_d: bool = True) -> float:
    """Euclidean distance; horizontal only when three_d is False."""
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    dz = (_z(p2) - _z(p1)) if three_d else 0.0
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def segment_lengths(points: Sequence, field: str = "coordinates") -> List[float]:
    """Length of each consecutive segment. 3-D when any point has z."""
    if len(points) < 2:
        raise InsufficientPoints(
            f"{field} needs at least 2 points, got {len(points)}",
            field=field, actual=len(points), expected=2,
        )
    three_d = is_three_dimensional(points)
    return [distance(points[i], points[i + 1], three_d) for i in range(len(points) - 1)]


def polyline_length(points: Sequence, field: str = "coordinates") -> float:
    """Sum of segment lengths in metres."""
    return math.fsum(segment_lengths(points, field))


def chainages(points: Sequence, field: str = "coordinates") -> List[float]:
    """Cumulative station (distance along the line) at each vertex."""
    stations = [0.0]
    running = 0.0
    for length in segment_lengths(points, field):
        running += length
        stations.append(running)
    return stations


# ============================================================
# Polygons
# ============================================================

def _is_closed(points: Sequence, epsilon: float) -> bool:
    first, last = points[0], points[-1]
    return abs(first.x - last.x) < epsilon and abs(first.y - last.y) < epsilon


def _same_xy(a, b, epsilon: float) -> bool:
    return abs(a.x - b.x) < epsilon and abs(a.y - b.y) < epsilon


def _distinct_vertices(points: Sequence, epsilon: float) -> list:
    """Ring vertices without the closing point(s) and without repeated neighbours."""
    vertices = []
    for p in points[:-1]:
        if vertices and _same_xy(p, vertices[-1], epsilon):
            continue
        vertices.append(p)
    # A closing point given more than once leaves copies of the start at the end
    while len(vertices) > 1 and _same_xy(vertices[-1], vertices[0], epsilon):
        vertices.pop()
    return vertices


def polygon_area(points: Sequence, field: str = "coordinates") -> Tuple[float, float]:
    """
    Signed area and perimeter of a closed ring, horizontal projection.

    Counter-clockwise rings are positive, clockwise negative. The ring must be
    closed (first point equals last within epsilon), have at least 3 distinct
    vertices and must not cross itself.

    Returns:
        (signed_area_m2, perimeter_m)
    """
    epsilon = settings.GEOMETRY_EPSILON

    if len(points) < 4:
        raise InsufficientPoints(
            f"{field} needs at least 3 distinct points plus the closing point, got {len(points)}",
            field=field, actual=len(points), expected=4,
        )
    if not _is_closed(points, epsilon):
        raise InvalidPolygon(
            f"{field} is not closed: first and last points differ",
            field=field, index=len(points) - 1,
            actual={"x": points[-1].x, "y": points[-1].y},
            expected={"x": points[0].x, "y": points[0].y},
        )

    vertices = _distinct_vertices(points, epsilon)
    if len(vertices) < 3:
        raise InsufficientPoints(
            f"{field} has only {len(vertices)} distinct vertices",
            field=field, actual=len(vertices), expected=3,
        )

    ring = LinearRing([(p.x, p.y) for p in vertices])
    if not ring.is_simple:
        raise InvalidPolygon(
            f"{field} self-intersects",
            field=field, actual="self-intersecting", expected="simple ring",
        )

    area = Polygon(ring).area
    if area < epsilon:
        raise InvalidPolygon(
            f"{field} encloses no area (|area| < {epsilon})",
            field=field, actual=area, expected=f">= {epsilon}",
        )

    signed_area = area if ring.is_ccw else -area
    return signed_area, ring.length


# ============================================================
# Curvature and depth
# ============================================================

def circumradius(p1, p2, p3) -> float:
    """
    Radius of the circle through three points (R = abc / 4K).

    Collinear or coincident points have no finite circle: returns inf.
    """
    ux, uy, uz = p2.x - p1.x, p2.y - p1.y, _z(p2) - _z(p1)
    vx, vy, vz = p3.x - p1.x, p3.y - p1.y, _z(p3) - _z(p1)

    a = math.sqrt(ux * ux + uy * uy + uz * uz)
    c = math.sqrt(vx * vx + vy * vy + vz * vz)
    b = distance(p2, p3)

    cx = uy * vz - uz * vy
    cy = uz * vx - ux * vz
    cz = ux * vy - uy * vx
    twice_area = math.sqrt(cx * cx + cy * cy + cz * cz)

    if a == 0.0 or b == 0.0 or twice_area <= 1e-12 * a * c:
        return math.inf
    return (a * b * c) / (2.0 * twice_area)


def segment_curvature_radii(points: Sequence) -> List[Tuple[int, float]]:
    """
    Local bend radius at each interior vertex.

    The radius at vertex i comes from the circle through points i-1, i, i+1
    and is reported against segment index i-1 (the segment entering the
    bend). Fewer than 3 points have no interior vertex.
    """
    return [
        (i - 1, circumradius(points[i - 1], points[i], points[i + 1]))
        for i in range(1, len(points) - 1)
    ]


def depth_profile(points: Sequence) -> List[Tuple[int, float]]:
    """Depth below grade (z = 0) at each point; points without z sit at grade."""
    return [(i, 0.0 - _z(p)) for i, p in enumerate(points)]
