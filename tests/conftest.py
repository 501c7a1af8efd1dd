"""
Shared test fixtures: point builders, raw measurement payloads, fixed clock.
"""

from datetime import datetime, timezone

import pytest

from takeoff.schemas import Point

PROJECT_ID = "proj-001"


def pts(*coords):
    """Point list from (x, y) or (x, y, z) tuples."""
    return [Point(x=c[0], y=c[1], z=c[2] if len(c) > 2 else None) for c in coords]


def raw_points(*coords):
    """Payload-form point dicts from (x, y) or (x, y, z) tuples."""
    out = []
    for c in coords:
        p = {"x": c[0], "y": c[1]}
        if len(c) > 2:
            p["z"] = c[2]
        out.append(p)
    return out


@pytest.fixture
def now():
    """Fixed UTC clock."""
    return datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def unit_square():
    """Closed counter-clockwise 1 m square."""
    return pts((0, 0), (1, 0), (1, 1), (0, 1), (0, 0))


@pytest.fixture
def trench_raw():
    """10 m straight trench, 1.0 m wide, 1.5 m deep."""
    return {
        "type": "trench",
        "project_id": PROJECT_ID,
        "label": "Main street run",
        "coordinates": raw_points((0, 0), (10, 0)),
        "width": {"type": "constant", "value_m": 1.0},
        "depth": {"type": "constant", "value_m": 1.5},
    }


@pytest.fixture
def bore_raw():
    """Straight 3-D bore, 3 m below grade, one HDPE conduit."""
    return {
        "type": "bore-shot",
        "project_id": PROJECT_ID,
        "coordinates": raw_points((0, 0, -3), (50, 0, -3), (100, 0, -3)),
        "conduits": [{
            "material": "HDPE",
            "outer_diameter_mm": 114.3,
            "min_curvature_radius_m": 30.0,
        }],
        "min_depth_guaranteed_m": 2.0,
    }


@pytest.fixture
def area_raw():
    """10 m × 20 m lot."""
    return {
        "type": "area",
        "project_id": PROJECT_ID,
        "coordinates": raw_points((0, 0), (10, 0), (10, 20), (0, 20), (0, 0)),
    }


@pytest.fixture
def vault_raw():
    return {
        "type": "vault",
        "project_id": PROJECT_ID,
        "coordinates": raw_points((5, 5)),
        "dimensions": {"length_m": 2.0, "width_m": 1.5, "depth_m": 2.0},
        "quantity": 2,
    }


@pytest.fixture
def conduit_raw():
    return {
        "type": "conduit",
        "project_id": PROJECT_ID,
        "coordinates": raw_points((0, 0, -1), (30, 0, -1), (30, 40, -1)),
        "conduits": [{
            "material": "PVC",
            "count": 2,
            "nominal_diameter_mm": 100.0,
            "outer_diameter_mm": 114.3,
            "wall_thickness_mm": 6.0,
        }],
        "connections": [{"type": "elbow", "position_m": 30.0}],
    }


@pytest.fixture
def hydro_raw():
    return {
        "type": "hydro-excavation",
        "project_id": PROJECT_ID,
        "subtype": "hole",
        "coordinates": raw_points((2, 2)),
        "section": {"shape": "circular", "diameter_m": 1.0},
        "depth_m": 2.0,
    }
