"""
Unit system tests: exact factors, dimension safety, payload normalization and
display projection.
"""

import pytest

from takeoff.errors import InconsistentInput, UnitMismatch
from takeoff.units import (
    UNITS,
    Dimension,
    UnitSystem,
    convert,
    normalize_payload,
    parse_unit_system,
    project_fields,
    to_canonical,
    to_display,
)

SI_BASE = {
    Dimension.LENGTH: "m",
    Dimension.AREA: "m2",
    Dimension.VOLUME: "m3",
    Dimension.MASS: "kg",
    Dimension.DENSITY: "kg/m3",
}


# ============================================================
# Conversion factors
# ============================================================

def test_foot_is_exactly_0_3048_m():
    assert to_canonical(1.0, "ft", Dimension.LENGTH) == 0.3048
    assert to_canonical(1.0, "in", Dimension.LENGTH) == 0.0254


def test_area_and_volume_factors_are_not_rounded_squares():
    """Square foot and cubic yard carry their full exact factors."""
    assert to_canonical(1.0, "ft2", "area") == 0.09290304
    assert to_canonical(1.0, "yd3", "volume") == 0.764554857984
    assert convert(27.0, "ft3", "yd3") == pytest.approx(1.0, rel=1e-12)


def test_every_unit_round_trips_through_si():
    """convert(convert(v, u, base), base, u) == v for every unit."""
    for unit, (dimension, _) in UNITS.items():
        base = SI_BASE[dimension]
        back = convert(convert(12.5, unit, base), base, unit)
        assert back == pytest.approx(12.5, rel=1e-12), unit


def test_display_inverts_canonical():
    metres = to_canonical(250.0, "ft", "length")
    assert to_display(metres, "ft", "length") == pytest.approx(250.0, rel=1e-12)


def test_density_conversion():
    """62.428 lb/ft³ is about 1000 kg/m³ (water)."""
    assert convert(1000.0, "kg/m3", "lb/ft3") == pytest.approx(62.42796, rel=1e-6)


# ============================================================
# Dimension safety
# ============================================================

def test_cross_dimension_conversion_raises():
    with pytest.raises(UnitMismatch):
        convert(1.0, "m", "kg")


def test_unit_used_for_wrong_dimension_raises():
    with pytest.raises(UnitMismatch) as exc:
        to_canonical(1.0, "ft2", Dimension.LENGTH)
    assert exc.value.code == "UNIT_MISMATCH"
    assert exc.value.actual == "area"


def test_unknown_unit_raises():
    with pytest.raises(UnitMismatch):
        convert(1.0, "furlong", "m")
    with pytest.raises(UnitMismatch):
        to_display(1.0, "cubits", "length")


def test_parse_unit_system():
    assert parse_unit_system("imperial") is UnitSystem.IMPERIAL
    assert parse_unit_system(UnitSystem.METRIC) is UnitSystem.METRIC
    with pytest.raises(UnitMismatch):
        parse_unit_system("nautical")


# ============================================================
# Payload normalization
# ============================================================

def test_normalize_imperial_payload_to_metric():
    """Imperial suffixes are converted and renamed; coordinates are in feet."""
    payload = {
        "type": "trench",
        "coordinates": [{"x": 0, "y": 0}, {"x": 100, "y": 0}],
        "width": {"type": "constant", "value_ft": 2.0},
        "depth": {"type": "variable", "values_ft": [3.0, 4.0]},
        "drill_diameter_in": 6.0,
    }
    result = normalize_payload(payload, "imperial")

    assert result["type"] == "trench"
    assert result["coordinates"][1]["x"] == pytest.approx(30.48)
    assert result["width"] == {"type": "constant", "value_m": pytest.approx(0.6096)}
    assert result["depth"]["values_m"] == [pytest.approx(0.9144), pytest.approx(1.2192)]
    assert result["drill_diameter_mm"] == pytest.approx(152.4)
    assert "drill_diameter_in" not in result


def test_normalize_metric_payload_is_unchanged_and_input_not_mutated():
    payload = {"coordinates": [{"x": 1.0, "y": 2.0}], "depth_m": 1.5, "label": "a"}
    result = normalize_payload(payload, "metric")
    assert result == payload
    assert result is not payload
    assert result["coordinates"] is not payload["coordinates"]


def test_normalize_rejects_both_imperial_and_metric_key():
    with pytest.raises(InconsistentInput) as exc:
        normalize_payload({"depth_ft": 3.0, "depth_m": 1.0}, "imperial")
    assert exc.value.field == "depth_m"


def test_normalize_rejects_non_numeric_imperial_value():
    with pytest.raises(InconsistentInput):
        normalize_payload({"depth_ft": "three"}, "imperial")


def test_normalize_leaves_none_alone():
    assert normalize_payload({"depth_ft": None}, "imperial") == {"depth_m": None}


# ============================================================
# Display projection
# ============================================================

def test_project_fields_imperial_renames_and_converts():
    fields = {
        "volume_m3": 0.764554857984,
        "area_m2": 0.09290304,
        "length_m": 0.3048,
        "drill_diameter_mm": 25.4,
        "estimated_weight_kg": 0.45359237,
        "count": 3,
        "passed": True,
        "cross_sections": [{"station_m": 3.048, "area_m2": 0.09290304}],
    }
    shown = project_fields(fields, "imperial")

    assert shown["volume_cy"] == pytest.approx(1.0)
    assert shown["area_sqft"] == pytest.approx(1.0)
    assert shown["length_ft"] == pytest.approx(1.0)
    assert shown["drill_diameter_in"] == pytest.approx(1.0)
    assert shown["estimated_weight_lb"] == pytest.approx(1.0)
    assert shown["count"] == 3
    assert shown["passed"] is True
    assert shown["cross_sections"][0]["station_ft"] == pytest.approx(10.0)
    assert "volume_m3" not in shown


def test_project_fields_metric_is_a_deep_copy():
    fields = {"volume_m3": 2.0, "nested": {"length_m": 1.0}}
    shown = project_fields(fields, "metric")
    assert shown == fields
    shown["nested"]["length_m"] = 99.0
    assert fields["nested"]["length_m"] == 1.0


def test_project_fields_keeps_none_values():
    shown = project_fields({"backfill_m3": None}, "imperial")
    assert shown == {"backfill_cy": None}


def test_project_then_normalize_returns_metric_values():
    fields = {"length_m": 12.7, "diameter_mm": 114.3, "coordinates": [{"x": 3.2, "y": -1.1}]}
    back = normalize_payload(project_fields(fields, "imperial"), "imperial")
    assert back["length_m"] == pytest.approx(12.7, rel=1e-12)
    assert back["diameter_mm"] == pytest.approx(114.3, rel=1e-12)
    assert back["coordinates"][0]["x"] == pytest.approx(3.2, rel=1e-12)
    assert back["coordinates"][0]["y"] == pytest.approx(-1.1, rel=1e-12)
