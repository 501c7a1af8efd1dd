"""
Unit system: one canonical (metric) internal representation.

Everything inside the engine is metric. Display units are projections derived
on demand at the boundary, never stored next to the metric value.

Conversion factors are exact dimensional constants (NIST SP 811). Area and
volume factors are written out in full, never built by squaring or cubing a
rounded length factor. No rounding happens here; rounding for display is the
caller's concern.

Payload keys carry their unit in the suffix:
    metric    _m   _mm  _m2    _m3  _kg  _kg_m3
    imperial  _ft  _in  _sqft  _cy  _lb  _lb_ft3
Point coordinates (x, y, z) carry no suffix and are in the unit system's base
length unit (m or ft).
"""

import enum

from .errors import InconsistentInput, UnitMismatch


class UnitSystem(str, enum.Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class Dimension(str, enum.Enum):
    LENGTH = "length"
    AREA = "area"
    VOLUME = "volume"
    MASS = "mass"
    DENSITY = "density"


# unit -> (dimension, factor to SI base unit)
UNITS = {
    # Length (m)
    "m": (Dimension.LENGTH, 1.0),
    "mm": (Dimension.LENGTH, 0.001),
    "cm": (Dimension.LENGTH, 0.01),
    "km": (Dimension.LENGTH, 1000.0),
    "in": (Dimension.LENGTH, 0.0254),
    "ft": (Dimension.LENGTH, 0.3048),
    "yd": (Dimension.LENGTH, 0.9144),
    "mi": (Dimension.LENGTH, 1609.344),
    # Area (m²)
    "m2": (Dimension.AREA, 1.0),
    "ha": (Dimension.AREA, 10000.0),
    "ft2": (Dimension.AREA, 0.09290304),
    "yd2": (Dimension.AREA, 0.83612736),
    "acre": (Dimension.AREA, 4046.8564224),
    # Volume (m³)
    "m3": (Dimension.VOLUME, 1.0),
    "l": (Dimension.VOLUME, 0.001),
    "ft3": (Dimension.VOLUME, 0.028316846592),
    "yd3": (Dimension.VOLUME, 0.764554857984),
    "gal": (Dimension.VOLUME, 0.003785411784),  # US liquid gallon
    # Mass (kg)
    "kg": (Dimension.MASS, 1.0),
    "t": (Dimension.MASS, 1000.0),
    "lb": (Dimension.MASS, 0.45359237),
    "ton": (Dimension.MASS, 907.18474),  # US short ton
    # Density (kg/m³)
    "kg/m3": (Dimension.DENSITY, 1.0),
    "lb/ft3": (Dimension.DENSITY, 0.45359237 / 0.028316846592),
}

# (metric suffix, imperial suffix, dimension, metric unit, imperial unit)
# Order matters: longer suffixes are matched first.
SUFFIX_RULES = [
    ("_kg_m3", "_lb_ft3", Dimension.DENSITY, "kg/m3", "lb/ft3"),
    ("_m2", "_sqft", Dimension.AREA, "m2", "ft2"),
    ("_m3", "_cy", Dimension.VOLUME, "m3", "yd3"),
    ("_mm", "_in", Dimension.LENGTH, "mm", "in"),
    ("_kg", "_lb", Dimension.MASS, "kg", "lb"),
    ("_m", "_ft", Dimension.LENGTH, "m", "ft"),
]

COORDINATE_KEYS = ("x", "y", "z")

BASE_LENGTH_UNIT = {
    UnitSystem.METRIC: "m",
    UnitSystem.IMPERIAL: "ft",
}


def parse_unit_system(value) -> UnitSystem:
    """Accept a UnitSystem or its string value."""
    try:
        return UnitSystem(value)
    except ValueError:
        raise UnitMismatch(
            f"Unknown unit system: {value}. Available: {[u.value for u in UnitSystem]}",
            field="unit_system", actual=value,
            expected=[u.value for u in UnitSystem],
        )


def _lookup(unit: str, dimension) -> float:
    if unit not in UNITS:
        raise UnitMismatch(
            f"Unknown unit: {unit}",
            field="unit", actual=unit, expected=sorted(UNITS.keys()),
        )
    unit_dimension, factor = UNITS[unit]
    if unit_dimension != Dimension(dimension):
        raise UnitMismatch(
            f"Unit '{unit}' measures {unit_dimension.value}, not {Dimension(dimension).value}",
            field="unit", actual=unit_dimension.value, expected=Dimension(dimension).value,
        )
    return factor


def to_canonical(value: float, unit: str, dimension) -> float:
    """Convert a value expressed in `unit` to the SI base unit of `dimension`."""
    return value * _lookup(unit, dimension)


def to_display(value: float, unit: str, dimension) -> float:
    """Convert an SI value of `dimension` into `unit`."""
    return value / _lookup(unit, dimension)


def convert(value: float, from_unit: str, to_unit: str) -> float:
    """Convert between two units of the same dimension."""
    if from_unit not in UNITS:
        raise UnitMismatch(f"Unknown unit: {from_unit}", field="unit", actual=from_unit)
    dimension = UNITS[from_unit][0]
    return to_display(to_canonical(value, from_unit, dimension), to_unit, dimension)


def dimension_for_key(key: str):
    """Return the suffix rule matching a payload key, or None."""
    for rule in SUFFIX_RULES:
        metric_suffix, imperial_suffix = rule[0], rule[1]
        if key.endswith(metric_suffix) or key.endswith(imperial_suffix):
            return rule
    return None


def _convert_value(value, from_unit: str, to_unit: str, field: str):
    """Convert a scalar or list of scalars, leaving None untouched."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InconsistentInput(f"{field} must be numeric", field=field, actual=value)
    if isinstance(value, (int, float)):
        return convert(float(value), from_unit, to_unit)
    if isinstance(value, (list, tuple)):
        return [_convert_value(v, from_unit, to_unit, field) for v in value]
    raise InconsistentInput(f"{field} must be numeric", field=field, actual=value)


def normalize_payload(payload, unit_system=UnitSystem.METRIC):
    """
    Convert an incoming payload to canonical metric keys and values.

    Imperial-suffixed keys (e.g. `width_ft`) are converted and renamed to
    their metric counterpart (`width_m`). Metric-suffixed keys pass through.
    Bare point coordinates are converted from the unit system's base length
    unit. The input is not mutated.
    """
    system = parse_unit_system(unit_system)

    if isinstance(payload, list):
        return [normalize_payload(item, system) for item in payload]
    if not isinstance(payload, dict):
        return payload

    result = {}
    for key, value in payload.items():
        if key in COORDINATE_KEYS and not isinstance(value, (dict, list)):
            result[key] = _convert_value(value, BASE_LENGTH_UNIT[system], "m", key)
            continue

        rule = dimension_for_key(key)
        if rule is not None:
            metric_suffix, imperial_suffix, _, metric_unit, imperial_unit = rule
            if key.endswith(imperial_suffix) and not key.endswith(metric_suffix):
                metric_key = key[: -len(imperial_suffix)] + metric_suffix
                if metric_key in payload:
                    raise InconsistentInput(
                        f"Both {key} and {metric_key} supplied",
                        field=metric_key, actual=[key, metric_key],
                    )
                result[metric_key] = _convert_value(value, imperial_unit, metric_unit, key)
                continue
            if not isinstance(value, (dict, list)) or _is_numeric_list(value):
                result[key] = value
                continue

        result[key] = normalize_payload(value, system)
    return result


def project_fields(fields, unit_system=UnitSystem.METRIC):
    """
    Project metric-suffixed fields into the display unit system.

    Metric returns a deep copy. Imperial renames and converts every
    metric-suffixed key (`volume_m3` -> `volume_cy`). Unsuffixed values
    (counts, flags, indices, text) are copied unchanged.
    """
    system = parse_unit_system(unit_system)

    if isinstance(fields, list):
        return [project_fields(item, system) for item in fields]
    if not isinstance(fields, dict):
        return fields

    result = {}
    for key, value in fields.items():
        if system == UnitSystem.IMPERIAL:
            if key in COORDINATE_KEYS and isinstance(value, (int, float)) and not isinstance(value, bool):
                result[key] = convert(float(value), "m", "ft")
                continue
            rule = dimension_for_key(key)
            if rule is not None and key.endswith(rule[0]):
                metric_suffix, imperial_suffix, _, metric_unit, imperial_unit = rule
                if not isinstance(value, (dict, list)) or _is_numeric_list(value):
                    display_key = key[: -len(metric_suffix)] + imperial_suffix
                    result[display_key] = _convert_value(value, metric_unit, imperial_unit, key)
                    continue
        result[key] = project_fields(value, system)
    return result


def _is_numeric_list(value) -> bool:
    return isinstance(value, list) and all(
        v is None or (isinstance(v, (int, float)) and not isinstance(v, bool)) for v in value
    )
