"""
Engine entry points.

compute:   raw measurement dict -> Measurement with derived + display fields
recompute: apply changes to an existing Measurement and derive again
validate:  bore-shot path check on an existing Measurement
summarize: per-kind project totals
display:   re-project a Measurement's derived fields into a unit system

Raw input is a flat dict: `type`, the header fields (`project_id`, `label`,
optional `id`, `created_by`) and the kind's own fields, in the caller's unit
system. Everything is normalized to canonical metric before parsing. Nothing
here holds state; every call is a pure function of its arguments and `now`.
"""

import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

from . import summary
from .calculators.registry import get_calculator
from .config import settings
from .errors import InconsistentInput
from .factors import DEFAULT_FACTORS, FactorTables
from .schemas import (
    DERIVED_MODELS,
    MEASUREMENT_MODELS,
    PARAMS_MODELS,
    BoreShotValidation,
    MeasurementHeader,
    measurement_adapter,
)
from .units import normalize_payload, parse_unit_system, project_fields

logger = logging.getLogger(__name__)

HEADER_KEYS = ("id", "project_id", "label", "created_at", "updated_at", "created_by")

# Identity fields fixed at creation
IMMUTABLE_KEYS = ("id", "project_id", "type", "created_at")


def compute(raw: dict, unit_system=None, now: datetime = None,
            factors: FactorTables = DEFAULT_FACTORS):
    """
    Build a fully derived Measurement from a raw payload.

    Args:
        raw: flat measurement dict in `unit_system` units
        unit_system: "metric" or "imperial" (defaults to settings)
        now: creation timestamp, defaults to the current UTC time
        factors: factor tables for soil and material lookups

    Returns:
        The kind's Measurement model with `derived` and `display` populated.
    """
    system = parse_unit_system(unit_system or settings.DEFAULT_UNIT_SYSTEM)
    if not isinstance(raw, dict):
        raise InconsistentInput("Measurement payload must be a mapping",
                                actual=type(raw).__name__, expected="dict")

    kind = raw.get("type")
    calculator = get_calculator(kind)

    payload = normalize_payload(raw, system)
    timestamp = now or datetime.now(timezone.utc)

    header_data = {key: payload.pop(key) for key in HEADER_KEYS if key in payload}
    payload.pop("type")
    header_data.setdefault("id", str(uuid.uuid4()))
    header_data.setdefault("created_at", timestamp)
    header_data.setdefault("updated_at", header_data["created_at"])
    header = _parse(MeasurementHeader, header_data)

    params = calculator.normalize(_parse(PARAMS_MODELS[kind], payload))
    measurement = _build(kind, header, params, system, factors)

    logger.info("Computed %s measurement %s for project %s",
                kind, header.id, header.project_id)
    return measurement


def recompute(measurement, changes: dict, unit_system=None, now: datetime = None,
              factors: FactorTables = DEFAULT_FACTORS):
    """
    Apply `changes` (flat, in `unit_system` units) and derive again.

    Kind fields are merged key by key over the current params; nested
    records are replaced whole. `label` and `created_by` may change; the
    identity fields may not. `updated_at` moves to `now`.
    """
    system = parse_unit_system(unit_system or settings.DEFAULT_UNIT_SYSTEM)
    measurement = _coerce(measurement)

    frozen = [key for key in IMMUTABLE_KEYS if key in changes]
    if frozen:
        raise InconsistentInput(
            f"Cannot change {', '.join(frozen)} on measurement {measurement.header.id}",
            field=frozen[0], actual=changes[frozen[0]],
        )

    payload = normalize_payload(changes, system)
    header_update = {key: payload.pop(key) for key in ("label", "created_by") if key in payload}
    payload.pop("updated_at", None)
    header_update["updated_at"] = now or datetime.now(timezone.utc)
    header = _parse(MeasurementHeader,
                    {**measurement.header.model_dump(), **header_update})

    calculator = get_calculator(measurement.type)
    merged = {**measurement.params.model_dump(), **payload}
    params = calculator.normalize(_parse(PARAMS_MODELS[measurement.type], merged))

    updated = _build(measurement.type, header, params, system, factors)
    logger.info("Recomputed %s measurement %s (%d field(s) changed)",
                measurement.type, header.id, len(changes))
    return updated


def validate(measurement) -> BoreShotValidation:
    """Radius and cover checks for a bore-shot measurement."""
    measurement = _coerce(measurement)
    if measurement.type != "bore-shot":
        raise InconsistentInput(
            f"Only bore-shot measurements have a path validation, got {measurement.type}",
            field="type", actual=measurement.type, expected="bore-shot",
        )
    derived = get_calculator("bore-shot").compute(measurement.params)
    return BoreShotValidation.model_validate(derived["validation"])


def summarize(project_id: str, measurements, unit_system=None, now: datetime = None) -> dict:
    """Per-kind totals for one project (see summary.summarize)."""
    system = parse_unit_system(unit_system or settings.DEFAULT_UNIT_SYSTEM)
    return summary.summarize(project_id, [_coerce(m) for m in measurements], system, now=now)


def display(measurement, unit_system=None) -> dict:
    """Derived fields projected into `unit_system`; empty for select/note."""
    system = parse_unit_system(unit_system or settings.DEFAULT_UNIT_SYSTEM)
    measurement = _coerce(measurement)
    if measurement.derived is None:
        return {}
    return project_fields(measurement.derived.model_dump(), system)


# --- Internal helpers ---

def _build(kind: str, header, params, system, factors: FactorTables):
    calculator = get_calculator(kind)
    result = calculator.compute(params, factors)

    derived = None
    shown = {}
    if result is not None:
        derived = DERIVED_MODELS[kind].model_validate(result)
        shown = project_fields(derived.model_dump(), system)

    return MEASUREMENT_MODELS[kind](header=header, params=params, derived=derived, display=shown)


def _coerce(measurement):
    """Accept a Measurement model or its dumped dict."""
    if isinstance(measurement, dict):
        get_calculator(measurement.get("type"))
        return _parse(measurement_adapter, measurement)
    return measurement


def _parse(model, data):
    """Validate `data` against a model or adapter, as InconsistentInput on failure."""
    try:
        if hasattr(model, "validate_python"):
            return model.validate_python(data)
        return model.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        index = next((part for part in error["loc"] if isinstance(part, int)), None)
        raise InconsistentInput(
            f"Invalid {field or 'payload'}: {error['msg']}",
            field=field or None, index=index, expected=error["type"],
        ) from exc
