"""
Project roll-up: folds computed measurements into per-kind totals.

Totals by kind:
    trench            count, total_length_m, total_volume_m3
    conduit           count, total_length_m
    bore-shot         count, total_length_m
    vault             count (weighted by quantity), total_volume_m3 (excavation)
    hydro-excavation  count, total_volume_m3 (removed)
    area              count, total_area_m2, total_volume_m3 when any area has depth

Select and note measurements carry no quantities and are skipped. A kind
with no measurements has no entry.
"""

import logging
import math
from datetime import datetime, timezone

from .errors import InconsistentInput
from .units import UnitSystem, parse_unit_system, project_fields

logger = logging.getLogger(__name__)

# kind -> [(total key, derived attribute)]
SUMMED_FIELDS = {
    "trench": [("total_length_m", "length_m"), ("total_volume_m3", "volume_m3")],
    "conduit": [("total_length_m", "total_length_m")],
    "bore-shot": [("total_length_m", "length_m")],
    "vault": [("total_volume_m3", "excavation_m3")],
    "hydro-excavation": [("total_volume_m3", "volume_removed_m3")],
    "area": [("total_area_m2", "area_m2")],
}


def summarize(project_id: str, measurements, unit_system=UnitSystem.METRIC,
              now: datetime = None) -> dict:
    """
    Roll computed measurements up into per-kind totals.

    Args:
        project_id: every measurement must belong to this project
        measurements: computed Measurement models (derived fields populated)
        unit_system: system for `display_totals`
        now: timestamp override, defaults to the current UTC time

    Returns:
        {"project_id", "totals", "display_totals", "generated_at"}
    """
    system = parse_unit_system(unit_system)
    counts = {}
    sums = {}
    area_volumes = []

    for i, measurement in enumerate(measurements):
        if measurement.header.project_id != project_id:
            raise InconsistentInput(
                f"Measurement {measurement.header.id} belongs to project "
                f"{measurement.header.project_id}, not {project_id}",
                field="project_id", index=i,
                actual=measurement.header.project_id, expected=project_id,
            )

        kind = measurement.type
        if kind not in SUMMED_FIELDS:
            continue

        derived = measurement.derived
        if derived is None:
            raise InconsistentInput(
                f"Measurement {measurement.header.id} ({kind}) has no derived fields",
                field="derived", index=i, expected="computed measurement",
            )

        weight = derived.quantity if kind == "vault" else 1
        counts[kind] = counts.get(kind, 0) + weight
        kind_sums = sums.setdefault(kind, {})
        for total_key, attr in SUMMED_FIELDS[kind]:
            kind_sums.setdefault(total_key, []).append(getattr(derived, attr))

        if kind == "area" and derived.volume is not None:
            area_volumes.append(derived.volume.volume_m3)

    totals = {}
    for kind, kind_sums in sums.items():
        totals[kind] = {"count": counts[kind]}
        for total_key, values in kind_sums.items():
            totals[kind][total_key] = math.fsum(values)
    if area_volumes:
        totals["area"]["total_volume_m3"] = math.fsum(area_volumes)

    generated_at = now or datetime.now(timezone.utc)
    logger.info("Summarized project %s: %d kind(s) totalled", project_id, len(totals))

    return {
        "project_id": project_id,
        "totals": totals,
        "display_totals": project_fields(totals, system),
        "generated_at": generated_at.isoformat(),
    }
