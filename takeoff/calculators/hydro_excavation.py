"""
Hydro-excavation (vacuum excavation) calculator.

Subtypes:
- trench: a run along a polyline; volume = section area × run length
  (circular π·r², rectangular width × depth)
- hole: a single dig at one point; volume = plan footprint × depth
- potholing: one hole per point, e.g. daylighting a utility at intervals

Efficiency below 1 means the truck pulls more spoil than the in-place
volume (overbreak), so the removed volume is in-place / efficiency.
"""

import math

from ..config import settings
from ..errors import InconsistentInput, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables
from ..geometry import polyline_length
from .base import BaseCalculator


class HydroExcavationCalculator(BaseCalculator):
    kind = "hydro-excavation"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        assumptions = []
        points = params.coordinates

        if params.subtype == "trench":
            self.check_points(points, minimum=2)
        elif params.subtype == "hole":
            self.check_points(points, minimum=1)
            if len(points) != 1:
                raise InconsistentInput(
                    f"A hydro-excavation hole is a single point, got {len(points)}",
                    field="coordinates", actual=len(points), expected=1,
                )
        else:
            self.check_points(points, minimum=1)

        section = params.section
        shape = section.shape if section is not None else "circular"
        # Circular trench sections are sized by diameter alone
        depth = None
        if params.subtype != "trench" or shape != "circular":
            depth = self.default(params.depth_m, settings.DEFAULT_HYDRO_DEPTH_M,
                                 "Excavation depth", assumptions, " m")
            self.require_positive(depth, "depth_m")

        if shape == "circular":
            diameter = self.default(section.diameter_m if section else None,
                                    settings.DEFAULT_HYDRO_DIAMETER_M,
                                    "Section diameter", assumptions, " m")
            self.require_positive(diameter, "section.diameter_m")
            footprint_width = diameter
        else:
            if section.width_m is None:
                raise InconsistentInput(
                    "Rectangular hydro-excavation section needs width_m",
                    field="section.width_m", expected="number",
                )
            footprint_width = self.require_positive(section.width_m, "section.width_m")

        run_length = None
        hole_count = 0
        if params.subtype == "trench":
            run_length = polyline_length(points)
            if shape == "circular":
                in_place = self.circle_area(diameter) * run_length
            else:
                in_place = footprint_width * depth * run_length
            footprint = footprint_width * run_length
        else:
            hole_count = len(points)
            if shape == "circular":
                hole_footprint = self.circle_area(diameter)
            else:
                section_length = self.default(section.length_m, settings.DEFAULT_HYDRO_SECTION_LENGTH_M,
                                              "Section length", assumptions, " m")
                self.require_positive(section_length, "section.length_m")
                hole_footprint = footprint_width * section_length
            in_place = hole_footprint * depth * hole_count
            footprint = hole_footprint * hole_count

        efficiency = params.efficiency_ratio if params.efficiency_ratio is not None else 1.0
        if not (math.isfinite(efficiency) and 0.0 < efficiency <= 1.0):
            raise OutOfRangeParameter(
                f"efficiency_ratio must be in (0, 1], got {efficiency}",
                field="efficiency_ratio", actual=efficiency, expected="(0, 1]",
            )
        removed = in_place / efficiency if efficiency < 1.0 else in_place

        restoration = None
        if params.include_restoration:
            restoration = footprint
            assumptions.append("Restoration area is the plan footprint (%s surface)."
                               % (params.surface_type or "unspecified"))

        return {
            "volume_removed_m3": removed,
            "in_place_volume_m3": in_place,
            "run_length_m": run_length,
            "hole_count": hole_count,
            "restoration_area_m2": restoration,
            "assumptions": assumptions,
        }

