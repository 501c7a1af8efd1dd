"""
Horizontal directional drilling (bore-shot) calculator.

The drilled path is 3-D: every point carries an elevation. Length is the
3-D polyline length. The conduit bundle sets the required bend radius
(tightest tolerance governs); the path is then checked for curvature and
cover depth.
"""

import logging

from ..config import settings
from ..errors import InconsistentInput, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables
from ..geometry import polyline_length
from ..validation import validate_bore_shot
from .base import BaseCalculator

logger = logging.getLogger(__name__)


class BoreShotCalculator(BaseCalculator):
    kind = "bore-shot"
    three_d = True

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        assumptions = []
        points = params.coordinates
        self.check_points(points, minimum=2)

        length = polyline_length(points)

        entry = self.default(params.entry_angle_degrees, settings.DEFAULT_ENTRY_ANGLE_DEGREES,
                             "Entry angle", assumptions, "°")
        exit_ = self.default(params.exit_angle_degrees, settings.DEFAULT_EXIT_ANGLE_DEGREES,
                             "Exit angle", assumptions, "°")
        self.require_range(entry, 0.0, 90.0, "entry_angle_degrees")
        self.require_range(exit_, 0.0, 90.0, "exit_angle_degrees")

        min_depth = self.default(params.min_depth_guaranteed_m, settings.DEFAULT_MIN_DEPTH_M,
                                 "Minimum cover", assumptions, " m")
        self.require_non_negative(min_depth, "min_depth_guaranteed_m")

        drill = self.default(params.drill_diameter_mm, settings.DEFAULT_DRILL_DIAMETER_MM,
                             "Drill diameter", assumptions, " mm")
        reamer = self.default(params.backreamer_diameter_mm, settings.DEFAULT_BACKREAMER_DIAMETER_MM,
                              "Backreamer diameter", assumptions, " mm")
        self.require_positive(drill, "drill_diameter_mm")
        self.require_positive(reamer, "backreamer_diameter_mm")
        if reamer < drill:
            raise InconsistentInput(
                f"Backreamer ({reamer} mm) is smaller than the drill ({drill} mm)",
                field="backreamer_diameter_mm", actual=reamer, expected=f">= {drill}",
            )

        required_radius = self._required_radius(params.conduits, assumptions)
        validation = validate_bore_shot(points, required_radius, min_depth)
        if not validation.passed:
            logger.warning("Bore path fails validation: %d radius, %d depth violation(s)",
                           len(validation.radius_check.violations),
                           len(validation.depth_check.violations))

        return {
            "length_m": length,
            "entry_angle_degrees": entry,
            "exit_angle_degrees": exit_,
            "min_depth_guaranteed_m": min_depth,
            "drill_diameter_mm": drill,
            "backreamer_diameter_mm": reamer,
            "reamed_volume_m3": self.circle_area(self.mm_to_m(reamer)) * length,
            "validation": validation.model_dump(),
            "assumptions": assumptions,
        }

    def _required_radius(self, conduits, assumptions: list) -> float:
        """Largest minimum bend radius across the bundle."""
        if not conduits:
            assumptions.append(
                "No conduits in bundle, default minimum bend radius %.2f m used."
                % settings.DEFAULT_MIN_CURVATURE_RADIUS_M)
            return settings.DEFAULT_MIN_CURVATURE_RADIUS_M

        required = 0.0
        for i, conduit in enumerate(conduits):
            self.require_positive(conduit.outer_diameter_mm, "conduits.outer_diameter_mm", index=i)
            radius = self.require_positive(conduit.min_curvature_radius_m,
                                           "conduits.min_curvature_radius_m", index=i)
            if conduit.count < 1:
                raise OutOfRangeParameter(
                    f"Conduit {i} count must be at least 1, got {conduit.count}",
                    field="conduits.count", index=i, actual=conduit.count, expected=">= 1",
                )
            required = max(required, radius)
        return required
