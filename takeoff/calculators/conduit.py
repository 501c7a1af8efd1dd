"""
Conduit run calculator.

Route length is the polyline length: 3-D when the route carries elevations,
horizontal when every point is planar. A mix of the two is rejected. Each
conduit item runs the full route unless it carries its own length. Internal volume uses the nominal
(bore) diameter; weight uses the wall annulus between OD and OD - 2·wall.
"""

import math
import re
from collections import Counter

from ..errors import InconsistentInput, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables
from ..geometry import polyline_length
from .base import BaseCalculator

# "11", "SDR 11", "sdr-13.5"
SDR_PATTERN = re.compile(r"^\s*(?:SDR[\s\-]*)?(\d+(?:\.\d+)?)\s*$", re.IGNORECASE)


class ConduitCalculator(BaseCalculator):
    kind = "conduit"
    three_d = True
    planar_allowed = True

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        assumptions = []
        points = params.coordinates
        self.check_points(points, minimum=2)

        total_length = polyline_length(points)

        conduit_length = 0.0
        internal_volume = 0.0
        weight = 0.0
        for i, item in enumerate(params.conduits):
            if item.count < 1:
                raise OutOfRangeParameter(
                    f"Conduit {i} count must be at least 1, got {item.count}",
                    field="conduits.count", index=i, actual=item.count, expected=">= 1",
                )
            length = total_length
            if item.length_m is not None:
                length = self.require_non_negative(item.length_m, "conduits.length_m", index=i)

            nominal_m = self.mm_to_m(self.require_positive(
                item.nominal_diameter_mm, "conduits.nominal_diameter_mm", index=i))
            outer_m = self.mm_to_m(self.require_positive(
                item.outer_diameter_mm, "conduits.outer_diameter_mm", index=i))
            wall_m = self.mm_to_m(self._wall_thickness(item, i, assumptions))
            if wall_m >= outer_m / 2.0:
                raise InconsistentInput(
                    f"Conduit {i} wall ({wall_m * 1000} mm) leaves no bore in a "
                    f"{item.outer_diameter_mm} mm OD",
                    field="conduits.wall_thickness_mm", index=i,
                    actual=wall_m * 1000, expected=f"< {item.outer_diameter_mm / 2.0}",
                )

            density = item.density_kg_m3
            if density is None:
                density = factors.conduit_density(item.material)
            else:
                self.require_positive(density, "conduits.density_kg_m3", index=i)

            outer_r = outer_m / 2.0
            inner_r = outer_r - wall_m
            annulus = math.pi * (outer_r * outer_r - inner_r * inner_r)

            conduit_length += length * item.count
            internal_volume += self.circle_area(nominal_m) * length * item.count
            weight += density * annulus * length * item.count

        connections_by_type = Counter()
        for i, connection in enumerate(params.connections):
            if not (0.0 <= connection.position_m <= total_length):
                raise OutOfRangeParameter(
                    f"Connection {i} at {connection.position_m} m is off the "
                    f"{total_length:.3f} m route",
                    field="connections.position_m", index=i,
                    actual=connection.position_m, expected=[0.0, total_length],
                )
            connections_by_type[connection.type] += 1

        has_conduits = bool(params.conduits)
        return {
            "total_length_m": total_length,
            "conduit_length_m": conduit_length,
            "internal_volume_m3": internal_volume if has_conduits else None,
            "estimated_weight_kg": weight if has_conduits else None,
            "connections_by_type": dict(connections_by_type),
            "assumptions": assumptions,
        }

    def _wall_thickness(self, item, index: int, assumptions: list) -> float:
        """Wall thickness in mm, from the item or from OD / SDR."""
        if item.wall_thickness_mm is not None:
            return self.require_positive(item.wall_thickness_mm,
                                         "conduits.wall_thickness_mm", index=index)
        if not item.sdr:
            raise InconsistentInput(
                f"Conduit {index} needs wall_thickness_mm or an SDR rating",
                field="conduits.wall_thickness_mm", index=index, expected="number",
            )
        match = SDR_PATTERN.match(item.sdr)
        sdr = float(match.group(1)) if match else 0.0
        if sdr <= 2.0:
            raise InconsistentInput(
                f"Conduit {index} SDR '{item.sdr}' is not a usable ratio",
                field="conduits.sdr", index=index, actual=item.sdr, expected="> 2",
            )
        wall = item.outer_diameter_mm / sdr
        assumptions.append("Conduit %d wall %.2f mm from OD / SDR %s." % (index, wall, item.sdr))
        return wall
