"""
Area calculator: plan area and perimeter of a closed ring, optional volume
when a uniform depth is given.
"""

from ..factors import DEFAULT_FACTORS, FactorTables
from ..geometry import polygon_area
from .base import BaseCalculator


class AreaCalculator(BaseCalculator):
    kind = "area"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        self.check_points(params.coordinates)
        signed_area, perimeter = polygon_area(params.coordinates)
        area = abs(signed_area)

        volume = None
        if params.depth_m is not None:
            depth = self.require_non_negative(params.depth_m, "depth_m")
            volume = {"depth_m": depth, "volume_m3": area * depth}

        return {
            "area_m2": area,
            "perimeter_m": perimeter,
            "winding": "ccw" if signed_area > 0 else "cw",
            "volume": volume,
            "assumptions": [],
        }
