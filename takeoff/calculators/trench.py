"""
Open trench calculator.

Length = polyline length. Cross-section A = width × depth at each vertex
station, linear between vertices. Volume = trapezoidal integration of A along
the line. Swell and shrink are applied to the cut volume; pavement removal
and backfill are independent width × thickness × length prisms.
"""

import math

from ..config import settings
from ..errors import InconsistentInput, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables
from ..geometry import chainages, segment_lengths
from .base import BaseCalculator


class TrenchCalculator(BaseCalculator):
    kind = "trench"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        assumptions = []
        points = params.coordinates
        self.check_points(points, minimum=2)

        lengths = segment_lengths(points)
        length = math.fsum(lengths)

        widths = self._profile(params.width, settings.DEFAULT_TRENCH_WIDTH_M,
                               "width", len(points), assumptions)
        depths = self._profile(params.depth, settings.DEFAULT_TRENCH_DEPTH_M,
                               "depth", len(points), assumptions)
        areas = [w * d for w, d in zip(widths, depths)]

        volume = math.fsum(
            seg * (areas[i] + areas[i + 1]) / 2.0 for i, seg in enumerate(lengths)
        )

        cross_sections = [
            {"station_m": station, "width_m": w, "depth_m": d, "area_m2": a}
            for station, w, d, a in zip(chainages(points), widths, depths, areas)
        ]

        return {
            "length_m": length,
            "volume_m3": volume,
            "cross_sections": cross_sections,
            "soil": self._soil_volumes(params.soil_expansion, volume, factors, assumptions),
            "asphalt_removal_m3": self._removal(params.asphalt_removal, length, "asphalt_removal"),
            "concrete_removal_m3": self._removal(params.concrete_removal, length, "concrete_removal"),
            "backfill_m3": self._backfill(params.backfill, length),
            "assumptions": assumptions,
        }

    def _profile(self, profile, fallback: float, name: str, point_count: int,
                 assumptions: list) -> list:
        """Width or depth sample at every vertex."""
        if profile is None:
            assumptions.append("Trench %s not given, default %.2f m used." % (name, fallback))
            return [fallback] * point_count

        if profile.type == "constant":
            if profile.value_m is None:
                raise InconsistentInput(
                    f"Constant trench {name} needs value_m",
                    field=f"{name}.value_m", expected="number",
                )
            self.require_non_negative(profile.value_m, f"{name}.value_m")
            return [profile.value_m] * point_count

        values = profile.values_m or []
        if len(values) != point_count:
            raise InconsistentInput(
                f"Variable trench {name} needs one sample per vertex "
                f"({point_count}), got {len(values)}",
                field=f"{name}.values_m", actual=len(values), expected=point_count,
            )
        for i, value in enumerate(values):
            self.require_non_negative(value, f"{name}.values_m", index=i)
        return list(values)

    def _soil_volumes(self, config, volume: float, factors: FactorTables,
                      assumptions: list):
        if config is None:
            return None

        expansion = config.expansion_rate
        if expansion is None:
            expansion = factors.expansion_rate(config.soil_type)
            assumptions.append(
                "Expansion rate %.2f from soil table (%s)." % (expansion, config.soil_type))
        self.require_non_negative(expansion, "soil_expansion.expansion_rate")

        contraction = config.contraction_rate
        if contraction is None:
            contraction = factors.contraction_rate(config.contraction_type)
            assumptions.append(
                "Contraction rate %.2f from soil table (%s)." % (contraction, config.contraction_type))
        if not math.isfinite(contraction) or contraction < 0 or contraction >= 1:
            raise OutOfRangeParameter(
                f"soil_expansion.contraction_rate must be in [0, 1), got {contraction}",
                field="soil_expansion.contraction_rate", actual=contraction, expected="[0, 1)",
            )

        # TODO: confirm with geotechnical review whether compaction should
        # apply to the loose volume instead of the cut volume.
        assumptions.append(
            "Loose and compacted volumes are independent multipliers on the cut volume.")

        return {
            "soil_type": config.soil_type,
            "contraction_type": config.contraction_type,
            "expansion_rate": expansion,
            "contraction_rate": contraction,
            "volume_loose_m3": volume * (1 + expansion),
            "volume_compacted_m3": volume * (1 - contraction),
        }

    def _removal(self, removal, length: float, name: str):
        if removal is None:
            return None
        width = self.require_non_negative(removal.width_m, f"{name}.width_m")
        thickness = self.require_non_negative(removal.thickness_m, f"{name}.thickness_m")
        return width * thickness * length

    def _backfill(self, backfill, length: float):
        if backfill is None:
            return None
        width = self.require_non_negative(backfill.width_m, "backfill.width_m")
        depth = self.require_non_negative(backfill.depth_m, "backfill.depth_m")
        return width * depth * length
