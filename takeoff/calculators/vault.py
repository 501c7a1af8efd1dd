"""
Vault / manhole / pull box calculator.

Excavation = hole volume × quantity. The precast structure displaces part of
it; pavement removed over the footprint is hauled separately. What is left is
backfill. A structure larger than its hole would give negative backfill: that
is clamped to zero and flagged so the estimator sees the bad input.
"""

import logging

from ..config import settings
from ..errors import InconsistentInput, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables
from .base import BaseCalculator

logger = logging.getLogger(__name__)


class VaultCalculator(BaseCalculator):
    kind = "vault"

    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        assumptions = []
        self.check_points(params.coordinates, minimum=1)

        quantity = params.quantity
        if quantity < 1:
            raise OutOfRangeParameter(
                f"Vault quantity must be at least 1, got {quantity}",
                field="quantity", actual=quantity, expected=">= 1",
            )

        footprint, depth = self._hole(params, assumptions)
        excavation = footprint * depth * quantity

        if params.structure is not None:
            structure = self._structure_volume(params.structure, params.shape) * quantity
        else:
            ratio = settings.VAULT_STRUCTURE_DISPLACEMENT_RATIO
            structure = excavation * ratio
            assumptions.append("Structure envelope not given, displacement taken as %d%% of "
                               "excavation." % round(ratio * 100))

        asphalt = concrete = None
        surface = params.surface
        if surface is not None:
            if surface.asphalt_thickness_m is not None:
                thickness = self.require_non_negative(surface.asphalt_thickness_m,
                                                      "surface.asphalt_thickness_m")
                asphalt = footprint * thickness * quantity
            if surface.concrete_thickness_m is not None:
                thickness = self.require_non_negative(surface.concrete_thickness_m,
                                                      "surface.concrete_thickness_m")
                concrete = footprint * thickness * quantity

        backfill = excavation - structure - (asphalt or 0.0) - (concrete or 0.0)
        clamped = backfill < 0
        deficit = None
        if clamped:
            deficit = -backfill
            logger.warning("Vault backfill negative (%.3f m³), clamped to 0", backfill)
            assumptions.append("Structure and removals exceed excavation by %.3f m³; "
                               "backfill clamped to 0." % deficit)
            backfill = 0.0

        return {
            "quantity": quantity,
            "excavation_m3": excavation,
            "structure_m3": structure,
            "asphalt_removal_m3": asphalt,
            "concrete_removal_m3": concrete,
            "backfill_m3": backfill,
            "backfill_clamped": clamped,
            "backfill_deficit_m3": deficit,
            "assumptions": assumptions,
        }

    def _hole(self, params, assumptions: list):
        """Plan footprint (m²) and depth (m) of one hole."""
        dims = params.dimensions
        if dims is None:
            assumptions.append(
                "Vault dimensions not given, default %.2f × %.2f × %.2f m used."
                % (settings.DEFAULT_VAULT_LENGTH_M, settings.DEFAULT_VAULT_WIDTH_M,
                   settings.DEFAULT_VAULT_DEPTH_M))
            if params.shape == "circular":
                return self.circle_area(settings.DEFAULT_VAULT_WIDTH_M), settings.DEFAULT_VAULT_DEPTH_M
            return (settings.DEFAULT_VAULT_LENGTH_M * settings.DEFAULT_VAULT_WIDTH_M,
                    settings.DEFAULT_VAULT_DEPTH_M)

        depth = self.require_positive(dims.depth_m, "dimensions.depth_m")
        if params.shape == "circular":
            diameter = self._required(dims.diameter_m, "dimensions.diameter_m")
            return self.circle_area(diameter), depth

        length = self._required(dims.length_m, "dimensions.length_m")
        width = self._required(dims.width_m, "dimensions.width_m")
        return length * width, depth

    def _structure_volume(self, structure, vault_shape: str) -> float:
        height = self.require_positive(structure.height_m, "structure.height_m")
        shape = structure.shape or vault_shape
        if shape == "circular":
            diameter = self._required(structure.diameter_m, "structure.diameter_m")
            return self.circle_area(diameter) * height
        length = self._required(structure.length_m, "structure.length_m")
        width = self._required(structure.width_m, "structure.width_m")
        return length * width * height

    def _required(self, value, field: str) -> float:
        if value is None:
            raise InconsistentInput(f"{field} is required for this shape",
                                    field=field, expected="number")
        return self.require_positive(value, field)
