"""
Abstract base class for all measurement-kind calculators.

Input: the kind's params model (canonical metric units, see schemas.py)
Output: derived-fields dict matching the kind's *Derived model
"""

import logging
import math
from abc import ABC, abstractmethod

from ..config import settings
from ..errors import InconsistentInput, InsufficientPoints, OutOfRangeParameter
from ..factors import DEFAULT_FACTORS, FactorTables

logger = logging.getLogger(__name__)


class BaseCalculator(ABC):
    """All measurement-kind calculators inherit from this."""

    kind = None
    three_d = False  # Points carry elevation (z)
    planar_allowed = False  # A three_d kind may omit z on every point

    @abstractmethod
    def compute(self, params, factors: FactorTables = DEFAULT_FACTORS) -> dict:
        """
        Takes the parsed params for one measurement.
        Returns the derived fields as a dict. Must be pure: identical
        inputs always give identical outputs.
        """
        pass

    def normalize(self, params):
        """Tidy parsed params before they are stored. Identity by default."""
        return params

    # --- Helper methods for all calculators ---

    def check_points(self, points, field: str = "coordinates", minimum: int = 0):
        """Enforce the elevation invariant and a minimum point count."""
        if len(points) < minimum:
            raise InsufficientPoints(
                f"{self.kind} {field} needs at least {minimum} points, got {len(points)}",
                field=field, actual=len(points), expected=minimum,
            )
        if self.three_d and self.planar_allowed and all(p.z is None for p in points):
            return
        for i, p in enumerate(points):
            if self.three_d and p.z is None:
                raise InconsistentInput(
                    f"{self.kind} point {i} has no elevation (z)",
                    field=f"{field}[{i}].z", index=i, expected="number",
                )
            if not self.three_d and p.z is not None:
                raise InconsistentInput(
                    f"{self.kind} is planar but point {i} carries z",
                    field=f"{field}[{i}].z", index=i, actual=p.z, expected=None,
                )

    def require_non_negative(self, value: float, field: str, index: int = None) -> float:
        """Reject negative lengths, depths, rates."""
        if value is None or not math.isfinite(value) or value < 0:
            raise OutOfRangeParameter(
                f"{field} must be a finite value >= 0, got {value}",
                field=field, index=index, actual=value, expected=">= 0",
            )
        return value

    def require_positive(self, value: float, field: str, index: int = None) -> float:
        """Reject zero or negative dimensions."""
        if value is None or not math.isfinite(value) or value <= 0:
            raise OutOfRangeParameter(
                f"{field} must be a finite value > 0, got {value}",
                field=field, index=index, actual=value, expected="> 0",
            )
        return value

    def require_range(self, value: float, low: float, high: float, field: str) -> float:
        """Reject values outside [low, high]."""
        if value is None or not math.isfinite(value) or value < low or value > high:
            raise OutOfRangeParameter(
                f"{field} must be between {low} and {high}, got {value}",
                field=field, actual=value, expected=[low, high],
            )
        return value

    def default(self, value, fallback, field: str, assumptions: list, unit: str = ""):
        """Return value, or fallback with a note in assumptions."""
        if value is not None:
            return value
        logger.debug("%s: %s defaulted to %s%s", self.kind, field, fallback, unit)
        assumptions.append("%s not given, default %s%s used." % (field, fallback, unit))
        return fallback

    def circle_area(self, diameter: float) -> float:
        """Area of a circle from its diameter."""
        radius = diameter / 2.0
        return math.pi * radius * radius

    def mm_to_m(self, value_mm: float) -> float:
        """Millimetres to metres."""
        return value_mm / 1000.0

    @property
    def epsilon(self) -> float:
        return settings.GEOMETRY_EPSILON
