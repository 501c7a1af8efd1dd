"""
Calculator registry: maps measurement `type` strings to calculator classes.

The set is closed. Every kind in schemas.MEASUREMENT_KINDS has exactly one
entry; adding a kind means adding its params/derived models and a line here.
"""

from ..errors import UnknownMeasurementKind
from .annotation import NoteCalculator, SelectCalculator
from .area import AreaCalculator
from .base import BaseCalculator
from .bore_shot import BoreShotCalculator
from .conduit import ConduitCalculator
from .hydro_excavation import HydroExcavationCalculator
from .trench import TrenchCalculator
from .vault import VaultCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "select": SelectCalculator,
    "trench": TrenchCalculator,
    "bore-shot": BoreShotCalculator,
    "hydro-excavation": HydroExcavationCalculator,
    "conduit": ConduitCalculator,
    "vault": VaultCalculator,
    "area": AreaCalculator,
    "note": NoteCalculator,
}


def get_calculator(kind: str) -> BaseCalculator:
    """Returns an instance of the calculator for a measurement kind, or raises UnknownMeasurementKind."""
    if not has_calculator(kind):
        raise UnknownMeasurementKind(
            f"No calculator registered for measurement type: {kind}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}",
            field="type", actual=kind, expected=list(CALCULATOR_REGISTRY.keys()),
        )
    return CALCULATOR_REGISTRY[kind]()


def has_calculator(kind: str) -> bool:
    """Check if a calculator exists for a measurement kind. Non-string kinds never match."""
    return isinstance(kind, str) and kind in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    """List all registered measurement kinds."""
    return list(CALCULATOR_REGISTRY.keys())
