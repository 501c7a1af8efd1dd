# Soil and material factor tables. Source: Mattos, "Manual de Terraplenagem"
# (earthwork swell/shrink), manufacturer datasheets (conduit densities)

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .errors import UnknownFactorKey

# Swell (empolamento): loose volume over in-situ volume, minus one
SOIL_EXPANSION_RATES = MappingProxyType({
    "clay": 0.40,
    "sand": 0.12,
    "rock": 0.50,
    "mixed": 0.25,
})

# Shrink: compacted volume deficit against in-situ volume
SOIL_CONTRACTION_RATES = MappingProxyType({
    "normal": 0.10,
    "high": 0.20,
})

# Conduit material densities (kg/m³)
CONDUIT_DENSITIES = MappingProxyType({
    "PVC": 1440.0,
    "HDPE": 950.0,
    "Steel": 7850.0,
    "Aluminum": 2700.0,
    "Fiber Optic": 1600.0,
    "Copper": 8960.0,
})


@dataclass(frozen=True)
class FactorTables:
    """Bundle of lookup tables handed to calculators. Immutable after creation."""

    expansion_rates: Mapping[str, float] = field(default_factory=lambda: SOIL_EXPANSION_RATES)
    contraction_rates: Mapping[str, float] = field(default_factory=lambda: SOIL_CONTRACTION_RATES)
    conduit_densities: Mapping[str, float] = field(default_factory=lambda: CONDUIT_DENSITIES)

    def expansion_rate(self, soil_type: str) -> float:
        """Default swell rate for a soil type."""
        return _lookup(self.expansion_rates, soil_type, "soil_type")

    def contraction_rate(self, contraction_type: str = "normal") -> float:
        """Default shrink rate for a normal/high contraction selector."""
        return _lookup(self.contraction_rates, contraction_type, "contraction_type")

    def conduit_density(self, material: str) -> float:
        """Material density in kg/m³."""
        return _lookup(self.conduit_densities, material, "material")


def _lookup(table: Mapping[str, float], key: str, field_name: str) -> float:
    # Unknown keys raise; never default to zero
    if key not in table:
        raise UnknownFactorKey(
            f"No {field_name} factor for '{key}'. Available: {sorted(table.keys())}",
            field=field_name, actual=key, expected=sorted(table.keys()),
        )
    return table[key]


DEFAULT_FACTORS = FactorTables()
