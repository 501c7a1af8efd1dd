"""
Factor table tests: published defaults, immutability, unknown keys.
"""

import pytest

from takeoff.errors import UnknownFactorKey
from takeoff.factors import (
    CONDUIT_DENSITIES,
    DEFAULT_FACTORS,
    SOIL_EXPANSION_RATES,
    FactorTables,
)


def test_soil_expansion_defaults():
    assert DEFAULT_FACTORS.expansion_rate("clay") == 0.40
    assert DEFAULT_FACTORS.expansion_rate("sand") == 0.12
    assert DEFAULT_FACTORS.expansion_rate("rock") == 0.50
    assert DEFAULT_FACTORS.expansion_rate("mixed") == 0.25


def test_soil_contraction_defaults():
    assert DEFAULT_FACTORS.contraction_rate() == 0.10
    assert DEFAULT_FACTORS.contraction_rate("high") == 0.20


def test_conduit_densities():
    assert DEFAULT_FACTORS.conduit_density("PVC") == 1440.0
    assert DEFAULT_FACTORS.conduit_density("HDPE") == 950.0
    assert DEFAULT_FACTORS.conduit_density("Steel") == 7850.0
    assert DEFAULT_FACTORS.conduit_density("Copper") == 8960.0


def test_unknown_keys_raise_instead_of_zero():
    with pytest.raises(UnknownFactorKey) as exc:
        DEFAULT_FACTORS.expansion_rate("peat")
    assert exc.value.field == "soil_type"
    assert "clay" in exc.value.expected

    with pytest.raises(UnknownFactorKey):
        DEFAULT_FACTORS.contraction_rate("extreme")
    with pytest.raises(UnknownFactorKey):
        DEFAULT_FACTORS.conduit_density("Other")


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        SOIL_EXPANSION_RATES["clay"] = 0.0
    with pytest.raises(TypeError):
        CONDUIT_DENSITIES["Lead"] = 11340.0


def test_injected_tables_override_defaults():
    tables = FactorTables(expansion_rates={"loam": 0.30})
    assert tables.expansion_rate("loam") == 0.30
    assert tables.contraction_rate("normal") == 0.10
    with pytest.raises(UnknownFactorKey):
        tables.expansion_rate("clay")
