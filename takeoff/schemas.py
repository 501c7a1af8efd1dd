"""
Measurement data model.

A Measurement is a closed tagged variant over the eight kinds, discriminated
by `type`. Every variant embeds the same header by value, the kind's input
parameters (canonical metric), the engine-computed `derived` fields and a
`display` projection of those fields in the requested unit system.

Callers treat `derived` and `display` as read-only outputs.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

MEASUREMENT_KINDS = (
    "select",
    "trench",
    "bore-shot",
    "hydro-excavation",
    "conduit",
    "vault",
    "area",
    "note",
)

# Kinds whose points carry elevation. Conduit routes may also be fully planar.
THREE_D_KINDS = ("bore-shot", "conduit")


class Point(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float
    y: float
    z: Optional[float] = None


class MeasurementHeader(BaseModel):
    id: str
    project_id: str
    label: str = ""
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None


class ParamsBase(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


# --- Trench ---

class WidthDepth(ParamsBase):
    type: Literal["constant", "variable"] = "constant"
    value_m: Optional[float] = None
    values_m: Optional[List[float]] = None  # One sample per vertex


class SoilExpansionConfig(ParamsBase):
    soil_type: str = "mixed"
    expansion_rate: Optional[float] = None
    contraction_rate: Optional[float] = None
    contraction_type: str = "normal"


class SurfaceRemoval(ParamsBase):
    width_m: float
    thickness_m: float


class Backfill(ParamsBase):
    type: str = "native_soil"
    custom_type: Optional[str] = None
    width_m: float
    depth_m: float


class TrenchParams(ParamsBase):
    coordinates: List[Point]
    width: Optional[WidthDepth] = None
    depth: Optional[WidthDepth] = None
    soil_expansion: Optional[SoilExpansionConfig] = None
    asphalt_removal: Optional[SurfaceRemoval] = None
    concrete_removal: Optional[SurfaceRemoval] = None
    backfill: Optional[Backfill] = None


# --- Bore-shot (HDD) ---

class ConduitSpec(ParamsBase):
    trade_size: Optional[str] = None
    count: int = 1
    material: str
    sdr: Optional[str] = None
    outer_diameter_mm: float
    min_curvature_radius_m: float


class BoreShotParams(ParamsBase):
    coordinates: List[Point]
    conduits: List[ConduitSpec] = []
    entry_angle_degrees: Optional[float] = None
    exit_angle_degrees: Optional[float] = None
    min_depth_guaranteed_m: Optional[float] = None
    drill_diameter_mm: Optional[float] = None
    backreamer_diameter_mm: Optional[float] = None


# --- Hydro-excavation ---

class HydroSection(ParamsBase):
    shape: Literal["circular", "rectangular"] = "circular"
    diameter_m: Optional[float] = None
    width_m: Optional[float] = None
    length_m: Optional[float] = None


class HydroConduit(ParamsBase):
    trade_size: Optional[str] = None
    count: int = 1
    material: str


class HydroExcavationParams(ParamsBase):
    subtype: Literal["trench", "hole", "potholing"] = "trench"
    coordinates: List[Point]
    section: Optional[HydroSection] = None
    depth_m: Optional[float] = None
    efficiency_ratio: Optional[float] = None
    surface_type: Optional[Literal["asphalt", "concrete", "dirt"]] = None
    include_restoration: bool = False
    conduits: List[HydroConduit] = []


# --- Conduit ---

class ConduitItem(ParamsBase):
    trade_size: Optional[str] = None
    count: int = 1
    material: str
    sdr: Optional[str] = None
    nominal_diameter_mm: float
    outer_diameter_mm: float
    wall_thickness_mm: Optional[float] = None
    length_m: Optional[float] = None
    density_kg_m3: Optional[float] = None


class ConduitConnection(ParamsBase):
    type: Literal["elbow", "tee", "reducer", "valve", "joint"]
    position_m: float
    specifications: Dict[str, Any] = {}


class ConduitParams(ParamsBase):
    coordinates: List[Point]
    conduits: List[ConduitItem] = []
    connections: List[ConduitConnection] = []
    installation_method: Optional[Literal["trench", "hdd", "direct_bury"]] = None


# --- Vault ---

class VaultDimensions(ParamsBase):
    length_m: Optional[float] = None
    width_m: Optional[float] = None
    diameter_m: Optional[float] = None
    depth_m: float


class VaultStructure(ParamsBase):
    """Outer envelope of the precast structure set in the hole."""
    shape: Optional[Literal["rectangular", "circular"]] = None
    length_m: Optional[float] = None
    width_m: Optional[float] = None
    diameter_m: Optional[float] = None
    height_m: float


class VaultSurface(ParamsBase):
    asphalt_thickness_m: Optional[float] = None
    concrete_thickness_m: Optional[float] = None


class VaultParams(ParamsBase):
    coordinates: List[Point]
    vault_type: str = "vault"  # manhole | pull_box | handhole | vault
    shape: Literal["rectangular", "circular"] = "rectangular"
    dimensions: Optional[VaultDimensions] = None
    structure: Optional[VaultStructure] = None
    surface: Optional[VaultSurface] = None
    material: Optional[str] = None
    load_class: Optional[str] = None  # e.g. "H-20"
    quantity: int = 1
    backfill_type: Optional[str] = None
    traffic_rated: Optional[bool] = None


# --- Area ---

class AreaParams(ParamsBase):
    coordinates: List[Point]
    depth_m: Optional[float] = None


# --- Select / Note ---

class DateRange(ParamsBase):
    start: datetime
    end: datetime


class SelectFilters(ParamsBase):
    type: Optional[str] = None
    date_range: Optional[DateRange] = None


class SelectParams(ParamsBase):
    selected_measurements: List[str] = []
    filters: Optional[SelectFilters] = None


class NoteParams(ParamsBase):
    text: str = ""
    author: Optional[str] = None
    date: Optional[datetime] = None
    coordinates: List[Point] = []
    linked_measurement_id: Optional[str] = None


# ============================================================
# Derived (engine-computed) fields
# ============================================================

class CrossSection(BaseModel):
    station_m: float
    width_m: float
    depth_m: float
    area_m2: float


class SoilVolumes(BaseModel):
    soil_type: str
    contraction_type: str
    expansion_rate: float
    contraction_rate: float
    volume_loose_m3: float
    volume_compacted_m3: float


class TrenchDerived(BaseModel):
    length_m: float
    volume_m3: float
    cross_sections: List[CrossSection] = []
    soil: Optional[SoilVolumes] = None
    asphalt_removal_m3: Optional[float] = None
    concrete_removal_m3: Optional[float] = None
    backfill_m3: Optional[float] = None
    assumptions: List[str] = []


class RadiusViolation(BaseModel):
    segment_index: int
    actual_radius_m: float
    required_radius_m: float


class RadiusCheck(BaseModel):
    passed: bool
    min_radius_required_m: float
    min_radius_actual_m: Optional[float] = None  # None for a straight path
    violations: List[RadiusViolation] = []


class DepthViolation(BaseModel):
    point_index: int
    actual_depth_m: float
    required_depth_m: float


class DepthCheck(BaseModel):
    passed: bool
    min_depth_required_m: float
    min_depth_actual_m: Optional[float] = None
    violations: List[DepthViolation] = []


class BoreShotValidation(BaseModel):
    passed: bool
    radius_check: RadiusCheck
    depth_check: DepthCheck


class BoreShotDerived(BaseModel):
    length_m: float
    entry_angle_degrees: float
    exit_angle_degrees: float
    min_depth_guaranteed_m: float
    drill_diameter_mm: float
    backreamer_diameter_mm: float
    reamed_volume_m3: float
    validation: BoreShotValidation
    assumptions: List[str] = []


class HydroExcavationDerived(BaseModel):
    volume_removed_m3: float
    in_place_volume_m3: float
    run_length_m: Optional[float] = None
    hole_count: int = 0
    restoration_area_m2: Optional[float] = None
    assumptions: List[str] = []


class ConduitDerived(BaseModel):
    total_length_m: float
    conduit_length_m: float
    internal_volume_m3: Optional[float] = None
    estimated_weight_kg: Optional[float] = None
    connections_by_type: Dict[str, int] = {}
    assumptions: List[str] = []


class VaultDerived(BaseModel):
    quantity: int
    excavation_m3: float
    structure_m3: float
    asphalt_removal_m3: Optional[float] = None
    concrete_removal_m3: Optional[float] = None
    backfill_m3: float
    backfill_clamped: bool = False
    backfill_deficit_m3: Optional[float] = None
    assumptions: List[str] = []


class AreaVolume(BaseModel):
    depth_m: float
    volume_m3: float


class AreaDerived(BaseModel):
    area_m2: float
    perimeter_m: float
    winding: Literal["ccw", "cw"]
    volume: Optional[AreaVolume] = None
    assumptions: List[str] = []


# ============================================================
# Measurement variants
# ============================================================

class SelectMeasurement(BaseModel):
    type: Literal["select"] = "select"
    header: MeasurementHeader
    params: SelectParams
    derived: None = None
    display: Dict[str, Any] = {}


class TrenchMeasurement(BaseModel):
    type: Literal["trench"] = "trench"
    header: MeasurementHeader
    params: TrenchParams
    derived: Optional[TrenchDerived] = None
    display: Dict[str, Any] = {}


class BoreShotMeasurement(BaseModel):
    type: Literal["bore-shot"] = "bore-shot"
    header: MeasurementHeader
    params: BoreShotParams
    derived: Optional[BoreShotDerived] = None
    display: Dict[str, Any] = {}


class HydroExcavationMeasurement(BaseModel):
    type: Literal["hydro-excavation"] = "hydro-excavation"
    header: MeasurementHeader
    params: HydroExcavationParams
    derived: Optional[HydroExcavationDerived] = None
    display: Dict[str, Any] = {}


class ConduitMeasurement(BaseModel):
    type: Literal["conduit"] = "conduit"
    header: MeasurementHeader
    params: ConduitParams
    derived: Optional[ConduitDerived] = None
    display: Dict[str, Any] = {}


class VaultMeasurement(BaseModel):
    type: Literal["vault"] = "vault"
    header: MeasurementHeader
    params: VaultParams
    derived: Optional[VaultDerived] = None
    display: Dict[str, Any] = {}


class AreaMeasurement(BaseModel):
    type: Literal["area"] = "area"
    header: MeasurementHeader
    params: AreaParams
    derived: Optional[AreaDerived] = None
    display: Dict[str, Any] = {}


class NoteMeasurement(BaseModel):
    type: Literal["note"] = "note"
    header: MeasurementHeader
    params: NoteParams
    derived: None = None
    display: Dict[str, Any] = {}


Measurement = Annotated[
    Union[
        SelectMeasurement,
        TrenchMeasurement,
        BoreShotMeasurement,
        HydroExcavationMeasurement,
        ConduitMeasurement,
        VaultMeasurement,
        AreaMeasurement,
        NoteMeasurement,
    ],
    Field(discriminator="type"),
]

measurement_adapter = TypeAdapter(Measurement)

MEASUREMENT_MODELS = {
    "select": SelectMeasurement,
    "trench": TrenchMeasurement,
    "bore-shot": BoreShotMeasurement,
    "hydro-excavation": HydroExcavationMeasurement,
    "conduit": ConduitMeasurement,
    "vault": VaultMeasurement,
    "area": AreaMeasurement,
    "note": NoteMeasurement,
}

PARAMS_MODELS = {
    "select": SelectParams,
    "trench": TrenchParams,
    "bore-shot": BoreShotParams,
    "hydro-excavation": HydroExcavationParams,
    "conduit": ConduitParams,
    "vault": VaultParams,
    "area": AreaParams,
    "note": NoteParams,
}

DERIVED_MODELS = {
    "trench": TrenchDerived,
    "bore-shot": BoreShotDerived,
    "hydro-excavation": HydroExcavationDerived,
    "conduit": ConduitDerived,
    "vault": VaultDerived,
    "area": AreaDerived,
}
