from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AggregationMode(Enum):
    PER_BUILDING = "PER_BUILDING"
    # One building calculated and multiplied by the building count.
    REPRESENTATIVE_BUILDING = "REPRESENTATIVE_BUILDING"


class PremiseType(Enum):
    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL_AC = "COMMERCIAL_AC"
    COMMERCIAL_NO_AC = "COMMERCIAL_NO_AC"


@dataclass(frozen=True)
class FactorKey:
    category: str
    sub_category: str
    description: str

    @classmethod
    def of(cls, category: str, sub_category: Optional[str], description: str) -> "FactorKey":
        return cls(category, sub_category or "default", description)

    def __str__(self) -> str:
        return f"{self.category}/{self.sub_category}/{self.description}"


@dataclass(frozen=True)
class LoadFactor:
    category: str
    sub_category: str
    description: str
    watt_per_sqm: Optional[float] = None  # None when the factor carries no density
    mdf: float = 0.5
    edf: float = 0.5
    fdf: float = 0.0
    notes: str = ""
    guideline: str = ""

    @property
    def key(self) -> FactorKey:
        return FactorKey.of(self.category, self.sub_category, self.description)


@dataclass(frozen=True)
class LoadTotals:
    tcl: float = 0.0
    max_demand: float = 0.0
    essential: float = 0.0
    fire: float = 0.0

    def __add__(self, other: "LoadTotals") -> "LoadTotals":
        return LoadTotals(
            self.tcl + other.tcl,
            self.max_demand + other.max_demand,
            self.essential + other.essential,
            self.fire + other.fire,
        )

    def scaled(self, multiplier: float) -> "LoadTotals":
        return LoadTotals(
            self.tcl * multiplier,
            self.max_demand * multiplier,
            self.essential * multiplier,
            self.fire * multiplier,
        )


@dataclass(frozen=True)
class LoadItem:
    description: str
    tcl: float  # kW
    nos: float = 1
    kw_per_unit: Optional[float] = None
    watt_per_sqm: Optional[float] = None
    area_sqm: Optional[float] = None
    watt_per_fixture: Optional[float] = None
    mdf: Optional[float] = None
    edf: Optional[float] = None
    fdf: Optional[float] = None
    max_demand_kw: float = 0.0
    essential_kw: float = 0.0
    fire_kw: float = 0.0
    details: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class LoadCategory:
    name: str
    items: List[LoadItem] = field(default_factory=list)

    # Totals are derived from the items so they can never drift from them.
    @property
    def total_tcl(self) -> float:
        return sum(item.tcl for item in self.items)

    @property
    def total_max_demand(self) -> float:
        return sum(item.max_demand_kw for item in self.items)

    @property
    def total_essential(self) -> float:
        return sum(item.essential_kw for item in self.items)

    @property
    def total_fire(self) -> float:
        return sum(item.fire_kw for item in self.items)

    @property
    def totals(self) -> LoadTotals:
        return LoadTotals(self.total_tcl, self.total_max_demand, self.total_essential, self.total_fire)

    def item(self, description: str) -> Optional[LoadItem]:
        for item in self.items:
            if item.description == description:
                return item
        return None


@dataclass(frozen=True)
class FlatType:
    flat_type: str
    area_sqm: float
    total_count: int


@dataclass(frozen=True)
class BuildingInput:
    id: Optional[Any] = None
    name: str = ""
    total_height_m: Optional[float] = None
    floor_count: Optional[int] = None
    gf_entrance_lobby: Optional[float] = None
    typical_lobby_area: Optional[float] = None
    total_carpet_area: float = 0.0
    is_twin: bool = False
    twin_of_building_id: Optional[Any] = None  # reference only, never owned
    flats: List[FlatType] = field(default_factory=list)

    @property
    def has_metadata(self) -> bool:
        return bool(self.floor_count) or bool(self.total_height_m)


@dataclass(frozen=True)
class BuildingBreakdown:
    building_id: Optional[Any]
    building_name: str
    building_height: float
    number_of_floors: int
    carpet_area: float
    building_ca_loads: List[LoadCategory]
    flat_loads: LoadCategory
    totals: LoadTotals
    total_units: int
    diversity_factor: float
    is_twin: bool = False
    twin_of_building_id: Optional[Any] = None


@dataclass(frozen=True)
class AggregateTotals:
    building: LoadTotals
    society: LoadTotals
    grand: LoadTotals
    number_of_buildings: int
    mode: AggregationMode
    transformer_kva: int
    standard_transformer_kva: int

    @property
    def approximate(self) -> bool:
        return self.mode is AggregationMode.REPRESENTATIVE_BUILDING


# --- Regulatory compliance results ---

@dataclass(frozen=True)
class MinimumLoad:
    required_kw: float
    carpet_area: float
    premise_type: str
    watt_per_sqm: Optional[float]
    applied: bool


@dataclass(frozen=True)
class SanctionedLoad:
    """Billing figure. Never diversity-adjusted."""
    total_connected_load_kw: float
    sanctioned_load_kw: float
    sanctioned_load_kva: float
    power_factor: float


@dataclass(frozen=True)
class LoadAfterDiversity:
    """Infrastructure sizing figure only."""
    max_demand_kw: float
    max_demand_kva: float
    essential_kw: float
    fire_kw: float
    power_factor: float


@dataclass(frozen=True)
class LimitValidation:
    valid: bool
    limit_type: Optional[str] = None
    max_kw: Optional[float] = None
    max_kva: Optional[float] = None
    exceeds_kw_limit: bool = False
    exceeds_kva_limit: bool = False
    warnings: List[str] = field(default_factory=list)
    description: str = ""


@dataclass(frozen=True)
class DTCRequirement:
    needed: bool
    reason: Optional[str] = None
    threshold_kva: Optional[float] = None
    load_after_df_kva: float = 0.0
    dtc_count: int = 0
    capacity_per_unit_kva: float = 0.0
    total_capacity_kva: float = 0.0
    land_required_sqm: float = 0.0
    action: str = ""
    individual_transformer_required: bool = False
    ring_main_required: bool = False


@dataclass(frozen=True)
class SubstationRequirement:
    needed: bool
    load_after_df_mva: float = 0.0
    reason: Optional[str] = None
    substation_type: str = ""
    incoming_feeders: Optional[int] = None
    feeder_capacity_mva: Optional[float] = None
    special_requirements: List[str] = field(default_factory=list)
    land_required_sqm: Optional[float] = None
    description: str = ""


@dataclass(frozen=True)
class LandItem:
    type: str
    total_land_sqm: float
    count: int = 1
    land_per_unit_sqm: Optional[float] = None
    detail: str = ""


@dataclass(frozen=True)
class LandRequirement:
    total_sqm: float
    breakdown: List[LandItem] = field(default_factory=list)
    unit: str = "sq.m"


@dataclass(frozen=True)
class LeaseSummary:
    duration: str
    annual_rent: str
    upfront_payment: str
    encumbrance_free: bool
    registration_required: bool
    surrender_notice: str


@dataclass(frozen=True)
class RegulatoryComplianceResult:
    minimum_load: MinimumLoad
    sanctioned_load: SanctionedLoad
    load_after_df: LoadAfterDiversity
    validation: LimitValidation
    dtc: DTCRequirement
    substation: SubstationRequirement
    land: LandRequirement
    lease: Optional[LeaseSummary]
    area_type: str
    framework: str
    warnings: List[str] = field(default_factory=list)
    approximate: bool = False
