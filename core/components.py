from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional

from core.converters import to_bool, to_float, to_int


class Season(Enum):
    SUMMER = "summer"
    MONSOON = "monsoon"
    WINTER = "winter"


@dataclass(frozen=True)
class Wall:
    orientation: str
    area: float  # m²
    construction_type: str = "Brick Wall 230mm (plastered)"


@dataclass(frozen=True)
class Window:
    orientation: str
    area: float  # m²
    glass_type: str = "Glass (single 6mm)"
    shading: bool = False
    shading_coeff: Optional[float] = None  # 0.87 (unshaded clear glass) when None


@dataclass(frozen=True)
class Room:
    name: str
    space_type: str = "RESIDENTIAL"
    area: float = 0.0  # m²
    height: float = 3.0  # m
    occupancy: int = 0
    walls: List[Wall] = field(default_factory=list)
    windows: List[Window] = field(default_factory=list)
    roof_area: float = 0.0  # 0 unless top floor
    roof_type: str = "RCC Roof 150mm (no insulation)"
    floor_area: float = 0.0
    floor_type: str = "Floor (intermediate RCC)"
    lighting_density: Optional[float] = None  # W/m² override
    equipment_density: Optional[float] = None  # W/m² override

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Room":
        def get(snake, camel, default=None):
            return data.get(snake, data.get(camel, default))

        walls = [
            Wall(
                orientation=str(w.get("orientation", "N")).upper(),
                area=to_float(w.get("area"), 0.0),
                construction_type=w.get("construction_type") or w.get("constructionType") or Wall.construction_type,
            )
            for w in get("walls", "walls", []) or []
        ]
        windows = [
            Window(
                orientation=str(w.get("orientation", "N")).upper(),
                area=to_float(w.get("area"), 0.0),
                glass_type=w.get("glass_type") or w.get("glassType") or Window.glass_type,
                shading=bool(to_bool(w.get("shading"), False)),
                shading_coeff=to_float(w.get("shading_coeff", w.get("shadingCoeff"))),
            )
            for w in get("windows", "windows", []) or []
        ]
        return cls(
            name=str(get("name", "name", "Room")),
            space_type=str(get("space_type", "spaceType") or cls.space_type).upper(),
            area=to_float(get("area", "area"), 0.0),
            height=to_float(get("height", "height"), 3.0),
            occupancy=to_int(get("occupancy", "occupancy"), 0),
            walls=walls,
            windows=windows,
            roof_area=to_float(get("roof_area", "roofArea"), 0.0),
            roof_type=get("roof_type", "roofType") or cls.roof_type,
            floor_area=to_float(get("floor_area", "floorArea"), 0.0),
            floor_type=get("floor_type", "floorType") or cls.floor_type,
            lighting_density=to_float(get("lighting_density", "lightingDensity")),
            equipment_density=to_float(get("equipment_density", "equipmentDensity")),
        )


@dataclass(frozen=True)
class HeatGainBreakdown:
    """Room heat gains in W."""
    wall_transmission: float = 0.0
    glass_transmission: float = 0.0
    glass_solar: float = 0.0
    roof_heat_gain: float = 0.0
    floor_heat_gain: float = 0.0
    people_sensible: float = 0.0
    people_latent: float = 0.0
    lighting_load: float = 0.0
    equipment_load: float = 0.0
    vent_sensible: float = 0.0
    vent_latent: float = 0.0


@dataclass(frozen=True)
class RoomResult:
    name: str
    space_type: str
    area: float
    breakdown: HeatGainBreakdown
    total_sensible_heat_gain: float
    total_latent_heat_gain: float
    sensible_heat_ratio: float
    ventilation_load: float
    total_room_load: float  # W
    room_tr: float
    supply_air_cfm: float
    fresh_air_cfm: float


@dataclass(frozen=True)
class DesignConditions:
    city: str
    season: str
    outside_db: float
    outside_rh: float
    outside_wb: Optional[float]
    safety_factor: float
    duct_loss_factor: float
    diversity_factor: float


@dataclass(frozen=True)
class HVACSummary:
    total_sensible_heat_gain: float
    total_latent_heat_gain: float
    total_ventilation_load: float
    subtotal_load: float
    safety_factor_applied: float
    duct_loss_applied: float
    grand_total_load: float  # W
    grand_total_tr: float
    grand_total_btu: float


@dataclass(frozen=True)
class PlantPower:
    chiller_kw: float
    primary_pump_kw: float
    secondary_pump_kw: float
    cooling_tower_fan_kw: float

    @property
    def total_plant_kw(self) -> float:
        return self.chiller_kw + self.primary_pump_kw + self.secondary_pump_kw + self.cooling_tower_fan_kw


@dataclass(frozen=True)
class ChillerSizing:
    required_tr: float
    working_chillers: int
    number_of_chillers: int  # installed, standby included
    configuration: str
    selected_capacity_tr: float
    total_installed_tr: float
    chiller_type: str
    cop_estimate: float
    iplv_estimate: float
    power: PlantPower


@dataclass(frozen=True)
class AHUZone:
    name: str
    supply_air_cfm: float
    fresh_air_cfm: float
    load_tr: float


@dataclass(frozen=True)
class AHUSizing:
    zones: List[AHUZone]
    total_supply_air_cfm: float
    total_fresh_air_cfm: float
    ahu_count: int
    ahu_capacity_cfm: float
    fan_power_kw: float
    filter_type: str


@dataclass(frozen=True)
class CoolingTowerSizing:
    capacity_tr: float
    water_flow_gpm: float
    water_flow_lpm: float
    approach_temp: float
    range_temp: float
    fan_power_kw: float
    type: str
