import logging
from dataclasses import MISSING, dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.converters import camel_to_snake, to_bool, to_float, to_int, sqft_to_sqm
from core.components import Season
from core.errors import ValidationError
from core.models import BuildingInput, FlatType

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("building_height", "number_of_floors", "passenger_lifts")


@dataclass(frozen=True)
class ElectricalInputs:
    """
    Project-level electrical inputs. Every optional field carries its named default.

    building_height, number_of_floors and passenger_lifts are required, and a
    zero counts as missing: a project with no passenger lift is rejected with a
    ValidationError naming the field.
    """

    building_height: float
    number_of_floors: int
    passenger_lifts: int

    # Site classification
    area_type: str = "URBAN"
    premise_type: str = "RESIDENTIAL"
    total_carpet_area: float = 0.0  # sq.m
    building_count: int = 1

    # Lighting
    gf_entrance_lobby: float = 100.0  # sq.m
    typical_floor_lobby: float = 30.0  # sq.m per floor
    terrace_lighting: bool = False
    terrace_area: float = 200.0
    landscape_lighting: bool = False
    landscape_lighting_load: float = 10.0  # kW

    # Lifts
    passenger_fire_lifts: int = 0
    firemen_lifts: int = 0

    # HVAC & ventilation
    lobby_type: str = ""  # "AC" | "Mech. Vent" | ""
    mechanical_ventilation: bool = False
    ventilation_cfm: float = 5000.0
    ventilation_fans: int = 4

    # Pressurization
    number_of_staircases: int = 2
    fire_lobby_pressurization_systems: int = 1

    # Building PHE
    booster_pump_flow: float = 0.0  # LPM
    booster_pump_set: str = "1W+1S"
    sewage_pump_capacity: float = 0.0  # LPM
    sewage_pump_set: int = 2

    # Building fire fighting; None means "decide from building height"
    wet_riser_pump: Optional[bool] = None
    wet_riser_pump_power: float = 11.0  # kW

    # Other building loads
    security_system_load: float = 2.0  # kW
    small_power_load: float = 5.0  # kW

    # Society fire fighting
    main_pump_flow: float = 2850.0  # LPM
    fbt_pump_set_type: str = "Main+SBY+Jky"
    sprinkler_pump_flow: float = 0.0
    sprinkler_pump_set: str = "Main+SBY+Jky"

    # Society PHE and infrastructure
    dom_transfer_flow: float = 0.0
    dom_transfer_config: str = "1W+1S"
    stp_capacity: float = 0.0  # KLD
    clubhouse_load: float = 0.0  # kW
    ev_charger_count: int = 0
    ev_charger_type: str = "fast"
    street_lighting_load: float = 0.0  # kW

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ElectricalInputs":
        """Accepts camelCase or snake_case keys. Unknown keys are ignored."""
        normalized = {camel_to_snake(str(k)): v for k, v in data.items()}
        unknown = set(normalized) - {f.name for f in fields(cls)}
        if unknown:
            logger.debug("Ignoring unknown input keys: %s", ", ".join(sorted(unknown)))
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = normalized.get(f.name)
            try:
                values[f.name] = _parse_field(f.type, raw, f.default)
            except (TypeError, ValueError):
                raise ValidationError(_camel(f.name), f"Invalid value for {_camel(f.name)}: {raw!r}")
        for name in REQUIRED_FIELDS:
            # Zero is as unusable as absent for these.
            if not values.get(name):
                raise ValidationError(_camel(name))
        values["area_type"] = (values["area_type"] or "URBAN").upper()
        values["premise_type"] = (values["premise_type"] or "RESIDENTIAL").upper()
        return cls(**values)

    def with_building(self, **overrides) -> "ElectricalInputs":
        """Copy with per-building geometry applied."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update({k: v for k, v in overrides.items() if v})
        return ElectricalInputs(**current)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.capitalize() for p in rest)


def _parse_field(ftype, raw, default):
    fallback = None if default is MISSING else default
    if ftype is bool or ftype == Optional[bool]:
        return to_bool(raw, fallback)
    if ftype is int:
        return to_int(raw, fallback)
    if ftype is float:
        return to_float(raw, fallback)
    if raw is None:
        return fallback
    return str(raw).strip() or fallback


def parse_inputs(inputs) -> ElectricalInputs:
    if isinstance(inputs, ElectricalInputs):
        return inputs
    if inputs is None:
        raise ValidationError("buildingHeight")
    return ElectricalInputs.from_mapping(inputs)


def parse_flat(data: Mapping[str, Any]) -> FlatType:
    # Areas are entered in sq.ft unless an explicit sq.m figure is supplied.
    area_sqm = to_float(data.get("area_sqm", data.get("areaSqm")))
    if area_sqm is None:
        area_sqm = sqft_to_sqm(to_float(data.get("area_sqft", data.get("areaSqft")), 0.0))
    return FlatType(
        flat_type=str(data.get("flat_type") or data.get("flatType") or "Unknown"),
        area_sqm=area_sqm,
        total_count=to_int(data.get("total_count", data.get("totalCount")), 0),
    )


def _first(data: Mapping[str, Any], *keys):
    for key in keys:
        if to_float(data.get(key), 0.0):
            return data.get(key)
    return None


def parse_building(data) -> BuildingInput:
    if isinstance(data, BuildingInput):
        return data
    return BuildingInput(
        id=data.get("id"),
        name=str(data.get("name") or ""),
        total_height_m=to_float(_first(data, "total_height_m", "totalHeightM", "height")),
        floor_count=to_int(_first(data, "floor_count", "floorCount")),
        gf_entrance_lobby=to_float(_first(data, "gf_entrance_lobby", "gfEntranceLobby")),
        typical_lobby_area=to_float(_first(
            data, "avg_typical_lobby_area", "typical_lobby_area", "typicalLobbyArea")),
        total_carpet_area=to_float(data.get("total_carpet_area", data.get("totalCarpetArea")), 0.0),
        is_twin=bool(to_bool(data.get("is_twin", data.get("isTwin")), False)),
        twin_of_building_id=data.get("twin_of_building_id", data.get("twinOfBuildingId")),
        flats=[parse_flat(f) for f in data.get("flats") or []],
    )


def parse_buildings(buildings: Optional[Iterable[Any]]) -> List[BuildingInput]:
    try:
        return [parse_building(b) for b in buildings or [] if b]
    except (TypeError, ValueError) as e:
        raise ValidationError("buildings", f"Invalid building record: {e}")


@dataclass(frozen=True)
class HVACParams:
    city: str = "MUMBAI"
    season: str = "summer"
    safety_factor: float = 1.10
    duct_loss_factor: float = 1.05
    diversity_factor: float = 1.0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "HVACParams":
        normalized = {camel_to_snake(str(k)): v for k, v in (data or {}).items()}
        try:
            season = str(normalized.get("season") or cls.season).lower()
            Season(season)
            return cls(
                city=str(normalized.get("city") or cls.city).upper(),
                season=season,
                safety_factor=to_float(normalized.get("safety_factor"), cls.safety_factor),
                duct_loss_factor=to_float(normalized.get("duct_loss_factor"), cls.duct_loss_factor),
                diversity_factor=to_float(normalized.get("diversity_factor"), cls.diversity_factor),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError("params", f"Invalid HVAC parameters: {e}")
