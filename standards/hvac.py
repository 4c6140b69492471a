import logging
from typing import Dict, Iterable, List

from core.components import HeatGainBreakdown, HVACSummary, Room, RoomResult
from core.converters import W_TO_BTU_HR, lps_to_cfm, watts_to_tr
from standards import hvac_tables as tables

logger = logging.getLogger(__name__)


def outside_conditions(city: str, season: str) -> Dict[str, float]:
    by_season = tables.DESIGN_CONDITIONS.get((city or "").upper()) or tables.DESIGN_CONDITIONS["DEFAULT"]
    return by_season.get(season) or by_season["summer"]


def indoor_conditions(space_type: str) -> Dict[str, float]:
    return tables.INDOOR_CONDITIONS.get(space_type) or tables.INDOOR_CONDITIONS["RESIDENTIAL"]


def _u_value(construction: str, default: float) -> float:
    u = tables.U_VALUES.get(construction)
    if u is None:
        logger.debug("Unknown construction '%s', using U=%.2f", construction, default)
        return default
    return u


def _density(override, table: Dict[str, float], space_type: str, default: float) -> float:
    if override is not None:
        return override
    return table.get(space_type) or default


def calculate_room(room: Room, outside: Dict[str, float], season: str) -> RoomResult:
    """
    Cooling load of one room in W (CLTD-style, simplified).
    Transmission uses U × A × ΔT; roof adds a sol-air allowance, floors take 30% of ΔT.
    """
    indoor = indoor_conditions(room.space_type)
    delta_t = outside["db"] - indoor["db"]

    walls = sum(_u_value(w.construction_type, tables.DEFAULT_WALL_U) * w.area * delta_t for w in room.walls)

    glass_transmission = 0.0
    glass_solar = 0.0
    for window in room.windows:
        glass_transmission += _u_value(window.glass_type, tables.DEFAULT_GLASS_U) * window.area * delta_t
        shgf = tables.SOLAR_HEAT_GAIN.get(window.orientation, {}).get(season) or tables.DEFAULT_SHGF
        sc = window.shading_coeff or tables.DEFAULT_SHADING_COEFF
        reduction = tables.SHADED_REDUCTION if window.shading else 1.0
        glass_solar += shgf * window.area * sc * reduction

    roof = 0.0
    if room.roof_area > 0:
        roof_u = _u_value(room.roof_type, tables.DEFAULT_ROOF_U)
        roof = roof_u * room.roof_area * (delta_t + tables.ROOF_SOL_AIR_ALLOWANCE)

    floor = 0.0
    if room.floor_area > 0:
        floor_u = _u_value(room.floor_type, tables.DEFAULT_FLOOR_U)
        floor = floor_u * room.floor_area * delta_t * tables.FLOOR_DELTA_T_FRACTION

    sensible_per_person, latent_per_person = (tables.OCCUPANCY_HEAT.get(room.space_type)
                                              or tables.OCCUPANCY_HEAT[tables.DEFAULT_OCCUPANCY_SPACE])
    people_sensible = room.occupancy * sensible_per_person
    people_latent = room.occupancy * latent_per_person

    lighting = _density(room.lighting_density, tables.LIGHTING_POWER_DENSITY, room.space_type,
                        tables.DEFAULT_LPD) * room.area
    equipment = _density(room.equipment_density, tables.EQUIPMENT_POWER_DENSITY, room.space_type,
                         tables.DEFAULT_EPD) * room.area

    rate = tables.VENTILATION_RATES.get(room.space_type) or tables.DEFAULT_VENTILATION_RATE
    fresh_air_lps = rate * room.occupancy
    vent_sensible = tables.VENT_SENSIBLE_FACTOR * fresh_air_lps * delta_t
    # Simplified moisture term: RH difference stands in for the humidity ratio difference.
    vent_latent = tables.VENT_LATENT_FACTOR * fresh_air_lps * ((outside["rh"] - indoor["rh"]) / 100) * 0.01
    ventilation = vent_sensible + abs(vent_latent)

    sensible = walls + glass_transmission + glass_solar + roof + floor + people_sensible + lighting + equipment
    latent = people_latent
    total = sensible + latent + ventilation
    shr = sensible / (sensible + latent) if sensible + latent else 0.0
    supply_cfm = sensible * W_TO_BTU_HR / (1.08 * tables.SUPPLY_AIR_DELTA_T * 1.8)

    return RoomResult(
        name=room.name,
        space_type=room.space_type,
        area=room.area,
        breakdown=HeatGainBreakdown(
            wall_transmission=walls,
            glass_transmission=glass_transmission,
            glass_solar=glass_solar,
            roof_heat_gain=roof,
            floor_heat_gain=floor,
            people_sensible=people_sensible,
            people_latent=people_latent,
            lighting_load=lighting,
            equipment_load=equipment,
            vent_sensible=vent_sensible,
            vent_latent=abs(vent_latent),
        ),
        total_sensible_heat_gain=sensible,
        total_latent_heat_gain=latent,
        sensible_heat_ratio=shr,
        ventilation_load=ventilation,
        total_room_load=total,
        room_tr=watts_to_tr(total),
        supply_air_cfm=supply_cfm,
        fresh_air_cfm=lps_to_cfm(fresh_air_lps),
    )


def calculate_rooms(rooms: Iterable[Room], outside: Dict[str, float], season: str) -> List[RoomResult]:
    return [calculate_room(room, outside, season) for room in rooms]


def summarize(results: Iterable[RoomResult], safety_factor: float = 1.10,
              duct_loss_factor: float = 1.05) -> HVACSummary:
    results = list(results)
    sensible = sum(r.total_sensible_heat_gain for r in results)
    latent = sum(r.total_latent_heat_gain for r in results)
    ventilation = sum(r.ventilation_load for r in results)
    subtotal = sensible + latent + ventilation
    grand = subtotal * safety_factor * duct_loss_factor
    return HVACSummary(
        total_sensible_heat_gain=sensible,
        total_latent_heat_gain=latent,
        total_ventilation_load=ventilation,
        subtotal_load=subtotal,
        safety_factor_applied=safety_factor,
        duct_loss_applied=duct_loss_factor,
        grand_total_load=grand,
        grand_total_tr=watts_to_tr(grand),
        grand_total_btu=grand * W_TO_BTU_HR,
    )
