import math
from typing import Iterable, List, Sequence

from core.components import AHUSizing, AHUZone, ChillerSizing, CoolingTowerSizing, PlantPower, RoomResult
from core.converters import GPM_TO_LPM
from standards import hvac_tables as tables


def _next_standard(value: float, sizes: Sequence[float]):
    return next((s for s in sizes if s >= value), None)


def size_chiller(total_tr: float, diversity_factor: float = 1.0) -> ChillerSizing:
    """Two working chillers plus one standby above the single-chiller limit."""
    required = total_tr * diversity_factor
    per_chiller = required / 2
    size = _next_standard(per_chiller, tables.STANDARD_CHILLER_TR) or tables.STANDARD_CHILLER_TR[-1]

    if required <= tables.SINGLE_CHILLER_MAX_TR:
        working, installed, configuration = 1, 1, "1W"
    else:
        working, installed, configuration = 2, 3, "2W + 1S"

    chiller_type, cop, iplv = next((name, c, i) for above, name, c, i in tables.CHILLER_TYPES
                                   if required > above or above == 0)
    return ChillerSizing(
        required_tr=required,
        working_chillers=working,
        number_of_chillers=installed,
        configuration=configuration,
        selected_capacity_tr=size,
        total_installed_tr=size * installed,
        chiller_type=chiller_type,
        cop_estimate=cop,
        iplv_estimate=iplv,
        power=PlantPower(
            chiller_kw=size * tables.CHILLER_KW_PER_TR,
            primary_pump_kw=size * tables.PRIMARY_PUMP_KW_PER_TR,
            secondary_pump_kw=size * tables.SECONDARY_PUMP_KW_PER_TR,
            cooling_tower_fan_kw=size * tables.CT_FAN_KW_PER_TR,
        ),
    )


def size_ahus(results: Iterable[RoomResult]) -> AHUSizing:
    zones: List[AHUZone] = [
        AHUZone(name=r.name, supply_air_cfm=r.supply_air_cfm, fresh_air_cfm=r.fresh_air_cfm, load_tr=r.room_tr)
        for r in results
    ]
    total_cfm = sum(z.supply_air_cfm for z in zones)
    fresh_cfm = sum(z.fresh_air_cfm for z in zones)

    count = 1
    if total_cfm > tables.SINGLE_AHU_MAX_CFM:
        count = int(math.ceil(total_cfm / tables.AHU_SPLIT_CFM))
    per_unit = math.ceil(total_cfm / count)
    # Beyond the catalog the unit is sized to the exact demand.
    size = _next_standard(per_unit, tables.STANDARD_AHU_CFM) or per_unit

    return AHUSizing(
        zones=zones,
        total_supply_air_cfm=total_cfm,
        total_fresh_air_cfm=fresh_cfm,
        ahu_count=count,
        ahu_capacity_cfm=size,
        fan_power_kw=size * tables.AHU_FAN_KW_PER_CFM * count,
        filter_type=tables.AHU_FILTER,
    )


def size_cooling_tower(chiller_tr: float) -> CoolingTowerSizing:
    capacity = chiller_tr * tables.CT_HEAT_REJECTION
    gpm = capacity * tables.CT_GPM_PER_TR
    return CoolingTowerSizing(
        capacity_tr=capacity,
        water_flow_gpm=gpm,
        water_flow_lpm=gpm * GPM_TO_LPM,
        approach_temp=tables.CT_APPROACH_C,
        range_temp=tables.CT_RANGE_C,
        fan_power_kw=capacity * tables.CT_FAN_KW_PER_TR,
        type="Induced Draft Cross-flow" if capacity > tables.CT_CROSSFLOW_ABOVE_TR else "Induced Draft Counter-flow",
    )
