import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional

from core.components import (
    AHUSizing, ChillerSizing, CoolingTowerSizing, DesignConditions, HVACSummary, Room, RoomResult,
)
from core.converters import to_camel_dict
from core.errors import Diagnostic, ValidationError
from core.inputs import HVACParams, parse_buildings, parse_inputs
from core.models import AggregateTotals, BuildingBreakdown, LoadCategory, RegulatoryComplianceResult
from standards import hvac
from standards.aggregation import (
    aggregate_from_breakdowns, aggregate_representative, calculate_building_breakdown, has_building_metadata,
    merge_categories, merge_flat_loads, resolve_twins,
)
from standards.compliance import TRANSFORMER_SIZING, calculate_regulatory_compliance, regulation_gaps
from standards.electrical import FlatLoadCalculator, calculate_building_ca_loads, calculate_society_ca_loads
from standards.hvac_sizing import size_ahus, size_chiller, size_cooling_tower
from standards.regulations import Framework, RegulationContext

logger = logging.getLogger(__name__)


@dataclass
class ElectricalLoadResult:
    building_ca_loads: List[LoadCategory]
    flat_loads: LoadCategory
    society_ca_loads: List[LoadCategory]
    totals: AggregateTotals
    building_breakdowns: List[BuildingBreakdown]
    regulatory_compliance: RegulatoryComplianceResult
    area_type: str
    regulatory_framework: Framework
    diagnostics: List[Diagnostic]

    @property
    def approximate(self) -> bool:
        return self.regulatory_compliance.approximate

    def to_dict(self) -> Dict[str, Any]:
        data = to_camel_dict(self)
        # Acronym key kept as the front-end expects it.
        data["buildingCALoads"] = data.pop("buildingCaLoads")
        data["societyCALoads"] = data.pop("societyCaLoads")
        return data


@dataclass
class HVACLoadResult:
    design_conditions: DesignConditions
    room_results: List[RoomResult]
    summary: HVACSummary
    chiller_sizing: ChillerSizing
    ahu_sizing: AHUSizing
    cooling_tower_sizing: CoolingTowerSizing

    def to_dict(self) -> Dict[str, Any]:
        return to_camel_dict(self)


def calculate_electrical_load(inputs, buildings: Optional[Iterable[Any]] = None,
                              context: Optional[RegulationContext] = None, project_id=None) -> ElectricalLoadResult:
    """
    Full electrical load calculation for a project: building and flat loads,
    society loads, multi-building totals and regulatory compliance.

    The context caches factors and regulations for this one calculation; pass
    a fresh one per project.
    """
    inputs = parse_inputs(inputs)
    buildings = resolve_twins(parse_buildings(buildings))
    if context is None:
        context = RegulationContext(project_id=project_id)
    regulations = context.load_regulations(project_id)
    power_factor = regulations.power_factor(TRANSFORMER_SIZING)

    society_loads = calculate_society_ca_loads(inputs, context)

    if buildings and has_building_metadata(buildings):
        multiplier = regulations.building_diversity_multiplier(inputs.area_type)
        breakdowns = [calculate_building_breakdown(b, inputs, context, multiplier) for b in buildings]
        building_loads = merge_categories([b.building_ca_loads for b in breakdowns])
        flat_loads = merge_flat_loads([b.flat_loads for b in breakdowns])
        totals = aggregate_from_breakdowns(breakdowns, society_loads, power_factor)
        carpet_area = inputs.total_carpet_area or sum(b.carpet_area for b in breakdowns)
    else:
        count = max(len(buildings), inputs.building_count, 1)
        breakdowns = []
        building_loads = calculate_building_ca_loads(inputs, context)
        flat_loads = LoadCategory(FlatLoadCalculator.category)
        totals = aggregate_representative(building_loads, society_loads, count, power_factor)
        carpet_area = inputs.total_carpet_area
        context.record("Approximation",
                       f"No per-building geometry given; one representative building multiplied by {count}")

    compliance = calculate_regulatory_compliance(
        regulations, totals, inputs.area_type, carpet_area, totals.number_of_buildings, inputs.premise_type)
    compliance = replace(
        compliance,
        warnings=compliance.warnings + context.warnings(),
        approximate=compliance.approximate or context.approximate,
    )
    gaps = regulation_gaps(regulations, inputs.area_type, inputs.premise_type, totals.number_of_buildings)

    logger.info("Electrical load: %d building(s), TCL %.2f kW, max demand %.2f kW, transformer %d kVA",
                totals.number_of_buildings, totals.grand.tcl, totals.grand.max_demand,
                totals.standard_transformer_kva)
    return ElectricalLoadResult(
        building_ca_loads=building_loads,
        flat_loads=flat_loads,
        society_ca_loads=society_loads,
        totals=totals,
        building_breakdowns=breakdowns,
        regulatory_compliance=compliance,
        area_type=inputs.area_type,
        regulatory_framework=regulations.primary_framework,
        diagnostics=list(context.diagnostics) + [Diagnostic("RegulationUnavailable", gap) for gap in gaps],
    )


def _parse_rooms(rooms) -> List[Room]:
    try:
        return [r if isinstance(r, Room) else Room.from_mapping(r) for r in rooms or []]
    except (AttributeError, TypeError, ValueError) as e:
        raise ValidationError("rooms", f"Invalid room record: {e}")


def calculate_hvac_load(params, rooms) -> HVACLoadResult:
    params = params if isinstance(params, HVACParams) else HVACParams.from_mapping(params)
    rooms = _parse_rooms(rooms)
    outside = hvac.outside_conditions(params.city, params.season)

    results = hvac.calculate_rooms(rooms, outside, params.season)
    summary = hvac.summarize(results, params.safety_factor, params.duct_loss_factor)
    chiller = size_chiller(summary.grand_total_tr, params.diversity_factor)

    logger.info("HVAC load: %d room(s), %.2f TR, chillers %s x %s TR",
                len(results), summary.grand_total_tr, chiller.configuration, chiller.selected_capacity_tr)
    return HVACLoadResult(
        design_conditions=DesignConditions(
            city=params.city,
            season=params.season,
            outside_db=outside["db"],
            outside_rh=outside["rh"],
            outside_wb=outside.get("wb"),
            safety_factor=params.safety_factor,
            duct_loss_factor=params.duct_loss_factor,
            diversity_factor=params.diversity_factor,
        ),
        room_results=results,
        summary=summary,
        chiller_sizing=chiller,
        ahu_sizing=size_ahus(results),
        cooling_tower_sizing=size_cooling_tower(chiller.selected_capacity_tr),
    )
