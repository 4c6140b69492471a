import logging
import math
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from core.inputs import ElectricalInputs
from core.models import (
    AggregateTotals, AggregationMode, BuildingBreakdown, BuildingInput, LoadCategory, LoadItem, LoadTotals,
)
from standards import msedcl_tables as tables
from standards.demand import sum_totals
from standards.electrical import FlatLoadCalculator, calculate_building_ca_loads, calculate_flat_loads

logger = logging.getLogger(__name__)


def _accumulate(existing: LoadItem, item: LoadItem) -> LoadItem:
    # Quantities and loads add up; unit rates stay those of the first building.
    return replace(
        existing,
        nos=(existing.nos or 0) + (item.nos or 0),
        tcl=existing.tcl + item.tcl,
        max_demand_kw=existing.max_demand_kw + item.max_demand_kw,
        essential_kw=existing.essential_kw + item.essential_kw,
        fire_kw=existing.fire_kw + item.fire_kw,
    )


def _merge_items(target: Dict[str, LoadItem], items: Sequence[LoadItem]):
    for item in items:
        existing = target.get(item.description)
        target[item.description] = item if existing is None else _accumulate(existing, item)


def merge_categories(per_building: Sequence[Sequence[LoadCategory]]) -> List[LoadCategory]:
    """
    Merges the category lists of several buildings into one list.
    Categories are matched by name and items by description.
    """
    merged: Dict[str, Dict[str, LoadItem]] = {}
    for categories in per_building:
        for category in categories:
            _merge_items(merged.setdefault(category.name, {}), category.items)
    return [LoadCategory(name, list(items.values())) for name, items in merged.items()]


def merge_flat_loads(flat_loads: Sequence[LoadCategory]) -> LoadCategory:
    items: Dict[str, LoadItem] = {}
    for category in flat_loads:
        _merge_items(items, category.items)
    return LoadCategory(FlatLoadCalculator.category, list(items.values()))


def _twin_source(building: BuildingInput, by_id: Dict) -> Optional[BuildingInput]:
    # Walk the twin chain up to the first building with its own geometry.
    seen = {building.id}
    parent = by_id.get(building.twin_of_building_id)
    while parent is not None and not parent.has_metadata and parent.twin_of_building_id is not None:
        if parent.id in seen or parent.twin_of_building_id in seen:
            logger.warning("Twin chain of building %s is circular; using project geometry", building.name)
            return None
        seen.add(parent.id)
        parent = by_id.get(parent.twin_of_building_id)
    return parent


def resolve_twins(buildings: Sequence[BuildingInput]) -> List[BuildingInput]:
    """
    A twin without its own geometry takes height, floors, lobbies and flats from
    its parent. Chains resolve to the nearest ancestor that has geometry.
    """
    by_id = {b.id: b for b in buildings if b.id is not None}
    resolved = []
    for building in buildings:
        parent = None
        if building.twin_of_building_id is not None and not building.has_metadata:
            parent = _twin_source(building, by_id)
        if parent is not None and parent is not building:
            logger.debug("Building %s inherits geometry from twin %s", building.name, parent.name)
            building = replace(
                building,
                total_height_m=parent.total_height_m,
                floor_count=parent.floor_count,
                gf_entrance_lobby=building.gf_entrance_lobby or parent.gf_entrance_lobby,
                typical_lobby_area=building.typical_lobby_area or parent.typical_lobby_area,
                flats=building.flats or list(parent.flats),
                is_twin=True,
            )
        elif building.twin_of_building_id is not None and not building.is_twin:
            building = replace(building, is_twin=True)
        resolved.append(building)
    return resolved


def has_building_metadata(buildings: Sequence[BuildingInput]) -> bool:
    return any(b.has_metadata for b in buildings)


def calculate_building_breakdown(building: BuildingInput, inputs: ElectricalInputs, context,
                                 diversity_multiplier: float = 1.0) -> BuildingBreakdown:
    building_inputs = inputs.with_building(
        building_height=building.total_height_m,
        number_of_floors=building.floor_count,
        gf_entrance_lobby=building.gf_entrance_lobby,
        typical_floor_lobby=building.typical_lobby_area,
    )
    ca_loads = calculate_building_ca_loads(building_inputs, context)
    flat_loads = calculate_flat_loads(building.flats, context)

    combined = sum_totals(ca_loads) + flat_loads.totals
    # Diversity only sizes infrastructure; fire load is never reduced.
    totals = LoadTotals(
        tcl=combined.tcl,
        max_demand=combined.max_demand * diversity_multiplier,
        essential=combined.essential * diversity_multiplier,
        fire=combined.fire,
    )
    return BuildingBreakdown(
        building_id=building.id,
        building_name=building.name,
        building_height=building_inputs.building_height,
        number_of_floors=building_inputs.number_of_floors,
        carpet_area=building.total_carpet_area,
        building_ca_loads=ca_loads,
        flat_loads=flat_loads,
        totals=totals,
        total_units=sum(f.total_count or 0 for f in building.flats),
        diversity_factor=diversity_multiplier,
        is_twin=building.is_twin,
        twin_of_building_id=building.twin_of_building_id,
    )


def transformer_estimate_kva(max_demand_kw: float, power_factor: float = tables.DEFAULT_POWER_FACTOR) -> int:
    step = tables.TRANSFORMER_ROUNDING_KVA
    return int(math.ceil(max_demand_kw / power_factor / step) * step)


def standard_transformer_size(required_kva: float) -> int:
    """Next IS/IEC rating at or above required_kva; beyond the list, the next multiple of 500."""
    for size in tables.STANDARD_TRANSFORMER_KVA:
        if size >= required_kva:
            return size
    step = tables.OVERSIZE_ROUNDING_KVA
    return int(math.ceil(required_kva / step) * step)


def _aggregate(building: LoadTotals, society: LoadTotals, number_of_buildings: int, mode: AggregationMode,
               power_factor: float) -> AggregateTotals:
    grand = building + society
    return AggregateTotals(
        building=building,
        society=society,
        grand=grand,
        number_of_buildings=number_of_buildings,
        mode=mode,
        transformer_kva=transformer_estimate_kva(grand.max_demand, power_factor),
        standard_transformer_kva=standard_transformer_size(grand.max_demand / power_factor),
    )


def aggregate_from_breakdowns(breakdowns: Sequence[BuildingBreakdown], society_loads: Sequence[LoadCategory],
                              power_factor: float = tables.DEFAULT_POWER_FACTOR) -> AggregateTotals:
    building = LoadTotals()
    for breakdown in breakdowns:
        building = building + breakdown.totals
    return _aggregate(building, sum_totals(society_loads), len(breakdowns), AggregationMode.PER_BUILDING,
                      power_factor)


def aggregate_representative(building_loads: Sequence[LoadCategory], society_loads: Sequence[LoadCategory],
                             number_of_buildings: int,
                             power_factor: float = tables.DEFAULT_POWER_FACTOR) -> AggregateTotals:
    """One building's common-area loads scaled by the building count. Flat loads are not included."""
    building = sum_totals(building_loads).scaled(number_of_buildings)
    return _aggregate(building, sum_totals(society_loads), number_of_buildings,
                      AggregationMode.REPRESENTATIVE_BUILDING, power_factor)
