import logging
import math
from dataclasses import replace
from typing import List, Optional

from core.models import (
    AggregateTotals, DTCRequirement, LandItem, LandRequirement, LeaseSummary, LimitValidation, LoadAfterDiversity,
    MinimumLoad, RegulatoryComplianceResult, SanctionedLoad, SubstationRequirement,
)
from standards import msedcl_tables as tables
from standards.regulations import Regulations

logger = logging.getLogger(__name__)

SANCTIONED_LOAD = "SANCTIONED_LOAD"
LOAD_AFTER_DF = "LOAD_AFTER_DF"
TRANSFORMER_SIZING = "TRANSFORMER_SIZING"

SINGLE_CONSUMER = "SINGLE_CONSUMER"
MULTIPLE_CONSUMERS = "MULTIPLE_CONSUMERS_CUMULATIVE"


def _premise_code(premise_type: str, has_ac: bool = False) -> str:
    premise_type = (premise_type or "RESIDENTIAL").upper()
    if premise_type == "COMMERCIAL":
        return "COMMERCIAL_AC" if has_ac else "COMMERCIAL_NO_AC"
    return premise_type


def calculate_minimum_load(regulations: Regulations, carpet_area: float, premise_type: str = "RESIDENTIAL",
                           has_ac: bool = False) -> MinimumLoad:
    """Minimum load in kW the regulator demands for a carpet area (e.g. MSEDCL 75 W/sq.m residential)."""
    premise = _premise_code(premise_type, has_ac)
    standard = regulations.load_standard(premise)
    watts = standard.minimum_load_w_per_sqm if standard else None
    required = carpet_area * watts / 1000 if carpet_area and carpet_area > 0 and watts else 0.0
    return MinimumLoad(required_kw=required, carpet_area=carpet_area or 0.0, premise_type=premise,
                       watt_per_sqm=watts, applied=False)


def validate_sanctioned_load(regulations: Regulations, sanctioned_kw: float, sanctioned_kva: float,
                             multiple_consumers: bool = False) -> LimitValidation:
    limit_type = MULTIPLE_CONSUMERS if multiple_consumers else SINGLE_CONSUMER
    limit = regulations.sanctioned_limit(limit_type)
    if limit is None:
        return LimitValidation(valid=True, limit_type=limit_type)

    warnings = []
    exceeds_kw = sanctioned_kw > limit.max_load_kw
    exceeds_kva = sanctioned_kva > limit.max_load_kva
    if exceeds_kw:
        warnings.append(f"Sanctioned load {sanctioned_kw:.2f} kW exceeds limit of {limit.max_load_kw:g} kW")
    if exceeds_kva:
        warnings.append(f"Sanctioned load {sanctioned_kva:.2f} kVA exceeds limit of {limit.max_load_kva:g} kVA")
    return LimitValidation(
        valid=not warnings,
        limit_type=limit_type,
        max_kw=limit.max_load_kw,
        max_kva=limit.max_load_kva,
        exceeds_kw_limit=exceeds_kw,
        exceeds_kva_limit=exceeds_kva,
        warnings=warnings,
        description=limit.description,
    )


def calculate_dtc_requirements(regulations: Regulations, load_after_df_kw: float,
                               area_type: str = "URBAN") -> DTCRequirement:
    kva = load_after_df_kw / regulations.power_factor(LOAD_AFTER_DF)
    threshold = regulations.dtc_threshold(area_type)
    if threshold is None:
        return DTCRequirement(needed=False, reason=f"No threshold defined for area type: {area_type}",
                              load_after_df_kva=kva)

    needed = kva > threshold.threshold_kva
    capacity = tables.DTC_UNIT_CAPACITY_KVA
    count = int(math.ceil(kva / capacity)) if needed else 0

    land = 0.0
    land_row = regulations.land_requirement("DTC_OUTDOOR", area_type)
    if needed and land_row is not None:
        land = land_row.land_required_sqm + (count - 1) * (land_row.additional_land_per_unit_sqm or 0)

    return DTCRequirement(
        needed=needed,
        threshold_kva=threshold.threshold_kva,
        load_after_df_kva=kva,
        dtc_count=count,
        capacity_per_unit_kva=capacity,
        total_capacity_kva=count * capacity,
        land_required_sqm=land,
        action=threshold.action_required,
        individual_transformer_required=regulations.has_infrastructure_spec("INDIVIDUAL_TRANSFORMER", area_type),
        ring_main_required=regulations.has_infrastructure_spec("RING_MAIN_SYSTEM", area_type),
    )


def calculate_substation_requirements(regulations: Regulations, load_after_df_kw: float,
                                      area_type: str = "URBAN") -> SubstationRequirement:
    mva = load_after_df_kw / 1000
    band = next((b for b in regulations.substation_bands_for(area_type) if b.contains(mva)), None)
    if band is None:
        return SubstationRequirement(needed=False, load_after_df_mva=mva, reason="Load does not require substation")

    land_row = regulations.substation_land(area_type)
    return SubstationRequirement(
        needed=True,
        load_after_df_mva=mva,
        substation_type=band.substation_type,
        incoming_feeders=band.incoming_feeders_count,
        feeder_capacity_mva=band.feeder_capacity_mva,
        special_requirements=list(band.special_requirements),
        land_required_sqm=land_row.land_required_sqm if land_row else None,
        description=band.description,
    )


def calculate_land_requirements(dtc: DTCRequirement, substation: SubstationRequirement) -> LandRequirement:
    breakdown: List[LandItem] = []
    if dtc.needed and dtc.land_required_sqm:
        breakdown.append(LandItem(
            type="DTC", total_land_sqm=dtc.land_required_sqm, count=dtc.dtc_count,
            land_per_unit_sqm=dtc.land_required_sqm / dtc.dtc_count,
        ))
    if substation.needed and substation.land_required_sqm:
        breakdown.append(LandItem(
            type="Substation", total_land_sqm=substation.land_required_sqm, detail=substation.substation_type,
        ))
    return LandRequirement(total_sqm=sum(item.total_land_sqm for item in breakdown), breakdown=breakdown)



def regulation_gaps(regulations: Regulations, area_type: str, premise_type: str = "RESIDENTIAL",
                    building_count: int = 1) -> List[str]:
    """Rules the framework does not define for this project; each one leaves a check unassessed."""
    gaps = []
    premise = _premise_code(premise_type)
    if regulations.load_standard(premise) is None:
        gaps.append(f"No load standard defined for premise type: {premise}; minimum load not applied")
    if regulations.dtc_threshold(area_type) is None:
        gaps.append(f"No DTC threshold defined for area type: {area_type}; DTC requirement not assessed")
    limit_type = MULTIPLE_CONSUMERS if building_count > 1 else SINGLE_CONSUMER
    if regulations.sanctioned_limit(limit_type) is None:
        gaps.append(f"No sanctioned load limit defined for {limit_type}; limits not checked")
    return gaps


def lease_summary(regulations: Regulations) -> Optional[LeaseSummary]:
    if not regulations.lease_terms:
        return None
    term = regulations.lease_terms[0]
    return LeaseSummary(
        duration=f"{term.lease_duration_years} years",
        annual_rent=f"Rs. {term.annual_rent_amount:g}/-",
        upfront_payment=f"Rs. {term.total_upfront_payment:g}/-",
        encumbrance_free=term.encumbrance_free_required,
        registration_required=term.registration_required,
        surrender_notice=f"{term.surrender_notice_months} months",
    )


def calculate_regulatory_compliance(regulations: Regulations, totals: AggregateTotals, area_type: str,
                                    carpet_area: float, building_count: int,
                                    premise_type: str = "RESIDENTIAL") -> RegulatoryComplianceResult:
    """
    Sanctioned load (billing, never diversity-adjusted) and load after diversity
    (infrastructure sizing only) are computed side by side and kept apart.
    """
    minimum = calculate_minimum_load(regulations, carpet_area, premise_type)

    sanctioned_kw = max(totals.grand.tcl, minimum.required_kw)
    sanctioned_pf = regulations.power_factor(SANCTIONED_LOAD)
    sanctioned = SanctionedLoad(
        total_connected_load_kw=totals.grand.tcl,
        sanctioned_load_kw=sanctioned_kw,
        sanctioned_load_kva=sanctioned_kw / sanctioned_pf,
        power_factor=sanctioned_pf,
    )
    minimum = replace(minimum, applied=minimum.required_kw > 0 and sanctioned_kw == minimum.required_kw)

    after_df_kw = totals.grand.max_demand
    after_df_pf = regulations.power_factor(LOAD_AFTER_DF)
    load_after_df = LoadAfterDiversity(
        max_demand_kw=after_df_kw,
        max_demand_kva=after_df_kw / after_df_pf,
        essential_kw=totals.grand.essential,
        fire_kw=totals.grand.fire,
        power_factor=after_df_pf,
    )

    validation = validate_sanctioned_load(regulations, sanctioned.sanctioned_load_kw,
                                          sanctioned.sanctioned_load_kva, building_count > 1)
    dtc = calculate_dtc_requirements(regulations, after_df_kw, area_type)
    substation = calculate_substation_requirements(regulations, after_df_kw, area_type)
    gaps = regulation_gaps(regulations, area_type, premise_type, building_count)
    for warning in validation.warnings + gaps:
        logger.warning(warning)

    framework = regulations.primary_framework
    logger.info("Compliance under %s: sanctioned %.2f kVA, after DF %.2f kVA, DTC %s, substation %s",
                framework.code, sanctioned.sanctioned_load_kva, load_after_df.max_demand_kva,
                dtc.dtc_count if dtc.needed else "not required",
                substation.substation_type if substation.needed else "not required")

    return RegulatoryComplianceResult(
        minimum_load=minimum,
        sanctioned_load=sanctioned,
        load_after_df=load_after_df,
        validation=validation,
        dtc=dtc,
        substation=substation,
        land=calculate_land_requirements(dtc, substation),
        lease=lease_summary(regulations),
        area_type=area_type,
        framework=framework.name,
        warnings=validation.warnings + gaps,
        approximate=regulations.builtin or bool(gaps),
    )
