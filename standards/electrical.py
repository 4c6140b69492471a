import math
from typing import List, Sequence

from core.calculator import LoadCategoryCalculator
from core.converters import parse_working_count, sqm_to_sqft
from core.inputs import ElectricalInputs
from core.models import FlatType, LoadCategory, LoadItem
from standards import msedcl_tables as tables
from standards.demand import apply_demand_factors


def _density(factor, description: str) -> float:
    # Factors may carry no density; fall back to the documented per-item value.
    if factor.watt_per_sqm is not None:
        return factor.watt_per_sqm
    return tables.DEFAULT_WATT_DENSITY[description]


class LightingCalculator(LoadCategoryCalculator):
    category = "Lighting & Small Power"

    def area_item(self, key, description, area_sqm, multiplier=1):
        factor = self.context.get_factor(*key)
        watts = _density(factor, key[2])
        return LoadItem(
            description=description, tcl=watts * area_sqm * multiplier / 1000, nos=multiplier,
            watt_per_sqm=watts, area_sqm=area_sqm, mdf=factor.mdf, edf=factor.edf, fdf=factor.fdf,
        )

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        items = [
            self.area_item(("LIGHTING", "LOBBY", "GF Entrance Lobby"), "GF Entrance Lobby", inputs.gf_entrance_lobby),
            self.area_item(("LIGHTING", "LOBBY", "Typical Floor Lobby"), "Typical Floor Lobby",
                           inputs.typical_floor_lobby, inputs.number_of_floors),
        ]

        # floors x 2 stairwells x 2 landings
        fixtures = inputs.number_of_floors * tables.STAIRWELLS * tables.LANDINGS_PER_FLOOR
        items.append(self.factored_item(
            ("LIGHTING", "STAIRCASE", "Staircases & Landings"), "Staircases & Landings",
            fixtures * tables.STAIRCASE_FIXTURE_W / 1000, nos=fixtures, watt_per_fixture=tables.STAIRCASE_FIXTURE_W,
        ))

        if inputs.terrace_lighting:
            items.append(self.area_item(("LIGHTING", "TERRACE", "Terrace Lighting"), "Terrace Lighting",
                                        inputs.terrace_area))
        if inputs.landscape_lighting:
            items.append(self.factored_item(
                ("LIGHTING", "LANDSCAPE", "Landscape & External Lighting"), "Landscape & External Lighting",
                inputs.landscape_lighting_load,
            ))
        return items


class LiftCalculator(LoadCategoryCalculator):
    category = "Lifts"

    LIFT_CLASSES = (
        ("passenger_lifts", ("LIFTS", "PASSENGER", "Passenger Lift"), "Passenger Lifts"),
        ("passenger_fire_lifts", ("LIFTS", "PASSENGER_FIRE", "Passenger + Fire Lift"), "Passenger + Fire Lift"),
        ("firemen_lifts", ("LIFTS", "FIREMEN", "Firemen Lift"), "Firemen Evac/Service Lift"),
    )

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        lift_kw = self.context.lookup_value("lift_power", "building_height", inputs.building_height)
        items = []
        for attr, key, description in self.LIFT_CLASSES:
            count = getattr(inputs, attr)
            if count > 0:
                items.append(self.unit_item(key, description, count, lift_kw))
        return items


class HVACElectricalCalculator(LoadCategoryCalculator):
    category = "HVAC & Ventilation"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        items = []
        if inputs.lobby_type.upper() == "AC":
            lobby_area = inputs.gf_entrance_lobby + inputs.typical_floor_lobby * inputs.number_of_floors
            tonnage = math.ceil(sqm_to_sqft(lobby_area) / tables.SQFT_PER_TR)
            kw_per_tr = self.context.lookup_value("ac_power", "tonnage", min(tonnage, tables.MAX_SPLIT_UNIT_TR))
            items.append(self.factored_item(
                ("HVAC", "AC", "Lobby Air Conditioning"), "Lobby Air Conditioning", tonnage * kw_per_tr,
                nos=tonnage, kw_per_unit=kw_per_tr, details={"tonnage": tonnage, "lobby_area_sqm": lobby_area},
            ))

        if inputs.lobby_type.upper() == "MECH. VENT" or inputs.mechanical_ventilation:
            fan_kw = self.context.lookup_value("ventilation_fan", "cfm", inputs.ventilation_cfm)
            items.append(self.unit_item(
                ("HVAC", "VENTILATION", "Mechanical Ventilation Fans"), "Mechanical Ventilation Fans",
                inputs.ventilation_fans, fan_kw, cfm=inputs.ventilation_cfm,
            ))
        return items


class PressurizationCalculator(LoadCategoryCalculator):
    category = "Pressurization Systems"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        staircase_kw = self.context.lookup_value("pressurization_fan", "type", "staircase")
        items = [self.unit_item(
            ("PRESSURIZATION", "STAIRCASE", "Staircase Pressurization"), "Staircase Pressurization Fans",
            inputs.number_of_staircases, staircase_kw,
        )]
        # One system per fire lift group, only where fire rated lifts exist
        if inputs.passenger_fire_lifts > 0 or inputs.firemen_lifts > 0:
            lobby_kw = self.context.lookup_value("pressurization_fan", "type", "lobby")
            items.append(self.unit_item(
                ("PRESSURIZATION", "LOBBY", "Fire Lift Lobby Pressurization"), "Fire Lift Lobby Pressurization",
                inputs.fire_lobby_pressurization_systems, lobby_kw,
            ))
        return items


class BuildingPHECalculator(LoadCategoryCalculator):
    category = "PHE (Building Level)"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        items = []
        if inputs.booster_pump_flow:
            pump_kw = self.context.lookup_value("phe_pump", "flow_lpm", inputs.booster_pump_flow)
            items.append(self.unit_item(
                ("PHE", "BOOSTER", "Booster Pump"), "PHE Booster Pumps",
                parse_working_count(inputs.booster_pump_set), pump_kw,
                config=inputs.booster_pump_set, flow_lpm=inputs.booster_pump_flow,
            ))
        if inputs.sewage_pump_capacity:
            pump_kw = self.context.lookup_value("sewage_pump", "capacity_lpm", inputs.sewage_pump_capacity)
            items.append(self.unit_item(
                ("PHE", "SEWAGE", "Sewage Pump"), "Sewage Pumps", inputs.sewage_pump_set, pump_kw,
                capacity_lpm=inputs.sewage_pump_capacity,
            ))
        return items


class BuildingFireFightingCalculator(LoadCategoryCalculator):
    category = "Fire Fighting (Building)"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        wet_riser = inputs.wet_riser_pump
        if wet_riser is None:
            wet_riser = inputs.building_height > tables.WET_RISER_MIN_HEIGHT_M
        if not wet_riser:
            return []
        return [self.unit_item(("FIREFIGHTING", "WET_RISER", "Wet Riser Pump"), "Wet Riser Pump",
                               1, inputs.wet_riser_pump_power)]


class OtherBuildingLoadsCalculator(LoadCategoryCalculator):
    category = "Other Building Loads"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        return [
            self.factored_item(("OTHER", "SECURITY", "Security System"), "Security & CCTV",
                               inputs.security_system_load),
            self.factored_item(("OTHER", "SMALL_POWER", "Common Area Power"), "Common Area Power Sockets",
                               inputs.small_power_load),
        ]


class FlatLoadCalculator(LoadCategoryCalculator):
    category = "Residential Flat Loads"

    def build_items(self, flats: Sequence[FlatType]) -> List[LoadItem]:
        factor = self.context.get_factor("RESIDENTIAL", "FLAT", "Residential Flat Load")
        watts = _density(factor, "Residential Flat Load")
        items = []
        for flat in flats:
            if not flat.total_count or not flat.area_sqm:
                continue
            load_per_flat = flat.area_sqm * watts / 1000
            items.append(LoadItem(
                description=f"{flat.flat_type} ({flat.area_sqm:.0f} sqm)",
                tcl=load_per_flat * flat.total_count, nos=flat.total_count, kw_per_unit=load_per_flat,
                watt_per_sqm=watts, area_sqm=flat.area_sqm, mdf=factor.mdf, edf=factor.edf, fdf=factor.fdf,
            ))
        return items


class FireFightingPumpCalculator(LoadCategoryCalculator):
    category = "Fire Fighting System"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        main_kw = self.context.lookup_value("ff_main_pump", "flow_lpm", inputs.main_pump_flow)
        jockey_kw = self.context.lookup_value("ff_jockey_pump", "standard", 180)
        main_count = parse_working_count(inputs.fbt_pump_set_type)
        jockey_key = ("FIREFIGHTING", "JOCKEY", "Fire Jockey Pump")
        items = [
            self.unit_item(("FIREFIGHTING", "HYDRANT", "Fire Main Pump"), "Main Hydrant Pump", main_count, main_kw,
                           flow_lpm=inputs.main_pump_flow),
            self.unit_item(jockey_key, "Hydrant Jockey Pump", main_count, jockey_kw, flow_lpm=180),
        ]
        if inputs.sprinkler_pump_flow:
            sprinkler_kw = self.context.lookup_value("ff_sprinkler_pump", "flow_lpm", inputs.sprinkler_pump_flow)
            count = parse_working_count(inputs.sprinkler_pump_set)
            items.append(self.unit_item(("FIREFIGHTING", "SPRINKLER", "Sprinkler Pump"), "Sprinkler Main Pump",
                                        count, sprinkler_kw, flow_lpm=inputs.sprinkler_pump_flow))
            items.append(self.unit_item(jockey_key, "Sprinkler Jockey Pump", count, jockey_kw, flow_lpm=180))
        return items


class PHETransferPumpCalculator(LoadCategoryCalculator):
    category = "PHE Transfer Pumps"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        if not inputs.dom_transfer_flow:
            return []
        pump_kw = self.context.lookup_value("phe_pump", "flow_lpm", inputs.dom_transfer_flow)
        return [self.unit_item(
            ("PHE", "TRANSFER", "Domestic Transfer Pump"), "Domestic Transfer Pumps",
            parse_working_count(inputs.dom_transfer_config), pump_kw,
            config=inputs.dom_transfer_config, flow_lpm=inputs.dom_transfer_flow,
        )]


class SocietyInfrastructureCalculator(LoadCategoryCalculator):
    category = "Society Infrastructure"

    def build_items(self, inputs: ElectricalInputs) -> List[LoadItem]:
        items = []
        if inputs.stp_capacity:
            stp_kw = self.context.lookup_value("stp_power", "capacity_kld", inputs.stp_capacity)
            items.append(self.unit_item(("INFRASTRUCTURE", "STP", "STP/WTP Plant"), "STP/WTP Plant", 1, stp_kw,
                                        capacity_kld=inputs.stp_capacity))
        if inputs.clubhouse_load:
            items.append(self.factored_item(("INFRASTRUCTURE", "CLUBHOUSE", "Clubhouse & Amenities"),
                                            "Clubhouse & Amenities", inputs.clubhouse_load))
        if inputs.ev_charger_count > 0:
            charger = inputs.ev_charger_type or "fast"
            ev_kw = self.context.lookup_value("ev_charger", "type", charger)
            items.append(self.unit_item(("INFRASTRUCTURE", "EV", "EV Charger"), f"EV Charging Stations ({charger})",
                                        inputs.ev_charger_count, ev_kw))
        if inputs.street_lighting_load:
            items.append(self.factored_item(("INFRASTRUCTURE", "STREET_LIGHTING", "Street Lighting"),
                                            "Street & Common Area Lighting", inputs.street_lighting_load))
        return items


BUILDING_CALCULATORS = (
    LightingCalculator,
    LiftCalculator,
    HVACElectricalCalculator,
    PressurizationCalculator,
    BuildingPHECalculator,
    BuildingFireFightingCalculator,
    OtherBuildingLoadsCalculator,
)

SOCIETY_CALCULATORS = (
    FireFightingPumpCalculator,
    PHETransferPumpCalculator,
    SocietyInfrastructureCalculator,
)


def calculate_building_ca_loads(inputs: ElectricalInputs, context) -> List[LoadCategory]:
    """Building common-area loads, one demand-factored category per calculator."""
    return [apply_demand_factors(calc(context).calculate(inputs)) for calc in BUILDING_CALCULATORS]


def calculate_society_ca_loads(inputs: ElectricalInputs, context) -> List[LoadCategory]:
    return [apply_demand_factors(calc(context).calculate(inputs)) for calc in SOCIETY_CALCULATORS]


def calculate_flat_loads(flats: Sequence[FlatType], context) -> LoadCategory:
    return apply_demand_factors(FlatLoadCalculator(context).calculate(flats))
