# MSEDCL (Maharashtra) electrical regulation data, NSC circular 2016 / 35530.
# Rows mirror the regulation tables one-to-one so a workbook export can carry them.

# --- Electrical load factors ---
# (category, sub_category, description, watt_per_sqm, mdf, edf, fdf, notes)
LOAD_FACTOR_ROWS = [
    ("LIGHTING", "LOBBY", "GF Entrance Lobby", 30.0, 0.8, 0.5, 0.25, "Main entrance lobby"),
    ("LIGHTING", "LOBBY", "Typical Floor Lobby", 20.0, 0.8, 0.5, 0.25, "Typical floor lobby"),
    ("LIGHTING", "STAIRCASE", "Staircases & Landings", None, 1.0, 1.0, 1.0, "Escape route lighting"),
    ("LIGHTING", "TERRACE", "Terrace Lighting", 2.0, 0.7, 0.3, 0.0, ""),
    ("LIGHTING", "LANDSCAPE", "Landscape & External Lighting", None, 0.7, 0.3, 0.0, ""),
    ("LIFTS", "PASSENGER", "Passenger Lift", None, 0.6, 0.5, 0.0, "Shed during fire"),
    ("LIFTS", "PASSENGER_FIRE", "Passenger + Fire Lift", None, 0.6, 1.0, 1.0, "Fire rated"),
    ("LIFTS", "FIREMEN", "Firemen Lift", None, 0.6, 1.0, 1.0, "Fire rated"),
    ("HVAC", "AC", "Lobby Air Conditioning", None, 0.8, 0.0, 0.0, ""),
    ("HVAC", "VENTILATION", "Mechanical Ventilation Fans", None, 0.8, 0.5, 1.0, "Smoke extraction duty"),
    ("PRESSURIZATION", "STAIRCASE", "Staircase Pressurization", None, 0.0, 0.0, 1.0, "Runs on fire only"),
    ("PRESSURIZATION", "LOBBY", "Fire Lift Lobby Pressurization", None, 0.0, 0.0, 1.0, "Runs on fire only"),
    ("PHE", "BOOSTER", "Booster Pump", None, 0.7, 1.0, 0.0, ""),
    ("PHE", "SEWAGE", "Sewage Pump", None, 0.5, 1.0, 0.0, ""),
    ("PHE", "TRANSFER", "Domestic Transfer Pump", None, 0.7, 1.0, 0.0, ""),
    ("FIREFIGHTING", "WET_RISER", "Wet Riser Pump", None, 0.0, 0.0, 1.0, ""),
    ("FIREFIGHTING", "HYDRANT", "Fire Main Pump", None, 0.0, 0.0, 0.25, "Jockey baseline plus main pump on fire"),
    ("FIREFIGHTING", "SPRINKLER", "Sprinkler Pump", None, 0.0, 0.0, 0.25, "Jockey baseline plus main pump on fire"),
    ("FIREFIGHTING", "JOCKEY", "Fire Jockey Pump", None, 0.25, 1.0, 1.0, ""),
    ("OTHER", "SECURITY", "Security System", None, 1.0, 1.0, 1.0, ""),
    ("OTHER", "SMALL_POWER", "Common Area Power", None, 0.5, 0.3, 0.0, ""),
    ("RESIDENTIAL", "FLAT", "Residential Flat Load", 75.0, 0.6, 0.1, 0.0, "75 W/sq.m carpet area"),
    ("INFRASTRUCTURE", "STP", "STP/WTP Plant", None, 0.8, 1.0, 0.0, ""),
    ("INFRASTRUCTURE", "CLUBHOUSE", "Clubhouse & Amenities", None, 0.6, 0.3, 0.0, ""),
    ("INFRASTRUCTURE", "EV", "EV Charger", None, 0.5, 0.0, 0.0, ""),
    ("INFRASTRUCTURE", "STREET_LIGHTING", "Street Lighting", None, 1.0, 0.5, 0.0, ""),
]

# Used when a factor carries no watt density (W/sq.m)
DEFAULT_WATT_DENSITY = {
    "GF Entrance Lobby": 30.0,
    "Typical Floor Lobby": 20.0,
    "Terrace Lighting": 2.0,
    "Residential Flat Load": 75.0,
}

STAIRCASE_FIXTURE_W = 20.0  # LED per landing
STAIRWELLS = 2
LANDINGS_PER_FLOOR = 2

SQFT_PER_TR = 200  # lobby AC rule of thumb
MAX_SPLIT_UNIT_TR = 3
WET_RISER_MIN_HEIGHT_M = 15  # NBC 2016

# --- Unit power lookups (kW) ---
# {category: (lookup_key, {lookup_value: result_kw})}
LOOKUP_TABLES = {
    "lift_power": ("building_height", {
        60: 12, 70: 14, 90: 15, 100: 18, 110: 20, 120: 22, 130: 24, 140: 26, 150: 28,
    }),
    "phe_pump": ("flow_lpm", {
        100: 0.75, 200: 1.1, 300: 2.2, 400: 3.0, 500: 4.0, 600: 5.5, 750: 7.5, 1000: 11,
    }),
    "ff_main_pump": ("flow_lpm", {2280: 93.25, 2850: 112, 3200: 130.5, 3800: 150}),
    "ff_jockey_pump": ("standard", {180: 9.33}),
    "ff_sprinkler_pump": ("flow_lpm", {1140: 46.63, 1425: 56, 1600: 65.25, 1900: 75}),
    "ac_power": ("tonnage", {1: 1.2, 1.5: 1.8, 2: 2.4, 2.5: 3.0, 3: 3.6}),
    "ventilation_fan": ("cfm", {1000: 0.5, 2000: 1.0, 3000: 1.5, 5000: 2.2, 10000: 4.0}),
    "pressurization_fan": ("type", {"staircase": 5.5, "lobby": 7.5}),
    "sewage_pump": ("capacity_lpm", {200: 2.2, 300: 3.0, 500: 5.5, 750: 7.5}),
    "stp_power": ("capacity_kld", {100: 15, 200: 22, 300: 30, 500: 45, 750: 60, 1000: 75}),
    "ev_charger": ("type", {"slow": 3.3, "fast": 7.4, "rapid": 22, "ultra_fast": 50}),
}

# Tables keyed on bands: the first band >= the value applies, the top band beyond.
BANDED_LOOKUPS = {"lift_power"}

LOOKUP_DEFAULTS = {
    "lift_power": 15,
    "phe_pump": 2.2,
    "ff_main_pump": 112,
    "ff_jockey_pump": 9.33,
    "ff_sprinkler_pump": 56,
    "ac_power": 1.2,
    "ventilation_fan": 1.5,
    "pressurization_fan": 5.5,
    "sewage_pump": 3.0,
    "stp_power": 30,
    "ev_charger": 7.4,
}
LOOKUP_FALLBACK = 10

# --- Transformers ---
DTC_UNIT_CAPACITY_KVA = 500
# IS/IEC standard distribution transformer ratings (kVA)
STANDARD_TRANSFORMER_KVA = [100, 160, 200, 250, 315, 400, 500, 630, 800, 1000, 1250, 1600, 2000, 2500, 3150]
TRANSFORMER_ROUNDING_KVA = 100
OVERSIZE_ROUNDING_KVA = 500

DEFAULT_POWER_FACTOR = 0.9

# --- Regulation frameworks ---
# Tables used when no framework can be resolved at all.
BUILTIN_DEFAULTS = {
    "framework": {"framework_code": "DEFAULT", "framework_name": "Built-in Defaults", "is_default": False},
    "area_types": [],
    "load_standards": [
        {"premise_type": "RESIDENTIAL", "area_measurement_type": "CARPET_AREA", "minimum_load_w_per_sqm": 75},
    ],
    "dtc_thresholds": [
        {"area_type_code": "RURAL", "threshold_kva": 25},
        {"area_type_code": "URBAN", "threshold_kva": 75},
        {"area_type_code": "METRO", "threshold_kva": 250},
    ],
    "sanctioned_limits": [
        {"limit_type": "SINGLE_CONSUMER", "max_load_kw": 160, "max_load_kva": 200},
        {"limit_type": "MULTIPLE_CONSUMERS_CUMULATIVE", "max_load_kw": 480, "max_load_kva": 600},
    ],
    "power_factors": [
        {"load_type": "SANCTIONED_LOAD", "power_factor": 0.8},
        {"load_type": "LOAD_AFTER_DF", "power_factor": 0.9},
        {"load_type": "TRANSFORMER_SIZING", "power_factor": 0.9},
    ],
    "diversity_factors": [
        {"area_type_code": "METRO", "diversity_factor": 2.0},
        {"area_type_code": "MAJOR_CITIES", "diversity_factor": 2.0},
        {"area_type_code": "ALL", "diversity_factor": 2.5},
    ],
    "substation_requirements": [],
    "land_requirements": [],
    "lease_terms": [],
    "infrastructure_specs": [],
    "definitions": [],
}

_DTC_ACTION = "New DTC required if load (after DF) exceeds threshold"
_RING_MAIN = "Ring Main System created for redundancy and quick diversion"
_INDIVIDUAL_TX = "Individual transformers for each building in metropolitan and major city areas"

MSEDCL_2016 = {
    "framework": {
        "framework_code": "MSEDCL_2016",
        "framework_name": "MSEDCL Supply Code 2016 (NSC Circular 35530)",
        "is_default": True,
    },
    "area_types": [
        {"area_type_code": "RURAL", "area_type_name": "Rural Area",
         "description": "Areas outside Urban and Metropolitan regions", "specific_locations": []},
        {"area_type_code": "URBAN", "area_type_name": "Urban Area",
         "description": "Urban areas excluding Metropolitan and Major Cities", "specific_locations": []},
        {"area_type_code": "METRO", "area_type_name": "Metropolitan Area",
         "description": "Metropolitan regions as defined by MSEDCL",
         "specific_locations": ["Greater Mumbai", "Bhiwandi", "Kalyan-Dombivli", "Mira-Bhayandar",
                                "Navi Mumbai", "Panvel", "Thane", "Ulhasnagar", "Vasai-Virar",
                                "Pune", "Pimpri-Chinchwad"]},
        {"area_type_code": "MAJOR_CITIES", "area_type_name": "Major Cities",
         "description": "Major Cities in Maharashtra",
         "specific_locations": ["Nashik", "Chh. Sambhaji Nagar", "Nagpur"]},
    ],
    "load_standards": [
        {"premise_type": "RESIDENTIAL", "area_measurement_type": "CARPET_AREA", "minimum_load_w_per_sqm": 75,
         "description": "Residential premises"},
        {"premise_type": "COMMERCIAL_AC", "area_measurement_type": "CARPET_AREA", "minimum_load_w_per_sqm": 200,
         "description": "Commercial with air-conditioning"},
        {"premise_type": "COMMERCIAL_NO_AC", "area_measurement_type": "CARPET_AREA", "minimum_load_w_per_sqm": 150,
         "description": "All other commercial establishments"},
        {"premise_type": "EV_CHARGING", "area_measurement_type": "ACTUAL", "minimum_load_w_per_sqm": None,
         "description": "Load as mentioned in A1 form (actual)"},
    ],
    "dtc_thresholds": [
        {"area_type_code": "RURAL", "threshold_kva": 25, "action_required": _DTC_ACTION, "distance_from_lt_pole_m": 350},
        {"area_type_code": "URBAN", "threshold_kva": 75, "action_required": _DTC_ACTION, "distance_from_lt_pole_m": 350},
        {"area_type_code": "METRO", "threshold_kva": 250, "action_required": _DTC_ACTION, "distance_from_lt_pole_m": 200},
        {"area_type_code": "MAJOR_CITIES", "threshold_kva": 250, "action_required": _DTC_ACTION,
         "distance_from_lt_pole_m": 200},
    ],
    "sanctioned_limits": [
        {"limit_type": "SINGLE_CONSUMER", "max_load_kw": 160, "max_load_kva": 200,
         "description": "Sanctioned Load/Contract Demand should not exceed 160 kW / 200 kVA for single consumer"},
        {"limit_type": "MULTIPLE_CONSUMERS_CUMULATIVE", "max_load_kw": 480, "max_load_kva": 600,
         "description": "Multiple consumers in same premises: cumulative limit 480 kW / 600 kVA"},
    ],
    "power_factors": [
        {"load_type": "SANCTIONED_LOAD", "power_factor": 0.8},
        {"load_type": "LOAD_AFTER_DF", "power_factor": 0.9},
        {"load_type": "TRANSFORMER_SIZING", "power_factor": 0.9},
    ],
    # Section C.2: DF 2 for metro regions and major cities, 2.5 elsewhere
    "diversity_factors": [
        {"area_type_code": "METRO", "diversity_factor": 2.0},
        {"area_type_code": "MAJOR_CITIES", "diversity_factor": 2.0},
        {"area_type_code": "ALL", "diversity_factor": 2.5},
    ],
    "substation_requirements": [
        {"area_type_code": "METRO", "min_load_after_df_mva": 3.5, "max_load_after_df_mva": 20.0,
         "substation_type": "33/11 kV or 22/11 kV Substation", "incoming_feeders_count": 2,
         "feeder_capacity_mva": 20.0,
         "special_requirements": [_RING_MAIN, _INDIVIDUAL_TX, "LT Ring main network mandatory"],
         "description": "Metropolitan: 33/11 or 22/11 kV substation if load > 3.5 MVA (up to 20 MVA)"},
        {"area_type_code": "MAJOR_CITIES", "min_load_after_df_mva": 3.5, "max_load_after_df_mva": 20.0,
         "substation_type": "33/11 kV or 22/11 kV Substation", "incoming_feeders_count": 2,
         "feeder_capacity_mva": 20.0,
         "special_requirements": [_RING_MAIN, _INDIVIDUAL_TX, "LT Ring main network mandatory"],
         "description": "Major Cities: 33/11 or 22/11 kV substation if load > 3.5 MVA (up to 20 MVA)"},
        {"area_type_code": "URBAN", "min_load_after_df_mva": 3.0, "max_load_after_df_mva": 20.0,
         "substation_type": "33/11 kV or 22/11 kV Substation", "incoming_feeders_count": 2,
         "feeder_capacity_mva": 20.0, "special_requirements": ["Ring Main System created for redundancy"],
         "description": "Other areas: 33/11 or 22/11 kV substation if load > 3 MVA (up to 20 MVA)"},
        {"area_type_code": "RURAL", "min_load_after_df_mva": 3.0, "max_load_after_df_mva": 20.0,
         "substation_type": "33/11 kV or 22/11 kV Substation", "incoming_feeders_count": 2,
         "feeder_capacity_mva": 20.0, "special_requirements": ["Ring Main System created for redundancy"],
         "description": "Rural areas: 33/11 or 22/11 kV substation if load > 3 MVA (up to 20 MVA)"},
        {"area_type_code": "ALL", "min_load_after_df_mva": 20.0, "max_load_after_df_mva": None,
         "substation_type": "EHV Substation", "incoming_feeders_count": 2, "feeder_capacity_mva": None,
         "special_requirements": ["Coordination with MSETCL required", "As per MSETCL norms"],
         "description": "If load > 20 MVA, EHV substation with MSETCL coordination"},
    ],
    "land_requirements": [
        {"infrastructure_type": "DTC_INDOOR", "area_type_code": None, "land_required_sqm": 30,
         "additional_land_per_unit_sqm": 15, "description": "Distribution transformer centre (Indoor)"},
        {"infrastructure_type": "DTC_OUTDOOR", "area_type_code": None, "land_required_sqm": 25,
         "additional_land_per_unit_sqm": 15, "description": "Distribution transformer centre (Outdoor)"},
        {"infrastructure_type": "DTC_COMPACT", "area_type_code": None, "land_required_sqm": 15,
         "additional_land_per_unit_sqm": 15, "description": "Distribution transformer centre (Compact)"},
        {"infrastructure_type": "SUBSTATION_33/11_OUTDOOR", "area_type_code": None, "land_required_sqm": 3500,
         "additional_land_per_unit_sqm": None, "description": "33/11 or 22/11 kV Outdoor Substation"},
        {"infrastructure_type": "SUBSTATION_33/11_HYBRID", "area_type_code": None, "land_required_sqm": 2500,
         "additional_land_per_unit_sqm": None, "description": "33/11 or 22/11 kV Indoor/Outdoor Hybrid Substation"},
        {"infrastructure_type": "SWITCHING_STATION_22KV_OUTDOOR", "area_type_code": None, "land_required_sqm": 2500,
         "additional_land_per_unit_sqm": None, "description": "22 kV Outdoor Switching station"},
        {"infrastructure_type": "SUBSTATION_INDOOR_10MVA", "area_type_code": "METRO", "land_required_sqm": 1000,
         "additional_land_per_unit_sqm": None, "description": "Indoor Substation (2 x 10 MVA)"},
        {"infrastructure_type": "SUBSTATION_INDOOR_10MVA", "area_type_code": "MAJOR_CITIES",
         "land_required_sqm": 1000, "additional_land_per_unit_sqm": None,
         "description": "Indoor Substation (2 x 10 MVA)"},
        {"infrastructure_type": "SUBSTATION_GIS_10MVA", "area_type_code": "METRO", "land_required_sqm": 600,
         "additional_land_per_unit_sqm": None, "description": "GIS Substation (2 x 10 MVA)"},
        {"infrastructure_type": "SUBSTATION_GIS_10MVA", "area_type_code": "MAJOR_CITIES", "land_required_sqm": 600,
         "additional_land_per_unit_sqm": None, "description": "GIS Substation (2 x 10 MVA)"},
    ],
    "lease_terms": [
        {"lease_duration_years": 99, "annual_rent_amount": 1, "total_upfront_payment": 99,
         "encumbrance_free_required": True, "registration_required": True, "surrender_notice_months": 12,
         "description": "99-year lease at Rs. 1/- per year (total Rs. 99/- upfront)"},
    ],
    "infrastructure_specs": [
        {"infrastructure_type": "HT_CABLE_11KV_22KV", "area_type_code": "METRO", "mandatory": True,
         "specification": "Size of 11 kV/22 kV HT cable must be 300 Sqmm minimum"},
        {"infrastructure_type": "HT_CABLE_11KV_22KV", "area_type_code": "MAJOR_CITIES", "mandatory": True,
         "specification": "Size of 11 kV/22 kV HT cable must be 300 Sqmm minimum"},
        {"infrastructure_type": "RMU_CONFIGURATION", "area_type_code": None, "mandatory": True,
         "specification": "Ring Main Unit with not more than 2 breakers (2 DT on single RMU)"},
        {"infrastructure_type": "DEDICATED_CORRIDOR", "area_type_code": None, "mandatory": True,
         "specification": "Dedicated ROW for ring mains with RCC ducts and chambers every 15 m"},
        {"infrastructure_type": "RING_MAIN_SYSTEM", "area_type_code": "METRO", "mandatory": True,
         "specification": "Ring Mains System for redundancy and quick diversion of load"},
        {"infrastructure_type": "RING_MAIN_SYSTEM", "area_type_code": "MAJOR_CITIES", "mandatory": True,
         "specification": "Ring Mains System for redundancy and quick diversion of load"},
        {"infrastructure_type": "INDIVIDUAL_TRANSFORMER", "area_type_code": "METRO", "mandatory": True,
         "specification": "Individual transformers for each building with LT Ring main network"},
        {"infrastructure_type": "INDIVIDUAL_TRANSFORMER", "area_type_code": "MAJOR_CITIES", "mandatory": True,
         "specification": "Individual transformers for each building with LT Ring main network"},
    ],
    "definitions": [
        {"term": "Consumer", "definition": "Any person who is supplied with electricity for his own use by a licensee."},
        {"term": "Distributing Main",
         "definition": "The portion of any main with which a service line is, or is intended to be, immediately connected."},
        {"term": "Main", "definition": "Any electric supply-line through which electricity is, or is intended to be, supplied."},
        {"term": "Licensee", "definition": "A person who has been granted a licence under section 14 of Electricity Act, 2003."},
        {"term": "Premises", "definition": "Includes any land, building or structure."},
        {"term": "Sanctioned Load",
         "definition": "Contract demand used for quotation and billing, computed without diversity factor."},
    ],
}

FRAMEWORKS = {"MSEDCL_2016": MSEDCL_2016}

REGULATION_TABLES = (
    "area_types", "load_standards", "dtc_thresholds", "sanctioned_limits", "power_factors",
    "diversity_factors", "substation_requirements", "land_requirements", "lease_terms",
    "infrastructure_specs", "definitions",
)
