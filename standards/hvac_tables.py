# IS 3792 - U-values of common constructions (W/m²·K)
U_VALUES = {
    "Brick Wall 230mm (plastered)": 2.40,
    "Brick Wall 115mm (plastered)": 3.20,
    "RCC Wall 200mm": 3.50,
    "AAC Block 200mm (plastered)": 1.05,
    "Glass (single 6mm)": 5.80,
    "Glass (double glazed)": 2.80,
    "Glass (low-e double)": 1.80,
    "RCC Roof 150mm (no insulation)": 3.60,
    "RCC Roof + 50mm XPS": 0.55,
    "RCC Roof + 100mm XPS": 0.32,
    "Metal Roof (insulated)": 0.70,
    "Floor (on ground)": 1.50,
    "Floor (intermediate RCC)": 2.50,
    "Partition (gypsum double)": 2.50,
    "Partition (glass)": 5.80,
}
DEFAULT_WALL_U = 2.40
DEFAULT_GLASS_U = 5.80
DEFAULT_ROOF_U = 3.60
DEFAULT_FLOOR_U = 2.50

# Solar heat gain factors (W/m²), latitude ~19°N
# Format: {Orientation: {Season: SHGF}}
SOLAR_HEAT_GAIN = {
    "N": {"summer": 40, "monsoon": 35, "winter": 80},
    "NE": {"summer": 120, "monsoon": 100, "winter": 80},
    "E": {"summer": 250, "monsoon": 200, "winter": 200},
    "SE": {"summer": 200, "monsoon": 180, "winter": 250},
    "S": {"summer": 80, "monsoon": 70, "winter": 150},
    "SW": {"summer": 200, "monsoon": 180, "winter": 250},
    "W": {"summer": 250, "monsoon": 200, "winter": 200},
    "NW": {"summer": 120, "monsoon": 100, "winter": 80},
    "ROOF": {"summer": 320, "monsoon": 250, "winter": 200},
}
DEFAULT_SHGF = 100
DEFAULT_SHADING_COEFF = 0.87  # unshaded clear glass
SHADED_REDUCTION = 0.5

ROOF_SOL_AIR_ALLOWANCE = 10  # °C added to ΔT
FLOOR_DELTA_T_FRACTION = 0.3

# People heat gain (W/person)
# Format: {SpaceType: (Sensible, Latent)}
OCCUPANCY_HEAT = {
    "RESIDENTIAL_LIVING": (75, 55),  # seated
    "RESIDENTIAL_BEDROOM": (60, 40),  # resting
    "OFFICE": (75, 55),
    "RETAIL": (75, 55),
    "LOBBY": (75, 55),
    "GYM": (210, 315),  # heavy activity
    "RESTAURANT": (75, 55),
    "KITCHEN": (115, 140),
}
DEFAULT_OCCUPANCY_SPACE = "RESIDENTIAL_LIVING"

# ECBC 2017 lighting power density (W/m²)
LIGHTING_POWER_DENSITY = {
    "RESIDENTIAL": 7.0,
    "OFFICE": 9.0,
    "RETAIL": 14.0,
    "LOBBY": 10.0,
    "CORRIDOR": 5.0,
    "PARKING": 3.0,
    "GYM": 10.0,
    "RESTAURANT": 10.0,
    "KITCHEN": 12.0,
}
DEFAULT_LPD = 7.0

EQUIPMENT_POWER_DENSITY = {
    "RESIDENTIAL": 5.0,
    "OFFICE": 15.0,
    "RETAIL": 5.0,
    "LOBBY": 2.0,
    "CORRIDOR": 0.0,
    "PARKING": 0.0,
    "GYM": 10.0,
    "RESTAURANT": 10.0,
    "KITCHEN": 25.0,
}
DEFAULT_EPD = 5.0

# IS 3103 / ASHRAE 62.1 outdoor air (L/s per person)
VENTILATION_RATES = {
    "RESIDENTIAL": 7.5,
    "OFFICE": 10.0,
    "RETAIL": 7.5,
    "LOBBY": 5.0,
    "GYM": 15.0,
    "RESTAURANT": 10.0,
    "KITCHEN": 15.0,
    "PARKING": 7.5,
}
DEFAULT_VENTILATION_RATE = 7.5

VENT_SENSIBLE_FACTOR = 1.23
VENT_LATENT_FACTOR = 3010

# Outside design conditions (dry bulb °C, wet bulb °C, RH %)
# Seasons missing from a city fall back to summer.
DESIGN_CONDITIONS = {
    "MUMBAI": {"summer": {"db": 38, "wb": 28, "rh": 65}, "winter": {"db": 16, "rh": 50}},
    "PUNE": {"summer": {"db": 40, "wb": 24, "rh": 40}, "winter": {"db": 10, "rh": 40}},
    "DELHI": {"summer": {"db": 43, "wb": 27, "rh": 40}, "winter": {"db": 4, "rh": 50}},
    "BANGALORE": {"summer": {"db": 36, "wb": 23, "rh": 40}, "winter": {"db": 14, "rh": 45}},
    "CHENNAI": {"summer": {"db": 40, "wb": 29, "rh": 65}, "winter": {"db": 18, "rh": 60}},
    "HYDERABAD": {"summer": {"db": 42, "wb": 25, "rh": 35}, "winter": {"db": 12, "rh": 40}},
    "KOLKATA": {"summer": {"db": 40, "wb": 29, "rh": 65}, "winter": {"db": 10, "rh": 55}},
    "AHMEDABAD": {"summer": {"db": 43, "wb": 26, "rh": 35}, "winter": {"db": 10, "rh": 35}},
    "DEFAULT": {"summer": {"db": 40, "wb": 27, "rh": 50}, "winter": {"db": 10, "rh": 45}},
}

INDOOR_CONDITIONS = {
    "RESIDENTIAL": {"db": 24, "rh": 55},
    "OFFICE": {"db": 24, "rh": 50},
    "RETAIL": {"db": 24, "rh": 50},
    "LOBBY": {"db": 26, "rh": 55},
    "GYM": {"db": 22, "rh": 50},
    "RESTAURANT": {"db": 24, "rh": 50},
    "KITCHEN": {"db": 26, "rh": 55},
    "SERVER_ROOM": {"db": 22, "rh": 45},
}

SUPPLY_AIR_DELTA_T = 12  # °C supply/return

# --- Equipment catalogs ---
STANDARD_CHILLER_TR = [10, 15, 20, 30, 50, 75, 100, 125, 150, 175, 200, 250, 300, 350, 400, 500, 600, 700, 800, 1000]
SINGLE_CHILLER_MAX_TR = 30

# Format: (Above_TR, Type, COP, IPLV), checked top down
CHILLER_TYPES = [
    (100, "Water-cooled Screw", 5.5, 7.5),
    (30, "Water-cooled Scroll", 4.5, 6.0),
    (0, "Air-cooled Scroll", 3.5, 4.5),
]

# kW per TR of selected chiller size
CHILLER_KW_PER_TR = 0.65
PRIMARY_PUMP_KW_PER_TR = 0.03
SECONDARY_PUMP_KW_PER_TR = 0.035
CT_FAN_KW_PER_TR = 0.02

STANDARD_AHU_CFM = [1000, 2000, 3000, 4000, 5000, 6000, 8000, 10000, 12000, 15000, 20000, 25000, 30000]
SINGLE_AHU_MAX_CFM = 30000
AHU_SPLIT_CFM = 20000
AHU_FAN_KW_PER_CFM = 0.0007  # at 50mm WG
AHU_FILTER = "Pre-filter (G4) + Fine filter (F7)"

CT_HEAT_REJECTION = 1.25
CT_GPM_PER_TR = 3.0
CT_APPROACH_C = 4
CT_RANGE_C = 5
CT_CROSSFLOW_ABOVE_TR = 200
