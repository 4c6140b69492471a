import io

import pandas as pd
import streamlit as st

from core.errors import LoadCalculationError
from core.reports import (
    building_breakdown_frame, compliance_frame, export_workbook, hvac_equipment_frame, hvac_rooms_frame,
    load_schedule_frame,
)
from standards.engine import calculate_electrical_load, calculate_hvac_load
from standards.hvac_tables import DESIGN_CONDITIONS, INDOOR_CONDITIONS
from standards.regulations import ExcelRegulationSource, RegulationContext, export_regulation_workbook

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# --- Page Config ---
st.set_page_config(
    page_title="Load Calculator (MSEDCL)",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header { font-family: 'Inter', sans-serif; color: #1E3A8A; font-weight: 700; }
    .stDataFrame { border-radius: 10px; overflow: hidden; }
</style>
""", unsafe_allow_html=True)

# --- Session State Init ---
BUILDING_COLUMNS = ["Id", "Name", "Height (m)", "Floors", "GF Lobby (sq.m)", "Typical Lobby (sq.m)",
                    "Carpet Area (sq.m)", "Twin Of"]
FLAT_COLUMNS = ["Building Id", "Flat Type", "Area (sq.m)", "Count"]
ROOM_COLUMNS = ["Name", "Space Type", "Area (sq.m)", "Occupancy", "Wall Orientation", "Wall Area",
                "Window Orientation", "Window Area", "Shaded", "Roof Area"]

if "buildings_df" not in st.session_state:
    st.session_state.buildings_df = pd.DataFrame(
        [{"Id": 1, "Name": "Tower A", "Height (m)": 70.0, "Floors": 22, "GF Lobby (sq.m)": 100.0,
          "Typical Lobby (sq.m)": 30.0, "Carpet Area (sq.m)": 12000.0, "Twin Of": None}],
        columns=BUILDING_COLUMNS)
if "flats_df" not in st.session_state:
    st.session_state.flats_df = pd.DataFrame(
        [{"Building Id": 1, "Flat Type": "2BHK", "Area (sq.m)": 65.0, "Count": 88},
         {"Building Id": 1, "Flat Type": "3BHK", "Area (sq.m)": 95.0, "Count": 44}],
        columns=FLAT_COLUMNS)
if "rooms_df" not in st.session_state:
    st.session_state.rooms_df = pd.DataFrame(
        [{"Name": "Clubhouse Hall", "Space Type": "LOBBY", "Area (sq.m)": 120.0, "Occupancy": 40,
          "Wall Orientation": "W", "Wall Area": 36.0, "Window Orientation": "W", "Window Area": 12.0,
          "Shaded": False, "Roof Area": 120.0}],
        columns=ROOM_COLUMNS)


def _blank(val) -> bool:
    return val is None or (isinstance(val, float) and pd.isna(val)) or val == ""


def buildings_from_tables(buildings_df: pd.DataFrame, flats_df: pd.DataFrame):
    buildings = []
    for _, row in buildings_df.iterrows():
        if _blank(row.get("Id")):
            continue
        flats = flats_df[flats_df["Building Id"] == row["Id"]]
        buildings.append({
            "id": row["Id"],
            "name": row["Name"],
            "total_height_m": row["Height (m)"],
            "floor_count": row["Floors"],
            "gf_entrance_lobby": row["GF Lobby (sq.m)"],
            "typical_lobby_area": row["Typical Lobby (sq.m)"],
            "total_carpet_area": row["Carpet Area (sq.m)"],
            "twin_of_building_id": None if _blank(row["Twin Of"]) else row["Twin Of"],
            "flats": [{"flat_type": f["Flat Type"], "area_sqm": f["Area (sq.m)"], "total_count": f["Count"]}
                      for _, f in flats.iterrows()],
        })
    return buildings


def rooms_from_table(rooms_df: pd.DataFrame):
    rooms = []
    for _, row in rooms_df.iterrows():
        if _blank(row.get("Name")):
            continue
        room = {"name": row["Name"], "space_type": row["Space Type"], "area": row["Area (sq.m)"],
                "occupancy": row["Occupancy"], "roof_area": row["Roof Area"], "walls": [], "windows": []}
        if not _blank(row["Wall Area"]):
            room["walls"].append({"orientation": row["Wall Orientation"], "area": row["Wall Area"]})
        if not _blank(row["Window Area"]):
            room["windows"].append({"orientation": row["Window Orientation"], "area": row["Window Area"],
                                    "shading": bool(row["Shaded"])})
        rooms.append(room)
    return rooms


# --- Sidebar ---
with st.sidebar:
    st.title("Project Settings")
    area_type = st.selectbox("Area Type", ["URBAN", "RURAL", "METRO", "MAJOR_CITIES"])
    premise_type = st.selectbox("Premise Type", ["RESIDENTIAL", "COMMERCIAL_AC", "COMMERCIAL_NO_AC"])
    carpet_area = st.number_input("Total Carpet Area (sq.m)", 0.0, step=100.0,
                                  help="Leave 0 to use the sum of the building carpet areas.")

    st.markdown("---")
    st.subheader("📥 Regulation Tables")
    template = io.BytesIO()
    export_regulation_workbook(template)
    st.download_button(
        "📄 Download Regulation Workbook",
        data=template.getvalue(),
        file_name="regulations_msedcl_2016.xlsx",
        mime=XLSX_MIME,
        help="Edit the factors or framework tables and upload the workbook back."
    )
    uploaded = st.file_uploader("Upload Regulation Workbook", type=["xlsx"])

st.markdown("<h1 class='main-header'>⚡ Electrical & HVAC Load Calculator</h1>", unsafe_allow_html=True)
st.markdown("---")

tab_elec, tab_hvac = st.tabs(["Electrical", "HVAC"])

with tab_elec:
    st.markdown("##### 🏢 Typical Building")
    c1, c2, c3, c4 = st.columns(4)
    building_height = c1.number_input("Building Height (m)", 1.0, value=70.0)
    floors = c2.number_input("Floors", 1, value=22)
    passenger_lifts = c3.number_input("Passenger Lifts", 1, value=2)
    fire_lifts = c4.number_input("Passenger + Fire Lifts", 0, value=1)

    c1, c2, c3, c4 = st.columns(4)
    lobby_type = c1.selectbox("Lobby Type", ["", "AC", "Mech. Vent"])
    terrace = c2.toggle("Terrace Lighting", False)
    landscape = c3.toggle("Landscape Lighting", False)
    building_count = c4.number_input("Buildings (no geometry)", 1, value=1)

    st.markdown("##### 🚒 Society Services")
    c1, c2, c3, c4 = st.columns(4)
    main_pump_flow = c1.number_input("Fire Main Pump (LPM)", 0.0, value=2850.0, step=10.0)
    sprinkler_flow = c2.number_input("Sprinkler Pump (LPM)", 0.0, step=10.0)
    stp_capacity = c3.number_input("STP Capacity (KLD)", 0.0, step=50.0)
    ev_chargers = c4.number_input("EV Chargers", 0, value=0)

    st.markdown("### 📋 Buildings (Editable)")
    st.session_state.buildings_df = st.data_editor(
        st.session_state.buildings_df, key="buildings_editor", use_container_width=True, num_rows="dynamic")
    st.markdown("### 🏠 Flats (Editable)")
    st.session_state.flats_df = st.data_editor(
        st.session_state.flats_df, key="flats_editor", use_container_width=True, num_rows="dynamic")

    inputs = {
        "buildingHeight": building_height, "numberOfFloors": floors, "passengerLifts": passenger_lifts,
        "passengerFireLifts": fire_lifts, "lobbyType": lobby_type, "terraceLighting": terrace,
        "landscapeLighting": landscape, "buildingCount": building_count, "areaType": area_type,
        "premiseType": premise_type, "totalCarpetArea": carpet_area, "mainPumpFlow": main_pump_flow,
        "sprinklerPumpFlow": sprinkler_flow, "stpCapacity": stp_capacity, "evChargerCount": ev_chargers,
    }
    source = ExcelRegulationSource(uploaded) if uploaded else None

    try:
        result = calculate_electrical_load(
            inputs, buildings_from_tables(st.session_state.buildings_df, st.session_state.flats_df),
            RegulationContext(source))
    except LoadCalculationError as e:
        st.error(f"Calculation error: {e}")
        result = None

    if result is not None:
        totals = result.totals
        rc = result.regulatory_compliance
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Grand TCL", f"{totals.grand.tcl:.1f} kW")
        m2.metric("Sanctioned Load", f"{rc.sanctioned_load.sanctioned_load_kva:.1f} kVA")
        m3.metric("Load After DF", f"{rc.load_after_df.max_demand_kva:.1f} kVA")
        m4.metric("Transformer", f"{totals.standard_transformer_kva} kVA")
        for warning in rc.warnings:
            st.warning(warning)

        st.markdown("### Load Schedule")
        st.dataframe(load_schedule_frame(result), use_container_width=True, hide_index=True)
        if result.building_breakdowns:
            st.markdown("### Buildings")
            st.dataframe(building_breakdown_frame(result), use_container_width=True, hide_index=True)
        st.markdown("### Regulatory Compliance")
        st.dataframe(compliance_frame(result), use_container_width=True, hide_index=True)

        st.download_button(
            "📥 Download Results (Excel)",
            data=export_workbook(electrical=result),
            file_name="electrical_load_report.xlsx",
            mime=XLSX_MIME,
        )

with tab_hvac:
    c1, c2, c3, c4 = st.columns(4)
    city = c1.selectbox("City", [c for c in DESIGN_CONDITIONS if c != "DEFAULT"])
    season = c2.selectbox("Season", ["summer", "monsoon", "winter"])
    safety = c3.number_input("Safety Factor", 1.0, 2.0, 1.10, 0.05)
    diversity = c4.number_input("Diversity Factor", 0.1, 1.0, 1.0, 0.05)

    st.markdown("### 🌡️ Rooms (Editable)")
    st.session_state.rooms_df = st.data_editor(
        st.session_state.rooms_df,
        key="rooms_editor",
        use_container_width=True,
        num_rows="dynamic",
        column_config={
            "Space Type": st.column_config.SelectboxColumn(options=list(INDOOR_CONDITIONS)),
            "Wall Orientation": st.column_config.SelectboxColumn(options=["N", "NE", "E", "SE", "S", "SW", "W", "NW"]),
            "Window Orientation": st.column_config.SelectboxColumn(options=["N", "NE", "E", "SE", "S", "SW", "W", "NW"]),
        },
    )

    try:
        hvac_result = calculate_hvac_load(
            {"city": city, "season": season, "safetyFactor": safety, "diversityFactor": diversity},
            rooms_from_table(st.session_state.rooms_df))
    except LoadCalculationError as e:
        st.error(f"Calculation error: {e}")
        hvac_result = None

    if hvac_result is not None:
        m1, m2, m3 = st.columns(3)
        m1.metric("Grand Total", f"{hvac_result.summary.grand_total_tr:.2f} TR")
        m2.metric("Chillers", f"{hvac_result.chiller_sizing.configuration} x "
                              f"{hvac_result.chiller_sizing.selected_capacity_tr} TR")
        m3.metric("AHUs", f"{hvac_result.ahu_sizing.ahu_count} x {hvac_result.ahu_sizing.ahu_capacity_cfm} CFM")
        st.dataframe(hvac_rooms_frame(hvac_result), use_container_width=True, hide_index=True)
        st.dataframe(hvac_equipment_frame(hvac_result), use_container_width=True, hide_index=True)
        st.download_button(
            "📥 Download HVAC Results (Excel)",
            data=export_workbook(hvac=hvac_result),
            file_name="hvac_load_report.xlsx",
            mime=XLSX_MIME,
        )
