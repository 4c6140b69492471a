import datetime
import io
from typing import List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils.dataframe import dataframe_to_rows

LOAD_COLUMNS = [
    "Section", "Category", "Description", "Nos", "kW/Unit", "W/sq.m", "Area (sq.m)",
    "TCL (kW)", "MDF", "EDF", "FDF", "Max Demand (kW)", "Essential (kW)", "Fire (kW)",
]

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)
COLUMN_WIDTH = 15


def _category_rows(section: str, categories) -> List[dict]:
    rows = []
    for category in categories:
        for item in category.items:
            rows.append({
                "Section": section,
                "Category": category.name,
                "Description": item.description,
                "Nos": item.nos,
                "kW/Unit": item.kw_per_unit,
                "W/sq.m": item.watt_per_sqm,
                "Area (sq.m)": item.area_sqm,
                "TCL (kW)": round(item.tcl, 2),
                "MDF": item.mdf,
                "EDF": item.edf,
                "FDF": item.fdf,
                "Max Demand (kW)": round(item.max_demand_kw, 2),
                "Essential (kW)": round(item.essential_kw, 2),
                "Fire (kW)": round(item.fire_kw, 2),
            })
    return rows


def load_schedule_frame(result) -> pd.DataFrame:
    """One row per load item: building common area, flats, then society loads."""
    rows = (_category_rows("Building CA", result.building_ca_loads)
            + _category_rows("Flats", [result.flat_loads])
            + _category_rows("Society CA", result.society_ca_loads))
    return pd.DataFrame(rows, columns=LOAD_COLUMNS)


def building_breakdown_frame(result) -> pd.DataFrame:
    rows = [{
        "Building": b.building_name,
        "Height (m)": b.building_height,
        "Floors": b.number_of_floors,
        "Units": b.total_units,
        "Carpet Area (sq.m)": b.carpet_area,
        "Twin Of": b.twin_of_building_id,
        "Diversity": b.diversity_factor,
        "TCL (kW)": round(b.totals.tcl, 2),
        "Max Demand (kW)": round(b.totals.max_demand, 2),
        "Essential (kW)": round(b.totals.essential, 2),
        "Fire (kW)": round(b.totals.fire, 2),
    } for b in result.building_breakdowns]
    return pd.DataFrame(rows)


def compliance_frame(result) -> pd.DataFrame:
    totals = result.totals
    rc = result.regulatory_compliance
    rows = [
        ("Framework", rc.framework),
        ("Area Type", rc.area_type),
        ("Aggregation", totals.mode.value),
        ("Buildings", totals.number_of_buildings),
        ("Grand TCL (kW)", round(totals.grand.tcl, 2)),
        ("Grand Max Demand (kW)", round(totals.grand.max_demand, 2)),
        ("Transformer Estimate (kVA)", totals.transformer_kva),
        ("Standard Transformer (kVA)", totals.standard_transformer_kva),
        ("Minimum Load (kW)", round(rc.minimum_load.required_kw, 2)),
        ("Sanctioned Load (kW)", round(rc.sanctioned_load.sanctioned_load_kw, 2)),
        ("Sanctioned Load (kVA)", round(rc.sanctioned_load.sanctioned_load_kva, 2)),
        ("Load After DF (kW)", round(rc.load_after_df.max_demand_kw, 2)),
        ("Load After DF (kVA)", round(rc.load_after_df.max_demand_kva, 2)),
        ("DTC Required", "Yes" if rc.dtc.needed else "No"),
        ("DTC Count", rc.dtc.dtc_count),
        ("Substation", rc.substation.substation_type if rc.substation.needed else "Not required"),
        ("Land Required (sq.m)", round(rc.land.total_sqm, 2)),
    ]
    if rc.lease is not None:
        rows.append(("Lease", f"{rc.lease.duration} at {rc.lease.annual_rent} per year"))
    rows.extend(("Warning", w) for w in rc.warnings)
    return pd.DataFrame(rows, columns=["Parameter", "Value"])


def hvac_rooms_frame(result) -> pd.DataFrame:
    rows = [{
        "Room": r.name,
        "Space Type": r.space_type,
        "Area (sq.m)": r.area,
        "Sensible (W)": round(r.total_sensible_heat_gain),
        "Latent (W)": round(r.total_latent_heat_gain),
        "Ventilation (W)": round(r.ventilation_load),
        "Total (W)": round(r.total_room_load),
        "TR": round(r.room_tr, 2),
        "SHR": round(r.sensible_heat_ratio, 2),
        "Supply CFM": round(r.supply_air_cfm),
        "Fresh Air CFM": round(r.fresh_air_cfm),
    } for r in result.room_results]
    return pd.DataFrame(rows)


def hvac_equipment_frame(result) -> pd.DataFrame:
    s, ch, ahu, ct = result.summary, result.chiller_sizing, result.ahu_sizing, result.cooling_tower_sizing
    rows = [
        ("Grand Total Load (W)", round(s.grand_total_load)),
        ("Grand Total (TR)", round(s.grand_total_tr, 2)),
        ("Grand Total (BTU/hr)", round(s.grand_total_btu)),
        ("Chiller Configuration", f"{ch.configuration} x {ch.selected_capacity_tr} TR"),
        ("Chiller Type", ch.chiller_type),
        ("Plant Power (kW)", round(ch.power.total_plant_kw)),
        ("AHUs", f"{ahu.ahu_count} x {ahu.ahu_capacity_cfm} CFM"),
        ("AHU Fan Power (kW)", round(ahu.fan_power_kw, 1)),
        ("Cooling Tower (TR)", round(ct.capacity_tr)),
        ("Cooling Tower Type", ct.type),
    ]
    return pd.DataFrame(rows, columns=["Parameter", "Value"])


def _write_sheet(wb: Workbook, title: str, df: pd.DataFrame, first: bool = False):
    ws = wb.active if first else wb.create_sheet(title)
    ws.title = title
    # Blank cells instead of NaN
    df = df.astype(object).where(df.notna(), None)
    for row in dataframe_to_rows(df, index=False, header=True):
        ws.append(row)
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    for col in ws.columns:
        ws.column_dimensions[col[0].column_letter].width = COLUMN_WIDTH


def build_workbook(electrical=None, hvac=None) -> Workbook:
    wb = Workbook()
    summary = pd.DataFrame([("Generated", datetime.datetime.now().strftime("%Y-%m-%d %H:%M"))],
                           columns=["Parameter", "Value"])
    if electrical is not None:
        summary = pd.concat([summary, compliance_frame(electrical)], ignore_index=True)
    _write_sheet(wb, "Summary", summary, first=True)

    if electrical is not None:
        _write_sheet(wb, "Load Schedule", load_schedule_frame(electrical))
        if electrical.building_breakdowns:
            _write_sheet(wb, "Buildings", building_breakdown_frame(electrical))
    if hvac is not None:
        _write_sheet(wb, "HVAC Rooms", hvac_rooms_frame(hvac))
        _write_sheet(wb, "HVAC Equipment", hvac_equipment_frame(hvac))
    return wb


def export_workbook(electrical=None, hvac=None, path: Optional[str] = None):
    """Saves the report to path, or returns the workbook bytes when no path is given."""
    wb = build_workbook(electrical, hvac)
    if path is not None:
        wb.save(path)
        return path
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
