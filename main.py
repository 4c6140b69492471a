import argparse
import datetime
import json
import logging
import os
import sys

from core.errors import LoadCalculationError
from core.reports import export_workbook
from standards.engine import calculate_electrical_load, calculate_hvac_load
from standards.regulations import ExcelRegulationSource, RegulationContext

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Electrical and HVAC load calculator (MSEDCL / IS 3103)")
    parser.add_argument("project", help="JSON project file with 'electrical' and/or 'hvac' sections")
    parser.add_argument("--regulations", help="Excel workbook with factor and regulation sheets")
    parser.add_argument("--project-id", help="Project id used to resolve framework selections")
    parser.add_argument("--export", metavar="XLSX", help="Write the Excel report to this path")
    parser.add_argument("--json", action="store_true", help="Print results as JSON instead of tables")
    parser.add_argument("--log-level", default=os.environ.get("LOADCALC_LOG_LEVEL", "WARNING"),
                        help="Logging level (default from LOADCALC_LOG_LEVEL or WARNING)")
    return parser.parse_args(argv)


def print_electrical(result):
    print("\nElectrical Load Schedule")
    print("-" * 100)
    print(f"{'Category':<28} | {'Description':<34} | {'Nos':>6} | {'TCL kW':>9} | {'MD kW':>9}")
    print("-" * 100)
    sections = list(result.building_ca_loads) + [result.flat_loads] + list(result.society_ca_loads)
    for category in sections:
        for item in category.items:
            print(f"{category.name[:28]:<28} | {item.description[:34]:<34} | {item.nos:>6g} | "
                  f"{item.tcl:>9.2f} | {item.max_demand_kw:>9.2f}")
    print("-" * 100)

    totals = result.totals
    rc = result.regulatory_compliance
    print(f"Mode:                     {totals.mode.value} ({totals.number_of_buildings} building(s))")
    print(f"Grand TCL:                {totals.grand.tcl:.2f} kW")
    print(f"Grand Max Demand:         {totals.grand.max_demand:.2f} kW")
    print(f"Transformer:              {totals.standard_transformer_kva} kVA (estimate {totals.transformer_kva} kVA)")
    print(f"Framework:                {rc.framework} [{rc.area_type}]")
    print(f"Sanctioned Load:          {rc.sanctioned_load.sanctioned_load_kw:.2f} kW / "
          f"{rc.sanctioned_load.sanctioned_load_kva:.2f} kVA")
    print(f"Load After DF:            {rc.load_after_df.max_demand_kw:.2f} kW / "
          f"{rc.load_after_df.max_demand_kva:.2f} kVA")
    dtc = f"{rc.dtc.dtc_count} x {rc.dtc.capacity_per_unit_kva:g} kVA" if rc.dtc.needed else "Not required"
    print(f"DTC:                      {dtc}")
    print(f"Substation:               {rc.substation.substation_type if rc.substation.needed else 'Not required'}")
    print(f"Land:                     {rc.land.total_sqm:.2f} {rc.land.unit}")
    for warning in rc.warnings:
        print(f"(!) {warning}")


def print_hvac(result):
    print("\nHVAC Room Loads")
    print("-" * 80)
    print(f"{'Room':<24} | {'Sensible W':>10} | {'Latent W':>9} | {'Total W':>9} | {'TR':>6} | {'CFM':>7}")
    print("-" * 80)
    for r in result.room_results:
        print(f"{r.name[:24]:<24} | {r.total_sensible_heat_gain:>10.0f} | {r.total_latent_heat_gain:>9.0f} | "
              f"{r.total_room_load:>9.0f} | {r.room_tr:>6.2f} | {r.supply_air_cfm:>7.0f}")
    print("-" * 80)
    ch = result.chiller_sizing
    print(f"Grand Total:   {result.summary.grand_total_tr:.2f} TR")
    print(f"Chillers:      {ch.configuration} x {ch.selected_capacity_tr} TR ({ch.chiller_type})")
    print(f"AHUs:          {result.ahu_sizing.ahu_count} x {result.ahu_sizing.ahu_capacity_cfm} CFM")
    print(f"Cooling Tower: {result.cooling_tower_sizing.capacity_tr:.0f} TR ({result.cooling_tower_sizing.type})")


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    with open(args.project, encoding="utf-8") as fh:
        project = json.load(fh)

    source = ExcelRegulationSource(args.regulations) if args.regulations else None
    context = RegulationContext(source, project_id=args.project_id)

    electrical = hvac = None
    try:
        if "electrical" in project:
            section = project["electrical"]
            electrical = calculate_electrical_load(section.get("inputs", {}), section.get("buildings"), context)
        if "hvac" in project:
            section = project["hvac"]
            hvac = calculate_hvac_load(section.get("params"), section.get("rooms", []))
    except LoadCalculationError as e:
        logger.error("Calculation failed: %s", e)
        return 1

    if electrical is None and hvac is None:
        print("Project file has no 'electrical' or 'hvac' section.")
        return 1

    if args.json:
        out = {}
        if electrical is not None:
            out["electrical"] = electrical.to_dict()
        if hvac is not None:
            out["hvac"] = hvac.to_dict()
        print(json.dumps(out, indent=2, default=str))
    else:
        if electrical is not None:
            print_electrical(electrical)
        if hvac is not None:
            print_hvac(hvac)

    path = args.export
    if path is None and not args.json and sys.stdin.isatty():
        if input("\nExport report to Excel? (y/n): ").lower() == "y":
            path = f"Load_Report_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    if path:
        export_workbook(electrical, hvac, path)
        print(f"\n[INFO] Excel report written: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
