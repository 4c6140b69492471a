import unittest
from core.models import AggregateTotals, AggregationMode, LoadTotals
from standards.compliance import (
    calculate_dtc_requirements, calculate_land_requirements, calculate_minimum_load,
    calculate_regulatory_compliance, calculate_substation_requirements, lease_summary, regulation_gaps,
    validate_sanctioned_load,
)
from standards.regulations import RegulationContext, builtin_regulations


def make_totals(tcl, max_demand, essential=0.0, fire=0.0, buildings=1):
    grand = LoadTotals(tcl, max_demand, essential, fire)
    return AggregateTotals(building=grand, society=LoadTotals(), grand=grand, number_of_buildings=buildings,
                           mode=AggregationMode.PER_BUILDING, transformer_kva=0, standard_transformer_kva=0)


class TestCompliance(unittest.TestCase):
    def setUp(self):
        self.regs = RegulationContext().load_regulations()

    def test_minimum_load(self):
        # 5000 sq.m x 75 W/sq.m = 375 kW
        minimum = calculate_minimum_load(self.regs, 5000)
        self.assertAlmostEqual(minimum.required_kw, 375)
        self.assertEqual(minimum.watt_per_sqm, 75)
        self.assertEqual(calculate_minimum_load(self.regs, 5000, "COMMERCIAL", has_ac=True).required_kw, 1000)
        self.assertEqual(calculate_minimum_load(self.regs, 5000, "COMMERCIAL").premise_type, "COMMERCIAL_NO_AC")
        self.assertEqual(calculate_minimum_load(self.regs, 0).required_kw, 0)
        # Actual load standard carries no density
        self.assertEqual(calculate_minimum_load(self.regs, 5000, "EV_CHARGING").required_kw, 0)

    def test_sanctioned_limits(self):
        result = validate_sanctioned_load(self.regs, 200, 250)
        self.assertFalse(result.valid)
        self.assertTrue(result.exceeds_kw_limit)
        self.assertTrue(result.exceeds_kva_limit)
        self.assertEqual(result.warnings[0], "Sanctioned load 200.00 kW exceeds limit of 160 kW")
        self.assertEqual(result.warnings[1], "Sanctioned load 250.00 kVA exceeds limit of 200 kVA")

        result = validate_sanctioned_load(self.regs, 200, 250, multiple_consumers=True)
        self.assertTrue(result.valid)
        self.assertEqual(result.limit_type, "MULTIPLE_CONSUMERS_CUMULATIVE")
        self.assertEqual(result.max_kw, 480)

    def test_dtc(self):
        # 720 kW / 0.9 = 800 kVA > 75 kVA (urban) -> 2 x 500 kVA
        dtc = calculate_dtc_requirements(self.regs, 720, "URBAN")
        self.assertTrue(dtc.needed)
        self.assertAlmostEqual(dtc.load_after_df_kva, 800)
        self.assertEqual(dtc.dtc_count, 2)
        self.assertEqual(dtc.total_capacity_kva, 1000)
        # 25 sq.m + 15 sq.m per extra unit
        self.assertAlmostEqual(dtc.land_required_sqm, 40)
        self.assertFalse(dtc.ring_main_required)

        metro = calculate_dtc_requirements(self.regs, 720, "METRO")
        self.assertTrue(metro.individual_transformer_required)
        self.assertTrue(metro.ring_main_required)

    def test_dtc_count_at_600_kva(self):
        # 540 kW / 0.9 = 600 kVA -> ceil(600 / 500) = 2 units
        dtc = calculate_dtc_requirements(self.regs, 540, "URBAN")
        self.assertTrue(dtc.needed)
        self.assertAlmostEqual(dtc.load_after_df_kva, 600)
        self.assertEqual(dtc.dtc_count, 2)

    def test_dtc_not_needed(self):
        # 45 / 0.9 = 50 kVA < 75 kVA
        dtc = calculate_dtc_requirements(self.regs, 45, "URBAN")
        self.assertFalse(dtc.needed)
        self.assertEqual(dtc.dtc_count, 0)
        self.assertEqual(dtc.land_required_sqm, 0)

        unknown = calculate_dtc_requirements(self.regs, 720, "ISLAND")
        self.assertFalse(unknown.needed)
        self.assertIn("ISLAND", unknown.reason)

    def test_substation_bands(self):
        sub = calculate_substation_requirements(self.regs, 3500, "URBAN")
        self.assertTrue(sub.needed)
        self.assertEqual(sub.substation_type, "33/11 kV or 22/11 kV Substation")
        self.assertEqual(sub.land_required_sqm, 3500)
        self.assertEqual(sub.incoming_feeders, 2)

        # Lower bound is exclusive
        self.assertFalse(calculate_substation_requirements(self.regs, 3000, "URBAN").needed)
        self.assertFalse(calculate_substation_requirements(self.regs, 3500, "METRO").needed)
        self.assertEqual(calculate_substation_requirements(self.regs, 25000, "URBAN").substation_type,
                         "EHV Substation")

    def test_land(self):
        dtc = calculate_dtc_requirements(self.regs, 720, "URBAN")
        sub = calculate_substation_requirements(self.regs, 3500, "URBAN")
        land = calculate_land_requirements(dtc, sub)
        self.assertAlmostEqual(land.total_sqm, 3540)
        self.assertEqual([i.type for i in land.breakdown], ["DTC", "Substation"])
        self.assertAlmostEqual(land.breakdown[0].land_per_unit_sqm, 20)

        not_needed = calculate_substation_requirements(self.regs, 100, "URBAN")
        self.assertEqual(calculate_land_requirements(calculate_dtc_requirements(self.regs, 45), not_needed).total_sqm, 0)

    def test_lease(self):
        lease = lease_summary(self.regs)
        self.assertEqual(lease.duration, "99 years")
        self.assertEqual(lease.annual_rent, "Rs. 1/-")
        self.assertEqual(lease.upfront_payment, "Rs. 99/-")
        self.assertEqual(lease.surrender_notice, "12 months")
        self.assertTrue(lease.encumbrance_free)

    def test_full_compliance(self):
        totals = make_totals(300, 150, essential=50, fire=40)
        result = calculate_regulatory_compliance(self.regs, totals, "URBAN", 5000, 1)
        # Minimum 375 kW beats TCL 300 kW
        self.assertAlmostEqual(result.sanctioned_load.sanctioned_load_kw, 375)
        self.assertAlmostEqual(result.sanctioned_load.total_connected_load_kw, 300)
        # 375 / 0.8 = 468.75 kVA
        self.assertAlmostEqual(result.sanctioned_load.sanctioned_load_kva, 468.75)
        self.assertTrue(result.minimum_load.applied)
        # Load after DF: 150 / 0.9 = 166.67 kVA, never the sanctioned figure
        self.assertAlmostEqual(result.load_after_df.max_demand_kva, 166.6667, places=3)
        self.assertAlmostEqual(result.load_after_df.fire_kw, 40)
        self.assertEqual(result.dtc.dtc_count, 1)
        self.assertAlmostEqual(result.land.total_sqm, 25)
        self.assertFalse(result.substation.needed)
        self.assertEqual(len(result.warnings), 2)
        self.assertEqual(result.framework, "MSEDCL Supply Code 2016 (NSC Circular 35530)")
        self.assertFalse(result.approximate)

    def test_tcl_above_minimum(self):
        result = calculate_regulatory_compliance(self.regs, make_totals(400, 100, buildings=3), "URBAN", 1000, 3)
        self.assertAlmostEqual(result.sanctioned_load.sanctioned_load_kw, 400)
        self.assertFalse(result.minimum_load.applied)
        self.assertTrue(result.validation.valid)
        self.assertEqual(result.warnings, [])

    def test_missing_rules_are_warned(self):
        totals = make_totals(100, 100, buildings=40)
        result = calculate_regulatory_compliance(self.regs, totals, "SUBURBAN", 5000, 40, "HOSPITAL")
        self.assertFalse(result.dtc.needed)
        self.assertEqual(result.minimum_load.required_kw, 0)
        self.assertEqual(result.warnings, [
            "No load standard defined for premise type: HOSPITAL; minimum load not applied",
            "No DTC threshold defined for area type: SUBURBAN; DTC requirement not assessed",
        ])
        self.assertTrue(result.approximate)

        self.assertEqual(regulation_gaps(self.regs, "URBAN"), [])
        self.assertEqual(regulation_gaps(self.regs, "URBAN", "EV_CHARGING"), [])
        self.assertEqual(len(regulation_gaps(builtin_regulations(), "MAJOR_CITIES", "COMMERCIAL")), 2)

    def test_builtin_defaults(self):
        result = calculate_regulatory_compliance(builtin_regulations(), make_totals(100, 80), "URBAN", 0, 1)
        self.assertTrue(result.approximate)
        self.assertIsNone(result.lease)
        self.assertFalse(result.substation.needed)
        self.assertEqual(result.framework, "Built-in Defaults")


if __name__ == '__main__':
    unittest.main()
