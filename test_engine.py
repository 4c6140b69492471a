import json
import unittest
from core.errors import ValidationError
from core.models import AggregationMode
from standards.engine import calculate_electrical_load, calculate_hvac_load
from standards.regulations import RegulationContext

INPUTS = {"buildingHeight": 70, "numberOfFloors": 38, "passengerLifts": 2}

BUILDINGS = [
    {"id": 1, "name": "Tower A", "total_height_m": 70, "floor_count": 38, "total_carpet_area": 5000,
     "flats": [{"flat_type": "2BHK", "area_sqm": 100, "total_count": 10}]},
    {"id": 2, "name": "Tower B", "twin_of_building_id": 1},
]

# Per tower at 70 m / 38 floors: common area TCL 85.84 kW, MD 44.98 kW, fire 33.49 kW
# Flats: 10 x 100 sq.m x 75 W = 75 kW, MD 45 kW
# Society: TCL 121.33 kW, MD 2.3325 kW


class TestElectricalLoad(unittest.TestCase):
    def test_representative_building(self):
        result = calculate_electrical_load(INPUTS)
        totals = result.totals
        self.assertEqual(totals.mode, AggregationMode.REPRESENTATIVE_BUILDING)
        self.assertEqual(totals.number_of_buildings, 1)
        self.assertEqual(result.flat_loads.items, [])
        self.assertEqual(result.building_breakdowns, [])
        # 85.84 + 121.33
        self.assertAlmostEqual(totals.grand.tcl, 207.17)
        self.assertTrue(result.approximate)
        self.assertEqual(result.diagnostics[0].kind, "Approximation")

        rc = result.regulatory_compliance
        self.assertAlmostEqual(rc.sanctioned_load.sanctioned_load_kw, 207.17)
        # 207.17 / 0.8 = 258.96 kVA: over the single consumer limits, plus the approximation note
        self.assertEqual(len(rc.warnings), 3)
        self.assertEqual(rc.framework, "MSEDCL Supply Code 2016 (NSC Circular 35530)")

    def test_building_count_without_geometry(self):
        result = calculate_electrical_load(dict(INPUTS, buildingCount=3), [{"id": 1, "name": "A"}, {"id": 2}])
        self.assertEqual(result.totals.number_of_buildings, 3)
        self.assertAlmostEqual(result.totals.building.tcl, 3 * 85.84)

    def test_per_building(self):
        result = calculate_electrical_load(dict(INPUTS, areaType="metro"), BUILDINGS)
        totals = result.totals
        self.assertEqual(totals.mode, AggregationMode.PER_BUILDING)
        self.assertEqual(result.area_type, "METRO")
        self.assertEqual(len(result.building_breakdowns), 2)

        twin = result.building_breakdowns[1]
        self.assertTrue(twin.is_twin)
        self.assertEqual(twin.twin_of_building_id, 1)
        self.assertEqual(twin.total_units, 10)
        # Metro DF 2 -> x 0.5: (44.98 + 45) x 0.5 = 44.99
        self.assertAlmostEqual(twin.totals.max_demand, 44.99)
        self.assertAlmostEqual(twin.totals.fire, 33.49)

        # 2 x (85.84 + 75) + 121.33 = 443.01
        self.assertAlmostEqual(totals.grand.tcl, 443.01)
        # 2 x 44.99 + 2.3325 = 92.3125 -> / 0.9 = 102.6 kVA
        self.assertAlmostEqual(totals.grand.max_demand, 92.3125)
        self.assertEqual(totals.transformer_kva, 200)
        self.assertEqual(totals.standard_transformer_kva, 160)

        self.assertEqual(result.flat_loads.item("2BHK (100 sqm)").nos, 20)
        lifts = [c for c in result.building_ca_loads if c.name == "Lifts"][0]
        self.assertEqual(lifts.item("Passenger Lifts").nos, 4)

        rc = result.regulatory_compliance
        # Carpet area from the buildings: 5000 sq.m x 75 W = 375 kW, below the TCL
        self.assertAlmostEqual(rc.minimum_load.required_kw, 375)
        self.assertFalse(rc.minimum_load.applied)
        self.assertEqual(rc.validation.limit_type, "MULTIPLE_CONSUMERS_CUMULATIVE")
        self.assertEqual(rc.warnings, [])
        self.assertFalse(rc.dtc.needed)
        self.assertFalse(result.approximate)
        self.assertEqual(result.diagnostics, [])

    def test_repeat_runs_are_identical(self):
        first = calculate_electrical_load(INPUTS, BUILDINGS)
        second = calculate_electrical_load(INPUTS, BUILDINGS)
        self.assertEqual(first.totals, second.totals)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_to_dict(self):
        data = calculate_electrical_load(INPUTS, BUILDINGS).to_dict()
        self.assertIn("buildingCALoads", data)
        self.assertIn("societyCALoads", data)
        self.assertEqual(data["totals"]["mode"], "PER_BUILDING")
        self.assertAlmostEqual(data["totals"]["grand"]["tcl"], 443.01)
        self.assertIn("totalTcl", data["buildingCALoads"][0])
        self.assertEqual(data["regulatoryFramework"]["code"], "MSEDCL_2016")
        self.assertIn("sanctionedLoadKva", data["regulatoryCompliance"]["sanctionedLoad"])
        json.dumps(data)

    def test_lookup_miss_is_reported(self):
        context = RegulationContext()
        result = calculate_electrical_load(dict(INPUTS, boosterPumpFlow=250), context=context)
        booster = [c for c in result.building_ca_loads if c.name == "PHE (Building Level)"][0]
        # 250 LPM has no row: default 2.2 kW x 1 working pump
        self.assertAlmostEqual(booster.total_tcl, 2.2)
        self.assertIn("LookupMiss", [d.kind for d in result.diagnostics])
        self.assertTrue(any("phe_pump" in w for w in result.regulatory_compliance.warnings))

    def test_unknown_area_type_is_flagged(self):
        result = calculate_electrical_load(dict(INPUTS, areaType="suburban", buildingCount=40))
        rc = result.regulatory_compliance
        self.assertGreater(rc.load_after_df.max_demand_kva, 1000)
        # No threshold for the area: the DTC check cannot be made, and says so
        self.assertFalse(rc.dtc.needed)
        self.assertIn("No DTC threshold defined for area type: SUBURBAN; DTC requirement not assessed", rc.warnings)
        self.assertTrue(rc.approximate)
        self.assertIn("RegulationUnavailable", [d.kind for d in result.diagnostics])

    def test_missing_required_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            calculate_electrical_load({"numberOfFloors": 10, "passengerLifts": 2})
        self.assertEqual(ctx.exception.field, "buildingHeight")

        with self.assertRaises(ValidationError) as ctx:
            calculate_electrical_load(dict(INPUTS, numberOfFloors=0))
        self.assertEqual(ctx.exception.field, "numberOfFloors")

        with self.assertRaises(ValidationError):
            calculate_electrical_load(None)

        with self.assertRaises(ValidationError) as ctx:
            calculate_electrical_load(dict(INPUTS, passengerLifts="two"))
        self.assertEqual(ctx.exception.field, "passengerLifts")


class TestHVACLoad(unittest.TestCase):
    ROOM = {"name": "Office", "spaceType": "office", "area": 100, "occupancy": 10,
            "walls": [{"orientation": "w", "area": 30}], "windows": [{"orientation": "W", "area": 10}]}

    def test_hvac_load(self):
        result = calculate_hvac_load({"city": "Mumbai"}, [self.ROOM])
        self.assertEqual(result.design_conditions.city, "MUMBAI")
        self.assertEqual(result.design_conditions.outside_db, 38)
        room = result.room_results[0]
        # Same office as the room level test: 9868.5 W
        self.assertAlmostEqual(room.total_room_load, 9868.5)
        self.assertAlmostEqual(result.summary.grand_total_load, 9868.5 * 1.10 * 1.05)
        # 3.24 TR -> 1.62 per chiller -> 10 TR, single unit
        self.assertEqual(result.chiller_sizing.configuration, "1W")
        self.assertEqual(result.chiller_sizing.selected_capacity_tr, 10)
        self.assertEqual(result.ahu_sizing.ahu_count, 1)
        self.assertAlmostEqual(result.cooling_tower_sizing.capacity_tr, 12.5)
        self.assertIn("totalPlantKw", result.to_dict()["chillerSizing"]["power"])

    def test_no_rooms(self):
        result = calculate_hvac_load(None, [])
        self.assertEqual(result.summary.grand_total_load, 0)
        self.assertEqual(result.chiller_sizing.selected_capacity_tr, 10)

    def test_invalid_input(self):
        with self.assertRaises(ValidationError) as ctx:
            calculate_hvac_load({"season": "spring"}, [self.ROOM])
        self.assertEqual(ctx.exception.field, "params")

        with self.assertRaises(ValidationError) as ctx:
            calculate_hvac_load({}, ["not a room"])
        self.assertEqual(ctx.exception.field, "rooms")


if __name__ == '__main__':
    unittest.main()
