import unittest
from core.converters import sqft_to_sqm
from core.inputs import ElectricalInputs
from core.models import FlatType
from standards.electrical import (
    BuildingFireFightingCalculator, BuildingPHECalculator, FireFightingPumpCalculator, HVACElectricalCalculator,
    LiftCalculator, LightingCalculator, PressurizationCalculator, SocietyInfrastructureCalculator,
    calculate_building_ca_loads, calculate_flat_loads, calculate_society_ca_loads,
)
from standards.regulations import RegulationContext


def make_inputs(**overrides):
    data = {"buildingHeight": 70, "numberOfFloors": 38, "passengerLifts": 2}
    data.update(overrides)
    return ElectricalInputs.from_mapping(data)


class TestBuildingLoads(unittest.TestCase):
    def setUp(self):
        self.context = RegulationContext()

    def test_lighting(self):
        category = LightingCalculator(self.context).calculate(make_inputs())
        # GF lobby: 30 W/sq.m x 100 sq.m = 3.0 kW
        self.assertAlmostEqual(category.item("GF Entrance Lobby").tcl, 3.0)
        # Typical lobby: 20 W/sq.m x 30 sq.m x 38 floors = 22.8 kW
        typical = category.item("Typical Floor Lobby")
        self.assertAlmostEqual(typical.tcl, 22.8)
        self.assertEqual(typical.nos, 38)
        # Staircases: 38 floors x 2 stairwells x 2 landings = 152 fixtures x 20 W = 3.04 kW
        stairs = category.item("Staircases & Landings")
        self.assertEqual(stairs.nos, 152)
        self.assertAlmostEqual(stairs.tcl, 3.04)
        self.assertIsNone(category.item("Terrace Lighting"))
        self.assertAlmostEqual(category.total_tcl, 28.84)

    def test_lighting_optional_items(self):
        inputs = make_inputs(terraceLighting=True, landscapeLighting="yes", landscapeLightingLoad=12)
        category = LightingCalculator(self.context).calculate(inputs)
        # Terrace: 2 W/sq.m x 200 sq.m = 0.4 kW
        self.assertAlmostEqual(category.item("Terrace Lighting").tcl, 0.4)
        self.assertAlmostEqual(category.item("Landscape & External Lighting").tcl, 12.0)

    def test_lifts_by_height_band(self):
        category = LiftCalculator(self.context).calculate(make_inputs())
        # 70 m -> 14 kW per lift, 2 lifts
        self.assertEqual(len(category.items), 1)
        lifts = category.item("Passenger Lifts")
        self.assertEqual(lifts.kw_per_unit, 14)
        self.assertAlmostEqual(lifts.tcl, 28.0)

        category = LiftCalculator(self.context).calculate(
            make_inputs(buildingHeight=65, passengerFireLifts=1, firemenLifts=1))
        # 65 m falls in the 70 m band
        self.assertEqual([i.description for i in category.items],
                         ["Passenger Lifts", "Passenger + Fire Lift", "Firemen Evac/Service Lift"])
        self.assertAlmostEqual(category.total_tcl, 4 * 14)
        self.assertEqual(category.item("Passenger + Fire Lift").fdf, 1.0)
        self.assertEqual(category.item("Passenger Lifts").fdf, 0.0)

    def test_lobby_air_conditioning(self):
        category = HVACElectricalCalculator(self.context).calculate(make_inputs(numberOfFloors=10, lobbyType="AC"))
        # Lobby area: 100 + 30 x 10 = 400 sq.m = 4304 sq.ft -> 4304 / 200 = 21.52 -> 22 TR
        # 22 TR x 3.6 kW (3 TR split unit rate) = 79.2 kW
        item = category.item("Lobby Air Conditioning")
        self.assertEqual(item.nos, 22)
        self.assertAlmostEqual(item.tcl, 79.2)
        self.assertIsNone(category.item("Mechanical Ventilation Fans"))

    def test_mechanical_ventilation(self):
        category = HVACElectricalCalculator(self.context).calculate(make_inputs(lobbyType="Mech. Vent"))
        # 5000 CFM fan = 2.2 kW x 4 fans
        self.assertAlmostEqual(category.item("Mechanical Ventilation Fans").tcl, 8.8)

        category = HVACElectricalCalculator(self.context).calculate(make_inputs())
        self.assertEqual(category.items, [])

    def test_pressurization(self):
        category = PressurizationCalculator(self.context).calculate(make_inputs())
        # 2 staircases x 5.5 kW; no fire lifts, no lobby system
        self.assertEqual(len(category.items), 1)
        self.assertAlmostEqual(category.total_tcl, 11.0)

        category = PressurizationCalculator(self.context).calculate(make_inputs(firemenLifts=1))
        self.assertAlmostEqual(category.item("Fire Lift Lobby Pressurization").tcl, 7.5)

    def test_booster_and_sewage_pumps(self):
        inputs = make_inputs(boosterPumpFlow=500, boosterPumpSet="2W+1S", sewagePumpCapacity=300)
        category = BuildingPHECalculator(self.context).calculate(inputs)
        # 2 working x 4.0 kW
        booster = category.item("PHE Booster Pumps")
        self.assertEqual(booster.nos, 2)
        self.assertAlmostEqual(booster.tcl, 8.0)
        self.assertEqual(booster.details["config"], "2W+1S")
        # 2 sewage pumps x 3.0 kW
        self.assertAlmostEqual(category.item("Sewage Pumps").tcl, 6.0)

    def test_wet_riser_follows_height(self):
        calc = BuildingFireFightingCalculator(self.context)
        self.assertAlmostEqual(calc.calculate(make_inputs()).total_tcl, 11.0)
        self.assertEqual(calc.calculate(make_inputs(buildingHeight=12)).items, [])
        self.assertEqual(len(calc.calculate(make_inputs(buildingHeight=12, wetRiserPump=True)).items), 1)
        self.assertEqual(calc.calculate(make_inputs(wetRiserPump="no")).items, [])

    def test_building_categories_are_factored(self):
        categories = calculate_building_ca_loads(make_inputs(), self.context)
        names = [c.name for c in categories]
        self.assertEqual(names, ["Lighting & Small Power", "Lifts", "HVAC & Ventilation", "Pressurization Systems",
                                 "PHE (Building Level)", "Fire Fighting (Building)", "Other Building Loads"])
        lighting = categories[0]
        # 3.0 x 0.8 + 22.8 x 0.8 + 3.04 x 1.0 = 23.68
        self.assertAlmostEqual(lighting.total_max_demand, 23.68)
        # Lifts: 28 x 0.6
        self.assertAlmostEqual(categories[1].total_max_demand, 16.8)
        # Staircase pressurization only runs on fire
        self.assertAlmostEqual(categories[3].total_max_demand, 0.0)
        self.assertAlmostEqual(categories[3].total_fire, 11.0)
        for category in categories:
            self.assertAlmostEqual(category.total_tcl, sum(i.tcl for i in category.items))
        self.assertEqual(self.context.diagnostics, [])


class TestFlatLoads(unittest.TestCase):
    def test_flat_loads(self):
        context = RegulationContext()
        flats = [FlatType("2BHK", sqft_to_sqm(1000), 50), FlatType("3BHK", 120.0, 0)]
        category = calculate_flat_loads(flats, context)
        # 1000 sq.ft = 92.903 sq.m x 75 W = 6.967725 kW per flat x 50 = 348.386 kW
        self.assertEqual(len(category.items), 1)
        item = category.items[0]
        self.assertEqual(item.description, "2BHK (93 sqm)")
        self.assertAlmostEqual(item.kw_per_unit, 6.967725)
        self.assertAlmostEqual(item.tcl, 348.386, places=3)
        self.assertAlmostEqual(item.max_demand_kw, 348.386 * 0.6, places=3)
        self.assertEqual(category.name, "Residential Flat Loads")


class TestSocietyLoads(unittest.TestCase):
    def setUp(self):
        self.context = RegulationContext()

    def test_default_fire_pumps(self):
        category = FireFightingPumpCalculator(self.context).calculate(make_inputs())
        # 2850 LPM -> 112 kW main pump, "Main+SBY+Jky" -> 1 working
        self.assertAlmostEqual(category.item("Main Hydrant Pump").tcl, 112)
        self.assertAlmostEqual(category.item("Hydrant Jockey Pump").tcl, 9.33)
        self.assertIsNone(category.item("Sprinkler Main Pump"))

    def test_sprinkler_and_multiple_mains(self):
        inputs = make_inputs(fbtPumpSetType="2 Main+SBY+Jky", sprinklerPumpFlow=1425)
        category = FireFightingPumpCalculator(self.context).calculate(inputs)
        self.assertEqual(category.item("Main Hydrant Pump").nos, 2)
        self.assertAlmostEqual(category.item("Main Hydrant Pump").tcl, 224)
        self.assertAlmostEqual(category.item("Sprinkler Main Pump").tcl, 56)
        self.assertAlmostEqual(category.item("Sprinkler Jockey Pump").tcl, 9.33)

    def test_infrastructure(self):
        inputs = make_inputs(stpCapacity=300, clubhouseLoad=50, evChargerCount=4, streetLightingLoad=10)
        category = SocietyInfrastructureCalculator(self.context).calculate(inputs)
        self.assertAlmostEqual(category.item("STP/WTP Plant").tcl, 30)
        self.assertAlmostEqual(category.item("Clubhouse & Amenities").tcl, 50)
        # 4 fast chargers x 7.4 kW
        self.assertAlmostEqual(category.item("EV Charging Stations (fast)").tcl, 29.6)
        self.assertAlmostEqual(category.item("Street & Common Area Lighting").tcl, 10)

    def test_society_totals(self):
        categories = calculate_society_ca_loads(make_inputs(), self.context)
        self.assertEqual([c.name for c in categories],
                         ["Fire Fighting System", "PHE Transfer Pumps", "Society Infrastructure"])
        fire = categories[0]
        self.assertAlmostEqual(fire.total_tcl, 121.33)
        # Main 112 x 0 + jockey 9.33 x 0.25 = 2.3325
        self.assertAlmostEqual(fire.total_max_demand, 2.3325)
        # Main 112 x 0.25 + jockey 9.33 x 1.0 = 37.33
        self.assertAlmostEqual(fire.total_fire, 37.33)
        self.assertAlmostEqual(fire.total_essential, 9.33)
        self.assertEqual(categories[1].items, [])


if __name__ == '__main__':
    unittest.main()
