import unittest
from core.models import LoadCategory, LoadItem, LoadTotals
from standards.demand import apply_demand_factors, sum_totals


class TestDemandFactors(unittest.TestCase):
    def test_factors_applied_per_item(self):
        category = LoadCategory("Test", [
            LoadItem("Pump", tcl=10, mdf=0.7, edf=1.0, fdf=0.0),
            LoadItem("Fan", tcl=4, mdf=0.0, edf=0.0, fdf=1.0),
        ])
        factored = apply_demand_factors(category)
        # MD = 10 x 0.7 + 4 x 0 = 7
        self.assertAlmostEqual(factored.total_max_demand, 7.0)
        self.assertAlmostEqual(factored.total_essential, 10.0)
        self.assertAlmostEqual(factored.total_fire, 4.0)
        self.assertAlmostEqual(factored.total_tcl, 14.0)

    def test_missing_factors_use_defaults(self):
        # No factor on the item: 0.6 / 0.6 / 0
        factored = apply_demand_factors(LoadCategory("Test", [LoadItem("Unknown", tcl=10)]))
        item = factored.items[0]
        self.assertAlmostEqual(item.max_demand_kw, 6.0)
        self.assertAlmostEqual(item.essential_kw, 6.0)
        self.assertAlmostEqual(item.fire_kw, 0.0)

    def test_reapplying_is_harmless(self):
        category = LoadCategory("Test", [LoadItem("Pump", tcl=10, mdf=0.5, edf=0.5, fdf=0.25)])
        once = apply_demand_factors(category)
        twice = apply_demand_factors(once)
        self.assertEqual(once, twice)
        self.assertAlmostEqual(twice.total_max_demand, 5.0)

    def test_original_left_untouched(self):
        category = LoadCategory("Test", [LoadItem("Pump", tcl=10, mdf=0.5)])
        apply_demand_factors(category)
        self.assertEqual(category.items[0].max_demand_kw, 0.0)

    def test_empty_category(self):
        factored = apply_demand_factors(LoadCategory("Empty"))
        self.assertEqual(factored.totals, LoadTotals())

    def test_sum_totals(self):
        a = apply_demand_factors(LoadCategory("A", [LoadItem("x", tcl=10, mdf=0.5, edf=0.2, fdf=0.1)]))
        b = apply_demand_factors(LoadCategory("B", [LoadItem("y", tcl=20, mdf=1.0, edf=1.0, fdf=0.0)]))
        total = sum_totals([a, b])
        self.assertAlmostEqual(total.tcl, 30.0)
        self.assertAlmostEqual(total.max_demand, 25.0)
        self.assertAlmostEqual(total.essential, 22.0)
        self.assertAlmostEqual(total.fire, 1.0)


if __name__ == '__main__':
    unittest.main()
