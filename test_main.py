import contextlib
import io
import json
import os
import tempfile
import unittest
import main

PROJECT = {
    "electrical": {
        "inputs": {"buildingHeight": 70, "numberOfFloors": 38, "passengerLifts": 2},
        "buildings": [{"id": 1, "name": "Tower A", "total_height_m": 70, "floor_count": 38}],
    },
    "hvac": {"params": {"city": "Mumbai"}, "rooms": [{"name": "Office", "space_type": "OFFICE", "area": 100}]},
}


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write_project(self, project):
        path = os.path.join(self.tmp.name, "project.json")
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(project, fh)
        return path

    def run_main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main.main(list(argv))
        return code, out.getvalue()

    def test_json_output(self):
        code, out = self.run_main(self.write_project(PROJECT), "--json")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["electrical"]["totals"]["mode"], "PER_BUILDING")
        self.assertIn("chillerSizing", data["hvac"])

    def test_table_output_and_export(self):
        report = os.path.join(self.tmp.name, "report.xlsx")
        code, out = self.run_main(self.write_project(PROJECT), "--export", report)
        self.assertEqual(code, 0)
        self.assertIn("Electrical Load Schedule", out)
        self.assertIn("HVAC Room Loads", out)
        self.assertTrue(os.path.exists(report))

    def test_invalid_project(self):
        project = {"electrical": {"inputs": {"numberOfFloors": 10}}}
        code, _ = self.run_main(self.write_project(project), "--json")
        self.assertEqual(code, 1)

    def test_empty_project(self):
        code, out = self.run_main(self.write_project({}), "--json")
        self.assertEqual(code, 1)
        self.assertIn("no 'electrical' or 'hvac' section", out)


if __name__ == '__main__':
    unittest.main()
