import os
import shutil
import tempfile
import unittest

from estimator.assumptions import default_assumptions
from estimator.cities import default_city
from estimator.contract import MonthlyYield
from estimator.models import default_inputs
from estimator.orchestrator import run_estimation
from reports import generate_charts, generate_pdf_report, prepare_output


class TestReports(unittest.TestCase):
    def setUp(self):
        self.a = default_assumptions()
        self.inputs = default_inputs(self.a, default_city())
        my = MonthlyYield(monthly_kwh=tuple(1200.0 + 50 * i for i in range(12)), annual_kwh=17700.0)
        self.result = run_estimation(self.inputs, my, self.a)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_prepare_output(self):
        paths = prepare_output(os.path.join(self.tmp.name, "out"))
        self.assertTrue(os.path.isdir(paths["out_dir"]))
        self.assertTrue(paths["pdf_path"].endswith("solar_estimate.pdf"))

    def test_sessions_get_private_folders(self):
        first = prepare_output()
        second = prepare_output()
        for p in (first, second):
            self.addCleanup(shutil.rmtree, p["out_dir"], True)
            self.assertTrue(os.path.isdir(p["out_dir"]))
        self.assertNotEqual(first["out_dir"], second["out_dir"])
        self.assertNotEqual(first["pdf_path"], second["pdf_path"])

        again = prepare_output(first["out_dir"])
        self.assertEqual(first["pdf_path"], again["pdf_path"])

    def test_charts(self):
        charts = generate_charts(self.result.monthly_breakdown, os.path.join(self.tmp.name, "charts"))
        self.assertEqual({"chart_energy", "chart_savings"}, set(charts))
        for p in charts.values():
            self.assertTrue(os.path.getsize(p) > 0)

    def test_charts_empty(self):
        self.assertEqual({}, generate_charts([], self.tmp.name))

    def test_pdf(self):
        paths = prepare_output(os.path.join(self.tmp.name, "out"))
        paths.update(generate_charts(self.result.monthly_breakdown, paths["charts_dir"]))
        pdf = generate_pdf_report(self.result, self.inputs, paths, self.a)
        with open(pdf, "rb") as f:
            self.assertEqual(b"%PDF", f.read(4))

    def test_pdf_without_economics_or_charts(self):
        from dataclasses import replace

        res = replace(self.result, economics=None, citizen=None)
        pdf = generate_pdf_report(res, self.inputs, {"out_dir": self.tmp.name}, self.a)
        self.assertTrue(os.path.exists(pdf))


if __name__ == "__main__":
    unittest.main()
