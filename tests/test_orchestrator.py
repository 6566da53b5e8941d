import unittest
from dataclasses import replace

from estimator.assumptions import default_assumptions
from estimator.cities import find_city_by_id
from estimator.contract import MonthlyYield
from estimator.models import RoofSpec, default_inputs
from estimator.orchestrator import build_yield_query, combined_loss_pct, estimate, run_estimation
from estimator.sizing import size


class FakeProvider:
    def __init__(self, monthly_kwh=1500.0):
        self.queries = []
        self.yield_ = MonthlyYield(monthly_kwh=(monthly_kwh,) * 12, annual_kwh=monthly_kwh * 12)

    def fetch(self, query):
        self.queries.append(query)
        return self.yield_


class TestOrchestrator(unittest.TestCase):
    def setUp(self):
        self.a = default_assumptions()
        self.inputs = default_inputs(self.a, find_city_by_id("riyadh"))

    def test_combined_loss(self):
        self.assertAlmostEqual(18.3, combined_loss_pct(14, 5, 50))
        self.assertAlmostEqual(14.0, combined_loss_pct(14, 0, 50))
        self.assertEqual(50.0, combined_loss_pct(40, 40, 50))

    def test_query_for_default_roof(self):
        sizing = size(self.inputs.roof, self.a.pv_defaults)
        q = build_yield_query(self.inputs, sizing, self.a.pvgis)
        self.assertAlmostEqual(24.7136, q.lat)
        self.assertAlmostEqual(21.6, q.peakpower)
        self.assertAlmostEqual(18.3, q.loss)
        self.assertEqual(22.0, q.angle)
        self.assertEqual(0.0, q.aspect)
        self.assertFalse(q.optimal_angles)

    def test_query_requires_city(self):
        sizing = size(self.inputs.roof, self.a.pv_defaults)
        with self.assertRaises(ValueError):
            build_yield_query(replace(self.inputs, city=None), sizing, self.a.pvgis)

    def test_estimate_happy_path(self):
        provider = FakeProvider()
        res = estimate(self.inputs, provider, self.a)

        self.assertEqual(1, len(provider.queries))
        self.assertAlmostEqual(21.6, res.sizing.system_kwp)
        self.assertEqual(18000.0, res.annual_production_kwh)
        self.assertAlmostEqual(540.0, res.tariff.monthly_bill_sar)
        self.assertEqual(12, len(res.monthly_breakdown))
        self.assertLessEqual(res.savings.min_sar_per_year, res.savings.max_sar_per_year)
        self.assertIsNotNone(res.economics)
        self.assertIsNotNone(res.citizen)
        self.assertEqual(self.a.version, res.assumptions_version)

        d = res.to_dict()
        self.assertEqual("conservative", d["mode"])
        self.assertIn("computed_at", d)

    def test_zero_area_skips_provider(self):
        provider = FakeProvider()
        inputs = replace(self.inputs, roof=RoofSpec(usable_area_m2=0.0))
        res = estimate(inputs, provider, self.a)
        self.assertEqual([], provider.queries)
        self.assertEqual(0.0, res.annual_production_kwh)
        self.assertEqual(0.0, res.savings.max_sar_per_year)

    def test_zero_install_cost_skips_economics(self):
        inputs = replace(self.inputs, advanced=replace(self.inputs.advanced, install_cost_sar_per_kwp=0.0))
        res = run_estimation(inputs, FakeProvider().yield_, self.a)
        self.assertIsNone(res.economics)
        self.assertIsNone(res.citizen)

    def test_override_collapses_result(self):
        inputs = replace(self.inputs, advanced=replace(self.inputs.advanced, self_consumption_override=0.5))
        res = run_estimation(inputs, FakeProvider().yield_, self.a)
        self.assertEqual(res.savings.min_sar_per_year, res.savings.max_sar_per_year)


    def test_inverter_efficiency_is_informational(self):
        low = replace(self.inputs, advanced=replace(self.inputs.advanced, inverter_eff_pct=90.0))
        sizing = size(self.inputs.roof, self.a.pv_defaults)
        self.assertEqual(
            build_yield_query(self.inputs, sizing, self.a.pvgis),
            build_yield_query(low, sizing, self.a.pvgis),
        )
        base = run_estimation(self.inputs, FakeProvider().yield_, self.a)
        other = run_estimation(low, FakeProvider().yield_, self.a)
        self.assertEqual(base.savings, other.savings)
        self.assertEqual(base.economics, other.economics)

if __name__ == "__main__":
    unittest.main()
