import unittest
from dataclasses import replace

from estimator.assumptions import default_assumptions
from estimator.contract import PVSizingResult
from estimator.economics import (
    annual_cashflows,
    compare,
    evaluate,
    irr_pct,
    npv,
    payback_simple,
    solve_irr,
)


class TestIrr(unittest.TestCase):
    def setUp(self):
        self.eco = default_assumptions().economics

    def test_reference_case(self):
        sol = solve_irr(50000.0, [5000.0] * 25, self.eco)
        self.assertTrue(sol.converged)
        self.assertLessEqual(sol.iterations, self.eco.irr_max_iterations)
        self.assertAlmostEqual(8.78, irr_pct(sol, self.eco), delta=0.5)
        self.assertLess(abs(npv(sol.rate, 50000.0, [5000.0] * 25)), self.eco.irr_tolerance_sar)

    def test_never_positive_cashflows(self):
        sol = solve_irr(1000.0, [-10.0] * 5, self.eco)
        self.assertFalse(sol.converged)
        self.assertEqual(0.0, irr_pct(sol, self.eco))

    def test_iteration_limit_reached(self):
        eco = replace(self.eco, irr_max_iterations=1)
        sol = solve_irr(50000.0, [5000.0] * 25, eco)
        self.assertFalse(sol.converged)
        self.assertEqual(1, sol.iterations)
        self.assertNotEqual(eco.irr_initial_guess, sol.rate)
        self.assertGreaterEqual(sol.rate, eco.irr_rate_floor)
        self.assertLessEqual(sol.rate, eco.irr_rate_ceiling)

        with self.assertLogs("estimator.economics", level="WARNING") as cm:
            evaluate(PVSizingResult(system_kwp=10.0, panel_count=25, roof_coverage_pct=100.0), eco, 18000.0, 4000.0, 6000.0, default_assumptions().citizen)
        self.assertTrue(any("did not converge after 1 iterations" in m for m in cm.output))

    def test_rate_stays_within_bounds(self):
        sol = solve_irr(1.0, [1000.0] * 3, self.eco)
        self.assertLessEqual(sol.rate, self.eco.irr_rate_ceiling)
        self.assertGreaterEqual(sol.rate, self.eco.irr_rate_floor)


class TestCashflows(unittest.TestCase):
    def test_degradation_hits_savings_only(self):
        cfs = annual_cashflows(1000.0, 100.0, 0.5 / 100, 3)
        self.assertAlmostEqual(900.0, cfs[0])
        self.assertAlmostEqual(1000.0 * 0.995 - 100.0, cfs[1])
        self.assertAlmostEqual(1000.0 * 0.995 ** 2 - 100.0, cfs[2])

    def test_payback(self):
        self.assertAlmostEqual(10.0, payback_simple(50000.0, 5000.0, 1.0))
        self.assertIsNone(payback_simple(50000.0, 0.5, 1.0))
        self.assertIsNone(payback_simple(50000.0, -10.0, 1.0))


class TestEvaluate(unittest.TestCase):
    def setUp(self):
        self.a = default_assumptions()
        self.sizing = PVSizingResult(system_kwp=10.0, panel_count=25, roof_coverage_pct=100.0)

    def test_viable_system(self):
        e = evaluate(self.sizing, self.a.economics, 18000.0, 4000.0, 6000.0, self.a.citizen)
        self.assertEqual(35000.0, e.total_install_cost_sar)
        self.assertAlmostEqual(500.0, e.annual_om_sar)
        self.assertAlmostEqual(7.8, e.simple_payback_years)
        self.assertTrue(e.is_viable)
        self.assertEqual(3500.0, e.cost_per_kwp)
        self.assertEqual(1400.0, e.cost_per_panel)
        self.assertAlmostEqual(10.26, e.co2_offset_tons_per_year)
        self.assertGreater(e.npv, 0)
        self.assertGreater(e.irr_pct, self.a.economics.discount_rate_pct)
        self.assertIsNotNone(e.lcoe_sar_per_kwh)
        self.assertAlmostEqual(333.33, e.monthly_savings_min_sar)
        self.assertAlmostEqual(500.0, e.monthly_savings_max_sar)

    def test_not_viable_when_om_eats_savings(self):
        with self.assertLogs("estimator.economics", level="WARNING"):
            e = evaluate(self.sizing, self.a.economics, 18000.0, 400.0, 600.0, self.a.citizen)
        self.assertIsNone(e.simple_payback_years)
        self.assertFalse(e.is_viable)
        self.assertEqual(0.0, e.irr_pct)
        self.assertLess(e.npv, 0)

    def test_unprofitable_system_skips_irr_quietly(self):
        with self.assertLogs("estimator.economics", level="INFO") as cm:
            evaluate(self.sizing, self.a.economics, 18000.0, 400.0, 600.0, self.a.citizen)
        self.assertTrue(any("no year has a positive net cash flow" in m for m in cm.output))
        self.assertFalse(any("did not converge" in m for m in cm.output))

    def test_no_energy_no_lcoe(self):
        e = evaluate(self.sizing, self.a.economics, 0.0, 4000.0, 6000.0, self.a.citizen)
        self.assertIsNone(e.lcoe_sar_per_kwh)
        self.assertEqual(0.0, e.co2_offset_tons_per_year)

    def test_zero_panels_cost_per_panel(self):
        s = PVSizingResult(system_kwp=0.0, panel_count=0, roof_coverage_pct=0.0)
        e = evaluate(s, self.a.economics, 0.0, 0.0, 0.0, self.a.citizen)
        self.assertEqual(0.0, e.cost_per_panel)
        self.assertEqual(0.0, e.cost_per_kwp)

    def test_higher_discount_rate_lowers_npv(self):
        lo = evaluate(self.sizing, self.a.economics, 18000.0, 4000.0, 6000.0, self.a.citizen)
        eco_hi = replace(self.a.economics, discount_rate_pct=10.0)
        hi = evaluate(self.sizing, eco_hi, 18000.0, 4000.0, 6000.0, self.a.citizen)
        self.assertLess(hi.npv, lo.npv)


class TestCitizen(unittest.TestCase):
    def test_comparisons(self):
        c = compare(1200.0, 540.0, 2.1, 18000.0, default_assumptions().citizen)
        self.assertAlmostEqual(1200.0 / 540.0, c.months_free_per_year)
        self.assertEqual(100, c.trees_equivalent_per_year)
        self.assertEqual(12, c.car_trips_avoided)
        self.assertAlmostEqual(0.5, c.households_equivalent)

    def test_no_bill(self):
        c = compare(1200.0, 0.0, 0.0, 0.0, default_assumptions().citizen)
        self.assertEqual(0.0, c.months_free_per_year)
        self.assertEqual(0, c.trees_equivalent_per_year)


if __name__ == "__main__":
    unittest.main()
