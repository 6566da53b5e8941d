import unittest

from estimator.assumptions import default_assumptions
from estimator.models import SavingsMode
from ui.adapters import inputs_from_ctx, monthly_kwh_from_ctx, step_errors
from ui.state import WizardCtx, seed_defaults


class TestAdapters(unittest.TestCase):
    def setUp(self):
        self.a = default_assumptions()
        self.ctx = seed_defaults(WizardCtx(), self.a)

    def test_defaults_map_to_inputs(self):
        inputs = inputs_from_ctx(self.ctx, self.a)
        self.assertEqual("riyadh", inputs.city.id)
        self.assertEqual(100.0, inputs.roof.usable_area_m2)
        self.assertEqual(3000.0, inputs.consumption.monthly_avg_kwh)
        self.assertEqual(SavingsMode.CONSERVATIVE, inputs.mode)
        self.assertIsNone(inputs.export.credit_rate_per_kwh)
        self.assertIsNone(inputs.advanced.self_consumption_override)

    def test_bill_mode_uses_tariff_inverse(self):
        self.ctx.consumption.update({"input_mode": "bill", "monthly_bill_sar": 1380.0})
        self.assertAlmostEqual(7000.0, monthly_kwh_from_ctx(self.ctx, self.a))

        self.ctx.consumption["monthly_bill_sar"] = 0.0
        self.assertEqual(0.0, monthly_kwh_from_ctx(self.ctx, self.a))

    def test_blank_credit_rate_is_unset(self):
        self.ctx.options.update({"mode": "net-billing", "export_enabled": True, "credit_rate_per_kwh": " "})
        inputs = inputs_from_ctx(self.ctx, self.a)
        self.assertTrue(inputs.export.enabled)
        self.assertFalse(inputs.export.has_credit_rate)

    def test_step_errors_filter_by_prefix(self):
        self.ctx.location["city_id"] = "nowhere"
        self.ctx.roof["usable_area_m2"] = 0.0
        self.assertEqual(1, len(step_errors(self.ctx, self.a, ("Location:",))))
        self.assertEqual(1, len(step_errors(self.ctx, self.a, ("Roof:",))))
        self.assertEqual([], step_errors(self.ctx, self.a, ("Consumption:",)))


if __name__ == "__main__":
    unittest.main()
