import unittest

from estimator.assumptions import default_assumptions
from ui.state import WizardCtx, ctx_invalidate_from, seed_defaults
from ui.state_helpers import build_inputs_fingerprint, is_result_stale, save_result_fingerprint


class TestUIStateHelpers(unittest.TestCase):
    def test_result_fingerprint_detects_stale(self):
        ctx = seed_defaults(WizardCtx(), default_assumptions())
        self.assertFalse(is_result_stale(ctx))

        fp = save_result_fingerprint(ctx)
        self.assertEqual(fp, build_inputs_fingerprint(ctx))
        self.assertFalse(is_result_stale(ctx))

        ctx.roof["usable_area_m2"] = 150.0
        self.assertTrue(is_result_stale(ctx))

    def test_int_and_float_share_a_fingerprint(self):
        ctx = seed_defaults(WizardCtx(), default_assumptions())
        ctx.roof["tilt_deg"] = 22
        fp = build_inputs_fingerprint(ctx)
        ctx.roof["tilt_deg"] = 22.0
        self.assertEqual(fp, build_inputs_fingerprint(ctx))

    def test_results_do_not_affect_fingerprint(self):
        ctx = seed_defaults(WizardCtx(), default_assumptions())
        fp = build_inputs_fingerprint(ctx)
        ctx.result = object()
        ctx.artifacts["pdf"] = "x.pdf"
        self.assertEqual(fp, build_inputs_fingerprint(ctx))

    def test_seed_keeps_user_values(self):
        ctx = WizardCtx()
        ctx.roof["usable_area_m2"] = 42.0
        seed_defaults(ctx, default_assumptions())
        self.assertEqual(42.0, ctx.roof["usable_area_m2"])
        self.assertIsNone(ctx.options["credit_rate_per_kwh"])

    def test_invalidate_from(self):
        ctx = seed_defaults(WizardCtx(), default_assumptions())
        ctx.completed = {1: True, 2: True, 3: True}
        ctx.result = object()
        ctx_invalidate_from(ctx, 2)
        self.assertEqual({1: True, 2: False, 3: False}, ctx.completed)
        self.assertIsNone(ctx.result)


if __name__ == "__main__":
    unittest.main()
