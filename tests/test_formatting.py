import unittest

from estimator.formatting import (
    format_co2,
    format_kwh,
    format_kwp,
    format_number,
    format_optional,
    format_payback,
    format_pct,
    format_sar,
    format_sar_range,
    format_years,
)


class TestFormatting(unittest.TestCase):
    def test_numbers_round_half_up(self):
        self.assertEqual("1,235", format_number(1234.5))
        self.assertEqual("3", format_number(2.5))
        self.assertEqual("1,234.57", format_number(1234.567, 2))

    def test_currency(self):
        self.assertEqual("SAR 1,200", format_sar(1200))
        self.assertEqual("SAR 540.00", format_sar(540, 2))
        self.assertEqual("SAR 1,200 – 2,400", format_sar_range(1200, 2400))
        self.assertEqual("SAR 1,200 – 2,400 /yr", format_sar_range(1200, 2400, "SAR/yr"))

    def test_units(self):
        self.assertEqual("18,000 kWh", format_kwh(18000))
        self.assertEqual("21.6 kWp", format_kwp(21.6))
        self.assertEqual("5 kWp", format_kwp(5.0))
        self.assertEqual("35%", format_pct(35.0))
        self.assertEqual("2.4 tonnes CO₂/yr", format_co2(2.4))

    def test_years_and_payback(self):
        self.assertEqual("1 year", format_years(1))
        self.assertEqual("25 years", format_years(25))
        self.assertEqual("7.8 years", format_payback(7.8))
        self.assertEqual("Not viable", format_payback(None))

    def test_optional(self):
        self.assertEqual("N/A", format_optional(None))
        self.assertEqual("0.123 SAR/kWh", format_optional(0.1234, 3, "SAR/kWh"))


if __name__ == "__main__":
    unittest.main()
