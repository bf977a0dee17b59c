import unittest
from datetime import date
from decimal import Decimal
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drawledger.services.draws import make_draw
from drawledger.services.performance import (
    irr_band,
    loan_income,
    loan_irr,
    loan_performance,
    loan_to_value,
    ltv_band,
    utilization,
)
from drawledger.services.term_resolver import resolve_terms


class TestLoanIrr(unittest.TestCase):

    def test_one_year_ten_percent(self):
        draws = [make_draw(100000, date(2023, 1, 1))]
        irr = loan_irr(draws, Decimal("110000"), date(2024, 1, 1))
        self.assertAlmostEqual(irr, 0.10, places=4)
        self.assertEqual(irr_band(irr), "fair")

    def test_nothing_to_solve(self):
        draws = [make_draw(100000, date(2023, 1, 1))]
        self.assertIsNone(loan_irr(draws, None, date(2024, 1, 1)))
        self.assertIsNone(loan_irr([], Decimal("110000"), date(2024, 1, 1)))
        self.assertIsNone(loan_irr(draws, Decimal("110000"), date(2022, 1, 1)))

    def test_bands(self):
        self.assertEqual(irr_band(0.2), "strong")
        self.assertEqual(irr_band(0.05), "weak")
        self.assertIsNone(irr_band(None))


class TestRatios(unittest.TestCase):

    def test_loan_to_value(self):
        self.assertAlmostEqual(loan_to_value(Decimal("650000"), Decimal("1000000")), 65.0)
        self.assertEqual(ltv_band(65.0), "low")
        self.assertEqual(ltv_band(70.0), "moderate")
        self.assertEqual(ltv_band(80.0), "high")
        self.assertIsNone(loan_to_value(None, Decimal("1000000")))
        self.assertIsNone(loan_to_value(Decimal("650000"), 0))
        self.assertIsNone(ltv_band(None))

    def test_utilization(self):
        self.assertAlmostEqual(utilization(Decimal("50"), Decimal("200")), 25.0)
        self.assertEqual(utilization(Decimal("50"), 0), 0.0)
        self.assertEqual(utilization(Decimal("50"), None), 0.0)


class TestLoanIncome(unittest.TestCase):

    def setUp(self):
        self.terms = resolve_terms({'interest_rate_annual': "0.12", 'loan_amount': 200000})
        self.draws = [make_draw(100000, date(2024, 1, 1), 1)]

    def test_income(self):
        fee, interest = loan_income(self.terms, self.draws, date(2024, 1, 31))
        self.assertEqual(fee, Decimal("4000.00"))
        self.assertEqual(interest, Decimal("986.30"))

    def test_performance(self):
        perf = loan_performance(self.terms, self.draws, date(2024, 1, 31),
                                appraised_value=Decimal("400000"))
        self.assertIsNone(perf.irr)
        self.assertAlmostEqual(perf.loan_to_value, 50.0)
        self.assertEqual(perf.ltv_band, "low")
        self.assertAlmostEqual(perf.utilization, 50.0)
        self.assertEqual(perf.total_income, Decimal("4986.30"))


if __name__ == '__main__':
    unittest.main()
