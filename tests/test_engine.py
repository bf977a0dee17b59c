import unittest
from datetime import date
from decimal import Decimal
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drawledger.data_structures import RowKind
from drawledger.engine import DrawLedgerEngine
from drawledger.exceptions import InvalidDrawError, InvalidTermsError


class TestDrawLedgerEngine(unittest.TestCase):

    def setUp(self):
        self.loan = {
            'interest_rate_annual': "0.12",
            'loan_amount': 250000,
            'maturity_date': "2024-12-31",
        }
        self.draw_records = [
            {'amount': 60000, 'funded_at': "2024-01-01", 'status': "funded", 'draw_number': 1},
            {'amount': 40000, 'funded_at': "2024-03-20", 'status': "funded", 'draw_number': 2},
            {'amount': 90000, 'request_date': "2024-04-02", 'status': "requested", 'draw_number': 3},
        ]
        self.engine = DrawLedgerEngine.from_records(self.loan, self.draw_records)

    def test_from_records(self):
        self.assertEqual(len(self.engine.draws), 2)
        self.assertEqual(self.engine.fee_clock_start, date(2024, 1, 1))
        self.assertEqual(self.engine.terms.loan_amount, Decimal("250000"))

    def test_fee_start_override(self):
        engine = DrawLedgerEngine.from_records(self.loan, self.draw_records,
                                               fee_start_override="2023-12-15")
        self.assertEqual(engine.fee_clock_start, date(2023, 12, 15))

    def test_loan_start_date_does_not_move_fee_clock(self):
        loan = dict(self.loan, loan_start_date="2023-12-01")
        engine = DrawLedgerEngine.from_records(loan, self.draw_records)
        self.assertEqual(engine.fee_clock_start, date(2024, 1, 1))
        self.assertEqual(engine.terms.maturity_date, date(2024, 12, 31))

    def test_lender_overrides(self):
        engine = DrawLedgerEngine.from_records({}, self.draw_records,
                                               lender_overrides={'document_fee': 500})
        self.assertEqual(engine.get_payoff(date(2024, 4, 1)).document_fee, Decimal("500.00"))

    def test_ledger_and_summary(self):
        rows = self.engine.get_ledger(date(2024, 4, 10))
        self.assertEqual(rows[-1].kind, RowKind.AS_OF)
        summary = self.engine.get_summary(date(2024, 4, 10))
        self.assertEqual(summary.principal, Decimal("100000"))
        self.assertEqual(summary.total_draws, 2)

        df = self.engine.get_ledger_df(date(2024, 4, 10))
        self.assertEqual(len(df), len(rows))
        self.assertIn("Cumulative Interest", df.columns)

    def test_payoff_and_projection(self):
        base = self.engine.get_payoff(date(2024, 4, 10))
        self.assertEqual(base.month_number, 4)
        self.assertEqual(base.days_to_maturity, (date(2024, 12, 31) - date(2024, 4, 10)).days)
        self.assertEqual(self.engine.project_payoff(base, "2024-09-01"),
                         self.engine.get_payoff(date(2024, 9, 1)))
        self.assertEqual(self.engine.project_payoff_days(30, date(2024, 4, 10)),
                         self.engine.get_payoff(date(2024, 5, 10)))

        rows = self.engine.compare_payoffs(["2024-06-01", "2024-05-01"], date(2024, 4, 10))
        self.assertEqual([r.target_date for r in rows], [date(2024, 5, 1), date(2024, 6, 1)])

    def test_fee_queries(self):
        month, fee = self.engine.current_fee_rate(date(2024, 8, 15))
        self.assertEqual(month, 8)
        self.assertEqual(fee.rate, Decimal("0.025"))
        self.assertEqual(self.engine.next_fee_increase(date(2024, 4, 10)).date, date(2024, 7, 1))
        self.assertEqual(self.engine.days_until_next_fee_increase(date(2024, 6, 30)), 1)
        self.assertEqual(len(self.engine.get_fee_schedule(12)), 12)
        self.assertEqual(self.engine.get_fee_escalations(date(2024, 4, 10))[0].month_number, 7)
        self.assertEqual(len(self.engine.get_projection(date(2024, 4, 10), 6)), 6)

    def test_simulate_draw_leaves_engine_unchanged(self):
        before = self.engine.get_payoff(date(2024, 5, 1))
        rows = self.engine.simulate_draw(25000, "2024-04-15", date(2024, 5, 1))
        self.assertEqual(rows[-1].principal, Decimal("125000"))
        self.assertEqual(self.engine.get_payoff(date(2024, 5, 1)), before)
        self.assertEqual(len(self.engine.draws), 2)

    def test_no_funded_draws(self):
        engine = DrawLedgerEngine.from_records(self.loan, self.draw_records[2:])
        self.assertIsNone(engine.fee_clock_start)
        self.assertEqual(engine.get_fee_schedule(), [])
        self.assertEqual(engine.get_projection(date(2024, 4, 10)), [])
        self.assertEqual(len(engine.get_ledger(date(2024, 4, 10))), 1)

    def test_performance(self):
        perf = self.engine.get_performance(date(2024, 4, 10), payoff_amount=Decimal("110000"),
                                           payoff_date="2024-12-31",
                                           appraised_value=Decimal("500000"))
        self.assertIsNotNone(perf.irr)
        self.assertGreater(perf.irr, 0)
        self.assertAlmostEqual(perf.loan_to_value, 50.0)
        self.assertAlmostEqual(perf.utilization, 40.0)

    def test_invalid_inputs(self):
        with self.assertRaises(InvalidTermsError):
            DrawLedgerEngine.from_records({'interest_rate_annual': -1}, [])
        with self.assertRaises(InvalidDrawError):
            DrawLedgerEngine.from_records({}, [{'amount': -5, 'date': "2024-01-01"}])


if __name__ == '__main__':
    unittest.main()
