import unittest
from datetime import date, datetime
from decimal import Decimal
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from drawledger.exceptions import InvalidDrawError
from drawledger.services.draws import fee_clock_start, funded_draws, make_draw


class TestDraws(unittest.TestCase):

    def test_make_draw(self):
        draw = make_draw("25,000.50", "2024-03-05", 3)
        self.assertEqual(draw.amount, Decimal("25000.50"))
        self.assertEqual(draw.date, date(2024, 3, 5))
        self.assertEqual(draw.sequence_number, 3)
        self.assertEqual(draw.description, "Draw #3")

    def test_make_draw_accepts_datetimes(self):
        draw = make_draw(100, datetime(2024, 3, 5, 17, 45))
        self.assertEqual(draw.date, date(2024, 3, 5))
        self.assertEqual(draw.description, "Draw")

    def test_non_positive_amount_rejected(self):
        with self.assertRaises(InvalidDrawError):
            make_draw(0, "2024-01-01")
        with self.assertRaises(InvalidDrawError):
            make_draw("-10", "2024-01-01")
        with self.assertRaises(InvalidDrawError):
            make_draw("lots", "2024-01-01")

    def test_bad_date_rejected(self):
        with self.assertRaisesRegex(InvalidDrawError, "cannot be parsed"):
            make_draw(100, "not a date")

    def test_funded_draws_filters_by_status(self):
        records = [
            {'amount': 1000, 'funded_at': "2024-02-01", 'status': "funded", 'draw_number': 1},
            {'amount': 2000, 'request_date': "2024-02-10", 'status': "pending", 'draw_number': 2},
            {'amount': 3000, 'funded_at': "2024-03-01", 'status': "Funded", 'draw_number': 3},
        ]
        draws = funded_draws(records)
        self.assertEqual([d.amount for d in draws], [Decimal("1000"), Decimal("3000")])
        self.assertEqual([d.sequence_number for d in draws], [1, 3])

    def test_funded_at_preferred_over_request_date(self):
        draws = funded_draws([{'amount': 500, 'request_date': "2024-01-20", 'funded_at': "2024-01-25"}])
        self.assertEqual(draws[0].date, date(2024, 1, 25))

    def test_records_without_status_are_kept(self):
        draws = funded_draws([{'amount': 500, 'date': "2024-01-20"}])
        self.assertEqual(len(draws), 1)

    def test_missing_date_rejected(self):
        with self.assertRaisesRegex(InvalidDrawError, "no date"):
            funded_draws([{'amount': 500, 'status': "funded"}])

    def test_fee_clock_start(self):
        draws = [make_draw(100, "2024-03-01"), make_draw(100, "2024-02-14")]
        self.assertEqual(fee_clock_start(draws), date(2024, 2, 14))
        self.assertEqual(fee_clock_start(draws, "2024-01-01"), date(2024, 1, 1))
        self.assertIsNone(fee_clock_start([]))


if __name__ == '__main__':
    unittest.main()
