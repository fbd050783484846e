"""
Unit tests for week navigation (Monday-aligned weeks).
"""

import unittest
from datetime import date, datetime, timedelta

from cineplanner.weeks import WeekCursor, monday_of, parse_iso_date, week_dates


class TestMondayOf(unittest.TestCase):
    def test_sunday_belongs_to_previous_monday(self) -> None:
        self.assertEqual(monday_of(date(2024, 6, 9)), date(2024, 6, 3))

    def test_monday_is_its_own_monday(self) -> None:
        self.assertEqual(monday_of(date(2024, 6, 10)), date(2024, 6, 10))

    def test_midweek(self) -> None:
        self.assertEqual(monday_of(date(2024, 6, 13)), date(2024, 6, 10))

    def test_datetime_is_normalized_to_date(self) -> None:
        self.assertEqual(monday_of(datetime(2024, 6, 12, 23, 59)), date(2024, 6, 10))

    def test_idempotent_and_always_monday(self) -> None:
        d = date(2023, 12, 1)
        for _ in range(120):
            m = monday_of(d)
            self.assertEqual(monday_of(m), m)
            self.assertEqual(m.weekday(), 0)
            self.assertTrue(0 <= (d - m).days <= 6)
            d += timedelta(days=1)

    def test_year_boundary(self) -> None:
        # Wednesday 1 Jan 2025
        self.assertEqual(monday_of(date(2025, 1, 1)), date(2024, 12, 30))


class TestWeekDates(unittest.TestCase):
    def test_seven_consecutive_dates(self) -> None:
        days = week_dates(date(2024, 6, 10))
        self.assertEqual(len(days), 7)
        self.assertEqual(days[0], date(2024, 6, 10))
        self.assertEqual(days[-1], date(2024, 6, 16))

    def test_month_boundary(self) -> None:
        days = week_dates(date(2024, 1, 29))
        self.assertEqual([d.isoformat() for d in days[2:4]], ["2024-01-31", "2024-02-01"])

    def test_parse_iso_date(self) -> None:
        self.assertEqual(parse_iso_date("2024-06-10"), date(2024, 6, 10))
        with self.assertRaises(ValueError):
            parse_iso_date("10-06-2024")


class TestWeekCursor(unittest.TestCase):
    def test_start_is_aligned_to_monday(self) -> None:
        self.assertEqual(WeekCursor(date(2024, 6, 12)).start, date(2024, 6, 10))

    def test_previous_week_crosses_year(self) -> None:
        cursor = WeekCursor(date(2024, 1, 1))
        self.assertEqual(cursor.previous_week(), date(2023, 12, 25))

    def test_next_week(self) -> None:
        cursor = WeekCursor(date(2024, 12, 30))
        self.assertEqual(cursor.next_week(), date(2025, 1, 6))

    def test_today_resets_to_current_monday(self) -> None:
        cursor = WeekCursor(date(2020, 1, 6))
        self.assertEqual(cursor.today(now=date(2024, 6, 9)), date(2024, 6, 3))
        self.assertEqual(cursor.dates()[0], date(2024, 6, 3))


if __name__ == "__main__":
    unittest.main()
