import unittest
from datetime import date, datetime

from mealcal.domain.errors import ValidationError
from mealcal.utilities.dates import (
    as_date, date_key, date_range, date_range_includes, day_of_week, is_same_day,
    week_dates, week_end, week_id, week_start, weeks_in_range,
)


class TestWeekBoundaries(unittest.TestCase):

    def test_week_starts_on_sunday(self):
        # 2024-01-03 is a Wednesday
        self.assertEqual(week_start(date(2024, 1, 3)), date(2023, 12, 31))
        self.assertEqual(week_end(date(2024, 1, 3)), date(2024, 1, 6))

    def test_sunday_is_its_own_week_start(self):
        self.assertEqual(week_start(date(2024, 1, 7)), date(2024, 1, 7))
        self.assertEqual(day_of_week(date(2024, 1, 7)), 0)
        self.assertEqual(day_of_week(date(2024, 1, 13)), 6)

    def test_week_dates_are_seven_consecutive_days(self):
        days = week_dates("2024-03-13")
        self.assertEqual(len(days), 7)
        self.assertEqual(days[0], date(2024, 3, 10))
        self.assertEqual(days[-1], date(2024, 3, 16))

    def test_time_of_day_is_ignored(self):
        self.assertEqual(week_start(datetime(2024, 1, 6, 23, 59)), date(2023, 12, 31))
        self.assertTrue(is_same_day(datetime(2024, 1, 6, 0, 1), "2024-01-06"))


class TestDateKeysAndWeekIds(unittest.TestCase):

    def test_date_key_format(self):
        self.assertEqual(date_key(date(2024, 2, 5)), "2024-02-05")
        self.assertEqual(date_key("2024-02-05T18:30:00Z"), "2024-02-05")

    def test_week_id_first_of_january_2024(self):
        self.assertEqual(week_id(date(2024, 1, 1)), "2024-01")
        # Same input, same answer, every time
        self.assertEqual(week_id(date(2024, 1, 1)), week_id(date(2024, 1, 1)))

    def test_week_id_changes_on_sunday(self):
        self.assertEqual(week_id(date(2024, 1, 6)), "2024-01")
        self.assertEqual(week_id(date(2024, 1, 7)), "2024-02")

    def test_every_day_of_a_week_shares_the_week_start_id(self):
        ids = {week_id(week_start(d)) for d in week_dates("2024-05-15")}
        self.assertEqual(len(ids), 1)

    def test_invalid_date_string_rejected(self):
        with self.assertRaises(ValidationError):
            as_date("2024-13-40")
        with self.assertRaises(ValidationError):
            as_date(12345)


class TestRanges(unittest.TestCase):

    def test_range_bounds_are_inclusive(self):
        self.assertTrue(date_range_includes("2024-01-01", "2024-01-01", "2024-01-07"))
        self.assertTrue(date_range_includes("2024-01-07", "2024-01-01", "2024-01-07"))
        self.assertFalse(date_range_includes("2023-12-31", "2024-01-01", "2024-01-07"))
        self.assertFalse(date_range_includes("2024-01-08", "2024-01-01", "2024-01-07"))

    def test_missing_bound_is_open(self):
        self.assertTrue(date_range_includes("1999-01-01", None, "2024-01-07"))
        self.assertTrue(date_range_includes("2099-01-01", "2024-01-01", None))
        self.assertTrue(date_range_includes("2024-01-01"))

    def test_date_range_and_weeks_in_range(self):
        self.assertEqual(len(date_range("2024-01-01", "2024-01-10")), 10)
        self.assertEqual(weeks_in_range("2024-01-01", "2024-01-10"), [date(2023, 12, 31), date(2024, 1, 7)])


if __name__ == '__main__':
    unittest.main()
