# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import time
import unittest
from datetime import date, datetime, timedelta, timezone

from daily_tracker.local_time import (
    InvalidTimestampError,
    WallClock,
    date_key,
    day_bounds,
    decode,
    encode,
    fixed_offset,
    format_wall_clock,
    from_column,
    month_bounds,
    month_days,
    parse_wall_clock,
    rebase_instant,
    to_column,
)

_ZONES = ("UTC", "Etc/GMT-2", "Etc/GMT+5", "America/New_York", "Asia/Kolkata", "Pacific/Chatham")


class _ProcessZone:
    """Temporarily switch the process time zone."""

    def __init__(self, zone: str) -> None:
        self.zone = zone
        self.saved = os.environ.get("TZ")

    def __enter__(self) -> None:
        os.environ["TZ"] = self.zone
        time.tzset()

    def __exit__(self, *exc: object) -> None:
        if self.saved is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = self.saved
        time.tzset()


class TestRoundTrip(unittest.TestCase):
    def test_edge_values_round_trip(self) -> None:
        for wall in (
            WallClock(2024, 2, 29, 12, 0, 0),
            WallClock(2023, 12, 31, 23, 59, 59),
            WallClock(2024, 1, 1, 0, 0, 0),
            WallClock(1970, 1, 1, 0, 0, 0),
            WallClock(1969, 12, 31, 23, 59, 59),
        ):
            with self.subTest(wall=wall):
                self.assertEqual(decode(encode(wall)), wall)

    def test_storage_instant_has_wall_fields_in_utc(self) -> None:
        instant = encode(WallClock(2024, 3, 10, 7, 30, 0))
        self.assertEqual(instant.tzinfo, timezone.utc)
        self.assertEqual((instant.year, instant.month, instant.day), (2024, 3, 10))
        self.assertEqual((instant.hour, instant.minute, instant.second), (7, 30, 0))

    def test_aware_datetime_contributes_displayed_fields(self) -> None:
        plus_two = datetime(2024, 3, 10, 7, 30, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(decode(encode(plus_two)), WallClock(2024, 3, 10, 7, 30, 0))

    def test_naive_instant_is_read_as_utc_fields(self) -> None:
        self.assertEqual(decode(datetime(2024, 3, 10, 7, 30)), WallClock(2024, 3, 10, 7, 30, 0))

    def test_plain_date_means_midnight(self) -> None:
        self.assertEqual(decode(encode(date(2024, 3, 10))), WallClock(2024, 3, 10, 0, 0, 0))


@unittest.skipUnless(hasattr(time, "tzset"), "requires time.tzset")
class TestProcessZoneInsensitivity(unittest.TestCase):
    def test_encode_is_identical_in_every_zone(self) -> None:
        wall = WallClock(2024, 3, 10, 2, 30, 0)  # inside the US spring-forward gap
        results = set()
        for zone in _ZONES:
            with _ProcessZone(zone):
                results.add(encode(wall))
                self.assertEqual(decode(encode(wall)), wall)
        self.assertEqual(len(results), 1)

    def test_fall_back_hour_is_not_shifted(self) -> None:
        wall = WallClock(2024, 11, 3, 1, 30, 0)  # repeated hour in New York
        with _ProcessZone("America/New_York"):
            self.assertEqual(decode(encode(wall)), wall)

    def test_meal_written_at_plus_two_reads_back_at_minus_five(self) -> None:
        with _ProcessZone("Etc/GMT-2"):  # POSIX sign: this is UTC+2
            stored = to_column(encode(parse_wall_clock("2024-03-10T07:30")))
        self.assertEqual(stored, "2024-03-10T07:30:00Z")
        with _ProcessZone("Etc/GMT+5"):  # UTC-5
            self.assertEqual(format_wall_clock(decode(from_column(stored))), "2024-03-10T07:30:00")


class TestInvalidInput(unittest.TestCase):
    def test_impossible_fields_are_rejected(self) -> None:
        for fields in (
            (2024, 13, 1),
            (2023, 2, 29),
            (2024, 2, 30),
            (2024, 1, 1, 24, 0, 0),
            (2024, 1, 1, 12, 60, 0),
            (2024, 0, 10),
        ):
            with self.subTest(fields=fields):
                with self.assertRaises(InvalidTimestampError) as ctx:
                    encode(fields)
                self.assertIn("invalid timestamp", str(ctx.exception))

    def test_invalid_timestamp_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_wall_clock("2024-02-30T10:00")

    def test_decode_outside_representable_years(self) -> None:
        for instant in (
            datetime(1, 1, 1, 0, 30, tzinfo=timezone(timedelta(hours=2))),
            datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5))),
            1e20,
        ):
            with self.subTest(instant=instant):
                with self.assertRaises(InvalidTimestampError) as ctx:
                    decode(instant)
                self.assertIn("invalid timestamp", str(ctx.exception))

    def test_decode_rejects_non_instants(self) -> None:
        for value in ("2024-03-10", None, True):
            with self.subTest(value=value):
                with self.assertRaises(InvalidTimestampError):
                    decode(value)

    def test_garbage_text_is_rejected(self) -> None:
        for text in ("", "yesterday", "10/03/2024", "2024-03-10T7"):
            with self.subTest(text=text):
                with self.assertRaises(InvalidTimestampError):
                    parse_wall_clock(text)


class TestParsingAndColumns(unittest.TestCase):
    def test_parse_accepts_form_variants(self) -> None:
        self.assertEqual(parse_wall_clock("2024-03-10T07:30"), WallClock(2024, 3, 10, 7, 30, 0))
        self.assertEqual(parse_wall_clock("2024-03-10 07:30:15"), WallClock(2024, 3, 10, 7, 30, 15))
        self.assertEqual(parse_wall_clock("2024-03-10"), WallClock(2024, 3, 10))
        self.assertEqual(parse_wall_clock("2024-03-10T07:30:15.250"), WallClock(2024, 3, 10, 7, 30, 15))

    def test_zone_suffix_is_ignored(self) -> None:
        self.assertEqual(parse_wall_clock("2024-03-10T07:30:00+02:00"), WallClock(2024, 3, 10, 7, 30, 0))
        self.assertEqual(parse_wall_clock("2024-03-10T07:30:00Z"), WallClock(2024, 3, 10, 7, 30, 0))

    def test_column_text_sorts_chronologically(self) -> None:
        walls = [WallClock(2024, 3, 10, 9, 5), WallClock(2024, 3, 9, 23, 59, 59), WallClock(2024, 12, 1)]
        columns = [to_column(encode(w)) for w in walls]
        self.assertEqual(sorted(columns), [to_column(encode(w)) for w in sorted(walls)])

    def test_date_key(self) -> None:
        self.assertEqual(date_key(from_column("2024-03-10T23:59:59Z")), "2024-03-10")


class TestRanges(unittest.TestCase):
    def test_day_bounds_are_inclusive(self) -> None:
        start, end = day_bounds(date(2024, 3, 10))
        self.assertEqual(decode(start), WallClock(2024, 3, 10, 0, 0, 0))
        self.assertEqual(decode(end), WallClock(2024, 3, 10, 23, 59, 59))

    def test_month_bounds_leap_february(self) -> None:
        start, end = month_bounds(2024, 2)
        self.assertEqual(decode(start), WallClock(2024, 2, 1, 0, 0, 0))
        self.assertEqual(decode(end), WallClock(2024, 2, 29, 23, 59, 59))
        self.assertEqual(len(month_days(2023, 2)), 28)

    def test_month_bounds_reject_bad_month(self) -> None:
        with self.assertRaises(InvalidTimestampError):
            month_bounds(2024, 13)


class TestRebase(unittest.TestCase):
    def test_true_utc_instant_becomes_local_wall_clock(self) -> None:
        legacy = datetime(2024, 3, 10, 12, 30, tzinfo=timezone.utc)
        self.assertEqual(decode(rebase_instant(legacy, fixed_offset(-5))), WallClock(2024, 3, 10, 7, 30, 0))

    def test_rebase_can_cross_midnight(self) -> None:
        legacy = datetime(2024, 3, 10, 2, 0)
        self.assertEqual(decode(rebase_instant(legacy, fixed_offset(-5))), WallClock(2024, 3, 9, 21, 0, 0))


if __name__ == "__main__":
    unittest.main()
