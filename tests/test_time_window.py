"""Tests for salon-local time arithmetic."""

from datetime import date, datetime, time, timedelta

import pytest
import pytz

from app.core.errors import FormatError
from app.utils.time_window import (
    add_minutes,
    ensure_utc,
    intervals_overlap,
    local_date_of,
    local_day_bounds,
    local_weekday,
    parse_date,
    parse_instant,
    parse_time_of_day,
    time_of_day_to_instant,
)

BERLIN = "Europe/Berlin"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=pytz.UTC)


class TestTimeOfDayToInstant:

    def test_summer_time_offset(self):
        assert time_of_day_to_instant("2030-06-04", "09:00", BERLIN) == utc(2030, 6, 4, 7, 0)

    def test_winter_time_offset(self):
        assert time_of_day_to_instant("2030-01-08", "09:00", BERLIN) == utc(2030, 1, 8, 8, 0)

    def test_accepts_date_and_time_objects(self):
        result = time_of_day_to_instant(date(2030, 6, 4), time(18, 0), BERLIN)
        assert result == utc(2030, 6, 4, 16, 0)

    def test_nonexistent_time_is_shifted_forward_by_gap(self):
        # 2030-03-31 02:30 does not exist in Berlin, clocks jump to 03:30 CEST
        result = time_of_day_to_instant("2030-03-31", "02:30", BERLIN)
        assert result == utc(2030, 3, 31, 1, 30)
        assert result.astimezone(pytz.timezone(BERLIN)).strftime("%H:%M") == "03:30"

    def test_ambiguous_time_resolves_to_first_occurrence(self):
        # 2030-10-27 02:30 happens twice; the first one is still CEST (+02:00)
        assert time_of_day_to_instant("2030-10-27", "02:30", BERLIN) == utc(2030, 10, 27, 0, 30)

    def test_unknown_timezone(self):
        with pytest.raises(FormatError) as exc:
            time_of_day_to_instant("2030-06-04", "09:00", "Mars/Olympus")
        assert exc.value.field == "timezone"


class TestIntervals:

    def test_add_minutes(self):
        assert add_minutes(utc(2030, 6, 4, 7, 0), 65) == utc(2030, 6, 4, 8, 5)

    def test_overlap(self):
        assert intervals_overlap(utc(2030, 1, 1, 10), utc(2030, 1, 1, 11),
                                 utc(2030, 1, 1, 10, 30), utc(2030, 1, 1, 12))

    def test_touching_intervals_do_not_overlap(self):
        assert not intervals_overlap(utc(2030, 1, 1, 10), utc(2030, 1, 1, 11),
                                     utc(2030, 1, 1, 11), utc(2030, 1, 1, 12))

    def test_containment_overlaps(self):
        assert intervals_overlap(utc(2030, 1, 1, 9), utc(2030, 1, 1, 18),
                                 utc(2030, 1, 1, 10), utc(2030, 1, 1, 11))


class TestParsing:

    def test_parse_date(self):
        assert parse_date("2030-06-04") == date(2030, 6, 4)

    @pytest.mark.parametrize("value", ["2030-6-4", "04.06.2030", "2030-02-30", "", None])
    def test_parse_date_rejects_malformed(self, value):
        with pytest.raises(FormatError):
            parse_date(value)

    def test_parse_time_of_day(self):
        assert parse_time_of_day("9:05") == time(9, 5)
        assert parse_time_of_day("18:00:00") == time(18, 0)

    @pytest.mark.parametrize("value", ["24:00", "9h", "12:60", ""])
    def test_parse_time_rejects_malformed(self, value):
        with pytest.raises(FormatError):
            parse_time_of_day(value)

    def test_parse_instant_with_z_suffix(self):
        assert parse_instant("2030-06-04T08:00:00Z", BERLIN) == utc(2030, 6, 4, 8, 0)

    def test_parse_instant_with_offset(self):
        assert parse_instant("2030-06-04T10:00:00+02:00", BERLIN) == utc(2030, 6, 4, 8, 0)

    def test_parse_instant_naive_is_salon_local(self):
        assert parse_instant("2030-06-04T10:00:00", BERLIN) == utc(2030, 6, 4, 8, 0)

    def test_parse_instant_rejects_garbage(self):
        with pytest.raises(FormatError) as exc:
            parse_instant("tomorrow at ten", BERLIN, field="starts_at")
        assert exc.value.field == "starts_at"
        assert exc.value.to_dict() == {"message": "Validation failed", "errors": {"starts_at": ["invalid"]}}

    def test_ensure_utc_treats_naive_as_utc(self):
        assert ensure_utc(datetime(2030, 6, 4, 7, 0)) == utc(2030, 6, 4, 7, 0)


class TestLocalDays:

    def test_weekday_numbering_starts_on_sunday(self):
        assert local_weekday(date(2030, 6, 2)) == 0  # Sunday
        assert local_weekday(date(2030, 6, 4)) == 2  # Tuesday
        assert local_weekday(date(2030, 6, 8)) == 6  # Saturday

    def test_local_date_of_late_evening_utc(self):
        # 22:30 UTC is already the next day in Berlin during summer
        assert local_date_of(utc(2030, 6, 4, 22, 30), BERLIN) == date(2030, 6, 5)

    def test_day_bounds(self):
        start, end = local_day_bounds("2030-06-04", BERLIN)
        assert start == utc(2030, 6, 3, 22, 0)
        assert end - start == timedelta(hours=24)

    def test_day_bounds_on_spring_forward_day(self):
        start, end = local_day_bounds("2030-03-31", BERLIN)
        assert end - start == timedelta(hours=23)
