"""
Unit tests for the TimeRange value object, clock parsing and audience
intersection.
"""

from datetime import date, datetime, time, timedelta

import pytest
from hypothesis import given
from hypothesis import strategies as st

from regie.domain.shared.exceptions import InvalidRangeError, ValidationError
from regie.domain.staffing.value_objects.enums import TargetAudience
from regie.domain.staffing.value_objects.time_range import (
    TimeRange,
    audiences_intersect,
    overlaps,
    parse_clock,
)

DAY = date(2025, 6, 2)


@st.composite
def time_ranges(draw):
    """Non-degenerate ranges within a couple of days."""
    start = draw(
        st.datetimes(min_value=datetime(2025, 6, 1), max_value=datetime(2025, 6, 3))
    )
    minutes = draw(st.integers(min_value=1, max_value=24 * 60))
    return TimeRange(start, start + timedelta(minutes=minutes))


class TestTimeRangeCreation:
    def test_create_on_date(self):
        block = TimeRange.on_date(DAY, "09:00", "12:30")

        assert block.start == datetime(2025, 6, 2, 9, 0)
        assert block.end == datetime(2025, 6, 2, 12, 30)
        assert block.duration_minutes() == 210

    def test_end_equal_to_start_fails(self):
        with pytest.raises(InvalidRangeError):
            TimeRange.on_date(DAY, "10:00", "10:00")

    def test_end_before_start_fails(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            TimeRange(datetime(2025, 6, 2, 12), datetime(2025, 6, 2, 9))

        assert exc_info.value.details["start"] == "2025-06-02 12:00:00"

    def test_contains_is_half_open(self):
        block = TimeRange.on_date(DAY, "09:00", "10:00")

        assert block.contains(datetime(2025, 6, 2, 9, 0))
        assert not block.contains(datetime(2025, 6, 2, 10, 0))

    def test_equality_and_hash(self):
        a = TimeRange.on_date(DAY, "09:00", "10:00")
        b = TimeRange.on_date(DAY, time(9, 0), time(10, 0))

        assert a == b
        assert len({a, b}) == 1


class TestParseClock:
    @pytest.mark.parametrize(
        "value, expected",
        [("09:00", time(9, 0)), ("9:05", time(9, 5)), ("23:59:30", time(23, 59))],
    )
    def test_valid_clock_strings(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "", "12h30"])
    def test_invalid_clock_strings(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_clock(value, "start_time")

        assert exc_info.value.field_name == "start_time"


class TestOverlap:
    def test_partial_overlap(self):
        a = TimeRange.on_date(DAY, "09:00", "12:00")
        b = TimeRange.on_date(DAY, "11:00", "13:00")

        assert overlaps(a, b)

    def test_back_to_back_ranges_do_not_overlap(self):
        a = TimeRange.on_date(DAY, "09:00", "12:00")
        b = TimeRange.on_date(DAY, "12:00", "14:00")

        assert not overlaps(a, b)
        assert not overlaps(b, a)

    def test_containment_overlaps(self):
        outer = TimeRange.on_date(DAY, "08:00", "18:00")
        inner = TimeRange.on_date(DAY, "10:00", "11:00")

        assert overlaps(outer, inner)

    @given(time_ranges(), time_ranges())
    def test_overlap_is_symmetric(self, a, b):
        assert overlaps(a, b) == overlaps(b, a)

    @given(time_ranges())
    def test_overlap_is_reflexive(self, a):
        assert overlaps(a, a)

    @given(time_ranges(), st.integers(min_value=1, max_value=600))
    def test_range_starting_at_end_never_overlaps(self, a, minutes):
        b = TimeRange(a.end, a.end + timedelta(minutes=minutes))

        assert not overlaps(a, b)


class TestAudiencesIntersect:
    def test_both_is_a_wildcard(self):
        assert audiences_intersect([TargetAudience.BOTH], [TargetAudience.TECHNIQUES])
        assert audiences_intersect([TargetAudience.ARTISTES], [TargetAudience.BOTH])

    def test_disjoint_categories(self):
        assert not audiences_intersect(
            [TargetAudience.ARTISTES], [TargetAudience.TECHNIQUES]
        )

    def test_empty_side_never_intersects(self):
        assert not audiences_intersect([], [TargetAudience.BOTH])
