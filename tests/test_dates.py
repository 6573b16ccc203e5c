import pytest

from gtasks_mcp.exceptions import DueDateParseError
from gtasks_mcp.services.dates import normalize_due_date


class TestMissingInput:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_returns_none(self, value):
        assert normalize_due_date(value) is None


class TestRfc3339:
    def test_canonical_is_unchanged(self):
        assert normalize_due_date("2025-12-15T00:00:00.000Z") == "2025-12-15T00:00:00.000Z"

    def test_without_milliseconds(self):
        assert normalize_due_date("2025-12-15T00:00:00Z") == "2025-12-15T00:00:00.000Z"

    def test_time_of_day_is_discarded(self):
        assert normalize_due_date("2025-12-15T23:59:59.999Z") == "2025-12-15T00:00:00.000Z"

    def test_invalid_hour_is_malformed(self):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date("2025-12-15T25:00:00Z")
        assert exc_info.value.reason == "malformed"

    @pytest.mark.parametrize("value", [
        "2025-12-15T00:00:00.000Z",
        "2024-02-29T00:00:00.000Z",
        "1970-01-01T00:00:00.000Z",
        "2100-12-31T00:00:00.000Z",
    ])
    def test_idempotent(self, value):
        once = normalize_due_date(value)
        assert normalize_due_date(once) == once


class TestIsoDate:
    def test_date_only(self):
        assert normalize_due_date("2025-12-15") == "2025-12-15T00:00:00.000Z"

    def test_surrounding_whitespace(self):
        assert normalize_due_date("  2025-12-15 ") == "2025-12-15T00:00:00.000Z"

    def test_leap_day(self):
        assert normalize_due_date("2024-02-29") == "2024-02-29T00:00:00.000Z"

    def test_nonexistent_day_is_malformed(self):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date("2025-02-29")
        assert exc_info.value.reason == "malformed"


class TestUsSlashDate:
    def test_month_day_year(self):
        assert normalize_due_date("12/15/2025") == "2025-12-15T00:00:00.000Z"

    def test_single_digit_components(self):
        assert normalize_due_date("1/5/2025") == "2025-01-05T00:00:00.000Z"

    def test_no_rollover_into_next_month(self):
        with pytest.raises(DueDateParseError):
            normalize_due_date("02/30/2025")

    def test_day_first_is_not_guessed(self):
        # Slashes are always month first, unlike dashes
        with pytest.raises(DueDateParseError):
            normalize_due_date("15/12/2025")


class TestDashedDate:
    def test_first_component_over_twelve_is_day(self):
        assert normalize_due_date("25-12-2025") == "2025-12-25T00:00:00.000Z"

    def test_ambiguous_resolves_month_first(self):
        # 01-02-2025 could be 1 Feb in day-first locales; it is read as 2 Jan
        assert normalize_due_date("01-02-2025") == "2025-01-02T00:00:00.000Z"

    def test_second_component_over_twelve(self):
        assert normalize_due_date("12-25-2025") == "2025-12-25T00:00:00.000Z"

    def test_both_over_twelve_is_malformed(self):
        with pytest.raises(DueDateParseError):
            normalize_due_date("13-13-2025")


class TestYearFirstSlashDate:
    def test_year_month_day(self):
        assert normalize_due_date("2025/12/15") == "2025-12-15T00:00:00.000Z"

    def test_invalid_month_is_malformed(self):
        with pytest.raises(DueDateParseError):
            normalize_due_date("2025/13/01")


class TestFreeForm:
    def test_written_out_date(self):
        assert normalize_due_date("December 15, 2025") == "2025-12-15T00:00:00.000Z"

    def test_abbreviated_with_time(self):
        assert normalize_due_date("Dec 15 2025 10:30 PM") == "2025-12-15T00:00:00.000Z"

    def test_offset_is_converted_to_utc_first(self):
        assert normalize_due_date("2025-12-15T23:30:00-05:00") == "2025-12-16T00:00:00.000Z"

    def test_garbage_is_malformed(self):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date("not a date")
        assert exc_info.value.reason == "malformed"
        assert exc_info.value.value == "not a date"
        assert "not a date" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["December 15", "10:30", "2025"])
    def test_incomplete_date_is_malformed(self, value):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date(value)
        assert exc_info.value.reason == "malformed"


class TestYearRange:
    @pytest.mark.parametrize("value", ["1969-12-31", "12/31/1969", "2101-01-01", "2101/01/01", "01-01-2101"])
    def test_outside_range(self, value):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date(value)
        assert exc_info.value.reason == "out_of_range"
        assert exc_info.value.value == value

    @pytest.mark.parametrize("value, expected", [
        ("1970-01-01", "1970-01-01T00:00:00.000Z"),
        ("2100-12-31", "2100-12-31T00:00:00.000Z"),
    ])
    def test_bounds_are_inclusive(self, value, expected):
        assert normalize_due_date(value) == expected

    @pytest.mark.parametrize("value", ["0000-01-01", "01/01/0000", "01-01-0000", "0000/01/01", "0000-01-01T00:00:00Z"])
    def test_year_zero_is_out_of_range(self, value):
        with pytest.raises(DueDateParseError, match="Invalid date year: 0 ") as exc_info:
            normalize_due_date(value)
        assert exc_info.value.reason == "out_of_range"

    def test_year_checked_before_day(self):
        with pytest.raises(DueDateParseError) as exc_info:
            normalize_due_date("02/30/1900")
        assert exc_info.value.reason == "out_of_range"
