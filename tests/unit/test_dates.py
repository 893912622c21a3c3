"""Tests for yfp.prices.dates."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from yfp.core.exceptions import DateParseError, FormatError
from yfp.prices.dates import (
    DisplayDate,
    EpochDate,
    date_value_from_string,
    parse_canonical_date,
    parse_compact_date,
    to_display_string,
    to_human_phrase,
)


def _utc(year: int, month: int, day: int) -> int:
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


class TestDateValue:
    def test_default_is_epoch_zero(self):
        assert EpochDate() == EpochDate(epoch=0)

    def test_variants_never_equal(self):
        assert EpochDate(epoch=0) != DisplayDate(text="Jan 1, 1970")

    def test_frozen(self):
        value = EpochDate(epoch=5)
        with pytest.raises(Exception):
            value.epoch = 6  # type: ignore[misc]


class TestToDisplayString:
    def test_epoch_renders_abbreviated(self):
        assert to_display_string(EpochDate(epoch=_utc(2005, 12, 28))) == "Dec 28, 2005"

    def test_day_not_zero_padded(self):
        assert to_display_string(EpochDate(epoch=_utc(2024, 3, 5))) == "Mar 5, 2024"

    def test_epoch_zero(self):
        assert to_display_string(EpochDate()) == "Jan 1, 1970"

    def test_negative_epoch(self):
        assert to_display_string(EpochDate(epoch=_utc(1969, 7, 20))) == "Jul 20, 1969"

    def test_display_string_passes_through(self):
        assert to_display_string(DisplayDate(text="anything at all")) == "anything at all"

    def test_out_of_range_epoch_raises(self):
        with pytest.raises(FormatError) as exc_info:
            to_display_string(EpochDate(epoch=10**12))
        assert exc_info.value.context["epoch"] == 10**12

    def test_absurd_epoch_raises(self):
        with pytest.raises(FormatError):
            to_display_string(EpochDate(epoch=-(10**18)))


class TestParseCanonicalDate:
    def test_known_value(self):
        assert parse_canonical_date("2025-02-09") == 1739059200

    def test_utc_midnight(self):
        assert parse_canonical_date("2005-12-28") == _utc(2005, 12, 28)
        assert parse_canonical_date("2005-12-28") % 86_400 == 0

    def test_epoch_origin(self):
        assert parse_canonical_date("1970-01-01") == 0

    def test_pre_epoch_is_negative(self):
        assert parse_canonical_date("1969-12-31") == -86_400

    @pytest.mark.parametrize(
        "text",
        ["2025-13-01", "2025/02/09", "Dec 28, 2005", "", "2025-02-30", "20250209"],
    )
    def test_malformed_raises(self, text: str):
        with pytest.raises(DateParseError) as exc_info:
            parse_canonical_date(text)
        assert exc_info.value.context["value"] == text


class TestParseCompactDate:
    def test_known_value(self):
        assert parse_compact_date("Dec 20,2024") == _utc(2024, 12, 20)

    def test_single_digit_day(self):
        assert parse_compact_date("Jan 2,2023") == _utc(2023, 1, 2)

    def test_space_before_year_tolerated(self):
        assert parse_compact_date("Dec 20, 2024") == _utc(2024, 12, 20)

    def test_month_case_insensitive(self):
        assert parse_compact_date("dec 20,2024") == _utc(2024, 12, 20)

    def test_full_month_name(self):
        assert parse_compact_date("December 20,2024") == _utc(2024, 12, 20)

    def test_leap_day(self):
        assert parse_compact_date("Feb 29,2024") == _utc(2024, 2, 29)

    @pytest.mark.parametrize(
        "text",
        [
            "2024-12-20",
            "Foo 20,2024",
            "Feb 30,2024",
            "",
            "Dec 20 2024",
            "Date",
            "Dec ,2024",
            # digits outside ASCII
            "Jan \u0662,\u0662\u0660\u0662\u0660",
            "Jan 2,\uff12\uff10\uff12\uff10",
        ],
    )
    def test_malformed_raises(self, text: str):
        with pytest.raises(DateParseError):
            parse_compact_date(text)


class TestToHumanPhrase:
    def test_full_month_name(self):
        assert to_human_phrase("2005-12-28") == "December 28, 2005"

    def test_no_zero_padding(self):
        assert to_human_phrase("2024-03-05") == "March 5, 2024"

    def test_malformed_raises(self):
        with pytest.raises(DateParseError):
            to_human_phrase("March 5, 2024")


class TestCanonicalRoundTrip:
    """The display path and the phrase path always pick the same calendar day."""

    @pytest.mark.parametrize(
        "text",
        ["2005-12-28", "2025-02-09", "2000-02-29", "1970-01-01", "2024-09-05", "1999-05-31"],
    )
    def test_display_matches_abbreviated_phrase(self, text: str):
        displayed = to_display_string(EpochDate(epoch=parse_canonical_date(text)))
        month, rest = to_human_phrase(text).split(" ", 1)
        assert displayed == f"{month[:3]} {rest}"


class TestDateValueFromString:
    def test_canonical_becomes_epoch(self):
        assert date_value_from_string("2020-12-24") == EpochDate(epoch=_utc(2020, 12, 24))

    def test_pre_epoch_clamps_to_zero(self):
        assert date_value_from_string("1969-12-31") == EpochDate(epoch=0)

    def test_rejects_malformed(self):
        with pytest.raises(DateParseError):
            date_value_from_string("24/12/2020")


class TestFormatMismatch:
    """The three date formats are intentionally distinct; these tests pin that down."""

    def test_serialized_display_string_does_not_deserialize(self):
        rendered = to_display_string(EpochDate(epoch=_utc(2020, 12, 24)))
        assert rendered == "Dec 24, 2020"
        with pytest.raises(DateParseError):
            date_value_from_string(rendered)

    def test_display_value_round_trips_only_as_text(self):
        value = DisplayDate(text="Dec 24, 2020")
        assert to_display_string(value) == "Dec 24, 2020"
        # Reading it back needs the canonical form, which yields an epoch
        assert date_value_from_string("2020-12-24") != value

    def test_display_form_differs_from_compact_form(self):
        rendered = to_display_string(EpochDate(epoch=_utc(2020, 12, 24)))
        assert rendered != "Dec 24,2020"
        # The compact parser happens to accept both spellings
        assert parse_compact_date(rendered) == parse_compact_date("Dec 24,2020")

    def test_compact_form_rejected_by_canonical_parser(self):
        with pytest.raises(DateParseError):
            parse_canonical_date("Dec 24,2020")
