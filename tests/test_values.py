# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for values.py."""

from datetime import date, datetime

import pytest

from certrender.values import (
    destinations,
    first_value,
    format_boolean,
    format_flag,
    is_truthy,
    join_text,
    pick_text,
    resolve,
    resolve_date,
    split_into_slots,
    to_text,
)


class TestTruthiness:
    """Tests for is_truthy(), format_boolean() and format_flag()."""

    @pytest.mark.parametrize("value", [True, "true", "YES", "y", "1", " on "])
    def test_truthy_values(self, value) -> None:
        assert is_truthy(value) is True

    @pytest.mark.parametrize("value", [False, None, "no", "0", "", "X", 1])
    def test_non_truthy_values(self, value) -> None:
        assert is_truthy(value) is False

    def test_format_boolean(self) -> None:
        assert format_boolean(True) == "Yes"
        assert format_boolean("no") == "No"

    def test_unanswered_stays_blank(self) -> None:
        """None and blank strings are not shown as "No"."""
        assert format_boolean(None) == ""
        assert format_boolean("  ") == ""

    def test_format_flag(self) -> None:
        assert format_flag("yes") == "Yes"
        assert format_flag(False) == ""
        assert format_flag(None) == ""


class TestToText:
    """Tests for to_text() and pick_text()."""

    def test_none_is_empty(self) -> None:
        assert to_text(None) == ""

    def test_dates_use_day_month_year(self) -> None:
        assert to_text(date(2024, 3, 7)) == "07/03/2024"
        assert to_text(datetime(2024, 12, 25, 10, 0)) == "25/12/2024"

    def test_booleans(self) -> None:
        assert to_text(True) == "Yes"
        assert to_text(False) == "No"

    def test_numbers_and_trimming(self) -> None:
        assert to_text(21.5) == "21.5"
        assert to_text("  Kitchen ") == "Kitchen"

    def test_pick_text_skips_blanks(self) -> None:
        assert pick_text(None, "  ", "Boiler", "Fire") == "Boiler"
        assert pick_text(None, "") == ""

    def test_join_text(self) -> None:
        assert join_text(["1 High St", None, "", "Leeds"]) == "1 High St, Leeds"

    def test_first_value_keeps_false(self) -> None:
        assert first_value(None, " ", False, True) is False
        assert first_value(None, "") is None


class TestSplitIntoSlots:
    """Tests for split_into_slots()."""

    def test_three_parts_three_slots(self) -> None:
        assert split_into_slots("1 High St, Flat 2, Leeds", 3) == [
            "1 High St",
            "Flat 2",
            "Leeds",
        ]

    def test_five_parts_three_slots(self) -> None:
        """The last slot receives every remaining part."""
        assert split_into_slots("a, b, c, d, e", 3) == ["a", "b", "c, d, e"]

    def test_fewer_parts_pad_with_empty(self) -> None:
        assert split_into_slots("a\nb", 4) == ["a", "b", "", ""]

    def test_empty_text(self) -> None:
        assert split_into_slots("", 2) == ["", ""]

    def test_no_slots(self) -> None:
        assert split_into_slots("a", 0) == []


class TestResolve:
    """Tests for resolve() and destinations()."""

    def test_single_destination(self) -> None:
        assert resolve("Boiler", ["Text_43"]) == ["Boiler"]

    def test_multi_slot(self) -> None:
        assert resolve("a, b", ["x", "y", "z"]) == ["a", "b", ""]

    def test_boolean(self) -> None:
        assert resolve("yes", ["x"], boolean=True) == ["Yes"]

    def test_destinations(self) -> None:
        assert destinations(None) == []
        assert destinations("a") == ["a"]
        assert destinations(("a", "", "b")) == ["a", "b"]


class TestResolveDate:
    """Tests for resolve_date()."""

    def test_iso_string(self) -> None:
        assert resolve_date("2024-05-01") == "01/05/2024"
        assert resolve_date("2024-05-01T09:30:00Z") == "01/05/2024"

    def test_unparseable_string_kept(self) -> None:
        assert resolve_date("next spring") == "next spring"

    def test_fallback(self) -> None:
        assert resolve_date(None, "01/01/2024") == "01/01/2024"
        assert resolve_date("  ", "x") == "x"

    def test_date_objects(self) -> None:
        assert resolve_date(date(2023, 1, 2)) == "02/01/2023"
