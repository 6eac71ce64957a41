"""
Tests for services/slots.py

Parsing and formatting of "HH:MM-HH:MM" slot strings.
"""

from datetime import datetime, time

import pytest

from clinic_backend.services.slots import (
    CONSULTATION_LENGTH,
    booked_slot,
    format_slot,
    normalize_slot,
    parse_slot,
)


class TestParseSlot:
    def test_parses_well_formed_slot(self):
        slot = parse_slot("09:00-10:00")
        assert slot.start == time(9, 0)
        assert slot.end == time(10, 0)
        assert slot.text == "09:00-10:00"

    def test_tolerates_spaces_and_single_digit_hour(self):
        slot = parse_slot(" 9:30 - 10:45 ")
        assert slot.start == time(9, 30)
        assert slot.end == time(10, 45)
        assert slot.text == "09:30-10:45"

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "0900-1000",
            "09:00",
            "09:00-10:00-11:00",
            "25:00-26:00",
            "09:60-10:00",
            "ab:cd-ef:gh",
            "09:00:00-10:00:00",
            "10:00-09:00",
            "10:00-10:00",
        ],
    )
    def test_malformed_text_returns_none(self, text):
        assert parse_slot(text) is None


class TestFormatSlot:
    def test_minutes_are_rendered_as_minutes(self):
        start = datetime(2030, 1, 15, 9, 30)
        assert format_slot(start, start + CONSULTATION_LENGTH) == "09:30-10:30"

    def test_booked_slot_spans_one_hour(self):
        assert booked_slot(datetime(2030, 1, 15, 14, 0)) == "14:00-15:00"

    def test_format_output_parses_back_to_same_times(self):
        start = datetime(2030, 1, 15, 7, 5)
        text = format_slot(start, start + CONSULTATION_LENGTH)
        slot = parse_slot(text)
        assert (slot.start, slot.end) == (time(7, 5), time(8, 5))
        assert slot.text == text


def test_normalize_slot():
    assert normalize_slot("9:00-10:00") == "09:00-10:00"
    assert normalize_slot("garbage") is None
