"""
Tests for services/time_filter.py
"""

from types import SimpleNamespace

import pytest

from clinic_backend.services.time_filter import filter_by_period, has_slot_in_period


def _doc(name, slots):
    return SimpleNamespace(name=name, available_times=slots)


MORNING = _doc("morning", ["08:00-09:00", "11:00-12:00"])
AFTERNOON = _doc("afternoon", ["12:00-13:00", "18:00-19:00"])
BROKEN = _doc("broken", ["garbage", "13-14"])
EMPTY = _doc("empty", [])
DOCTORS = [MORNING, AFTERNOON, BROKEN, EMPTY]


@pytest.mark.parametrize("period", [None, "", "   "])
def test_blank_selector_passes_everything(period):
    assert filter_by_period(DOCTORS, period) == DOCTORS


def test_am_keeps_doctors_with_a_morning_slot():
    assert [d.name for d in filter_by_period(DOCTORS, "AM")] == ["morning"]


def test_pm_starts_at_noon():
    assert [d.name for d in filter_by_period(DOCTORS, "pm")] == ["afternoon"]


def test_slot_lists_can_be_filtered_directly():
    lists = [["11:59-12:30"], ["12:00-12:30"], ["bad"]]
    assert filter_by_period(lists, "am") == [["11:59-12:30"]]
    assert filter_by_period(lists, "pm") == [["12:00-12:30"]]


def test_malformed_slots_never_match():
    assert has_slot_in_period(["nope", "10:00-09:00"], "am") is False
    assert has_slot_in_period(["nope", "10:00-09:00"], "pm") is False
    assert has_slot_in_period(["nope"], None) is True


@pytest.mark.parametrize("period", ["evening", "p.m.", "x"])
def test_unknown_selector_passes_everything(period):
    assert filter_by_period(DOCTORS, period) == DOCTORS
    assert has_slot_in_period(["nope"], period) is True
