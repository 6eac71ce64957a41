"""
Tests for services/availability.py

Template slots minus the slots occupied by booked appointments.
"""

from datetime import date, datetime

from sqlalchemy.exc import OperationalError

from clinic_backend import models
from clinic_backend.services.outcomes import Outcome

DAY = date(2030, 1, 15)


def _book(db, doctor, patient, at):
    appt = models.Appointment(doctor_id=doctor.id, patient_id=patient.id, appointment_time=at)
    db.add(appt)
    db.commit()
    return appt


def test_no_bookings_returns_templates_in_order(services, doctor):
    res = services.availability.availability(doctor.id, DAY)
    assert res.outcome is Outcome.ok
    assert res.data == ["09:00-10:00", "10:00-11:00", "14:00-15:00"]


def test_duplicates_are_kept(db, services, doctor):
    doctor.available_times = ["10:00-11:00", "09:00-10:00", "10:00-11:00"]
    db.commit()
    res = services.availability.availability(doctor.id, DAY)
    assert res.data == ["10:00-11:00", "09:00-10:00", "10:00-11:00"]


def test_booked_slot_is_removed_and_others_remain(db, services, doctor, alice):
    _book(db, doctor, alice, datetime(2030, 1, 15, 10, 0))
    res = services.availability.availability(doctor.id, DAY)
    assert res.data == ["09:00-10:00", "14:00-15:00"]


def test_partially_overlapping_booking_does_not_remove_template(db, services, doctor, alice):
    # Exact-match subtraction: 09:30-10:30 is not equal to 09:00-10:00
    doctor.available_times = ["09:00-10:00", "09:30-10:30"]
    db.commit()
    _book(db, doctor, alice, datetime(2030, 1, 15, 9, 0))
    res = services.availability.availability(doctor.id, DAY)
    assert res.data == ["09:30-10:30"]


def test_unpadded_template_matches_booked_slot(db, services, doctor, alice):
    doctor.available_times = ["9:00-10:00", "10:00-11:00"]
    db.commit()
    _book(db, doctor, alice, datetime(2030, 1, 15, 9, 0))
    res = services.availability.availability(doctor.id, DAY)
    assert res.data == ["10:00-11:00"]


def test_malformed_templates_are_skipped(db, services, doctor):
    doctor.available_times = ["09:00-10:00", "not-a-slot", "12:00-11:00", "14:00-15:00"]
    db.commit()
    res = services.availability.availability(doctor.id, DAY)
    assert res.outcome is Outcome.ok
    assert res.data == ["09:00-10:00", "14:00-15:00"]


def test_bookings_on_other_days_are_ignored(db, services, doctor, alice):
    _book(db, doctor, alice, datetime(2030, 1, 14, 9, 0))
    _book(db, doctor, alice, datetime(2030, 1, 16, 9, 0))
    res = services.availability.availability(doctor.id, DAY)
    assert res.data == ["09:00-10:00", "10:00-11:00", "14:00-15:00"]


def test_bookings_of_other_doctors_are_ignored(db, services, doctor, other_doctor, alice):
    other_doctor.available_times = ["09:00-10:00"]
    db.commit()
    _book(db, other_doctor, alice, datetime(2030, 1, 15, 9, 0))
    res = services.availability.availability(doctor.id, DAY)
    assert "09:00-10:00" in res.data


def test_unknown_doctor(services):
    res = services.availability.availability(999, DAY)
    assert res.outcome is Outcome.doctor_not_found
    assert res.data is None


def test_database_error_is_reported(services, doctor, monkeypatch):
    def _db_down(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(services.appointment_store, "find_by_doctor_and_time_range", _db_down)
    res = services.availability.availability(doctor.id, DAY)
    assert res.outcome is Outcome.persistence_failure
    assert res.data is None
