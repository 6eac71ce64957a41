"""
Tests for services/patients.py
"""

from datetime import datetime

from clinic_backend import schemas
from clinic_backend.services.outcomes import Outcome


def test_register_and_duplicates(services):
    data = schemas.PatientIn(name="Carla Díaz", email="carla@mail.test", phone="5533334444")
    assert services.patients.register(data).outcome is Outcome.created

    same_phone = schemas.PatientIn(name="Carla Two", email="other@mail.test", phone="5533334444")
    assert services.patients.register(same_phone).outcome is Outcome.conflict

    same_email = schemas.PatientIn(name="Carla Three", email="CARLA@mail.test", phone="5500009999")
    assert services.patients.register(same_email).outcome is Outcome.conflict


def test_details(services, alice):
    res = services.patients.details("Alice@Mail.test")
    assert res.outcome is Outcome.ok
    assert res.data.id == alice.id
    assert services.patients.details("not-an-email").outcome is Outcome.patient_not_found


class TestAppointmentHistory:
    def _setup(self, services, doctor, other_doctor, alice):
        done = services.lifecycle.book(doctor.id, alice.id, datetime(2030, 1, 15, 9, 0)).data
        services.lifecycle.mark_fulfilled(done.id)
        upcoming = services.lifecycle.book(other_doctor.id, alice.id, datetime(2030, 2, 1, 16, 0)).data
        return done, upcoming

    def test_all_appointments(self, services, doctor, other_doctor, alice):
        done, upcoming = self._setup(services, doctor, other_doctor, alice)
        res = services.patients.appointments_for("alice@mail.test")
        assert [a.id for a in res.data] == [done.id, upcoming.id]

    def test_past_and_future(self, services, doctor, other_doctor, alice):
        done, upcoming = self._setup(services, doctor, other_doctor, alice)
        assert [a.id for a in services.patients.appointments_for("alice@mail.test", "past").data] == [done.id]
        assert [a.id for a in services.patients.appointments_for("alice@mail.test", "future").data] == [upcoming.id]

    def test_doctor_name_and_condition(self, services, doctor, other_doctor, alice):
        done, upcoming = self._setup(services, doctor, other_doctor, alice)
        res = services.patients.appointments_for("alice@mail.test", "future", doctor_name="mario")
        assert [a.doctor_name for a in res.data] == ["Dr. Mario Soto"]
        assert services.patients.appointments_for("alice@mail.test", "past", doctor_name="mario").data == []

    def test_invalid_condition(self, services, alice):
        assert services.patients.appointments_for("alice@mail.test", "someday").outcome is Outcome.invalid_filter

    def test_unknown_patient(self, services):
        assert services.patients.appointments_for("ghost@mail.test").outcome is Outcome.patient_not_found
