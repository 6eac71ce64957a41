from __future__ import annotations
from datetime import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import settings
from .services.slots import parse_slot


def _clinic_now() -> datetime:
    # Hora local de la clínica sin tz, igual que se guardan las citas
    return datetime.now(pytz.timezone(settings.TIMEZONE)).replace(tzinfo=None)


def _as_clinic_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(settings.TIMEZONE)).replace(tzinfo=None)


def _check_slots(value: list[str]) -> list[str]:
    bad = [s for s in value if parse_slot(s) is None]
    if bad:
        raise ValueError(f"Horarios inválidos (usa HH:MM-HH:MM con inicio < fin): {bad}")
    return value


# ===== Doctores =====
class DoctorIn(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    specialty: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(pattern=r"^[0-9]{10}$")
    available_times: list[str] = Field(default_factory=list)

    @field_validator("available_times")
    @classmethod
    def _slots_parse(cls, value: list[str]) -> list[str]:
        return _check_slots(value)


class DoctorUpdate(BaseModel):
    email: str
    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    specialty: Optional[str] = Field(default=None, min_length=3, max_length=50)
    phone: Optional[str] = Field(default=None, pattern=r"^[0-9]{10}$")
    available_times: Optional[list[str]] = None

    @field_validator("available_times")
    @classmethod
    def _slots_parse(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value
        return _check_slots(value)


class DoctorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: str
    email: str
    phone: str
    available_times: list[str]


class SlotsResponse(BaseModel):
    doctor_id: int
    date: str
    slots: list[str]


# ===== Pacientes =====
class PatientIn(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str = Field(pattern=r"^[0-9]{10}$")
    address: Optional[str] = Field(default=None, max_length=255)


class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    address: Optional[str] = None


# ===== Citas =====
class AppointmentRequest(BaseModel):
    doctor_id: int
    appointment_time: datetime

    @field_validator("appointment_time")
    @classmethod
    def _future_only(cls, value: datetime) -> datetime:
        value = _as_clinic_local(value)
        if settings.REQUIRE_FUTURE_APPOINTMENTS and value <= _clinic_now():
            raise ValueError("La hora de la cita debe estar en el futuro")
        return value


class AppointmentSummary(BaseModel):
    id: int
    doctor_id: int
    doctor_name: str
    patient_id: int
    patient_name: str
    patient_email: str
    patient_phone: str
    patient_address: Optional[str] = None
    appointment_time: datetime
    status: int

    @classmethod
    def from_appointment(cls, appt) -> "AppointmentSummary":
        return cls(
            id=appt.id,
            doctor_id=appt.doctor_id,
            doctor_name=appt.doctor.name,
            patient_id=appt.patient_id,
            patient_name=appt.patient.name,
            patient_email=appt.patient.email,
            patient_phone=appt.patient.phone,
            patient_address=appt.patient.address,
            appointment_time=appt.appointment_time,
            status=int(appt.status),
        )


class AppointmentsResponse(BaseModel):
    appointments: list[AppointmentSummary]


# ===== Recetas =====
class PrescriptionIn(BaseModel):
    appointment_id: int
    patient_name: str = Field(min_length=3, max_length=100)
    medication: str = Field(min_length=3, max_length=100)
    dosage: str = Field(min_length=1, max_length=100)
    doctor_notes: Optional[str] = Field(default=None, max_length=200)


class PrescriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: Optional[str] = None
