# clinic_backend/models.py
from typing import Optional, List
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, DateTime, ForeignKey, JSON, UniqueConstraint
from datetime import datetime, date
import enum
from .database import Base


class AppointmentStatus(enum.IntEnum):
    scheduled = 0
    # se marca al adjuntar la receta de la consulta
    fulfilled = 1


class Doctor(Base):
    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    specialty: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(10), nullable=False)
    # Plantillas "HH:MM-HH:MM" que se repiten todos los días, en orden
    available_times: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    appointments = relationship("Appointment", back_populates="doctor", passive_deletes=True)


class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)

    appointments = relationship("Appointment", back_populates="patient")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # Segunda barrera contra doble reserva entre procesos
        UniqueConstraint("doctor_id", "appointment_time", name="uq_appointments_doctor_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    doctor_id: Mapped[int] = mapped_column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id: Mapped[int] = mapped_column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    # Hora local de la clínica, sin tz
    appointment_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=AppointmentStatus.scheduled)

    doctor = relationship("Doctor", back_populates="appointments")
    patient = relationship("Patient", back_populates="appointments")
    prescription = relationship("Prescription", back_populates="appointment", uselist=False)

    @property
    def appointment_date(self) -> date:
        return self.appointment_time.date()


class Prescription(Base):
    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    appointment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    patient_name: Mapped[str] = mapped_column(String(100), nullable=False)
    medication: Mapped[str] = mapped_column(String(100), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False)
    doctor_notes: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, default=None)

    appointment = relationship("Appointment", back_populates="prescription")
