# clinic_backend/services/stores.py
"""
Acceso a datos sobre una sesión de SQLAlchemy.

Las escrituras hacen commit; si la BD falla se hace rollback y se re-lanza
la excepción para que el servicio la traduzca a `persistence_failure`.
Las colecciones se devuelven siempre como listas ya materializadas.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models

logger = logging.getLogger(__name__)


def _purge_appointments(db: Session, doctor_id: int) -> int:
    """Borra citas y recetas de un doctor sin hacer commit."""
    ids = [
        row.id for row in
        db.query(models.Appointment.id).filter(models.Appointment.doctor_id == doctor_id).all()
    ]
    if ids:
        # SQLite no aplica ON DELETE CASCADE sin PRAGMA; borramos recetas a mano
        db.query(models.Prescription).filter(
            models.Prescription.appointment_id.in_(ids)
        ).delete(synchronize_session="fetch")
    deleted = (
        db.query(models.Appointment)
        .filter(models.Appointment.doctor_id == doctor_id)
        .delete(synchronize_session="fetch")
    )
    logger.info("Citas borradas para doctor_id=%s: %s", doctor_id, deleted)
    return deleted


class _Store:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _persist(self, obj):
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        return obj


class DoctorStore(_Store):
    def find_by_id(self, doctor_id: int) -> Optional[models.Doctor]:
        return self.db.get(models.Doctor, doctor_id)

    def find_by_email(self, email: str) -> Optional[models.Doctor]:
        return (
            self.db.query(models.Doctor)
            .filter(func.lower(models.Doctor.email) == (email or "").strip().lower())
            .first()
        )

    def available_times(self, doctor: models.Doctor) -> List[str]:
        # Copia: quien la consuma no debe mutar la columna JSON por accidente
        return list(doctor.available_times or [])

    def list_all(self) -> List[models.Doctor]:
        return self.db.query(models.Doctor).order_by(models.Doctor.id).all()

    def search(self, name: Optional[str] = None, specialty: Optional[str] = None) -> List[models.Doctor]:
        q = self.db.query(models.Doctor)
        if name:
            q = q.filter(func.lower(models.Doctor.name).contains(name.strip().lower()))
        if specialty:
            q = q.filter(func.lower(models.Doctor.specialty) == specialty.strip().lower())
        return q.order_by(models.Doctor.id).all()

    def save(self, doctor: models.Doctor) -> models.Doctor:
        return self._persist(doctor)

    def delete(self, doctor: models.Doctor) -> int:
        """
        Borra el doctor junto con sus citas y recetas en una sola transacción.
        Devuelve cuántas citas se borraron.
        """
        try:
            deleted = _purge_appointments(self.db, doctor.id)
            # la colección ya no refleja la BD; que no se intente desvincular
            self.db.expire(doctor, ["appointments"])
            self.db.delete(doctor)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return deleted


class PatientStore(_Store):
    def find_by_id(self, patient_id: int) -> Optional[models.Patient]:
        return self.db.get(models.Patient, patient_id)

    def find_by_email(self, email: str) -> Optional[models.Patient]:
        return (
            self.db.query(models.Patient)
            .filter(func.lower(models.Patient.email) == (email or "").strip().lower())
            .first()
        )

    def find_by_email_or_phone(self, email: str, phone: str) -> Optional[models.Patient]:
        return (
            self.db.query(models.Patient)
            .filter(or_(
                func.lower(models.Patient.email) == (email or "").strip().lower(),
                models.Patient.phone == phone,
            ))
            .first()
        )

    def save(self, patient: models.Patient) -> models.Patient:
        return self._persist(patient)


class AppointmentStore(_Store):
    def find_by_id(self, appointment_id: int) -> Optional[models.Appointment]:
        return self.db.get(models.Appointment, appointment_id)

    def find_by_doctor_and_time_range(
        self,
        doctor_id: int,
        start: datetime,
        end: datetime,
        patient_name: Optional[str] = None,
    ) -> List[models.Appointment]:
        """
        Citas del doctor con hora en la ventana semiabierta [start, end).
        `patient_name` filtra por subcadena sin distinguir mayúsculas.
        """
        q = (
            self.db.query(models.Appointment)
            .filter(models.Appointment.doctor_id == doctor_id)
            .filter(models.Appointment.appointment_time >= start)
            .filter(models.Appointment.appointment_time < end)
        )
        if patient_name:
            q = q.join(models.Patient, models.Appointment.patient_id == models.Patient.id).filter(
                func.lower(models.Patient.name).contains(patient_name.strip().lower())
            )
        return q.order_by(models.Appointment.appointment_time).all()

    def find_by_patient_id(
        self,
        patient_id: int,
        status: Optional[int] = None,
        doctor_name: Optional[str] = None,
    ) -> List[models.Appointment]:
        q = self.db.query(models.Appointment).filter(models.Appointment.patient_id == patient_id)
        if status is not None:
            q = q.filter(models.Appointment.status == int(status))
        if doctor_name:
            q = q.join(models.Doctor, models.Appointment.doctor_id == models.Doctor.id).filter(
                func.lower(models.Doctor.name).contains(doctor_name.strip().lower())
            )
        return q.order_by(models.Appointment.appointment_time).all()

    def save(self, appointment: models.Appointment) -> models.Appointment:
        return self._persist(appointment)

    def delete(self, appointment: models.Appointment) -> None:
        self.db.delete(appointment)
        self._commit()

    def update_status(self, appointment_id: int, status: int) -> bool:
        """Devuelve False si la cita no existe."""
        try:
            updated = (
                self.db.query(models.Appointment)
                .filter(models.Appointment.id == appointment_id)
                .update({models.Appointment.status: int(status)}, synchronize_session="fetch")
            )
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return updated > 0

    def delete_all_for_doctor(self, doctor_id: int) -> int:
        try:
            deleted = _purge_appointments(self.db, doctor_id)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self._commit()
        return deleted


class PrescriptionStore(_Store):
    def find_by_appointment_id(self, appointment_id: int) -> Optional[models.Prescription]:
        return (
            self.db.query(models.Prescription)
            .filter(models.Prescription.appointment_id == appointment_id)
            .first()
        )

    def save(self, prescription: models.Prescription) -> models.Prescription:
        return self._persist(prescription)
