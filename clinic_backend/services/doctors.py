# clinic_backend/services/doctors.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .. import models, schemas
from .outcomes import Outcome, OperationResult, result
from .stores import DoctorStore
from .time_filter import filter_by_period

logger = logging.getLogger(__name__)


class DoctorDirectory:
    def __init__(self, doctors: DoctorStore):
        self.doctors = doctors

    def save_doctor(self, data: schemas.DoctorIn) -> OperationResult[models.Doctor]:
        if self.doctors.find_by_email(data.email) is not None:
            return result(Outcome.conflict)
        doctor = models.Doctor(
            name=data.name,
            specialty=data.specialty,
            email=data.email.strip().lower(),
            phone=data.phone,
            available_times=list(data.available_times),
        )
        try:
            self.doctors.save(doctor)
        except SQLAlchemyError:
            logger.exception("No se pudo guardar el doctor email=%s", data.email)
            return result(Outcome.persistence_failure)
        logger.info("Doctor creado id=%s", doctor.id)
        return result(Outcome.created, doctor)

    def update_doctor(self, data: schemas.DoctorUpdate) -> OperationResult[models.Doctor]:
        doctor = self.doctors.find_by_email(data.email)
        if doctor is None:
            return result(Outcome.not_found)
        if data.name is not None:
            doctor.name = data.name
        if data.specialty is not None:
            doctor.specialty = data.specialty
        if data.phone is not None:
            doctor.phone = data.phone
        if data.available_times is not None:
            # asignar lista nueva para que SQLAlchemy detecte el cambio en JSON
            doctor.available_times = list(data.available_times)
        try:
            self.doctors.save(doctor)
        except SQLAlchemyError:
            logger.exception("No se pudo actualizar el doctor id=%s", doctor.id)
            return result(Outcome.persistence_failure)
        return result(Outcome.updated, doctor)

    def delete_doctor(self, doctor_id: int) -> OperationResult[None]:
        """Borra al doctor con todas sus citas; si algo falla no se borra nada."""
        try:
            doctor = self.doctors.find_by_id(doctor_id)
            if doctor is None:
                return result(Outcome.not_found)
            self.doctors.delete(doctor)
        except SQLAlchemyError:
            logger.exception("No se pudo borrar el doctor id=%s", doctor_id)
            return result(Outcome.persistence_failure)
        logger.info("Doctor borrado id=%s", doctor_id)
        return result(Outcome.deleted)

    def list_doctors(self) -> List[models.Doctor]:
        return self.doctors.list_all()

    def filter_doctors(
        self,
        name: Optional[str] = None,
        specialty: Optional[str] = None,
        period: Optional[str] = None,
    ) -> List[models.Doctor]:
        """
        Cualquier combinación de nombre (subcadena), especialidad (exacta, sin
        mayúsculas) y franja AM/PM. Sin filtros devuelve todos.
        """
        if not name and not specialty:
            doctors = self.doctors.list_all()
        else:
            doctors = self.doctors.search(name=name, specialty=specialty)
        return filter_by_period(doctors, period)
