# clinic_backend/services/availability.py
from __future__ import annotations
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .outcomes import Outcome, OperationResult, result
from .slots import booked_slot, normalize_slot
from .stores import AppointmentStore, DoctorStore

logger = logging.getLogger(__name__)


def day_window(day: date) -> Tuple[datetime, datetime]:
    """Ventana semiabierta [día 00:00, día+1 00:00)."""
    start = datetime.combine(day, time(0, 0))
    return start, start + timedelta(days=1)


class AvailabilityCalculator:
    def __init__(self, doctors: DoctorStore, appointments: AppointmentStore):
        self.doctors = doctors
        self.appointments = appointments

    def availability(self, doctor_id: int, day: date) -> OperationResult[List[str]]:
        """
        Plantillas del doctor que siguen libres en `day`.

        Una plantilla se descarta solo si su texto normalizado es idéntico al
        intervalo [inicio, inicio+1h) de alguna cita del día. Una cita que se
        solapa parcialmente con la plantilla NO la quita.
        """
        start, end = day_window(day)
        try:
            doctor = self.doctors.find_by_id(doctor_id)
            if doctor is None:
                return result(Outcome.doctor_not_found)

            templates = self.doctors.available_times(doctor)
            booked = {
                booked_slot(appt.appointment_time)
                for appt in self.appointments.find_by_doctor_and_time_range(doctor.id, start, end)
            }
        except SQLAlchemyError:
            logger.exception("No se pudo leer la agenda doctor_id=%s day=%s", doctor_id, day)
            return result(Outcome.persistence_failure)

        free: List[str] = []
        for template in templates:
            normalized = normalize_slot(template)
            if normalized is None:
                logger.warning("Plantilla inválida ignorada doctor_id=%s slot=%r", doctor.id, template)
                continue
            if normalized in booked:
                continue
            free.append(template)

        logger.debug("Disponibilidad doctor_id=%s day=%s booked=%s free=%s", doctor.id, day, sorted(booked), free)
        return result(Outcome.ok, free)
