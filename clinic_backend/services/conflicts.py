# clinic_backend/services/conflicts.py
from __future__ import annotations
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from .availability import AvailabilityCalculator
from .outcomes import Outcome
from .slots import parse_slot
from .stores import DoctorStore

logger = logging.getLogger(__name__)


class ConflictValidator:
    """
    Decide si una hora pedida cae exactamente en el inicio de un slot libre.

    No es aritmética de solapes: la reserva tiene que empezar justo en la
    frontera de una plantilla (precisión de minuto).
    """

    def __init__(self, doctors: DoctorStore, availability: AvailabilityCalculator):
        self.doctors = doctors
        self.availability = availability

    def validate(self, doctor_id: int, appointment_time: datetime) -> Outcome:
        try:
            doctor = self.doctors.find_by_id(doctor_id)
        except SQLAlchemyError:
            logger.exception("No se pudo leer el doctor id=%s", doctor_id)
            return Outcome.persistence_failure
        if doctor is None:
            return Outcome.doctor_not_found

        free = self.availability.availability(doctor_id, appointment_time.date())
        if not free.ok:
            return free.outcome

        wanted = (appointment_time.hour, appointment_time.minute)
        for text in free.data or []:
            slot = parse_slot(text)
            if slot is None:
                continue
            if (slot.start.hour, slot.start.minute) == wanted:
                return Outcome.valid

        logger.info("Horario no disponible doctor_id=%s at=%s", doctor_id, appointment_time.isoformat())
        return Outcome.slot_taken
