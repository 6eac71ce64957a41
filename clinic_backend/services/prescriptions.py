# clinic_backend/services/prescriptions.py
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from .. import models, schemas
from .identity import IdentityResolver
from .outcomes import Outcome, OperationResult, result
from .stores import AppointmentStore, PrescriptionStore

logger = logging.getLogger(__name__)


class PrescriptionService:
    def __init__(
        self,
        prescriptions: PrescriptionStore,
        appointments: AppointmentStore,
        identities: IdentityResolver,
    ):
        self.prescriptions = prescriptions
        self.appointments = appointments
        self.identities = identities

    def attach(self, credential: Optional[str], data: schemas.PrescriptionIn) -> OperationResult[models.Prescription]:
        """
        Guarda la receta de una cita del doctor autenticado y deja la cita
        como atendida (fulfilled). Receta y estado van en el mismo commit.
        """
        try:
            doctor = self.identities.resolve_doctor(credential)
            if doctor is None:
                return result(Outcome.doctor_not_found)
            appt = self.appointments.find_by_id(data.appointment_id)
            if appt is None:
                return result(Outcome.not_found)
            if appt.doctor_id != doctor.id:
                return result(Outcome.unauthorized)
            if self.prescriptions.find_by_appointment_id(appt.id) is not None:
                return result(Outcome.conflict)
        except SQLAlchemyError:
            logger.exception("No se pudo leer la cita id=%s para la receta", data.appointment_id)
            return result(Outcome.persistence_failure)

        prescription = models.Prescription(
            appointment_id=appt.id,
            patient_name=data.patient_name,
            medication=data.medication,
            dosage=data.dosage,
            doctor_notes=data.doctor_notes,
        )
        appt.status = models.AppointmentStatus.fulfilled
        try:
            self.prescriptions.save(prescription)
        except SQLAlchemyError:
            logger.exception("No se pudo guardar la receta de la cita id=%s", appt.id)
            return result(Outcome.persistence_failure)

        logger.info("Receta guardada cita id=%s doctor_id=%s", appt.id, doctor.id)
        return result(Outcome.created, prescription)

    def get(self, appointment_id: int) -> OperationResult[models.Prescription]:
        prescription = self.prescriptions.find_by_appointment_id(appointment_id)
        if prescription is None:
            return result(Outcome.not_found)
        return result(Outcome.ok, prescription)
