# clinic_backend/services/patients.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .. import models, schemas
from .identity import IdentityResolver
from .outcomes import Outcome, OperationResult, result
from .stores import AppointmentStore, PatientStore

logger = logging.getLogger(__name__)

# "past" = ya atendidas, "future" = aún programadas
_CONDITION_STATUS = {
    "past": models.AppointmentStatus.fulfilled,
    "future": models.AppointmentStatus.scheduled,
}


class PatientRecords:
    def __init__(self, patients: PatientStore, appointments: AppointmentStore, identities: IdentityResolver):
        self.patients = patients
        self.appointments = appointments
        self.identities = identities

    def register(self, data: schemas.PatientIn) -> OperationResult[models.Patient]:
        # correo y teléfono son únicos por paciente
        if self.patients.find_by_email_or_phone(data.email, data.phone) is not None:
            return result(Outcome.conflict)
        patient = models.Patient(
            name=data.name,
            email=data.email.strip().lower(),
            phone=data.phone,
            address=data.address,
        )
        try:
            self.patients.save(patient)
        except SQLAlchemyError:
            logger.exception("No se pudo registrar el paciente email=%s", data.email)
            return result(Outcome.persistence_failure)
        return result(Outcome.created, patient)

    def details(self, credential: Optional[str]) -> OperationResult[models.Patient]:
        patient = self.identities.resolve_patient(credential)
        if patient is None:
            return result(Outcome.patient_not_found)
        return result(Outcome.ok, patient)

    def appointments_for(
        self,
        credential: Optional[str],
        condition: Optional[str] = None,
        doctor_name: Optional[str] = None,
    ) -> OperationResult[List[schemas.AppointmentSummary]]:
        patient = self.identities.resolve_patient(credential)
        if patient is None:
            return result(Outcome.patient_not_found)

        status = None
        if condition:
            status = _CONDITION_STATUS.get(condition.strip().lower())
            if status is None:
                return result(Outcome.invalid_filter)

        appts = self.appointments.find_by_patient_id(patient.id, status=status, doctor_name=doctor_name)
        return result(Outcome.ok, [schemas.AppointmentSummary.from_appointment(a) for a in appts])
