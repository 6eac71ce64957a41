# clinic_backend/services/identity.py
from __future__ import annotations
import logging
from typing import Callable, Optional

from .. import models
from .stores import DoctorStore, PatientStore

logger = logging.getLogger(__name__)


def email_from_credential(credential: Optional[str]) -> str:
    """
    Extractor por defecto: la credencial ES el correo de la cuenta.
    La verificación de tokens vive fuera de este servicio; para usarla basta
    con pasar otro extractor al IdentityResolver.
    """
    email = (credential or "").strip().lower()
    if not email or "@" not in email:
        raise ValueError("Credencial vacía o sin correo")
    return email


class IdentityResolver:
    def __init__(
        self,
        doctors: DoctorStore,
        patients: PatientStore,
        extract_email: Callable[[Optional[str]], str] = email_from_credential,
    ):
        self.doctors = doctors
        self.patients = patients
        self.extract_email = extract_email

    def _email(self, credential: Optional[str]) -> Optional[str]:
        try:
            return self.extract_email(credential)
        except ValueError as e:
            logger.info("Credencial rechazada: %s", e)
            return None

    def resolve_doctor(self, credential: Optional[str]) -> Optional[models.Doctor]:
        email = self._email(credential)
        return self.doctors.find_by_email(email) if email else None

    def resolve_patient(self, credential: Optional[str]) -> Optional[models.Patient]:
        email = self._email(credential)
        return self.patients.find_by_email(email) if email else None
