# clinic_backend/routers/deps.py
from __future__ import annotations
from datetime import date

from dateutil import parser as dtparser
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from ..config import settings
from ..database import SessionLocal
from ..services.availability import AvailabilityCalculator
from ..services.conflicts import ConflictValidator
from ..services.doctors import DoctorDirectory
from ..services.identity import IdentityResolver
from ..services.lifecycle import AppointmentLifecycle
from ..services.outcomes import Outcome, OperationResult
from ..services.patients import PatientRecords
from ..services.prescriptions import PrescriptionService
from ..services.stores import AppointmentStore, DoctorStore, PatientStore, PrescriptionStore


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class Services:
    """Arma los componentes de un request sobre la misma sesión."""

    def __init__(self, db: Session):
        self.doctor_store = DoctorStore(db)
        self.patient_store = PatientStore(db)
        self.appointment_store = AppointmentStore(db)
        self.prescription_store = PrescriptionStore(db)

        self.identities = IdentityResolver(self.doctor_store, self.patient_store)
        self.availability = AvailabilityCalculator(self.doctor_store, self.appointment_store)
        self.validator = ConflictValidator(self.doctor_store, self.availability)
        self.lifecycle = AppointmentLifecycle(
            self.appointment_store, self.patient_store, self.validator, self.identities
        )
        self.doctors = DoctorDirectory(self.doctor_store)
        self.patients = PatientRecords(self.patient_store, self.appointment_store, self.identities)
        self.prescriptions = PrescriptionService(
            self.prescription_store, self.appointment_store, self.identities
        )


def get_services(db: Session = Depends(get_db)) -> Services:
    return Services(db)


# ──────────────────────────────────────────────────────────────────────────────
# Outcome → HTTP
# ──────────────────────────────────────────────────────────────────────────────
_HTTP_ERRORS = {
    Outcome.not_found: (404, "Registro no encontrado"),
    Outcome.doctor_not_found: (404, "Doctor no encontrado"),
    Outcome.patient_not_found: (404, "Paciente no encontrado"),
    Outcome.unauthorized: (401, "Id inválido o no autorizado"),
    Outcome.slot_taken: (409, "Horario no disponible"),
    Outcome.conflict: (409, "El registro ya existe o no admite este cambio"),
    Outcome.invalid_filter: (400, "Filtro inválido"),
    Outcome.persistence_failure: (500, "Error interno al guardar"),
}


def raise_for_outcome(res: OperationResult, overrides: dict | None = None) -> OperationResult:
    if res.ok:
        return res
    mapping = dict(_HTTP_ERRORS)
    mapping.update(overrides or {})
    status_code, detail = mapping.get(res.outcome, (500, "Error interno"))
    raise HTTPException(status_code=status_code, detail=detail)


def require_admin(x_admin_token: str | None) -> None:
    expected = (settings.ADMIN_TOKEN or "").strip()
    provided = (x_admin_token or "").strip()
    if not expected:
        raise HTTPException(status_code=403, detail="ADMIN_TOKEN no configurado")
    if provided != expected:
        raise HTTPException(status_code=401, detail="Token inválido")


def parse_day(value: str) -> date:
    try:
        return dtparser.parse(value).date()
    except (ValueError, OverflowError):
        raise HTTPException(status_code=400, detail="Formato de fecha inválido. Usa YYYY-MM-DD.")
