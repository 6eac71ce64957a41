# clinic_backend/services/lifecycle.py
from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Dict, Iterator, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from .. import models
from ..schemas import AppointmentSummary
from .availability import day_window
from .conflicts import ConflictValidator
from .identity import IdentityResolver
from .outcomes import Outcome, OperationResult, result
from .stores import AppointmentStore, PatientStore

logger = logging.getLogger(__name__)


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class BookingLocks:
    """
    Un candado por (doctor, día). Validar y escribir ocurre con el candado
    tomado; sin esto dos requests verían el mismo slot libre y ambos
    guardarían la cita.

    Cada entrada lleva la cuenta de quién la usa y se borra al quedar libre,
    así el registro solo contiene los (doctor, día) en uso.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Tuple[int, date], _LockEntry] = {}

    def _acquire_entry(self, key: Tuple[int, date]) -> _LockEntry:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _LockEntry()
            entry.users += 1
            return entry

    def _release_entry(self, key: Tuple[int, date], entry: _LockEntry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, doctor_id: int, day: date) -> Iterator[None]:
        key = (doctor_id, day)
        entry = self._acquire_entry(key)
        try:
            with entry.lock:
                yield
        finally:
            self._release_entry(key, entry)


# Compartido por todos los requests del proceso
booking_locks = BookingLocks()


class AppointmentLifecycle:
    """
    Reserva, reprogramación, cancelación y cambio de estado de citas.

        (no existe) --book--> scheduled --receta--> fulfilled
        scheduled --cancel--> (no existe)

    Ninguna operación deja escapar excepciones de BD (lecturas o escrituras):
    se registran y se devuelven como `persistence_failure`.
    """

    def __init__(
        self,
        appointments: AppointmentStore,
        patients: PatientStore,
        validator: ConflictValidator,
        identities: IdentityResolver,
        locks: BookingLocks = booking_locks,
    ):
        self.appointments = appointments
        self.patients = patients
        self.validator = validator
        self.identities = identities
        self.locks = locks

    # ──────────────────────────────────────────────────────────────────────
    # Escrituras
    # ──────────────────────────────────────────────────────────────────────
    def book(self, doctor_id: int, patient_id: int, appointment_time: datetime) -> OperationResult[models.Appointment]:
        try:
            patient = self.patients.find_by_id(patient_id)
        except SQLAlchemyError:
            logger.exception("No se pudo leer el paciente id=%s", patient_id)
            return result(Outcome.persistence_failure)
        if patient is None:
            return result(Outcome.patient_not_found)

        with self.locks.hold(doctor_id, appointment_time.date()):
            verdict = self.validator.validate(doctor_id, appointment_time)
            if verdict is not Outcome.valid:
                return result(verdict)

            appt = models.Appointment(
                doctor_id=doctor_id,
                patient_id=patient_id,
                appointment_time=appointment_time,
                status=models.AppointmentStatus.scheduled,
            )
            try:
                self.appointments.save(appt)
            except SQLAlchemyError:
                logger.exception("No se pudo guardar la cita doctor_id=%s at=%s", doctor_id, appointment_time)
                return result(Outcome.persistence_failure)

        logger.info("Cita reservada id=%s doctor_id=%s patient_id=%s at=%s",
                    appt.id, doctor_id, patient_id, appointment_time.isoformat())
        return result(Outcome.booked, appt)

    def update(
        self,
        appointment_id: int,
        patient_id: int,
        doctor_id: int,
        appointment_time: datetime,
    ) -> OperationResult[models.Appointment]:
        """
        Reprograma una cita. Solo su dueño puede hacerlo, y la nueva hora se
        valida igual que una reserva nueva.
        """
        try:
            existing = self.appointments.find_by_id(appointment_id)
        except SQLAlchemyError:
            logger.exception("No se pudo leer la cita id=%s", appointment_id)
            return result(Outcome.persistence_failure)
        if existing is None:
            return result(Outcome.not_found)
        if existing.patient_id != patient_id:
            logger.info("Reprogramación rechazada: cita id=%s no pertenece a patient_id=%s", appointment_id, patient_id)
            return result(Outcome.unauthorized)
        if existing.status == models.AppointmentStatus.fulfilled:
            return result(Outcome.conflict)

        with self.locks.hold(doctor_id, appointment_time.date()):
            verdict = self.validator.validate(doctor_id, appointment_time)
            if verdict is not Outcome.valid:
                return result(verdict)

            existing.doctor_id = doctor_id
            existing.appointment_time = appointment_time
            try:
                self.appointments.save(existing)
            except SQLAlchemyError:
                logger.exception("No se pudo reprogramar la cita id=%s", appointment_id)
                return result(Outcome.persistence_failure)

        logger.info("Cita reprogramada id=%s doctor_id=%s at=%s", appointment_id, doctor_id, appointment_time.isoformat())
        return result(Outcome.updated, existing)

    def cancel(self, appointment_id: int, credential: Optional[str]) -> OperationResult[None]:
        """
        Borra la cita si la credencial corresponde a su paciente.
        Credencial inválida, cita inexistente o dueño distinto → unauthorized.
        """
        try:
            patient = self.identities.resolve_patient(credential)
            appt = self.appointments.find_by_id(appointment_id)
        except SQLAlchemyError:
            logger.exception("No se pudo leer la cita id=%s para cancelar", appointment_id)
            return result(Outcome.persistence_failure)
        if patient is None or appt is None or appt.patient_id != patient.id:
            return result(Outcome.unauthorized)
        if appt.status == models.AppointmentStatus.fulfilled:
            return result(Outcome.conflict)

        with self.locks.hold(appt.doctor_id, appt.appointment_date):
            try:
                self.appointments.delete(appt)
            except SQLAlchemyError:
                logger.exception("No se pudo cancelar la cita id=%s", appointment_id)
                return result(Outcome.persistence_failure)

        logger.info("Cita cancelada id=%s patient_id=%s", appointment_id, patient.id)
        return result(Outcome.cancelled)

    def mark_fulfilled(self, appointment_id: int) -> OperationResult[None]:
        """Idempotente: volver a marcar una cita atendida no cambia nada."""
        try:
            found = self.appointments.update_status(appointment_id, models.AppointmentStatus.fulfilled)
        except SQLAlchemyError:
            logger.exception("No se pudo marcar como atendida la cita id=%s", appointment_id)
            return result(Outcome.persistence_failure)
        return result(Outcome.fulfilled if found else Outcome.not_found)

    # ──────────────────────────────────────────────────────────────────────
    # Lecturas
    # ──────────────────────────────────────────────────────────────────────
    def list_for_doctor(
        self,
        credential: Optional[str],
        day: date,
        patient_name: Optional[str] = None,
    ) -> OperationResult[List[AppointmentSummary]]:
        start, end = day_window(day)
        try:
            doctor = self.identities.resolve_doctor(credential)
            if doctor is None:
                return result(Outcome.doctor_not_found)
            appts = self.appointments.find_by_doctor_and_time_range(doctor.id, start, end, patient_name=patient_name)
            summaries = [AppointmentSummary.from_appointment(a) for a in appts]
        except SQLAlchemyError:
            logger.exception("No se pudo listar la agenda del día %s", day)
            return result(Outcome.persistence_failure)
        return result(Outcome.ok, summaries)
