# clinic_backend/services/outcomes.py
from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class Outcome(str, enum.Enum):
    # éxito
    ok = "ok"
    valid = "valid"
    booked = "booked"
    updated = "updated"
    cancelled = "cancelled"
    fulfilled = "fulfilled"
    created = "created"
    deleted = "deleted"
    # rechazos recuperables
    not_found = "not_found"
    doctor_not_found = "doctor_not_found"
    patient_not_found = "patient_not_found"
    unauthorized = "unauthorized"
    slot_taken = "slot_taken"
    conflict = "conflict"
    invalid_filter = "invalid_filter"
    # fallo de almacenamiento (ya registrado en logs)
    persistence_failure = "persistence_failure"


SUCCESS = frozenset({
    Outcome.ok,
    Outcome.valid,
    Outcome.booked,
    Outcome.updated,
    Outcome.cancelled,
    Outcome.fulfilled,
    Outcome.created,
    Outcome.deleted,
})


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    outcome: Outcome
    data: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.outcome in SUCCESS


def result(outcome: Outcome, data: Any = None) -> OperationResult:
    return OperationResult(outcome=outcome, data=data)
