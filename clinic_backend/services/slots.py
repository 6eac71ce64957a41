# clinic_backend/services/slots.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

# Duración fija de la consulta: la cita ocupa [inicio, inicio + 1h)
CONSULTATION_LENGTH = timedelta(hours=1)

SLOT_TIME_FORMAT = "%H:%M"


@dataclass(frozen=True)
class Slot:
    start: time
    end: time

    @property
    def text(self) -> str:
        return f"{self.start.strftime(SLOT_TIME_FORMAT)}-{self.end.strftime(SLOT_TIME_FORMAT)}"


def _parse_clock(part: str) -> time:
    hour_str, minute_str = part.strip().split(":")
    hour, minute = int(hour_str), int(minute_str)
    # time() valida rangos (0-23 / 0-59) y lanza ValueError
    return time(hour, minute)


def parse_slot(text: Optional[str]) -> Optional[Slot]:
    """
    Convierte "HH:MM-HH:MM" en un Slot.
    Devuelve None si el texto está mal formado o si inicio >= fin; nunca lanza,
    así una plantilla corrupta no tumba el cálculo de disponibilidad completo.
    """
    if not text or not isinstance(text, str):
        return None
    parts = text.split("-")
    if len(parts) != 2:
        return None
    try:
        start = _parse_clock(parts[0])
        end = _parse_clock(parts[1])
    except ValueError:
        return None
    if start >= end:
        return None
    return Slot(start=start, end=end)


def format_slot(start: datetime, end: datetime) -> str:
    """Formato "HH:MM-HH:MM" (el mismo que entiende parse_slot)."""
    return f"{start.strftime(SLOT_TIME_FORMAT)}-{end.strftime(SLOT_TIME_FORMAT)}"


def booked_slot(appointment_time: datetime) -> str:
    """Texto del intervalo que ocupa una cita ya reservada."""
    return format_slot(appointment_time, appointment_time + CONSULTATION_LENGTH)


def normalize_slot(text: Optional[str]) -> Optional[str]:
    """Re-formatea una plantilla ("9:00-10:00" → "09:00-10:00"); None si es inválida."""
    slot = parse_slot(text)
    return slot.text if slot else None
