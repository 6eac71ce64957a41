# clinic_backend/services/time_filter.py
from __future__ import annotations
from typing import Callable, Iterable, List, Optional, TypeVar

from .slots import parse_slot

T = TypeVar("T")

_PERIODS = {
    "am": lambda hour: hour < 12,
    "pm": lambda hour: hour >= 12,
}


def _default_slots_of(item) -> Iterable[str]:
    # Doctores (available_times) o directamente listas de slots
    if hasattr(item, "available_times"):
        return item.available_times or []
    return item or []


def _period_test(period: Optional[str]) -> Optional[Callable[[int], bool]]:
    if period is None:
        return None
    return _PERIODS.get(period.strip().lower())


def has_slot_in_period(slots: Iterable[str], period: Optional[str]) -> bool:
    """
    True si algún slot empieza antes de las 12 ("am") o a partir de las 12 ("pm").
    Selector vacío o desconocido → True (no filtra).
    """
    in_period = _period_test(period)
    if in_period is None:
        return True
    for text in slots:
        slot = parse_slot(text)
        if slot is None:
            continue
        if in_period(slot.start.hour):
            return True
    return False


def filter_by_period(
    items: Iterable[T],
    period: Optional[str],
    slots_of: Callable[[T], Iterable[str]] = _default_slots_of,
) -> List[T]:
    if _period_test(period) is None:
        return list(items)
    return [item for item in items if has_slot_in_period(slots_of(item), period)]
