"""
Modelo de tiempo: días de la semana, horas "HH:MM" y prueba de solape.

Los intervalos son semiabiertos: una clase que termina a las 10:00 y otra
que empieza a las 10:00 el mismo día no chocan.
"""
import re
from typing import Dict, List, Sequence

import numpy as np

DAYS: List[str] = [
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
]
DAY_INDEX: Dict[str, int] = {d: i for i, d in enumerate(DAYS)}

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidTimeFormat(ValueError):
    """Hora que no respeta el formato HH:MM (00:00-23:59)."""


def to_minutes(value: str) -> int:
    m = _HHMM.match(str(value).strip())
    if not m:
        raise InvalidTimeFormat(f"Hora inválida {value!r}, se esperaba HH:MM")
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"Hora fuera de rango {value!r}")
    return hours * 60 + minutes


def overlaps(a, b) -> bool:
    if a.day != b.day:
        return False
    a_start, a_end = to_minutes(a.start), to_minutes(a.end)
    b_start, b_end = to_minutes(b.start), to_minutes(b.end)
    return a_start < b_end and a_end > b_start


def sections_conflict(slots_a: Sequence, slots_b: Sequence) -> bool:
    for sa in slots_a:
        for sb in slots_b:
            if overlaps(sa, sb):
                return True
    return False


def slot_key(slot) -> str:
    return f"{slot.day}-{slot.start}-{slot.end}"


def overlap_matrix(slots: Sequence) -> np.ndarray:
    """
    Matriz booleana NxN: [i, j] es True si los slots i y j se solapan.
    La diagonal queda en True para todo slot no vacío; quien la use para
    contar choques debe quedarse con el triángulo superior estricto.
    """
    n = len(slots)
    if n == 0:
        return np.zeros((0, 0), dtype=bool)
    days = np.array([s.day for s in slots])
    starts = np.array([to_minutes(s.start) for s in slots], dtype=int)
    ends = np.array([to_minutes(s.end) for s in slots], dtype=int)
    same_day = days[:, None] == days[None, :]
    hit = (starts[:, None] < ends[None, :]) & (ends[:, None] > starts[None, :])
    return same_day & hit
