# timetable_engine/evaluation.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .catalog import CourseIndex, genome_to_schedule, genome_units
from .config import GAConfig
from .model import CourseGroup, CoursePreference, Individual, ScheduleSection, UserPreferences
from .scoring import calculate_score
from .timeslots import overlap_matrix


@dataclass
class EvaluationResult:
    score: float
    conflict_penalty: float
    unit_penalty: float
    units: int
    conflicts: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def fitness(self) -> float:
        return self.score - self.conflict_penalty - self.unit_penalty


def conflicting_pairs(schedule: Sequence[ScheduleSection]) -> List[Tuple[int, int]]:
    """
    Pares (i, j) de índices de sección, uno por cada par de slots que se
    solapan entre dos secciones distintas. Un mismo par de secciones
    aparece tantas veces como choques tenga.
    """
    slots = []
    owners = []
    for i, sec in enumerate(schedule):
        for slot in sec.schedule:
            slots.append(slot)
            owners.append(i)
    if len(slots) < 2:
        return []
    owner = np.array(owners)
    clash = overlap_matrix(slots) & (owner[:, None] != owner[None, :])
    rows, cols = np.nonzero(np.triu(clash, k=1))
    return [(int(owner[r]), int(owner[c])) for r, c in zip(rows, cols)]


def conflict_penalty(schedule: Sequence[ScheduleSection], penalty: float = 100_000) -> float:
    return len(conflicting_pairs(schedule)) * penalty


def unit_bounds_penalty(units: int, min_units: float, max_units: float, per_unit: float = 5_000) -> float:
    if units < min_units:
        return (min_units - units) * per_unit
    if units > max_units:
        return (units - max_units) * per_unit
    return 0.0


def evaluate(
    ind: Individual,
    index: CourseIndex,
    cfg: GAConfig,
    course_groups: Optional[Sequence[CourseGroup]] = None,
    preferences: Optional[Sequence[CoursePreference]] = None,
    user_preferences: Optional[UserPreferences] = None,
    min_units: float = 0,
    max_units: float = float("inf"),
) -> EvaluationResult:
    schedule = genome_to_schedule(ind.genome, index)
    units = genome_units(ind.genome, index)
    pairs = conflicting_pairs(schedule)

    score = calculate_score(schedule, preferences, ind.genome, course_groups, user_preferences)
    result = EvaluationResult(
        score=score,
        conflict_penalty=len(pairs) * cfg.conflict_penalty,
        unit_penalty=unit_bounds_penalty(units, min_units, max_units, cfg.unit_penalty),
        units=units,
        conflicts=[(schedule[i].key, schedule[j].key) for i, j in pairs],
    )
    ind.fitness = result.fitness
    ind.units = units
    return result
