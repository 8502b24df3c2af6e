"""
Función de puntuación compartida por el solver exhaustivo y el genético.

Todos los componentes son aditivos e independientes; el total es la suma
de los términos de ScoreBreakdown.

Pesos de usuario (PreferenceWeights, 0..100): cada peso escala linealmente
su término con factor peso/50, de modo que 50 deja el término intacto.
  - professor   -> calificaciones de profesor y bonus de profesor preferido
  - time_slot   -> calificaciones de slots horarios
  - free_day    -> bonus por día libre
  - compactness -> penalización por horas muertas entre clases del mismo día
Sin UserPreferences los factores valen 1 y la compacidad no se evalúa.
"""
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

from .model import CourseGroup, CoursePreference, Genome, ScheduleSection, UserPreferences
from .timeslots import DAYS, slot_key, to_minutes

PRIORITY_WEIGHT = 60
PROFESSOR_WEIGHT = 25
TIMESLOT_WEIGHT = 8
ATTENDANCE_BONUS = 40
EARLY_CLASS_BONUS = 10
LATE_CLASS_PENALTY = 30
FREE_DAY_BONUS = 60
PREFERRED_PROFESSOR_BONUS = (5 - 3) * PROFESSOR_WEIGHT
IDLE_HOUR_PENALTY = 10

EARLY_LIMIT = to_minutes("10:00")
LATE_LIMIT = to_minutes("13:00")
NEUTRAL_RATING = 3
NEUTRAL_WEIGHT = 50.0

GROUP_PRIORITY_BONUS: Dict[str, int] = {"High": 100, "Medium": 50, "Low": 20}


@dataclass(frozen=True)
class ScoreBreakdown:
    priority: float = 0.0
    group_priority: float = 0.0
    professors: float = 0.0
    time_slots: float = 0.0
    free_days: float = 0.0
    compactness: float = 0.0
    attendance: float = 0.0
    time_of_day: float = 0.0

    @property
    def total(self) -> float:
        return sum(asdict(self).values())


def _factor(user_preferences: Optional[UserPreferences], name: str) -> float:
    if user_preferences is None:
        return 1.0
    return getattr(user_preferences.weights, name) / NEUTRAL_WEIGHT


def idle_minutes(sections: Sequence[ScheduleSection]) -> int:
    """Minutos muertos entre clases consecutivas de un mismo día."""
    by_day: Dict[str, List[tuple]] = {}
    for sec in sections:
        for slot in sec.schedule:
            by_day.setdefault(slot.day, []).append((to_minutes(slot.start), to_minutes(slot.end)))
    total = 0
    for intervals in by_day.values():
        intervals.sort()
        reach = intervals[0][1]
        for start, end in intervals[1:]:
            if start > reach:
                total += start - reach
            reach = max(reach, end)
    return total


def calculate_score_breakdown(
    sections: Sequence[ScheduleSection],
    preferences: Optional[Sequence[CoursePreference]] = None,
    genome: Optional[Genome] = None,
    course_groups: Optional[Sequence[CourseGroup]] = None,
    user_preferences: Optional[UserPreferences] = None,
) -> ScoreBreakdown:
    pref_map = {p.course_code: p for p in preferences or []}
    max_priority = max((p.priority for p in preferences or []), default=0)
    preferred = user_preferences.preferred_professors if user_preferences else frozenset()
    slot_scores = user_preferences.time_slot_scores if user_preferences else {}

    priority = professors = time_slots = attendance = time_of_day = 0.0
    day_load = {d: 0 for d in DAYS}

    for sec in sections:
        pref = pref_map.get(sec.course_code)
        if pref is not None:
            priority += (max_priority + 1 - pref.priority) * PRIORITY_WEIGHT
            r = pref.professor_ratings.get(sec.professor.name)
            if r:
                professors += (r - NEUTRAL_RATING) * PROFESSOR_WEIGHT
        if sec.professor.name in preferred:
            professors += PREFERRED_PROFESSOR_BONUS
        if not sec.professor.takes_attendance:
            attendance += ATTENDANCE_BONUS

        for slot in sec.schedule:
            if to_minutes(slot.start) < EARLY_LIMIT:
                time_of_day += EARLY_CLASS_BONUS
            if to_minutes(slot.end) > LATE_LIMIT:
                time_of_day -= LATE_CLASS_PENALTY
            if slot.day in day_load:
                day_load[slot.day] += 1
            key = slot_key(slot)
            if pref is not None:
                tr = pref.time_slot_ratings.get(key)
                if tr:
                    time_slots += (tr - NEUTRAL_RATING) * TIMESLOT_WEIGHT
            us = slot_scores.get(key)
            if us:
                time_slots += (us - NEUTRAL_RATING) * TIMESLOT_WEIGHT

    free_days = sum(1 for n in day_load.values() if n == 0) * FREE_DAY_BONUS

    compactness = 0.0
    if user_preferences is not None and sections:
        compactness = -(idle_minutes(sections) / 60.0) * IDLE_HOUR_PENALTY

    group_priority = 0.0
    # Si genoma y grupos no están alineados se omite el bonus sin error
    if genome is not None and course_groups is not None and len(genome) == len(course_groups):
        for gene, group in zip(genome, course_groups):
            if gene is not None:
                group_priority += GROUP_PRIORITY_BONUS.get(group.priority, 0)

    return ScoreBreakdown(
        priority=priority,
        group_priority=group_priority,
        professors=professors * _factor(user_preferences, "professor"),
        time_slots=time_slots * _factor(user_preferences, "time_slot"),
        free_days=free_days * _factor(user_preferences, "free_day"),
        compactness=compactness * _factor(user_preferences, "compactness"),
        attendance=attendance,
        time_of_day=time_of_day,
    )


def calculate_score(
    sections: Sequence[ScheduleSection],
    preferences: Optional[Sequence[CoursePreference]] = None,
    genome: Optional[Genome] = None,
    course_groups: Optional[Sequence[CourseGroup]] = None,
    user_preferences: Optional[UserPreferences] = None,
) -> float:
    return calculate_score_breakdown(sections, preferences, genome, course_groups, user_preferences).total
