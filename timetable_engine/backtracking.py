# timetable_engine/backtracking.py
import logging
from typing import List, Sequence

from .catalog import courses_by_name, to_schedule_section
from .model import Course, ScheduleSection, Section
from .timeslots import sections_conflict

logger = logging.getLogger(__name__)


def has_conflict(current: Sequence[ScheduleSection], section: Section) -> bool:
    for scheduled in current:
        if sections_conflict(scheduled.schedule, section.schedule):
            return True
    return False


def find_schedules(courses: Sequence[Course], desired_course_names: Sequence[str]) -> List[List[ScheduleSection]]:
    """
    Backtracking en profundidad: en el nivel i se prueba cada sección del
    curso i que no choque con lo ya colocado. Se registran todas las
    combinaciones completas válidas, no solo la primera.
    """
    desired = courses_by_name(courses, desired_course_names)
    results: List[List[ScheduleSection]] = []
    current: List[ScheduleSection] = []

    def backtrack(idx: int):
        if idx == len(desired):
            results.append(list(current))
            return
        course = desired[idx]
        for section in course.sections:
            if has_conflict(current, section):
                continue
            current.append(to_schedule_section(course, section))
            backtrack(idx + 1)
            current.pop()

    backtrack(0)
    logger.debug("Escenario %s: %d horarios válidos", list(desired_course_names), len(results))
    return results
