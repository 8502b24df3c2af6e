# timetable_engine/conflicts.py
from dataclasses import asdict, dataclass, field
from itertools import combinations
from typing import List, Sequence

import pandas as pd

from .catalog import resolve_course_names
from .model import Course
from .timeslots import sections_conflict

MAX_SUGGESTIONS = 10


@dataclass(frozen=True)
class CourseConflict:
    course_a: str
    course_b: str
    sections_tested: int
    message: str


@dataclass(frozen=True)
class Suggestion:
    course_a: str
    section_a: str
    course_b: str
    section_b: str
    message: str


@dataclass
class ConflictReport:
    has_conflicts: bool
    conflicts: List[CourseConflict] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    courses_with_multiple_sections: List[str] = field(default_factory=list)
    missing_courses: List[str] = field(default_factory=list)
    courses_without_sections: List[str] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        rows = [dict(tipo="conflict", **asdict(c)) for c in self.conflicts]
        rows += [dict(tipo="suggestion", **asdict(s)) for s in self.suggestions]
        return pd.DataFrame(rows)


def analyze_conflicts(courses: Sequence[Course], desired_course_names: Sequence[str]) -> ConflictReport:
    """
    Explica por qué no hay horario válido: para cada par de cursos pedidos
    prueba todas las combinaciones de secciones. Si ninguna es compatible el
    par es un conflicto; si no, las combinaciones compatibles se ofrecen como
    sugerencias (hasta MAX_SUGGESTIONS en total).
    """
    desired, missing = resolve_course_names(courses, desired_course_names)
    report = ConflictReport(
        has_conflicts=False,
        missing_courses=missing,
        courses_without_sections=[c.course_name for c in desired if not c.sections],
        courses_with_multiple_sections=[c.course_name for c in desired if len(c.sections) > 1],
    )

    schedulable = [c for c in desired if c.sections]
    for a, b in combinations(schedulable, 2):
        compatible = []
        for sa in a.sections:
            for sb in b.sections:
                if not sections_conflict(sa.schedule, sb.schedule):
                    compatible.append((sa, sb))
        if not compatible:
            tested = len(a.sections) * len(b.sections)
            report.conflicts.append(CourseConflict(
                course_a=a.course_name,
                course_b=b.course_name,
                sections_tested=tested,
                message=f"Todas las secciones de {a.course_name} chocan con todas las de {b.course_name} "
                        f"({tested} combinaciones probadas)",
            ))
            continue
        for sa, sb in compatible:
            if len(report.suggestions) >= MAX_SUGGESTIONS:
                break
            report.suggestions.append(Suggestion(
                course_a=a.course_name,
                section_a=sa.section_code,
                course_b=b.course_name,
                section_b=sb.section_code,
                message=f"{a.course_name} sección {sa.section_code} es compatible con "
                        f"{b.course_name} sección {sb.section_code}",
            ))

    report.has_conflicts = bool(report.conflicts)
    return report
