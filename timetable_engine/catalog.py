# timetable_engine/catalog.py
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .grouping import normalize_name
from .model import Course, Genome, ScheduleSection, Section

CourseIndex = Dict[str, Course]


def build_course_index(courses: Iterable[Course]) -> CourseIndex:
    """courseCode -> Course. Se reconstruye en cada llamada al solver."""
    return {c.course_code: c for c in courses}


def find_section(course: Course, section_code: str) -> Optional[Section]:
    for sec in course.sections:
        if sec.section_code == section_code:
            return sec
    return None


def to_schedule_section(course: Course, section: Section) -> ScheduleSection:
    return ScheduleSection(
        course_name=course.course_name,
        course_code=course.course_code,
        section_code=section.section_code,
        professor=section.professor,
        schedule=section.schedule,
    )


def resolve_course_names(courses: Sequence[Course], names: Iterable[str]) -> Tuple[List[Course], List[str]]:
    """
    Busca los nombres pedidos en el catálogo con la misma clave que la
    agrupación (minúsculas, sin espacios). Devuelve los cursos encontrados
    en orden del catálogo y los nombres que no corresponden a ningún curso.
    """
    keys = {normalize_name(c.course_name) for c in courses}
    wanted = set()
    unresolved: List[str] = []
    for name in names:
        key = normalize_name(name)
        if key in keys:
            wanted.add(key)
        elif name not in unresolved:
            unresolved.append(name)
    return [c for c in courses if normalize_name(c.course_name) in wanted], unresolved


def courses_by_name(courses: Sequence[Course], names: Iterable[str]) -> List[Course]:
    # Conserva el orden del catálogo, no el del pedido
    return resolve_course_names(courses, names)[0]


def genome_to_schedule(genome: Genome, index: CourseIndex) -> List[ScheduleSection]:
    schedule: List[ScheduleSection] = []
    for gene in genome:
        if gene is None:
            continue
        course = index.get(gene.course_code)
        if course is None:
            continue  # gen obsoleto: el curso ya no está en el catálogo
        section = find_section(course, gene.section_code)
        if section is None:
            continue
        schedule.append(to_schedule_section(course, section))
    return schedule


def genome_units(genome: Genome, index: CourseIndex) -> int:
    total = 0
    for gene in genome:
        if gene is None:
            continue
        course = index.get(gene.course_code)
        if course is not None and find_section(course, gene.section_code) is not None:
            total += course.units or 0
    return total
