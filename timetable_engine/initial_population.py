# timetable_engine/initial_population.py
import random
from typing import List, Optional, Sequence

from .catalog import CourseIndex
from .domains import GroupDomain
from .model import Individual, SelectedSection


def random_selection(code: str, index: CourseIndex, rng=random) -> SelectedSection:
    course = index[code]
    section = rng.choice(course.sections)
    return SelectedSection(course_code=code, section_code=section.section_code)


def random_gene_for_group(dom: GroupDomain, index: CourseIndex, rng=random) -> Optional[SelectedSection]:
    # Curso uniforme entre los elegibles del grupo y sección uniforme del curso
    if dom.is_empty:
        return None
    return random_selection(rng.choice(dom.eligible_codes), index, rng)


def build_random_individual(
    domains: Sequence[GroupDomain],
    index: CourseIndex,
    selection_probability: float,
    rng=random,
) -> Individual:
    genome = []
    for dom in domains:
        if rng.random() < selection_probability:
            genome.append(random_gene_for_group(dom, index, rng))
        else:
            genome.append(None)
    return Individual(genome=genome)


def build_initial_population(
    domains: Sequence[GroupDomain],
    index: CourseIndex,
    pop_size: int,
    selection_probability: float = 0.55,
    rng=random,
) -> List[Individual]:
    return [build_random_individual(domains, index, selection_probability, rng) for _ in range(pop_size)]
