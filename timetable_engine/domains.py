# timetable_engine/domains.py
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .catalog import CourseIndex
from .model import CourseGroup


@dataclass(frozen=True)
class GroupDomain:
    """Valores posibles de un gen: los cursos del grupo que tienen secciones."""
    group: CourseGroup
    eligible_codes: Tuple[str, ...]

    @property
    def is_empty(self) -> bool:
        return not self.eligible_codes


def build_group_domains(course_groups: Sequence[CourseGroup], index: CourseIndex) -> List[GroupDomain]:
    domains: List[GroupDomain] = []
    for group in course_groups:
        eligible = tuple(
            code for code in group.course_codes
            if code in index and index[code].sections
        )
        domains.append(GroupDomain(group=group, eligible_codes=eligible))
    return domains
