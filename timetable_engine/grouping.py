"""
Agrupación de cursos equivalentes.

Un grupo reúne cursos alternativos (por ejemplo dos variantes de Cálculo)
de los que se toma como máximo uno. A partir de la selección del usuario se
generan "escenarios": listas planas de nombres de curso que el solver
exhaustivo resuelve una por una.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .model import CourseGroup

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


@dataclass(frozen=True)
class GroupDefinition:
    id: str
    name: str
    course_names: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupDefinition":
        names = data.get("courseNames", data.get("course_names", []))
        return cls(id=str(data["id"]), name=str(data.get("name", data["id"])), course_names=tuple(names))


@dataclass(frozen=True)
class GroupingConfig:
    groups: Tuple[GroupDefinition, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupingConfig":
        return cls(groups=tuple(GroupDefinition.from_dict(g) for g in data.get("groups", [])))


def normalize_name(name: str) -> str:
    return _WS.sub("", name).lower()


def build_group_index(config: GroupingConfig) -> Dict[str, str]:
    """Nombre normalizado -> id de grupo."""
    index: Dict[str, str] = {}
    for g in config.groups:
        for n in g.course_names:
            index[normalize_name(n)] = g.id
    return index


def dedupe_within_groups(selected: Sequence[str], config: Optional[GroupingConfig]) -> List[List[str]]:
    """
    Parte la selección en "cubetas": una por grupo con al menos un curso
    elegido (en orden de primera aparición) y una cubeta unitaria por cada
    curso sin grupo. De cada cubeta se toma un curso por escenario.
    """
    index = build_group_index(config) if config else {}
    grouped: Dict[str, List[str]] = {}
    singles: List[str] = []
    for name in selected:
        gid = index.get(normalize_name(name))
        if gid is None:
            singles.append(name)
            continue
        bucket = grouped.setdefault(gid, [])
        if name not in bucket:
            bucket.append(name)
    return list(grouped.values()) + [[s] for s in singles]


def expand_groups(buckets: Sequence[Sequence[str]]) -> List[List[str]]:
    """Producto cartesiano de las cubetas."""
    results: List[List[str]] = []
    current: List[str] = []

    def dfs(i: int):
        if i == len(buckets):
            results.append(list(current))
            return
        for option in buckets[i]:
            current.append(option)
            dfs(i + 1)
            current.pop()

    dfs(0)
    return results


def generate_selection_scenarios(selected: Sequence[str], config: Optional[GroupingConfig]) -> List[List[str]]:
    return expand_groups(dedupe_within_groups(selected, config))


def generate_optional_scenarios(
    buckets: Sequence[Sequence[str]],
    allow_skipping: bool,
    max_combinations: int,
) -> Tuple[List[List[str]], bool]:
    """
    Como expand_groups, pero con allow_skipping cada cubeta puede además
    omitirse por completo. La expansión se corta al llegar a
    max_combinations: más allá del tope el resultado no es exhaustivo.
    Devuelve (escenarios, truncado). El escenario vacío nunca se emite.
    """
    results: List[List[str]] = []
    current: List[str] = []
    truncated = False

    def pending(i: int) -> bool:
        # ¿Queda por emitir algún escenario no vacío desde la cubeta i?
        rest = buckets[i:]
        if not allow_skipping and not all(rest):
            return False
        return bool(current) or any(rest)

    def dfs(i: int) -> bool:
        nonlocal truncated
        if len(results) >= max_combinations:
            truncated = pending(i)
            return False
        if i == len(buckets):
            if current:
                results.append(list(current))
            return True
        for option in buckets[i]:
            current.append(option)
            keep_going = dfs(i + 1)
            current.pop()
            if not keep_going:
                return False
        if allow_skipping:
            return dfs(i + 1)
        return True

    if max_combinations > 0:
        dfs(0)
    else:
        truncated = pending(0)
    if truncated:
        logger.warning("Expansión de escenarios cortada en %d combinaciones", max_combinations)
    return results, truncated


def groups_from_course_groups(course_groups: Iterable[CourseGroup]) -> List[CourseGroup]:
    # Los grupos inactivos quedan fuera de la búsqueda
    return [g for g in course_groups if g.is_active]
