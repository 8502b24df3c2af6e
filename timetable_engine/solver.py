"""
Orquestador: agrupación -> solver exhaustivo -> puntuación -> ranking.

Si ningún escenario produce un horario válido se ejecuta el análisis de
conflictos. El módulo no guarda estado entre llamadas: el catálogo y las
preferencias llegan siempre como argumentos.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .backtracking import find_schedules
from .catalog import build_course_index, resolve_course_names
from .config import GAConfig
from .conflicts import ConflictReport, analyze_conflicts
from .ga import GAInput, GAResult, rank_population, run_genetic
from .grouping import GroupingConfig, dedupe_within_groups, generate_optional_scenarios
from .model import Course, CoursePreference, Schedule, UserPreferences
from .scoring import calculate_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchedulingOptions:
    min_units: float = 0
    max_units: float = float("inf")
    allow_skipping: bool = False
    scenario_limit: int = 10_000

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SchedulingOptions":
        def pick(camel, snake, default):
            value = data.get(camel, data.get(snake))
            return default if value in (None, "") else value

        return cls(
            min_units=float(pick("minUnits", "min_units", 0)),
            max_units=float(pick("maxUnits", "max_units", float("inf"))),
            allow_skipping=bool(pick("allowSkipping", "allow_skipping", False)),
            scenario_limit=int(pick("scenarioLimit", "scenario_limit", 10_000)),
        )


@dataclass
class RankedResult:
    schedules: List[Schedule]
    conflicts: Optional[ConflictReport]
    stats: Dict[str, Any]
    options: SchedulingOptions
    grouping: Optional[Dict[str, Any]] = None
    genetic: Optional[GAResult] = field(default=None, repr=False)


def get_ranked_schedules(
    courses: Sequence[Course],
    desired_course_names: Sequence[str],
    preferences: Optional[Sequence[CoursePreference]] = None,
    grouping_config: Optional[GroupingConfig] = None,
    options: Optional[SchedulingOptions] = None,
    user_preferences: Optional[UserPreferences] = None,
) -> RankedResult:
    options = options or SchedulingOptions()
    started = time.perf_counter()
    index = build_course_index(courses)
    _, missing = resolve_course_names(courses, desired_course_names)
    if missing:
        logger.warning("Cursos pedidos que no están en el catálogo: %s", ", ".join(missing))
    unresolved = set(missing)

    buckets = dedupe_within_groups(desired_course_names, grouping_config)
    scenarios, truncated = generate_optional_scenarios(
        buckets, options.allow_skipping, options.scenario_limit
    )
    logger.info("%d cursos pedidos -> %d escenarios%s", len(desired_course_names), len(scenarios),
                " (cortado)" if truncated else "")

    raw = 0
    out_of_range = 0
    seen = set()
    ranked: List[Schedule] = []
    for scenario in scenarios:
        # Un escenario con un curso inexistente no puede dar un horario completo
        if unresolved.intersection(scenario):
            continue
        for sections in find_schedules(courses, scenario):
            if not sections:
                continue
            raw += 1
            units = sum(index[s.course_code].units or 0 for s in sections)
            if units < options.min_units or units > options.max_units:
                out_of_range += 1
                continue
            schedule = Schedule(
                sections=tuple(sections),
                score=calculate_score(sections, preferences, user_preferences=user_preferences),
                units=units,
            )
            if schedule.key in seen:
                continue
            seen.add(schedule.key)
            ranked.append(schedule)

    ranked.sort(key=lambda s: s.score, reverse=True)

    conflicts = None
    if not ranked:
        logger.info("Sin horarios válidos, analizando conflictos")
        conflicts = analyze_conflicts(courses, desired_course_names)

    stats = {
        "scenarios": len(scenarios),
        "scenarios_truncated": truncated,
        "raw_combinations": raw,
        "out_of_unit_range": out_of_range,
        "missing_courses": missing,
        "unique_schedules": len(ranked),
        "elapsed_sec": time.perf_counter() - started,
    }
    grouping = None
    if grouping_config is not None:
        grouping = {"buckets": buckets, "scenario_count": len(scenarios)}
    return RankedResult(schedules=ranked, conflicts=conflicts, stats=stats, options=options, grouping=grouping)


def get_genetic_schedules(
    data: GAInput,
    params: Optional[Mapping[str, Any]] = None,
    cfg: Optional[GAConfig] = None,
) -> RankedResult:
    """
    Entrada por grupos para espacios grandes: corre el AG y arma la lista
    para mostrar (ranking por fitness, sin duplicados, tope display_limit).
    """
    cfg = (cfg or GAConfig()).with_overrides(params)
    started = time.perf_counter()
    result = run_genetic(data, cfg=cfg)
    schedules = rank_population(result, data.courses, cfg.display_limit)
    stats = {
        "generations": len(result.history),
        "population": len(result.population),
        "best_fitness": result.best.fitness,
        "unique_schedules": len(schedules),
        "elapsed_sec": time.perf_counter() - started,
    }
    options = SchedulingOptions(min_units=data.min_units, max_units=data.max_units)
    return RankedResult(schedules=schedules, conflicts=None, stats=stats, options=options, genetic=result)
