import copy
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .catalog import build_course_index, genome_to_schedule
from .config import GAConfig
from .domains import build_group_domains
from .evaluation import evaluate
from .grouping import groups_from_course_groups
from .initial_population import build_initial_population
from .model import Course, CourseGroup, CoursePreference, Individual, Schedule, UserPreferences
from .operators import mutate, single_point_crossover, tournament_selection

logger = logging.getLogger(__name__)


@dataclass
class GAInput:
    course_groups: Sequence[CourseGroup]
    courses: Sequence[Course]
    preferences: Optional[Sequence[CoursePreference]] = None
    user_preferences: Optional[UserPreferences] = None
    min_units: float = 0
    max_units: float = float("inf")


@dataclass
class GAResult:
    best: Individual
    history: List[Dict[str, float]]
    population: List[Individual]
    course_groups: List[CourseGroup] = field(default_factory=list)

    def history_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.history, columns=["gen", "best", "avg"])


class GeneticSolver:
    def __init__(self, data: GAInput, cfg: GAConfig):
        self.data = data
        self.cfg = cfg
        self.rng = random.Random(cfg.seed)
        # El genoma tiene un gen por grupo activo; el scoring depende de esa alineación
        self.course_groups = groups_from_course_groups(data.course_groups)
        self.index = build_course_index(data.courses)
        self.domains = build_group_domains(self.course_groups, self.index)
        self.history: List[Dict[str, float]] = []

    def _evaluate(self, ind: Individual) -> None:
        evaluate(
            ind,
            self.index,
            self.cfg,
            course_groups=self.course_groups,
            preferences=self.data.preferences,
            user_preferences=self.data.user_preferences,
            min_units=self.data.min_units,
            max_units=self.data.max_units,
        )

    def initial_population(self) -> List[Individual]:
        return build_initial_population(
            self.domains,
            self.index,
            self.cfg.population_size,
            self.cfg.selection_probability,
            self.rng,
        )

    def evolve(self, population: Optional[List[Individual]] = None) -> GAResult:
        cfg = self.cfg
        if population is None:
            population = self.initial_population()
        for ind in population:
            self._evaluate(ind)

        for gen in range(cfg.generations):
            population.sort(key=lambda x: x.fitness, reverse=True)
            best = population[0].fitness
            avg = sum(ind.fitness for ind in population) / len(population)
            self.history.append({"gen": gen, "best": best, "avg": avg})

            if cfg.log_every and (gen % cfg.log_every == 0 or gen == cfg.generations - 1):
                logger.info("Gen %d: mejor=%.1f promedio=%.1f", gen, best, avg)

            new_pop: List[Individual] = []
            # Elitismo
            for i in range(min(cfg.elite_size, len(population))):
                new_pop.append(copy.deepcopy(population[i]))

            while len(new_pop) < cfg.population_size:
                p1 = tournament_selection(population, cfg.tournament_size, self.rng)
                p2 = tournament_selection(population, cfg.tournament_size, self.rng)
                c1, c2 = single_point_crossover(p1, p2, cfg.crossover_rate, self.rng)
                for child in (c1, c2):
                    mutate(child, self.domains, self.index, cfg.mutation_rate, self.rng)
                    self._evaluate(child)
                new_pop.append(c1)
                if len(new_pop) < cfg.population_size:
                    new_pop.append(c2)

            population = new_pop

        population.sort(key=lambda x: x.fitness, reverse=True)
        return GAResult(
            best=population[0],
            history=self.history,
            population=population,
            course_groups=self.course_groups,
        )


def run_genetic(data: GAInput, params: Optional[Mapping[str, Any]] = None, cfg: Optional[GAConfig] = None) -> GAResult:
    cfg = (cfg or GAConfig()).with_overrides(params)
    solver = GeneticSolver(data, cfg)
    logger.info(
        "AG: %d grupos activos, población %d, %d generaciones",
        len(solver.course_groups), cfg.population_size, cfg.generations,
    )
    return solver.evolve()


def rank_population(result: GAResult, courses: Sequence[Course], limit: int = 50) -> List[Schedule]:
    """
    Convierte la población final en horarios para mostrar: orden por
    fitness, sin duplicados (mismo conjunto curso_sección) y como máximo
    `limit` entradas. Los genomas vacíos se descartan.
    """
    index = build_course_index(courses)
    seen = set()
    ranked: List[Schedule] = []
    for ind in sorted(result.population, key=lambda x: x.fitness, reverse=True):
        sections = genome_to_schedule(ind.genome, index)
        if not sections:
            continue
        schedule = Schedule(sections=tuple(sections), score=ind.fitness, units=ind.units)
        if schedule.key in seen:
            continue
        seen.add(schedule.key)
        ranked.append(schedule)
        if len(ranked) >= limit:
            break
    return ranked
