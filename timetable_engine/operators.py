import copy
import random
from typing import List, Sequence, Tuple

from .catalog import CourseIndex
from .domains import GroupDomain
from .initial_population import random_gene_for_group, random_selection
from .model import Individual, SelectedSection

# Umbrales acumulados de los cuatro tipos de mutación
SWAP_SECTION = 0.25
SWAP_COURSE = 0.50
FILL_EMPTY = 0.75


def tournament_selection(population: Sequence[Individual], k: int = 3, rng=random) -> Individual:
    """Toma k individuos al azar (con reemplazo) y se queda con el de mayor fitness."""
    best = None
    for _ in range(k):
        cand = population[rng.randrange(len(population))]
        if best is None or cand.fitness > best.fitness:
            best = cand
    return best


def single_point_crossover(
    a: Individual,
    b: Individual,
    rate: float,
    rng=random,
) -> Tuple[Individual, Individual]:
    """
    Cruce en un punto: los hijos conservan la cabeza de un padre (genes
    0..punto) y la cola del otro. Por debajo de la tasa se clonan los padres.
    El gen i siempre proviene del gen i de algún padre, así que cada grupo
    sigue teniendo como máximo una selección.
    """
    if rng.random() > rate or not a.genome:
        return copy.deepcopy(a), copy.deepcopy(b)
    point = rng.randrange(len(a.genome))
    g1 = a.genome[: point + 1] + b.genome[point + 1:]
    g2 = b.genome[: point + 1] + a.genome[point + 1:]
    return Individual(genome=g1), Individual(genome=g2)


def mutate_gene(gene, dom: GroupDomain, index: CourseIndex, rng=random):
    """
    Aplica como máximo una de cuatro mutaciones según un sorteo uniforme:
      [0, .25)   ocupado -> otra sección del mismo curso
      [.25, .5)  ocupado -> otro curso del mismo grupo
      [.5, .75)  vacío   -> se llena con un curso y sección del grupo
      [.75, 1)   ocupado -> se vacía
    Si el estado del gen no corresponde al tramo sorteado no hay mutación.
    """
    op = rng.random()
    if op < SWAP_SECTION:
        if gene is None:
            return gene
        course = index.get(gene.course_code)
        if course is None:
            return gene
        others = [s for s in course.sections if s.section_code != gene.section_code]
        if not others:
            return gene
        return SelectedSection(course_code=course.course_code, section_code=rng.choice(others).section_code)
    if op < SWAP_COURSE:
        if gene is None:
            return gene
        alternatives = [c for c in dom.eligible_codes if c != gene.course_code]
        if not alternatives:
            return gene
        return random_selection(rng.choice(alternatives), index, rng)
    if op < FILL_EMPTY:
        if gene is not None:
            return gene
        return random_gene_for_group(dom, index, rng)
    return None


def mutate(
    ind: Individual,
    domains: Sequence[GroupDomain],
    index: CourseIndex,
    mutation_rate: float,
    rng=random,
) -> Individual:
    for i, dom in enumerate(domains):
        if dom.is_empty:
            continue
        if rng.random() < mutation_rate:
            ind.genome[i] = mutate_gene(ind.genome[i], dom, index, rng)
    return ind


def genome_respects_groups(genome: List, domains: Sequence[GroupDomain]) -> bool:
    """Cada gen ocupado pertenece a su grupo y la longitud coincide."""
    if len(genome) != len(domains):
        return False
    for gene, dom in zip(genome, domains):
        if gene is not None and gene.course_code not in dom.group.course_codes:
            return False
    return True
