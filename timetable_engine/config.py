"""
Configuración del algoritmo genético y del orquestador.

Incluye un cargador desde YAML para dejar los parámetros reproducibles;
los valores por defecto son los usados en operación (población 140,
120 generaciones).
"""
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

# Nombres camelCase aceptados en los parámetros de run_genetic
PARAM_ALIASES: Dict[str, str] = {
    "populationSize": "population_size",
    "generations": "generations",
    "crossoverRate": "crossover_rate",
    "mutationRate": "mutation_rate",
    "elitism": "elite_size",
    "tournamentSize": "tournament_size",
}


@dataclass
class GAConfig:
    # Algoritmo genético
    population_size: int = 140
    generations: int = 120
    crossover_rate: float = 0.85
    mutation_rate: float = 0.07
    elite_size: int = 4
    tournament_size: int = 3
    selection_probability: float = 0.55   # prob. de ocupar un gen al inicializar
    seed: Optional[int] = None
    log_every: int = 10

    # Penalizaciones del fitness
    conflict_penalty: int = 100_000
    unit_penalty: int = 5_000

    # Orquestador / presentación
    display_limit: int = 50
    scenario_limit: int = 10_000

    def __post_init__(self):
        if self.population_size < 1:
            raise ValueError("population_size debe ser al menos 1")
        if self.generations < 0:
            raise ValueError("generations no puede ser negativo")
        if self.tournament_size < 1:
            raise ValueError("tournament_size debe ser al menos 1")
        for name in ("crossover_rate", "mutation_rate", "selection_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} debe estar entre 0 y 1 (recibido {value})")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            k = PARAM_ALIASES.get(k, k)
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def with_overrides(self, params: Optional[Mapping[str, Any]]) -> "GAConfig":
        if not params:
            return self
        merged = asdict(self)
        for k, v in params.items():
            k = PARAM_ALIASES.get(k, k)
            if k in merged and v is not None:
                merged[k] = v
        return GAConfig(**merged)


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    if not cfg_path.exists():
        return GAConfig()
    data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} debe contener un objeto mapeo")
    return GAConfig.from_dict(data)
