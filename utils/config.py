# utils/config.py

"""
Configuracion de la simulacion: tasas epidemiologicas y parametros de corrida.

Los valores por defecto reproducen el modelo original (grilla 100x100,
1000 pasos, vacuna disponible el dia 200). Un archivo YAML puede
sobrescribir cualquier subconjunto de campos:

    grid_size: 50
    max_steps: 300
    seed: 7
    params:
      infection_rate: 0.25
      vaccine_day: 100
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from models.errors import InvalidParameter


@dataclass
class EpidemicParameters:
    """Tasas por paso del modelo SIRV en grilla."""
    infection_rate: float = 0.20         # r_i, por vecino infectado
    recovery_rate: float = 1.0 / 20.0    # r_r, I -> R
    mutation_rate: float = 1.0 / 200.0   # r_m, R -> S (perdida de inmunidad)
    vaccination_rate: float = 1.0 / 1000.0  # r_v, vacunacion de fondo
    vaccine_hesitancy: float = 0.2       # r_vh, fraccion que nunca se vacuna
    vaccine_day: int = 200               # paso en que aparece la vacuna

    def validate(self) -> None:
        for name in ("infection_rate", "recovery_rate", "mutation_rate",
                     "vaccination_rate", "vaccine_hesitancy"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise InvalidParameter(f"{name} debe ser numerico, got {value!r}")
            if not (0.0 <= value <= 1.0):
                raise InvalidParameter(f"{name} debe estar en [0, 1], got {value}")
        if not isinstance(self.vaccine_day, int) or isinstance(self.vaccine_day, bool):
            raise InvalidParameter(f"vaccine_day debe ser entero, got {self.vaccine_day!r}")
        if self.vaccine_day < 0:
            raise InvalidParameter(f"vaccine_day debe ser >= 0, got {self.vaccine_day}")


@dataclass
class SimulationConfig:
    """Parametros de una corrida completa (grilla, siembra y salidas)."""
    grid_size: int = 100
    max_steps: int = 1000
    seed: Optional[int] = None
    # Bloque inicial de infectados [seed_start, seed_end)^2
    seed_start: int = 25
    seed_end: int = 75
    seed_probability: float = 0.75
    counts_csv: Optional[str] = "state_counts.csv"
    frames_dir: str = "frames"
    frame_interval: int = 0     # 0 => no se guardan cuadros
    log_interval: int = 50
    plot: bool = False
    params: EpidemicParameters = field(default_factory=EpidemicParameters)


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Mezcla recursiva de override sobre base (modifica base).
    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_dataclass(cls, data: Dict) -> Any:
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in valid_fields})


def config_from_dict(data: Dict) -> SimulationConfig:
    """Construye un SimulationConfig ignorando claves desconocidas."""
    data = dict(data)
    params = data.pop("params", None)
    config = _dict_to_dataclass(SimulationConfig, data)
    if isinstance(params, dict):
        config.params = _dict_to_dataclass(EpidemicParameters, params)
    return config


def validate_config(config: SimulationConfig) -> None:
    config.params.validate()

    if not isinstance(config.grid_size, int) or config.grid_size <= 0:
        raise InvalidParameter(f"grid_size debe ser un entero > 0, got {config.grid_size!r}")
    if config.max_steps < 0:
        raise InvalidParameter(f"max_steps debe ser >= 0, got {config.max_steps}")
    if config.seed is not None and config.seed < 0:
        raise InvalidParameter("seed debe ser no negativo")
    if not (0 <= config.seed_start <= config.seed_end <= config.grid_size):
        raise InvalidParameter(
            f"bloque inicial [{config.seed_start}, {config.seed_end}) "
            f"no cabe en una grilla de {config.grid_size}"
        )
    if not (0.0 <= config.seed_probability <= 1.0):
        raise InvalidParameter(
            f"seed_probability debe estar en [0, 1], got {config.seed_probability}"
        )
    if config.frame_interval < 0:
        raise InvalidParameter(f"frame_interval debe ser >= 0, got {config.frame_interval}")
    if config.log_interval <= 0:
        raise InvalidParameter(f"log_interval debe ser > 0, got {config.log_interval}")


def load_config(
    path: Union[str, Path],
    overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """
    Carga un YAML de configuracion, aplica overrides y valida.

    Raises:
        FileNotFoundError: si el archivo no existe.
        InvalidParameter: si la validacion falla.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config_dict = yaml.safe_load(f) or {}

    if overrides:
        deep_merge(config_dict, overrides)

    config = config_from_dict(config_dict)
    validate_config(config)
    return config


def default_config() -> SimulationConfig:
    config = SimulationConfig()
    validate_config(config)
    return config
