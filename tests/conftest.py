import matplotlib

matplotlib.use("Agg")

import pytest

from services.population_grid import PopulationGrid
from utils.config import EpidemicParameters


@pytest.fixture
def make_grid():
    """Grilla con tasas explicitas (todas en cero salvo las indicadas)."""
    def _make(n, seed=0, **rates):
        params = EpidemicParameters(
            infection_rate=rates.get("infection_rate", 0.0),
            recovery_rate=rates.get("recovery_rate", 0.0),
            mutation_rate=rates.get("mutation_rate", 0.0),
            vaccination_rate=rates.get("vaccination_rate", 0.0),
            vaccine_hesitancy=rates.get("vaccine_hesitancy", 0.0),
            vaccine_day=rates.get("vaccine_day", 0),
        )
        return PopulationGrid(n, params=params, seed=seed)
    return _make
