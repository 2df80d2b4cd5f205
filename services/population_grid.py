# services/population_grid.py

import logging
from typing import NamedTuple

import numpy as np
from scipy.ndimage import convolve

from models.errors import IndexOutOfBounds, InvalidSize
from models.individual import Individual
from models.states import EpidemicState
from utils.config import EpidemicParameters
from utils.logger import get_logger

S_CODE = EpidemicState.S.value
I_CODE = EpidemicState.I.value
R_CODE = EpidemicState.R.value
V_CODE = EpidemicState.V.value

# Vecindad de von Neumann: arriba, abajo, izquierda, derecha
NEIGHBOR_KERNEL = np.array([[0, 1, 0],
                            [1, 0, 1],
                            [0, 1, 0]], dtype=np.int16)


class StateCounts(NamedTuple):
    susceptible: int
    infected: int
    recovered: int
    vaccinated: int

    @classmethod
    def from_array(cls, codes):
        tally = np.bincount(codes.ravel(), minlength=V_CODE + 1)
        return cls(int(tally[S_CODE]), int(tally[I_CODE]),
                   int(tally[R_CODE]), int(tally[V_CODE]))

    @property
    def total(self):
        return sum(self)


def infected_neighbors(codes):
    """
    Numero de vecinos infectados (4-conexos) de cada celda.
    Fuera de la grilla no hay vecinos: sin wraparound.
    """
    infected = (codes == I_CODE).astype(np.int16)
    return convolve(infected, NEIGHBOR_KERNEL, mode='constant', cval=0)


def apply_transition_rule(previous, seeds, params: EpidemicParameters, t, allow_vaccination):
    """
    Aplica la cadena de Markov a toda la grilla.

    Todas las decisiones leen 'previous' (el estado al inicio del paso) y
    usan un unico 'seed' por celda; el resultado es una grilla nueva.
    """
    new = previous.copy()

    # S -> I con probabilidad k * r_i; en el resto de la linea, S -> V
    susceptible = previous == S_CODE
    p_inf = infected_neighbors(previous) * params.infection_rate
    new[susceptible & (seeds < p_inf)] = I_CODE
    if t >= params.vaccine_day and allow_vaccination:
        vaccinate = susceptible & (seeds >= p_inf) & (seeds < p_inf + params.vaccination_rate)
        new[vaccinate] = V_CODE

    # I -> R
    infected = previous == I_CODE
    new[infected & (seeds < params.recovery_rate)] = R_CODE

    # R -> S (mutacion); R -> V solo despues del dia de la vacuna (estricto)
    recovered = previous == R_CODE
    new[recovered & (seeds < params.mutation_rate)] = S_CODE
    if t > params.vaccine_day and allow_vaccination:
        vaccinate = (recovered & (seeds >= params.mutation_rate)
                     & (seeds < params.mutation_rate + params.vaccination_rate))
        new[vaccinate] = V_CODE

    # V es absorbente
    return new


class PopulationGrid:
    """
    Grilla n x n de individuos y el motor de transicion SIRV.

    Un solo generador aleatorio pertenece a la grilla durante toda la corrida,
    de modo que la misma semilla reproduce la misma secuencia de grillas.
    """
    def __init__(self, n, params: EpidemicParameters = None, seed=None, rng=None):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
            raise InvalidSize(f"El lado de la grilla debe ser un entero > 0, got {n!r}")
        self.n = int(n)
        self.params = params if params is not None else EpidemicParameters()
        self.params.validate()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.t = 0
        self.cells = [[Individual() for _ in range(self.n)] for _ in range(self.n)]
        self.logger = get_logger()
        self.logger.debug(f"Grilla {self.n}x{self.n} creada con parametros {self.params}.")

    def __repr__(self):
        return f"PopulationGrid(n={self.n}, t={self.t})"

    def size(self):
        return self.n

    def _check_bounds(self, i, j):
        if not (0 <= i < self.n and 0 <= j < self.n):
            raise IndexOutOfBounds(f"Celda ({i}, {j}) fuera de la grilla {self.n}x{self.n}.")

    def get_individual(self, i, j) -> Individual:
        self._check_bounds(i, j)
        return self.cells[i][j]

    def get_state(self, i, j) -> EpidemicState:
        return self.get_individual(i, j).get_state()

    def set_state(self, i, j, state: EpidemicState):
        self.get_individual(i, j).set_state(state)

    def seed_cells(self, coords, state=EpidemicState.I):
        """
        Marca cada celda (i, j) de 'coords' con 'state'. Se validan todas
        las coordenadas antes de modificar la grilla.
        """
        coords = list(coords)
        for i, j in coords:
            self._check_bounds(i, j)
        for i, j in coords:
            self.cells[i][j].set_state(state)
        self.logger.debug(f"Sembradas {len(coords)} celdas en estado {state.name}.")

    def seed_block(self, start, end, probability=1.0):
        """
        Infecta cada celda del bloque [start, end) x [start, end) con
        probabilidad 'probability', usando el generador de la grilla.
        """
        if not (0 <= start <= end <= self.n):
            raise IndexOutOfBounds(
                f"Bloque [{start}, {end}) fuera de la grilla {self.n}x{self.n}."
            )
        side = end - start
        draws = self.rng.random((side, side))
        hits = np.argwhere(draws < probability) + start
        self.seed_cells((int(i), int(j)) for i, j in hits)
        return len(hits)

    def state_array(self):
        """
        Copia (n, n) de los codigos de estado (EpidemicState.value).
        """
        return np.array([[ind.state.value for ind in row] for row in self.cells], dtype=np.int8)

    def count_states(self) -> StateCounts:
        return StateCounts.from_array(self.state_array())

    def neighbor_pressure(self, i, j):
        """
        Vecinos infectados de (i, j) en el estado actual.
        """
        self._check_bounds(i, j)
        return int(infected_neighbors(self.state_array())[i, j])

    def step(self):
        """
        Un paso de simulacion:
          1. Foto de la grilla actual (previous)
          2. Avanza el reloj
          3. Habilita o no la vacunacion segun la fraccion ya vacunada
          4. Un sorteo uniforme por celda, en orden fila por fila
          5. Escribe los nuevos estados en la grilla viva
        """
        previous = self.state_array()
        self.t += 1

        counts = StateCounts.from_array(previous)
        frac_vaccinated = counts.vaccinated / (self.n * self.n)
        allow_vaccination = frac_vaccinated < (1.0 - self.params.vaccine_hesitancy)

        seeds = self.rng.random((self.n, self.n))
        new = apply_transition_rule(previous, seeds, self.params, self.t, allow_vaccination)

        for i, j in np.argwhere(new != previous):
            self.cells[i][j].set_state(EpidemicState.from_code(new[i, j]))

        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                f"t={self.t}: "
                f"S->I={int(np.sum((previous == S_CODE) & (new == I_CODE)))}, "
                f"I->R={int(np.sum((previous == I_CODE) & (new == R_CODE)))}, "
                f"R->S={int(np.sum((previous == R_CODE) & (new == S_CODE)))}, "
                f"->V={int(np.sum((previous != V_CODE) & (new == V_CODE)))}, "
                f"vacunacion {'habilitada' if allow_vaccination else 'cerrada'}"
            )

    def run(self, steps, callback=None):
        """
        Ejecuta 'steps' pasos; callback(grid) se llama al final de cada uno.
        """
        for _ in range(steps):
            self.step()
            if callback is not None:
                callback(self)
