# models/states.py

from enum import Enum, auto

class EpidemicState(Enum):
    S = auto()  # Susceptible
    I = auto()  # Infected
    R = auto()  # Recovered
    V = auto()  # Vaccinated

    @property
    def label(self):
        return _LABELS[self]

    @classmethod
    def from_code(cls, code):
        """
        Convierte un codigo entero (el .value del estado) en su EpidemicState.
        """
        return cls(int(code))


_LABELS = {
    EpidemicState.S: "Susceptible",
    EpidemicState.I: "Infected",
    EpidemicState.R: "Recovered",
    EpidemicState.V: "Vaccinated",
}
