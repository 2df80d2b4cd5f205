# models/individual.py

from models.states import EpidemicState

class Individual:
    """
    Una persona de la grilla. Solo guarda su estado epidemiologico.
    """
    __slots__ = ("state",)

    def __init__(self, state=EpidemicState.S):
        self.state = state

    def get_state(self):
        return self.state

    def set_state(self, state: EpidemicState):
        self.state = state

    def __repr__(self):
        return f"Individual({self.state.name})"
