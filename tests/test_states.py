"""Tests para models.states y models.individual."""

import pytest

from models.individual import Individual
from models.states import EpidemicState


class TestEpidemicState:
    def test_exactly_four_states(self):
        assert [st.name for st in EpidemicState] == ['S', 'I', 'R', 'V']

    def test_labels(self):
        assert EpidemicState.S.label == "Susceptible"
        assert EpidemicState.V.label == "Vaccinated"

    def test_from_code_round_trip(self):
        for st in EpidemicState:
            assert EpidemicState.from_code(st.value) is st

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError):
            EpidemicState.from_code(99)


class TestIndividual:
    def test_created_susceptible(self):
        assert Individual().get_state() is EpidemicState.S

    def test_set_state_overwrites(self):
        person = Individual()
        person.set_state(EpidemicState.I)
        assert person.get_state() is EpidemicState.I
        person.set_state(EpidemicState.S)
        assert person.get_state() is EpidemicState.S
