"""Tests for icm_interventions.grid: intervention parameter grid."""

import pytest

from icm_interventions.grid import ParameterGrid
from icm_interventions.settings import DepartureRates, SimulationConfig


@pytest.fixture
def base() -> SimulationConfig:
    return SimulationConfig(population_size=500, initial_infected=5, recovery_rate=0.1,
                            arrival_rate=0.01, departure_rates=DepartureRates(0.01, 0.02, 0.01),
                            step_count=50, trial_count=3)


class TestParameterGrid:

    def test_default_order_exposure_outer(self, base):
        grid = ParameterGrid([1, 2], [0.1, 0.2, 0.3], base=base)
        assert grid.points() == [
            (1.0, 0.1), (1.0, 0.2), (1.0, 0.3),
            (2.0, 0.1), (2.0, 0.2), (2.0, 0.3),
        ]

    def test_probability_outer(self, base):
        grid = ParameterGrid([1, 2], [0.1, 0.2], base=base, outer="infection_probability")
        assert grid.points() == [(1.0, 0.1), (2.0, 0.1), (1.0, 0.2), (2.0, 0.2)]

    def test_reordered_has_same_points(self, base):
        grid = ParameterGrid([1, 2, 5], [0.1, 0.2], base=base)
        swapped = grid.reordered()
        assert swapped.outer == "infection_probability"
        assert set(grid.points()) == set(swapped.points())
        assert grid.points() != swapped.points()

    def test_len(self, base):
        assert len(ParameterGrid([1, 2, 3], [0.1, 0.2], base=base)) == 6

    def test_restartable(self, base):
        grid = ParameterGrid([1, 2], [0.1, 0.2], base=base)
        first = [(c.exposure_rate, c.infection_probability) for c in grid]
        second = [(c.exposure_rate, c.infection_probability) for c in grid]
        assert first == second == grid.points()

    def test_configs_keep_base_fields(self, base):
        for config in ParameterGrid([3], [0.4], base=base):
            assert config.exposure_rate == 3.0
            assert config.infection_probability == 0.4
            assert config.population_size == 500
            assert config.initial_infected == 5
            assert config.departure_rates == DepartureRates(0.01, 0.02, 0.01)
            assert config.step_count == 50
            assert config.trial_count == 3

    def test_base_not_mutated(self, base):
        list(ParameterGrid([3, 4], [0.4], base=base))
        assert base.exposure_rate == 10.0
        assert base.infection_probability == 0.05

    def test_empty_sets_raise(self, base):
        with pytest.raises(ValueError):
            ParameterGrid([], [0.1], base=base)
        with pytest.raises(ValueError):
            ParameterGrid([1], [], base=base)

    def test_unknown_outer_raises(self, base):
        with pytest.raises(ValueError):
            ParameterGrid([1], [0.1], base=base, outer="recovery_rate")

    def test_default_base(self):
        config = next(iter(ParameterGrid([2], [0.02])))
        assert config.population_size == 1000
        assert config.initial_infected == 3
