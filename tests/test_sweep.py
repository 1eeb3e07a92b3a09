"""Tests for icm_interventions.sweep: the intervention parameter sweep."""

import numpy as np
import pandas as pd
import pytest

from icm_interventions.aggregate import Estimated
from icm_interventions.grid import ParameterGrid
from icm_interventions.settings import SweepSettings
from icm_interventions.sweep import order_by_peak, point_seed, run_sweep, sweep_interventions


@pytest.fixture
def settings() -> SweepSettings:
    return SweepSettings(population_size=200, initial_infected=3, recovery_rate=0.1,
                         step_count=40, trial_count=3, seed=123)


@pytest.fixture(scope="module")
def example_sweep():
    """Narrative scenario: 1000 people, 3 infected, 10 acts/day, p=0.05."""
    settings = SweepSettings(population_size=1000, initial_infected=3, recovery_rate=0.05,
                             step_count=100, trial_count=10, seed=2020)
    return sweep_interventions([10], [0.05], settings)


class TestPointSeed:

    def test_deterministic(self):
        assert point_seed(1, 2.0, 0.1) == point_seed(1, 2.0, 0.1)

    def test_depends_on_levers(self):
        assert point_seed(1, 2.0, 0.1) != point_seed(1, 0.1, 2.0)

    def test_none_stays_none(self):
        assert point_seed(None, 2.0, 0.1) is None


class TestRunSweep:

    def test_tables(self, settings):
        grid = ParameterGrid([2, 6], [0.02, 0.1], base=settings.base_config())
        res = run_sweep(grid, settings)
        assert len(res.summaries) == 4
        assert len(res.summary) == 4
        assert len(res.timeseries) == 4 * settings.step_count
        assert list(res.timeseries.columns[:3]) == [
            "exposure_rate", "infection_probability", "time_step"]
        assert [(s.exposure_rate, s.infection_probability) for s in res.summaries] == grid.points()

    def test_peak_bounded_by_population(self, settings):
        res = sweep_interventions([2, 8], [0.05, 0.2], settings)
        assert (res.summary["peak_prevalence"] <= settings.population_size).all()

    def test_reordering_gives_same_rows(self, settings):
        grid = ParameterGrid([2, 6], [0.02, 0.1], base=settings.base_config())
        a = run_sweep(grid, settings)
        b = run_sweep(grid.reordered(), settings)
        pd.testing.assert_frame_equal(a.summary, b.summary)
        assert set(a.summaries) == set(b.summaries)

    def test_zero_initial_infected(self, settings):
        settings.initial_infected = 0
        res = sweep_interventions([5], [0.1, 0.3], settings)
        assert (res.summary["total_cases"] == 0).all()
        assert res.summary["estimated_r0"].isna().all()

    def test_invalid_lever_propagates(self, settings):
        with pytest.raises(ValueError):
            sweep_interventions([-1], [0.1], settings)


class TestExampleScenario:

    def test_rapid_growth_then_peak(self, example_sweep):
        ts = example_sweep.timeseries
        incidence = ts["new_infections"].to_numpy()
        assert incidence[1:10].sum() > 0
        summary = example_sweep.summaries[0]
        assert summary.total_cases > 500
        assert 5 <= summary.peak_time <= 50

    def test_r0_estimated_above_one(self, example_sweep):
        est = example_sweep.summaries[0].estimated_r0
        assert isinstance(est, Estimated)
        assert 1.0 < est.value < 10.0
        assert est.ci_lower <= est.value <= est.ci_upper


class TestOrderByPeak:

    def test_ascending_and_descending(self):
        summary = pd.DataFrame({
            "exposure_rate": [1.0, 2.0, 3.0],
            "infection_probability": [0.1, 0.1, 0.1],
            "peak_prevalence": [50, 10, 30],
        })
        assert list(order_by_peak(summary)["peak_prevalence"]) == [10, 30, 50]
        assert list(order_by_peak(summary, ascending=False)["peak_prevalence"]) == [50, 30, 10]
        assert np.array_equal(order_by_peak(summary).index, [0, 1, 2])
