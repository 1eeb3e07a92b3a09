"""Tests for icm_interventions.utils.sweep_figures: sweep charts."""

import numpy as np
import pandas as pd
import pytest
from matplotlib.figure import Figure

from icm_interventions.utils.sweep_figures import (
    pivot_for_plot,
    plot_incidence_comparison,
    plot_prevalence_facets,
    plot_summary_heatmap,
    plot_trial_spread,
)


@pytest.fixture
def timeseries() -> pd.DataFrame:
    """Three synthetic grid points with different peak heights."""
    t = np.arange(1, 31)
    frames = []
    for er, ip, height in [(2.0, 0.1, 20.0), (5.0, 0.1, 80.0), (5.0, 0.3, 50.0)]:
        infected = height * np.exp(-((t - 12) / 5.0) ** 2)
        frames.append(pd.DataFrame({
            "exposure_rate": er,
            "infection_probability": ip,
            "time_step": t,
            "infected": infected,
            "new_infections": np.gradient(infected).clip(min=0),
        }))
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def summary() -> pd.DataFrame:
    return pd.DataFrame({
        "exposure_rate": [2.0, 5.0, 5.0, 2.0],
        "infection_probability": [0.1, 0.1, 0.3, 0.3],
        "total_cases": [30, 150, 100, 60],
        "peak_prevalence": [20, 80, 50, 35],
        "estimated_r0": [1.2, np.nan, 2.8, 1.9],
    })


class TestFacets:

    def test_returns_figure_with_one_panel_per_point(self, timeseries):
        fig = plot_prevalence_facets(timeseries, col_wrap=2)
        assert isinstance(fig, Figure)
        visible = [ax for ax in fig.axes if ax.get_visible()]
        assert len(visible) == 3

    def test_descending_order_by_peak(self, timeseries):
        fig = plot_prevalence_facets(timeseries, order="descending", col_wrap=3)
        titles = [ax.get_title() for ax in fig.axes if ax.get_visible()]
        assert titles == ["acts=5, p=0.1", "acts=5, p=0.3", "acts=2, p=0.1"]

    def test_ascending_order_uses_summary(self, timeseries, summary):
        fig = plot_prevalence_facets(timeseries, summary=summary, order="ascending")
        titles = [ax.get_title() for ax in fig.axes if ax.get_visible()]
        assert titles == ["acts=2, p=0.1", "acts=5, p=0.3", "acts=5, p=0.1"]

    def test_bad_order_raises(self, timeseries):
        with pytest.raises(ValueError):
            plot_prevalence_facets(timeseries, order="random")

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            plot_prevalence_facets(pd.DataFrame(columns=["exposure_rate", "infection_probability"]))

    def test_save(self, timeseries, tmp_path):
        path = tmp_path / "facets.png"
        plot_prevalence_facets(timeseries, save_path=str(path))
        assert path.exists()


class TestOtherCharts:

    def test_incidence_comparison(self, timeseries):
        fig = plot_incidence_comparison(timeseries)
        labels = [t.get_text() for t in fig.axes[0].get_legend().get_texts()]
        assert labels == ["acts=2, p=0.1", "acts=5, p=0.1", "acts=5, p=0.3"]

    def test_pivot_for_plot(self, summary):
        Z = pivot_for_plot(summary, x="exposure_rate", y="infection_probability",
                           value="total_cases")
        assert list(Z.index) == [0.1, 0.3]
        assert list(Z.columns) == [2.0, 5.0]
        assert Z.loc[0.3, 5.0] == 100

    def test_heatmap_handles_missing_r0(self, summary):
        fig = plot_summary_heatmap(summary, value="estimated_r0")
        assert isinstance(fig, Figure)

    def test_trial_spread(self):
        t = np.arange(1, 11)
        trials = pd.concat([
            pd.DataFrame({"trial": k, "time_step": t, "infected": t * k})
            for k in (1, 2, 3)
        ], ignore_index=True)
        fig = plot_trial_spread(trials)
        ax = fig.axes[0]
        assert len(ax.get_lines()) == 4
        np.testing.assert_allclose(ax.get_lines()[-1].get_ydata(), t * 2)
