"""
===========================================================
sweep_figures.py
Last Updated: 2026-10-16
===========================================================
Visualization functions for intervention sweeps.

This module provides plotting utilities for comparing grid points of an
intervention sweep: faceted prevalence curves, overlaid incidence curves,
lever-by-lever heatmaps of summary statistics and per-trial spread.
"""
import math
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure

sns.set_style("whitegrid")

LEVERS = ["exposure_rate", "infection_probability"]

LABELS = {
    "exposure_rate": "Exposure rate (acts/day)",
    "infection_probability": "Infection probability",
    "susceptible": "Susceptible",
    "infected": "Infected (prevalence)",
    "recovered": "Recovered",
    "new_infections": "New infections (incidence)",
    "total_cases": "Total cases",
    "peak_prevalence": "Peak prevalence",
    "estimated_r0": "Estimated $R_0$",
}


def _label(column: str) -> str:
    return LABELS.get(column, column.replace("_", " ").capitalize())


def _scenario_label(exposure_rate: float, infection_probability: float) -> str:
    return f"acts={exposure_rate:g}, p={infection_probability:g}"


def _grid_points(timeseries: pd.DataFrame) -> List[Tuple[float, float]]:
    """Grid points in the order they first appear in the table"""
    pairs = zip(timeseries["exposure_rate"], timeseries["infection_probability"])
    return list(dict.fromkeys(pairs))


def _panel_order(timeseries: pd.DataFrame,
                 summary: Optional[pd.DataFrame],
                 order: Optional[str]) -> List[Tuple[float, float]]:
    points = _grid_points(timeseries)
    if order is None:
        return points
    if order not in ("ascending", "descending"):
        raise ValueError("order must be None, 'ascending' or 'descending'")

    if summary is not None:
        peaks = summary.set_index(LEVERS)["peak_prevalence"]
    else:
        peaks = timeseries.groupby(LEVERS)["infected"].max()
    # python's sort is stable, so ties keep grid order
    return sorted(points, key=lambda pt: peaks.loc[pt], reverse=(order == "descending"))


def _select(timeseries: pd.DataFrame, exposure_rate: float,
            infection_probability: float) -> pd.DataFrame:
    mask = ((timeseries["exposure_rate"] == exposure_rate) &
            (timeseries["infection_probability"] == infection_probability))
    return timeseries[mask]


def _finish(fig: Figure, save_path: Optional[str]) -> Figure:
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
    return fig


def plot_prevalence_facets(timeseries: pd.DataFrame,
                           summary: Optional[pd.DataFrame] = None,
                           value: str = "infected",
                           order: Optional[str] = None,
                           col_wrap: int = 3,
                           panel_size: Tuple[float, float] = (4.0, 3.0),
                           save_path: Optional[str] = None) -> Figure:
    """
    One panel per grid point showing a compartment over time.

    Parameters
    ----------
    timeseries : pd.DataFrame
        Sweep time series (exposure_rate, infection_probability, time_step, ...)
    summary : pd.DataFrame, optional
        Sweep summary; used for peak prevalence when ordering panels
    value : str
        Column to plot
    order : {None, 'ascending', 'descending'}
        Panel order by peak prevalence. None keeps grid order
    col_wrap : int
        Maximum number of panels per row
    panel_size : tuple
        (width, height) of each panel in inches
    save_path : str, optional
        Path to save the figure

    Returns
    -------
    fig : matplotlib.figure.Figure
    """
    if timeseries.empty:
        raise ValueError("timeseries is empty")
    points = _panel_order(timeseries, summary, order)
    n = len(points)
    ncols = min(col_wrap, n)
    nrows = math.ceil(n / ncols)

    fig, axes = plt.subplots(nrows, ncols,
                             figsize=(panel_size[0] * ncols, panel_size[1] * nrows),
                             sharex=True, sharey=True, squeeze=False)
    color = sns.color_palette()[3]
    for ax, (er, ip) in zip(axes.flat, points):
        sub = _select(timeseries, er, ip)
        ax.plot(sub["time_step"], sub[value], color=color, linewidth=2)
        ax.fill_between(sub["time_step"], sub[value], color=color, alpha=0.15)
        ax.set_title(_scenario_label(er, ip), fontsize=10)
    for ax in axes.flat[n:]:
        ax.set_visible(False)
    for ax in axes[-1, :]:
        ax.set_xlabel("Time (days)")
    for ax in axes[:, 0]:
        ax.set_ylabel(_label(value))

    fig.suptitle(f"{_label(value)} by intervention scenario", fontsize=13)
    return _finish(fig, save_path)


def plot_incidence_comparison(timeseries: pd.DataFrame,
                              value: str = "new_infections",
                              figsize: Tuple[float, float] = (12, 6),
                              save_path: Optional[str] = None) -> Figure:
    """Overlay one curve per grid point on shared axes"""
    points = _grid_points(timeseries)
    labels = [_scenario_label(er, ip) for er, ip in
              zip(timeseries["exposure_rate"], timeseries["infection_probability"])]
    data = timeseries.assign(scenario=labels)

    fig, ax = plt.subplots(figsize=figsize)
    sns.lineplot(data=data, x="time_step", y=value, hue="scenario",
                 hue_order=[_scenario_label(er, ip) for er, ip in points],
                 palette="viridis", linewidth=2, ax=ax)
    ax.set_xlabel("Time (days)", fontsize=12)
    ax.set_ylabel(_label(value), fontsize=12)
    ax.set_title(f"{_label(value)} across intervention scenarios", fontsize=14)
    ax.get_legend().set_title("Scenario")
    return _finish(fig, save_path)


def pivot_for_plot(df: pd.DataFrame, x: str, y: str, value: str) -> pd.DataFrame:
    """Pivot a summary table to a 2D grid: rows are y values, columns x values
    (both ascending)"""
    sub = df[[x, y, value]].drop_duplicates(subset=[x, y])
    return sub.pivot(index=y, columns=x, values=value).sort_index().sort_index(axis=1)


def plot_summary_heatmap(summary: pd.DataFrame,
                         value: str = "total_cases",
                         annot: bool = True,
                         figsize: Tuple[float, float] = (8, 6),
                         save_path: Optional[str] = None) -> Figure:
    """Heatmap of a summary statistic over the lever grid. Missing values
    (e.g. R0 for outbreaks that never grew) are left blank."""
    Z = pivot_for_plot(summary, x="exposure_rate", y="infection_probability", value=value)
    fmt = ".2f" if value == "estimated_r0" else ".0f"

    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(Z, annot=annot, fmt=fmt, cmap="rocket_r",
                cbar_kws={"label": _label(value)}, ax=ax)
    ax.invert_yaxis()
    ax.set_xlabel(_label("exposure_rate"), fontsize=12)
    ax.set_ylabel(_label("infection_probability"), fontsize=12)
    ax.set_title(_label(value), fontsize=14)
    return _finish(fig, save_path)


def plot_trial_spread(trials: pd.DataFrame,
                      value: str = "infected",
                      title: Optional[str] = None,
                      figsize: Tuple[float, float] = (10, 6),
                      save_path: Optional[str] = None) -> Figure:
    """Individual trials as thin lines with their mean on top"""
    fig, ax = plt.subplots(figsize=figsize)
    for _, trial in trials.groupby("trial"):
        ax.plot(trial["time_step"], trial[value], color="gray", alpha=0.3, linewidth=1)
    mean = trials.groupby("time_step")[value].mean()
    ax.plot(mean.index, mean.to_numpy(), color="red", linewidth=2.5, label="Mean of trials")

    ax.set_xlabel("Time (days)", fontsize=12)
    ax.set_ylabel(_label(value), fontsize=12)
    ax.set_title(title or f"{_label(value)}: {trials['trial'].nunique()} trials", fontsize=14)
    ax.legend(fontsize=11)
    ax.grid(True, alpha=0.3)
    return _finish(fig, save_path)
