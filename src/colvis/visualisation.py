# src/colvis/visualisation.py
"""
Visualisation tools and helpers.

This module holds tools to visualise visitor results: spectra, rolling measures and clusters.
"""
import pandas as pd
import numpy as np
from pathlib import Path
from collections.abc import Sequence

from matplotlib.figure import Figure
import matplotlib.pyplot as plt
import seaborn as sns

from colvis.specs.clusters import Cluster


# helpers ######################################################################

def _finish(fig: Figure, save: bool, out_dir: Path | None, out_name: str) -> Figure:
    fig.tight_layout()
    if save:
        if out_dir is not None:
            out_dir.mkdir(exist_ok=True, parents=True)
            fig.savefig(out_dir / out_name, dpi=150)
        else:
            raise ValueError("Cannot save figure as 'out_dir' is not specified.")
    return fig


# Spectra ######################################################################

def plot_spectrum(
    spectrum: np.ndarray,
    title: str | None = None,
    one_sided: bool = True,
    save: bool = False,
    out_dir: Path | None = None,
    out_name: str = "spectrum.png"
) -> Figure:
    """
    Magnitude per frequency bin of a (complex) FFT result.

    For real input the upper half mirrors the lower half; `one_sided` shows bins 0..n/2 only.
    """
    mag = np.abs(np.asarray(spectrum))
    if one_sided:
        mag = mag[: len(mag) // 2 + 1]

    sns.set_theme(context="talk", style="whitegrid")
    fig, ax = plt.subplots(figsize=(12, 5))
    ax.stem(np.arange(len(mag)), mag, basefmt=" ")
    ax.set_title(title or "Magnitude spectrum")
    ax.set_xlabel("Frequency bin")
    ax.set_ylabel("|X[k]|")
    return _finish(fig, save, out_dir, out_name)


# Rolling measures #############################################################

def plot_rolling(
    column: pd.Series,
    measures: pd.Series | Sequence[pd.Series],
    title: str | None = None,
    save: bool = False,
    out_dir: Path | None = None,
    out_name: str = "rolling.png"
) -> Figure:
    """
    Source column on top, rolling measure(s) (entropy, impurity, ...) below on a shared x-axis.
    """
    if isinstance(measures, pd.Series):
        measures = [measures]

    sns.set_theme(context="talk", style="whitegrid")
    fig, (ax_col, ax_m) = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    if pd.api.types.is_numeric_dtype(column):
        sns.lineplot(x=column.index, y=column.to_numpy(), ax=ax_col)
    else:
        codes, uniques = pd.factorize(column)
        ax_col.scatter(column.index, codes, s=8)
        ax_col.set_yticks(range(len(uniques)), [str(u) for u in uniques])
    ax_col.set_ylabel(str(column.name or "column"))

    for m in measures:
        ax_m.plot(m.index, m.to_numpy(), label=str(m.name))
    ax_m.set_ylabel("Rolling measure")
    ax_m.legend(loc="best")

    fig.suptitle(title or "Rolling measures")
    return _finish(fig, save, out_dir, out_name)


# Clusters #####################################################################

def plot_clusters(
    clusters: Sequence[Cluster],
    title: str | None = None,
    bins: int = 40,
    save: bool = False,
    out_dir: Path | None = None,
    out_name: str = "clusters.png"
) -> Figure:
    """
    Histogram of each cluster's members with its center marked.
    """
    sns.set_theme(context="talk", style="whitegrid")
    fig, ax = plt.subplots(figsize=(12, 5))
    palette = sns.color_palette(n_colors=max(len(clusters), 1))

    all_vals = [c.members.values() for c in clusters if c.size]
    edges = np.histogram_bin_edges(np.concatenate(all_vals), bins=bins) if all_vals else bins
    for c, color in zip(clusters, palette):
        if c.size:
            ax.hist(c.members.values(), bins=edges, alpha=0.6, color=color, label=f"cluster {c.label} (n={c.size})")
        ax.axvline(c.center, color=color, linestyle="--", linewidth=1.5)

    ax.set_title(title or "Clusters")
    ax.set_xlabel("Value")
    ax.set_ylabel("Count")
    if any(c.size for c in clusters):
        ax.legend(loc="best")
    return _finish(fig, save, out_dir, out_name)
