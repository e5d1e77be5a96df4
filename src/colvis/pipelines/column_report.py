# src/colvis/pipelines/column_report.py
"""
Run a batch of configured visitors over one frame and collect their results.
"""
import logging
import numpy as np
import pandas as pd
from pathlib import Path
from collections.abc import Sequence

from colvis.frame import visit_frame
from colvis.io import save_visitor_run
from colvis.protocol import Visitor
from colvis.specs.clusters import Cluster, ColumnView
from colvis.specs.regression_result import RegressionResult
from colvis.specs.visitor_spec import VisitorSpec
from colvis.statistics import StatsVisitor
from colvis.utils import build_run_meta
from colvis.visitors import AffinityPropVisitor, KMeansVisitor

RUNNER_NAME = "run_visitor_specs"
RUNNER_VERSION = "v0"


def _cluster_summary(clusters: Sequence[Cluster]) -> list[dict[str, object]]:
    return [{"label": int(c.label), "center": float(c.center), "size": int(c.size)} for c in clusters]

def _scalar(value: object) -> object:
    """numpy scalars -> python scalars, NaN -> None (JSON has no NaN)."""
    if isinstance(value, (np.floating, float)):
        return None if np.isnan(value) else float(value)
    if isinstance(value, np.integer):
        return int(value)
    return value

def normalize_result(
    visitor: Visitor,
    df: pd.DataFrame,
    columns: Sequence[str]
) -> tuple[str, object]:
    """
    Sort a finished visitor's result into ("frame", 1-D array aligned with df)
    or ("scalar", JSON-friendly object).

    Complex same-length results (spectra) are stored as magnitudes.
    """
    if isinstance(visitor, KMeansVisitor):
        return "scalar", {
            "centers": [_scalar(c) for c in visitor.get_result()],
            "iterations": visitor.get_iterations(),
            "inertia": _scalar(visitor.get_inertia_history()[-1]) if visitor.get_inertia_history() else None,
            "clusters": _cluster_summary(visitor.get_clusters()),
        }
    if isinstance(visitor, AffinityPropVisitor):
        clusters = visitor.get_clusters(df.index, df[columns[0]])
        return "scalar", {
            "exemplars": [_scalar(v) for v in visitor.get_result().values()],
            "clusters": _cluster_summary(clusters),
        }
    if isinstance(visitor, StatsVisitor):
        return "scalar", {
            "count": visitor.get_count(),
            "mean": _scalar(visitor.get_mean()),
            "std": _scalar(visitor.get_std()),
        }

    result = visitor.get_result()
    if isinstance(result, RegressionResult):
        return "scalar", {k: _scalar(v) for k, v in result.to_dict().items()}
    if isinstance(result, ColumnView):
        return "scalar", [_scalar(v) for v in result.values()]
    if isinstance(result, np.ndarray):
        if result.ndim == 1 and len(result) == len(df):
            return "frame", np.abs(result) if np.iscomplexobj(result) else result
        return "scalar", [_scalar(v) for v in result.tolist()]
    return "scalar", _scalar(result)

def run_visitor_specs(
    df: pd.DataFrame,
    specs: Sequence[VisitorSpec],
    *,
    save: bool = False,
    out_dir: Path | None = None
) -> tuple[pd.DataFrame, dict[str, object], dict[str, object]]:
    """
    Build and run every spec against `df`.

    Parameters
    ----------
    df : pandas.DataFrame
        Source frame; every spec's columns must exist in it.
    specs : sequence of VisitorSpec
        Visitor configurations. Keys must be unique; they name the outputs.
    save : bool, default=False
        If True, persist results under a timestamped run folder.
    out_dir : Path, optional
        Root directory where the run folder will be created.

    Returns
    -------
    (frame_results, scalar_results, meta)
        `frame_results`: one column per visitor whose result aligns with `df`.
        `scalar_results`: {key: summary} for every other visitor.
        `meta`: run metadata (with paths and run_id when saved).
    """
    keys = [s.key for s in specs]
    if len(set(keys)) != len(keys):
        raise ValueError(f"Visitor keys must be unique, got {keys}.")

    frame_results = pd.DataFrame(index=df.index)
    scalar_results: dict[str, object] = {}

    for spec in specs:
        logging.info(f"Running visitor '{spec.key}' ({spec.type}) on {spec.columns}")
        visitor = visit_frame(spec.build(), df, spec.columns)
        kind, value = normalize_result(visitor, df, spec.columns)
        if kind == "frame":
            frame_results[spec.key] = value
        else:
            scalar_results[spec.key] = value

    logging.info(
        f"Visitor run finished: {frame_results.shape[1]} column result(s), {len(scalar_results)} scalar result(s)"
    )

    run_meta = build_run_meta(
        df,
        visitors=[s.to_summary_dict() for s in specs],
        runner_name=RUNNER_NAME,
        runner_version=RUNNER_VERSION,
    )

    if save:
        run_dir, run_meta = save_visitor_run(
            run_meta=run_meta,
            frame_results=frame_results if frame_results.shape[1] else None,
            scalar_results=scalar_results if scalar_results else None,
            base_out_dir=out_dir,
        )
        logging.info(f"Saved visitor run to {run_dir}")

    return frame_results, scalar_results, run_meta
