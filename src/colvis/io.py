# src/colvis/io.py
"""
Input / Output utilities.

Sections
--------
1. Visitor runs
   - resolve_runs_output_dir
   - save_visitor_run
   - load_visitor_run
2. YAML configs
   - read_yaml
   - write_yaml

Design principles
-----------------
- save_*() functions create parent directories as needed.
- load_*() functions are read-only and never create paths.
- Paths are resolved relative to the project root (via utils.find_project_root)
  unless a custom base_out_dir is provided.
- File formats:
  * Column results → Parquet (.parquet)
  * Scalar results and metadata → JSON (.json)
  * Configs → YAML (.yaml)
"""
from pathlib import Path
import json
import yaml
import pandas as pd
from typing import Dict, Any, Tuple, Optional, Union

from colvis.utils import find_project_root, short_sha1_of_json, utc_now_iso


# visitor runs io
def resolve_runs_output_dir(
    params: Dict[str, Any],
    base_out_dir: Optional[Path] = None
) -> Path:
    """
    Build a deterministic path where a visitor run's artifacts live.
    Layout: outputs/visitor_runs/YYYYMMDD-HHMMSS_<shortsha>
    """
    root = base_out_dir or (find_project_root() / "outputs" / "visitor_runs")

    created_at = utc_now_iso()
    stamp = created_at.replace("-", "").replace(":", "").replace("Z", "").replace("T", "-")
    short_hash = short_sha1_of_json(params, length=8)
    return root / f"{stamp}_{short_hash}"

def save_visitor_run(
    *,
    run_meta: Dict[str, Any],
    frame_results: Optional[pd.DataFrame] = None,
    scalar_results: Optional[Dict[str, Any]] = None,
    base_out_dir: Optional[Path] = None,
) -> Tuple[Path, Dict[str, Any]]:
    """
    Persist the results of a visitor run and its metadata.

    Files written
    -------------
    - results.parquet   (same-length results, index = source frame index)   [if provided]
    - scalars.json      ({visitor_key: scalar / dict / list})               [if provided]
    - run_meta.json     (the provided/augmented metadata)

    Parameters
    ----------
    run_meta : dict
        Metadata from `utils.build_run_meta`; augmented with file paths and run_id.
    frame_results : DataFrame, optional
        One column per visitor whose result has the input column's length.
    scalar_results : dict, optional
        JSON-serializable results of every other visitor.
    base_out_dir : Path, optional
        Output root override; defaults to <project_root>/outputs/visitor_runs.

    Returns
    -------
    (run_dir, updated_meta) : (Path, dict)
    """
    run_dir = resolve_runs_output_dir(
        params={"config_hash": run_meta.get("config_hash")},
        base_out_dir=base_out_dir
    )
    run_dir.mkdir(parents=True, exist_ok=True)

    p_results = run_dir / "results.parquet" if frame_results is not None else None
    p_scalars = run_dir / "scalars.json" if scalar_results is not None else None
    p_meta = run_dir / "run_meta.json"

    if frame_results is not None:
        frame_results.to_parquet(p_results, index=True)
    if scalar_results is not None:
        p_scalars.write_text(json.dumps(scalar_results, indent=2, default=str))

    updated_meta = dict(run_meta)  # shallow copy
    updated_meta["paths"] = {
        "run_dir": str(run_dir),
        "results_parquet": str(p_results) if p_results else None,
        "scalars_json": str(p_scalars) if p_scalars else None,
        "meta_json": str(p_meta),
    }
    updated_meta["run_id"] = run_dir.name
    p_meta.write_text(json.dumps(updated_meta, indent=2, default=str))

    return run_dir, updated_meta

def load_visitor_run(run_dir: Union[str, Path]) -> Tuple[Optional[pd.DataFrame], Dict[str, Any], Dict[str, Any]]:
    """
    Read back (frame_results, scalar_results, run_meta) from a run directory.
    Missing optional files come back as None / {}.
    """
    run_dir = Path(run_dir)
    p_results = run_dir / "results.parquet"
    p_scalars = run_dir / "scalars.json"

    frame_results = pd.read_parquet(p_results) if p_results.exists() else None
    scalars = json.loads(p_scalars.read_text()) if p_scalars.exists() else {}
    meta = json.loads((run_dir / "run_meta.json").read_text())
    return frame_results, scalars, meta


# yaml io
def read_yaml(path: Union[str, Path]) -> Any:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)

def write_yaml(path: Union[str, Path], data: Any) -> None:
    p = Path(path)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
