# src/colvis/utils.py
import pandas as pd
import numpy as np
import hashlib
from pathlib import Path
from datetime import datetime, UTC
import os
import json
import inspect
import logging
from collections.abc import Sequence, Callable

from colvis.exceptions import LengthMismatchError, VisitorConfigError

PROJECT_SENTINELS = ("pyproject.toml", ".git")


# ---------------- Validators ----------------

def validate_same_length(
    *seqs: Sequence,
    names: Sequence[str] | None = None
) -> int:
    """
    Raise LengthMismatchError if the given sequences do not all share one length.
    Returns the common length.
    """
    lengths = [len(s) for s in seqs]
    if len(set(lengths)) > 1:
        labels = names if names is not None else [f"seq{i}" for i in range(len(seqs))]
        detail = ", ".join(f"{n}={L}" for n, L in zip(labels, lengths))
        raise LengthMismatchError(f"Paired sequences must have equal length ({detail}).")
    return lengths[0] if lengths else 0

def validate_columns_exist(
    df: pd.DataFrame,
    cols: str | Sequence[str]
) -> None:
    """
    Raise ValueError if any of the required column(s) are missing in `df`. Accepts a single column name or a sequence of names.
    """
    required = [cols] if isinstance(cols, str) else list(cols)
    missing = [c for c in required if c not in df.columns]

    if missing:
        raise ValueError(f"Missing required column(s): {missing}")

def validate_config(
    config: dict[str, object],
    required: str | Sequence[str],
    log_name: str | None = None
) -> None:
    """
    Raise VisitorConfigError if any of the required keyword(s) are missing in config. Accepts a single keyword or a sequence of keywords.
    """
    required = [required] if isinstance(required, str) else list(required)
    missing = [c for c in required if c not in config]

    if missing:
        raise VisitorConfigError(f"Missing required keywords in {'config' if log_name is None else log_name}: {missing}")

def validate_roll_count(roll_count: int) -> int:
    if int(roll_count) != roll_count or roll_count < 1:
        raise VisitorConfigError(f"roll_count must be a positive integer, got {roll_count!r}.")
    return int(roll_count)


# ---------------- Column helpers ----------------

def as_column(values: object) -> np.ndarray:
    """
    Return a 1-D numpy view/copy of an array-like column without changing its dtype
    (object columns stay object, complex columns stay complex).
    """
    if isinstance(values, (pd.Series, pd.Index)):
        arr = values.to_numpy()
    else:
        arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError(f"Columns must be one-dimensional, got shape {arr.shape}.")
    return arr

def as_float_column(values: object) -> np.ndarray:
    """Like `as_column` but coerced to float64."""
    return as_column(values).astype("float64", copy=False)

def nan_mask(values: np.ndarray) -> np.ndarray:
    """Boolean mask of missing entries; works for numeric and object columns."""
    return np.asarray(pd.isna(values), dtype=bool)


# ---------------- Config helpers ----------------

def _is_sequence_but_not_str(x: object) -> bool:
    return isinstance(x, Sequence) and not isinstance(x, (str, bytes))

def normalize_to_list(
    x: object,
    *,
    element_type: type | tuple[type, ...] | None = None,
    allow_none: bool = True
) -> list | None:
    """
    Normalize a value to a list:
      - None -> None (if allow_none) else [None]
      - scalar -> [scalar]
      - sequence (not str/bytes) -> list(sequence)

    Optionally validates each element's type via `element_type`.
    """
    if x is None:
        return None if allow_none else [None]

    if _is_sequence_but_not_str(x):
        out = list(x)
    else:
        out = [x]

    if element_type is not None:
        bad = [i for i, v in enumerate(out) if v is not None and not isinstance(v, element_type)]
        if bad:
            raise TypeError(
                f"Elements at positions {bad} are not of type {element_type}."
            )
    return out

def bind_config(
        func: Callable[..., object],
        config: dict[str, object]
) -> dict[str, object]:
    """
    Forward only keys that the func accepts.
    """
    sig = inspect.signature(func)
    return {
        k: v for k, v in config.items()
        if k in sig.parameters
    }

def clean_dict(
    dic: dict[str, object],
    allowed: str | Sequence[str]
) -> dict[str, object]:
    if dic is not None:
        invalid = set(dic) - set(allowed)
        if invalid:
            logging.warning(
                "Ignoring unsupported keys: %s",
                ", ".join(sorted(invalid))
            )
        dic = {k: v for k, v in dic.items() if k in allowed}
    return dic


# ---------------- Hashing / paths ----------------

def sha1_of_str(s: str) -> str:
    return hashlib.sha1(s.encode("utf-8")).hexdigest()

def short_sha1_of_json(obj: dict, length: int = 8) -> str:
    """Deterministic short hash for run IDs (stable across Python processes)."""
    return sha1_of_str(json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str))[:length]

def utc_now_iso() -> str:
    # ISO 8601 with 'Z' suffix
    return datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")

def find_project_root(start: Path | None = None) -> Path:
    """
    Resolve the project root by:
      1) COLVIS_ROOT env var, if set
      2) walking upward from `start` (or this file) until a sentinel is found
      3) fallback to current working directory
    """
    env = os.environ.get("COLVIS_ROOT")
    if env:
        return Path(env).resolve()

    p = (start or Path(__file__)).resolve()
    for parent in [p] + list(p.parents):
        for s in PROJECT_SENTINELS:
            if (parent / s).exists():
                return parent
    return Path.cwd().resolve()


# ---------------- Meta Builders ----------------

def build_run_meta(
    df: pd.DataFrame,
    *,
    visitors: Sequence[dict[str, object]],
    runner_name: str,
    runner_version: str | None = None,
    extra: dict[str, object] | None = None,
) -> dict[str, object]:
    """
    Construct a standardized metadata dictionary for a visitor run over a frame.

    Parameters
    ----------
    df : pandas.DataFrame
        The frame the visitors were applied to; only its shape and columns are recorded.
    visitors : sequence of dict
        One summary dict per visitor (key, type, columns, params).
    runner_name : str
        Name of the orchestration function (e.g., "run_visitor_specs").
    runner_version : str, optional
        Implementation version tag.
    extra : dict, optional
        Free-form additional fields merged at top level.

    Returns
    -------
    meta : dict
        Run metadata including created_at, runner info, frame summary,
        visitor summaries and a config_hash over the visitor summaries.
    """
    meta: dict[str, object] = {
        "created_at": utc_now_iso(),
        "runner": {"name": runner_name, "version": "-" if runner_version is None else runner_version},
        "frame": {
            "n_rows": int(len(df)),
            "columns": [str(c) for c in df.columns],
            "index_start": None if df.empty else str(df.index[0]),
            "index_end": None if df.empty else str(df.index[-1]),
        },
        "visitors": list(visitors),
        "config_hash": short_sha1_of_json({"visitors": list(visitors)}, length=12),
    }
    if extra:
        meta.update(extra)
    return meta
