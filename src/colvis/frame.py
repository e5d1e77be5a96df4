# src/colvis/frame.py
"""
Thin adapter between pandas frames and visitors.

The frame's index is handed to the visitor as the index sequence; only its
order matters to the visitors.
"""
import numpy as np
import pandas as pd
from collections.abc import Sequence

from colvis.protocol import V, visit
from colvis.utils import validate_columns_exist


def visit_frame(
    visitor: V,
    df: pd.DataFrame,
    columns: str | Sequence[str]
) -> V:
    """
    Run the full visitor lifecycle over `df.index` and the named column(s).

    Parameters
    ----------
    visitor : Visitor
        Any visitor; two-column visitors take two names.
    df : pandas.DataFrame
        Source frame. Not mutated.
    columns : str or sequence of str
        Column name(s), in the order the visitor consumes them.

    Returns
    -------
    The visitor, with its result ready.
    """
    cols = [columns] if isinstance(columns, str) else list(columns)
    validate_columns_exist(df, cols)
    return visit(visitor, df.index, *(df[c] for c in cols))

def result_to_series(
    result: object,
    df: pd.DataFrame,
    name: str | None = None
) -> pd.Series:
    """
    Wrap a result that has one entry per row of `df` as a Series on `df.index`.
    Raises ValueError for results of any other length.
    """
    arr = np.asarray(result)
    if arr.ndim != 1 or len(arr) != len(df):
        raise ValueError(f"Result of shape {arr.shape} does not align with a frame of {len(df)} rows.")
    return pd.Series(arr, index=df.index, name=name)
