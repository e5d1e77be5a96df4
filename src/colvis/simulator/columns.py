# src/colvis/simulator/columns.py
"""
Synthetic columns for demos, benchmarks and tests.

Every generator takes an optional `rng`; without one a fixed-seed generator is
used so that demo output is stable between runs.
"""
import numpy as np
import pandas as pd
from collections.abc import Sequence


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng(1990)

def _calendar(n: int, start: str = "2020-01-01") -> pd.DatetimeIndex:
    return pd.bdate_range(start, periods=n, freq="B", name="date")


def simulate_bimodal_column(
    n_per_mode: int = 50,
    centers: Sequence[float] = (0.0, 100.0),
    spread: float = 1.0,
    shuffle: bool = True,
    rng: np.random.Generator | None = None
) -> pd.Series:
    """
    `n_per_mode` normal draws around each of `centers` with std `spread`.
    """
    rng = _rng(rng)
    vals = np.concatenate([rng.normal(c, spread, size=n_per_mode) for c in centers])
    if shuffle:
        rng.shuffle(vals)
    return pd.Series(vals, index=_calendar(len(vals)), name="bimodal")

def simulate_linear_pairs(
    n: int = 100,
    slope: float = 3.0,
    intercept: float = 2.0,
    noise: float = 0.0,
    rng: np.random.Generator | None = None
) -> pd.DataFrame:
    """
    Columns x ~ U(-10, 10) and y = slope * x + intercept + N(0, noise).
    """
    rng = _rng(rng)
    x = rng.uniform(-10.0, 10.0, size=n)
    y = slope * x + intercept
    if noise > 0:
        y = y + rng.normal(0.0, noise, size=n)
    return pd.DataFrame({"x": x, "y": y}, index=_calendar(n))

def simulate_categorical_column(
    n: int = 200,
    categories: Sequence[object] = ("buy", "hold", "sell"),
    probs: Sequence[float] | None = None,
    rng: np.random.Generator | None = None
) -> pd.Series:
    rng = _rng(rng)
    vals = rng.choice(np.asarray(categories, dtype=object), size=n, p=probs)
    return pd.Series(vals, index=_calendar(n), name="category", dtype=object)

def simulate_tone(
    n: int = 256,
    freqs: Sequence[int] = (5, 20),
    amplitudes: Sequence[float] | None = None,
    noise: float = 0.0,
    rng: np.random.Generator | None = None
) -> pd.Series:
    """
    Sum of sinusoids completing `freqs[i]` cycles over the column, so each tone
    lands exactly on DFT bin `freqs[i]`.
    """
    rng = _rng(rng)
    amplitudes = [1.0] * len(freqs) if amplitudes is None else list(amplitudes)
    t = np.arange(n) / n
    vals = sum(a * np.sin(2.0 * np.pi * f * t) for f, a in zip(freqs, amplitudes))
    if noise > 0:
        vals = vals + rng.normal(0.0, noise, size=n)
    return pd.Series(vals, index=_calendar(n), name="tone")

def simulate_frame(
    n: int = 120,
    rng: np.random.Generator | None = None
) -> pd.DataFrame:
    """
    One frame with a column of every flavour, as consumed by the visitor pipelines.
    """
    rng = _rng(rng)
    pairs = simulate_linear_pairs(n, noise=0.5, rng=rng)
    half = n // 2
    bimodal = simulate_bimodal_column(half, spread=2.0, rng=rng).to_numpy()
    bimodal = np.resize(bimodal, n)
    return pd.DataFrame(
        {
            "x": pairs["x"].to_numpy(),
            "y": pairs["y"].to_numpy(),
            "bimodal": bimodal,
            "positive": rng.uniform(0.5, 5.0, size=n),
            "tone": simulate_tone(n, freqs=(3,), rng=rng).to_numpy(),
            "category": simulate_categorical_column(n, rng=rng).to_numpy(),
        },
        index=_calendar(n),
    )
