import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from colvis.simulator.columns import (
    simulate_bimodal_column,
    simulate_categorical_column,
    simulate_frame,
    simulate_linear_pairs,
    simulate_tone,
)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

@pytest.fixture
def linear_pairs():
    """Exact y = 3x + 2 over 100 points."""
    return simulate_linear_pairs(100, slope=3.0, intercept=2.0, noise=0.0)

@pytest.fixture
def bimodal():
    """100 values around 0 and 100 (std 1), shuffled."""
    return simulate_bimodal_column(50, centers=(0.0, 100.0), spread=1.0)

@pytest.fixture
def tone():
    return simulate_tone(64, freqs=(5,))

@pytest.fixture
def categories():
    return simulate_categorical_column(60)

@pytest.fixture
def frame():
    return simulate_frame(120)

@pytest.fixture
def positions():
    """Plain integer index for hand-written columns."""
    def _make(n):
        return pd.RangeIndex(n)
    return _make
