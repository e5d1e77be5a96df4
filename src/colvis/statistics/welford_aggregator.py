# src/colvis/statistics/welford_aggregator.py
"""
Online count / mean / variance accumulator (Welford) exposed as a column visitor.
"""
import math
import numpy as np
from scipy.stats import t
from dataclasses import dataclass, field

from colvis.utils import as_float_column, validate_same_length


@dataclass
class StatsVisitor:
    """Implements the Welford-online algorithm over a stream of scalar values."""
    skip_nan: bool = True
    n: int = field(default=0, init=False)
    mean: float = field(default=0.0, init=False)
    M2: float = field(default=0.0, init=False, repr=False)
    _nan_count: int = field(default=0, init=False, repr=False)

    # ---------------- lifecycle ----------------

    def pre(self) -> None:
        self.n = 0
        self.mean = 0.0
        self.M2 = 0.0
        self._nan_count = 0

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        for idx, v in zip(index, col):
            self.add(idx, v)

    def post(self) -> None:
        pass

    def get_result(self) -> float:
        return self.get_mean()

    # ---------------- incremental ----------------

    def add(self, idx, value: float) -> None:
        x = float(value)
        if math.isnan(x):
            if not self.skip_nan:
                self._nan_count += 1
            return

        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        self.M2 += delta * (x - self.mean)

    def remove(self, value: float) -> None:
        """Reverse of `add`; used by the rolling adopter when a value leaves the window."""
        x = float(value)
        if math.isnan(x):
            if not self.skip_nan:
                self._nan_count -= 1
            return
        if self.n <= 1:
            self.n = 0
            self.mean = 0.0
            self.M2 = 0.0
            return

        mean_prev = (self.n * self.mean - x) / (self.n - 1)
        self.M2 -= (x - self.mean) * (x - mean_prev)
        self.M2 = max(self.M2, 0.0)
        self.mean = mean_prev
        self.n -= 1

    # ---------------- accessors ----------------

    def get_count(self) -> int:
        return self.n

    def get_mean(self) -> float:
        return self.mean if self.n > 0 and not self._nan_count else np.nan

    def get_variance(self) -> float:
        return self.M2 / (self.n - 1) if self.n > 1 and not self._nan_count else np.nan

    def get_std(self) -> float:
        return math.sqrt(self.get_variance())

    def get_sem(self) -> float:
        """Standard error of the mean."""
        return math.sqrt(self.get_variance() / self.n) if self.n > 1 else np.nan

    def ci(self, level: float = 0.95, scale: str = "sem") -> tuple[float, float] | None:
        """
        Confidence interval for either the mean (scale='sem')
        or a typical observation (scale='std'), for a given confidence level.
        """
        if self.n <= 1:
            return None
        df = self.n - 1

        if scale == "sem":
            sc = self.get_sem()
        elif scale == "std":
            sc = self.get_std()
        else:
            raise ValueError("'scale' must be 'sem' or 'std'")

        p = 1 - (1 - level) / 2
        c = float(t.ppf(p, df))

        return self.mean - c * sc, self.mean + c * sc
