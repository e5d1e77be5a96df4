# src/colvis/visitors/regression.py
"""
One-pass simple linear regression of y on x.
"""
import math
import numpy as np

from colvis.statistics.welford_aggregator import StatsVisitor
from colvis.specs.regression_result import RegressionResult
from colvis.utils import as_float_column, validate_same_length


class SLRegressionVisitor:
    """
    Streaming slope / intercept / correlation.

    The cross-product sum is updated with the pre-update means scaled by n/(n+1),
    so no second pass over the data is needed and large means do not cancel
    catastrophically. Degenerate inputs (n <= 1, constant x) give NaN/inf.

    Parameters
    ----------
    skip_nan : bool, default True
        Drop pairs where either x or y is NaN; they are not counted.
    """

    def __init__(self, skip_nan: bool = True):
        self.skip_nan = skip_nan
        self._x_stats = StatsVisitor(skip_nan=skip_nan)
        self._y_stats = StatsVisitor(skip_nan=skip_nan)
        self._n = 0
        self._s_xy = 0.0

    def pre(self) -> None:
        self._n = 0
        self._s_xy = 0.0
        self._x_stats.pre()
        self._y_stats.pre()

    def update(self, idx, x: float, y: float) -> None:
        x, y = float(x), float(y)
        if self.skip_nan and (math.isnan(x) or math.isnan(y)):
            return

        # x_stats.mean is 0.0 before the first point, and n/(n+1) is 0 then
        self._s_xy += (self._x_stats.mean - x) * (self._y_stats.mean - y) * self._n / (self._n + 1)

        self._x_stats.add(idx, x)
        self._y_stats.add(idx, y)
        self._n += 1

    def __call__(self, index, x, y) -> None:
        xs = as_float_column(x)
        ys = as_float_column(y)
        validate_same_length(index, xs, ys, names=("index", "x", "y"))
        for idx, xv, yv in zip(index, xs, ys):
            self.update(idx, xv, yv)

    def post(self) -> None:
        pass

    def get_count(self) -> int:
        return self._n

    def get_slope(self) -> float:
        # sum of squared deviations of x from its mean
        s_xx = np.float64(self._x_stats.get_variance()) * (self._n - 1)
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(self._s_xy) / s_xx)

    def get_intercept(self) -> float:
        return float(self._y_stats.get_mean() - self.get_slope() * self._x_stats.get_mean())

    def get_corr(self) -> float:
        denom = np.float64(self._n - 1) * self._x_stats.get_std() * self._y_stats.get_std()
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(self._s_xy) / denom)

    def get_result(self) -> RegressionResult:
        return RegressionResult(
            slope=self.get_slope(),
            intercept=self.get_intercept(),
            correlation=self.get_corr(),
            count=self._n,
        )
