# src/colvis/visitors/information.py
"""
Rolling information statistics: entropy of a numeric window and impurity of a
categorical window.

Both results have the column's length; the first `roll_count - 1` positions
are NaN.
"""
import logging
import math
import numpy as np
from collections import Counter
from typing import Literal

from colvis.exceptions import VisitorConfigError
from colvis.statistics.rolling import RollingAdopter
from colvis.statistics.sum_visitor import SumVisitor
from colvis.utils import as_column, as_float_column, nan_mask, validate_roll_count, validate_same_length

ImpurityType = Literal["gini_index", "info_entropy"]
_IMPURITY_TYPES = ("gini_index", "info_entropy")


class EntropyVisitor:
    """
    Rolling Shannon entropy of the window's value distribution.

    With S the window sum, each value contributes p = v / S and
    H = -sum p log_b p = (ln S - T / S) / ln b, where T is the window sum of v ln v.
    Both S and T come from a rolling compensated sum, so each slide is O(1).

    Parameters
    ----------
    roll_count : int
        Window size.
    log_base : float, default 2
        Base of the logarithm.
    skip_nan : bool, default True
        NaN values contribute nothing to a window.
    """

    def __init__(self, roll_count: int, log_base: float = 2, skip_nan: bool = True):
        self.roll_count = validate_roll_count(roll_count)
        if log_base <= 0 or log_base == 1:
            raise VisitorConfigError(f"log_base must be positive and != 1, got {log_base}.")
        self.log_base = float(log_base)
        self.skip_nan = skip_nan
        self._result = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))

        sum_v = RollingAdopter(SumVisitor(skip_nan=self.skip_nan), self.roll_count)

        sum_v.pre()
        sum_v(index, col)
        sum_v.post()
        window_sum = sum_v.get_result()

        # 0 ln 0 is taken as 0; negative values yield NaN and poison their windows
        with np.errstate(divide="ignore", invalid="ignore"):
            v_log_v = np.where(col == 0.0, 0.0, col * np.log(col))

        sum_v.pre()
        sum_v(index, v_log_v)
        sum_v.post()
        window_vlogv = sum_v.get_result()

        with np.errstate(divide="ignore", invalid="ignore"):
            result = (np.log(window_sum) - window_vlogv / window_sum) / math.log(self.log_base)
        # cancellation between the two sums can dip just below zero; NaN stays NaN
        self._result = np.maximum(result, 0.0)

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result


class ImpurityVisitor:
    """
    Rolling impurity of a categorical column.

    A frequency table of the current window is kept; each slide decrements the
    value leaving the window (dropping its entry at zero) and increments the one
    entering it.

    Parameters
    ----------
    roll_count : int
        Window size.
    impurity_type : {"gini_index", "info_entropy"}
        Gini = 1 - sum p_k^2, information entropy = -sum p_k log2 p_k.
    skip_nan : bool, default True
        Missing values are not counted; proportions are over the observed values.
    """

    def __init__(self, roll_count: int, impurity_type: ImpurityType = "gini_index", skip_nan: bool = True):
        self.roll_count = validate_roll_count(roll_count)
        if impurity_type not in _IMPURITY_TYPES:
            raise VisitorConfigError(f"Unsupported impurity_type '{impurity_type}'. Use one of {_IMPURITY_TYPES}.")
        self.impurity_type = impurity_type
        self.skip_nan = skip_nan
        self._result = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def _measure(self, table: Counter, total: int) -> float:
        if total == 0:
            return np.nan
        probs = np.fromiter(table.values(), dtype="float64") / total
        if self.impurity_type == "gini_index":
            return float(1.0 - np.sum(probs * probs))
        return float(-np.sum(probs * np.log2(probs)))

    def __call__(self, index, values) -> None:
        col = as_column(values)
        n = validate_same_length(index, col, names=("index", "values"))
        W = self.roll_count
        result = np.full(n, np.nan, dtype="float64")
        if W > n:
            logging.debug(f"Impurity window of {W} exceeds column length {n}; result is all NaN.")
            self._result = result
            return

        missing = nan_mask(col)
        observed = ~missing if self.skip_nan else np.ones(n, dtype=bool)
        # all missing markers share one key, NaN never equals itself
        keys = [None if m else v for v, m in zip(col, missing)]
        table: Counter = Counter()
        total = 0

        for i in range(n):
            if observed[i]:
                table[keys[i]] += 1
                total += 1
            if i >= W:
                j = i - W
                if observed[j]:
                    table[keys[j]] -= 1
                    total -= 1
                    if table[keys[j]] == 0:
                        del table[keys[j]]
            if i >= W - 1:
                result[i] = self._measure(table, total)

        self._result = result

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result
