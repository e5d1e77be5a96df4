# src/colvis/statistics/rolling.py
"""
Sliding-window aggregator: applies any visitor over a fixed-size moving window.
"""
import logging
import numpy as np

from colvis.protocol import Accumulator, Visitor, visit
from colvis.utils import as_column, validate_roll_count, validate_same_length


class RollingAdopter:
    """
    Apply `visitor` to every window of `roll_count` consecutive values.

    The result has the length of the consumed column; positions before the first
    full window are NaN. Accumulator-like visitors (those with `add`/`remove`) are
    slid in O(1) per step; any other visitor is re-run over each window.

    Parameters
    ----------
    visitor : Visitor
        The visitor to roll. Its result must be convertible to float.
    roll_count : int
        Window size, at least 1.
    """

    def __init__(self, visitor: Visitor, roll_count: int):
        self.visitor = visitor
        self.roll_count = validate_roll_count(roll_count)
        self._result = np.array([], dtype="float64")

    @property
    def incremental(self) -> bool:
        return isinstance(self.visitor, Accumulator)

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def __call__(self, index, values) -> None:
        index = as_column(index)
        col = as_column(values)
        n = validate_same_length(index, col, names=("index", "values"))
        result = np.full(n, np.nan, dtype="float64")
        W = self.roll_count

        if W > n:
            logging.debug(f"Window of {W} exceeds column length {n}; result is all NaN.")
            self._result = result
            return

        if self.incremental:
            self._slide(index, col, result)
        else:
            for end in range(W, n + 1):
                v = visit(self.visitor, index[end - W:end], col[end - W:end])
                result[end - 1] = float(v.get_result())
        self._result = result

    def _slide(self, index, col: np.ndarray, result: np.ndarray) -> None:
        W = self.roll_count
        acc = self.visitor
        acc.pre()
        for i in range(len(col)):
            acc.add(index[i], col[i])
            if i >= W:
                acc.remove(col[i - W])
            if i >= W - 1:
                result[i] = float(acc.get_result())
        acc.post()

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result
