# src/colvis/statistics/sum_visitor.py
"""
Compensated running sum, the summation primitive behind the rolling entropy.
"""
import math
from dataclasses import dataclass, field

from colvis.utils import as_float_column, validate_same_length


@dataclass
class SumVisitor:
    """
    Kahan-Babuska (Neumaier) summation with O(1) add/remove.

    `remove` adds the negated value, so a sliding window keeps the running error
    term instead of accumulating drift over long columns. With `skip_nan=False`
    NaNs are counted separately and the sum is NaN while any is held, which lets
    a window recover once the NaN slides out.
    """
    skip_nan: bool = True
    _sum: float = field(default=0.0, init=False, repr=False)
    _comp: float = field(default=0.0, init=False, repr=False)
    _count: int = field(default=0, init=False, repr=False)
    _nan_count: int = field(default=0, init=False, repr=False)

    def pre(self) -> None:
        self._sum = 0.0
        self._comp = 0.0
        self._count = 0
        self._nan_count = 0

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        for idx, v in zip(index, col):
            self.add(idx, v)

    def post(self) -> None:
        pass

    def get_result(self) -> float:
        if self._nan_count:
            return math.nan
        return self._sum + self._comp

    def get_count(self) -> int:
        return self._count

    def add(self, idx, value: float) -> None:
        x = float(value)
        if math.isnan(x):
            if not self.skip_nan:
                self._nan_count += 1
            return
        self._accumulate(x)
        self._count += 1

    def remove(self, value: float) -> None:
        x = float(value)
        if math.isnan(x):
            if not self.skip_nan:
                self._nan_count -= 1
            return
        self._accumulate(-x)
        self._count -= 1
        if self._count == 0:
            self._sum = 0.0
            self._comp = 0.0

    def _accumulate(self, x: float) -> None:
        s = self._sum + x
        if abs(self._sum) >= abs(x):
            self._comp += (self._sum - s) + x
        else:
            self._comp += (x - s) + self._sum
        self._sum = s
