# src/colvis/specs/regression_result.py
import pandas as pd
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float
    correlation: float
    count: int

    def to_dict(self) -> dict:
        return asdict(self)

    def to_series(self, name: Optional[str] = None):
        s = pd.Series(asdict(self))
        if name is not None:
            s.name = name
        return s

    def to_string(self) -> str:
        s = f"slope: {self.slope:.6g}"
        s += f" | intercept: {self.intercept:.6g}"
        s += f" | corr: {self.correlation:.4f}"
        s += f" | n: {self.count}"
        return s
