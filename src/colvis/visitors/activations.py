# src/colvis/visitors/activations.py
"""
Elementwise activation visitors: sigmoid family and rectifiers.

Both map a column one value at a time into a float array of the same length.
"""
import numpy as np
from collections.abc import Callable
from scipy.special import erf
from scipy.stats import norm
from typing import Literal

from colvis.exceptions import VisitorConfigError
from colvis.protocol import visit
from colvis.utils import as_float_column, validate_same_length

SigmoidType = Literal[
    "logistic", "algebraic", "hyperbolic_tan", "arc_tan",
    "error_function", "gudermannian", "smoothstep",
]
RectifyType = Literal[
    "ReLU", "param_ReLU", "GeLU", "SiLU", "softplus", "elu", "mish", "metallic_mean",
]
_RECTIFY_TYPES = ("ReLU", "param_ReLU", "GeLU", "SiLU", "softplus", "elu", "mish", "metallic_mean")


def _smoothstep(x: np.ndarray) -> np.ndarray:
    inner = x * x * (3.0 - 2.0 * x)
    return np.where(x <= 0.0, 0.0, np.where(x >= 1.0, 1.0, inner))

_SIGMOIDS: dict[str, Callable[[np.ndarray], np.ndarray]] = {
    "logistic": lambda x: 1.0 / (1.0 + np.exp(-x)),
    "algebraic": lambda x: 1.0 / np.sqrt(1.0 + x * x),
    "hyperbolic_tan": np.tanh,
    "arc_tan": np.arctan,
    "error_function": erf,
    "gudermannian": lambda x: np.arctan(np.sinh(x)),
    "smoothstep": _smoothstep,
}


class SigmoidVisitor:
    """Apply one of the sigmoid-shaped functions to every value of a column."""

    def __init__(self, sigmoid_type: SigmoidType = "logistic"):
        if sigmoid_type not in _SIGMOIDS:
            raise VisitorConfigError(f"Unsupported sigmoid_type '{sigmoid_type}'. Use one of {sorted(_SIGMOIDS)}.")
        self.sigmoid_type = sigmoid_type
        self._result = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        with np.errstate(over="ignore"):
            self._result = np.asarray(_SIGMOIDS[self.sigmoid_type](col), dtype="float64")

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result


def _softplus(x: np.ndarray, p: float) -> np.ndarray:
    return np.log1p(np.exp(p * x)) / p


class RectifyVisitor:
    """
    Rectifier activations.

    `param` is the leak slope for param_ReLU, the scale for elu and the
    sharpness for softplus/mish; the other types ignore it.
    """

    def __init__(self, rectify_type: RectifyType = "ReLU", param: float = 1.0):
        if rectify_type not in _RECTIFY_TYPES:
            raise VisitorConfigError(f"Unsupported rectify_type '{rectify_type}'. Use one of {_RECTIFY_TYPES}.")
        self.rectify_type = rectify_type
        self.param = float(param)
        self._result = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        p = self.param
        rt = self.rectify_type

        with np.errstate(over="ignore"):
            if rt == "ReLU":
                out = np.maximum(0.0, col)
            elif rt == "param_ReLU":
                out = np.maximum(col * p, col)
            elif rt == "GeLU":
                out = col * norm.cdf(col)
            elif rt == "SiLU":
                sigm = visit(SigmoidVisitor("logistic"), index, col)
                out = col * sigm.get_result()
            elif rt == "softplus":
                out = _softplus(col, p)
            elif rt == "elu":
                out = np.where(col > 0, col, p * np.expm1(np.minimum(col, 0.0)))
            elif rt == "mish":
                out = col * np.tanh(_softplus(col, p))
            else:  # metallic_mean
                out = (col + np.sqrt(col * col + 4.0)) / 2.0
        self._result = np.asarray(out, dtype="float64")

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result
