# src/colvis/visitors/loss.py
"""
Two-column loss visitors: scalar losses between actual and model columns, and
the per-element policy-gradient loss.
"""
import numpy as np
from typing import Literal

from colvis.exceptions import VisitorConfigError
from colvis.utils import as_float_column, validate_same_length

LossType = Literal[
    "kullback_leibler", "mean_abs_error", "mean_sqr_error", "mean_sqr_log_error",
    "cross_entropy", "binary_cross_entropy", "categorical_hinge",
    "cosine_similarity", "log_cosh",
]
_LOSS_TYPES = (
    "kullback_leibler", "mean_abs_error", "mean_sqr_error", "mean_sqr_log_error",
    "cross_entropy", "binary_cross_entropy", "categorical_hinge",
    "cosine_similarity", "log_cosh",
)


class LossFunctionVisitor:
    """
    Scalar loss between an `actual` and a `model` column of equal length.

    Parameters
    ----------
    loss_type : str
        One of kullback_leibler, mean_abs_error, mean_sqr_error,
        mean_sqr_log_error, cross_entropy, binary_cross_entropy,
        categorical_hinge, cosine_similarity, log_cosh.
    """

    def __init__(self, loss_type: LossType):
        if loss_type not in _LOSS_TYPES:
            raise VisitorConfigError(f"Unsupported loss_type '{loss_type}'. Use one of {_LOSS_TYPES}.")
        self.loss_type = loss_type
        self._result = 0.0

    def pre(self) -> None:
        self._result = 0.0

    def __call__(self, index, actual, model) -> None:
        a = as_float_column(actual)
        m = as_float_column(model)
        validate_same_length(a, m, names=("actual", "model"))
        n = len(a)
        lt = self.loss_type

        with np.errstate(divide="ignore", invalid="ignore"):
            if lt == "kullback_leibler":
                res = np.sum(a * np.log(a / m))
            elif lt == "mean_abs_error":
                res = np.sum(np.abs(a - m)) / n
            elif lt == "mean_sqr_error":
                res = np.sum((a - m) ** 2) / n
            elif lt == "mean_sqr_log_error":
                res = np.sum((np.log1p(a) - np.log1p(m)) ** 2) / n
            elif lt == "cross_entropy":
                res = -np.sum(a * np.log(m)) / n
            elif lt == "binary_cross_entropy":
                res = -np.sum(a * np.log(m) + (1.0 - a) * np.log(1.0 - m)) / n
            elif lt == "categorical_hinge":
                neg = np.sum((1.0 - a) * m)
                pos = np.sum(a * m)
                res = max(neg - pos + 1.0, 0.0)
            elif lt == "cosine_similarity":
                res = np.dot(a, m) / (np.sqrt(np.dot(a, a)) * np.sqrt(np.dot(m, m)))
            else:  # log_cosh
                res = np.sum(np.log(np.cosh(m - a))) / n
        self._result = float(res)

    def post(self) -> None:
        pass

    def get_result(self) -> float:
        return self._result


class PolicyLearningLossVisitor:
    """Negative log likelihood weighted by reward: -ln(p) * r, per element."""

    def __init__(self):
        self._result = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = np.array([], dtype="float64")

    def __call__(self, index, action_prob, reward) -> None:
        p = as_float_column(action_prob)
        r = as_float_column(reward)
        validate_same_length(p, r, names=("action_prob", "reward"))
        with np.errstate(divide="ignore", invalid="ignore"):
            self._result = -np.log(p) * r

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result
