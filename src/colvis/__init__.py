# src/colvis/__init__.py
"""
colvis: stateful column visitors.

Every visitor follows the same lifecycle (pre -> call -> post -> get_result)
over an index sequence and one or more value columns.
"""
__version__ = "0.1.0"

from colvis.protocol import Visitor, Accumulator, visit
from colvis.statistics import StatsVisitor, SumVisitor, RollingAdopter
from colvis.visitors import (
    SLRegressionVisitor,
    FFTVisitor,
    KMeansVisitor,
    AffinityPropVisitor,
    EntropyVisitor,
    ImpurityVisitor,
    SigmoidVisitor,
    RectifyVisitor,
    LossFunctionVisitor,
    PolicyLearningLossVisitor,
)

__all__ = [
    "Visitor",
    "Accumulator",
    "visit",
    "StatsVisitor",
    "SumVisitor",
    "RollingAdopter",
    "SLRegressionVisitor",
    "FFTVisitor",
    "KMeansVisitor",
    "AffinityPropVisitor",
    "EntropyVisitor",
    "ImpurityVisitor",
    "SigmoidVisitor",
    "RectifyVisitor",
    "LossFunctionVisitor",
    "PolicyLearningLossVisitor",
]
