# src/colvis/statistics/__init__.py
from .welford_aggregator import StatsVisitor
from .sum_visitor import SumVisitor
from .rolling import RollingAdopter

__all__ = [
    "StatsVisitor",
    "SumVisitor",
    "RollingAdopter",
]
