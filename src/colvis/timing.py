# src/colvis/timing.py
"""
Module for timing performance.
"""
import logging
from time import perf_counter
from contextlib import contextmanager
from collections import defaultdict
from typing import Callable, Dict, List, Tuple, Optional

from colvis.protocol import Visitor, visit


class SectionTimer:
    """
    Lightweight timing engine to measure named code sections.
    Usage:
        timer = SectionTimer()
        with timer.section("radix-2 n=4096"):
            ...
        with timer.section("bluestein n=4095"):
            ...
        # log summary
        timer.report()
        # or get raw data
        stats = timer.summary()
    """
    def __init__(self, sink: Optional[Callable[[str], None]] = logging.info):
        self._records: List[Tuple[str, float]] = []
        self._sink = sink

    @contextmanager
    def section(self, name: str):
        t0 = perf_counter()
        try:
            yield
        finally:
            dt = perf_counter() - t0
            self._records.append((name, dt))

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Aggregate timings per section: total, count, avg."""
        agg = defaultdict(lambda: {"total": 0.0, "count": 0, "avg": 0.0})
        for name, dt in self._records:
            a = agg[name]
            a["total"] += dt
            a["count"] += 1
        for a in agg.values():
            a["avg"] = a["total"] / a["count"]
        return dict(agg)

    def report(self, title: str = "Timing summary"):
        if self._sink is None:
            return
        data = self.summary()
        self._sink(title)
        self._sink("-" * len(title))
        for name, stats in sorted(data.items(), key=lambda kv: kv[1]["total"], reverse=True):
            self._sink(f"{name:30s}  total={stats['total']:.6f}s  "
                       f"count={stats['count']}  avg={stats['avg']:.6f}s")

def time_visitor(
    visitor: Visitor,
    index,
    *columns,
    timer: SectionTimer,
    name: Optional[str] = None,
    repeat: int = 1
) -> Visitor:
    """
    Run the full visitor lifecycle `repeat` times inside `timer.section(name)`.
    Returns the visitor after the last run.
    """
    label = name or type(visitor).__name__
    for _ in range(repeat):
        with timer.section(label):
            visit(visitor, index, *columns)
    return visitor
