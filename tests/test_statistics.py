"""Tests for the protocol, the accumulators and the rolling adopter."""
import math

import numpy as np
import pandas as pd
import pytest

from colvis.exceptions import LengthMismatchError, VisitorConfigError
from colvis.protocol import Accumulator, Visitor, visit
from colvis.statistics import RollingAdopter, StatsVisitor, SumVisitor
from colvis.visitors import FFTVisitor, KMeansVisitor


class MaxVisitor:
    """Visitor without add/remove, forces the re-run path of the rolling adopter."""

    def __init__(self):
        self.calls = 0
        self._result = np.nan

    def pre(self):
        self._result = np.nan

    def __call__(self, index, values):
        self.calls += 1
        self._result = float(np.max(values))

    def post(self):
        pass

    def get_result(self):
        return self._result


class TestProtocol:
    def test_visitors_satisfy_protocol(self):
        assert isinstance(FFTVisitor(), Visitor)
        assert isinstance(StatsVisitor(), Visitor)
        assert isinstance(MaxVisitor(), Visitor)

    def test_accumulators(self):
        assert isinstance(StatsVisitor(), Accumulator)
        assert isinstance(SumVisitor(), Accumulator)
        assert not isinstance(KMeansVisitor(k=2, num_of_iter=5), Accumulator)

    def test_visit_returns_same_visitor(self, positions):
        v = StatsVisitor()
        assert visit(v, positions(3), [1.0, 2.0, 3.0]) is v
        assert v.get_result() == pytest.approx(2.0)

    def test_pre_resets_state(self, positions):
        v = visit(StatsVisitor(), positions(3), [1.0, 2.0, 3.0])
        visit(v, positions(2), [10.0, 20.0])
        assert v.get_count() == 2
        assert v.get_mean() == pytest.approx(15.0)


class TestStatsVisitor:
    def test_matches_numpy(self, rng, positions):
        vals = rng.normal(5.0, 2.0, size=500)
        v = visit(StatsVisitor(), positions(500), vals)
        assert v.get_count() == 500
        assert v.get_mean() == pytest.approx(vals.mean())
        assert v.get_variance() == pytest.approx(vals.var(ddof=1))
        assert v.get_std() == pytest.approx(vals.std(ddof=1))

    def test_remove_reverses_add(self):
        v = StatsVisitor()
        for i, x in enumerate([1.0, 4.0, 9.0, 16.0]):
            v.add(i, x)
        v.remove(1.0)
        assert v.get_count() == 3
        assert v.get_mean() == pytest.approx(np.mean([4.0, 9.0, 16.0]))
        assert v.get_variance() == pytest.approx(np.var([4.0, 9.0, 16.0], ddof=1))

    def test_nan_skipped(self, positions):
        v = visit(StatsVisitor(), positions(4), [1.0, np.nan, 3.0, 5.0])
        assert v.get_count() == 3
        assert v.get_mean() == pytest.approx(3.0)

    def test_nan_poisons_when_not_skipped(self, positions):
        v = visit(StatsVisitor(skip_nan=False), positions(3), [1.0, np.nan, 3.0])
        assert math.isnan(v.get_mean())

    def test_degenerate_counts(self, positions):
        v = visit(StatsVisitor(), positions(1), [7.0])
        assert v.get_mean() == 7.0
        assert math.isnan(v.get_variance())
        assert v.ci() is None
        assert math.isnan(visit(StatsVisitor(), positions(0), []).get_mean())

    def test_ci_contains_mean(self, rng, positions):
        vals = rng.normal(0.0, 1.0, size=200)
        v = visit(StatsVisitor(), positions(200), vals)
        lo, hi = v.ci(0.95)
        assert lo < v.get_mean() < hi
        lo_std, hi_std = v.ci(0.95, scale="std")
        assert hi_std - lo_std > hi - lo
        with pytest.raises(ValueError):
            v.ci(scale="var")

    def test_length_mismatch(self, positions):
        with pytest.raises(LengthMismatchError):
            visit(StatsVisitor(), positions(3), [1.0, 2.0])


class TestSumVisitor:
    def test_compensated_sum(self, positions):
        vals = [1e16, 1.0, -1e16, 1.0]
        v = visit(SumVisitor(), positions(4), vals)
        assert v.get_result() == 2.0
        assert v.get_count() == 4

    def test_remove(self):
        v = SumVisitor()
        for i, x in enumerate([0.1, 0.2, 0.3]):
            v.add(i, x)
        v.remove(0.1)
        assert v.get_result() == pytest.approx(0.5)

    def test_empty_window_resets_to_zero(self):
        v = SumVisitor()
        v.add(0, 0.1)
        v.remove(0.1)
        assert v.get_result() == 0.0

    def test_nan_policy(self, positions):
        assert visit(SumVisitor(), positions(3), [1.0, np.nan, 2.0]).get_result() == 3.0
        assert math.isnan(visit(SumVisitor(skip_nan=False), positions(3), [1.0, np.nan, 2.0]).get_result())


class TestRollingAdopter:
    def test_rolling_mean(self, positions):
        roll = visit(RollingAdopter(StatsVisitor(), 3), positions(6), [1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
        res = roll.get_result()
        assert np.isnan(res[:2]).all()
        np.testing.assert_allclose(res[2:], [2.0, 3.0, 4.0, 5.0])

    def test_incremental_matches_rerun(self, rng, positions):
        vals = rng.normal(size=50)
        fast = visit(RollingAdopter(SumVisitor(), 7), positions(50), vals)
        slow = pd.Series(vals).rolling(7).sum().to_numpy()
        assert fast.incremental
        np.testing.assert_allclose(fast.get_result(), slow, equal_nan=True)

    def test_generic_visitor_rerun_per_window(self, positions):
        inner = MaxVisitor()
        roll = RollingAdopter(inner, 2)
        assert not roll.incremental
        visit(roll, positions(5), [3.0, 1.0, 4.0, 1.0, 5.0])
        np.testing.assert_allclose(roll.get_result(), [np.nan, 3.0, 4.0, 4.0, 5.0], equal_nan=True)
        assert inner.calls == 4

    def test_window_larger_than_column(self, positions):
        roll = visit(RollingAdopter(StatsVisitor(), 10), positions(4), [1.0, 2.0, 3.0, 4.0])
        assert len(roll.get_result()) == 4
        assert np.isnan(roll.get_result()).all()

    def test_nan_slides_out(self, positions):
        vals = [1.0, np.nan, 2.0, 3.0, 4.0]
        roll = visit(RollingAdopter(SumVisitor(skip_nan=False), 2), positions(5), vals)
        np.testing.assert_allclose(roll.get_result(), [np.nan, np.nan, np.nan, 5.0, 7.0], equal_nan=True)

    @pytest.mark.parametrize("bad", [0, -3, 2.5])
    def test_invalid_roll_count(self, bad):
        with pytest.raises(VisitorConfigError):
            RollingAdopter(StatsVisitor(), bad)
