"""Tests for the frame adapter, the batch runner, run persistence, timing and plots."""
import json

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest
from matplotlib.figure import Figure

from colvis.frame import result_to_series, visit_frame
from colvis.io import load_visitor_run, save_visitor_run
from colvis.pipelines.column_report import normalize_result, run_visitor_specs
from colvis.simulator.columns import simulate_bimodal_column, simulate_frame
from colvis.specs.samples import DEMO_SPECS
from colvis.statistics import StatsVisitor
from colvis.timing import SectionTimer, time_visitor
from colvis.visitors import EntropyVisitor, FFTVisitor, KMeansVisitor, SLRegressionVisitor
from colvis.visualisation import plot_clusters, plot_rolling, plot_spectrum


class TestFrameAdapter:
    def test_visit_frame_single_column(self, frame):
        v = visit_frame(StatsVisitor(), frame, "x")
        assert v.get_mean() == pytest.approx(frame["x"].mean())

    def test_visit_frame_two_columns(self, frame):
        v = visit_frame(SLRegressionVisitor(), frame, ["x", "y"])
        assert v.get_slope() == pytest.approx(3.0, abs=0.1)

    def test_missing_column(self, frame):
        with pytest.raises(ValueError):
            visit_frame(StatsVisitor(), frame, "nope")

    def test_result_to_series(self, frame):
        v = visit_frame(EntropyVisitor(roll_count=5), frame, "positive")
        s = result_to_series(v.get_result(), frame, name="entropy")
        assert s.index.equals(frame.index)
        assert s.name == "entropy"
        with pytest.raises(ValueError):
            result_to_series(np.zeros(3), frame)


class TestNormalizeResult:
    def test_spectrum_becomes_magnitude_column(self, frame):
        v = visit_frame(FFTVisitor(), frame, "tone")
        kind, value = normalize_result(v, frame, ["tone"])
        assert kind == "frame"
        assert not np.iscomplexobj(value)
        np.testing.assert_allclose(value, np.abs(np.fft.fft(frame["tone"].to_numpy())), atol=1e-8)

    def test_kmeans_summary(self, frame):
        v = visit_frame(KMeansVisitor(k=2, num_of_iter=20, rng=np.random.default_rng(0)), frame, "bimodal")
        kind, value = normalize_result(v, frame, ["bimodal"])
        assert kind == "scalar"
        assert len(value["centers"]) == 2
        assert sum(c["size"] for c in value["clusters"]) == len(frame)

    def test_nan_scalars_become_none(self, frame):
        v = visit_frame(StatsVisitor(), frame.iloc[:1], "x")
        kind, value = normalize_result(v, frame.iloc[:1], ["x"])
        assert kind == "scalar"
        assert value["std"] is None


class TestRunVisitorSpecs:
    def test_demo_specs(self, frame):
        frame_results, scalar_results, meta = run_visitor_specs(frame, DEMO_SPECS)
        assert set(frame_results.columns) == {"tone_spectrum", "positive_entropy", "category_gini", "x_gelu"}
        assert set(scalar_results) == {"x_stats", "xy_regression", "bimodal_kmeans", "bimodal_affinity"}
        assert frame_results.index.equals(frame.index)
        assert scalar_results["xy_regression"]["count"] == len(frame)
        assert meta["runner"]["name"] == "run_visitor_specs"
        assert [v["key"] for v in meta["visitors"]] == [s.key for s in DEMO_SPECS]
        json.dumps(scalar_results)

    def test_duplicate_keys_rejected(self, frame):
        with pytest.raises(ValueError):
            run_visitor_specs(frame, [DEMO_SPECS[0], DEMO_SPECS[0]])

    def test_save_and_load(self, frame, tmp_path):
        frame_results, scalar_results, meta = run_visitor_specs(frame, DEMO_SPECS, save=True, out_dir=tmp_path)
        run_dir = tmp_path / meta["run_id"]
        assert (run_dir / "results.parquet").exists()
        assert (run_dir / "scalars.json").exists()
        assert (run_dir / "run_meta.json").exists()

        loaded_frame, loaded_scalars, loaded_meta = load_visitor_run(run_dir)
        pd.testing.assert_frame_equal(loaded_frame, frame_results, check_freq=False)
        assert loaded_scalars["xy_regression"]["count"] == len(frame)
        assert loaded_meta["config_hash"] == meta["config_hash"]


class TestSaveVisitorRun:
    def test_meta_only(self, tmp_path):
        run_dir, meta = save_visitor_run(run_meta={"config_hash": "abc"}, base_out_dir=tmp_path)
        assert meta["paths"]["results_parquet"] is None
        assert meta["paths"]["scalars_json"] is None
        frame_results, scalars, loaded = load_visitor_run(run_dir)
        assert frame_results is None
        assert scalars == {}
        assert loaded["run_id"] == run_dir.name


class TestTiming:
    def test_time_visitor_counts_runs(self, bimodal):
        timer = SectionTimer(sink=None)
        v = time_visitor(FFTVisitor(), bimodal.index, bimodal, timer=timer, repeat=3)
        assert len(v.get_result()) == len(bimodal)
        stats = timer.summary()["FFTVisitor"]
        assert stats["count"] == 3
        assert stats["avg"] == pytest.approx(stats["total"] / 3)

    def test_report_sink(self):
        lines = []
        timer = SectionTimer(sink=lines.append)
        with timer.section("a"):
            pass
        timer.report(title="T")
        assert lines[0] == "T"
        assert any(line.startswith("a ") for line in lines)


class TestVisualisation:
    def test_plot_spectrum(self, tone, tmp_path):
        v = visit_frame(FFTVisitor(), tone.to_frame(), "tone")
        fig = plot_spectrum(v.get_result(), save=True, out_dir=tmp_path)
        assert isinstance(fig, Figure)
        assert (tmp_path / "spectrum.png").exists()
        plt.close(fig)

    def test_save_requires_out_dir(self, tone):
        with pytest.raises(ValueError):
            plot_spectrum(np.fft.fft(tone.to_numpy()), save=True)
        plt.close("all")

    def test_plot_rolling(self, frame):
        ent = visit_frame(EntropyVisitor(roll_count=10), frame, "positive")
        fig = plot_rolling(frame["category"], result_to_series(ent.get_result(), frame, name="entropy"))
        assert isinstance(fig, Figure)
        plt.close(fig)
        fig = plot_rolling(frame["x"], [result_to_series(ent.get_result(), frame, name="entropy")])
        plt.close(fig)

    def test_plot_clusters(self, tmp_path):
        col = simulate_bimodal_column(40)
        v = visit_frame(KMeansVisitor(k=2, num_of_iter=30, rng=np.random.default_rng(0)), col.to_frame(), "bimodal")
        fig = plot_clusters(v.get_clusters(), save=True, out_dir=tmp_path, out_name="c.png")
        assert (tmp_path / "c.png").exists()
        plt.close(fig)


class TestSimulator:
    def test_frame_columns(self):
        df = simulate_frame(50)
        assert list(df.columns) == ["x", "y", "bimodal", "positive", "tone", "category"]
        assert len(df) == 50
        assert not pd.api.types.is_numeric_dtype(df["category"])
        assert (df["positive"] > 0).all()

    def test_deterministic_default(self):
        pd.testing.assert_frame_equal(simulate_frame(30), simulate_frame(30))
