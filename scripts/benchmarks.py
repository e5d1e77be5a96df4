#!/usr/bin/env python3
"""
benchmarks.py — Time the FFT paths (radix-2 vs Bluestein) and the clustering engines on simulated columns.
"""


import argparse
from pathlib import Path
import logging
import numpy as np
import pandas as pd

import seaborn as sns
import matplotlib.pyplot as plt

from colvis.log_utils import setup_logging
from colvis.timing import SectionTimer, time_visitor
from colvis.visitors import FFTVisitor, KMeansVisitor, AffinityPropVisitor
from colvis.simulator.columns import simulate_tone, simulate_bimodal_column


# ---------------- CLI ----------------

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Time the FFT and clustering visitors.")
    p.add_argument("--max-log2", type=int, default=14, help="Largest FFT length is 2**max_log2.")
    p.add_argument("--repeat", type=int, default=5, help="Runs per timed section.")
    p.add_argument("--out-dir", type=str, default="results/benchmarks", help="Root for benchmark results.")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()

# ---------------- Helpers ----------------

def bench_fft(timer: SectionTimer, max_log2: int, repeat: int) -> pd.DataFrame:
    """Power-of-two length n against n - 1, which takes the Bluestein path."""
    rows = []
    for e in range(4, max_log2 + 1):
        for n, path in ((2 ** e, "radix-2"), (2 ** e - 1, "bluestein")):
            col = simulate_tone(n, freqs=(3, 11))
            label = f"fft {path} n={n}"
            time_visitor(FFTVisitor(), col.index, col, timer=timer, name=label, repeat=repeat)
            rows.append({"n": n, "path": path, "seconds": timer.summary()[label]["avg"]})
    return pd.DataFrame(rows)

def bench_clustering(timer: SectionTimer, repeat: int) -> None:
    rng = np.random.default_rng(7)
    for n_per_mode in (50, 200, 1000):
        col = simulate_bimodal_column(n_per_mode, rng=rng)
        time_visitor(
            KMeansVisitor(k=2, num_of_iter=100, rng=rng), col.index, col,
            timer=timer, name=f"kmeans n={len(col)}", repeat=repeat
        )
    # quadratic tables, so keep it small
    for n_per_mode in (25, 100, 250):
        col = simulate_bimodal_column(n_per_mode, rng=rng)
        time_visitor(
            AffinityPropVisitor(num_of_iter=100), col.index, col,
            timer=timer, name=f"affinity n={len(col)}", repeat=repeat
        )


# ---------------- Main ----------------

def main():
    args = parse_args()
    setup_logging(verbose=args.verbose)

    timer = SectionTimer()
    fft_times = bench_fft(timer, args.max_log2, args.repeat)
    bench_clustering(timer, args.repeat)
    timer.report()

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / "fft_timings.csv"
    fft_times.to_csv(out, index=False)
    logging.info(f"Wrote FFT timings to {out}")

    # plotting
    plt.figure(figsize=(10, 5))
    ax = sns.lineplot(data=fft_times, x="n", y="seconds", hue="path", marker="o")
    ax.set_xscale("log", base=2)
    ax.set_yscale("log")
    ax.set_xlabel("Column length")
    ax.set_ylabel("Seconds per transform")
    ax.set_title("FFT: radix-2 vs Bluestein")

    plt.tight_layout()
    fig_path = out_dir / "fft_timings.png"
    plt.savefig(fig_path, dpi=150)
    plt.close()
    logging.info(f"Wrote plot to {fig_path}")



if __name__ == "__main__":
    main()
