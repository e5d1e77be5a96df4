#!/usr/bin/env python3
"""
run_visitors.py — Apply the visitors listed in a YAML config to the columns of a CSV/Parquet file.
"""


import argparse
from pathlib import Path
import logging
import pandas as pd

from colvis.log_utils import setup_logging
from colvis.config import load_visitor_specs
from colvis.pipelines.column_report import run_visitor_specs
from colvis.simulator.columns import simulate_frame


# ---------------- CLI ----------------

def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Apply configured column visitors to a table and save the results.")
    p.add_argument("--input", type=str, default=None, help="CSV or Parquet file. Omit to use a simulated frame.")
    p.add_argument("--config", type=str, default="config/visitors.yaml", help="YAML file with a 'visitors' list.")
    p.add_argument("--index-col", type=str, default=None, help="Column to use as the index (CSV only).")
    p.add_argument("--out-dir", type=str, default=None, help="Root for run folders (default: outputs/visitor_runs).")
    p.add_argument("--no-save", action="store_true", help="Only log the results.")
    p.add_argument("--verbose", action="store_true")
    return p.parse_args()

# ---------------- Helpers ----------------

def load_table(path: str, index_col: str | None = None) -> pd.DataFrame:
    p = Path(path)
    if p.suffix == ".parquet":
        return pd.read_parquet(p)
    if p.suffix == ".csv":
        return pd.read_csv(p, index_col=index_col)
    raise ValueError(f"Unsupported input format '{p.suffix}', expected .csv or .parquet.")


# ---------------- Main ----------------

def main():
    args = parse_args()
    setup_logging(verbose=args.verbose)

    specs = load_visitor_specs(args.config)
    logging.info(f"Loaded {len(specs)} visitor spec(s) from {args.config}")

    if args.input is None:
        df = simulate_frame()
        logging.info(f"No --input given, using a simulated frame of {len(df)} rows")
    else:
        df = load_table(args.input, index_col=args.index_col)
        logging.info(f"Loaded {len(df)} rows x {df.shape[1]} columns from {args.input}")

    frame_results, scalar_results, meta = run_visitor_specs(
        df,
        specs,
        save=not args.no_save,
        out_dir=Path(args.out_dir) if args.out_dir else None,
    )

    for key, value in scalar_results.items():
        logging.info(f"[{key}] {value}")
    if not frame_results.empty:
        logging.info(f"Column results (tail):\n{frame_results.tail()}")
    if "run_id" in meta:
        logging.info(f"Run id: {meta['run_id']}")



if __name__ == "__main__":
    main()
