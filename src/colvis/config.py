# src/colvis/config.py
"""
Build visitor specifications from plain dicts / YAML files.

Expected YAML layout
--------------------
visitors:
  - key: spectrum
    type: fft
    columns: [tone]
    params: {inverse: false}
  - key: regimes
    type: kmeans
    columns: [bimodal]
    params: {k: 2, num_of_iter: 50, distance: absolute}
"""
import logging
from pathlib import Path
from typing import Union

import numpy as np

from colvis.distance import get_distance
from colvis.exceptions import VisitorConfigError
from colvis.io import read_yaml
from colvis.specs.visitor_spec import VisitorSpec
from colvis.statistics import StatsVisitor, SumVisitor
from colvis.utils import bind_config, clean_dict, normalize_to_list, validate_config
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

VISITOR_TYPES: dict[str, type] = {
    "stats": StatsVisitor,
    "sum": SumVisitor,
    "regression": SLRegressionVisitor,
    "fft": FFTVisitor,
    "kmeans": KMeansVisitor,
    "affinity": AffinityPropVisitor,
    "entropy": EntropyVisitor,
    "impurity": ImpurityVisitor,
    "sigmoid": SigmoidVisitor,
    "rectify": RectifyVisitor,
    "loss": LossFunctionVisitor,
    "policy_loss": PolicyLearningLossVisitor,
}

# how many value columns each type consumes
N_COLUMNS: dict[str, int] = {
    "regression": 2,
    "loss": 2,
    "policy_loss": 2,
}

_ALLOWED_KEYS = ("key", "type", "columns", "params", "name")


def build_visitor_spec(entry: dict[str, object]) -> VisitorSpec:
    """
    Validate one config entry and turn it into a VisitorSpec.

    Unknown top-level keys are dropped with a warning, as are params the visitor
    constructor does not accept. `distance` may be given by name; `seed` becomes
    a numpy Generator passed as `rng`.
    """
    validate_config(entry, ["key", "type", "columns"], log_name=f"visitor entry {entry.get('key', '?')!r}")
    entry = clean_dict(entry, _ALLOWED_KEYS)

    vtype = entry["type"]
    if vtype not in VISITOR_TYPES:
        raise VisitorConfigError(f"Unknown visitor type '{vtype}'. Use one of {sorted(VISITOR_TYPES)}.")
    factory = VISITOR_TYPES[vtype]

    columns = normalize_to_list(entry["columns"], element_type=str, allow_none=False)
    expected = N_COLUMNS.get(vtype, 1)
    if len(columns) != expected:
        raise VisitorConfigError(f"Visitor '{entry['key']}' ({vtype}) needs {expected} column(s), got {columns}.")

    params = dict(entry.get("params") or {})
    if "distance" in params:
        params["distance"] = get_distance(params["distance"])
    if "seed" in params:
        params["rng"] = np.random.default_rng(params.pop("seed"))

    bound = bind_config(factory, params)
    dropped = set(params) - set(bound)
    if dropped:
        logging.warning(f"Visitor '{entry['key']}' ({vtype}) ignores params: {sorted(dropped)}")

    return VisitorSpec(
        key=str(entry["key"]),
        type=vtype,
        factory=factory,
        columns=columns,
        params=bound,
        name=str(entry.get("name", "")),
    )

def load_visitor_specs(path: Union[str, Path]) -> list[VisitorSpec]:
    """Read a YAML config and build every entry under `visitors`."""
    config = read_yaml(path) or {}
    validate_config(config, "visitors", log_name=str(path))
    specs = [build_visitor_spec(e) for e in config["visitors"]]

    keys = [s.key for s in specs]
    dupes = sorted({k for k in keys if keys.count(k) > 1})
    if dupes:
        raise VisitorConfigError(f"Duplicate visitor keys in {path}: {dupes}")
    return specs
