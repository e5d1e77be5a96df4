# src/colvis/visitors/affinity.py
"""
Affinity propagation: exemplar selection by message passing, no fixed k.

Every call rebuilds dense N x N similarity, responsibility and availability
tables, so memory and time per iteration are O(N^2). Intended for columns
where that is affordable.
"""
import logging
import numpy as np

from colvis.distance import DistanceFunc, pairwise, squared_euclidean
from colvis.exceptions import VisitorConfigError
from colvis.specs.clusters import Cluster, ColumnView
from colvis.utils import as_float_column, validate_same_length


# ---------------- Message passing ----------------

def similarity_matrix(values: np.ndarray, distance: DistanceFunc = squared_euclidean) -> np.ndarray:
    """
    Negated pairwise distances, symmetric by construction.

    Only the upper triangle is evaluated and mirrored. The diagonal (the
    preference of each point to be an exemplar) is set to the minimum
    off-diagonal similarity.
    """
    n = len(values)
    simil = np.zeros((n, n), dtype="float64")
    if n < 2:
        return simil

    iu, ju = np.triu_indices(n, k=1)
    upper = -np.asarray(distance(values[iu], values[ju]), dtype="float64")
    simil[iu, ju] = upper
    simil[ju, iu] = upper
    np.fill_diagonal(simil, upper.min())
    return simil

def update_responsibility(
    simil: np.ndarray,
    avail: np.ndarray,
    respon: np.ndarray,
    damping: float
) -> np.ndarray:
    """
    r(i, j) = s(i, j) - max_{j' != j} (s(i, j') + a(i, j')), damped.
    """
    n = len(simil)
    cand = simil + avail
    rows = np.arange(n)

    # best and runner-up per row; the column holding the best uses the runner-up
    first_idx = np.argmax(cand, axis=1)
    first = cand[rows, first_idx]
    masked = cand.copy()
    masked[rows, first_idx] = -np.inf
    second = masked.max(axis=1)

    max_other = np.repeat(first[:, None], n, axis=1)
    max_other[rows, first_idx] = second

    return (1.0 - damping) * (simil - max_other) + damping * respon

def update_availability(
    respon: np.ndarray,
    avail: np.ndarray,
    damping: float
) -> np.ndarray:
    """
    a(j, j) = sum_{i' != j} max(0, r(i', j))
    a(i, j) = min(0, r(j, j) + sum_{i' not in {i, j}} max(0, r(i', j)))   for i != j
    both damped.
    """
    pos = np.maximum(respon, 0.0)
    np.fill_diagonal(pos, 0.0)
    col_sums = pos.sum(axis=0)

    cand = np.minimum(0.0, np.diag(respon)[None, :] + col_sums[None, :] - pos)
    np.fill_diagonal(cand, col_sums)

    return (1.0 - damping) * cand + damping * avail


# ---------------- Visitor ----------------

class AffinityPropVisitor:
    """
    Choose exemplars (centers taken from the data itself) by affinity propagation.

    A point is an exemplar iff r(i, i) + a(i, i) > 0 after the last iteration.
    NaN values are excluded from the tables. The number of exemplars is data
    dependent and may be zero.

    Parameters
    ----------
    num_of_iter : int
        Number of message-passing rounds.
    distance : callable, default squared_euclidean
        Elementwise distance over broadcast numpy arrays.
    damping_factor : float, default 0.9
        Blend weight of the previous message, in [0, 1). Undamped updates oscillate.
    """

    def __init__(
        self,
        num_of_iter: int,
        distance: DistanceFunc = squared_euclidean,
        damping_factor: float = 0.9
    ):
        if not 0.0 <= damping_factor < 1.0:
            raise VisitorConfigError(f"damping_factor must be in [0, 1), got {damping_factor}.")
        if num_of_iter < 0:
            raise VisitorConfigError(f"num_of_iter must be non-negative, got {num_of_iter}.")
        self.num_of_iter = int(num_of_iter)
        self.distance = distance
        self.damping_factor = float(damping_factor)

        self._result = ColumnView(column=np.array([], dtype="float64"), positions=np.array([], dtype=np.int64))
        self._self_evidence = np.array([], dtype="float64")

    def pre(self) -> None:
        self._result = ColumnView(column=np.array([], dtype="float64"), positions=np.array([], dtype=np.int64))
        self._self_evidence = np.array([], dtype="float64")

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        valid = np.flatnonzero(~np.isnan(col))
        points = col[valid]
        n = len(points)
        if n == 0:
            return

        simil = similarity_matrix(points, self.distance)
        if n == 1 or np.ptp(points) == 0.0:
            # one repeated value; messages cannot break the tie
            logging.debug(f"Affinity propagation on {n} indistinguishable point(s); first point is the exemplar")
            self._self_evidence = np.zeros(n, dtype="float64")
            self._result = ColumnView(column=col, positions=valid[:1])
            return

        avail = np.zeros((n, n), dtype="float64")
        respon = np.zeros((n, n), dtype="float64")
        for _ in range(self.num_of_iter):
            respon = update_responsibility(simil, avail, respon, self.damping_factor)
            avail = update_availability(respon, avail, self.damping_factor)

        self._self_evidence = np.diag(respon) + np.diag(avail)
        exemplars = np.flatnonzero(self._self_evidence > 0.0)
        logging.debug(f"Affinity propagation found {len(exemplars)} exemplar(s) among {n} points")
        self._result = ColumnView(column=col, positions=valid[exemplars])

    def post(self) -> None:
        pass

    def get_result(self) -> ColumnView:
        """View over the exemplar positions of the last consumed column."""
        return self._result

    def get_self_evidence(self) -> np.ndarray:
        """r(i, i) + a(i, i) per non-NaN point of the last run."""
        return self._self_evidence

    def get_clusters(self, index, values) -> list[Cluster]:
        """
        Assign every non-NaN value of the column to its nearest exemplar.

        Returns an empty list when no exemplars were found.
        """
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        centers = self._result.values()
        if len(centers) == 0:
            return []

        valid = np.flatnonzero(~np.isnan(col))
        if len(valid):
            assignments = np.argmin(pairwise(self.distance, col[valid], centers), axis=1)
        else:
            assignments = np.array([], dtype=np.int64)

        return [
            Cluster(
                label=c,
                center=float(centers[c]),
                members=ColumnView(column=col, positions=valid[assignments == c]),
            )
            for c in range(len(centers))
        ]
