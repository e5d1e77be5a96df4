# src/colvis/visitors/kmeans.py
"""
K-means clustering of a single column.
"""
import logging
import numpy as np

from colvis.distance import DistanceFunc, pairwise, squared_euclidean
from colvis.exceptions import VisitorConfigError
from colvis.specs.clusters import Cluster, ColumnView
from colvis.utils import as_float_column, validate_same_length

# a center moving less than this (under the distance function) counts as settled
_CONVERGENCE_TOL = 1e-7


class KMeansVisitor:
    """
    Partition the non-NaN values of a column into `k` clusters.

    Centers are seeded from `k` randomly sampled non-NaN values and refined for at
    most `num_of_iter` assign/update passes, stopping early once no center moves
    by more than 1e-7.

    Parameters
    ----------
    k : int
        Number of clusters, fixed for the visitor's lifetime.
    num_of_iter : int
        Iteration cap; hitting it is not an error, the last state is kept.
    calc_clusters : bool, default True
        Also materialize the clusters after convergence.
    distance : callable, default squared_euclidean
        Elementwise distance over broadcast numpy arrays.
    rng : numpy.random.Generator, optional
        Source for seeding. When omitted a fresh, OS-seeded generator is drawn
        on every call, so repeated runs are not reproducible.
    """

    def __init__(
        self,
        k: int,
        num_of_iter: int,
        calc_clusters: bool = True,
        distance: DistanceFunc = squared_euclidean,
        rng: np.random.Generator | None = None
    ):
        if k < 1:
            raise VisitorConfigError(f"k must be at least 1, got {k}.")
        if num_of_iter < 0:
            raise VisitorConfigError(f"num_of_iter must be non-negative, got {num_of_iter}.")
        self.k = int(k)
        self.num_of_iter = int(num_of_iter)
        self.calc_clusters = calc_clusters
        self.distance = distance
        self.rng = rng

        self._result = np.full(self.k, np.nan, dtype="float64")
        self._clusters: list[Cluster] = []
        self._inertia: list[float] = []
        self._n_iter = 0

    # ---------------- lifecycle ----------------

    def pre(self) -> None:
        self._result = np.full(self.k, np.nan, dtype="float64")
        self._clusters = []
        self._inertia = []
        self._n_iter = 0

    def __call__(self, index, values) -> None:
        col = as_float_column(values)
        validate_same_length(index, col, names=("index", "values"))
        if len(col) == 0:
            return

        self._calc_k_means(col)
        if self.calc_clusters:
            self._calc_clusters(col)

    def post(self) -> None:
        pass

    # ---------------- accessors ----------------

    def get_result(self) -> np.ndarray:
        """The k centers."""
        return self._result

    def get_clusters(self) -> list[Cluster]:
        return self._clusters

    def get_inertia_history(self) -> list[float]:
        """Total within-cluster distance after each assignment pass."""
        return self._inertia

    def get_iterations(self) -> int:
        return self._n_iter

    # ---------------- internals ----------------

    def _seed(self, points: np.ndarray) -> None:
        """Draw the k starting centers from the non-NaN values."""
        self._result = np.full(self.k, np.nan, dtype="float64")
        if len(points) == 0:
            return
        rng = self.rng if self.rng is not None else np.random.default_rng()
        self._result = points[rng.integers(0, len(points), size=self.k)].astype("float64")

    def _assign(self, points: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Nearest center per point; argmin keeps the lowest cluster index on ties."""
        dist = pairwise(self.distance, points, self._result)
        best = np.argmin(dist, axis=1)
        return best, dist[np.arange(len(points)), best]

    def _calc_k_means(self, col: np.ndarray) -> None:
        points = col[~np.isnan(col)]
        self._seed(points)
        if len(points) == 0:
            return

        for it in range(self.num_of_iter):
            assignments, best_dist = self._assign(points)
            self._inertia.append(float(best_dist.sum()))

            sums = np.bincount(assignments, weights=points, minlength=self.k)
            counts = np.bincount(assignments, minlength=self.k)
            # 0/0 becomes 0/1; an empty cluster keeps its center
            new_means = np.where(counts > 0, sums / np.maximum(counts, 1), self._result)

            moved = np.asarray(self.distance(new_means, self._result), dtype="float64") > _CONVERGENCE_TOL
            self._result = np.where(moved, new_means, self._result)
            self._n_iter = it + 1
            if not moved.any():
                logging.debug(f"k-means (k={self.k}) converged after {self._n_iter} iterations")
                return

        logging.debug(f"k-means (k={self.k}) stopped at the iteration cap ({self.num_of_iter})")

    def _calc_clusters(self, col: np.ndarray) -> None:
        valid = np.flatnonzero(~np.isnan(col))
        if len(valid):
            assignments, _ = self._assign(col[valid])
        else:
            assignments = np.array([], dtype=np.int64)

        self._clusters = [
            Cluster(
                label=c,
                center=float(self._result[c]),
                members=ColumnView(column=col, positions=valid[assignments == c]),
            )
            for c in range(self.k)
        ]
