"""
K-means cluster bookkeeping for dominant color estimation.

A ClusterGroup stores every cluster's centroid together with the running
sums and pixel counts of the current assignment round. The arrays are
allocated once, when the group is built from its seed colors, and are
reset in place at the start of each round.
"""

from typing import Iterable, Iterator, List, NamedTuple, Sequence, Tuple

import numpy as np

RGB = Tuple[int, int, int]


class Cluster(NamedTuple):
    """Read-only view of one cluster after a round."""
    centroid: RGB
    weight: int


class ClusterGroup:
    """Fixed-size, ordered group of RGB k-means clusters."""

    def __init__(self, seeds: Iterable[Sequence[int]] = ()):
        self._centroids = np.array([tuple(seed) for seed in seeds], dtype=np.int64).reshape(-1, 3)
        self._aggregate = np.zeros_like(self._centroids)
        self._counts = np.zeros(len(self._centroids), dtype=np.int64)

    def __len__(self) -> int:
        return len(self._centroids)

    def __iter__(self) -> Iterator[Cluster]:
        for i in range(len(self)):
            yield self[i]

    def __getitem__(self, index: int) -> Cluster:
        r, g, b = (int(c) for c in self._centroids[index])
        return Cluster(centroid=(r, g, b), weight=int(self._counts[index]))

    @property
    def centroids(self) -> List[RGB]:
        return [cluster.centroid for cluster in self]

    @property
    def weights(self) -> List[int]:
        return [int(n) for n in self._counts]

    def reset(self) -> None:
        """Zero the per-round accumulators, keeping centroids."""
        self._aggregate.fill(0)
        self._counts.fill(0)

    def closest(self, colors: np.ndarray) -> np.ndarray:
        """
        Index of the nearest centroid for each color.

        Distance is squared Euclidean in RGB space. Ties resolve to the
        earliest cluster in group order.

        Args:
            colors: (N, 3) integer RGB values

        Returns:
            (N,) array of cluster indices
        """
        colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
        diff = colors[:, None, :] - self._centroids[None, :, :]
        distances = np.einsum("nkc,nkc->nk", diff, diff)
        # argmin returns the first minimum, which gives the tie-break
        return np.argmin(distances, axis=1)

    def add_points(self, colors: np.ndarray, labels: np.ndarray) -> None:
        """Accumulate colors into the clusters named by labels."""
        colors = np.asarray(colors, dtype=np.int64).reshape(-1, 3)
        np.add.at(self._aggregate, labels, colors)
        self._counts += np.bincount(labels, minlength=len(self))

    def recompute_centroids(self) -> bool:
        """
        Move every populated cluster to the mean of its accumulated pixels.

        Clusters that received no pixels keep their centroid.

        Returns:
            True if no centroid changed (the group has converged)
        """
        populated = self._counts > 0
        if not np.any(populated):
            return True

        means = self._aggregate[populated] // self._counts[populated, None]
        converged = bool(np.array_equal(means, self._centroids[populated]))
        self._centroids[populated] = means
        return converged

    def by_weight(self) -> List[Cluster]:
        """Clusters ordered by weight, heaviest first; ties keep group order."""
        order = np.argsort(-self._counts, kind="stable")
        return [self[int(i)] for i in order]
