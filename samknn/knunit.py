"""Nearest-neighbour search over address ranges of the sample memory."""

from __future__ import annotations

from collections.abc import Sequence

from .memory import Memory
from .neighbors import (
    KBestCollector,
    best_class,
    combine_runs,
    farthest_correct,
    squared_distance,
)


class KNUnit:
    """Runs k-nearest-neighbour queries against a :class:`Memory`."""

    def __init__(self, memory: Memory) -> None:
        self.memory = memory
        self.config = memory.config

    def run(
        self, ref_datapoint: Sequence[int], address_start: int, address_end: int
    ) -> tuple[list[int], list[int]]:
        """Return the distances and labels of the ``k`` nearest samples.

        Only addresses ``address_start <= a < address_end`` are searched.
        Unfilled slots carry the maximum distance and label 0.
        """
        cfg = self.config
        k = cfg.k_neighbors
        max_dist = cfg.max_dist()
        n_runs = cfg.n_parallel_runs
        start = max(address_start, 0)
        end = min(address_end, cfg.mem_size)

        collectors = [KBestCollector(k, max_dist) for _ in range(n_runs)]
        for run, collector in enumerate(collectors):
            for address in range(start + run, end, n_runs):
                point, label = self.memory.entry(address)
                collector.append(squared_distance(ref_datapoint, point), label)

        if n_runs == 1:
            only = collectors[0]
            return list(only.dists), list(only.labels)
        labels, dists = combine_runs(collectors, k, max_dist)
        return dists, labels

    def predict_correct(
        self,
        ref_datapoint: Sequence[int],
        ref_label: int,
        address_start: int,
        address_end: int,
    ) -> bool:
        """Tell whether a majority vote over the range predicts ``ref_label``."""
        _, labels = self.run(ref_datapoint, address_start, address_end)
        return best_class(labels) == ref_label

    def clean(
        self,
        ref_datapoint: Sequence[int],
        ref_label: int,
        address_start: int,
        address_end: int,
        clean_address_start: int,
        clean_address_end: int,
    ) -> bool:
        """Invalidate conflicting samples around ``ref_datapoint``.

        The radius is the distance of the farthest neighbour in the search range
        that carries ``ref_label``.  Every sample in the clean range with a
        different label within that radius is invalidated.  Returns whether
        anything was invalidated.
        """
        dists, labels = self.run(ref_datapoint, address_start, address_end)
        max_dist, found = farthest_correct(ref_label, labels, dists)
        if not found:
            return False

        invalidated = False
        start = max(clean_address_start, 0)
        end = min(clean_address_end, self.config.mem_size)
        for address in range(start, end):
            point, label = self.memory.entry(address)
            if label == ref_label:
                continue
            if squared_distance(ref_datapoint, point) > max_dist:
                continue
            self.memory.invalidate(address)
            invalidated = True
        return invalidated