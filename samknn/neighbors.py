"""Building blocks of the k-nearest-neighbour search."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence


def best_class(labels: Iterable[int]) -> int:
    """Return the majority label; on a tie the first label to reach the top count wins."""
    counts: Counter[int] = Counter()
    max_count = 0
    max_label = 0
    for label in labels:
        counts[label] += 1
        if counts[label] > max_count:
            max_count = counts[label]
            max_label = label
    return max_label


def squared_distance(a: Sequence[int], b: Sequence[int]) -> int:
    """Squared Euclidean distance of two datapoints."""
    return sum((x - y) * (x - y) for x, y in zip(a, b, strict=True))


def farthest_correct(
    ref_label: int, labels: Sequence[int], dists: Sequence[int]
) -> tuple[int, bool]:
    """Return the largest distance among neighbours labelled ``ref_label``.

    The second element tells whether any such neighbour exists.
    """
    max_dist = 0
    found = False
    for label, dist in zip(labels, dists, strict=True):
        if label == ref_label and dist >= max_dist:
            max_dist = dist
            found = True
    return max_dist, found


class KBestCollector:
    """Keeps the ``k`` closest (distance, label) pairs seen so far, sorted by distance."""

    def __init__(self, k: int, max_dist: int) -> None:
        if k < 1:
            raise ValueError("k must be positive")
        self.dists: list[int] = [max_dist] * k
        self.labels: list[int] = [0] * k

    def append(self, dist: int, label: int) -> None:
        """Insert a candidate; it goes after any entries at the same distance."""
        insert_idx = next(
            (i for i, current in enumerate(self.dists) if dist < current), None
        )
        if insert_idx is None:
            return
        self.dists.insert(insert_idx, dist)
        self.labels.insert(insert_idx, label)
        self.dists.pop()
        self.labels.pop()

    def __len__(self) -> int:
        return len(self.dists)


def combine_runs(
    collectors: Sequence[KBestCollector], k: int, max_dist: int
) -> tuple[list[int], list[int]]:
    """Merge several sorted collectors into the ``k`` best labels and distances.

    At each step the run with the strictly smallest head distance is taken;
    the first run is taken when none is below ``max_dist``.
    """
    if not collectors:
        raise ValueError("at least one collector is required")
    positions = [0] * len(collectors)
    labels_out: list[int] = []
    dists_out: list[int] = []
    for _ in range(k):
        closest_dist = max_dist
        closest_run = 0
        for run, (collector, pos) in enumerate(zip(collectors, positions)):
            if pos < len(collector) and collector.dists[pos] < closest_dist:
                closest_dist = collector.dists[pos]
                closest_run = run
        collector = collectors[closest_run]
        pos = positions[closest_run]
        if pos >= len(collector):
            raise ValueError("collectors hold fewer than k entries")
        labels_out.append(collector.labels[pos])
        dists_out.append(collector.dists[pos])
        positions[closest_run] += 1
    return labels_out, dists_out


def merge_k_best(
    labels0: Sequence[int],
    dists0: Sequence[int],
    labels1: Sequence[int],
    dists1: Sequence[int],
) -> list[int]:
    """Merge two sorted neighbour lists into the labels of the overall ``k`` best.

    ``k`` is the length of the first list; on equal distances the second list wins.
    """
    k = len(labels0)
    idx0 = idx1 = 0
    out: list[int] = []
    for _ in range(k):
        take_first = idx1 >= len(dists1) or (
            idx0 < len(dists0) and dists0[idx0] < dists1[idx1]
        )
        if take_first:
            out.append(labels0[idx0])
            idx0 += 1
        else:
            out.append(labels1[idx1])
            idx1 += 1
    return out