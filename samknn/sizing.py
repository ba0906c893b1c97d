"""Choosing the short-term memory size from candidate accuracies."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from fractions import Fraction


def generate_candidate_sizes(
    cur_size: int, min_stm_size: int, max_candidates: int
) -> list[int]:
    """Return ``cur_size`` and its successive halvings not below ``min_stm_size``.

    At most ``max_candidates`` sizes are produced.
    """
    sizes: list[int] = []
    size = cur_size
    for _ in range(max_candidates):
        if size >= min_stm_size:
            sizes.append(size)
        size //= 2
    return sizes


def get_optimal_size(
    candidate_scores: Sequence[int], candidate_sizes: Sequence[int], k_neighbors: int
) -> int:
    """Return the size whose score per evaluated sample is strictly highest.

    A candidate of size ``n`` was evaluated on ``n - k_neighbors`` samples.
    When no candidate scores above zero, 1 is returned.
    """
    best_score = Fraction(0)
    best_size = 1
    for score, size in zip(candidate_scores, candidate_sizes):
        evaluated = size - k_neighbors
        if evaluated <= 0:
            raise ValueError(f"candidate size {size} must exceed k={k_neighbors}")
        normalized = Fraction(score, evaluated)
        if normalized > best_score:
            best_score = normalized
            best_size = size
    return best_size


class PerformanceCounter:
    """Per-candidate accuracy counters with a history of their outcomes."""

    def __init__(self, n_counters: int, mem_size: int) -> None:
        if n_counters < 1:
            raise ValueError("n_counters must be positive")
        self.n_counters = n_counters
        self.mem_size = mem_size
        self.reset()

    def reset(self) -> None:
        """Mark every counter as absent and forget all outcomes."""
        self.start_addresses: list[int] = [self.mem_size] * self.n_counters
        self.candidate_scores: list[int] = [0] * self.n_counters
        self._histories: list[deque[bool]] = [deque() for _ in range(self.n_counters)]

    def add(
        self, scores: Sequence[bool], address: int, cutoff_addresses: Sequence[int]
    ) -> None:
        """Add ``scores`` to every counter whose cutoff is at or before ``address``."""
        for idx, (score, cutoff) in enumerate(zip(scores, cutoff_addresses)):
            if cutoff <= address:
                self.candidate_scores[idx] += int(score)

    def append(self, idx: int, correct: bool) -> None:
        """Record an outcome in the history of counter ``idx``."""
        self._histories[idx].append(bool(correct))

    def pop(self, idx: int) -> bool:
        """Remove and return the oldest outcome of counter ``idx``."""
        history = self._histories[idx]
        if not history:
            raise IndexError(f"history of counter {idx} is empty")
        return history.popleft()

    def history_length(self, idx: int) -> int:
        """Number of outcomes recorded for counter ``idx``."""
        return len(self._histories[idx])