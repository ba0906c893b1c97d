"""Model parameters and the quantities derived from them."""

from __future__ import annotations

from dataclasses import dataclass


def calculate_bits(max_value: int) -> int:
    """Return the smallest number of bits ``b`` with ``2 ** b >= max_value``."""
    if max_value <= 1:
        return 0
    return (max_value - 1).bit_length()


@dataclass(frozen=True)
class Config:
    """Input format, model size and optimisation settings of a SAM-kNN model."""

    datapoint_bits: int = 8
    n_datapoint_dimensions: int = 2
    n_classes: int = 4
    k_neighbors: int = 5
    mem_size: int = 5000
    min_stm_size: int = 50
    max_ltm_size: int = 2000
    n_parallel_runs: int = 1
    max_acc_approx: bool = True

    def __post_init__(self) -> None:
        positive = {
            "datapoint_bits": self.datapoint_bits,
            "n_datapoint_dimensions": self.n_datapoint_dimensions,
            "n_classes": self.n_classes,
            "k_neighbors": self.k_neighbors,
            "mem_size": self.mem_size,
            "min_stm_size": self.min_stm_size,
            "max_ltm_size": self.max_ltm_size,
            "n_parallel_runs": self.n_parallel_runs,
        }
        for name, value in positive.items():
            if value < 1:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_ltm_size > self.mem_size:
            raise ValueError("max_ltm_size must not exceed mem_size")
        if self.min_stm_size > self.mem_size:
            raise ValueError("min_stm_size must not exceed mem_size")

    def max_candidate_sizes(self) -> int:
        """Number of halvings of the memory size that stay above the STM minimum."""
        return calculate_bits(self.mem_size) - calculate_bits(self.min_stm_size) + 1

    def dist_bits(self) -> int:
        """Width of a squared distance value."""
        return (self.datapoint_bits + 1) * 2 + calculate_bits(self.n_datapoint_dimensions)

    def max_dist(self) -> int:
        """Largest representable distance, used as the 'no neighbour' marker."""
        return (1 << self.dist_bits()) - 1

    def label_bits(self) -> int:
        """Width of a class label."""
        return calculate_bits(self.n_classes)

    def max_datapoint_value(self) -> int:
        """Largest value a single datapoint component can hold."""
        return (1 << self.datapoint_bits) - 1