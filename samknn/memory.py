"""Shared sample store holding the short-term and the long-term memory.

The short-term memory (STM) grows upwards from address 0; the long-term
memory (LTM) grows downwards from the top address.  ``stm_pointer`` is the
first free STM address and ``ltm_pointer`` the first free LTM address, so the
LTM occupies ``ltm_pointer + 1 .. mem_size - 1``.

Two banks are kept.  Compacting operations write into the inactive bank and
then swap, and clustering uses the inactive bank as scratch space for
centroids.  What is left in the inactive bank therefore affects later results,
exactly as in the double-buffered original design.
"""

from __future__ import annotations

from .config import Config
from .neighbors import squared_distance

Datapoint = tuple[int, ...]


class Memory:
    """Double-buffered STM/LTM sample store with cleaning and class-wise k-means."""

    KMEANS_ITERATIONS = 100

    def __init__(self, config: Config) -> None:
        self.config = config
        self.reset()

    def reset(self) -> None:
        """Return to the empty state with zeroed banks."""
        cfg = self.config
        zero: Datapoint = (0,) * cfg.n_datapoint_dimensions
        self._data: list[list[Datapoint]] = [[zero] * cfg.mem_size for _ in range(2)]
        self._labels: list[list[int]] = [[0] * cfg.mem_size for _ in range(2)]
        self._active = 0
        self.stm_pointer = 0
        self.ltm_pointer = cfg.mem_size - 1
        self.invalid_flags: list[bool] = [False] * cfg.mem_size
        self.n_ltm_samples_per_class: list[int] = [0] * cfg.n_classes

    @property
    def stm_size(self) -> int:
        """Number of samples in the short-term memory."""
        return self.stm_pointer

    @property
    def ltm_size(self) -> int:
        """Number of samples in the long-term memory."""
        return self.config.mem_size - 1 - self.ltm_pointer

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self.config.mem_size:
            raise IndexError(f"address {address} outside memory of size {self.config.mem_size}")

    def entry(self, address: int) -> tuple[Datapoint, int]:
        """Return the datapoint and label stored at ``address`` in the active bank."""
        self._check_address(address)
        return self._data[self._active][address], self._labels[self._active][address]

    def append_stm(self, datapoint: Datapoint, label: int) -> None:
        """Store a sample at the end of the short-term memory."""
        cfg = self.config
        if len(datapoint) != cfg.n_datapoint_dimensions:
            raise ValueError(
                f"datapoint has {len(datapoint)} dimensions, expected {cfg.n_datapoint_dimensions}"
            )
        if not 0 <= label < cfg.n_classes:
            raise ValueError(f"label {label} outside 0..{cfg.n_classes - 1}")
        if self.stm_pointer >= cfg.mem_size:
            raise IndexError("memory is full")
        mask = cfg.max_datapoint_value()
        self._data[self._active][self.stm_pointer] = tuple(int(v) & mask for v in datapoint)
        self._labels[self._active][self.stm_pointer] = label
        self.stm_pointer += 1

    def invalidate(self, address: int) -> None:
        """Mark the sample at ``address`` for removal by the next :meth:`clean`."""
        self._check_address(address)
        self.invalid_flags[address] = True

    def clean(self) -> int:
        """Drop all invalidated samples, compacting both memories.

        Returns the number of samples removed from the short-term memory.
        """
        mem_size = self.config.mem_size
        read, write = self._active, 1 - self._active
        read_data, read_labels = self._data[read], self._labels[read]
        write_data, write_labels = self._data[write], self._labels[write]
        flags = self.invalid_flags

        write_addr = 0
        for address in range(self.stm_pointer):
            if flags[address]:
                flags[address] = False
                continue
            write_data[write_addr] = read_data[address]
            write_labels[write_addr] = read_labels[address]
            write_addr += 1
        n_cleaned = self.stm_pointer - write_addr
        self.stm_pointer = write_addr

        write_addr = mem_size - 1
        for address in range(mem_size - 1, self.ltm_pointer, -1):
            if flags[address]:
                self.n_ltm_samples_per_class[read_labels[address]] -= 1
                flags[address] = False
                continue
            write_data[write_addr] = read_data[address]
            write_labels[write_addr] = read_labels[address]
            write_addr -= 1
        self.ltm_pointer = write_addr

        self._active = write
        return n_cleaned

    def stm_to_ltm(self, count: int) -> None:
        """Move the ``count`` oldest STM samples to the LTM, keeping their order."""
        if not 0 <= count <= self.stm_pointer:
            raise ValueError(f"cannot move {count} samples from an STM of {self.stm_pointer}")
        if count > self.ltm_pointer + 1:
            raise ValueError(f"no room in the LTM for {count} samples")
        mem_size = self.config.mem_size
        read, write = self._active, 1 - self._active
        read_data, read_labels = self._data[read], self._labels[read]
        write_data, write_labels = self._data[write], self._labels[write]

        start = max(self.ltm_pointer, 0)
        write_data[start:mem_size] = read_data[start:mem_size]
        write_labels[start:mem_size] = read_labels[start:mem_size]

        base = self.ltm_pointer + 1 - count
        for offset in range(count):
            write_data[base + offset] = read_data[offset]
            label = read_labels[offset]
            write_labels[base + offset] = label
            self.n_ltm_samples_per_class[label] += 1

        remaining = self.stm_pointer - count
        write_data[:remaining] = read_data[count:self.stm_pointer]
        write_labels[:remaining] = read_labels[count:self.stm_pointer]

        self.stm_pointer -= count
        self.ltm_pointer -= count
        self._active = write

    def cluster_down(self) -> None:
        """Halve the LTM of every class with k-means, replacing it by the centroids."""
        cfg = self.config
        mem_size = cfg.mem_size
        n_dims = cfg.n_datapoint_dimensions
        acc_mask = (1 << (2 * cfg.datapoint_bits)) - 1
        value_mask = cfg.max_datapoint_value()
        max_dist = cfg.max_dist()

        bounds = [0]
        for count in self.n_ltm_samples_per_class:
            bounds.append(bounds[-1] + (count + 1) // 2)
        total = bounds[-1]

        data = self._data[self._active]
        labels = self._labels[self._active]
        centroids = self._data[1 - self._active]

        # Seed centroids from the LTM; the slot cursor advances once per
        # dimension, so only some centroids are seeded and the rest keep
        # whatever the scratch bank already holds.
        next_slot = bounds[:-1]
        fill_start = self.ltm_pointer if self.ltm_pointer >= 0 else mem_size
        for address in range(fill_start, mem_size):
            label = labels[address]
            slot = next_slot[label]
            if slot < bounds[label + 1]:
                centroids[slot] = data[address]
                next_slot[label] += n_dims

        for _ in range(self.KMEANS_ITERATIONS):
            acc = [[0] * n_dims for _ in range(total + 1)]
            contributors = [0] * (total + 1)
            for address in range(self.ltm_pointer + 1, mem_size):
                point = data[address]
                label = labels[address]
                closest_dist = max_dist
                closest = bounds[label]
                for idx in range(bounds[label], bounds[label + 1]):
                    dist = squared_distance(point, centroids[idx])
                    if dist < closest_dist:
                        closest_dist = dist
                        closest = idx
                row = acc[closest]
                for dim, value in enumerate(point):
                    row[dim] = (row[dim] + value) & acc_mask
                contributors[closest] += 1
            for idx in range(total):
                n = contributors[idx] or 1
                centroids[idx] = tuple((v // n) & value_mask for v in acc[idx])

        label = 0
        for idx in range(total):
            while idx == bounds[label + 1]:
                label += 1
            data[mem_size - 1 - idx] = centroids[idx]
            labels[mem_size - 1 - idx] = label

        self.ltm_pointer = mem_size - 1 - total
        self.n_ltm_samples_per_class = [
            bounds[i + 1] - bounds[i] for i in range(cfg.n_classes)
        ]