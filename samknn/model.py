"""Self-adjusting memory k-nearest-neighbour classifier (SAM-kNN)."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .config import Config
from .histories import PredictionHistories
from .knunit import KNUnit
from .memory import Memory
from .sizing import PerformanceCounter, generate_candidate_sizes, get_optimal_size


class SAMkNN:
    """Online classifier that predicts each sample, then learns from it.

    Samples enter a short-term memory (STM).  When the STM is better served by a
    shorter window, its oldest part is moved to the long-term memory (LTM).  The
    LTM is compressed class-wise with k-means when both memories collide.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config if config is not None else Config()
        self.memory = Memory(self.config)
        self.knunit = KNUnit(self.memory)
        self.histories = PredictionHistories()
        self.counter = PerformanceCounter(
            self.config.max_candidate_sizes(), self.config.mem_size
        )

    def reset(self) -> None:
        """Forget every sample, outcome and performance counter."""
        self.memory.reset()
        self.histories = PredictionHistories()
        self.counter.reset()

    def _validate(self, datapoint: Sequence[int], ref_label: int) -> tuple[int, ...]:
        cfg = self.config
        if len(datapoint) != cfg.n_datapoint_dimensions:
            raise ValueError(
                f"datapoint has {len(datapoint)} dimensions, "
                f"expected {cfg.n_datapoint_dimensions}"
            )
        if not 0 <= ref_label < cfg.n_classes:
            raise ValueError(f"label {ref_label} outside 0..{cfg.n_classes - 1}")
        mask = cfg.max_datapoint_value()
        return tuple(int(v) & mask for v in datapoint)

    def predict_train(self, datapoint: Sequence[int], ref_label: int) -> int:
        """Predict the label of ``datapoint``, then train on it with ``ref_label``."""
        cfg = self.config
        point = self._validate(datapoint, ref_label)
        memory, knunit = self.memory, self.knunit

        # (1) Predict with the STM, the LTM and both combined.
        stm_end = memory.stm_pointer
        stm_dists, stm_labels = knunit.run(point, 0, stm_end)
        ltm_dists, ltm_labels = knunit.run(point, memory.ltm_pointer + 1, cfg.mem_size)
        prediction = self.histories.get_output(
            stm_labels, stm_dists, ltm_labels, ltm_dists, ref_label
        )

        # (2) Learn the sample.
        memory.append_stm(point, ref_label)

        # (3) Keep the STM and the LTM apart.
        self._prevent_collision()

        # (4) Clean the LTM with the latest sample.
        stm_end_exclude_latest = memory.stm_pointer - 1
        if knunit.clean(
            point,
            ref_label,
            0,
            stm_end_exclude_latest,
            memory.ltm_pointer + 1,
            cfg.mem_size,
        ):
            memory.clean()

        # (5) Try candidate STM sizes and apply the best one.
        self._adapt_stm_size(point, ref_label, stm_end, stm_end_exclude_latest)
        return prediction

    def _prevent_collision(self) -> None:
        cfg = self.config
        memory = self.memory
        if memory.stm_pointer <= memory.ltm_pointer:
            return
        ltm_room = cfg.mem_size - memory.ltm_pointer
        if ltm_room < cfg.max_ltm_size:
            enlarge_by = cfg.max_ltm_size - ltm_room
            memory.stm_to_ltm(enlarge_by)
            self.histories.shorten_history(enlarge_by)
            self.counter.reset()
        memory.cluster_down()

    def _update_counter(
        self,
        idx: int,
        start_addr: int,
        point: Sequence[int],
        ref_label: int,
        stm_end: int,
        stm_end_exclude_latest: int,
    ) -> None:
        cfg = self.config
        counter, knunit, memory = self.counter, self.knunit, self.memory
        approx = cfg.max_acc_approx

        if counter.start_addresses[idx] == start_addr:
            correct = knunit.predict_correct(
                point, ref_label, start_addr, stm_end_exclude_latest
            )
            counter.candidate_scores[idx] += int(correct)
            if approx:
                counter.append(idx, correct)
        elif approx and counter.start_addresses[idx] == start_addr - 1:
            counter.start_addresses[idx] += 1
            correct = knunit.predict_correct(
                point, ref_label, start_addr, stm_end_exclude_latest
            )
            counter.candidate_scores[idx] += int(correct)
            counter.append(idx, correct)
            counter.candidate_scores[idx] -= int(counter.pop(idx))
        else:
            score = 0
            for end_addr in range(start_addr + cfg.k_neighbors, stm_end + 1):
                sample, label = memory.entry(end_addr)
                correct = knunit.predict_correct(sample, label, start_addr, end_addr - 1)
                score += int(correct)
                if approx:
                    counter.append(idx, correct)
            counter.candidate_scores[idx] = score
            counter.start_addresses[idx] = start_addr

    def _adapt_stm_size(
        self,
        point: Sequence[int],
        ref_label: int,
        stm_end: int,
        stm_end_exclude_latest: int,
    ) -> None:
        cfg = self.config
        memory, counter = self.memory, self.counter
        n_counters = cfg.max_candidate_sizes()

        cur_size = memory.stm_pointer
        sizes = generate_candidate_sizes(cur_size, cfg.min_stm_size, n_counters)
        if len(sizes) < 2:
            return

        for idx, size in enumerate(sizes):
            self._update_counter(
                idx, cur_size - size, point, ref_label, stm_end, stm_end_exclude_latest
            )
        for idx in range(len(sizes), n_counters):
            counter.candidate_scores[idx] = 0

        optimal = get_optimal_size(
            counter.candidate_scores[: len(sizes)], sizes, cfg.k_neighbors
        )
        if optimal == memory.stm_pointer:
            return

        split = memory.stm_pointer - optimal
        keep_start, keep_end = split, memory.stm_pointer
        clean_needed = False
        for address in range(keep_start, keep_end):
            sample, label = memory.entry(address)
            clean_needed |= self.knunit.clean(
                sample, label, keep_start, keep_end, 0, split
            )

        n_cleaned = memory.clean() if clean_needed else 0
        memory.stm_to_ltm(split - n_cleaned)
        self.histories.shorten_history(split)
        counter.reset()

    def run(
        self, data: Iterable[Sequence[int]], labels: Iterable[int]
    ) -> list[int]:
        """Start from an empty model and predict-then-train on every sample.

        Values and labels are cut to their configured bit widths, as words read
        from a stream would be.
        """
        self.reset()
        value_mask = self.config.max_datapoint_value()
        label_mask = (1 << self.config.label_bits()) - 1
        predictions: list[int] = []
        for datapoint, label in zip(data, labels, strict=True):
            point = tuple(int(v) & value_mask for v in datapoint)
            predictions.append(self.predict_train(point, int(label) & label_mask))
        return predictions