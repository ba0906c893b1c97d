"""Prediction histories that choose between the STM, LTM and combined votes."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence

from .neighbors import best_class, merge_k_best


class PredictionHistories:
    """Sliding record of which of the three predictors was correct.

    Each score counts the correct predictions still in the window.
    """

    def __init__(self) -> None:
        self._history: deque[tuple[bool, bool, bool]] = deque()
        self.score_stm = 0
        self.score_ltm = 0
        self.score_com = 0

    def __len__(self) -> int:
        return len(self._history)

    def push(self, correct_stm: bool, correct_ltm: bool, correct_com: bool) -> None:
        """Record the outcome of one prediction."""
        entry = (bool(correct_stm), bool(correct_ltm), bool(correct_com))
        self._history.append(entry)
        self.score_stm += entry[0]
        self.score_ltm += entry[1]
        self.score_com += entry[2]

    def pop(self) -> None:
        """Forget the oldest recorded outcome."""
        if not self._history:
            raise IndexError("pop from empty prediction history")
        stm, ltm, com = self._history.popleft()
        self.score_stm -= stm
        self.score_ltm -= ltm
        self.score_com -= com

    def get_label(
        self,
        label_stm: int,
        correct_stm: bool,
        label_ltm: int,
        correct_ltm: bool,
        label_com: int,
        correct_com: bool,
    ) -> int:
        """Pick the label of the strictly best predictor, else the combined one.

        The outcomes are recorded afterwards.
        """
        if self.score_ltm > self.score_stm and self.score_ltm > self.score_com:
            prediction = label_ltm
        elif self.score_stm > self.score_ltm and self.score_stm > self.score_com:
            prediction = label_stm
        else:
            prediction = label_com
        self.push(correct_stm, correct_ltm, correct_com)
        return prediction

    def shorten_history(self, amount: int) -> None:
        """Forget the ``amount`` oldest outcomes."""
        for _ in range(amount):
            self.pop()

    def get_output(
        self,
        labels_stm: Sequence[int],
        dists_stm: Sequence[int],
        labels_ltm: Sequence[int],
        dists_ltm: Sequence[int],
        label_reference: int,
    ) -> int:
        """Vote with the STM, LTM and merged neighbours and return the chosen label."""
        labels_com = merge_k_best(labels_stm, dists_stm, labels_ltm, dists_ltm)
        label_stm = best_class(labels_stm)
        label_ltm = best_class(labels_ltm)
        label_com = best_class(labels_com)
        return self.get_label(
            label_stm,
            label_stm == label_reference,
            label_ltm,
            label_ltm == label_reference,
            label_com,
            label_com == label_reference,
        )