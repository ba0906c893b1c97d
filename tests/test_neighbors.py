import pytest

from samknn.config import Config
from samknn.neighbors import (
    KBestCollector,
    best_class,
    combine_runs,
    farthest_correct,
    merge_k_best,
    squared_distance,
)

MAX_DIST = Config().max_dist()


def test_best_class_majority():
    assert best_class([2, 1, 2, 3, 2]) == 2


def test_best_class_tie_goes_to_first_to_reach_count():
    assert best_class([3, 1, 1, 3, 0]) == 1
    assert best_class([0, 1, 2, 3]) == 0


def test_best_class_empty_defaults_to_zero():
    assert best_class([]) == 0


def test_squared_distance_known_value():
    assert squared_distance((3, 4), (0, 0)) == 25


def test_squared_distance_symmetric_and_zero_on_self():
    a, b = (10, 200), (255, 7)
    assert squared_distance(a, b) == squared_distance(b, a)
    assert squared_distance(a, a) == 0


def test_squared_distance_dimension_mismatch():
    with pytest.raises(ValueError):
        squared_distance((1, 2), (1, 2, 3))


def test_farthest_correct_picks_largest_matching():
    labels = [1, 2, 1, 3, 1]
    dists = [4, 100, 9, 200, 6]
    assert farthest_correct(1, labels, dists) == (9, True)


def test_farthest_correct_none_matching():
    assert farthest_correct(0, [1, 2, 3], [5, 6, 7]) == (0, False)


def test_farthest_correct_zero_distance_still_found():
    assert farthest_correct(2, [2], [0]) == (0, True)


def test_collector_starts_empty():
    collector = KBestCollector(3, MAX_DIST)
    assert collector.dists == [MAX_DIST] * 3
    assert collector.labels == [0, 0, 0]


def test_collector_keeps_k_closest_sorted():
    collector = KBestCollector(3, MAX_DIST)
    for dist, label in [(50, 1), (30, 2), (90, 3), (10, 0)]:
        collector.append(dist, label)
    assert collector.dists == [10, 30, 50]
    assert collector.labels == [0, 2, 1]
    assert collector.dists == sorted(collector.dists)


def test_collector_equal_distance_goes_after():
    collector = KBestCollector(3, MAX_DIST)
    collector.append(20, 1)
    collector.append(20, 2)
    assert collector.labels[:2] == [1, 2]


def test_collector_ignores_not_closer():
    collector = KBestCollector(2, MAX_DIST)
    collector.append(5, 1)
    collector.append(6, 2)
    collector.append(6, 3)
    assert collector.labels == [1, 2]
    assert len(collector) == 2


def test_collector_rejects_zero_k():
    with pytest.raises(ValueError):
        KBestCollector(0, MAX_DIST)


def test_combine_runs_merges_sorted():
    first = KBestCollector(3, MAX_DIST)
    second = KBestCollector(3, MAX_DIST)
    for dist, label in [(10, 1), (40, 1), (70, 1)]:
        first.append(dist, label)
    for dist, label in [(20, 2), (30, 2), (80, 2)]:
        second.append(dist, label)
    labels, dists = combine_runs([first, second], 3, MAX_DIST)
    assert dists == [10, 20, 30]
    assert labels == [1, 2, 2]


def test_combine_single_run_is_identity():
    collector = KBestCollector(4, MAX_DIST)
    for dist, label in [(7, 3), (2, 1), (9, 2)]:
        collector.append(dist, label)
    labels, dists = combine_runs([collector], 4, MAX_DIST)
    assert labels == collector.labels
    assert dists == collector.dists


def test_combine_runs_requires_collectors():
    with pytest.raises(ValueError):
        combine_runs([], 3, MAX_DIST)


def test_merge_k_best_interleaves():
    out = merge_k_best([1, 1, 1], [5, 15, 25], [2, 2, 2], [10, 20, 30])
    assert out == [1, 2, 1]


def test_merge_k_best_tie_prefers_second():
    out = merge_k_best([1, 1], [5, 5], [2, 2], [5, 5])
    assert out == [2, 2]


def test_merge_k_best_length_is_k():
    labels0, dists0 = [0, 1, 2, 3], [1, 2, 3, 4]
    labels1, dists1 = [3, 2, 1, 0], [1, 2, 3, 4]
    out = merge_k_best(labels0, dists0, labels1, dists1)
    assert len(out) == len(labels0)
    assert set(out) <= set(labels0) | set(labels1)