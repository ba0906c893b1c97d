import pytest

from samknn.config import Config
from samknn.knunit import KNUnit
from samknn.memory import Memory

POINTS = [
    ((0, 0), 0),
    ((10, 0), 1),
    ((1, 0), 2),
    ((5, 5), 3),
    ((20, 3), 1),
    ((7, 1), 0),
    ((2, 9), 2),
]


def _memory(config, samples=POINTS):
    memory = Memory(config)
    for point, label in samples:
        memory.append_stm(point, label)
    return memory


@pytest.fixture
def config():
    return Config(mem_size=20, min_stm_size=5, max_ltm_size=10, k_neighbors=3)


def test_empty_range_gives_placeholders(config):
    unit = KNUnit(_memory(config))
    dists, labels = unit.run((0, 0), 3, 3)
    assert dists == [config.max_dist()] * config.k_neighbors
    assert labels == [0] * config.k_neighbors


def test_run_returns_sorted_nearest(config):
    memory = _memory(config)
    unit = KNUnit(memory)
    dists, labels = unit.run((0, 0), 0, memory.stm_pointer)
    assert len(dists) == config.k_neighbors
    assert dists == sorted(dists)
    assert dists[0] == 0
    assert labels[0] == 0


def test_run_respects_range(config):
    memory = _memory(config)
    unit = KNUnit(memory)
    dists, labels = unit.run((0, 0), 1, memory.stm_pointer)
    assert 0 not in dists
    assert labels[0] == 2


def test_parallel_runs_match_single_run(config):
    parallel = Config(
        mem_size=20, min_stm_size=5, max_ltm_size=10, k_neighbors=3, n_parallel_runs=3
    )
    single_mem = _memory(config)
    parallel_mem = _memory(parallel)
    for ref in [(0, 0), (9, 2), (4, 6)]:
        assert KNUnit(single_mem).run(ref, 0, single_mem.stm_pointer) == KNUnit(
            parallel_mem
        ).run(ref, 0, parallel_mem.stm_pointer)


def test_predict_correct(config):
    samples = [((0, 0), 1), ((1, 1), 1), ((0, 1), 1), ((30, 30), 2)]
    memory = _memory(config, samples)
    unit = KNUnit(memory)
    assert unit.predict_correct((0, 0), 1, 0, memory.stm_pointer) is True
    assert unit.predict_correct((0, 0), 2, 0, memory.stm_pointer) is False


def test_clean_without_correct_neighbour_does_nothing(config):
    samples = [((0, 0), 1), ((1, 0), 1), ((2, 0), 2)]
    memory = _memory(config, samples)
    unit = KNUnit(memory)
    assert unit.clean((0, 0), 3, 0, memory.stm_pointer, 0, memory.stm_pointer) is False
    assert not any(memory.invalid_flags)