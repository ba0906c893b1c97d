import pytest

from samknn.histories import PredictionHistories


def test_fresh_histories_choose_combined():
    hist = PredictionHistories()
    assert hist.get_label(1, True, 2, False, 3, True) == 3
    assert len(hist) == 1
    assert (hist.score_stm, hist.score_ltm, hist.score_com) == (1, 0, 1)


def test_ltm_wins_when_strictly_best():
    hist = PredictionHistories()
    hist.push(False, True, False)
    assert hist.get_label(1, False, 2, False, 3, False) == 2


def test_stm_wins_when_strictly_best():
    hist = PredictionHistories()
    hist.push(True, False, False)
    assert hist.get_label(1, False, 2, False, 3, False) == 1


def test_tie_between_stm_and_ltm_falls_back_to_combined():
    hist = PredictionHistories()
    hist.push(True, True, False)
    assert hist.get_label(1, False, 2, False, 3, False) == 3


def test_push_pop_round_trip():
    hist = PredictionHistories()
    outcomes = [(True, False, True), (False, True, True), (True, True, False)]
    for outcome in outcomes:
        hist.push(*outcome)
    assert hist.score_stm == sum(o[0] for o in outcomes)
    assert hist.score_ltm == sum(o[1] for o in outcomes)
    assert hist.score_com == sum(o[2] for o in outcomes)
    hist.shorten_history(len(outcomes))
    assert len(hist) == 0
    assert (hist.score_stm, hist.score_ltm, hist.score_com) == (0, 0, 0)


def test_pop_removes_oldest_first():
    hist = PredictionHistories()
    hist.push(True, False, False)
    hist.push(False, True, False)
    hist.pop()
    assert (hist.score_stm, hist.score_ltm) == (0, 1)


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        PredictionHistories().pop()


def test_shorten_beyond_history_raises():
    hist = PredictionHistories()
    hist.push(True, True, True)
    with pytest.raises(IndexError):
        hist.shorten_history(2)


def test_get_output_merges_and_records():
    hist = PredictionHistories()
    prediction = hist.get_output([1, 1, 1], [1, 2, 3], [2, 2, 2], [10, 20, 30], 1)
    assert prediction == 1
    assert (hist.score_stm, hist.score_ltm, hist.score_com) == (1, 0, 1)


def test_get_output_follows_better_ltm():
    hist = PredictionHistories()
    hist.push(False, True, False)
    prediction = hist.get_output([1, 1, 1], [1, 2, 3], [2, 2, 2], [10, 20, 30], 2)
    assert prediction == 2
    assert hist.score_ltm == 2