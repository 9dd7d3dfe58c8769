# Copyright 2017, Additive Regularization of Topic Models.

import pytest

from mglda import LogLikelihoodScoreTracker, ScoreTracker


def test_moving_average_trailing_window():
    tracker = ScoreTracker('score')
    for i, value in enumerate([4.0, 2.0, 6.0, 8.0, 10.0]):
        tracker.add(i + 1, value)

    assert tracker.moving_average(3) == pytest.approx([4.0, 3.0, 4.0, 16.0 / 3, 8.0])
    assert tracker.moving_average(1) == pytest.approx(tracker.value)
    assert ScoreTracker('empty').moving_average(5) == []


def test_tracker_round_trip():
    tracker = LogLikelihoodScoreTracker()
    tracker.add(1, -10.5)
    tracker.add(2, -9.25)

    restored = ScoreTracker.from_dict(tracker.to_dict())
    assert restored.name == 'log_likelihood'
    assert restored.passes == [1, 2]
    assert restored.last_value == -9.25
    with pytest.raises(ValueError):
        ScoreTracker('empty').last_value
