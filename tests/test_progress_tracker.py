import math

import pytest

from evoracer.progress_tracker import ProgressTracker


def test_fresh_tracker_targets_checkpoint_one(default_track):
    tracker = ProgressTracker(default_track)
    assert tracker.checkpoint_index == 0
    assert tracker.next_checkpoint_index == 1
    assert tracker.fitness == 0.0


def test_capture_advances_and_resets_age(default_track):
    tracker = ProgressTracker(default_track)
    tracker.advance_clock(10.0)
    captured = tracker.update(default_track.checkpoints[1])
    assert captured
    assert tracker.checkpoint_index == 1
    assert tracker.age == 0.0
    assert tracker.lifetime == 10.0


def test_fitness_combines_count_and_distance(default_track):
    tracker = ProgressTracker(default_track)
    target = default_track.checkpoints[1]
    position = (target[0] - 120.0, target[1])
    tracker.update(position)
    distance = math.dist(position, target)
    assert tracker.fitness == pytest.approx(1 - distance / 200.0)
    assert tracker.distance_score == pytest.approx(1 - distance / 200.0)


def test_capture_scores_against_captured_checkpoint(default_track):
    tracker = ProgressTracker(default_track)
    tracker.update(default_track.checkpoints[1])
    assert tracker.fitness == pytest.approx(2.0)
    assert tracker.next_checkpoint_index == 2


def test_miss_keeps_index(default_track):
    tracker = ProgressTracker(default_track)
    tracker.advance_clock(0.5)
    assert not tracker.update((default_track.start.x, default_track.start.y))
    assert tracker.checkpoint_index == 0
    assert tracker.age == 0.5


def test_next_checkpoint_wraps_and_counts_laps(default_track):
    count = len(default_track.checkpoints)
    tracker = ProgressTracker(default_track)
    tracker.checkpoint_index = count - 1
    assert tracker.next_checkpoint_index == 0
    assert tracker.update(default_track.checkpoints[0])
    assert tracker.checkpoint_index == count
    assert tracker.laps == 1


def test_reset_restores_spawn_state(default_track):
    tracker = ProgressTracker(default_track)
    tracker.advance_clock(3.0)
    tracker.update(default_track.checkpoints[1])
    tracker.reset()
    info = tracker.get_progress_info()
    assert info["checkpoint_index"] == 0
    assert info["age"] == 0.0 and info["lifetime"] == 0.0
    assert info["fitness"] == 0.0
