import numpy as np
import pytest

from glade.env.spawn import find_safe_pose
from glade.errors import UnsafeSpawnExhausted
from glade.sim.physics import Collider


def test_finds_the_only_safe_candidate():
    positions = [np.array([0.0, 0.0, 0.0])] * 5 + [np.array([5.0, 0.0, 0.0])]
    samples = iter((p, np.zeros(3)) for p in positions)
    calls = []

    def overlap(point, radius):
        calls.append(radius)
        return 0 if point[0] == 5.0 else 1

    position, _ = find_safe_pose(lambda: next(samples), overlap)
    np.testing.assert_array_equal(position, [5.0, 0.0, 0.0])
    assert len(calls) == 6
    assert all(r == 0.05 for r in calls)


def test_fails_after_exactly_the_attempt_budget():
    calls = 0

    def sample():
        nonlocal calls
        calls += 1
        return np.zeros(3), np.zeros(3)

    with pytest.raises(UnsafeSpawnExhausted, match="after 100 attempts") as exc_info:
        find_safe_pose(sample, lambda p, r: 1)
    assert calls == 100
    assert exc_info.value.attempts == 100


def test_custom_budget():
    calls = 0

    def sample():
        nonlocal calls
        calls += 1
        return np.zeros(3), np.zeros(3)

    with pytest.raises(UnsafeSpawnExhausted):
        find_safe_pose(sample, lambda p, r: 3, max_attempts=7)
    assert calls == 7


def test_rejects_non_positive_budget():
    with pytest.raises(ValueError):
        find_safe_pose(lambda: (np.zeros(3), np.zeros(3)), lambda p, r: 0, max_attempts=0)


def test_against_point_mass_overlaps(physics):
    physics.add_collider(Collider("rock", np.zeros(3), 1.0))
    candidates = iter([np.array([0.5, 0.0, 0.0]), np.array([1.04, 0.0, 0.0]), np.array([1.2, 0.0, 0.0])])

    position, _ = find_safe_pose(lambda: (next(candidates), np.zeros(3)), physics.overlap_count)
    # 1.04 is within radius + 0.05 of the rock.
    np.testing.assert_allclose(position, [1.2, 0.0, 0.0])
