"""Observation schema enforcement and per-agent producers."""

import numpy as np
import pytest

from glade.agents.hummingbird import HummingbirdAgent
from glade.env.observations import ObservationBuilder, build_observation, empty_observation
from glade.errors import MissingTarget, SchemaViolation


def test_short_producer_is_a_schema_violation():
    with pytest.raises(SchemaViolation, match="expects 10 values, got 9"):
        build_observation(10, lambda: [0.0] * 9)


def test_long_producer_is_a_schema_violation():
    with pytest.raises(SchemaViolation, match="got 11"):
        build_observation(10, lambda: np.ones(11))


def test_empty_fallback_has_schema_length():
    obs = empty_observation(10)
    assert obs.shape == (10,)
    assert obs.dtype == np.float32
    assert not obs.any()


def test_builder_returns_float32():
    builder = ObservationBuilder(3)
    obs = builder.build(lambda: [1, 2, 3])
    assert obs.dtype == np.float32
    np.testing.assert_array_equal(obs, [1.0, 2.0, 3.0])
    assert builder.to_space().shape == (3,)


def test_builder_rejects_non_positive_schema():
    with pytest.raises(ValueError):
        ObservationBuilder(0)


def test_balancer_observation_layout(balancer_scene, rng):
    agent = balancer_scene.agents[0]
    agent.initialize(rng)
    agent.on_episode_begin(rng)
    obs = agent.collect_observations()
    assert len(obs) == 7
    np.testing.assert_allclose(obs[:3], [0.0, 0.5, 0.0])
    assert np.linalg.norm(obs[3:]) == pytest.approx(1.0, abs=1e-6)


def test_jumper_observation_layout(jumper_scene, rng):
    agent = jumper_scene.agents[0]
    agent.initialize(rng)
    agent.on_episode_begin(rng)
    obs = agent.collect_observations()
    assert obs.shape == (2,)
    assert obs[0] == 0.0
    assert 1.0 <= obs[1] <= 5.0


def test_hummingbird_observation_facing_flower(physics, make_area, add_bird):
    # Flower at (0, 1, 0) opening toward -z; bird one unit in front of it, facing +z.
    area = make_area([(0.0, 1.0, 0.0)], physics=physics)
    add_bird(physics, (0.0, 1.0, -1.0))
    agent = HummingbirdAgent("hb", physics, "bird", area)
    agent.update_nearest_flower()

    obs = agent.collect_observations()
    assert obs.shape == (10,)
    np.testing.assert_allclose(obs[0:4], [0.0, 0.0, 0.0, 1.0], atol=1e-7)
    np.testing.assert_allclose(obs[4:7], [0.0, 0.0, 1.0], atol=1e-6)
    assert obs[7] == pytest.approx(1.0)
    assert obs[8] == pytest.approx(1.0)
    # Beak tip at z=-0.88, nectar centre at z=-0.02.
    assert obs[9] == pytest.approx(0.86 / 20.0)


def test_hummingbird_without_flowers_observes_nothing(physics, make_area, add_bird):
    area = make_area([(0.0, 1.0, 0.0)], physics=physics)
    area.flowers[0].feed(1.0)
    add_bird(physics, (0.0, 1.0, -1.0))
    agent = HummingbirdAgent("hb", physics, "bird", area)
    agent.update_nearest_flower()

    with pytest.raises(MissingTarget):
        agent.collect_observations()
