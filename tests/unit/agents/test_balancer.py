import numpy as np
import pytest

from glade.agents.balancer import BalancerAgent
from glade.agents.heuristic import InputState, Key
from glade.env.rewards import StepContext
from glade.sim.physics import CollisionEvent


@pytest.fixture
def balancer(balancer_scene, rng):
    agent = balancer_scene.agents[0]
    agent.initialize(rng)
    return agent


def test_episode_begin_requires_initialize(balancer_scene, rng):
    with pytest.raises(RuntimeError):
        balancer_scene.agents[0].on_episode_begin(rng)


def test_episode_begin_restores_ball_and_randomizes_tilt(balancer, rng):
    physics = balancer.physics
    physics.set_pose("ball", np.array([2.0, -1.0, 0.5]))
    physics.body("ball").velocity = np.array([1.0, 0.0, 0.0])

    for _ in range(20):
        balancer.on_episode_begin(rng)
        rot = physics.body("platform").rotation
        assert -30.0 <= rot[0] <= 30.0
        assert rot[1] == 0.0
        assert -30.0 <= rot[2] <= 30.0

    np.testing.assert_allclose(physics.body("ball").position, [0.0, 0.5, 0.0])
    np.testing.assert_allclose(physics.body("platform").position, [0.0, 0.0, 0.0])
    assert not physics.body("ball").velocity.any()


def test_survival_clock_fires_once_per_second(balancer, rng):
    balancer.on_episode_begin(rng)
    fired = []
    for _ in range(150):
        ctx = StepContext()
        balancer.on_fixed_update(0.02, ctx)
        fired.append(ctx.survival_seconds)
    assert sum(fired) == 3
    assert [i for i, f in enumerate(fired) if f] == [49, 99, 149]


def test_ball_on_boundary_is_terminal(balancer):
    ctx = StepContext()
    balancer.on_event(CollisionEvent("ball", "boundary3", "boundary", np.zeros(3)), ctx)
    assert ctx.falls == 1
    assert ctx.terminal
    assert ctx.terminal_reason == "ball_fell"


def test_platform_touching_boundary_is_ignored(balancer):
    ctx = StepContext()
    balancer.on_event(CollisionEvent("platform", "boundary3", "boundary", np.zeros(3)), ctx)
    assert ctx.falls == 0
    assert not ctx.terminal


def test_routes_ball_and_platform(balancer):
    assert balancer.body_ids == frozenset({"platform", "ball"})


@pytest.mark.parametrize(
    ("keys", "expected"),
    [
        ((Key.RIGHT_ARROW,), [1.0, 0.0]),
        ((Key.LEFT_ARROW,), [-1.0, 0.0]),
        ((Key.UP_ARROW,), [0.0, 1.0]),
        ((Key.DOWN_ARROW, Key.RIGHT_ARROW), [1.0, -1.0]),
        ((), [0.0, 0.0]),
    ],
)
def test_heuristic_arrows(balancer, keys, expected):
    np.testing.assert_array_equal(balancer.heuristic(InputState.of(*keys)), expected)


def test_action_tilts_platform(balancer, rng):
    balancer.on_episode_begin(rng)
    before = balancer.physics.body("platform").rotation.copy()
    command = balancer.on_action_received(np.array([1.0, 0.0], dtype=np.float32), 0.02)

    # One smoothed step: 0.04 * 0.02 * 100 degrees about x.
    assert command.rotation[0] == pytest.approx(min(45.0, before[0] + 0.08))
    np.testing.assert_allclose(balancer.physics.body("platform").rotation, command.rotation)


def test_constructed_directly(physics):
    from glade.sim.body import BodyState

    physics.add_body(BodyState("p", np.zeros(3)))
    physics.add_body(BodyState("b", np.ones(3)))
    agent = BalancerAgent("bal", physics, "p", "b")
    assert agent.observation_slots == 7
    assert agent.action_spec.continuous_size == 2
