import numpy as np
import pytest

from glade.config import HummingbirdConfig
from glade.sim.body import BodyState
from glade.sim.flowers import FlowerArea
from glade.sim.physics import PointMassPhysics
from glade.scenes import build_balancer_scene, build_hummingbird_scene, build_jumper_scene


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def physics():
    return PointMassPhysics()


@pytest.fixture
def balancer_scene():
    return build_balancer_scene()


@pytest.fixture
def jumper_scene():
    return build_jumper_scene()


@pytest.fixture
def hummingbird_scene(rng):
    return build_hummingbird_scene(rng)


@pytest.fixture
def make_area():
    """Flower area with one single-flower plant per given position, flowers facing -z."""

    def _make(positions, physics=None) -> FlowerArea:
        area = FlowerArea(physics=physics)
        for i, pos in enumerate(positions):
            area.add_plant(f"plant{i}", np.asarray(pos, dtype=np.float64), [(np.zeros(3), np.array([0.0, 0.0, -1.0]))])
        return area

    return _make


@pytest.fixture
def add_bird():
    """Add a hummingbird body whose contact point is the beak tip."""

    def _add(physics: PointMassPhysics, position, rotation=(0.0, 0.0, 0.0), body_id: str = "bird") -> BodyState:
        cfg = HummingbirdConfig()
        return physics.add_body(
            BodyState(
                body_id,
                position=np.asarray(position, dtype=np.float64),
                rotation=np.asarray(rotation, dtype=np.float64),
                use_gravity=False,
                contact_offset=np.array([0.0, 0.0, cfg.beak_length]),
            )
        )

    return _add
