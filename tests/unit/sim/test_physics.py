import numpy as np
import pytest

from glade.sim.body import BodyState, euler_to_quaternion, look_rotation, rotate
from glade.sim.physics import Collider, PointMassPhysics


class TestBodyMath:
    def test_identity_rotation(self):
        np.testing.assert_allclose(euler_to_quaternion(np.zeros(3)), [0.0, 0.0, 0.0, 1.0])

    def test_yaw_turns_forward_to_the_right(self):
        body = BodyState("b", np.zeros(3), rotation=np.array([0.0, 90.0, 0.0]))
        np.testing.assert_allclose(body.forward(), [1.0, 0.0, 0.0], atol=1e-9)

    def test_positive_pitch_points_nose_down(self):
        body = BodyState("b", np.zeros(3), rotation=np.array([30.0, 0.0, 0.0]))
        assert body.forward()[1] < 0.0

    @pytest.mark.parametrize("direction", [(1.0, 0.0, 0.0), (0.3, -0.5, 0.8), (-1.0, 2.0, -0.5)])
    def test_look_rotation_round_trips_direction(self, direction):
        d = np.array(direction)
        q = euler_to_quaternion(look_rotation(d))
        np.testing.assert_allclose(rotate(q, np.array([0.0, 0.0, 1.0])), d / np.linalg.norm(d), atol=1e-9)

    def test_contact_point_follows_rotation(self):
        body = BodyState(
            "b", np.zeros(3), rotation=np.array([0.0, 90.0, 0.0]), contact_offset=np.array([0.0, 0.0, 0.5])
        )
        np.testing.assert_allclose(body.contact_point(), [0.5, 0.0, 0.0], atol=1e-9)


class TestPointMassPhysics:
    def test_force_integrates_and_clears(self):
        physics = PointMassPhysics()
        physics.add_body(BodyState("b", np.zeros(3)))
        physics.apply_force("b", np.array([0.0, 0.0, 1.0]))
        physics.step(0.5)
        body = physics.body("b")
        np.testing.assert_allclose(body.velocity, [0.0, 0.0, 0.5])
        np.testing.assert_allclose(body.position, [0.0, 0.0, 0.25])
        assert not body.force.any()

    def test_floor_clamps(self):
        physics = PointMassPhysics(gravity=(0.0, -9.81, 0.0), floor_y=0.0)
        physics.add_body(BodyState("b", np.zeros(3)))
        for _ in range(10):
            physics.step(0.02)
        assert physics.body("b").position[1] == 0.0

    def test_sleeping_body_does_not_move(self):
        physics = PointMassPhysics(gravity=(0.0, -9.81, 0.0))
        physics.add_body(BodyState("b", np.zeros(3)))
        physics.sleep("b")
        physics.step(0.1)
        assert physics.body("b").position[1] == 0.0

    def test_duplicates_rejected(self):
        physics = PointMassPhysics()
        physics.add_body(BodyState("b", np.zeros(3)))
        with pytest.raises(ValueError):
            physics.add_body(BodyState("b", np.zeros(3)))
        physics.add_collider(Collider("c", np.zeros(3), 1.0))
        with pytest.raises(ValueError):
            physics.add_collider(Collider("c", np.zeros(3), 1.0))

    def test_solid_reports_on_enter_trigger_every_tick(self):
        physics = PointMassPhysics()
        physics.add_body(BodyState("b", np.zeros(3)))
        physics.add_collider(Collider("wall", np.zeros(3), 0.5, tag="boundary"))
        physics.add_collider(Collider("zone", np.zeros(3), 0.5, tag="nectar", trigger=True))

        first = {e.collider_id for e in physics.step(0.02)}
        second = {e.collider_id for e in physics.step(0.02)}
        assert first == {"wall", "zone"}
        assert second == {"zone"}

    def test_disabled_colliders_are_invisible(self):
        physics = PointMassPhysics()
        physics.add_body(BodyState("b", np.zeros(3)))
        physics.add_collider(Collider("c", np.array([0.0, 0.0, 2.0]), 0.5))
        physics.set_collider_enabled("c", False)
        assert physics.step(0.02) == []
        assert physics.raycast(np.zeros(3), np.array([0.0, 0.0, 1.0])) is None
        assert physics.overlap_count(np.array([0.0, 0.0, 2.0]), 0.05, ignore=frozenset({"b"})) == 0

    def test_raycast_returns_nearest_hit(self):
        physics = PointMassPhysics()
        physics.add_collider(Collider("far", np.array([0.0, 0.0, 5.0]), 0.5, tag="far"))
        physics.add_collider(Collider("near", np.array([0.0, 0.0, 2.0]), 0.5, tag="near"))
        hit = physics.raycast(np.zeros(3), np.array([0.0, 0.0, 1.0]))
        assert hit is not None
        assert hit.collider_id == "near"
        assert hit.distance == pytest.approx(1.5)
        assert physics.raycast(np.zeros(3), np.array([0.0, 0.0, -1.0])) is None

    def test_overlap_counts_bodies_and_colliders(self):
        physics = PointMassPhysics()
        physics.add_body(BodyState("b", np.array([0.1, 0.0, 0.0])))
        physics.add_collider(Collider("c", np.zeros(3), 0.1))
        assert physics.overlap_count(np.zeros(3), 0.05) == 2
        assert physics.overlap_count(np.zeros(3), 0.05, ignore=frozenset({"b"})) == 1
