"""Tests for the state publisher adapter."""

import logging
from pathlib import Path

import jax.numpy as jnp
import numpy as np
import pytest

from ragnar_state.config import Config, PublisherConfig, RagnarGeometry
from ragnar_state.core import build_axis_table
from ragnar_state.errors import DegenerateGeometryError
from ragnar_state.frames import build_frame_set
from ragnar_state.publisher import JointSample, StampedTransform, StatePublisher
from ragnar_state.transforms import se3

from testing_utilities import FakeSolver, RecordingBroadcaster, ragnar_points

FIXTURES = Path(__file__).parent / "fixtures"

EXPECTED_CHILDREN = [
    "upper_arm_4", "lower_arm_4",
    "upper_arm_3", "lower_arm_3",
    "upper_arm_2", "lower_arm_2",
    "upper_arm_1", "lower_arm_1",
    "ee_link", "base_link2",
]


def sample(stamp=1.5):
    return JointSample(positions=[0.1, -0.2, 0.3, -0.4], stamp=stamp)


def test_update_sends_ten_transforms():
    """A successful update sends every link frame relative to base_link."""
    broadcaster = RecordingBroadcaster()
    publisher = StatePublisher(FakeSolver(), broadcaster)

    frames = publisher.update(sample(stamp=42.0))

    assert len(broadcaster.sent) == 10
    assert [t.child_frame for t in broadcaster.sent] == EXPECTED_CHILDREN
    assert all(t.parent_frame == "base_link" for t in broadcaster.sent)
    assert all(t.stamp == 42.0 for t in broadcaster.sent)
    for sent in broadcaster.sent:
        np.testing.assert_array_equal(sent.transform, frames[sent.child_frame])


def test_update_matches_pure_frame_set():
    """Published transforms equal the pure frame computation."""
    geometry = RagnarGeometry()
    points = ragnar_points(center=(0.05, 0.0, -0.55))
    publisher = StatePublisher(FakeSolver(points), RecordingBroadcaster(), geometry=geometry)

    frames = publisher.update(sample())
    expected = build_frame_set(points, build_axis_table(geometry), geometry)

    assert list(frames) == list(expected)
    for name in expected:
        np.testing.assert_allclose(frames[name], expected[name], atol=1e-15)


def test_update_passes_first_four_actuators():
    """Solver receives the first four joint positions."""
    solver = FakeSolver()
    publisher = StatePublisher(solver, RecordingBroadcaster())

    publisher.update(JointSample(positions=[1.0, 2.0, 3.0, 4.0, 5.0], stamp=0.0))

    np.testing.assert_allclose(solver.calls[0], [1.0, 2.0, 3.0, 4.0])


def test_update_rejects_short_sample():
    """Test error handling for samples with fewer than four positions."""
    publisher = StatePublisher(FakeSolver(), RecordingBroadcaster())
    with pytest.raises(ValueError, match="Expected 4 actuator positions"):
        publisher.update(JointSample(positions=[1.0, 2.0], stamp=0.0))


def test_prefix_applies_to_parent_and_child():
    """Frame prefix is prepended to both frame names."""
    broadcaster = RecordingBroadcaster()
    publisher = StatePublisher(FakeSolver(), broadcaster, prefix="ragnar/")

    publisher.update(sample())

    assert all(t.parent_frame == "ragnar/base_link" for t in broadcaster.sent)
    assert [t.child_frame for t in broadcaster.sent] == ["ragnar/" + c for c in EXPECTED_CHILDREN]


def test_solver_failure_skips_sample(caplog):
    """A failed solve sends nothing, and the next sample is handled normally."""
    broadcaster = RecordingBroadcaster()
    solver = FakeSolver(fail_on={0})
    publisher = StatePublisher(solver, broadcaster)

    with caplog.at_level(logging.WARNING, logger="ragnar_state.publisher"):
        assert publisher.update(sample(stamp=1.0)) is None

    assert broadcaster.sent == []
    assert "Could not calculate FK" in caplog.text

    frames = publisher.update(sample(stamp=2.0))
    assert frames is not None
    assert len(broadcaster.sent) == 10
    assert all(t.stamp == 2.0 for t in broadcaster.sent)


def test_degenerate_geometry_propagates_without_sending():
    """Degenerate chain points fail loudly and nothing is sent."""
    points = ragnar_points()
    points = points.replace(b=points.b.at[2].set(points.a[2]))
    broadcaster = RecordingBroadcaster()
    publisher = StatePublisher(FakeSolver(points), broadcaster)

    with pytest.raises(DegenerateGeometryError):
        publisher.update(sample())
    assert broadcaster.sent == []


def test_world_frame_is_optional():
    """The identity world -> base_link transform is only sent when enabled."""
    broadcaster = RecordingBroadcaster()
    publisher = StatePublisher(FakeSolver(), broadcaster, prefix="r/", publish_world_frame=True)

    publisher.update(sample())

    assert len(broadcaster.sent) == 11
    world = broadcaster.sent[-1]
    assert (world.parent_frame, world.child_frame) == ("r/world", "r/base_link")
    np.testing.assert_allclose(world.transform, jnp.eye(4))


def test_stamped_transform_accessors():
    """Translation and quaternion come from the homogeneous matrix."""
    T = se3.from_position(jnp.array([1.0, 2.0, 3.0]))
    stamped = StampedTransform(T, 0.0, "base_link", "ee_link")

    np.testing.assert_allclose(stamped.translation, [1.0, 2.0, 3.0])
    np.testing.assert_allclose(stamped.quaternion, [1.0, 0.0, 0.0, 0.0], atol=1e-12)


def test_frame_names_match_sent_children():
    publisher = StatePublisher(FakeSolver(), RecordingBroadcaster())
    names = publisher.frame_names()
    assert names == tuple(EXPECTED_CHILDREN)
    assert all(isinstance(name, str) for name in names)


def test_link_names_validation():
    """Construction fails when the robot description lacks a published link."""
    complete = ["base_link"] + EXPECTED_CHILDREN
    StatePublisher(FakeSolver(), RecordingBroadcaster(), link_names=complete)

    with pytest.raises(ValueError, match="ee_link"):
        StatePublisher(FakeSolver(), RecordingBroadcaster(),
                       link_names=[n for n in complete if n != "ee_link"])


def test_from_config_with_robot_description():
    """Publisher built from config reads the URDF and honors options."""
    config = Config(publisher=PublisherConfig(
        prefix="x/", robot_description=str(FIXTURES / "ragnar.urdf")))
    broadcaster = RecordingBroadcaster()
    publisher = StatePublisher.from_config(config, FakeSolver(), broadcaster)

    publisher.update(sample())

    assert publisher.prefix == "x/"
    assert len(broadcaster.sent) == 10


def test_from_config_missing_links():
    """A URDF without the arm links is rejected."""
    config = Config(publisher=PublisherConfig(robot_description=str(FIXTURES / "partial.urdf")))
    with pytest.raises(ValueError, match="missing links"):
        StatePublisher.from_config(config, FakeSolver(), RecordingBroadcaster())
