import numpy as np
import pytest

from mcdock.data.structs import Conformation
from mcdock.utils.geometry import (
    check_normalized,
    mean_square_deviation,
    project_distance_sqr,
    quaternion_from_rotation_vector,
    quaternion_multiply,
    quaternion_to_matrix,
    random_quaternion,
    rotate_by_vector,
)


def test_rotation_vector_quaternion_rotates_about_axis():
    quat = quaternion_from_rotation_vector(np.array([0.0, 0.0, np.pi / 2]))
    rot = quaternion_to_matrix(quat)
    assert np.allclose(rot @ np.array([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])


def test_zero_rotation_vector_is_identity():
    assert np.allclose(quaternion_from_rotation_vector(np.zeros(3)), [1.0, 0.0, 0.0, 0.0])


def test_left_composition_applies_new_rotation_last():
    q1 = quaternion_from_rotation_vector(np.array([np.pi / 2, 0.0, 0.0]))
    q2 = rotate_by_vector(q1, np.array([0.0, 0.0, np.pi / 2]))
    expected = quaternion_to_matrix(quaternion_from_rotation_vector([0.0, 0.0, np.pi / 2])) @ quaternion_to_matrix(q1)
    assert np.allclose(quaternion_to_matrix(q2), expected)
    assert np.isclose(np.linalg.norm(q2), 1.0)


def test_random_quaternions_are_unit():
    rng = np.random.default_rng(3)
    for _ in range(100):
        assert abs(np.linalg.norm(random_quaternion(rng)) - 1.0) < 1e-5


def test_check_normalized_rejects_non_unit():
    with pytest.raises(ValueError):
        check_normalized(np.array([1.0, 1.0, 0.0, 0.0]))


def test_apply_keeps_orientation_unit_over_many_steps():
    conf = Conformation.initial(1)
    rng = np.random.default_rng(11)
    for _ in range(500):
        conf = conf.apply(rng.normal(size=7), 0.3)
    assert abs(np.linalg.norm(conf.orientation) - 1.0) < 1e-5


def test_project_distance_and_msd():
    corner1 = np.zeros(3)
    corner2 = np.ones(3)
    points = np.array([[0.5, 0.5, 0.5], [3.0, 0.5, 0.5], [-1.0, -1.0, 0.5]])
    assert np.allclose(project_distance_sqr(corner1, corner2, points), [0.0, 4.0, 2.0])
    a = np.zeros((2, 3))
    b = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
    assert mean_square_deviation(a, b) == 2.5
    assert np.allclose(quaternion_multiply([1.0, 0, 0, 0], [0.0, 1.0, 0, 0]), [0.0, 1.0, 0, 0])
