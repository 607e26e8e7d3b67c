"""Tests for opwpy.kinematics.pose."""

import numpy as np
import pytest

from opwpy.errors import UsageError
from opwpy.kinematics.pose import Pose
from opwpy.kinematics.transforms import homogeneous, rot_y, rot_z


class TestPose:
    def test_matrix_roundtrip(self):
        T = homogeneous(rot_z(0.3) @ rot_y(0.2), (0.1, 0.2, 0.3))
        pose = Pose.from_matrix(T)
        np.testing.assert_allclose(pose.position, [0.1, 0.2, 0.3])
        np.testing.assert_allclose(pose.to_matrix(), T)

    def test_arrays_are_read_only(self):
        pose = Pose(position=[0.0, 0.0, 0.0], rotation=np.eye(3))
        with pytest.raises(ValueError):
            pose.position[0] = 1.0

    def test_does_not_alias_input(self):
        position = np.zeros(3)
        pose = Pose(position=position, rotation=np.eye(3))
        position[0] = 5.0
        assert pose.position[0] == 0.0

    def test_quaternion(self):
        s = np.sqrt(0.5)
        pose = Pose.from_quaternion([1.0, 2.0, 3.0], [0.0, s, 0.0, s])
        np.testing.assert_allclose(pose.rotation, rot_y(np.pi / 2), atol=1e-14)
        np.testing.assert_allclose(pose.quaternion, [0.0, s, 0.0, s], atol=1e-14)

    def test_is_close(self):
        a = Pose(position=[0.0, 0.0, 0.0], rotation=np.eye(3))
        b = Pose(position=[1e-8, 0.0, 0.0], rotation=rot_z(1e-8))
        c = Pose(position=[1e-3, 0.0, 0.0], rotation=np.eye(3))
        assert a.is_close(b)
        assert not a.is_close(c)


class TestMalformedPose:
    def test_wrong_position_shape(self):
        with pytest.raises(UsageError, match="position"):
            Pose(position=[0.0, 0.0], rotation=np.eye(3))

    def test_wrong_rotation_shape(self):
        with pytest.raises(UsageError, match="rotation"):
            Pose(position=[0.0, 0.0, 0.0], rotation=np.eye(4))

    def test_non_finite(self):
        with pytest.raises(UsageError, match="non-finite"):
            Pose(position=[np.nan, 0.0, 0.0], rotation=np.eye(3))

    def test_not_orthonormal(self):
        with pytest.raises(UsageError, match="orthonormal"):
            Pose(position=[0.0, 0.0, 0.0], rotation=2.0 * np.eye(3))

    def test_reflection(self):
        with pytest.raises(UsageError, match="reflection"):
            Pose(position=[0.0, 0.0, 0.0], rotation=np.diag([1.0, 1.0, -1.0]))

    def test_bad_matrix_shape(self):
        with pytest.raises(UsageError, match="4x4"):
            Pose.from_matrix(np.eye(3))

    def test_zero_quaternion(self):
        with pytest.raises(UsageError, match="zero quaternion"):
            Pose.from_quaternion([0.0, 0.0, 0.0], [0.0, 0.0, 0.0, 0.0])
