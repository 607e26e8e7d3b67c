"""Tests for the closed-form routines in opwpy.kinematics.opw."""

import numpy as np
import pytest

from opwpy.kinematics import opw
from opwpy.kinematics.geometry import GeometryParameters
from opwpy.kinematics.robot_geometries import abb_irb2400_geometry, kuka_kr6_r700_sixx_geometry
from opwpy.kinematics.transforms import harmonize_angles, homogeneous, rot_y

TOLERANCE = 1e-6


def _reference_geometry() -> GeometryParameters:
    """Simplified arm with a2 = b = 0 and axis 2 zeroed horizontally."""
    return GeometryParameters(
        a1=0.35,
        a2=0.0,
        b=0.0,
        c1=0.4,
        c2=0.35,
        c3=0.35,
        c4=0.08,
        offsets=(0.0, -np.pi / 2, 0.0, 0.0, 0.0, 0.0),
    )


def _assert_same_transform(actual, desired):
    np.testing.assert_allclose(actual[:3, :3], desired[:3, :3], atol=TOLERANCE)
    np.testing.assert_allclose(actual[:3, 3], desired[:3, 3], atol=TOLERANCE)


class TestForward:
    def test_zero_pose_reference_geometry(self):
        """px = a1 + c2 + c3 + c4, py = 0, pz = c1 + a2, tool +90 deg about Y."""
        g = _reference_geometry()
        T = opw.forward(g, np.zeros(6))
        desired = homogeneous(rot_y(np.pi / 2), (g.a1 + g.c2 + g.c3 + g.c4, 0.0, g.c1 + g.a2))
        _assert_same_transform(T, desired)

    def test_zero_pose_kr6(self):
        T = opw.forward(kuka_kr6_r700_sixx_geometry(), np.zeros(6))
        _assert_same_transform(T, homogeneous(rot_y(np.pi / 2), (0.785, 0.0, 0.435)))

    def test_zero_pose_irb2400(self):
        T = opw.forward(abb_irb2400_geometry(), np.zeros(6))
        _assert_same_transform(T, homogeneous(rot_y(np.pi / 2), (0.94, 0.0, 1.455)))

    def test_sign_correction_on_axis_1(self):
        """KR6 axis 1 turns clockwise seen from above."""
        T = opw.forward(kuka_kr6_r700_sixx_geometry(), [np.pi / 2, 0, 0, 0, 0, 0])
        np.testing.assert_allclose(T[:3, 3], [0.0, -0.785, 0.435], atol=TOLERANCE)

    def test_lateral_offset_b(self):
        g = GeometryParameters(a1=0.1, a2=0.0, b=0.2, c1=0.5, c2=0.4, c3=0.3, c4=0.0)
        T = opw.forward(g, np.zeros(6))
        # Axis 2 upright at zero: wrist center straight above the shoulder.
        np.testing.assert_allclose(T[:3, 3], [0.1, 0.2, 1.2], atol=1e-14)
        np.testing.assert_allclose(T[:3, :3], np.eye(3), atol=1e-14)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_total_over_large_inputs(self, seed):
        rng = np.random.default_rng(seed)
        q = rng.uniform(-1e4, 1e4, size=6)
        T = opw.forward(kuka_kr6_r700_sixx_geometry(), q)
        assert np.all(np.isfinite(T))
        R = T[:3, :3]
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)


class TestInverseCandidates:
    def test_layout(self):
        g = kuka_kr6_r700_sixx_geometry()
        T = opw.forward(g, [0, 0.1, 0.2, 0.3, 0.4, 0.5])
        candidates = opw.inverse(g, T)
        assert candidates.angles.shape == (opw.N_BRANCHES, 6)
        assert candidates.feasible.shape == (opw.N_BRANCHES,)
        assert np.all(np.isnan(candidates.angles[~candidates.feasible]))
        assert np.all(np.isfinite(candidates.angles[candidates.feasible]))

    def test_every_feasible_branch_reproduces_pose(self):
        g = kuka_kr6_r700_sixx_geometry()
        T = opw.forward(g, [0, 0.1, 0.2, 0.3, 0.4, 0.5])
        candidates = opw.inverse(g, T)
        assert candidates.feasible.any()
        for q in candidates.angles[candidates.feasible]:
            _assert_same_transform(opw.forward(g, q), T)

    def test_wrist_flip_companions(self):
        g = kuka_kr6_r700_sixx_geometry()
        T = opw.forward(g, [0.3, -0.2, 0.4, 0.3, 0.6, -0.5])
        angles, feasible = opw.inverse(g, T)
        np.testing.assert_array_equal(feasible[:4], feasible[4:])
        for i in np.flatnonzero(feasible[:4]):
            direct, flipped = angles[i], angles[i + 4]
            np.testing.assert_allclose(direct[:3], flipped[:3], atol=1e-12)
            np.testing.assert_allclose(direct[4], -flipped[4], atol=1e-12)
            for axis in (3, 5):
                np.testing.assert_allclose(
                    harmonize_angles(direct[axis] - flipped[axis] + np.pi), 0.0, atol=1e-12
                )

    def test_angles_are_harmonized(self):
        g = kuka_kr6_r700_sixx_geometry()
        T = opw.forward(g, [0.3, -0.2, 0.4, 3.0, 0.6, -3.0])
        angles, feasible = opw.inverse(g, T)
        assert np.all(angles[feasible] >= -np.pi)
        assert np.all(angles[feasible] < np.pi)

    def test_stretched_zero_pose(self):
        """Fully stretched arm: arccos arguments hit 1 and are clamped."""
        g = _reference_geometry()
        T = opw.forward(g, np.zeros(6))
        angles, feasible = opw.inverse(g, T)
        # Only the front shoulder reaches that far.
        assert feasible[0] and feasible[1]
        assert not (feasible[2] or feasible[3] or feasible[6] or feasible[7])
        errors = np.abs(angles[feasible]).max(axis=1)
        assert errors.min() < TOLERANCE
        for q in angles[feasible]:
            _assert_same_transform(opw.forward(g, q), T)

    def test_out_of_reach(self):
        g = kuka_kr6_r700_sixx_geometry()
        T = homogeneous(np.eye(3), (5.0, 0.0, 0.4))
        _, feasible = opw.inverse(g, T)
        assert not feasible.any()

    def test_inside_lateral_offset_cylinder(self):
        g = GeometryParameters(a1=0.0, a2=0.0, b=0.2, c1=0.5, c2=0.4, c3=0.3, c4=0.0)
        T = homogeneous(np.eye(3), (0.05, 0.0, 0.6))
        _, feasible = opw.inverse(g, T)
        assert not feasible.any()

    def test_singular_wrist_uses_reference_axis_4(self):
        g = kuka_kr6_r700_sixx_geometry()
        q = np.array([0.2, -0.3, 0.4, 0.0, 0.0, 0.0])
        T = opw.forward(g, q)
        reference = np.array([0.2, -0.3, 0.4, 0.7, 0.0, 0.0])
        angles, feasible = opw.inverse(g, T, reference=reference)
        matches = [i for i in np.flatnonzero(feasible) if np.allclose(angles[i][:3], q[:3])]
        assert len(matches) == 1
        index = matches[0]
        assert not feasible[index + 4]
        np.testing.assert_allclose(angles[index], [0.2, -0.3, 0.4, 0.7, 0.0, -0.7], atol=TOLERANCE)
