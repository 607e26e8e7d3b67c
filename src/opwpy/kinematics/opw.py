"""Closed-form forward and inverse kinematics for OPW manipulators.

The chain is evaluated in raw model angles ``q``; callers pass and receive
joint values ``qs`` related by ``q = qs * sign - offset`` (see
:class:`~opwpy.kinematics.geometry.GeometryParameters`).

Forward kinematics::

    wrist = Rz(q1) (c2 sin q2 + k sin(q2 + q3 + psi3) + a1, b,
                    c2 cos q2 + k cos(q2 + q3 + psi3)) + (0, 0, c1)
    R     = Rz(q1) Ry(q2 + q3) Rz(q4) Ry(q5) Rz(q6)
    p     = wrist + c4 R e_z

with ``k = sqrt(a2^2 + c3^2)`` and ``psi3 = atan2(a2, c3)``.

Inverse kinematics enumerates eight candidates in a fixed layout:

    ======  ==========  =========  ==========
    index   shoulder    elbow      wrist
    ======  ==========  =========  ==========
    0       front       i          direct
    1       front       ii         direct
    2       back        iii        direct
    3       back        iv         direct
    4-7     as 0-3                 flipped
    ======  ==========  =========  ==========

A candidate whose law-of-cosines argument is out of domain is flagged
infeasible; so is the flipped companion of a singular wrist.
"""

from typing import NamedTuple, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .geometry import N_JOINTS, GeometryParameters
from .transforms import harmonize_angles, homogeneous, rot_y, rot_z

N_BRANCHES = 8


class Candidates(NamedTuple):
    """IK branch table.

    Attributes:
        angles: (8, 6) corrected joint values; rows of infeasible branches are NaN.
        feasible: (8,) flags, True where the row is a valid solution.
    """

    angles: NDArray[np.float64]
    feasible: NDArray[np.bool_]


def arm_rotation(q1: float, q23: float) -> NDArray[np.float64]:
    """Orientation of the wrist base frame produced by axes 1-3."""
    return rot_z(q1) @ rot_y(q23)


def wrist_rotation(q4: float, q5: float, q6: float) -> NDArray[np.float64]:
    """Orientation of the flange relative to the wrist base frame (ZYZ)."""
    return rot_z(q4) @ rot_y(q5) @ rot_z(q6)


def forward(params: GeometryParameters, joint_angles: ArrayLike) -> NDArray[np.float64]:
    """4x4 flange transform in the base frame for six joint values."""
    q1, q2, q3, q4, q5, q6 = params.to_model_angles(joint_angles)

    psi3 = np.arctan2(params.a2, params.c3)
    k = np.hypot(params.a2, params.c3)

    cx1 = params.c2 * np.sin(q2) + k * np.sin(q2 + q3 + psi3) + params.a1
    cy1 = params.b
    cz1 = params.c2 * np.cos(q2) + k * np.cos(q2 + q3 + psi3)
    wrist_center = rot_z(q1) @ np.array([cx1, cy1, cz1]) + np.array([0.0, 0.0, params.c1])

    R = arm_rotation(q1, q2 + q3) @ wrist_rotation(q4, q5, q6)
    return homogeneous(R, wrist_center + params.c4 * R[:, 2])


def _cosine(numerator: float, denominator: float, tolerance: float) -> Optional[float]:
    """Law-of-cosines argument, clamped into [-1, 1], or None when out of domain."""
    if denominator == 0.0:
        return None
    x = numerator / denominator
    if abs(x) > 1.0 + tolerance:
        return None
    return float(np.clip(x, -1.0, 1.0))


def _solve_wrist(
    R: NDArray[np.float64],
    q1: float,
    q23: float,
    q4_singular: float,
    singularity_tolerance: float,
) -> tuple[tuple[float, float, float], Optional[tuple[float, float, float]]]:
    """Wrist angles for one arm branch and its flipped companion.

    The companion is None when the wrist is singular.
    """
    R_ce = arm_rotation(q1, q23).T @ R
    s5 = float(np.hypot(R_ce[0, 2], R_ce[1, 2]))
    q5 = float(np.arctan2(s5, R_ce[2, 2]))

    if s5 < singularity_tolerance:
        # Axes 4 and 6 are co-linear: only q4 + q6 (q5 = 0) or q6 - q4 (q5 = pi)
        # is determined.
        q4 = q4_singular
        if R_ce[2, 2] > 0.0:
            q6 = float(np.arctan2(R_ce[1, 0], R_ce[0, 0])) - q4
        else:
            q6 = float(np.arctan2(R_ce[1, 0], R_ce[1, 1])) + q4
        return (q4, q5, q6), None

    q4 = float(np.arctan2(R_ce[1, 2], R_ce[0, 2]))
    q6 = float(np.arctan2(R_ce[2, 1], -R_ce[2, 0]))
    return (q4, q5, q6), (q4 + np.pi, -q5, q6 + np.pi)


def inverse(
    params: GeometryParameters,
    T: NDArray[np.float64],
    reference: Optional[ArrayLike] = None,
    singularity_tolerance: float = 1e-7,
    domain_tolerance: float = 1e-9,
) -> Candidates:
    """All closed-form solutions for a 4x4 flange transform.

    Args:
        params: Arm geometry.
        T: Target flange transform in the base frame.
        reference: Optional (6,) joint values; its axis 4 is used at a wrist
            singularity. Without it axis 4 is set to zero.
        singularity_tolerance: Threshold on ``|sin(q5)|``.
        domain_tolerance: Slack on law-of-cosines arguments.

    Returns:
        Candidates with corrected joint values harmonised into [-pi, pi).
    """
    R = T[:3, :3]
    c = T[:3, 3] - params.c4 * R[:, 2]

    model = np.full((N_BRANCHES, N_JOINTS), np.nan)
    feasible = np.zeros(N_BRANCHES, dtype=bool)

    if reference is None:
        q4_singular = 0.0
    else:
        q4_singular = float(params.to_model_angles(reference)[3])

    radial_sq = c[0] ** 2 + c[1] ** 2 - params.b**2
    if radial_sq < -domain_tolerance:
        # Wrist center lies inside the cylinder swept by the lateral offset b.
        return Candidates(model, feasible)
    nx1 = np.sqrt(max(radial_sq, 0.0)) - params.a1

    tmp1 = np.arctan2(c[1], c[0])
    tmp2 = np.arctan2(params.b, nx1 + params.a1)
    theta1 = (tmp1 - tmp2, tmp1 + tmp2 - np.pi)

    dz = c[2] - params.c1
    kappa_sq = params.a2**2 + params.c3**2
    kappa = np.sqrt(kappa_sq)
    psi3 = np.arctan2(params.a2, params.c3)
    c2_sq = params.c2**2

    for shoulder, reach in enumerate((nx1, nx1 + 2.0 * params.a1)):
        s_sq = reach**2 + dz**2
        cos_shoulder = _cosine(s_sq + c2_sq - kappa_sq, 2.0 * np.sqrt(s_sq) * params.c2,
                               domain_tolerance)
        cos_elbow = _cosine(s_sq - c2_sq - kappa_sq, 2.0 * params.c2 * kappa, domain_tolerance)
        if cos_shoulder is None or cos_elbow is None:
            continue

        alpha = np.arccos(cos_shoulder)
        beta = np.arccos(cos_elbow)
        phi = np.arctan2(reach, dz)
        if shoulder == 0:
            theta2 = (phi - alpha, phi + alpha)
        else:
            theta2 = (-alpha - phi, alpha - phi)
        theta3 = (beta - psi3, -beta - psi3)

        q1 = float(theta1[shoulder])
        for elbow in range(2):
            q2, q3 = float(theta2[elbow]), float(theta3[elbow])
            direct, flipped = _solve_wrist(R, q1, q2 + q3, q4_singular, singularity_tolerance)
            index = 2 * shoulder + elbow
            model[index] = (q1, q2, q3, *direct)
            feasible[index] = True
            if flipped is not None:
                model[index + 4] = (q1, q2, q3, *flipped)
                feasible[index + 4] = True

    angles = np.full_like(model, np.nan)
    angles[feasible] = harmonize_angles(params.from_model_angles(model[feasible]))
    return Candidates(angles, feasible)
