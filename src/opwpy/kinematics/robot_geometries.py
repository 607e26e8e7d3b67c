"""Factory functions creating OPWSolver for known industrial arms."""

import math

from .geometry import GeometryParameters
from .limits import JointLimits
from .solver import OPWSolver

_HALF_PI = math.pi / 2


def _deg_limits(*pairs: tuple[float, float]) -> JointLimits:
    return JointLimits.from_pairs((math.radians(lo), math.radians(hi)) for lo, hi in pairs)


def kuka_kr6_r700_sixx_geometry() -> GeometryParameters:
    """OPW parameters of the KUKA KR6 R700 sixx.

    At all-zero joints the flange points along +X at (0.785, 0, 0.435).
    """
    return GeometryParameters(
        a1=0.025,
        a2=-0.035,
        b=0.0,
        c1=0.400,
        c2=0.315,
        c3=0.365,
        c4=0.080,
        offsets=(0.0, -_HALF_PI, 0.0, 0.0, 0.0, 0.0),
        sign_corrections=(-1, 1, 1, -1, 1, -1),
    )


def kuka_kr6_r700_sixx() -> OPWSolver:
    """Solver for the KUKA KR6 R700 sixx with its controller joint limits."""
    return OPWSolver(
        kuka_kr6_r700_sixx_geometry(),
        joint_names=["joint_a1", "joint_a2", "joint_a3", "joint_a4", "joint_a5", "joint_a6"],
        joint_limits=_deg_limits(
            (-170.0, 170.0),
            (-190.0, 45.0),
            (-120.0, 156.0),
            (-185.0, 185.0),
            (-120.0, 120.0),
            (-350.0, 350.0),
        ),
    )


def abb_irb2400_geometry() -> GeometryParameters:
    """OPW parameters of the ABB IRB 2400/10.

    At all-zero joints the flange points along +X at (0.94, 0, 1.455).
    """
    return GeometryParameters(
        a1=0.100,
        a2=-0.135,
        b=0.0,
        c1=0.615,
        c2=0.705,
        c3=0.755,
        c4=0.085,
        offsets=(0.0, 0.0, -_HALF_PI, 0.0, 0.0, 0.0),
    )


def abb_irb2400() -> OPWSolver:
    """Solver for the ABB IRB 2400/10 with its controller joint limits."""
    return OPWSolver(
        abb_irb2400_geometry(),
        joint_names=["joint_1", "joint_2", "joint_3", "joint_4", "joint_5", "joint_6"],
        joint_limits=_deg_limits(
            (-180.0, 180.0),
            (-100.0, 110.0),
            (-60.0, 65.0),
            (-200.0, 200.0),
            (-120.0, 120.0),
            (-400.0, 400.0),
        ),
    )
