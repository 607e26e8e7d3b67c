"""Kinematics module for opwpy: closed-form FK and IK for 6-DOF OPW arms."""

from .description import initialize_solver, load_solver, solver_description
from .geometry import GeometryParameters
from .limits import JointLimits
from .pose import Pose
from .robot_geometries import abb_irb2400, kuka_kr6_r700_sixx
from .solver import IKResult, OPWSolver

__all__ = [
    "GeometryParameters",
    "IKResult",
    "JointLimits",
    "OPWSolver",
    "Pose",
    "abb_irb2400",
    "initialize_solver",
    "kuka_kr6_r700_sixx",
    "load_solver",
    "solver_description",
]
