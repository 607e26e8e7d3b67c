from enum import Enum


class DistanceMetric(Enum):
    """How per-joint distances to a reference are reduced to one number."""

    SUM = "sum"
    MAX = "max"


class IKResultCode(Enum):
    """Outcome of an inverse kinematics query."""

    SUCCESS = "success"
    NO_SOLUTION = "no_solution"
