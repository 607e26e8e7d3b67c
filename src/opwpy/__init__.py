from .config import DistanceMetric, IKResultCode, SolverConfig
from .errors import ConfigurationError, OPWError, UsageError
from .kinematics import (
    GeometryParameters,
    IKResult,
    JointLimits,
    OPWSolver,
    Pose,
    initialize_solver,
    load_solver,
)

__all__ = [
    "ConfigurationError",
    "DistanceMetric",
    "GeometryParameters",
    "IKResult",
    "IKResultCode",
    "JointLimits",
    "OPWError",
    "OPWSolver",
    "Pose",
    "SolverConfig",
    "UsageError",
    "initialize_solver",
    "load_solver",
]
