from .solver_config import SolverConfig
from .types import DistanceMetric, IKResultCode

__all__ = [
    "DistanceMetric",
    "IKResultCode",
    "SolverConfig",
]
