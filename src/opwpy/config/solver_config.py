from dataclasses import dataclass

from opwpy.config.types import DistanceMetric


@dataclass(frozen=True)
class SolverConfig:
    """Numeric settings for the OPW solver.

    Attributes:
        wrist_singularity_tolerance: ``|sin(q5)|`` below this value treats axes
            4 and 6 as co-linear and yields one wrist solution instead of two.
        domain_tolerance: Law-of-cosines arguments within this distance
            outside ``[-1, 1]`` are clamped instead of rejected.
        distance_metric: Reduction used to rank solutions against a reference.
    """

    wrist_singularity_tolerance: float = 1e-7
    domain_tolerance: float = 1e-9
    distance_metric: DistanceMetric = DistanceMetric.SUM
