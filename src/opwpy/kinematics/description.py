"""Build solvers from plain robot descriptions (mappings or JSON files).

A description looks like::

    {
        "geometry": {"a1": 0.025, "a2": -0.035, "b": 0.0, "c1": 0.4,
                     "c2": 0.315, "c3": 0.365, "c4": 0.08,
                     "offsets": [0, -1.5707963267948966, 0, 0, 0, 0],
                     "sign_corrections": [-1, 1, 1, -1, 1, -1]},
        "joint_names": ["joint_a1", ..., "joint_a6"],
        "joint_limits": [[-2.97, 2.97], ...],
        "solver": {"wrist_singularity_tolerance": 1e-9, "distance_metric": "sum"}
    }

Only ``geometry`` is required.
"""

import json
import os
from logging import getLogger
from typing import Any, Mapping

from opwpy.config.solver_config import SolverConfig
from opwpy.config.types import DistanceMetric
from opwpy.errors import ConfigurationError

from .geometry import GeometryParameters
from .limits import JointLimits
from .solver import OPWSolver

logger = getLogger(__name__)

_SOLVER_KEYS = {"wrist_singularity_tolerance", "domain_tolerance", "distance_metric"}


def _solver_config(data: Mapping[str, Any]) -> SolverConfig:
    unknown = set(data) - _SOLVER_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown solver settings: {sorted(unknown)}")
    kwargs: dict[str, Any] = {}
    try:
        for key in ("wrist_singularity_tolerance", "domain_tolerance"):
            if key in data:
                kwargs[key] = float(data[key])
        if "distance_metric" in data:
            kwargs["distance_metric"] = DistanceMetric(data["distance_metric"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid solver settings: {e}") from e
    return SolverConfig(**kwargs)


def initialize_solver(description: Mapping[str, Any]) -> OPWSolver:
    """Create an :class:`OPWSolver` from a description mapping.

    Raises:
        ConfigurationError: If geometry is missing or any section is malformed.
    """
    if not isinstance(description, Mapping):
        raise ConfigurationError(
            f"Robot description must be a mapping, got {type(description).__name__}"
        )
    if "geometry" not in description:
        raise ConfigurationError("Robot description has no `geometry` section")
    geometry_data = description["geometry"]
    if not isinstance(geometry_data, Mapping):
        raise ConfigurationError("`geometry` must be a mapping of parameter names to values")

    geometry = GeometryParameters.from_mapping(geometry_data)
    limits = None
    if description.get("joint_limits") is not None:
        limits = JointLimits.from_pairs(description["joint_limits"])
    config = _solver_config(description.get("solver") or {})

    return OPWSolver(
        geometry,
        joint_names=description.get("joint_names"),
        joint_limits=limits,
        config=config,
        tool_transform=description.get("tool_transform"),
        base_transform=description.get("base_transform"),
    )


def load_solver(path: str | os.PathLike) -> OPWSolver:
    """Read a JSON robot description from ``path`` and build a solver.

    Raises:
        ConfigurationError: The file cannot be read, is not valid JSON, or
            describes an invalid robot.
    """
    try:
        with open(path) as f:
            description = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in robot description {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read robot description {path}: {e}") from e
    logger.info("Loaded robot description from %s", path)
    return initialize_solver(description)


def solver_description(solver: OPWSolver) -> dict[str, Any]:
    """Inverse of :func:`initialize_solver` for the geometry, names and limits."""
    limits = solver.joint_limits
    return {
        "geometry": solver.geometry.to_mapping(),
        "joint_names": solver.joint_names,
        "joint_limits": limits.to_pairs(),
        "solver": {
            "wrist_singularity_tolerance": solver.config.wrist_singularity_tolerance,
            "domain_tolerance": solver.config.domain_tolerance,
            "distance_metric": solver.config.distance_metric.value,
        },
    }
