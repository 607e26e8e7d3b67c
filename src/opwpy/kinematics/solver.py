"""Analytical IK/FK solver for OPW arms (numpy only)."""

from dataclasses import dataclass, field
from logging import getLogger
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from opwpy.config.solver_config import SolverConfig
from opwpy.config.types import DistanceMetric, IKResultCode
from opwpy.errors import ConfigurationError, UsageError

from . import opw
from .geometry import N_JOINTS, GeometryParameters
from .limits import JointLimits
from .pose import Pose
from .transforms import invert_transform

logger = getLogger(__name__)

DEFAULT_JOINT_NAMES = [f"joint_{i}" for i in range(1, N_JOINTS + 1)]


def as_joint_vector(values: ArrayLike, name: str = "joint_angles") -> NDArray[np.float64]:
    """Validate and convert a six-element joint vector, raising UsageError otherwise."""
    try:
        q = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise UsageError(f"`{name}` must be numeric: {e}") from e
    if q.shape != (N_JOINTS,):
        size = q.shape[0] if q.ndim == 1 else q.shape
        raise UsageError(f"Expected {N_JOINTS} {name}, got {size}")
    if not np.all(np.isfinite(q)):
        raise UsageError(f"`{name}` must be finite, got {q}")
    return q


def joint_distances(
    solutions: NDArray[np.float64],
    reference: NDArray[np.float64],
    metric: DistanceMetric = DistanceMetric.SUM,
) -> NDArray[np.float64]:
    """Distance of each (n, 6) solution row to the reference."""
    diff = np.abs(np.atleast_2d(solutions) - reference)
    if metric is DistanceMetric.MAX:
        return diff.max(axis=1)
    return diff.sum(axis=1)


@dataclass
class IKResult:
    """Result from the IK solver.

    Attributes:
        code: SUCCESS when at least one solution survived, else NO_SOLUTION.
        solutions: Joint vectors in ascending branch order.
        branch_indices: Branch index (0-7) of each solution; repeated when a
            branch has several whole-turn representatives within the limits.
    """

    code: IKResultCode
    solutions: List[NDArray[np.float64]] = field(default_factory=list)
    branch_indices: List[int] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.code is IKResultCode.SUCCESS

    def __len__(self) -> int:
        return len(self.solutions)

    def as_array(self) -> NDArray[np.float64]:
        """Solutions stacked into an (n, 6) array."""
        if not self.solutions:
            return np.empty((0, N_JOINTS))
        return np.stack(self.solutions)


class OPWSolver:
    """Closed-form forward and inverse kinematics for an OPW arm.

    The solver is immutable after construction and holds no per-query state,
    so one instance can be shared between threads.

    Optional ``base_transform`` and ``tool_transform`` (4x4) place the robot
    base in a world frame and a tool on the flange::

        T_world_tool = base_transform @ T_base_flange @ tool_transform
    """

    def __init__(
        self,
        geometry: GeometryParameters,
        joint_names: Optional[Sequence[str]] = None,
        joint_limits: Optional[JointLimits] = None,
        config: Optional[SolverConfig] = None,
        tool_transform: Optional[ArrayLike] = None,
        base_transform: Optional[ArrayLike] = None,
    ) -> None:
        if not isinstance(geometry, GeometryParameters):
            raise ConfigurationError(
                f"geometry must be GeometryParameters, got {type(geometry).__name__}"
            )
        if isinstance(joint_names, str):
            raise ConfigurationError("joint_names must be a sequence of names, not a string")
        try:
            names = list(DEFAULT_JOINT_NAMES if joint_names is None else joint_names)
        except TypeError as e:
            raise ConfigurationError(f"joint_names must be a sequence of names: {e}") from e
        if not all(isinstance(n, str) for n in names):
            raise ConfigurationError(f"Joint names must be strings: {names}")
        if len(names) != N_JOINTS:
            raise ConfigurationError(f"Expected {N_JOINTS} joint names, got {len(names)}")
        if len(set(names)) != N_JOINTS:
            raise ConfigurationError(f"Joint names must be unique: {names}")

        self._geometry = geometry
        self._joint_names = names
        self._joint_limits = joint_limits or JointLimits.unbounded()
        self._config = config or SolverConfig()
        self._tool = self._rigid_transform("tool_transform", tool_transform)
        self._base = self._rigid_transform("base_transform", base_transform)
        self._tool_inv = invert_transform(self._tool)
        self._base_inv = invert_transform(self._base)

        logger.debug("Created OPW solver with geometry %s", geometry)

    @staticmethod
    def _rigid_transform(name: str, T: Optional[ArrayLike]) -> NDArray[np.float64]:
        if T is None:
            return np.eye(4)
        try:
            arr = np.array(T, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"`{name}` must be numeric: {e}") from e
        if arr.shape != (4, 4):
            raise ConfigurationError(f"`{name}` must be 4x4, got shape {arr.shape}")
        if not np.allclose(arr[3], [0.0, 0.0, 0.0, 1.0]):
            raise ConfigurationError(f"`{name}` must have bottom row [0, 0, 0, 1]")
        try:
            Pose.from_matrix(arr)
        except UsageError as e:
            raise ConfigurationError(f"`{name}` is not a rigid transform: {e}") from e
        return arr

    @property
    def geometry(self) -> GeometryParameters:
        return self._geometry

    @property
    def joint_names(self) -> List[str]:
        return list(self._joint_names)

    @property
    def joint_limits(self) -> JointLimits:
        return self._joint_limits

    @property
    def config(self) -> SolverConfig:
        return self._config

    @property
    def n_joints(self) -> int:
        return N_JOINTS

    def forward_matrix(self, joint_angles_rad: ArrayLike) -> NDArray[np.float64]:
        """Compute the 4x4 homogeneous transform of the tool in the world frame.

        Args:
            joint_angles_rad: (6,) array of joint angles in radians.

        Returns:
            4x4 homogeneous transformation matrix.
        """
        q = as_joint_vector(joint_angles_rad)
        return self._base @ opw.forward(self._geometry, q) @ self._tool

    def forward(self, joint_angles_rad: ArrayLike) -> Pose:
        """Compute the tool pose for six joint angles. Defined for all finite input."""
        return Pose.from_matrix(self.forward_matrix(joint_angles_rad))

    def inverse(
        self,
        pose: Pose,
        reference: Optional[ArrayLike] = None,
        consistency_limits: Optional[ArrayLike] = None,
    ) -> IKResult:
        """All joint solutions reaching ``pose`` within the joint limits.

        Args:
            pose: Target tool pose in the world frame.
            reference: Optional (6,) joint angles. Supplies axis 4 at a wrist
                singularity, picks the whole-turn representative of each joint
                closest to it, and is required with ``consistency_limits``.
                Without it every in-limit representative is returned, so a
                joint whose range spans more than one turn adds extra rows
                under the same branch index.
            consistency_limits: Optional (6,) maximum absolute deviation from
                ``reference`` per joint.

        Returns:
            IKResult with solutions in ascending branch order. An unreachable
            or fully filtered pose yields ``IKResultCode.NO_SOLUTION``.
        """
        if not isinstance(pose, Pose):
            raise UsageError(f"pose must be a Pose, got {type(pose).__name__}")
        ref = None if reference is None else as_joint_vector(reference, "reference")
        margin = None
        if consistency_limits is not None:
            if ref is None:
                raise UsageError("consistency_limits requires a reference")
            margin = as_joint_vector(consistency_limits, "consistency_limits")
            if np.any(margin < 0.0):
                raise UsageError(f"consistency_limits must be non-negative, got {margin}")

        flange = self._base_inv @ pose.to_matrix() @ self._tool_inv
        candidates = opw.inverse(
            self._geometry,
            flange,
            reference=ref,
            singularity_tolerance=self._config.wrist_singularity_tolerance,
            domain_tolerance=self._config.domain_tolerance,
        )

        result = IKResult(code=IKResultCode.NO_SOLUTION)
        for index in np.flatnonzero(candidates.feasible):
            if ref is None:
                options = self._joint_limits.equivalents(candidates.angles[index])
            else:
                options = [self._joint_limits.nearest(candidates.angles[index], ref)]
            for q in options:
                if not self._joint_limits.contains(q):
                    continue
                if margin is not None and np.any(np.abs(q - ref) > margin):
                    continue
                result.solutions.append(q)
                result.branch_indices.append(int(index))

        if result.solutions:
            result.code = IKResultCode.SUCCESS
        else:
            logger.debug(
                "No IK solution for position %s (%d of %d branches feasible before limits)",
                pose.position,
                int(candidates.feasible.sum()),
                opw.N_BRANCHES,
            )
        return result

    def inverse_closest(
        self,
        pose: Pose,
        reference: ArrayLike,
        consistency_limits: Optional[ArrayLike] = None,
    ) -> IKResult:
        """The single solution closest to ``reference``.

        Distance follows ``config.distance_metric``; ties go to the lowest
        branch index.
        """
        ref = as_joint_vector(reference, "reference")
        result = self.inverse(pose, reference=ref, consistency_limits=consistency_limits)
        if not result.success:
            return result
        distances = joint_distances(result.as_array(), ref, self._config.distance_metric)
        best = int(np.argmin(distances))
        return IKResult(
            code=IKResultCode.SUCCESS,
            solutions=[result.solutions[best]],
            branch_indices=[result.branch_indices[best]],
        )
