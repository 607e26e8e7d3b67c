"""Per-joint position limits used to filter IK solutions."""

from dataclasses import dataclass
from itertools import product
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from opwpy.errors import ConfigurationError

from .geometry import N_JOINTS

TWO_PI = 2.0 * np.pi


@dataclass(frozen=True, eq=False)
class JointLimits:
    """Inclusive ``[lower, upper]`` bounds in radians, one pair per joint.

    Infinite bounds are allowed and mean the joint is unbounded on that side.
    """

    lower: NDArray[np.float64]
    upper: NDArray[np.float64]

    def __post_init__(self) -> None:
        try:
            lower = np.array(self.lower, dtype=np.float64)
            upper = np.array(self.upper, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Joint limits must be numeric: {e}") from e
        if lower.shape != (N_JOINTS,) or upper.shape != (N_JOINTS,):
            raise ConfigurationError(
                f"Expected {N_JOINTS} lower and upper limits, "
                f"got shapes {lower.shape} and {upper.shape}"
            )
        if np.any(np.isnan(lower)) or np.any(np.isnan(upper)):
            raise ConfigurationError("Joint limits must not contain NaN")
        if np.any(lower > upper):
            bad = [int(i) for i in np.flatnonzero(lower > upper)]
            raise ConfigurationError(f"Lower limit exceeds upper limit for joints {bad}")
        lower.flags.writeable = False
        upper.flags.writeable = False
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    @classmethod
    def unbounded(cls) -> "JointLimits":
        return cls(lower=np.full(N_JOINTS, -np.inf), upper=np.full(N_JOINTS, np.inf))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[float]]) -> "JointLimits":
        """Construct from six ``(lower, upper)`` pairs."""
        try:
            arr = np.array([tuple(p) for p in pairs], dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Joint limits must be (lower, upper) pairs: {e}") from e
        if arr.shape != (N_JOINTS, 2):
            raise ConfigurationError(
                f"Expected {N_JOINTS} (lower, upper) pairs, got array of shape {arr.shape}"
            )
        return cls(lower=arr[:, 0], upper=arr[:, 1])

    def to_pairs(self) -> list[list[float]]:
        return [[float(lo), float(hi)] for lo, hi in zip(self.lower, self.upper)]

    def contains(self, joint_angles: ArrayLike) -> bool:
        q = np.asarray(joint_angles, dtype=np.float64)
        return bool(np.all((q >= self.lower) & (q <= self.upper)))

    def _turn_range(
        self, q: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Smallest and largest whole turns ``k`` with ``q + 2 pi k`` inside the limits.

        An unbounded side yields an infinite ``k``; ``lo > hi`` means no turn fits.
        """
        lo = np.ceil((self.lower - q) / TWO_PI)
        hi = np.floor((self.upper - q) / TWO_PI)
        return lo, hi

    def nearest(self, joint_angles: ArrayLike, reference: ArrayLike) -> NDArray[np.float64]:
        """Shift each joint by whole turns to the value closest to ``reference`` within limits.

        Joints that no shift brings inside the limits are returned unchanged.
        """
        q = np.array(joint_angles, dtype=np.float64)
        ref = np.asarray(reference, dtype=np.float64)
        lo, hi = self._turn_range(q)
        preferred = np.round((ref - q) / TWO_PI)
        turns = np.where(lo <= hi, np.clip(preferred, lo, hi), 0.0)
        return q + TWO_PI * turns

    def equivalents(self, joint_angles: ArrayLike) -> NDArray[np.float64]:
        """Every whole-turn shift of ``joint_angles`` lying inside the limits.

        An unbounded side only admits turns up to zero, so an unbounded joint keeps its
        given value. Per joint the values closest to zero come first.

        Returns:
            (n, 6) array; empty when some joint fits no shift.
        """
        q = np.array(joint_angles, dtype=np.float64)
        lo, hi = self._turn_range(q)
        per_joint = []
        for value, k_lo, k_hi in zip(q, lo, hi):
            if k_lo > k_hi:
                return np.empty((0, N_JOINTS))
            first = k_lo if np.isfinite(k_lo) else min(0.0, k_hi)
            last = k_hi if np.isfinite(k_hi) else max(0.0, k_lo)
            values = value + TWO_PI * np.arange(first, last + 1.0)
            per_joint.append(sorted(values, key=abs))
        return np.array(list(product(*per_joint)), dtype=np.float64)
