"""OPW geometry parameters and per-axis sign/offset corrections."""

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from opwpy.errors import ConfigurationError

LINK_PARAMETER_NAMES: Tuple[str, ...] = ("a1", "a2", "b", "c1", "c2", "c3", "c4")

N_JOINTS = 6


def _six_floats(name: str, values: Any) -> Tuple[float, ...]:
    try:
        out = tuple(float(v) for v in values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"`{name}` must be a sequence of numbers: {values!r}") from e
    if len(out) != N_JOINTS:
        raise ConfigurationError(f"`{name}` must have {N_JOINTS} entries, got {len(out)}")
    if not all(math.isfinite(v) for v in out):
        raise ConfigurationError(f"`{name}` contains non-finite values: {out}")
    return out


@dataclass(frozen=True)
class GeometryParameters:
    """The seven OPW link parameters plus axis conventions.

    Lengths share one unit (meters throughout this package). Zero lengths
    are allowed for simplified arms.

    Attributes:
        a1: Shoulder offset along X between axis 1 and axis 2.
        a2: Elbow offset between the forearm and the wrist center.
        b: Lateral shoulder offset along Y.
        c1: Height of axis 2 above the base.
        c2: Upper arm length (axis 2 to axis 3).
        c3: Forearm length (axis 3 to the wrist center).
        c4: Wrist center to flange.
        offsets: Zero-pose offset per joint in radians.
        sign_corrections: Axis direction per joint, each +1 or -1.
    """

    a1: float
    a2: float
    b: float
    c1: float
    c2: float
    c3: float
    c4: float
    offsets: Tuple[float, ...] = field(default=(0.0,) * N_JOINTS)
    sign_corrections: Tuple[float, ...] = field(default=(1.0,) * N_JOINTS)

    def __post_init__(self) -> None:
        for name in LINK_PARAMETER_NAMES:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ConfigurationError(f"`{name}` must be a real number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"`{name}` must be finite, got {value!r}")
            object.__setattr__(self, name, float(value))

        offsets = _six_floats("offsets", self.offsets)
        signs = _six_floats("sign_corrections", self.sign_corrections)
        if any(s not in (1.0, -1.0) for s in signs):
            raise ConfigurationError(f"`sign_corrections` must only contain +1 or -1, got {signs}")
        object.__setattr__(self, "offsets", offsets)
        object.__setattr__(self, "sign_corrections", signs)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeometryParameters":
        """Build from a mapping such as a parsed robot description section.

        ``a1`` .. ``c4`` are required; ``offsets`` and ``sign_corrections``
        default to zeros and ones.
        """
        missing = [name for name in LINK_PARAMETER_NAMES if name not in data]
        if missing:
            raise ConfigurationError(f"Missing geometry parameters: {', '.join(missing)}")
        kwargs: dict[str, Any] = {}
        for name in LINK_PARAMETER_NAMES:
            try:
                kwargs[name] = float(data[name])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"`{name}` must be a real number, got {data[name]!r}"
                ) from e
        if "offsets" in data:
            kwargs["offsets"] = data["offsets"]
        if "sign_corrections" in data:
            kwargs["sign_corrections"] = data["sign_corrections"]
        return cls(**kwargs)

    def to_mapping(self) -> dict[str, Any]:
        out: dict[str, Any] = {name: getattr(self, name) for name in LINK_PARAMETER_NAMES}
        out["offsets"] = list(self.offsets)
        out["sign_corrections"] = list(self.sign_corrections)
        return out

    @property
    def offsets_array(self) -> NDArray[np.float64]:
        return np.array(self.offsets)

    @property
    def signs_array(self) -> NDArray[np.float64]:
        return np.array(self.sign_corrections)

    def to_model_angles(self, joint_angles: ArrayLike) -> NDArray[np.float64]:
        """Convert external joint values to raw OPW model angles.

        ``q = qs * sign - offset``; works on (6,) or (n, 6) arrays.
        """
        qs = np.asarray(joint_angles, dtype=np.float64)
        return qs * self.signs_array - self.offsets_array

    def from_model_angles(self, model_angles: ArrayLike) -> NDArray[np.float64]:
        """Inverse of :meth:`to_model_angles`: ``qs = (q + offset) * sign``."""
        q = np.asarray(model_angles, dtype=np.float64)
        return (q + self.offsets_array) * self.signs_array
