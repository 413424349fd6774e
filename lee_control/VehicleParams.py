# VehicleParams.py
import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_ROTORS = 4


@dataclass(frozen=True)
class Rotor:
    """
    Geometry of a single rotor.
    angle is measured in the body x-y plane from the body x-axis,
    direction is +1 / -1 for the sense of rotation.
    """
    angle: float
    arm_length: float
    rotor_force_constant: float
    rotor_moment_constant: float
    direction: int = 1


def calculate_allocation_matrix(rotors: Sequence[Rotor]) -> np.ndarray:
    """
    4xN matrix mapping squared rotor velocities to [Mx, My, Mz, T].
    """
    alloc = np.zeros((4, len(rotors)))
    for i, rotor in enumerate(rotors):
        kf = rotor.rotor_force_constant
        alloc[0, i] = math.sin(rotor.angle) * rotor.arm_length * kf
        alloc[1, i] = -math.cos(rotor.angle) * rotor.arm_length * kf
        alloc[2, i] = -rotor.direction * kf * rotor.rotor_moment_constant
        alloc[3, i] = kf
    return alloc


def _frozen_array(value, shape, name):
    arr = np.array(value, dtype=float)
    if arr.shape != shape:
        raise ConfigurationError(f"{name} must have shape {shape}, got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ConfigurationError(f"{name} must be finite")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class VehicleParameters:
    mass: float
    gravity: float = 9.81
    inertia: np.ndarray = field(default_factory=lambda: np.diag([0.034, 0.045, 0.098]))
    rotor_configuration: Tuple[Rotor, ...] = ()
    # derived from rotor_configuration when not given
    allocation_matrix: Optional[np.ndarray] = None

    def __post_init__(self):
        if not (self.mass > 0.0):
            raise ConfigurationError(f"mass must be positive, got {self.mass}")
        if not math.isfinite(self.gravity):
            raise ConfigurationError(f"gravity must be finite, got {self.gravity}")

        J = _frozen_array(self.inertia, (3, 3), "inertia")
        if not np.allclose(J, J.T):
            raise ConfigurationError("inertia must be symmetric")
        if np.any(np.linalg.eigvalsh(J) <= 0.0):
            raise ConfigurationError("inertia must be positive definite")
        object.__setattr__(self, "inertia", J)

        rotors = tuple(self.rotor_configuration)
        object.__setattr__(self, "rotor_configuration", rotors)

        if self.allocation_matrix is None:
            if not rotors:
                raise ConfigurationError("either rotor_configuration or allocation_matrix is required")
            alloc = calculate_allocation_matrix(rotors)
            logger.debug("allocation matrix derived from %d rotors", len(rotors))
        else:
            alloc = np.asarray(self.allocation_matrix, dtype=float)

        if alloc.ndim != 2 or alloc.shape[0] != 4:
            raise ConfigurationError(f"allocation matrix must be 4xN, got shape {alloc.shape}")
        n_rotors = alloc.shape[1]
        if n_rotors < MIN_ROTORS:
            raise ConfigurationError(f"at least {MIN_ROTORS} rotors are required, got {n_rotors}")
        if rotors and len(rotors) != n_rotors:
            raise ConfigurationError(
                f"allocation matrix has {n_rotors} columns but {len(rotors)} rotors are configured")
        alloc = _frozen_array(alloc, (4, n_rotors), "allocation_matrix")
        if np.linalg.matrix_rank(alloc) < 4:
            raise ConfigurationError("allocation matrix does not have full row rank, allocation is ill-posed")
        object.__setattr__(self, "allocation_matrix", alloc)

    @property
    def n_rotors(self) -> int:
        return self.allocation_matrix.shape[1]


@dataclass(frozen=True, eq=False)
class ControllerGains:
    """Diagonal gains, applied element-wise."""
    position_gain: np.ndarray = field(default_factory=lambda: np.array([6.0, 6.0, 6.0]))
    velocity_gain: np.ndarray = field(default_factory=lambda: np.array([4.7, 4.7, 4.7]))
    attitude_gain: np.ndarray = field(default_factory=lambda: np.array([3.0, 3.0, 0.035]))
    angular_rate_gain: np.ndarray = field(default_factory=lambda: np.array([0.52, 0.52, 0.025]))

    def __post_init__(self):
        for name in ("position_gain", "velocity_gain", "attitude_gain", "angular_rate_gain"):
            gain = np.array(getattr(self, name), dtype=float)
            if gain.size != 3:
                raise ConfigurationError(f"{name} must have 3 components, got shape {gain.shape}")
            gain = gain.reshape(3)
            if not np.all(np.isfinite(gain)) or np.any(gain <= 0.0):
                raise ConfigurationError(f"{name} must be positive, got {gain}")
            gain.setflags(write=False)
            object.__setattr__(self, name, gain)


# --------------------------------------------------------------
#   Firefly hexacopter defaults
# --------------------------------------------------------------

def firefly_rotors() -> Tuple[Rotor, ...]:
    angles = [0.52359877559, 1.57079632679, 2.61799387799,
              -2.61799387799, -1.57079632679, -0.52359877559]
    directions = [-1, 1, -1, 1, -1, 1]
    return tuple(Rotor(angle=a,
                       arm_length=0.215,
                       rotor_force_constant=8.54858e-06,
                       rotor_moment_constant=1.6e-02,
                       direction=d)
                 for a, d in zip(angles, directions))


def firefly_parameters() -> VehicleParameters:
    return VehicleParameters(mass=1.56779,
                             gravity=9.81,
                             inertia=np.diag([0.034, 0.045, 0.098]),
                             rotor_configuration=firefly_rotors())


def firefly_gains() -> ControllerGains:
    return ControllerGains()
