# references.py
from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation

from .matrix_utils import as_vector3, is_rotation_matrix

# Frames:
#   world - inertial, z-up
#   body  - fixed to the airframe, origin at the center of mass


@dataclass
class VehicleState:
    """
    Latest state estimate.
    velocity and angular_velocity are expressed in the body frame,
    orientation maps body vectors into the world frame.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: np.ndarray = field(default_factory=lambda: np.eye(3))
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.position = as_vector3(self.position, "position")
        self.velocity = as_vector3(self.velocity, "velocity")
        self.angular_velocity = as_vector3(self.angular_velocity, "angular_velocity")
        self.orientation = np.array(self.orientation, dtype=float)
        if not is_rotation_matrix(self.orientation):
            raise ValueError(f"orientation must be a rotation matrix, got\n{self.orientation}")

    @property
    def world_velocity(self) -> np.ndarray:
        return self.orientation @ self.velocity

    @classmethod
    def from_quaternion(cls, position, quaternion, velocity, angular_velocity):
        """
        Build a state from odometry carrying a scalar-last [x, y, z, w] quaternion.
        The quaternion is normalized before conversion.
        """
        q = np.asarray(quaternion, dtype=float).reshape(4)
        if not np.all(np.isfinite(q)) or np.linalg.norm(q) == 0.0:
            raise ValueError(f"quaternion must be finite and non-zero, got {q}")
        R = Rotation.from_quat(q).as_matrix()
        return cls(position=position, velocity=velocity,
                   orientation=R, angular_velocity=angular_velocity)

    def __str__(self):
        return (
            f"State: pos = {self.position}, vel (body) = {self.velocity}, "
            f"omega = {self.angular_velocity}, R =\n{self.orientation}"
        )


@dataclass
class TrajectoryCommand:
    """
    Desired position, velocity and acceleration, all in the world frame.
    """
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    acceleration: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.position = as_vector3(self.position, "position")
        self.velocity = as_vector3(self.velocity, "velocity")
        self.acceleration = as_vector3(self.acceleration, "acceleration")

    def __str__(self):
        return (
            f"Trajectory: pos = {self.position}, vel = {self.velocity}, "
            f"acc = {self.acceleration}"
        )


@dataclass
class RuntimeState:
    """
    Memory carried between control cycles. Owned by a single controller.
    R_des_prev starts as the zero matrix, which yields a zero desired
    angular rate on the first active cycle.
    """
    R_des_prev: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
    yaw_prev: float = 0.0
    active: bool = False


@dataclass
class Diagnostics:
    """
    Tracking errors of one control cycle. Observability only, nothing is fed back.
    """
    position_error: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity_error: np.ndarray = field(default_factory=lambda: np.zeros(3))
    attitude_error: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angular_rate_error: np.ndarray = field(default_factory=lambda: np.zeros(3))
    # attitude error function 0.5 * tr(I - R_des^T R), in [0, 2]
    psi: float = 0.0
    R_des: np.ndarray = field(default_factory=lambda: np.eye(3))

    def __str__(self):
        return (
            f"Errors: pos = {self.position_error}, vel = {self.velocity_error}, "
            f"att = {self.attitude_error}, rate = {self.angular_rate_error}, psi = {self.psi}"
        )
