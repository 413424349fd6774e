# AttitudeController.py
"""
Desired attitude and angular rate on SO(3), after
T. Lee, M. Leok, N. H. McClamroch, "Geometric tracking control of a
quadrotor UAV on SE(3)", CDC 2010.

The desired force is the negative of the required thrust vector, so the
desired body z-axis b3 = -force / |force| is the direction the rotors push.
"""
import math

import numpy as np

from .errors import DegenerateForceError
from .matrix_utils import vee

TWO_PI = 2.0 * math.pi


def desired_yaw(velocity, previous_yaw: float = 0.0, speed_threshold: float = 1e-3) -> float:
    """
    Heading along the horizontal component of the desired velocity, in [0, 2*pi).
    Below speed_threshold atan2 is meaningless and previous_yaw is kept.
    """
    vx, vy = float(velocity[0]), float(velocity[1])
    if math.hypot(vx, vy) < speed_threshold:
        return previous_yaw

    yaw = math.atan2(vy, vx)
    if yaw < 0.0:
        yaw += TWO_PI
    # a tiny negative angle plus 2*pi can round up to 2*pi
    if yaw >= TWO_PI:
        yaw = 0.0
    return yaw


def desired_rotation(force, yaw: float, min_force_norm: float = 1e-6) -> np.ndarray:
    force = np.asarray(force, dtype=float)
    force_norm = np.linalg.norm(force)
    if not np.isfinite(force_norm) or force_norm < min_force_norm:
        raise DegenerateForceError(f"desired force {force} is too small to define a thrust axis")

    b1_des = np.array([math.cos(yaw), math.sin(yaw), 0.0])
    b3_des = -force / force_norm

    b2_des = np.cross(b3_des, b1_des)
    b2_norm = np.linalg.norm(b2_des)
    if b2_norm < 1e-9:
        raise DegenerateForceError(f"desired heading {b1_des} is parallel to the thrust axis {b3_des}")
    b2_des /= b2_norm

    R_des = np.zeros((3, 3))
    R_des[:, 0] = np.cross(b2_des, b3_des)
    R_des[:, 1] = b2_des
    R_des[:, 2] = b3_des
    return R_des


def attitude_error(R, R_des) -> np.ndarray:
    """e_R = vee(0.5 * (R_des^T R - R^T R_des)), zero iff R == R_des."""
    R_error = 0.5 * (R_des.T @ R - R.T @ R_des)
    return vee(R_error)


def attitude_error_function(R, R_des) -> float:
    return 0.5 * float(np.trace(np.eye(3) - R_des.T @ R))


def desired_angular_rate(R_des, R_des_prev, dt: float) -> np.ndarray:
    """
    Body rate of the desired attitude from a backward difference of R_des.
    """
    if not dt > 0.0:
        raise ValueError(f"differentiation step must be positive, got {dt}")
    R_des_dot = (R_des - R_des_prev) / dt
    return vee(R_des.T @ R_des_dot)


def angular_rate_error(omega, R, R_des, angular_rate_des) -> np.ndarray:
    return omega - R.T @ R_des @ angular_rate_des
