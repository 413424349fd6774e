# MomentController.py
import numpy as np

from .VehicleParams import ControllerGains


def compute_moment(attitude_error, angular_rate_error, omega,
                   gains: ControllerGains, inertia) -> np.ndarray:
    """
    M = -k_R * e_R - k_w * e_w + w x (J w)
    The gyroscopic term uses the inertia estimate and is always applied.
    """
    omega = np.asarray(omega, dtype=float)
    return (-attitude_error * gains.attitude_gain
            - angular_rate_error * gains.angular_rate_gain
            + np.cross(omega, inertia @ omega))


def compute_thrust(force, R) -> float:
    """Desired force projected on the body z-axis (world frame). May be negative."""
    return -float(np.dot(force, R[:, 2]))
