# Mixer.py
import logging

import numpy as np

from .errors import ConfigurationError
from .VehicleParams import VehicleParameters

logger = logging.getLogger(__name__)


class Mixer:
    """
    Maps a [Mx, My, Mz, T] command to rotor angular velocities through the
    pseudo-inverse of the allocation matrix (thrust ~ omega^2).
    """

    def __init__(self, vehicle_params: VehicleParameters):
        self.vehicle_params = vehicle_params
        self.allocation_matrix_inv = None

        self.calculate_allocation()

    # --------------------------------------------------------------

    def calculate_allocation(self):
        alloc = np.asarray(self.vehicle_params.allocation_matrix, dtype=float)

        # right pseudo-inverse: A^T (A A^T)^-1
        try:
            self.allocation_matrix_inv = alloc.T @ np.linalg.inv(alloc @ alloc.T)
        except np.linalg.LinAlgError as e:
            raise ConfigurationError("allocation matrix A A^T is singular") from e

        logger.debug("allocation pseudo-inverse cached for %d rotors", alloc.shape[1])

    # --------------------------------------------------------------

    @property
    def n_rotors(self) -> int:
        return self.allocation_matrix_inv.shape[0]

    def get_control_signal(self, moment, thrust: float) -> np.ndarray:
        moment_thrust = np.empty(4)
        moment_thrust[0:3] = moment
        moment_thrust[3] = thrust

        rotor_velocities_sq = self.allocation_matrix_inv @ moment_thrust

        # negative squared speeds are unattainable: saturate at zero
        saturated = rotor_velocities_sq < 0.0
        if np.any(saturated):
            logger.debug("rotors %s saturated at zero", np.flatnonzero(saturated).tolist())
            rotor_velocities_sq[saturated] = 0.0

        return np.sqrt(rotor_velocities_sq)

    # --------------------------------------------------------------

    def get_allocation_matrix(self):
        return np.array(self.allocation_matrix_inv, copy=True)
