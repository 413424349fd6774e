# ForceController.py
import numpy as np

from .references import VehicleState, TrajectoryCommand
from .VehicleParams import VehicleParameters, ControllerGains

E3 = np.array([0.0, 0.0, 1.0])


def compute_desired_force(state: VehicleState, command: TrajectoryCommand,
                          gains: ControllerGains, params: VehicleParameters):
    """
    Desired force in the world frame.

    The result points opposite to the required thrust: at hover it is
    (0, 0, -m g), and the desired body z-axis is -force / |force|.

    Returns (force, position_error, velocity_error).
    """
    position_error = state.position - command.position
    # body velocity -> world frame before comparing with the command
    velocity_error = state.orientation @ state.velocity - command.velocity

    force = (position_error * gains.position_gain
             + velocity_error * gains.velocity_gain
             - params.mass * params.gravity * E3
             - params.mass * command.acceleration)

    return force, position_error, velocity_error
