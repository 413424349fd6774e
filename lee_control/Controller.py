# Controller.py
import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Optional

import numpy as np

from . import AttitudeController as att
from .errors import ConfigurationError, NotConfiguredError, DegenerateForceError, NonFiniteCommandError
from .ForceController import compute_desired_force
from .Mixer import Mixer
from .MomentController import compute_moment, compute_thrust
from .references import VehicleState, TrajectoryCommand, RuntimeState, Diagnostics
from .VehicleParams import VehicleParameters, ControllerGains

logger = logging.getLogger(__name__)


class LeePositionController:
    """
    Geometric position controller producing rotor angular velocities.

    Usage per control cycle (single thread):
        controller.set_state(...)
        controller.set_trajectory(...)      # at least once to activate
        rotor_velocities, diagnostics = controller.compute_rotor_velocities()

    Until the first trajectory command arrives every output is zero.
    """

    @dataclass
    class Params:
        dt: float = 0.02                    # nominal step for differentiating R_des [s]
        yaw_speed_threshold: float = 1e-3   # below this horizontal speed keep the last heading [m/s]
        default_yaw: float = 0.0            # heading used until a velocity command defines one [rad]
        min_force_norm: float = 1e-6        # smallest usable desired force [N]

        def __post_init__(self):
            if not self.dt > 0.0:
                raise ValueError(f"dt must be positive, got {self.dt}")
            if self.yaw_speed_threshold < 0.0:
                raise ValueError(f"yaw_speed_threshold must be >= 0, got {self.yaw_speed_threshold}")
            if not 0.0 <= self.default_yaw < 2.0 * math.pi:
                raise ValueError(f"default_yaw must lie in [0, 2*pi), got {self.default_yaw}")
            if not self.min_force_norm > 0.0:
                raise ValueError(f"min_force_norm must be positive, got {self.min_force_norm}")

        def to_dict(self) -> dict[str, Any]:
            return {f.name: getattr(self, f.name) for f in fields(self)}

    # -------------------------------------------------------------------

    def __init__(self, vehicle_params: Optional[VehicleParameters] = None,
                 gains: Optional[ControllerGains] = None,
                 params: Optional[Params] = None):
        self.params = params if params is not None else LeePositionController.Params()
        self.vehicle_params = None
        self.gains = None
        self.mixer = None

        self.state = VehicleState()
        self.command = TrajectoryCommand()
        self.runtime = RuntimeState(yaw_prev=self.params.default_yaw)

        if vehicle_params is not None:
            self.configure(vehicle_params, gains if gains is not None else ControllerGains())

    # -------------------------------------------------------------------

    def configure(self, vehicle_params: VehicleParameters, gains: ControllerGains,
                  params: Optional[Params] = None):
        """
        One-time setup. Caches the allocation pseudo-inverse and resets the
        differentiation memory. The activation flag is kept.
        """
        if not isinstance(vehicle_params, VehicleParameters):
            raise ConfigurationError(f"expected VehicleParameters, got {type(vehicle_params).__name__}")
        if not isinstance(gains, ControllerGains):
            raise ConfigurationError(f"expected ControllerGains, got {type(gains).__name__}")
        if params is not None:
            self.params = params

        mixer = Mixer(vehicle_params)

        self.vehicle_params = vehicle_params
        self.gains = gains
        self.mixer = mixer
        self.reset_memory()

        logger.info("configured for %d rotors, mass %.3f kg, params %s",
                    vehicle_params.n_rotors, vehicle_params.mass, self.params.to_dict())

    def set_params(self, params: Params):
        """Replace the controller parameters. Resets the memory like configure()."""
        self.params = params
        self.reset_memory()

    def reset_memory(self):
        self.runtime.R_des_prev = np.zeros((3, 3))
        self.runtime.yaw_prev = self.params.default_yaw

    @property
    def is_configured(self) -> bool:
        return self.mixer is not None

    @property
    def is_active(self) -> bool:
        return self.runtime.active

    # -------------------------------------------------------------------

    def set_state(self, position, velocity, orientation, angular_velocity):
        """velocity and angular_velocity in the body frame, orientation body -> world."""
        self.state = VehicleState(position=position, velocity=velocity,
                                  orientation=orientation, angular_velocity=angular_velocity)

    def set_state_from_quaternion(self, position, quaternion, velocity, angular_velocity):
        """Same as set_state() with a scalar-last [x, y, z, w] orientation quaternion."""
        self.state = VehicleState.from_quaternion(position, quaternion, velocity, angular_velocity)

    def set_trajectory(self, position, velocity, acceleration):
        self.command = TrajectoryCommand(position=position, velocity=velocity,
                                         acceleration=acceleration)
        if not self.runtime.active:
            self.runtime.active = True
            logger.info("first trajectory command received, controller active")

    # -------------------------------------------------------------------
    #   Control cycle
    # -------------------------------------------------------------------

    def compute_rotor_velocities(self, dt: Optional[float] = None):
        """
        Run one control cycle.

        dt overrides the nominal differentiation step, e.g. with the measured
        loop period.

        Returns (rotor_velocities, Diagnostics). rotor_velocities has one
        non-negative entry per rotor.

        Raises NotConfiguredError before configure(), DegenerateForceError
        when no thrust axis can be built, NonFiniteCommandError when the
        command overflows. A rejected cycle leaves the runtime memory
        untouched.
        """
        if not self.is_configured:
            raise NotConfiguredError("configure() must be called before computing rotor velocities")

        # Return 0 velocities on all rotors until the first command is received
        if not self.runtime.active:
            return np.zeros(self.mixer.n_rotors), Diagnostics()

        step = self.params.dt if dt is None else dt
        state = self.state
        R = state.orientation
        omega = state.angular_velocity

        force, position_error, velocity_error = compute_desired_force(
            state, self.command, self.gains, self.vehicle_params)

        yaw = att.desired_yaw(self.command.velocity, self.runtime.yaw_prev,
                              self.params.yaw_speed_threshold)
        try:
            R_des = att.desired_rotation(force, yaw, self.params.min_force_norm)
        except DegenerateForceError:
            logger.error("rejecting control cycle: degenerate desired force %s", force)
            raise

        attitude_error = att.attitude_error(R, R_des)
        rate_des = att.desired_angular_rate(R_des, self.runtime.R_des_prev, step)
        rate_error = att.angular_rate_error(omega, R, R_des, rate_des)

        # huge but finite inputs can overflow, e.g. the gyroscopic term
        with np.errstate(over="ignore", invalid="ignore"):
            moment = compute_moment(attitude_error, rate_error, omega,
                                    self.gains, self.vehicle_params.inertia)
            thrust = compute_thrust(force, R)
            rotor_velocities = self.mixer.get_control_signal(moment, thrust)
        if not (np.all(np.isfinite(moment)) and np.isfinite(thrust)
                and np.all(np.isfinite(rotor_velocities))):
            logger.error("rejecting control cycle: non-finite command, moment %s thrust %s",
                         moment, thrust)
            raise NonFiniteCommandError(f"non-finite rotor command for moment {moment}, thrust {thrust}")

        # commit memory only once the whole chain succeeded
        self.runtime.R_des_prev = R_des
        self.runtime.yaw_prev = yaw

        diagnostics = Diagnostics(position_error=position_error,
                                  velocity_error=velocity_error,
                                  attitude_error=attitude_error,
                                  angular_rate_error=rate_error,
                                  psi=att.attitude_error_function(R, R_des),
                                  R_des=R_des)
        return rotor_velocities, diagnostics
