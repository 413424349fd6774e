from .Controller import LeePositionController
from .errors import (ControllerError, ConfigurationError, NotConfiguredError, DegenerateForceError,
                     NonFiniteCommandError)
from .log import ControlLog
from .references import VehicleState, TrajectoryCommand, RuntimeState, Diagnostics
from .VehicleParams import (Rotor, VehicleParameters, ControllerGains, calculate_allocation_matrix,
                            firefly_parameters, firefly_gains)

VERSION = "0.1.0"
