# log.py
import logging
import pickle
from pathlib import Path

import numpy as np

from .references import Diagnostics

logger = logging.getLogger(__name__)


class ControlLog:
    """
    Records control outputs and tracking errors cycle by cycle.

    Entries are kept as lists and stacked into arrays on demand:
        log.record(t, rotor_velocities, diagnostics)
        log.as_arrays()["attitude_error"]   # (n_samples, 3)
    """

    KEYS = ("time", "rotor_velocities", "position_error", "velocity_error",
            "attitude_error", "angular_rate_error", "psi")

    def __init__(self):
        self.log_dict = {key: [] for key in self.KEYS}

    def __len__(self):
        return len(self.log_dict["time"])

    def record(self, t: float, rotor_velocities, diagnostics: Diagnostics):
        self.log_dict["time"].append(float(t))
        self.log_dict["rotor_velocities"].append(np.array(rotor_velocities, dtype=float))
        self.log_dict["position_error"].append(np.array(diagnostics.position_error, dtype=float))
        self.log_dict["velocity_error"].append(np.array(diagnostics.velocity_error, dtype=float))
        self.log_dict["attitude_error"].append(np.array(diagnostics.attitude_error, dtype=float))
        self.log_dict["angular_rate_error"].append(np.array(diagnostics.angular_rate_error, dtype=float))
        self.log_dict["psi"].append(float(diagnostics.psi))

    def as_arrays(self) -> dict:
        if len(self) == 0:
            return {key: np.empty(0) for key in self.KEYS}
        return {key: np.stack(values) if key not in ("time", "psi") else np.array(values)
                for key, values in self.log_dict.items()}

    def save(self, file_name):
        path = Path(file_name)
        with open(path, "wb") as f:
            pickle.dump(self.log_dict, f)
        logger.info("saved %d control samples to %s", len(self), path)

    @classmethod
    def load(cls, file_name):
        with open(file_name, "rb") as f:
            log_dict = pickle.load(f)
        missing = [key for key in cls.KEYS if key not in log_dict]
        if missing:
            raise ValueError(f"{file_name} is not a control log, missing {missing}")
        log = cls()
        log.log_dict = {key: list(log_dict[key]) for key in cls.KEYS}
        return log
