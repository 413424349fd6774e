import argparse

import matplotlib.pyplot as plt
import numpy as np

from .log import ControlLog

AXES = ("x", "y", "z")


def plot_entry(ax, t, values, ylabel, scale=1.0):
    ax.set_xlabel("t (s)")
    ax.set_ylabel(ylabel)
    ax.grid(True)
    values = np.atleast_2d(values)
    for i in range(values.shape[1]):
        ax.plot(t, values[:, i] * scale, label=AXES[i] if values.shape[1] == 3 else f"rotor {i}")
    ax.axhline(y=0.0, color='red', linewidth=0.8)
    ax.legend(loc="upper right")


def plot_log(log: ControlLog, show=True):
    """Tracking errors and rotor commands of a recorded run."""
    data = log.as_arrays()
    if len(log) == 0:
        raise ValueError("control log is empty")
    t = data["time"]

    fig, axes = plt.subplots(3, 2, figsize=(12, 8))
    plot_entry(axes[0, 0], t, data["position_error"], "position error (m)")
    plot_entry(axes[0, 1], t, data["velocity_error"], "velocity error (m/s)")
    plot_entry(axes[1, 0], t, data["attitude_error"], "attitude error (deg)", scale=180 / np.pi)
    plot_entry(axes[1, 1], t, data["angular_rate_error"], "rate error (deg/s)", scale=180 / np.pi)
    plot_entry(axes[2, 0], t, data["rotor_velocities"], "rotor velocity (rad/s)")

    axes[2, 1].set_xlabel("t (s)")
    axes[2, 1].set_ylabel("psi")
    axes[2, 1].grid(True)
    axes[2, 1].plot(t, data["psi"])

    fig.tight_layout()
    if show:
        plt.show()
    return fig


def main():
    parser = argparse.ArgumentParser(description="Plot a pickled control log")
    parser.add_argument("log_file")
    args = parser.parse_args()
    plot_log(ControlLog.load(args.log_file))


if __name__ == "__main__":
    main()
