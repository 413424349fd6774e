import numpy as np
import pytest
import matplotlib
from scipy.spatial.transform import Rotation

matplotlib.use("Agg")

from lee_control.Controller import LeePositionController
from lee_control.VehicleParams import Rotor, VehicleParameters, ControllerGains, firefly_parameters


def quad_x_rotors(arm_length=0.17, kf=8.54858e-06, km=1.6e-02):
    '''symmetric X-configuration quadrotor, alternating spin directions'''
    angles = [np.pi / 4, 3 * np.pi / 4, -3 * np.pi / 4, -np.pi / 4]
    directions = [-1, 1, -1, 1]
    return tuple(Rotor(angle=a, arm_length=arm_length, rotor_force_constant=kf,
                       rotor_moment_constant=km, direction=d)
                 for a, d in zip(angles, directions))


@pytest.fixture
def quad_params():
    return VehicleParameters(mass=1.0, gravity=9.81,
                             inertia=np.diag([0.01, 0.01, 0.02]),
                             rotor_configuration=quad_x_rotors())


@pytest.fixture
def hexa_params():
    return firefly_parameters()


@pytest.fixture
def gains():
    return ControllerGains()


@pytest.fixture
def quad_controller(quad_params, gains):
    '''configured quadrotor controller at rest at the origin, not yet active'''
    controller = LeePositionController()
    controller.configure(quad_params, gains)
    controller.set_state(position=np.zeros(3), velocity=np.zeros(3),
                         orientation=np.eye(3), angular_velocity=np.zeros(3))
    return controller


def rot_x(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rot_z(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def random_rotations(n, seed):
    '''n rotation matrices from uniformly drawn intrinsic z-y-x angles'''
    rng = np.random.default_rng(seed)
    angles = rng.uniform(-np.pi, np.pi, size=(n, 3))
    return Rotation.from_euler("ZYX", angles).as_matrix()
