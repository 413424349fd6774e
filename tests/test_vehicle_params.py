import dataclasses

import numpy as np
import pytest
from numpy.testing import assert_allclose

from lee_control.errors import ConfigurationError
from lee_control.Mixer import Mixer
from lee_control.VehicleParams import (Rotor, VehicleParameters, ControllerGains,
                                       calculate_allocation_matrix, firefly_rotors)

from conftest import quad_x_rotors


def test_calculate_allocation_matrix_0():
    '''check allocation columns for a rotor on the body y-axis'''
    # ~~ ARRANGE ~~
    rotor = Rotor(angle=np.pi / 2, arm_length=0.2, rotor_force_constant=1e-5,
                  rotor_moment_constant=0.02, direction=1)

    # ~~ ACT ~~
    alloc = calculate_allocation_matrix([rotor])

    # ~~ ASSERT ~~~
    assert alloc.shape == (4, 1)
    assert_allclose(alloc[:, 0], [0.2 * 1e-5, 0.0, -1e-5 * 0.02, 1e-5], atol=1e-15)


def test_allocation_pseudo_inverse_identity_0(hexa_params, quad_params):
    '''check that A @ pinv(A) is the 4x4 identity for full rank configurations'''
    for params in (hexa_params, quad_params):
        # ~~ ACT ~~
        mixer = Mixer(params)
        A = params.allocation_matrix

        # ~~ ASSERT ~~~
        assert_allclose(A @ mixer.get_allocation_matrix(), np.eye(4), atol=1e-9)


def test_vehicle_parameters_precomputed_allocation_0():
    '''check that a precomputed allocation matrix is used as given'''
    # ~~ ARRANGE ~~
    alloc = calculate_allocation_matrix(firefly_rotors())

    # ~~ ACT ~~
    params = VehicleParameters(mass=1.5, allocation_matrix=alloc)

    # ~~ ASSERT ~~~
    assert params.n_rotors == 6
    assert_allclose(params.allocation_matrix, alloc)
    assert params.rotor_configuration == ()


def test_vehicle_parameters_immutable_0(quad_params):
    '''check that parameters cannot be changed after construction'''
    with pytest.raises(dataclasses.FrozenInstanceError):
        quad_params.mass = 2.0
    assert not quad_params.allocation_matrix.flags.writeable
    assert not quad_params.inertia.flags.writeable


@pytest.mark.parametrize("kwargs", [
    dict(mass=0.0),
    dict(mass=-1.0),
    dict(mass=1.0, gravity=np.nan),
    dict(mass=1.0, inertia=np.array([[1.0, 0.1, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])),
    dict(mass=1.0, inertia=np.diag([1.0, -1.0, 1.0])),
    dict(mass=1.0, inertia=np.eye(2)),
])
def test_vehicle_parameters_invalid_0(kwargs):
    '''check that invalid physical parameters are rejected'''
    with pytest.raises(ConfigurationError):
        VehicleParameters(rotor_configuration=quad_x_rotors(), **kwargs)


def test_vehicle_parameters_too_few_rotors_0():
    '''check that fewer than four rotors is a configuration fault'''
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0, rotor_configuration=quad_x_rotors()[:3])


def test_vehicle_parameters_rank_deficient_0():
    '''check that an allocation matrix without full row rank is rejected'''
    # ~~ ARRANGE ~~
    # coaxial rotors all on the x-axis cannot produce a roll moment
    rotors = [Rotor(angle=0.0, arm_length=0.2, rotor_force_constant=1e-5,
                    rotor_moment_constant=0.02, direction=d) for d in (1, -1, 1, -1)]

    # ~~ ACT / ASSERT ~~
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0, rotor_configuration=rotors)
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0, allocation_matrix=np.ones((4, 4)))


def test_vehicle_parameters_missing_allocation_0():
    '''check that rotors or an allocation matrix must be given'''
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0)
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0, allocation_matrix=np.ones((3, 4)))


def test_vehicle_parameters_rotor_count_mismatch_0():
    '''check that the allocation matrix must match the rotor list'''
    alloc = calculate_allocation_matrix(firefly_rotors())
    with pytest.raises(ConfigurationError):
        VehicleParameters(mass=1.0, rotor_configuration=quad_x_rotors(), allocation_matrix=alloc)


def test_controller_gains_0():
    '''check gain coercion and validation'''
    # ~~ ACT ~~
    gains = ControllerGains(position_gain=[1, 2, 3])

    # ~~ ASSERT ~~~
    assert gains.position_gain.dtype == float
    assert_allclose(gains.position_gain, [1.0, 2.0, 3.0])
    with pytest.raises(ConfigurationError):
        ControllerGains(velocity_gain=[1.0, 0.0, 1.0])
    with pytest.raises(ConfigurationError):
        ControllerGains(attitude_gain=[1.0, 1.0])
    with pytest.raises(ConfigurationError):
        ControllerGains(angular_rate_gain=[1.0, -1.0, 1.0])
