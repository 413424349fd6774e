import numpy as np
import pytest
from numpy.testing import assert_allclose

from lee_control.log import ControlLog
from lee_control.plot_diagnostics import plot_log


def record_hover(controller, n_steps, dt=0.02):
    log = ControlLog()
    controller.set_trajectory([0.0, 0.0, 0.5], np.zeros(3), np.zeros(3))
    for i in range(n_steps):
        rotor_velocities, diagnostics = controller.compute_rotor_velocities()
        log.record(i * dt, rotor_velocities, diagnostics)
    return log


def test_control_log_arrays_0(quad_controller):
    '''check stacked array shapes of a recorded run'''
    # ~~ ACT ~~
    log = record_hover(quad_controller, 5)
    data = log.as_arrays()

    # ~~ ASSERT ~~~
    assert len(log) == 5
    assert data["time"].shape == (5,)
    assert data["rotor_velocities"].shape == (5, 4)
    assert data["position_error"].shape == (5, 3)
    assert data["psi"].shape == (5,)
    assert_allclose(data["position_error"][:, 2], -0.5)


def test_control_log_save_load_0(quad_controller, tmp_path):
    '''check that a pickled log is restored unchanged'''
    # ~~ ARRANGE ~~
    log = record_hover(quad_controller, 3)
    fpath = tmp_path / "hover_log.p"

    # ~~ ACT ~~
    log.save(fpath)
    loaded = ControlLog.load(fpath)

    # ~~ ASSERT ~~~
    assert len(loaded) == 3
    for key, values in log.as_arrays().items():
        assert_allclose(loaded.as_arrays()[key], values)


def test_control_log_load_invalid_0(tmp_path):
    '''check that foreign pickles are rejected'''
    import pickle
    fpath = tmp_path / "other.p"
    with open(fpath, "wb") as f:
        pickle.dump({"state": []}, f)
    with pytest.raises(ValueError):
        ControlLog.load(fpath)


def test_plot_log_0(quad_controller):
    '''check that a recorded log can be plotted without a display'''
    log = record_hover(quad_controller, 4)
    fig = plot_log(log, show=False)
    assert len(fig.axes) >= 6


def test_plot_log_empty_0():
    with pytest.raises(ValueError):
        plot_log(ControlLog(), show=False)
