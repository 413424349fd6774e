# errors.py


class ControllerError(Exception):
    """Base class for every fault raised by lee_control."""


class ConfigurationError(ControllerError, ValueError):
    """Vehicle parameters, gains or allocation matrix are unusable."""


class NotConfiguredError(ControllerError, RuntimeError):
    """A control output was requested before configure() was called."""


class DegenerateForceError(ControllerError, ArithmeticError):
    """
    The desired force cannot define a thrust axis (norm ~ 0), or the
    desired heading is parallel to it.
    """


class NonFiniteCommandError(ControllerError, ArithmeticError):
    """The moment/thrust command overflowed to inf or nan."""
