# matrix_utils.py
import numpy as np


def hat(v):
    """
    Skew-symmetric (cross-product) matrix of a 3-vector, hat(v) @ x == v x x.
    """
    v = np.asarray(v, dtype=float).reshape(3)
    return np.array([
        [0.0,   -v[2],  v[1]],
        [v[2],   0.0,  -v[0]],
        [-v[1],  v[0],  0.0]
    ])


def vee(M):
    """
    Inverse of hat(). Only the antisymmetric part of M is used, so a matrix
    that is skew up to numerical noise (e.g. R^T R_dot) still maps cleanly.
    """
    M = np.asarray(M, dtype=float).reshape((3, 3))
    return 0.5 * np.array([
        M[2, 1] - M[1, 2],
        M[0, 2] - M[2, 0],
        M[1, 0] - M[0, 1]
    ])


def is_rotation_matrix(R, atol=1e-6) -> bool:
    R = np.asarray(R, dtype=float)
    if R.shape != (3, 3) or not np.all(np.isfinite(R)):
        return False
    if not np.allclose(R.T @ R, np.eye(3), atol=atol):
        return False
    return bool(np.isclose(np.linalg.det(R), 1.0, atol=atol))


def as_vector3(value, name="vector"):
    """Coerce array-like input to a finite float 3-vector."""
    vec = np.asarray(value, dtype=float)
    if vec.size != 3:
        raise ValueError(f"{name} must have 3 components, got shape {vec.shape}")
    vec = vec.reshape(3)
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"{name} must be finite, got {vec}")
    return vec
