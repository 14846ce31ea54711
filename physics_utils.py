# physics_utils.py

import math

import numpy as np

TWO_PI = 2.0 * math.pi


class PhysicsError(Exception):
    """Custom exception for physics-related errors, including numerical issues."""
    pass


def wrap_angle(angle_rad):
    """
    Wraps an angle into [0, 2*pi).

    Python's modulo already returns a non-negative result for a positive
    modulus, but a tiny negative input rounds up to exactly 2*pi, which is
    folded back to 0.0 here.

    Args:
        angle_rad (float): Any finite angle in radians.

    Returns:
        float: The equivalent angle in [0, 2*pi). NaN propagates unchanged.
    """
    wrapped = angle_rad % TWO_PI
    if wrapped >= TWO_PI:
        wrapped -= TWO_PI
    return wrapped


def clamp(value, low, high):
    """Clamps `value` into [low, high]."""
    return max(low, min(high, value))


def normalize_vector(vector, epsilon=1e-12, fallback=None):
    """
    Normalizes a vector to unit length.

    Args:
        vector (np.ndarray): The vector to normalize.
        epsilon (float): Threshold below which the vector's magnitude is considered zero.
        fallback (np.ndarray, optional): Direction returned (as a unit vector) when the
                                         magnitude is below `epsilon`.

    Returns:
        np.ndarray: The normalized vector, the normalized fallback, or a zero vector
                    if its magnitude is close to zero and no fallback was given.
    """
    if not isinstance(vector, np.ndarray):
        vector = np.array(vector, dtype=float)

    norm = np.linalg.norm(vector)
    if norm < epsilon:
        if fallback is None:
            return np.zeros_like(vector, dtype=float)
        fallback = np.asarray(fallback, dtype=float)
        return fallback / np.linalg.norm(fallback)
    return vector / norm


def kepler_period_days(semi_major_axis_au, days_per_year=365.25):
    """
    Orbital period around a solar-mass primary from Kepler's third law.

    P[years] = a[AU] ** 1.5, so P[days] = a ** 1.5 * days_per_year.
    """
    return semi_major_axis_au ** 1.5 * days_per_year
