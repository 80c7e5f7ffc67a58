# src/propofolpk/analytic.py
import numpy as np
from scipy.linalg import expm

from .types import MARSH, ModelConstants, SimulationParameters


def rate_matrix(constants: ModelConstants = MARSH) -> np.ndarray:
    """Linear system matrix K with dA/dt = K @ A + input."""
    c = constants
    return np.array([
        [-(c.k10 + c.k12 + c.k13), c.k21, c.k31],
        [c.k12, -c.k21, 0.0],
        [c.k13, 0.0, -c.k31],
    ])


def _propagate(K: np.ndarray, y: np.ndarray, rate: float, tau: float) -> np.ndarray:
    # Augmented system [[K, b], [0, 0]] folds the constant input into one expm.
    M = np.zeros((4, 4))
    M[:3, :3] = K
    M[0, 3] = rate
    z = expm(M * tau) @ np.append(y, 1.0)
    return z[:3]


def exact_amounts(params: SimulationParameters, t,
                  constants: ModelConstants = MARSH) -> np.ndarray:
    """
    Closed-form compartment amounts for a bolus plus a constant-rate
    infusion from t=0, evaluated at the given times (min).

    The input is piecewise constant, so the solution is the matrix
    exponential on [0, infusion end] followed by free decay.

    Returns:
      array of shape (len(t), 3) with columns A1, A2, A3 (mg)
    """
    t = np.asarray(t, dtype=float)
    K = rate_matrix(constants)

    infusing = params.infusion_mg_per_min > 0 and params.infusion_duration_min > 0
    rate = params.infusion_mg_per_min if infusing else 0.0
    t_off = params.infusion_duration_min if infusing else 0.0

    y0 = np.array([params.bolus_mg, 0.0, 0.0])
    y_off = _propagate(K, y0, rate, t_off)

    out = np.empty((t.size, 3))
    for i, ti in enumerate(t):
        if ti <= t_off:
            out[i] = _propagate(K, y0, rate, ti)
        else:
            out[i] = _propagate(K, y_off, 0.0, ti - t_off)
    return out
