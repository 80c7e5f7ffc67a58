# src/propofolpk/solvers.py
import logging
import math
from typing import Callable

import numpy as np

from .types import MARSH, ModelConstants, SimulationParameters, SimulationTrace
from .models.three_compartment import three_compartment

logger = logging.getLogger(__name__)

RHSFunction = Callable[[float, np.ndarray], np.ndarray]


def rk4_step(rhs: RHSFunction, t: float, y: np.ndarray, h: float) -> np.ndarray:
    """One classic fourth-order Runge-Kutta step of size h."""
    k1 = rhs(t, y)
    k2 = rhs(t + 0.5 * h, y + 0.5 * h * k1)
    k3 = rhs(t + 0.5 * h, y + 0.5 * h * k2)
    k4 = rhs(t + h, y + h * k3)
    return y + (h / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def simulate_three_compartment(params: SimulationParameters,
                               constants: ModelConstants = MARSH) -> SimulationTrace:
    """
    Simulate the three-compartment model with fixed-step RK4.

    The bolus is placed in the central compartment at t=0 and the infusion
    enters the right-hand side as a zero-order input. The last step is
    shortened so the trace ends exactly at t_end_min. Amounts are floored at
    zero after every step to drop tiny negatives from round-off.

    params must come from normalize_parameters (dt_min > 0, t_end_min > 0,
    weight_kg > 0); nothing is checked here.

    Returns:
      SimulationTrace with t (min), A1/A2/A3 (mg) and C1 (mg/L)
    """
    t_end = params.t_end_min
    dt = params.dt_min
    n_steps = math.ceil(t_end / dt)

    def rhs(t, y):
        return three_compartment(t, y, params, constants)

    # Initial conditions: instantaneous bolus into central, peripherals empty
    y = np.array([params.bolus_mg, 0.0, 0.0])
    t = 0.0

    t_out = np.empty(n_steps + 1)
    A_out = np.empty((n_steps + 1, 3))
    t_out[0] = t
    A_out[0] = y

    n = 1
    for _ in range(n_steps):
        # Floating-point drift can land on t_end before the count runs out
        if t >= t_end:
            break
        h = min(dt, t_end - t)
        y = np.maximum(rk4_step(rhs, t, y, h), 0.0)
        t += h
        t_out[n] = t
        A_out[n] = y
        n += 1

    t_out = t_out[:n]
    A_out = A_out[:n]

    V1 = constants.central_volume_L(params.weight_kg)
    C1 = A_out[:, 0] / V1

    if not np.all(np.isfinite(A_out)):
        # Past roughly dt = 9 min the fastest Marsh mode leaves RK4's stability region
        logger.warning("RK4 diverged at dt=%g min; amounts are no longer finite", dt)
    logger.debug("simulated %d steps to t=%g min (dt=%g, V1=%.3f L)", n - 1, t, dt, V1)
    return SimulationTrace(
        t=t_out,
        A1=A_out[:, 0].copy(),
        A2=A_out[:, 1].copy(),
        A3=A_out[:, 2].copy(),
        C1=C1,
    )
