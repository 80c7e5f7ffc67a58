# src/propofolpk/models/three_compartment.py
import numpy as np

from ..types import MARSH, ModelConstants, SimulationParameters


def infusion_input(t: float, params: SimulationParameters) -> float:
    """
    Zero-order infusion into the central compartment (mg/min).
    Active on [0, infusion_duration_min], boundary included.
    """
    if params.infusion_mg_per_min <= 0 or params.infusion_duration_min <= 0:
        return 0.0
    if 0.0 <= t <= params.infusion_duration_min:
        return params.infusion_mg_per_min
    return 0.0


def three_compartment(t, y, params: SimulationParameters, constants: ModelConstants = MARSH):
    """
    Three-compartment mammillary model with first-order transfer and
    elimination from the central compartment.
    Three states:
      y[0] = A1, drug in central compartment (mg)
      y[1] = A2, drug in fast peripheral compartment (mg)
      y[2] = A3, drug in slow peripheral compartment (mg)

    Parameters:
      t         : current time (min)
      y         : current state vector [A1, A2, A3]
      params    : run parameters (only the infusion fields are used here)
      constants : rate constants (1/min)
    """
    A1, A2, A3 = y
    c = constants

    dA1_dt = (infusion_input(t, params)
              + c.k21 * A2 + c.k31 * A3
              - (c.k10 + c.k12 + c.k13) * A1)
    dA2_dt = c.k12 * A1 - c.k21 * A2
    dA3_dt = c.k13 * A1 - c.k31 * A3

    return np.array([dA1_dt, dA2_dt, dA3_dt])
