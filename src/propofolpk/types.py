# src/propofolpk/types.py
import math
from dataclasses import dataclass

import numpy as np

# All time is in MINUTES, masses in mg, volumes in L.


@dataclass(frozen=True)
class SimulationParameters:
    """
    Inputs for a single propofol run.

    weight_kg             : patient weight (kg)
    bolus_mg              : instantaneous dose into the central compartment at t=0
    infusion_mg_per_min   : constant infusion rate starting at t=0
    infusion_duration_min : how long the infusion runs (0 = no infusion)
    t_end_min             : simulation horizon
    dt_min                : integration step (may be enlarged by the normalizer)
    """
    weight_kg: float = 70.0
    bolus_mg: float = 0.0
    infusion_mg_per_min: float = 0.0
    infusion_duration_min: float = 0.0
    t_end_min: float = 240.0
    dt_min: float = 0.2


@dataclass(frozen=True)
class ModelConstants:
    """
    Rate constants (1/min) and per-kg volumes (L/kg) of a
    three-compartment mammillary model.
    """
    k10: float
    k12: float
    k21: float
    k13: float
    k31: float
    v1_L_per_kg: float
    v2_L_per_kg: float
    v3_L_per_kg: float

    def central_volume_L(self, weight_kg: float) -> float:
        return self.v1_L_per_kg * weight_kg


# Marsh et al. Br J Anaesth. 1991 (propofol, weight-scaled)
MARSH = ModelConstants(
    k10=0.119,
    k12=0.112,
    k21=0.055,
    k13=0.042,
    k31=0.0033,
    v1_L_per_kg=0.228,
    v2_L_per_kg=0.463,
    v3_L_per_kg=2.893,
)


@dataclass(frozen=True)
class SimulationTrace:
    """
    Output of one integration run. All arrays share the same length.

    t  : time points (min), strictly increasing, ending at t_end_min
    A1 : central compartment amount (mg)
    A2 : fast peripheral amount (mg)
    A3 : slow peripheral amount (mg)
    C1 : plasma concentration (mg/L)
    """
    t: np.ndarray
    A1: np.ndarray
    A2: np.ndarray
    A3: np.ndarray
    C1: np.ndarray

    def __len__(self) -> int:
        return len(self.t)


@dataclass(frozen=True)
class Metrics:
    """
    Exposure summary of a plasma curve.

    cmax : peak concentration (mg/L), NaN when the trace is empty
    tmax : time of the first peak (min), NaN when the trace is empty
    auc  : trapezoidal area under C1 (mg*min/L)
    """
    cmax: float
    tmax: float
    auc: float

    @property
    def has_data(self) -> bool:
        return not math.isnan(self.cmax)
