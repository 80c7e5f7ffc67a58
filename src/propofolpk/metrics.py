# src/propofolpk/metrics.py
import numpy as np
from typing import Tuple

from .types import Metrics, SimulationTrace


def cmax_tmax(t: np.ndarray, C: np.ndarray) -> Tuple[float, float]:
    """
    Return Cmax (mg/L) and Tmax (min) over the finite samples.
    Ties resolve to the earliest time; NaN/inf samples are skipped.
    Both are NaN when no sample is finite.
    """
    finite = np.isfinite(C)
    if not finite.any():
        return float("nan"), float("nan")
    idx = int(np.argmax(np.where(finite, C, -np.inf)))
    return float(C[idx]), float(t[idx])


def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """
    Area Under the Curve (AUC) via trapezoidal rule (mg*min/L).
    Segments whose area is not finite (NaN or overflowed samples) are skipped.
    """
    if len(C) < 2:
        return 0.0
    with np.errstate(over="ignore", invalid="ignore"):
        areas = 0.5 * (C[1:] + C[:-1]) * np.diff(t)
        return float(np.sum(areas[np.isfinite(areas)]))


def compute_metrics(trace: SimulationTrace) -> Metrics:
    """
    Reduce a trace to Cmax, Tmax and AUC over C1.

    A single-sample trace reports that sample with AUC 0. An empty trace
    reports NaN for Cmax and Tmax (see Metrics.has_data) and AUC 0.
    """
    t = np.asarray(trace.t, dtype=float)
    C = np.asarray(trace.C1, dtype=float)
    if C.size == 0:
        return Metrics(cmax=float("nan"), tmax=float("nan"), auc=0.0)
    c_peak, t_peak = cmax_tmax(t, C)
    return Metrics(cmax=c_peak, tmax=t_peak, auc=auc_trapz(t, C))
