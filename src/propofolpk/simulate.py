# src/propofolpk/simulate.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .types import MARSH, Metrics, ModelConstants, SimulationParameters, SimulationTrace
from .normalize import Normalization, normalize_parameters
from .solvers import simulate_three_compartment
from .metrics import compute_metrics


@dataclass(frozen=True)
class SimulationRun:
    """Everything a renderer needs from one run."""
    normalization: Normalization
    trace: SimulationTrace
    metrics: Metrics

    @property
    def params(self) -> SimulationParameters:
        return self.normalization.params

    @property
    def effective_dt_min(self) -> float:
        return self.normalization.params.dt_min


def run_simulation(raw: Mapping[str, Any] | SimulationParameters | None,
                   *, constants: ModelConstants = MARSH,
                   strict: bool = False) -> SimulationRun:
    """
    High-level wrapper: normalize -> integrate -> reduce.
    """
    norm = normalize_parameters(raw, strict=strict)
    trace = simulate_three_compartment(norm.params, constants)
    return SimulationRun(normalization=norm, trace=trace, metrics=compute_metrics(trace))
