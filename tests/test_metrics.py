import logging
import math
import numpy as np
import pytest

from propofolpk.types import SimulationParameters, SimulationTrace
from propofolpk.solvers import simulate_three_compartment
from propofolpk.simulate import run_simulation
from propofolpk.metrics import cmax_tmax, auc_trapz, compute_metrics


def _trace(t, C):
    """Trace with only t and C1 populated; amounts are irrelevant to the metrics."""
    t = np.asarray(t, dtype=float)
    C = np.asarray(C, dtype=float)
    zeros = np.zeros_like(t)
    return SimulationTrace(t=t, A1=zeros, A2=zeros, A3=zeros, C1=C)


def test_tmax_ties_resolve_to_earliest():
    t = np.array([0.0, 1.0, 2.0, 3.0])
    C = np.array([0.0, 5.0, 1.0, 5.0])
    assert cmax_tmax(t, C) == (5.0, 1.0)
    assert compute_metrics(_trace(t, C)).tmax == 1.0


def test_auc_trapezoids_on_uneven_grid():
    """0.5*(0+2)*1 + 0.5*(2+2)*2 = 1 + 4 = 5 mg*min/L."""
    m = compute_metrics(_trace([0.0, 1.0, 3.0], [0.0, 2.0, 2.0]))
    assert m.auc == pytest.approx(5.0)
    assert m.cmax == 2.0
    assert m.tmax == 1.0


def test_single_sample():
    m = compute_metrics(_trace([0.0], [3.0]))
    assert m.has_data
    assert m.cmax == 3.0
    assert m.tmax == 0.0
    assert m.auc == 0.0
    assert auc_trapz(np.array([0.0]), np.array([3.0])) == 0.0


def test_empty_trace_sentinel():
    """No samples: Cmax/Tmax are NaN, which is not confused with a real zero."""
    m = compute_metrics(_trace([], []))
    assert not m.has_data
    assert math.isnan(m.cmax) and math.isnan(m.tmax)
    assert m.auc == 0.0

    zero = compute_metrics(_trace([0.0, 1.0], [0.0, 0.0]))
    assert zero.has_data and zero.cmax == 0.0


def test_bolus_metrics():
    """
    After a bolus the plasma peak is the first sample. AUC over 240 min must
    be positive and below C0 * 240 (the curve only decreases).
    """
    params = SimulationParameters(bolus_mg=100.0)
    trace = simulate_three_compartment(params)
    m = compute_metrics(trace)

    assert m.cmax == pytest.approx(100.0 / (0.228 * 70.0))
    assert m.tmax == 0.0
    assert 0.0 < m.auc < m.cmax * 240.0


def test_infusion_metrics_peak_at_cutoff():
    params = SimulationParameters(infusion_mg_per_min=10.0, infusion_duration_min=30.0)
    m = compute_metrics(simulate_three_compartment(params))
    assert abs(m.tmax - 30.0) <= 0.2 + 1e-9
    assert m.cmax > 0.0
    assert m.auc > 0.0


def test_non_finite_samples_are_skipped():
    """NaN and inf samples never win the peak and add no area."""
    t = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
    C = np.array([2.0, np.nan, 4.0, np.inf, 1.0])
    assert cmax_tmax(t, C) == (4.0, 2.0)
    assert auc_trapz(t, C) == 0.0

    # 0.5*(2+2)*1; both segments touching the NaN are dropped
    assert auc_trapz(np.array([0.0, 1.0, 2.0, 3.0]), np.array([2.0, 2.0, np.nan, 4.0])) == pytest.approx(2.0)
    assert all(math.isnan(x) for x in cmax_tmax(t, np.full(5, np.nan)))


def test_diverged_run_still_reports_a_peak(caplog):
    """
    A very long horizon pushes dt past RK4's stability limit and the amounts
    blow up. The trace is not empty, so the metrics must not look like the
    empty-trace sentinel.
    """
    with caplog.at_level(logging.WARNING, logger="propofolpk.solvers"):
        run = run_simulation({"bolus_mg": 100, "t_end_min": 1e6})
    assert run.effective_dt_min == pytest.approx(50.0)
    assert "diverged" in caplog.text

    m = run.metrics
    assert len(run.trace) > 1
    assert m.has_data
    assert math.isfinite(m.cmax) and math.isfinite(m.tmax)
    assert m.cmax >= run.trace.C1[0]
    assert not math.isnan(m.auc) and m.auc >= 0.0
