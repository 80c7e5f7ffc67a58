import numpy as np

from propofolpk.types import MARSH, SimulationParameters
from propofolpk.normalize import normalize_parameters
from propofolpk.solvers import simulate_three_compartment
from propofolpk.analytic import exact_amounts, rate_matrix


def test_rate_matrix_is_stable():
    """
    The Marsh system only loses mass through k10, so every eigenvalue of the
    rate matrix is real and negative, and the column sums give -k10, 0, 0.
    """
    K = rate_matrix(MARSH)
    eig = np.linalg.eigvals(K)
    assert np.all(np.real(eig) < 0.0)
    assert np.allclose(K.sum(axis=0), [-MARSH.k10, 0.0, 0.0])


def test_bolus_matches_matrix_exponential():
    """
    A 100 mg bolus is a pure linear decay problem; RK4 at dt=0.2 min should
    track the matrix-exponential solution very closely in every compartment.
    """
    params = normalize_parameters({"bolus_mg": 100.0}).params
    trace = simulate_three_compartment(params)

    idx = np.arange(0, len(trace), 50)
    expected = exact_amounts(params, trace.t[idx])

    assert np.isclose(trace.A1[0], 100.0)
    assert np.allclose(trace.A1[idx], expected[:, 0], rtol=1e-5, atol=1e-5)
    assert np.allclose(trace.A2[idx], expected[:, 1], rtol=1e-5, atol=1e-5)
    assert np.allclose(trace.A3[idx], expected[:, 2], rtol=1e-5, atol=1e-5)


def test_infusion_close_to_exact():
    """
    10 mg/min for 30 min. The input switches off inside an RK4 step, so the
    agreement is looser than for the bolus, but still well under 1 mg.
    """
    params = SimulationParameters(infusion_mg_per_min=10.0, infusion_duration_min=30.0,
                                  t_end_min=120.0, dt_min=0.2)
    trace = simulate_three_compartment(params)

    idx = np.arange(0, len(trace), 25)
    expected = exact_amounts(params, trace.t[idx])

    for col, series in enumerate((trace.A1, trace.A2, trace.A3)):
        assert np.allclose(series[idx], expected[:, col], rtol=1e-2, atol=0.5)


def test_total_mass_balance_after_infusion():
    """
    Amount delivered minus amount eliminated equals what remains in the body:
      dose - k10 * integral(A1) = A1 + A2 + A3  at t_end.
    """
    params = SimulationParameters(bolus_mg=50.0, infusion_mg_per_min=5.0,
                                  infusion_duration_min=20.0, t_end_min=90.0, dt_min=0.1)
    trace = simulate_three_compartment(params)

    delivered = 50.0 + 5.0 * 20.0
    eliminated = MARSH.k10 * np.trapezoid(trace.A1, trace.t)
    remaining = trace.A1[-1] + trace.A2[-1] + trace.A3[-1]

    assert np.isclose(delivered - eliminated, remaining, rtol=1e-2, atol=0.5)
