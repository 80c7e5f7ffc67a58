import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

pytest.importorskip("PySide6")
pytest.importorskip("pyqtgraph")

from PySide6.QtWidgets import QApplication

from propofolpk.types import Metrics
from propofolviz.ui.main_window import MainWindow, format_metrics


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance()
    if not app:
        app = QApplication([])
    return app


def test_window_runs_on_startup(qapp):
    window = MainWindow()
    assert window.last_run is not None
    assert window.out_cmax.text() == f"{window.last_run.metrics.cmax:.3f}"
    assert set(window.plot.curves) == {"C1", "A1", "A2", "A3"}


def test_enlarged_dt_is_reflected_back(qapp):
    window = MainWindow()
    window.controls.t_end.setValue(240.0)
    window.controls.dt.setValue(0.0001)
    window.controls._emit_request()

    assert window.last_run.normalization.dt_adjusted
    assert window.controls.dt.value() == pytest.approx(0.012, abs=1e-4)


def test_format_metrics():
    assert format_metrics(Metrics(cmax=6.26566, tmax=0.0, auc=123.456)) == ("6.266", "0.00", "123.46")
    assert format_metrics(Metrics(cmax=float("nan"), tmax=float("nan"), auc=0.0))[0] == "—"
