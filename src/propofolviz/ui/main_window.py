# src/propofolviz/ui/main_window.py
import logging

from PySide6.QtWidgets import QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QLabel, QStatusBar
from .controls import ControlsPanel, SimulateRequest
from .plots import PlotWidget
from propofolpk.normalize import MAX_STEPS
from propofolpk.simulate import run_simulation
from propofolpk.types import Metrics

logger = logging.getLogger(__name__)


def format_metrics(metrics: Metrics) -> tuple[str, str, str]:
    """Cmax / Tmax / AUC read-outs; an empty run shows a dash for Cmax."""
    cmax = f"{metrics.cmax:.3f}" if metrics.has_data else "—"
    tmax = f"{metrics.tmax:.2f}" if metrics.has_data else "—"
    return cmax, tmax, f"{metrics.auc:.2f}"


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Propofol PK (Marsh)")
        self.resize(1100, 760)

        central = QWidget(self); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self.controls = ControlsPanel()
        self.plot = PlotWidget()

        right = QVBoxLayout()
        self.out_cmax = QLabel()
        self.out_tmax = QLabel()
        self.out_auc = QLabel()
        readout = QHBoxLayout()
        for caption, label in (("Cmax (mg/L)", self.out_cmax),
                               ("Tmax (min)", self.out_tmax),
                               ("AUC (mg·min/L)", self.out_auc)):
            readout.addWidget(QLabel(caption))
            readout.addWidget(label)
        readout.addStretch(1)
        right.addLayout(readout)
        right.addWidget(self.plot, 1)

        root.addWidget(self.controls, 0)
        root.addLayout(right, 1)

        self.status = QStatusBar(); self.setStatusBar(self.status)
        self.last_run = None

        # wire events
        self.controls.simulateRequested.connect(self.on_simulate)

        # first run using current control values
        self.controls._emit_request()

    def on_simulate(self, req: SimulateRequest):
        try:
            run = run_simulation(req.as_raw())
        except Exception as e:
            logger.exception("simulation failed")
            self.status.showMessage(f"Error: {e}", 8000)
            return

        self.last_run = run
        self.plot.plot_trace(run.trace)
        cmax, tmax, auc = format_metrics(run.metrics)
        self.out_cmax.setText(cmax)
        self.out_tmax.setText(tmax)
        self.out_auc.setText(auc)

        if run.normalization.dt_adjusted:
            self.controls.reflect_effective_dt(run.effective_dt_min)
            self.status.showMessage(
                f"dt enlarged to {run.effective_dt_min:.4f} min (max {MAX_STEPS} steps)", 8000)
        else:
            self.status.showMessage(
                f"Cmax {cmax} mg/L at {tmax} min | AUC {auc}", 5000)
