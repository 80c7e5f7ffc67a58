# src/propofolviz/ui/controls.py
from dataclasses import dataclass, asdict
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QPushButton, QDoubleSpinBox, QFrame, QLabel


@dataclass
class SimulateRequest:
    weight_kg: float = 70.0
    bolus_mg: float = 100.0
    infusion_mg_per_min: float = 0.0
    infusion_duration_min: float = 0.0
    t_end_min: float = 240.0
    dt_min: float = 0.2

    def as_raw(self) -> dict:
        return asdict(self)


def _spin(low, high, value, suffix, decimals=2):
    box = QDoubleSpinBox()
    box.setDecimals(decimals)
    box.setRange(low, high)
    box.setValue(value)
    box.setSuffix(suffix)
    return box


class ControlsPanel(QFrame):
    simulateRequested = Signal(SimulateRequest)

    def __init__(self):
        super().__init__()
        self.setFrameShape(QFrame.StyledPanel)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Controls"))

        defaults = SimulateRequest()

        # --- Patient ---
        layout.addWidget(QLabel("Patient"))
        self.weight = _spin(1, 250, defaults.weight_kg, " kg", decimals=1)
        layout.addWidget(QLabel("Weight (kg)"))
        layout.addWidget(self.weight)

        # --- Dosing ---
        layout.addWidget(QLabel("Dosing"))
        self.bolus = _spin(0, 2000, defaults.bolus_mg, " mg", decimals=1)
        layout.addWidget(QLabel("Bolus at t=0 (mg)"))
        layout.addWidget(self.bolus)

        self.infusion_rate = _spin(0, 100, defaults.infusion_mg_per_min, " mg/min")
        layout.addWidget(QLabel("Infusion rate (mg/min)"))
        layout.addWidget(self.infusion_rate)

        self.infusion_duration = _spin(0, 1440, defaults.infusion_duration_min, " min", decimals=1)
        layout.addWidget(QLabel("Infusion duration (min)"))
        layout.addWidget(self.infusion_duration)

        # --- Integration ---
        layout.addWidget(QLabel("Simulation"))
        self.t_end = _spin(1, 1440, defaults.t_end_min, " min", decimals=1)
        layout.addWidget(QLabel("Horizon (min)"))
        layout.addWidget(self.t_end)

        # 4 decimals so an enlarged step can be shown as used
        self.dt = _spin(0.0001, 10.0, defaults.dt_min, " min", decimals=4)
        self.lbl_dt = QLabel("Step dt (min)")
        layout.addWidget(self.lbl_dt)
        layout.addWidget(self.dt)

        layout.addStretch(1)
        go = QPushButton("Simulate"); layout.addWidget(go)
        go.clicked.connect(self._emit_request)

    def current_request(self) -> SimulateRequest:
        return SimulateRequest(
            weight_kg=float(self.weight.value()),
            bolus_mg=float(self.bolus.value()),
            infusion_mg_per_min=float(self.infusion_rate.value()),
            infusion_duration_min=float(self.infusion_duration.value()),
            t_end_min=float(self.t_end.value()),
            dt_min=float(self.dt.value()),
        )

    def reflect_effective_dt(self, dt_min: float):
        """Show the step size the engine actually used."""
        self.dt.blockSignals(True)
        self.dt.setValue(dt_min)
        self.dt.blockSignals(False)

    def _emit_request(self):
        self.simulateRequested.emit(self.current_request())
