# src/propofolviz/ui/plots.py
from PySide6.QtWidgets import QWidget, QVBoxLayout
import pyqtgraph as pg

from propofolpk.types import SimulationTrace

AMOUNT_SERIES = (
    ("A1", "A1 (Central, mg)", "#60a5fa"),
    ("A2", "A2 (Fast peripheral, mg)", "#f59e0b"),
    ("A3", "A3 (Slow peripheral, mg)", "#34d399"),
)


def _make_plot(title: str, left: str, units: str) -> pg.PlotWidget:
    plot = pg.PlotWidget(title=title)
    plot.setLabel("left", left, units=units)
    plot.setLabel("bottom", "Time", units="min")
    plot.showGrid(x=True, y=True, alpha=0.3)
    plot.addLegend()
    return plot


class PlotWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Plasma concentration on top, compartment amounts below
        self.plot_c1 = _make_plot("Central (Plasma) Concentration - C1", "C1", "mg/L")
        self.plot_amounts = _make_plot("Amounts by Compartment", "Amount", "mg")
        layout.addWidget(self.plot_c1)
        layout.addWidget(self.plot_amounts)

        self.curves = {}  # store references for updates

    def plot_trace(self, trace: SimulationTrace):
        self.clear()
        self.curves["C1"] = self.plot_c1.plot(
            trace.t, trace.C1,
            pen=pg.mkPen(width=2),
            name="Plasma C1 (mg/L)"
        )
        for key, label, color in AMOUNT_SERIES:
            self.curves[key] = self.plot_amounts.plot(
                trace.t, getattr(trace, key),
                pen=pg.mkPen(color, width=2),
                name=label
            )

    def clear(self):
        self.plot_c1.clear()
        self.plot_amounts.clear()
        self.curves = {}
