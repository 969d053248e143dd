from typing import List
import pyqtgraph as pg

from app.calculation import smooth

# y axis starts out showing 0..WPM_HINT and only grows past it
WPM_HINT = 80


def setup_wpm_plot(plot_widget: pg.PlotWidget, line_color: str):
    """Live WPM curve for one attempt: seconds since the first keystroke on x, WPM on y."""
    plot_widget.setBackground(None)
    plot_widget.setMenuEnabled(False)
    plot_widget.setMouseEnabled(x=False, y=False)
    plot_widget.hideButtons()
    plot_widget.showGrid(x=False, y=True, alpha=0.12)
    plot_widget.setLabel('left', 'WPM')
    plot_widget.setLabel('bottom', 'seconds')
    plot_widget.setLimits(xMin=0, yMin=0)
    plot_widget.setYRange(0, WPM_HINT, padding=0)
    plot_widget.enableAutoRange(axis='x')
    curve = plot_widget.plot([], [], pen=pg.mkPen(line_color, width=2), antialias=True)
    return curve


def update_curve(curve, x: List[float], y: List[float], factor: float = 0.25):
    ys = smooth(list(y), factor)
    curve.setData(list(x), ys)
    view = curve.getViewBox()
    if view is not None:
        view.setYRange(0, max([WPM_HINT] + ys) * 1.1, padding=0)


def set_curve_color(curve, line_color: str):
    curve.setPen(pg.mkPen(line_color, width=2))
