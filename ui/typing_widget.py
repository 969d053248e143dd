from __future__ import annotations
import html
import logging

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtWidgets import QWidget, QLabel, QVBoxLayout, QSizePolicy
import pyqtgraph as pg

from app.calculation import chunk_text, character_statuses
from app.state import CharStatus, LoadState
from app.themes import Theme, THEMES, DEFAULT_THEME_INDEX
from services.typing_engine import TypingSession
from utils.graph_helper import setup_wpm_plot, update_curve, set_curve_color

log = logging.getLogger(__name__)


class FocusOverlay(QLabel):
    clicked = Signal()

    def __init__(self, parent=None):
        super().__init__("Click here to regain focus", parent)
        self.setObjectName("focusOverlay")
        self.setAlignment(Qt.AlignCenter)
        self.setCursor(Qt.PointingHandCursor)
        self.setVisible(False)

    def mousePressEvent(self, ev):
        self.clicked.emit()
        ev.accept()


class TypingWidget(QWidget):
    """
    Renders a TypingSession and feeds it keystrokes.

    The focused/unfocused flag lives here, not in the session: losing focus
    only shows the overlay, the attempt keeps its timer.
    """

    changed = Signal()

    def __init__(self, session: TypingSession, parent=None, text_size: int = 35):
        super().__init__(parent)
        self.session = session
        self.focused = True
        self.theme: Theme = THEMES[DEFAULT_THEME_INDEX]
        self.setFocusPolicy(Qt.StrongFocus)

        # created first: focus events can arrive while the children are built
        self.overlay = FocusOverlay(self)
        self.overlay.clicked.connect(self.regain_focus)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 30, 0, 30)
        root.setSpacing(20)

        self.lblText = QLabel("", self)
        self.lblText.setObjectName("lblText")
        self.lblText.setTextFormat(Qt.RichText)
        self.lblText.setWordWrap(True)
        self.lblText.setAlignment(Qt.AlignCenter)
        self.lblText.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.lblText.setMinimumWidth(900)
        self.lblText.setMaximumWidth(1100)
        self.lblText.setMinimumHeight(140)
        self.lblText.setStyleSheet(f"font-size: {text_size}px;")
        root.addWidget(self.lblText, stretch=1, alignment=Qt.AlignHCenter)

        self.lblStats = QLabel("Get Set Go!", self)
        self.lblStats.setObjectName("lblStats")
        self.lblStats.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblStats)

        self.lblStatus = QLabel("", self)
        self.lblStatus.setObjectName("lblStatus")
        self.lblStatus.setAlignment(Qt.AlignCenter)
        root.addWidget(self.lblStatus)

        self.wpmPlot = pg.PlotWidget(self)
        self.wpmPlot.setMaximumHeight(120)
        self._wpm_curve = setup_wpm_plot(self.wpmPlot, self.theme.accent)
        root.addWidget(self.wpmPlot)
        self._wpm_time: list[float] = []
        self._wpm_vals: list[float] = []

        # WPM decays while the user pauses, so refresh the stats between keystrokes too
        self._ui_tick = QTimer(self)
        self._ui_tick.setInterval(500)
        self._ui_tick.timeout.connect(self.refresh_metrics)
        self._ui_tick.start()

    # ---------------- focus ----------------
    def set_focused(self, focused: bool):
        self.focused = bool(focused)
        overlay = getattr(self, "overlay", None)
        if overlay is None:
            return
        overlay.setVisible(not self.focused)
        if self.focused:
            overlay.lower()
        else:
            overlay.raise_()

    def regain_focus(self):
        self.setFocus(Qt.MouseFocusReason)
        self.set_focused(True)

    def focusInEvent(self, ev):
        self.set_focused(True)
        super().focusInEvent(ev)

    def focusOutEvent(self, ev):
        self.set_focused(False)
        super().focusOutEvent(ev)

    def resizeEvent(self, ev):
        self.overlay.setGeometry(self.rect())
        super().resizeEvent(ev)

    # ---------------- keys ----------------
    def keyPressEvent(self, ev):
        nk = self._normalize_key(ev)
        if nk is None:
            return super().keyPressEvent(ev)

        if nk == "<BACKSPACE>":
            changed = self.session.delete_last_character()
        else:
            changed = self.session.accept_character(nk)
        if changed:
            self._on_input_changed()
        ev.accept()

    def _normalize_key(self, ev) -> str | None:
        if ev.modifiers() & (Qt.ControlModifier | Qt.AltModifier | Qt.MetaModifier):
            return None
        if ev.key() == Qt.Key_Backspace:
            return "<BACKSPACE>"
        t = ev.text()
        if len(t) == 1 and t >= " " and t != "\x7f":
            return t
        return None

    def _on_input_changed(self):
        if self.session.typed_input:
            elapsed = self.session.elapsed_seconds()
            self._wpm_time.append(elapsed)
            self._wpm_vals.append(float(self.session.metrics().wpm))
            update_curve(self._wpm_curve, self._wpm_time, self._wpm_vals)
        self.render()
        self.changed.emit()

    # ---------------- rendering ----------------
    def set_theme(self, theme: Theme):
        self.theme = theme
        self.lblStats.setStyleSheet(f"color: {theme.secondary};")
        self.lblStatus.setStyleSheet(f"color: {theme.error};")
        self.overlay.setStyleSheet(
            f"QLabel#focusOverlay {{ background: {theme.cursor_bg}; color: {theme.primary};"
            " font-size: 18px; font-weight: bold; border-radius: 6px; }"
        )
        set_curve_color(self._wpm_curve, theme.accent)
        self.render()

    def clear_plot(self):
        self._wpm_time.clear()
        self._wpm_vals.clear()
        update_curve(self._wpm_curve, self._wpm_time, self._wpm_vals)

    def refresh_metrics(self):
        # a finished attempt keeps the figures shown for its last keystroke
        if self.session.is_complete:
            return
        self._refresh_stats_now()

    def render(self):
        s = self.session
        if s.load_state == LoadState.UNAVAILABLE:
            self.lblStatus.setText(f"Text unavailable ({s.last_error})" if s.last_error else "Text unavailable")
        else:
            self.lblStatus.setText("")

        if s.load_state == LoadState.LOADING:
            self.lblText.setText(f'<span style="color:{self.theme.secondary}; font-weight:bold">Loading...</span>')
        elif not s.reference_text:
            self.lblText.setText("")
        else:
            self.lblText.setText(self._render_text())
        self._refresh_stats_now()

    def _refresh_stats_now(self):
        s = self.session
        if not s.has_started:
            self.lblStats.setText("Get Set Go!")
            return
        m = s.metrics()
        self.lblStats.setText(f"WPM: {m.wpm}   |   Accuracy: {m.accuracy}%")

    def _render_text(self) -> str:
        t = self.theme
        styles = {
            CharStatus.CORRECT: f"color:{t.primary}",
            CharStatus.INCORRECT: f"color:{t.error}",
            CharStatus.CURSOR: f"color:{t.muted}; background:{t.cursor_bg}",
            CharStatus.PENDING: f"color:{t.muted}",
        }
        statuses = character_statuses(self.session.snapshot())
        parts: list[str] = []
        pos = 0
        for chunk in chunk_text(self.session.reference_text):
            # one span per run of equal status inside the chunk
            run_start = 0
            for i in range(1, len(chunk) + 1):
                if i == len(chunk) or statuses[pos + i] != statuses[pos + run_start]:
                    txt = html.escape(chunk[run_start:i])
                    style = styles[statuses[pos + run_start]]
                    parts.append(f'<span style="{style}; white-space:pre-wrap">{txt}</span>')
                    run_start = i
            pos += len(chunk)
        return "".join(parts)
