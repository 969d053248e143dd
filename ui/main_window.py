# ui/main_window.py
import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QApplication, QComboBox, QLabel, QPushButton
)
from PySide6.QtCore import Qt, QEvent

from app.config import Settings
from app.state import Difficulty
from app.themes import THEMES, DEFAULT_THEME_INDEX, next_theme_index
from core.threads import WordFetchWorker, Workers
from services.typing_engine import TypingSession
from ui.typing_widget import TypingWidget

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, source, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or Settings()
        self.source = source
        self.setWindowTitle("Gemtype")
        self.resize(1200, 720)
        self.theme_idx = DEFAULT_THEME_INDEX

        self.session = TypingSession()
        # until a text loads, the requested level is the one on show
        self.session.difficulty = self.settings.difficulty

        root = QWidget(self)
        root_v = QVBoxLayout(root)
        root_v.setContentsMargins(16, 40, 16, 16)
        root_v.setSpacing(24)

        brand = QLabel("type", root)
        brand.setObjectName("lblBrand")
        brand.setAlignment(Qt.AlignCenter)
        root_v.addWidget(brand)

        self.typing = TypingWidget(self.session, self)
        self.typing.changed.connect(self._sync_controls)

        test_h = QHBoxLayout()
        test_h.addStretch(1)
        test_h.addWidget(self.typing, 1)
        test_h.addStretch(1)
        root_v.addLayout(test_h, 1)

        self._build_bottom_bar(root_v)
        self.setCentralWidget(root)

        # only the typing widget should take keyboard focus
        try:
            self.setFocusPolicy(Qt.NoFocus)
        except Exception:
            pass

        self.menuBar().setVisible(False)
        self._apply_theme(self.theme_idx)

        self._select_difficulty(self.settings.difficulty)
        self._request_text(self.settings.difficulty)
        self.typing.setFocus()

        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    # ---------------- Bottom Bar ----------------
    def _build_bottom_bar(self, parent_layout):
        bar = QWidget(self)
        bar.setObjectName("BottomBar")
        h = QHBoxLayout(bar)
        h.setContentsMargins(14, 10, 14, 10)
        h.setSpacing(10)
        h.addStretch(1)

        self.cmbDifficulty = QComboBox(bar)
        for level in Difficulty:
            self.cmbDifficulty.addItem(f"English | {level.label}", int(level))
        self.cmbDifficulty.setFocusPolicy(Qt.NoFocus)
        self.cmbDifficulty.currentIndexChanged.connect(self._on_difficulty_changed)
        h.addWidget(self.cmbDifficulty)

        self.btnTheme = QPushButton("Theme", bar)
        self.btnTheme.setObjectName("BarBtn")
        self.btnTheme.clicked.connect(self._toggle_theme)
        self.btnTheme.setFocusPolicy(Qt.NoFocus)
        h.addWidget(self.btnTheme)

        self.btnReset = QPushButton("Reset", bar)
        self.btnReset.setObjectName("BarBtn")
        self.btnReset.clicked.connect(self._reset_test)
        self.btnReset.setFocusPolicy(Qt.NoFocus)
        self.btnReset.setVisible(False)
        h.addWidget(self.btnReset)

        h.addStretch(1)
        parent_layout.addWidget(bar)

        self._bar_qss = """
        QPushButton#BarBtn {
            background: transparent;
            border: 1px solid rgba(127,127,127,0.25);
            border-radius: 9px;
            padding: 6px 12px;
        }
        QPushButton#BarBtn:hover {
            border-color: rgba(127,127,127,0.55);
        }
        """

    # ---------------- Theme ----------------
    def _toggle_theme(self):
        self._apply_theme(next_theme_index(self.theme_idx))
        self.typing.regain_focus()

    def _apply_theme(self, idx):
        theme = THEMES[idx]
        self.theme_idx = idx
        self.typing.set_theme(theme)
        self.setStyleSheet(
            f"""
            QWidget {{ background: {theme.background}; color: {theme.primary}; }}
            QLabel#lblBrand {{ color: {theme.secondary}; font-weight: bold; font-style: italic; }}
            {self._bar_qss}
            """
        )

    # ---------------- Difficulty / Text Source ----------------
    def _select_difficulty(self, level: Difficulty):
        self.cmbDifficulty.blockSignals(True)
        self.cmbDifficulty.setCurrentIndex(self.cmbDifficulty.findData(int(level)))
        self.cmbDifficulty.blockSignals(False)

    def _on_difficulty_changed(self, index: int):
        level = self.cmbDifficulty.itemData(index)
        if level is None:
            return
        self._request_text(level)
        self.typing.regain_focus()

    def _request_text(self, level):
        generation = self.session.begin_load(level)
        worker = WordFetchWorker(self.source, self.session.pending_difficulty, generation)
        worker.signals.loaded.connect(self._on_words_loaded)
        worker.signals.failed.connect(self._on_words_failed)
        Workers.pool.start(worker)
        self.typing.render()

    def _on_words_loaded(self, generation: int, words: list):
        if not self.session.finish_load(generation, words):
            return
        self.typing.clear_plot()
        self.typing.render()
        self._sync_controls()

    def _on_words_failed(self, generation: int, message: str):
        if not self.session.fail_load(generation, message):
            return
        # the combo shows what is loaded, not what was asked for
        self._select_difficulty(self.session.difficulty)
        self.typing.render()
        self._sync_controls()

    # ---------------- Controls ----------------
    def _reset_test(self):
        self.session.reset()
        self.typing.clear_plot()
        self.typing.render()
        self._sync_controls()
        self.typing.regain_focus()

    def _sync_controls(self):
        started = self.session.has_started
        self.cmbDifficulty.setEnabled(not started)
        self.btnReset.setVisible(started)

    # ---------------- Focus ----------------
    def eventFilter(self, obj, ev):
        # mouse press anywhere outside the typing widget drops its focus flag
        if ev.type() == QEvent.MouseButtonPress and isinstance(obj, QWidget):
            if obj is not self.typing and not self.typing.isAncestorOf(obj):
                self.typing.set_focused(False)
        return super().eventFilter(obj, ev)
