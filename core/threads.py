# core/threads.py
import logging

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from app.errors import TextSourceUnavailable

log = logging.getLogger(__name__)


class WordFetchWorkerSignals(QObject):
    loaded = Signal(int, list)   # generation, words
    failed = Signal(int, str)    # generation, message


class WordFetchWorker(QRunnable):
    def __init__(self, source, difficulty, generation: int):
        super().__init__()
        self.source = source
        self.difficulty = difficulty
        self.generation = generation
        self.signals = WordFetchWorkerSignals()

    def run(self):
        try:
            words = self.source.fetch_words(self.difficulty)
        except TextSourceUnavailable as e:
            self.signals.failed.emit(self.generation, str(e))
            return
        except Exception as e:
            # a QRunnable has nobody to propagate to; report it as a failed load
            log.exception("Word source crashed")
            self.signals.failed.emit(self.generation, f"{type(e).__name__}: {e}")
            return
        self.signals.loaded.emit(self.generation, list(words))


class Workers:
    pool = QThreadPool.globalInstance()
