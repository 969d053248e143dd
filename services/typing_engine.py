# services/typing_engine.py
from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional, Sequence

from app.calculation import character_status, character_statuses, compute_metrics
from app.errors import TextSourceUnavailable
from app.state import CharStatus, Difficulty, LoadState, Metrics, SessionSnapshot
from app.validation import validate_difficulty

log = logging.getLogger(__name__)


class TypingSession:
    """
    Reference text + typed input for one attempt.

    Metrics and per-character status are never stored; they are derived from
    snapshot() each time they are asked for.

    Text loads are tagged with a generation number. begin_load() hands out a
    new one; finish_load()/fail_load() for any older generation are ignored,
    so a slow response can't overwrite the text of a newer request.
    """

    def __init__(self, reference_text: str = "", clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.reference_text = reference_text or ""
        self.typed_input = ""
        self.started_at: Optional[float] = None
        self.difficulty = Difficulty.EASY
        self.pending_difficulty: Optional[Difficulty] = None
        self.generation = 0
        self.load_state = LoadState.READY if self.reference_text else LoadState.IDLE
        self.last_error: Optional[str] = None

    # ---------------- keystrokes ----------------
    def accept_character(self, ch: str) -> bool:
        if len(ch) != 1:
            return False
        if not self.reference_text or len(self.typed_input) >= len(self.reference_text):
            return False
        if self.started_at is None:
            self.started_at = self._clock()
        self.typed_input += ch
        return True

    def delete_last_character(self) -> bool:
        if not self.typed_input:
            return False
        self.typed_input = self.typed_input[:-1]
        return True

    def reset(self):
        self.typed_input = ""
        self.started_at = None

    # ---------------- text loading ----------------
    def begin_load(self, level) -> int:
        difficulty = validate_difficulty(level)
        self.generation += 1
        self.pending_difficulty = difficulty
        self.load_state = LoadState.LOADING
        log.debug("Text request #%d for difficulty %s", self.generation, difficulty.label)
        return self.generation

    def finish_load(self, generation: int, words: Sequence[str]) -> bool:
        if generation != self.generation:
            log.debug("Ignoring stale text #%d (current #%d)", generation, self.generation)
            return False
        self.reference_text = " ".join(words)
        if self.pending_difficulty is not None:
            self.difficulty = self.pending_difficulty
        self.pending_difficulty = None
        self.load_state = LoadState.READY
        self.last_error = None
        self.reset()
        log.info("Loaded %d-character text (%s)", len(self.reference_text), self.difficulty.label)
        return True

    def fail_load(self, generation: int, message: str) -> bool:
        if generation != self.generation:
            log.debug("Ignoring stale failure #%d: %s", generation, message)
            return False
        self.pending_difficulty = None
        self.load_state = LoadState.UNAVAILABLE
        self.last_error = message
        log.warning("Text unavailable: %s", message)
        return True

    def set_difficulty(self, level, source) -> bool:
        """Blocking load from `source`. On failure the current text and input stay as they are."""
        generation = self.begin_load(level)
        try:
            words = source.fetch_words(self.pending_difficulty)
        except TextSourceUnavailable as e:
            self.fail_load(generation, str(e))
            return False
        except Exception as e:
            log.exception("Word source crashed")
            self.fail_load(generation, f"{type(e).__name__}: {e}")
            return False
        return self.finish_load(generation, words)

    # ---------------- derived state ----------------
    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(self.reference_text, self.typed_input, self.started_at)

    def metrics(self, now: Optional[float] = None) -> Metrics:
        return compute_metrics(self.snapshot(), self._clock() if now is None else now)

    def character_status(self, index: int) -> CharStatus:
        return character_status(self.snapshot(), index)

    def statuses(self) -> List[CharStatus]:
        return character_statuses(self.snapshot())

    def elapsed_seconds(self, now: Optional[float] = None) -> float:
        if self.started_at is None:
            return 0.0
        now = self._clock() if now is None else now
        return max(0.0, now - self.started_at)

    @property
    def has_started(self) -> bool:
        return self.started_at is not None

    @property
    def is_complete(self) -> bool:
        return bool(self.reference_text) and len(self.typed_input) >= len(self.reference_text)
