from typing import List
import math

from app.state import CharStatus, INITIAL_METRICS, Metrics, SessionSnapshot

CHARS_PER_WORD = 5
CHUNK_SIZE = 10


def round_half_up(x: float) -> int:
    # half-up: 12.5 -> 13 (round() would give 12)
    return int(math.floor(x + 0.5))


def count_correct(reference: str, typed: str) -> int:
    return sum(1 for i, ch in enumerate(typed) if i < len(reference) and ch == reference[i])


def compute_metrics(snapshot: SessionSnapshot, now: float) -> Metrics:
    """
    Derive WPM and accuracy from a snapshot.
    WPM = (typed chars / 5) / elapsed minutes, 0 when the elapsed time is
    zero or the quotient is not finite.
    """
    typed = snapshot.typed_input
    if snapshot.started_at is None or not typed:
        return INITIAL_METRICS

    elapsed_minutes = (now - snapshot.started_at) / 60.0
    words_typed = len(typed) / CHARS_PER_WORD
    wpm = 0
    if elapsed_minutes > 0:
        raw = words_typed / elapsed_minutes
        if math.isfinite(raw):
            wpm = max(0, round_half_up(raw))

    correct = count_correct(snapshot.reference_text, typed)
    accuracy = round_half_up(100.0 * correct / len(typed))
    return Metrics(wpm=wpm, accuracy=accuracy)


def character_status(snapshot: SessionSnapshot, index: int) -> CharStatus:
    typed, ref = snapshot.typed_input, snapshot.reference_text
    n = len(typed)
    if index < n:
        if index < len(ref) and typed[index] == ref[index]:
            return CharStatus.CORRECT
        return CharStatus.INCORRECT
    if index == n:
        return CharStatus.CURSOR
    return CharStatus.PENDING


def character_statuses(snapshot: SessionSnapshot) -> List[CharStatus]:
    return [character_status(snapshot, i) for i in range(len(snapshot.reference_text))]


def chunk_text(text: str, size: int = CHUNK_SIZE) -> List[str]:
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [text[i:i + size] for i in range(0, len(text), size)]


def smooth(values: List[float], factor: float = 0.25) -> List[float]:
    out, last = [], None
    for v in values:
        last = v if last is None else last + factor * (v - last)
        out.append(last)
    return out
