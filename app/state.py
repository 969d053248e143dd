# app/state.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class Difficulty(IntEnum):
    EASY = 0
    MEDIUM = 1
    HARD = 2
    DEATH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class CharStatus(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURSOR = "cursor"
    PENDING = "pending"


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Metrics:
    wpm: int = 0
    accuracy: int = 100


INITIAL_METRICS = Metrics()


@dataclass(frozen=True)
class SessionSnapshot:
    reference_text: str = ""
    typed_input: str = ""
    started_at: Optional[float] = None

    @property
    def has_started(self) -> bool:
        return self.started_at is not None
