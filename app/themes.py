# app/themes.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List


@dataclass
class Theme:
    name: str
    background: str
    primary: str
    secondary: str
    accent: str
    error: str
    muted: str
    cursor_bg: str


# -------- Built-in themes --------
THEMES: List[Theme] = [
    Theme(
        name="Dark",
        background="#0f1115",
        primary="#e5e7eb",
        secondary="#6b7280",
        accent="#eab308",
        error="#ef4444",
        muted="rgba(229,231,235,0.40)",
        cursor_bg="rgba(234,179,8,0.20)",
    ),
    Theme(
        name="Light",
        background="#fafafa",
        primary="#111111",
        secondary="#6b6b6b",
        accent="#ca8a04",
        error="#dc2626",
        muted="rgba(17,17,17,0.40)",
        cursor_bg="rgba(202,138,4,0.20)",
    ),
]

DEFAULT_THEME_INDEX = 0


def next_theme_index(idx: int) -> int:
    """Theme toggle: cycle through the built-ins."""
    return (idx + 1) % len(THEMES)
