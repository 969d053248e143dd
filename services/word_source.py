# services/word_source.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Protocol

import requests

from app.config import DEFAULT_ENDPOINT, DEFAULT_MODEL, DEFAULT_TIMEOUT
from app.errors import TextSourceUnavailable
from app.state import Difficulty
from app.validation import validate_difficulty

log = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "The prompt is a single digit from 0 to 3 giving a difficulty level: "
    "0 is easy, 1 is medium, 2 is hard and 3 is very hard. Based on it, write a "
    "paragraph of meaningful words that will be used as practice text. "
    "Level 0: at most 3 sentences of simple everyday words. "
    "Level 1: at most 2 sentences of somewhat harder words. "
    "Level 2: at most 3 sentences of harder words. "
    "Level 3: at most 2 sentences that make no sense, built from extremely obscure words "
    "most people have never seen. "
    "Do not write about typing or typing practice, and never use the sentence "
    "'The quick brown fox jumps over the lazy dog'. Reply with the paragraph only."
)


class WordSource(Protocol):
    def fetch_words(self, difficulty: Difficulty) -> List[str]:
        """Words for the reference text. Raises TextSourceUnavailable on failure."""
        ...


class GeminiWordSource:
    """Generates practice text with the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: str = DEFAULT_ENDPOINT,
        http=None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.endpoint = endpoint.rstrip("/")
        self.http = http or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def build_payload(self, difficulty: Difficulty) -> dict:
        return {
            "system_instruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "contents": [{"role": "user", "parts": [{"text": str(int(difficulty))}]}],
        }

    def fetch_words(self, difficulty: Difficulty) -> List[str]:
        difficulty = validate_difficulty(difficulty)
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }
        try:
            r = self.http.post(
                self.url, headers=headers, json=self.build_payload(difficulty), timeout=self.timeout
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            log.warning("Gemini request failed: %s", e)
            raise TextSourceUnavailable(f"request failed: {e}") from e
        except ValueError as e:
            raise TextSourceUnavailable("response is not valid JSON") from e

        text = extract_text(data)
        return text.split()


def extract_text(data) -> str:
    """Concatenate the text parts of the first candidate."""
    try:
        parts = data["candidates"][0]["content"]["parts"]
        chunks = [p["text"] for p in parts if "text" in p]
    except (KeyError, IndexError, TypeError) as e:
        raise TextSourceUnavailable("malformed response: no candidate text") from e
    if not chunks or not all(isinstance(c, str) for c in chunks):
        raise TextSourceUnavailable("malformed response: no candidate text")
    return "".join(chunks)


DEFAULT_TEXTS: Dict[Difficulty, str] = {
    Difficulty.EASY: (
        "The sun came up over the hill and the birds began to sing. "
        "We walked down to the lake with a bag of bread for the ducks. "
        "It was a good day to be outside."
    ),
    Difficulty.MEDIUM: (
        "The museum opened a new exhibition about ancient navigation, "
        "featuring instruments that sailors once relied upon to cross uncertain oceans."
    ),
    Difficulty.HARD: (
        "Meteorologists scrutinized the anomalous pressure gradients with considerable skepticism. "
        "Their preliminary conclusions contradicted decades of established climatological orthodoxy. "
        "Nevertheless, subsequent observations corroborated the unconventional hypothesis."
    ),
    Difficulty.DEATH: (
        "Quockerwodger sesquipedalian borborygmi defenestrate the pulchritudinous snollygoster. "
        "Ultracrepidarian widdershins callipygian gobbledygook flibbertigibbet lethologica."
    ),
}


class StaticWordSource:
    """Built-in texts, used when no API key is configured."""

    def __init__(self, texts: Optional[Dict[Difficulty, str]] = None):
        self.texts = dict(DEFAULT_TEXTS if texts is None else texts)

    def fetch_words(self, difficulty: Difficulty) -> List[str]:
        difficulty = validate_difficulty(difficulty)
        if difficulty not in self.texts:
            raise TextSourceUnavailable(f"no built-in text for {difficulty.label}")
        return self.texts[difficulty].split()


def make_word_source(settings, offline: bool = False) -> WordSource:
    if offline or settings.offline:
        log.info("Using built-in texts (no Gemini API key)")
        return StaticWordSource()
    return GeminiWordSource(
        settings.api_key,
        model=settings.model,
        timeout=settings.timeout,
        endpoint=settings.endpoint,
    )
