# app/config.py
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from app.errors import ConfigError, InvalidDifficulty
from app.state import Difficulty
from app.validation import validate_difficulty

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 15.0
DEFAULT_LOG_FILE = "gemtype.log"


def _env_str(env: Mapping[str, str], name: str, default: str = "") -> str:
    v = env.get(name)
    if v is None:
        return default
    return v.strip()


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _env_str(env, name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"
    log_file: Optional[str] = DEFAULT_LOG_FILE
    difficulty: Difficulty = Difficulty.EASY

    @property
    def offline(self) -> bool:
        return not self.api_key

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        try:
            difficulty = validate_difficulty(_env_str(env, "GEMTYPE_DIFFICULTY", "0"))
        except InvalidDifficulty as e:
            raise ConfigError(f"GEMTYPE_DIFFICULTY: {e}") from None
        log_file = env.get("GEMTYPE_LOG_FILE", DEFAULT_LOG_FILE).strip()
        return cls(
            api_key=_env_str(env, "GEMINI_API_KEY") or None,
            model=_env_str(env, "GEMINI_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
            endpoint=(_env_str(env, "GEMINI_ENDPOINT", DEFAULT_ENDPOINT) or DEFAULT_ENDPOINT).rstrip("/"),
            timeout=_env_float(env, "GEMINI_TIMEOUT", DEFAULT_TIMEOUT),
            log_level=(_env_str(env, "GEMTYPE_LOG_LEVEL", "INFO") or "INFO").upper(),
            log_file=log_file or None,
            difficulty=difficulty,
        )

    def __repr__(self) -> str:
        key = "set" if self.api_key else "unset"
        return (
            f"Settings(api_key=<{key}>, model={self.model!r}, endpoint={self.endpoint!r}, "
            f"timeout={self.timeout}, log_level={self.log_level!r}, "
            f"log_file={self.log_file!r}, difficulty={self.difficulty.label})"
        )
