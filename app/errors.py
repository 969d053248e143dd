# app/errors.py


class GemtypeError(Exception):
    """Base class for application errors."""


class InvalidDifficulty(GemtypeError, ValueError):
    def __init__(self, level):
        super().__init__(f"Invalid difficulty level: {level!r} (expected 0-3)")
        self.level = level


class TextSourceUnavailable(GemtypeError):
    """The word source could not produce a text (network, HTTP or payload error)."""


class ConfigError(GemtypeError):
    pass
