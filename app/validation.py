from app.errors import InvalidDifficulty
from app.state import Difficulty


def validate_difficulty(level) -> Difficulty:
    """Accepts an int (or a digit string from a combo box / env var) in 0..3."""
    if isinstance(level, bool):
        raise InvalidDifficulty(level)
    if isinstance(level, str):
        level = level.strip()
        if not (level.isascii() and level.isdigit()):
            raise InvalidDifficulty(level)
        level = int(level)
    if not isinstance(level, int):
        raise InvalidDifficulty(level)
    try:
        return Difficulty(level)
    except ValueError:
        raise InvalidDifficulty(level) from None
