"""Tests for Settings and difficulty validation."""

import pytest

from app.config import DEFAULT_ENDPOINT, DEFAULT_MODEL, Settings
from app.errors import ConfigError, InvalidDifficulty
from app.state import Difficulty
from app.validation import validate_difficulty


def test_settings_defaults():
    s = Settings.from_env({})
    assert s.api_key is None
    assert s.offline
    assert s.model == DEFAULT_MODEL
    assert s.endpoint == DEFAULT_ENDPOINT
    assert s.timeout == 15.0
    assert s.log_level == "INFO"
    assert s.log_file == "gemtype.log"
    assert s.difficulty == Difficulty.EASY


def test_settings_override():
    s = Settings.from_env(
        {
            "GEMINI_API_KEY": " secret ",
            "GEMINI_MODEL": "gemini-2.0-flash",
            "GEMINI_ENDPOINT": "https://proxy.test/v1beta/",
            "GEMINI_TIMEOUT": "4.5",
            "GEMTYPE_LOG_LEVEL": "debug",
            "GEMTYPE_LOG_FILE": "",
            "GEMTYPE_DIFFICULTY": "3",
        }
    )
    assert s.api_key == "secret"
    assert not s.offline
    assert s.model == "gemini-2.0-flash"
    assert s.endpoint == "https://proxy.test/v1beta"
    assert s.timeout == 4.5
    assert s.log_level == "DEBUG"
    assert s.log_file is None
    assert s.difficulty == Difficulty.DEATH


def test_repr_hides_key():
    s = Settings(api_key="secret")
    assert "secret" not in repr(s)


@pytest.mark.parametrize("value", ["abc", "0", "-2"])
def test_bad_timeout(value):
    with pytest.raises(ConfigError, match="GEMINI_TIMEOUT"):
        Settings.from_env({"GEMINI_TIMEOUT": value})


def test_bad_difficulty():
    with pytest.raises(ConfigError, match="GEMTYPE_DIFFICULTY"):
        Settings.from_env({"GEMTYPE_DIFFICULTY": "9"})


class TestValidateDifficulty:
    def test_valid(self):
        assert validate_difficulty(0) is Difficulty.EASY
        assert validate_difficulty("2") is Difficulty.HARD
        assert validate_difficulty(Difficulty.DEATH) is Difficulty.DEATH

    @pytest.mark.parametrize("value", [-1, 4, "x", "", 1.0, None, True, "\u00b2", "\u0663"])
    def test_invalid(self, value):
        with pytest.raises(InvalidDifficulty):
            validate_difficulty(value)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_difficulty(10)

    def test_labels(self):
        assert [d.label for d in Difficulty] == ["Easy", "Medium", "Hard", "Death"]


def test_non_ascii_digit_difficulty_is_config_error():
    with pytest.raises(ConfigError, match="GEMTYPE_DIFFICULTY"):
        Settings.from_env({"GEMTYPE_DIFFICULTY": "²"})
