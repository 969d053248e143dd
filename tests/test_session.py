"""Tests for TypingSession."""

import random

import pytest

from app.errors import InvalidDifficulty, TextSourceUnavailable
from app.state import Difficulty, LoadState, Metrics
from services.typing_engine import TypingSession


class FakeClock:
    def __init__(self, t: float = 1000.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float):
        self.t += seconds


class FakeSource:
    def __init__(self, words=None, error=None):
        self.words = words if words is not None else ["new", "text"]
        self.error = error
        self.calls = []

    def fetch_words(self, difficulty):
        self.calls.append(difficulty)
        if self.error:
            raise TextSourceUnavailable(self.error)
        return list(self.words)


class CrashingSource:
    def fetch_words(self, difficulty):
        raise RuntimeError("socket closed")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    return TypingSession("hello world", clock=clock)


class TestKeystrokes:
    def test_accept_sets_start_once(self, session, clock):
        assert session.started_at is None
        assert session.accept_character("h")
        assert session.started_at == 1000.0
        clock.advance(5)
        session.accept_character("e")
        assert session.started_at == 1000.0
        assert session.typed_input == "he"

    def test_rejects_past_end(self, clock):
        s = TypingSession("ab", clock=clock)
        assert s.accept_character("a")
        assert s.accept_character("b")
        assert not s.accept_character("c")
        assert s.typed_input == "ab"
        assert s.is_complete

    def test_rejects_without_text(self, clock):
        s = TypingSession("", clock=clock)
        assert not s.accept_character("a")
        assert s.typed_input == ""
        assert s.started_at is None

    def test_rejects_multi_char_keys(self, session):
        assert not session.accept_character("Enter")
        assert not session.accept_character("")
        assert session.typed_input == ""

    def test_delete_on_empty_is_noop(self, session):
        before = session.snapshot()
        assert not session.delete_last_character()
        assert session.snapshot() == before

    def test_delete_keeps_timer(self, session):
        session.accept_character("h")
        started = session.started_at
        assert session.delete_last_character()
        assert session.typed_input == ""
        assert session.started_at == started

    def test_length_invariant_random_walk(self, clock):
        rng = random.Random(7)
        s = TypingSession("abc def", clock=clock)
        for _ in range(500):
            if rng.random() < 0.6:
                s.accept_character(rng.choice("abcdef x"))
            else:
                s.delete_last_character()
            assert 0 <= len(s.typed_input) <= len(s.reference_text)


class TestReset:
    def test_reset_clears_everything(self, session, clock):
        for ch in "hxllo":
            session.accept_character(ch)
        clock.advance(10)
        session.reset()
        assert session.typed_input == ""
        assert session.started_at is None
        assert session.metrics() == Metrics(0, 100)
        assert not session.has_started

    def test_reset_keeps_text(self, session):
        session.accept_character("h")
        session.reset()
        assert session.reference_text == "hello world"


class TestMetrics:
    def test_metrics_follow_input(self, clock):
        s = TypingSession("hello", clock=clock)
        for ch in "hxllo":
            s.accept_character(ch)
        clock.advance(6)
        m = s.metrics()
        assert m.accuracy == 80
        # 1 word in 0.1 minutes
        assert m.wpm == 10

    def test_backspace_recomputes(self, clock):
        s = TypingSession("hello", clock=clock)
        s.accept_character("h")
        s.accept_character("x")
        assert s.metrics(now=clock.t + 60).accuracy == 50
        s.delete_last_character()
        assert s.metrics(now=clock.t + 60).accuracy == 100

    def test_status_helpers(self, session):
        session.accept_character("h")
        statuses = session.statuses()
        assert len(statuses) == len(session.reference_text)
        assert session.character_status(0).value == "correct"
        assert session.character_status(1).value == "cursor"

    def test_elapsed(self, session, clock):
        assert session.elapsed_seconds() == 0.0
        session.accept_character("h")
        clock.advance(3)
        assert session.elapsed_seconds() == 3.0


class TestSetDifficulty:
    def test_success_replaces_text_and_resets(self, session):
        session.accept_character("h")
        source = FakeSource(["alpha", "beta"])
        assert session.set_difficulty(2, source)
        assert session.reference_text == "alpha beta"
        assert session.typed_input == ""
        assert session.started_at is None
        assert session.difficulty == Difficulty.HARD
        assert session.load_state == LoadState.READY
        assert source.calls == [Difficulty.HARD]

    def test_failure_leaves_state_untouched(self, session):
        session.accept_character("h")
        session.accept_character("e")
        before = session.snapshot()
        assert not session.set_difficulty(3, FakeSource(error="boom"))
        assert session.snapshot() == before
        assert session.difficulty == Difficulty.EASY
        assert session.load_state == LoadState.UNAVAILABLE
        assert "boom" in session.last_error

    def test_empty_response_is_success(self, session):
        assert session.set_difficulty(0, FakeSource([]))
        assert session.reference_text == ""
        assert session.load_state == LoadState.READY
        assert not session.accept_character("a")

    def test_invalid_level_never_reaches_source(self, session):
        source = FakeSource()
        with pytest.raises(InvalidDifficulty):
            session.set_difficulty(4, source)
        assert source.calls == []
        assert session.reference_text == "hello world"

    def test_success_clears_previous_error(self, session):
        session.set_difficulty(1, FakeSource(error="down"))
        session.set_difficulty(1, FakeSource(["ok"]))
        assert session.last_error is None
        assert session.load_state == LoadState.READY


    def test_crashing_source_is_reported_as_unavailable(self, session):
        session.accept_character("h")
        before = session.snapshot()
        assert not session.set_difficulty(2, CrashingSource())
        assert session.snapshot() == before
        assert session.load_state == LoadState.UNAVAILABLE
        assert session.pending_difficulty is None
        assert session.difficulty == Difficulty.EASY
        assert session.last_error == "RuntimeError: socket closed"


class TestGenerations:
    def test_stale_result_is_ignored(self, session):
        first = session.begin_load(0)
        second = session.begin_load(3)
        assert session.finish_load(second, ["newest"])
        assert not session.finish_load(first, ["stale"])
        assert session.reference_text == "newest"
        assert session.difficulty == Difficulty.DEATH

    def test_stale_failure_is_ignored(self, session):
        first = session.begin_load(1)
        second = session.begin_load(2)
        assert not session.fail_load(first, "late error")
        assert session.load_state == LoadState.LOADING
        assert session.finish_load(second, ["fine"])
        assert session.load_state == LoadState.READY

    def test_late_result_after_newer_success(self, session):
        first = session.begin_load(1)
        second = session.begin_load(2)
        session.finish_load(second, ["b"])
        session.accept_character("b")
        assert not session.finish_load(first, ["a"])
        assert session.typed_input == "b"
        assert session.reference_text == "b"

    def test_begin_load_keeps_current_text_typeable(self, session):
        session.begin_load(2)
        assert session.accept_character("h")
        assert session.difficulty == Difficulty.EASY
        assert session.pending_difficulty == Difficulty.HARD
