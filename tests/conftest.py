import random

import pytest

from vocabquiz.config import settings
from vocabquiz.database import HighScoreRepository, init_db
from vocabquiz.engine import QuizEngine
from vocabquiz.models import WordPair


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records scheduled callbacks so tests decide when the dwell time is over."""

    def __init__(self):
        self.timers = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]

    def fire(self):
        timer = self.last
        if not timer.cancelled:
            timer.callback()


class KeepOrder(random.Random):
    """Random source whose shuffle leaves sequences as they are."""

    def shuffle(self, x):
        pass


def make_words(*pairs):
    return [
        WordPair(id=f"w{i}", source_text=source, target_text=target)
        for i, (source, target) in enumerate(pairs)
    ]


@pytest.fixture(autouse=True)
def quiz_settings(monkeypatch):
    monkeypatch.setattr(settings, "AUTO_ADVANCE", True)
    monkeypatch.setattr(settings, "CORRECT_DWELL_SECONDS", 1.0)
    monkeypatch.setattr(settings, "INCORRECT_DWELL_SECONDS", 2.0)
    return settings


@pytest.fixture
def abcd():
    return make_words(("A", "a"), ("B", "b"), ("C", "c"), ("D", "d"))


@pytest.fixture
def five_words():
    return make_words(
        ("Hund", "dog"),
        ("Katze", "cat"),
        ("Baum", "tree"),
        ("Haus", "house"),
        ("Wasser", "water"),
    )


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "db" / "test.db")
    init_db(path)
    return path


@pytest.fixture
def score_store(db_path):
    return HighScoreRepository(db_path)


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def engine(score_store, scheduler):
    return QuizEngine("animals", score_store, scheduler=scheduler, rng=random.Random(7))
