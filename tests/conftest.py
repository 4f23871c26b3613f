"""
Pytest configuration and shared fixtures for chemquiz tests.
"""

import random
from unittest.mock import AsyncMock, Mock

import pytest

from chemquiz.db import bind_engine, init_db
from chemquiz.services.dispatcher import QuizDispatcher
from chemquiz.services.formula_bank import Formula, FormulaBank
from chemquiz.services.session_store import SessionKey, SessionStore
from chemquiz.services.state_machine import QuizStateMachine

WATER = Formula("H₂O", 18)
CARBON_DIOXIDE = Formula("CO₂", 44)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CyclingRandom(random.Random):
    """Random source whose choice() walks the sequence in order."""

    def __init__(self):
        super().__init__(0)
        self._next = 0

    def choice(self, seq):
        item = seq[self._next % len(seq)]
        self._next += 1
        return item


@pytest.fixture
def clock():
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def water_bank():
    """Fixture providing a bank whose only question is water (18)."""
    return FormulaBank([WATER])


@pytest.fixture
def cycling_bank():
    """Fixture providing a bank that alternates water and carbon dioxide."""
    return FormulaBank([WATER, CARBON_DIOXIDE], rng=CyclingRandom())


@pytest.fixture
def store():
    """Fixture providing an empty session store."""
    return SessionStore()


@pytest.fixture
def key():
    """Fixture providing the session key of a sample user."""
    return SessionKey(user_id=1, chat_id=10)


@pytest.fixture
def machine(store, water_bank, clock):
    """Fixture providing a state machine on the water-only bank."""
    return QuizStateMachine(store, water_bank, tolerance=0.01, clock=clock)


@pytest.fixture
def quiz(machine):
    """Fixture providing a quiz dispatcher with mocked outbound hooks."""
    return QuizDispatcher(
        machine, timeout_ms=60_000, notify=AsyncMock(), on_finish=AsyncMock()
    )


@pytest.fixture
def db(tmp_path):
    """Fixture binding the models to a fresh SQLite file."""
    engine = bind_engine(f"sqlite:///{tmp_path / 'test.db'}")
    init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def make_message():
    """Fixture building mocked aiogram messages."""

    def _make(text: str, user_id: int = 1, chat_id: int = 10):
        msg = AsyncMock()
        msg.text = text
        msg.from_user = Mock(id=user_id)
        msg.chat = Mock(id=chat_id)
        msg.answer = AsyncMock()
        return msg

    return _make
