import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Union

from aiogram.fsm.state import State, StatesGroup

from chemquiz.services.formula_bank import Formula


class PracticeState(StatesGroup):
    """FSM states of the molar mass practice."""

    awaiting_answer = State()  # A question was sent, waiting for the reply


class Outcome(Enum):
    """Why a practice session ended."""

    WRONG_ANSWER = "wrong_answer"
    MANUAL_EXIT = "manual_exit"
    TIMEOUT = "timeout"


@dataclass
class SessionState:
    """Progress of one live practice session."""

    current_formula: Formula  # Pending question
    started_at: float  # Monotonic clock seconds
    correct_count: int = 0  # Streak; a wrong answer ends the session
    answered_count: int = 0  # Valid numeric answers received
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def total_questions(self) -> int:
        """Questions issued so far, including the pending one."""
        return self.answered_count + 1

    def to_data(self) -> dict[str, Any]:
        """FSM data of the session, plain values only."""
        return asdict(self)

    @classmethod
    def from_data(cls, data: dict[str, Any]) -> "SessionState":
        values = dict(data)
        values["current_formula"] = Formula(**values["current_formula"])
        return cls(**values)


@dataclass(frozen=True)
class NoSession:
    """No practice is running for the key."""


@dataclass(frozen=True)
class AwaitingAnswer:
    """A question was sent and the bot is waiting for the reply."""

    state: SessionState


SessionPhase = Union[NoSession, AwaitingAnswer]
