import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from chemquiz.services import stats
from chemquiz.services.evaluator import DEFAULT_TOLERANCE, Verdict, evaluate
from chemquiz.services.formula_bank import Formula, FormulaBank
from chemquiz.services.session_store import SessionKey, SessionStore
from chemquiz.states import AwaitingAnswer, Outcome, SessionState

DEFAULT_EXIT_KEYWORDS = ("退出", "exit", "quit")

BUSY_TEXT = "⚠️ 你的化学练习已在进行中，请回答当前题目或发送“退出”"
INVALID_TEXT = "⚠️ 请输入有效数字或发送“退出”"
EXIT_TEXT = "🛑 已主动结束练习"
TIMEOUT_TEXT = "⏰ 回答超时，练习自动结束"


def question_text(number: int, formula: Formula) -> str:
    return (
        f"题目 #{number}：请计算 {formula.formula} 的相对分子质量\n"
        "（输入数字或“退出”）"
    )


def correct_text(streak: int) -> str:
    return f"✅ 正确！连续正确次数：{streak}"


def format_mass(mass: float) -> str:
    """Shortest text that reads back as the same float, without a trailing .0"""
    text = repr(float(mass))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def wrong_text(mass: float) -> str:
    return f"❌ 错误！正确答案是 {format_mass(mass)}"


@dataclass(frozen=True)
class Reply:
    """Text to send back, plus the summary when the session just ended."""

    text: str
    summary: Optional[stats.SessionSummary] = None

    @property
    def finished(self) -> bool:
        return self.summary is not None


class QuizStateMachine:
    """
    Drives a practice session from the first question to its end.

    Callers hold ``SessionStore.lock(key)`` around each call, so a transition
    reads and writes the session of its key without interleaving. The only
    effects are the returned reply and changes to the store.
    """

    def __init__(
        self,
        store: SessionStore,
        bank: FormulaBank,
        tolerance: float = DEFAULT_TOLERANCE,
        exit_keywords: Iterable[str] = DEFAULT_EXIT_KEYWORDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.bank = bank
        self.tolerance = tolerance
        keywords = [k.strip() for k in exit_keywords if k.strip()]
        self.exit_label = keywords[0] if keywords else DEFAULT_EXIT_KEYWORDS[0]
        self.exit_keywords = frozenset(k.casefold() for k in keywords)
        self.clock = clock

    def is_exit(self, text: str) -> bool:
        return text.strip().casefold() in self.exit_keywords

    async def start(self, key: SessionKey) -> Reply:
        """Open a session and ask the first question."""
        if await self.store.has(key):
            logging.debug(f"Start refused, session busy for {key}")
            return Reply(BUSY_TEXT)

        state = SessionState(
            current_formula=self.bank.pick_random(), started_at=self.clock()
        )
        await self.store.put(key, state)

        logging.info(f"Practice started for {key}")
        return Reply(question_text(state.total_questions, state.current_formula))

    async def handle_input(self, key: SessionKey, text: str) -> Optional[Reply]:
        """
        Apply one inbound message to the session of ``key``.

        Returns None when there is no session, so the message can be handled
        elsewhere.
        """
        phase = await self.store.lookup(key)
        if not isinstance(phase, AwaitingAnswer):
            return None
        state = phase.state

        if self.is_exit(text):
            return await self._finish(key, state, Outcome.MANUAL_EXIT, EXIT_TEXT)

        formula = state.current_formula
        verdict = evaluate(text, formula.molar_mass, self.tolerance)

        if verdict is Verdict.INVALID:
            return Reply(INVALID_TEXT)

        state.answered_count += 1
        if verdict is Verdict.MISMATCH:
            return await self._finish(
                key, state, Outcome.WRONG_ANSWER, wrong_text(formula.molar_mass)
            )

        state.correct_count += 1
        state.current_formula = self.bank.pick_random()
        await self.store.save(key, state)
        return Reply(
            correct_text(state.correct_count)
            + "\n\n"
            + question_text(state.total_questions, state.current_formula)
        )

    async def expire(self, key: SessionKey) -> Optional[Reply]:
        """End the session of ``key`` because the answer did not arrive in time."""
        state = await self.store.get(key)
        if state is None:
            return None
        return await self._finish(key, state, Outcome.TIMEOUT, TIMEOUT_TEXT)

    async def _finish(
        self, key: SessionKey, state: SessionState, outcome: Outcome, headline: str
    ) -> Reply:
        await self.store.remove(key)
        summary = stats.collect(state, outcome, self.clock())
        logging.info(
            f"Practice ended for {key}: {outcome.value}, "
            f"{summary.correct}/{summary.answered} correct"
        )
        return Reply(headline + "\n\n" + stats.render(summary), summary=summary)
