from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from chemquiz.states import Outcome, SessionState

OUTCOME_LABELS = {
    Outcome.WRONG_ANSWER: "答错结束",
    Outcome.MANUAL_EXIT: "主动退出",
    Outcome.TIMEOUT: "回答超时",
}


@dataclass(frozen=True)
class SessionSummary:
    """Final numbers of a finished session."""

    answered: int
    correct: int
    accuracy: float
    elapsed_ms: int
    outcome: Outcome


def accuracy(correct: int, answered: int) -> float:
    """Percentage of correct answers, rounded half up to one decimal."""
    if answered <= 0:
        return 0.0
    value = Decimal(correct) * 100 / Decimal(answered)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def format_elapsed(ms: int) -> str:
    """Format a duration as minutes and zero-padded seconds, e.g. 2分05秒."""
    total_seconds = max(int(ms), 0) // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}分{seconds:02d}秒"


def collect(state: SessionState, outcome: Outcome, now: float) -> SessionSummary:
    """
    Build the summary of a session at ``now`` (same clock as ``started_at``).

    Only answered questions count; a question still pending on exit or
    timeout is left out.
    """
    answered = state.answered_count
    return SessionSummary(
        answered=answered,
        correct=state.correct_count,
        accuracy=accuracy(state.correct_count, answered),
        elapsed_ms=int((now - state.started_at) * 1000),
        outcome=outcome,
    )


def render(summary: SessionSummary) -> str:
    return "\n".join(
        [
            f"📊 练习统计（{OUTCOME_LABELS[summary.outcome]}）",
            f"├ 总题数：{summary.answered}",
            f"├ 正确数：{summary.correct}",
            f"├ 正确率：{summary.accuracy:.1f}%",
            f"└ 用时：{format_elapsed(summary.elapsed_ms)}",
        ]
    )


def summarize(state: SessionState, outcome: Outcome, now: float) -> str:
    """Format the final statistics block shown when a session ends."""
    return render(collect(state, outcome, now))
