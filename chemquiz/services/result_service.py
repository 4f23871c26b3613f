import logging
from sqlalchemy.exc import SQLAlchemyError

from chemquiz.db.repository import ResultRepository
from chemquiz.services.session_store import SessionKey
from chemquiz.services.stats import OUTCOME_LABELS, SessionSummary, accuracy, format_elapsed


class ResultService:
    """Service for the practice history of users."""

    @staticmethod
    def record(key: SessionKey, summary: SessionSummary) -> None:
        """Save a finished session. Failures are logged, never raised."""
        try:
            ResultRepository.add(
                telegram_id=key.user_id,
                chat_id=key.chat_id,
                answered=summary.answered,
                correct=summary.correct,
                duration_ms=summary.elapsed_ms,
                outcome=summary.outcome.value,
            )
        except SQLAlchemyError as e:
            logging.warning(f"Failed to store practice result for {key}: {e}")

    @staticmethod
    async def on_finish(key: SessionKey, summary: SessionSummary) -> None:
        """Finish hook for the quiz dispatcher."""
        ResultService.record(key, summary)

    @staticmethod
    def get_stats_text(telegram_id: int) -> str:
        """Get formatted history text for display."""
        totals = ResultRepository.get_totals(telegram_id)
        if totals is None:
            return "还没有练习记录，发送 /chemistry 开始第一轮吧！"

        lines = [
            "🧪 我的练习记录",
            f"├ 练习次数：{totals.sessions}",
            f"├ 累计答题：{totals.answered}",
            f"├ 累计正确：{totals.correct}",
            f"├ 总正确率：{accuracy(totals.correct, totals.answered):.1f}%",
            f"└ 最佳连对：{totals.best_streak}",
        ]

        recent = ResultRepository.get_recent(telegram_id, limit=3)
        if recent:
            lines.append("")
            lines.append("最近练习：")
            labels = {outcome.value: label for outcome, label in OUTCOME_LABELS.items()}
            for item in recent:
                label = labels.get(item.outcome, item.outcome)
                lines.append(
                    f"• {item.correct}/{item.answered}，"
                    f"用时 {format_elapsed(item.duration_ms)}，{label}"
                )
        return "\n".join(lines)
