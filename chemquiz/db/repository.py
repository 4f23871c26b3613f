from dataclasses import dataclass
from typing import Optional
from sqlalchemy import func

from chemquiz.db.models import PracticeResult, get_session


@dataclass(frozen=True)
class PracticeTotals:
    """Aggregated history of one user."""

    sessions: int
    answered: int
    correct: int
    best_streak: int


class ResultRepository:
    """Repository for finished practice sessions."""

    @staticmethod
    def add(
        telegram_id: int,
        chat_id: int,
        answered: int,
        correct: int,
        duration_ms: int,
        outcome: str,
    ) -> int:
        """Store a finished session and return its id."""
        with get_session() as session:
            result = PracticeResult(
                telegram_id=telegram_id,
                chat_id=chat_id,
                answered=answered,
                correct=correct,
                duration_ms=duration_ms,
                outcome=outcome,
            )
            session.add(result)
            session.commit()
            return result.id

    @staticmethod
    def get_totals(telegram_id: int) -> Optional[PracticeTotals]:
        """Get aggregated results of a user, None if they never played."""
        with get_session() as session:
            sessions, answered, correct, best = (
                session.query(
                    func.count(PracticeResult.id),
                    func.coalesce(func.sum(PracticeResult.answered), 0),
                    func.coalesce(func.sum(PracticeResult.correct), 0),
                    func.coalesce(func.max(PracticeResult.correct), 0),
                )
                .filter(PracticeResult.telegram_id == telegram_id)
                .one()
            )
        if not sessions:
            return None
        return PracticeTotals(
            sessions=sessions, answered=answered, correct=correct, best_streak=best
        )

    @staticmethod
    def get_recent(telegram_id: int, limit: int = 5) -> list[PracticeResult]:
        """Get the latest sessions of a user, newest first."""
        with get_session() as session:
            return (
                session.query(PracticeResult)
                .filter(PracticeResult.telegram_id == telegram_id)
                .order_by(PracticeResult.finished_at.desc(), PracticeResult.id.desc())
                .limit(limit)
                .all()
            )
