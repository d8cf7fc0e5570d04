"""
Store for finished assessment results.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.models.assessment_result import AssessmentRecord
from app.schemas.assessment import AssessmentKind, AssessmentResult, AssessmentResultRecord

logger = logging.getLogger(__name__)


class AssessmentResultStore:
    """Writes each session's result once and lists a user's history."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, user_id: str, result: AssessmentResult) -> int:
        """
        Persist result and return its row id.

        Saving the same session twice returns the id of the first row.
        """
        record = AssessmentRecord(
            session_id=result.session_id,
            user_id=user_id,
            kind=result.kind.value,
            score=result.score,
            total_questions=result.total_questions,
            percentage=result.percentage,
            pass_cutoff=result.pass_cutoff,
            is_passed=result.is_passed,
            time_used_seconds=result.time_used_seconds,
            category_stats={
                category.value: {"total": tally.total, "correct": tally.correct}
                for category, tally in result.category_stats.items()
            },
            incorrect_question_ids=list(result.incorrect_question_ids),
            completed_at=result.completed_at,
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            return int(record.id)  # type: ignore
        except IntegrityError:
            self.db.rollback()
            existing = self.db.query(AssessmentRecord).filter(
                AssessmentRecord.session_id == result.session_id
            ).first()
            if existing is None:
                raise PersistenceError(f"Failed to save result of session {result.session_id}")
            logger.info(f"Result of session {result.session_id} already stored")
            return int(existing.id)  # type: ignore
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving result of session {result.session_id}: {e}")
            raise PersistenceError(f"Failed to save result of session {result.session_id}") from e

    def list_for_user(
        self,
        user_id: str,
        limit: int,
        kind: Optional[AssessmentKind] = None
    ) -> List[AssessmentResultRecord]:
        """Most recent results of a user, newest first."""
        try:
            query = self.db.query(AssessmentRecord).filter(AssessmentRecord.user_id == user_id)
            if kind is not None:
                query = query.filter(AssessmentRecord.kind == kind.value)
            rows = query.order_by(
                AssessmentRecord.completed_at.desc(), AssessmentRecord.id.desc()
            ).limit(limit).all()
        except SQLAlchemyError as e:
            logger.error(f"Error listing results for user {user_id}: {e}")
            raise PersistenceError("Failed to read assessment results") from e

        return [AssessmentResultRecord.model_validate(row) for row in rows]

    def delete_for_user(self, user_id: str) -> int:
        """Delete every result of a user. The caller commits."""
        result = self.db.execute(delete(AssessmentRecord).where(AssessmentRecord.user_id == user_id))
        return result.rowcount or 0
