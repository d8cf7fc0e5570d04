"""
Append-only store of answer events.
"""
import logging
from datetime import datetime
from typing import List

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.core.study.categories import Category
from app.models.answer_event import AnswerEvent
from app.schemas.answer import AnswerEventData

logger = logging.getLogger(__name__)


class AnswerEventStore:
    """Reads and appends AnswerEvent rows. Events are never updated."""

    def __init__(self, db: Session):
        self.db = db

    def add(
        self,
        user_id: str,
        category: Category,
        question_id: str,
        chosen_option: int,
        correct_option: int,
        time_spent_seconds: int,
        created_at: datetime
    ) -> AnswerEventData:
        """Insert one event and return it as immutable data."""
        event = AnswerEvent(
            user_id=user_id,
            category=category.value,
            question_id=question_id,
            chosen_option=chosen_option,
            correct_option=correct_option,
            is_correct=chosen_option == correct_option,
            time_spent_seconds=time_spent_seconds,
            created_at=created_at,
        )
        try:
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error storing answer event for user {user_id}: {e}")
            raise PersistenceError("Failed to store answer event") from e

        return AnswerEventData.model_validate(event)

    def recent(self, user_id: str, limit: int) -> List[AnswerEventData]:
        """Most recent events of a user, newest first."""
        return self._query_recent(user_id, limit, incorrect_only=False)

    def recent_incorrect(self, user_id: str, limit: int) -> List[AnswerEventData]:
        """Most recent incorrect events of a user, newest first."""
        return self._query_recent(user_id, limit, incorrect_only=True)

    def _query_recent(self, user_id: str, limit: int, incorrect_only: bool) -> List[AnswerEventData]:
        try:
            query = self.db.query(AnswerEvent).filter(AnswerEvent.user_id == user_id)
            if incorrect_only:
                query = query.filter(AnswerEvent.is_correct.is_(False))
            rows = query.order_by(
                AnswerEvent.created_at.desc(), AnswerEvent.id.desc()
            ).limit(limit).all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching answer events for user {user_id}: {e}")
            raise PersistenceError("Failed to read answer events") from e

        return [AnswerEventData.model_validate(row) for row in rows]

    def count_for_user(self, user_id: str) -> int:
        try:
            return self.db.query(AnswerEvent).filter(AnswerEvent.user_id == user_id).count()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to count answer events") from e

    def delete_for_user(self, user_id: str) -> int:
        """Delete every event of a user. The caller commits."""
        result = self.db.execute(delete(AnswerEvent).where(AnswerEvent.user_id == user_id))
        return result.rowcount or 0
