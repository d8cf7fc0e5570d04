"""
Deletion of every study record that belongs to a user.
"""
import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.services.answer_store import AnswerEventStore
from app.services.result_store import AssessmentResultStore
from app.services.statistics_store import StatisticsStore

logger = logging.getLogger(__name__)


def delete_user_records(db: Session, user_id: str) -> Dict[str, int]:
    """
    Remove answer events, statistics and assessment results of user_id.

    Runs in one transaction: either everything is removed or nothing is.

    Returns:
        Number of deleted rows per record type
    """
    try:
        deleted = {
            "answer_events": AnswerEventStore(db).delete_for_user(user_id),
            "statistics": StatisticsStore(db).delete_for_user(user_id),
            "assessment_results": AssessmentResultStore(db).delete_for_user(user_id),
        }
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting records of user {user_id}: {e}")
        raise PersistenceError("Failed to delete user records") from e

    logger.info(f"Deleted records of user {user_id}: {deleted}")
    return deleted
