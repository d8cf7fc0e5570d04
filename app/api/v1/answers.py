"""
API endpoints for recording answers from the practice screens.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_answer_recorder, get_current_user_id
from app.core.study.answer_recorder import AnswerRecorder
from app.db.base import get_db
from app.schemas.answer import AnswerSubmit, AnswerSubmitResponse, RecentAnswers
from app.services.answer_store import AnswerEventStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AnswerSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_answer(
    payload: AnswerSubmit,
    user_id: str = Depends(get_current_user_id),
    recorder: AnswerRecorder = Depends(get_answer_recorder),
) -> Any:
    """
    Record one answer and update the learner's statistics.

    A 503 with `event_id` set means the answer was stored but the statistics
    were not updated.
    """
    event_id = recorder.submit_answer(
        user_id=user_id,
        category=payload.category,
        question_id=payload.question_id,
        chosen_option=payload.chosen_option,
        correct_option=payload.correct_option,
        time_spent_seconds=payload.time_spent_seconds,
    )
    return AnswerSubmitResponse(
        event_id=event_id,
        is_correct=payload.chosen_option == payload.correct_option,
    )


@router.get("/recent", response_model=RecentAnswers)
def get_recent_answers(
    limit: int = Query(settings.RECENT_ANSWERS_LIMIT, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """Most recent answers of the learner, newest first."""
    return RecentAnswers(answers=AnswerEventStore(db).recent(user_id, limit))
