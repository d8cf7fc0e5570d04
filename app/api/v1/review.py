"""
API endpoints for reviewing previously missed questions.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user_id, get_review_selector, get_session_registry
from app.core.exceptions import ValidationError
from app.core.study.review_selector import ReviewSelector
from app.db.base import get_db
from app.schemas.assessment import AssessmentKind, AssessmentStartResponse
from app.schemas.review import ReviewCandidateSet
from app.services.question_service import QuestionService
from app.services.session_registry import AssessmentSessionRegistry
from app.api.v1.assessments import start_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ReviewCandidateSet)
def get_review_candidates(
    max_events: int = Query(settings.REVIEW_MAX_EVENTS, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    selector: ReviewSelector = Depends(get_review_selector),
) -> Any:
    """Questions answered incorrectly, most recent mistake first."""
    return selector.get_due_for_review(user_id, max_events)


@router.post("/sessions", response_model=AssessmentStartResponse, status_code=status.HTTP_201_CREATED)
async def start_review_session(
    max_events: int = Query(settings.REVIEW_MAX_EVENTS, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    selector: ReviewSelector = Depends(get_review_selector),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    """Start a timed session over every current review candidate."""
    candidates = await run_in_threadpool(selector.get_due_for_review, user_id, max_events)
    if candidates.is_empty:
        raise ValidationError("No incorrect answers to review")

    pool = await run_in_threadpool(QuestionService(db).get_by_ids, candidates.question_ids)
    session = await registry.start(
        user_id=user_id,
        pool=pool,
        size=len(pool),
        time_limit_seconds=settings.REVIEW_SESSION_TIME_LIMIT_SECONDS,
        kind=AssessmentKind.REVIEW,
    )
    logger.info(f"Started review session {session.session_id} for user {user_id}")
    return start_response(session)
