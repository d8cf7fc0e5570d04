"""
API endpoints for timed assessment sessions (mock exams).

Session routes are async so that sessions and their timers are only touched
from the event loop; database work runs in the thread pool.
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user_id, get_session_registry
from app.core.study.assessment import AssessmentSession
from app.db.base import get_db
from app.schemas.assessment import (
    AssessmentFinishResponse,
    AssessmentHistory,
    AssessmentKind,
    AssessmentProgress,
    AssessmentQuestions,
    AssessmentStartResponse,
    NavigateRequest,
    SelectAnswerRequest,
)
from app.services.question_service import QuestionService
from app.services.result_store import AssessmentResultStore
from app.services.session_registry import AssessmentSessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


def start_response(session: AssessmentSession) -> AssessmentStartResponse:
    return AssessmentStartResponse(
        progress=session.progress(),
        time_limit_seconds=session.time_limit_seconds,
        pass_cutoff=session.pass_cutoff,
        questions=session.public_questions(),
    )


# ============= Endpoints =============

@router.post("/mock-exam", response_model=AssessmentStartResponse, status_code=status.HTTP_201_CREATED)
async def start_mock_exam(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    """
    Start a mock exam sampled from the full question pool.

    The clock starts immediately; the session finishes on its own when it
    runs out.
    """
    pool = await run_in_threadpool(QuestionService(db).get_pool)
    session = await registry.start(
        user_id=user_id,
        pool=pool,
        size=settings.MOCK_EXAM_QUESTION_COUNT,
        time_limit_seconds=settings.MOCK_EXAM_TIME_LIMIT_SECONDS,
        kind=AssessmentKind.MOCK_EXAM,
    )
    return start_response(session)


@router.get("/results", response_model=AssessmentHistory)
def get_results(
    kind: Optional[AssessmentKind] = None,
    limit: int = Query(settings.RESULT_HISTORY_LIMIT, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """Stored results of the learner, newest first."""
    return AssessmentHistory(results=AssessmentResultStore(db).list_for_user(user_id, limit, kind))


@router.get("/{session_id}", response_model=AssessmentProgress)
async def get_progress(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    return registry.get(user_id, session_id).progress()


@router.get("/{session_id}/questions", response_model=AssessmentQuestions)
async def get_questions(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    """Session questions without answer keys, plus the answers chosen so far."""
    session = registry.get(user_id, session_id)
    return AssessmentQuestions(
        session_id=session.session_id,
        questions=session.public_questions(),
        answers=session.answers,
    )


@router.post("/{session_id}/answers", response_model=AssessmentProgress)
async def select_answer(
    session_id: str,
    request: SelectAnswerRequest,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    session = registry.get(user_id, session_id)
    session.select_answer(request.position, request.option_index)
    return session.progress()


@router.post("/{session_id}/navigate", response_model=AssessmentProgress)
async def navigate(
    session_id: str,
    request: NavigateRequest,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    session = registry.get(user_id, session_id)
    session.navigate(request.direction)
    return session.progress()


@router.post("/{session_id}/finish", response_model=AssessmentFinishResponse)
async def finish_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    """
    Finish the session and store its result.

    Also collects the result of a session that already ran out of time.
    `persisted` is false when the result could not be stored.
    """
    result, result_id, persisted = await registry.finish(user_id, session_id)
    return AssessmentFinishResponse(result=result, result_id=result_id, persisted=persisted)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_session(
    session_id: str,
    user_id: str = Depends(get_current_user_id),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Response:
    """Abandon the session; nothing is stored."""
    registry.abandon(user_id, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
