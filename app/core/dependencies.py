"""
Dependency injection for FastAPI endpoints.
"""
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.agents.advice import StudyAdvisor
from app.core.config import settings
from app.core.security import decode_token
from app.core.study.answer_recorder import AnswerRecorder
from app.core.study.review_selector import ReviewSelector
from app.db.base import get_db
from app.services.answer_store import AnswerEventStore
from app.services.session_registry import AssessmentSessionRegistry, session_registry
from app.services.statistics_store import StatisticsStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> str:
    """
    Get the authenticated user id from the bearer JWT.

    Returns:
        The token subject

    Raises:
        HTTPException: If the token is missing or invalid
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception
    return str(user_id)


def get_study_timezone() -> ZoneInfo:
    return ZoneInfo(settings.STUDY_TIMEZONE)


def get_answer_recorder(db: Session = Depends(get_db)) -> AnswerRecorder:
    return AnswerRecorder(
        AnswerEventStore(db),
        StatisticsStore(db),
        tz=get_study_timezone(),
    )


def get_review_selector(db: Session = Depends(get_db)) -> ReviewSelector:
    return ReviewSelector(AnswerEventStore(db))


def get_session_registry() -> AssessmentSessionRegistry:
    return session_registry


def get_study_advisor() -> StudyAdvisor:
    return StudyAdvisor()
