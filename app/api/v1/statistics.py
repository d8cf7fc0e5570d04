"""
API endpoints for the learner's statistics dashboard.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.agents.advice import StudyAdvisor
from app.core.config import settings
from app.core.dependencies import get_current_user_id, get_study_advisor
from app.core.study.statistics_updater import initial_statistics
from app.core.study.weak_areas import rank_weak_areas
from app.db.base import get_db
from app.schemas.statistics import StudyAdviceResponse, UserStatistics, WeakAreaReport
from app.services.result_store import AssessmentResultStore
from app.services.statistics_store import StatisticsStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _load_statistics(db: Session, user_id: str) -> UserStatistics:
    return StatisticsStore(db).get(user_id) or initial_statistics(user_id)


@router.get("", response_model=UserStatistics)
def get_statistics(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """Cumulative statistics; a learner with no answers gets the zero aggregate."""
    return _load_statistics(db, user_id)


@router.get("/weak-areas", response_model=WeakAreaReport)
def get_weak_areas(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Any:
    """Practiced categories ordered weakest first."""
    stats = _load_statistics(db, user_id)
    results = AssessmentResultStore(db).list_for_user(user_id, settings.RESULT_HISTORY_LIMIT)
    return WeakAreaReport(weak_areas=rank_weak_areas(stats, results))


@router.post("/advice", response_model=StudyAdviceResponse)
def get_study_advice(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    advisor: StudyAdvisor = Depends(get_study_advisor),
) -> Any:
    """Short natural-language advice based on the learner's statistics."""
    return advisor.generate_advice(_load_statistics(db, user_id))
