"""
API endpoints for managing the learner's stored records.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user_id, get_session_registry
from app.db.base import get_db
from app.schemas.account import AccountRecordsDeleted
from app.services.account_service import delete_user_records
from app.services.session_registry import AssessmentSessionRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.delete("/records", response_model=AccountRecordsDeleted)
async def delete_records(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    registry: AssessmentSessionRegistry = Depends(get_session_registry),
) -> Any:
    """
    Delete every answer, statistic and assessment result of the learner.

    Running sessions are abandoned first, and result writes already under way
    are awaited, so nothing is stored after the deletion.
    """
    abandoned = await registry.abandon_for_user(user_id)
    deleted = await run_in_threadpool(delete_user_records, db, user_id)
    return AccountRecordsDeleted(abandoned_sessions=abandoned, **deleted)
