"""API v1 router."""
from fastapi import APIRouter

from app.api.v1 import account, answers, assessments, review, statistics

api_router = APIRouter()

api_router.include_router(answers.router, prefix="/answers", tags=["Answers"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["Statistics"])
api_router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
api_router.include_router(review.router, prefix="/review", tags=["Review"])
api_router.include_router(account.router, prefix="/account", tags=["Account"])
