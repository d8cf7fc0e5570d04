"""Models module - Import all models here so Base.metadata knows every table."""
from app.db.base import Base
from app.models.question import Question
from app.models.answer_event import AnswerEvent
from app.models.user_statistics import UserStats, CategoryStats
from app.models.assessment_result import AssessmentRecord

__all__ = ["Base", "Question", "AnswerEvent", "UserStats", "CategoryStats", "AssessmentRecord"]
