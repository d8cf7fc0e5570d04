"""Schemas module - Import all schemas."""
from app.schemas.question import Question, QuestionPublic
from app.schemas.answer import AnswerSubmit, AnswerSubmitResponse, AnswerEventData, RecentAnswers
from app.schemas.statistics import (
    CategoryTally,
    UserStatistics,
    WeakArea,
    WeakAreaReport,
    StudyAdviceResponse,
)
from app.schemas.assessment import (
    AssessmentStatus,
    AssessmentKind,
    AssessmentResult,
    AssessmentProgress,
    AssessmentStartResponse,
    AssessmentQuestions,
    SelectAnswerRequest,
    NavigateRequest,
    AssessmentFinishResponse,
    AssessmentResultRecord,
    AssessmentHistory,
)
from app.schemas.review import ReviewCandidateSet
from app.schemas.account import AccountRecordsDeleted

__all__ = [
    "Question",
    "QuestionPublic",
    "AnswerSubmit",
    "AnswerSubmitResponse",
    "AnswerEventData",
    "RecentAnswers",
    "CategoryTally",
    "UserStatistics",
    "WeakArea",
    "WeakAreaReport",
    "StudyAdviceResponse",
    "AssessmentStatus",
    "AssessmentKind",
    "AssessmentResult",
    "AssessmentProgress",
    "AssessmentStartResponse",
    "AssessmentQuestions",
    "SelectAnswerRequest",
    "NavigateRequest",
    "AssessmentFinishResponse",
    "AssessmentResultRecord",
    "AssessmentHistory",
    "ReviewCandidateSet",
    "AccountRecordsDeleted",
]
