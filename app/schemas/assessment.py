"""
Pydantic schemas for timed assessment sessions (mock exams and review sessions).
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.study.categories import Category
from app.schemas.question import QuestionPublic
from app.schemas.statistics import CategoryTally


class AssessmentStatus(str, Enum):
    """Lifecycle of an assessment session."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class AssessmentKind(str, Enum):
    """Where the question pool of a session came from."""

    MOCK_EXAM = "mock_exam"
    REVIEW = "review"


class AssessmentResult(BaseModel):
    """Outcome of a finished assessment session."""
    model_config = ConfigDict(frozen=True)

    session_id: str
    kind: AssessmentKind
    score: int
    total_questions: int
    percentage: int
    pass_cutoff: int
    is_passed: bool
    time_used_seconds: int
    category_stats: Dict[Category, CategoryTally]
    incorrect_question_ids: List[str]
    completed_at: datetime


class AssessmentProgress(BaseModel):
    """Snapshot of a session shown by the exam screen."""

    session_id: str
    kind: AssessmentKind
    status: AssessmentStatus
    current_position: int
    remaining_seconds: int
    answered_count: int
    total_questions: int


class AssessmentStartResponse(BaseModel):
    """Schema returned when a session starts."""

    progress: AssessmentProgress
    time_limit_seconds: int
    pass_cutoff: int
    questions: List[QuestionPublic]


class AssessmentQuestions(BaseModel):
    """Questions of a session, without answer keys."""

    session_id: str
    questions: List[QuestionPublic]
    answers: Dict[int, int]


class SelectAnswerRequest(BaseModel):
    """Schema for choosing an option at a position."""

    position: int
    option_index: int


class NavigateRequest(BaseModel):
    """Schema for moving the cursor one question back or forward."""

    direction: int = Field(..., description="-1 for previous, +1 for next")


class AssessmentFinishResponse(BaseModel):
    """Result of a finished session and whether it reached the store."""

    result: AssessmentResult
    result_id: Optional[int] = None
    persisted: bool


class AssessmentResultRecord(BaseModel):
    """Schema for a persisted assessment result."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    session_id: str
    kind: AssessmentKind
    score: int
    total_questions: int
    percentage: int
    pass_cutoff: int
    is_passed: bool
    time_used_seconds: int
    category_stats: Dict[Category, CategoryTally]
    incorrect_question_ids: List[str]
    completed_at: datetime


class AssessmentHistory(BaseModel):
    """Schema for the result history."""

    results: List[AssessmentResultRecord]
