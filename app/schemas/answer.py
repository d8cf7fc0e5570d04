"""
Pydantic schemas for answer submission and answer events.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from app.core.study.categories import Category


class AnswerSubmit(BaseModel):
    """Schema for submitting one answer from the practice screens."""

    category: str = Field(..., description="One of the exam categories")
    question_id: str = Field(..., description="ID of the answered question")
    chosen_option: int = Field(..., description="Index of the option the learner picked")
    correct_option: int = Field(..., description="Index of the correct option")
    time_spent_seconds: int = Field(default=0, description="Seconds spent on the question")


class AnswerSubmitResponse(BaseModel):
    """Schema returned after an answer has been recorded."""

    event_id: int
    is_correct: bool


class AnswerEventData(BaseModel):
    """Immutable record of one learner answering one question."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    user_id: str
    category: Category
    question_id: str
    chosen_option: int
    correct_option: int
    is_correct: bool
    time_spent_seconds: int
    created_at: datetime


class RecentAnswers(BaseModel):
    """Schema for the recent answer history."""

    answers: List[AnswerEventData]
