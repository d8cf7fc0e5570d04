"""
Pydantic schemas for user statistics.
"""
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from app.core.study.categories import Category


class CategoryTally(BaseModel):
    """Answer counts for one category."""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    correct: int = 0

    @computed_field
    @property
    def accuracy(self) -> float:
        return round(self.correct / self.total * 100, 1) if self.total > 0 else 0.0


class UserStatistics(BaseModel):
    """
    Cumulative statistics of one user.

    Always fully populated: category_stats holds every Category.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    total_questions: int = 0
    correct_answers: int = 0
    total_study_time: int = 0  # seconds
    study_days: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_study_date: Optional[date] = None
    category_stats: Dict[Category, CategoryTally]

    @computed_field
    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return round(self.correct_answers / self.total_questions * 100, 1)


class WeakArea(BaseModel):
    """Schema for weak area analysis."""

    category: Category
    label: str
    accuracy: float
    total_attempts: int
    mock_exam_accuracy: Optional[float] = None
    priority: str  # high, medium, low


class WeakAreaReport(BaseModel):
    """Categories ordered weakest first."""

    weak_areas: List[WeakArea]


class StudyAdviceResponse(BaseModel):
    """Natural-language advice produced by the text-generation service."""

    advice: str
    generated: bool
