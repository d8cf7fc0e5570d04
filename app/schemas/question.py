"""
Pydantic schemas for exam questions supplied by the content service.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.core.study.categories import Category, OPTION_COUNT


class QuestionBase(BaseModel):
    """Fields shown to the learner while answering."""

    id: str = Field(..., min_length=1)
    category: Category
    text: str
    options: List[str] = Field(..., min_length=OPTION_COUNT, max_length=OPTION_COUNT)


class Question(QuestionBase):
    """Full question, including the answer key."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    correct_option_index: int
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def check_correct_option(self):
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError("correct_option_index must point at one of the options")
        return self


class QuestionPublic(QuestionBase):
    """Question without the answer key (for taking an assessment)."""

    position: int
