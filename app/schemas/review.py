"""
Pydantic schemas for review candidates.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from app.core.study.categories import Category


class ReviewCandidateSet(BaseModel):
    """Most recent distinct mistakes of a user."""
    model_config = ConfigDict(frozen=True)

    question_ids: List[str]  # most recent mistake first
    category_counts: Dict[Category, int]
    mistake_count: int  # incorrect events considered, duplicates included

    @property
    def is_empty(self) -> bool:
        return not self.question_ids
