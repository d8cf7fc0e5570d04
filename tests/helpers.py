"""
Builders shared by the test modules.
"""
from datetime import datetime, timezone
from typing import List

from app.core.security import create_access_token
from app.core.study.categories import Category
from app.schemas.answer import AnswerEventData
from app.schemas.question import Question


def make_question(question_id: str, category: Category = Category.MINPOU, correct: int = 0) -> Question:
    return Question(
        id=question_id,
        category=category,
        text=f"Question {question_id}",
        options=["A", "B", "C", "D"],
        correct_option_index=correct,
    )


def make_pool(count: int, category: Category = Category.MINPOU, correct: int = 0) -> List[Question]:
    return [make_question(f"q{i}", category, correct) for i in range(count)]


def make_event(
    event_id: int,
    question_id: str,
    is_correct: bool = False,
    category: Category = Category.MINPOU,
    created_at: datetime = datetime(2024, 4, 1, 3, 0, tzinfo=timezone.utc),
    user_id: str = "user-1",
    time_spent_seconds: int = 30
) -> AnswerEventData:
    return AnswerEventData(
        id=event_id,
        user_id=user_id,
        category=category,
        question_id=question_id,
        chosen_option=1 if is_correct else 2,
        correct_option=1,
        is_correct=is_correct,
        time_spent_seconds=time_spent_seconds,
        created_at=created_at,
    )


def auth_headers(user_id: str = "user-1") -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
