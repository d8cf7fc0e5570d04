"""
Review candidate selection: the most recent distinct mistakes of a user.

No retention model; a question stays a candidate for as long as one of its
incorrect answers is among the newest `max_events` mistakes.
"""
from typing import Dict, List, Sequence

from app.core.exceptions import ValidationError
from app.core.study.categories import Category
from app.schemas.answer import AnswerEventData
from app.schemas.review import ReviewCandidateSet


def select_review_candidates(events: Sequence[AnswerEventData]) -> ReviewCandidateSet:
    """
    Deduplicate incorrect events by question id, keeping the newest occurrence.

    Args:
        events: Incorrect answer events, newest first

    Returns:
        ReviewCandidateSet ordered by most recent mistake
    """
    seen = set()
    question_ids: List[str] = []
    category_counts: Dict[Category, int] = {}

    for event in events:
        if event.is_correct or event.question_id in seen:
            continue
        seen.add(event.question_id)
        question_ids.append(event.question_id)
        category_counts[event.category] = category_counts.get(event.category, 0) + 1

    return ReviewCandidateSet(
        question_ids=question_ids,
        category_counts=category_counts,
        mistake_count=sum(1 for e in events if not e.is_correct),
    )


class ReviewSelector:
    """Reads a user's incorrect answers and builds the review pool."""

    def __init__(self, answer_store):
        self.answer_store = answer_store

    def get_due_for_review(self, user_id: str, max_events: int) -> ReviewCandidateSet:
        if max_events < 1:
            raise ValidationError("max_events must be at least 1")
        events = self.answer_store.recent_incorrect(user_id, max_events)
        return select_review_candidates(events)
