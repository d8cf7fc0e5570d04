from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ValidationError
from app.core.study.categories import Category
from app.core.study.review_selector import ReviewSelector, select_review_candidates
from app.services.answer_store import AnswerEventStore
from tests.helpers import make_event


def test_empty_history_gives_empty_set():
    candidates = select_review_candidates([])
    assert candidates.is_empty
    assert candidates.category_counts == {}
    assert candidates.mistake_count == 0


def test_duplicates_keep_most_recent_occurrence():
    # Newest first: q2, q1, q2, q3
    events = [
        make_event(4, "q2", category=Category.ZEI),
        make_event(3, "q1"),
        make_event(2, "q2", category=Category.ZEI),
        make_event(1, "q3", category=Category.HOUREI),
    ]

    candidates = select_review_candidates(events)

    assert candidates.question_ids == ["q2", "q1", "q3"]
    assert candidates.category_counts == {Category.ZEI: 1, Category.MINPOU: 1, Category.HOUREI: 1}
    assert candidates.mistake_count == 4


def test_correct_events_are_ignored():
    events = [make_event(2, "q1", is_correct=True), make_event(1, "q2")]
    candidates = select_review_candidates(events)
    assert candidates.question_ids == ["q2"]
    assert candidates.mistake_count == 1


class FakeAnswerStore:
    def __init__(self, events):
        self.events = events
        self.requested = None

    def recent_incorrect(self, user_id, limit):
        self.requested = (user_id, limit)
        return self.events[:limit]


def test_selector_reads_bounded_history():
    store = FakeAnswerStore([make_event(i, f"q{i % 3}") for i in range(10, 0, -1)])
    candidates = ReviewSelector(store).get_due_for_review("user-1", 4)

    assert store.requested == ("user-1", 4)
    assert candidates.mistake_count == 4
    assert len(candidates.question_ids) == 3


def test_selector_rejects_non_positive_limit():
    with pytest.raises(ValidationError):
        ReviewSelector(FakeAnswerStore([])).get_due_for_review("user-1", 0)


def test_selector_over_sql_store(db):
    store = AnswerEventStore(db)
    start = datetime(2024, 4, 1, 3, 0, tzinfo=timezone.utc)
    submissions = [
        ("q1", Category.MINPOU, 1),
        ("q2", Category.ZEI, 2),
        ("q3", Category.ZEI, 0),  # correct
        ("q1", Category.MINPOU, 3),
    ]
    for minute, (question_id, category, chosen) in enumerate(submissions):
        store.add(
            user_id="user-1",
            category=category,
            question_id=question_id,
            chosen_option=chosen,
            correct_option=0,
            time_spent_seconds=10,
            created_at=start + timedelta(minutes=minute),
        )
    store.add(
        user_id="user-2",
        category=Category.HOUREI,
        question_id="other",
        chosen_option=1,
        correct_option=0,
        time_spent_seconds=10,
        created_at=start,
    )

    candidates = ReviewSelector(store).get_due_for_review("user-1", 50)

    assert candidates.question_ids == ["q1", "q2"]
    assert candidates.category_counts == {Category.MINPOU: 1, Category.ZEI: 1}
    assert candidates.mistake_count == 3
