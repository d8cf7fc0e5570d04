"""
Aggregate statistics updater.

Folds one answer event into a user's cumulative statistics. Pure: the caller
reads the prior aggregate and persists the returned one.
"""
from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Optional

from app.core.study.categories import Category
from app.core.study.streak import compute_streak
from app.schemas.answer import AnswerEventData
from app.schemas.statistics import CategoryTally, UserStatistics


def initial_statistics(user_id: str) -> UserStatistics:
    """Zero aggregate for a user with no recorded answers."""
    return UserStatistics(
        user_id=user_id,
        category_stats={category: CategoryTally() for category in Category},
    )


def study_date_of(moment: datetime, tz: tzinfo = timezone.utc) -> date:
    """Calendar date of moment in the study timezone (naive values are UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def apply_answer_event(
    prior: Optional[UserStatistics],
    event: AnswerEventData,
    tz: tzinfo = timezone.utc
) -> UserStatistics:
    """
    Return the statistics that result from applying event to prior.

    Args:
        prior: Current aggregate, or None when the user has none yet
        event: The answer event to fold in
        tz: Timezone whose calendar defines a study day

    Returns:
        New UserStatistics; prior is left untouched
    """
    if prior is None:
        prior = initial_statistics(event.user_id)

    correct = 1 if event.is_correct else 0
    today = study_date_of(event.created_at, tz)

    new_streak, new_study_days = compute_streak(
        prior.current_streak,
        prior.study_days,
        prior.last_study_date,
        today,
    )

    category_stats: Dict[Category, CategoryTally] = {
        category: prior.category_stats.get(category, CategoryTally())
        for category in Category
    }
    bucket = category_stats[event.category]
    category_stats[event.category] = CategoryTally(
        total=bucket.total + 1,
        correct=bucket.correct + correct,
    )

    last_study_date = today
    if prior.last_study_date is not None and prior.last_study_date > today:
        last_study_date = prior.last_study_date

    return UserStatistics(
        user_id=prior.user_id,
        total_questions=prior.total_questions + 1,
        correct_answers=prior.correct_answers + correct,
        total_study_time=prior.total_study_time + event.time_spent_seconds,
        study_days=new_study_days,
        current_streak=new_streak,
        longest_streak=max(prior.longest_streak, new_streak),
        last_study_date=last_study_date,
        category_stats=category_stats,
    )
