"""
Study streak arithmetic.

The only place that decides whether two study days are contiguous.
"""
from datetime import date, timedelta
from typing import Optional, Tuple


def compute_streak(
    prior_streak: int,
    prior_study_days: int,
    last_study_date: Optional[date],
    today: date
) -> Tuple[int, int]:
    """
    Advance a streak by one day of study.

    Args:
        prior_streak: Current streak before today's activity
        prior_study_days: Distinct study days counted so far
        last_study_date: Calendar date of the previous activity (None if never)
        today: Calendar date of the new activity

    Returns:
        Tuple of (new_streak, new_study_days)
    """
    if last_study_date is None:
        return 1, prior_study_days + 1

    if last_study_date >= today:
        # Same day, or an event older than the last recorded study day
        return prior_streak, prior_study_days

    if last_study_date == today - timedelta(days=1):
        return prior_streak + 1, prior_study_days + 1

    return 1, prior_study_days + 1
