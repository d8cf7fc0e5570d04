"""
Store for the per-user statistics aggregate.

Counter columns are written as `col = col + delta` so that concurrent writers
on different devices do not lose increments. Streak columns are overwritten.
"""
import logging
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.core.study.categories import Category
from app.core.study.statistics_updater import initial_statistics
from app.models.user_statistics import UserStats, CategoryStats
from app.schemas.statistics import CategoryTally, UserStatistics

logger = logging.getLogger(__name__)

COUNTER_COLUMNS = ("total_questions", "correct_answers", "total_study_time")


class StatisticsStore:
    """Reads and writes UserStatistics aggregates."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[UserStatistics]:
        """Return the stored aggregate, or None if the user has none yet."""
        try:
            row = self.db.get(UserStats, user_id)
            if row is None:
                return None
            category_rows = self.db.query(CategoryStats).filter(
                CategoryStats.user_id == user_id
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Error reading statistics for user {user_id}: {e}")
            raise PersistenceError("Failed to read user statistics") from e

        category_stats = dict(initial_statistics(user_id).category_stats)
        for cat_row in category_rows:
            try:
                category = Category(cat_row.category)
            except ValueError:
                logger.warning(f"Ignoring unknown category '{cat_row.category}' for user {user_id}")
                continue
            category_stats[category] = CategoryTally(
                total=int(cat_row.total),  # type: ignore
                correct=int(cat_row.correct),  # type: ignore
            )

        return UserStatistics(
            user_id=user_id,
            total_questions=int(row.total_questions),  # type: ignore
            correct_answers=int(row.correct_answers),  # type: ignore
            total_study_time=int(row.total_study_time),  # type: ignore
            study_days=int(row.study_days),  # type: ignore
            current_streak=int(row.current_streak),  # type: ignore
            longest_streak=int(row.longest_streak),  # type: ignore
            last_study_date=row.last_study_date,  # type: ignore
            category_stats=category_stats,
        )

    def save(self, prior: Optional[UserStatistics], updated: UserStatistics) -> None:
        """
        Persist updated, given the prior aggregate it was computed from.

        Args:
            prior: Aggregate read before applying the event (None if absent)
            updated: Aggregate returned by the statistics updater

        Raises:
            PersistenceError: If the store rejects the write
        """
        try:
            if prior is None:
                try:
                    self._insert(updated)
                    self.db.commit()
                    return
                except IntegrityError:
                    # Another device created the row first
                    self.db.rollback()
                    logger.warning(f"Statistics row for user {updated.user_id} already exists, incrementing")
                    prior = initial_statistics(updated.user_id)

            self._increment(prior, updated)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving statistics for user {updated.user_id}: {e}")
            raise PersistenceError("Failed to save user statistics") from e

    def _insert(self, stats: UserStatistics) -> None:
        self.db.add(UserStats(
            user_id=stats.user_id,
            total_questions=stats.total_questions,
            correct_answers=stats.correct_answers,
            total_study_time=stats.total_study_time,
            study_days=stats.study_days,
            current_streak=stats.current_streak,
            longest_streak=stats.longest_streak,
            last_study_date=stats.last_study_date,
        ))
        for category, tally in stats.category_stats.items():
            self.db.add(CategoryStats(
                user_id=stats.user_id,
                category=category.value,
                total=tally.total,
                correct=tally.correct,
            ))
        self.db.flush()

    def _increment(self, prior: UserStatistics, updated: UserStatistics) -> None:
        deltas = {
            column: getattr(updated, column) - getattr(prior, column)
            for column in COUNTER_COLUMNS
        }
        result = self.db.execute(
            update(UserStats)
            .where(UserStats.user_id == updated.user_id)
            .values(
                total_questions=UserStats.total_questions + deltas["total_questions"],
                correct_answers=UserStats.correct_answers + deltas["correct_answers"],
                total_study_time=UserStats.total_study_time + deltas["total_study_time"],
                study_days=updated.study_days,
                current_streak=updated.current_streak,
                longest_streak=updated.longest_streak,
                last_study_date=updated.last_study_date,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Row vanished between read and write (e.g. account reset)
            self._insert(updated)
            return

        for category in Category:
            before = prior.category_stats.get(category, CategoryTally())
            after = updated.category_stats[category]
            total_delta = after.total - before.total
            correct_delta = after.correct - before.correct
            if total_delta == 0 and correct_delta == 0:
                continue

            cat_result = self.db.execute(
                update(CategoryStats)
                .where(
                    CategoryStats.user_id == updated.user_id,
                    CategoryStats.category == category.value,
                )
                .values(
                    total=CategoryStats.total + total_delta,
                    correct=CategoryStats.correct + correct_delta,
                )
                .execution_options(synchronize_session=False)
            )
            if cat_result.rowcount == 0:
                self.db.add(CategoryStats(
                    user_id=updated.user_id,
                    category=category.value,
                    total=total_delta,
                    correct=correct_delta,
                ))

    def delete_for_user(self, user_id: str) -> int:
        """Delete the aggregate of a user. The caller commits."""
        self.db.execute(delete(CategoryStats).where(CategoryStats.user_id == user_id))
        result = self.db.execute(delete(UserStats).where(UserStats.user_id == user_id))
        return result.rowcount or 0
