"""
Answer event recorder.

Stores one immutable answer event per submission and folds it into the
user's statistics before returning.
"""
import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from app.core.exceptions import PersistenceError, StatisticsUpdateError, ValidationError
from app.core.study.categories import OPTION_COUNT, parse_category
from app.core.study.statistics_updater import apply_answer_event

logger = logging.getLogger(__name__)

STATISTICS_WRITE_ATTEMPTS = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnswerRecorder:
    """
    Records answers against an answer store and a statistics store.

    Both stores are injected so the recorder can run against the SQL stores
    in app.services or against in-memory fakes.
    """

    def __init__(
        self,
        answer_store,
        statistics_store,
        tz: tzinfo = timezone.utc,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.answer_store = answer_store
        self.statistics_store = statistics_store
        self.tz = tz
        self._clock = clock or _utcnow

    def submit_answer(
        self,
        user_id: str,
        category: str,
        question_id: str,
        chosen_option: int,
        correct_option: int,
        time_spent_seconds: int = 0
    ) -> int:
        """
        Record one answer and update the user's statistics.

        Args:
            user_id: Learner the answer belongs to
            category: Category value of the question
            question_id: ID of the answered question
            chosen_option: Option index the learner picked (0..3)
            correct_option: Option index of the right answer (0..3)
            time_spent_seconds: Seconds spent on the question

        Returns:
            ID of the stored answer event

        Raises:
            ValidationError: Malformed submission; nothing is stored
            PersistenceError: The event could not be stored
            StatisticsUpdateError: The event was stored but statistics were not updated
        """
        parsed_category = parse_category(category)
        if not question_id or not question_id.strip():
            raise ValidationError("question_id must not be empty")
        if time_spent_seconds < 0:
            raise ValidationError("time_spent_seconds must not be negative")
        for name, value in (("chosen_option", chosen_option), ("correct_option", correct_option)):
            if not 0 <= value < OPTION_COUNT:
                raise ValidationError(f"{name} must be between 0 and {OPTION_COUNT - 1}")

        event = self.answer_store.add(
            user_id=user_id,
            category=parsed_category,
            question_id=question_id,
            chosen_option=chosen_option,
            correct_option=correct_option,
            time_spent_seconds=time_spent_seconds,
            created_at=self._clock(),
        )
        logger.info(
            f"Recorded answer event {event.id} for user {user_id} "
            f"({parsed_category.value}, {'correct' if event.is_correct else 'incorrect'})"
        )

        last_error: Optional[PersistenceError] = None
        for attempt in range(1, STATISTICS_WRITE_ATTEMPTS + 1):
            try:
                prior = self.statistics_store.get(user_id)
                updated = apply_answer_event(prior, event, self.tz)
                self.statistics_store.save(prior, updated)
                return event.id
            except PersistenceError as e:
                last_error = e
                logger.warning(
                    f"Statistics update for event {event.id} failed "
                    f"(attempt {attempt}/{STATISTICS_WRITE_ATTEMPTS}): {e.message}"
                )

        logger.error(f"Statistics of user {user_id} are stale: event {event.id} was not applied")
        raise StatisticsUpdateError(
            f"Answer recorded but statistics update failed: {last_error.message if last_error else ''}",
            event_id=event.id,
        )
