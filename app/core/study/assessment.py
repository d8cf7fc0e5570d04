"""
Timed assessment session (mock exam or review session).

State machine NotStarted -> InProgress -> Finished. finish() is the only place
that performs the transition to Finished, so a timer expiry racing a manual
finish produces a single result.
"""
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from app.core.exceptions import StateError, ValidationError
from app.core.study.categories import Category
from app.schemas.assessment import (
    AssessmentKind,
    AssessmentProgress,
    AssessmentResult,
    AssessmentStatus,
)
from app.schemas.question import Question, QuestionPublic
from app.schemas.statistics import CategoryTally

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def round_percentage(score: int, total: int) -> int:
    """score/total as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return (score * 200 + total) // (2 * total)


class AssessmentSession:
    """
    One learner working through a fixed list of questions against the clock.

    The pass cutoff is supplied by the caller; the session only compares
    against it.
    """

    def __init__(
        self,
        pass_cutoff: int,
        kind: AssessmentKind = AssessmentKind.MOCK_EXAM,
        session_id: Optional[str] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_finish: Optional[Callable[["AssessmentSession", AssessmentResult], None]] = None
    ):
        if pass_cutoff < 0:
            raise ValidationError("pass_cutoff must not be negative")

        self.session_id = session_id or str(uuid.uuid4())
        self.kind = kind
        self.pass_cutoff = pass_cutoff
        self.on_finish = on_finish
        self._rng = rng or random.Random()
        self._clock = clock or _utcnow

        self.status = AssessmentStatus.NOT_STARTED
        self.started_at: Optional[datetime] = None
        self.time_limit_seconds = 0
        self.remaining_seconds = 0
        self.current_position = 0
        self._questions: List[Question] = []
        self._answers: Dict[int, int] = {}
        self._result: Optional[AssessmentResult] = None

    # ============= Lifecycle =============

    def start(self, pool: Sequence[Question], size: int, time_limit_seconds: int) -> None:
        """
        Sample the session's questions and start the clock.

        Duplicate ids in pool are collapsed before sampling. The session holds
        min(size, distinct pool size) questions in a fixed random order.
        """
        if self.status != AssessmentStatus.NOT_STARTED:
            raise StateError(f"Session {self.session_id} has already been started")
        if size < 1:
            raise ValidationError("Session size must be at least 1")
        if time_limit_seconds <= 0:
            raise ValidationError("Time limit must be positive")

        distinct: Dict[str, Question] = {}
        for question in pool:
            distinct.setdefault(question.id, question)
        if not distinct:
            raise ValidationError("Question pool is empty")

        candidates = list(distinct.values())
        self._questions = self._rng.sample(candidates, min(size, len(candidates)))
        self._answers = {}
        self.time_limit_seconds = time_limit_seconds
        self.remaining_seconds = time_limit_seconds
        self.current_position = 0
        self.started_at = self._clock()
        self.status = AssessmentStatus.IN_PROGRESS

        logger.info(
            f"Started {self.kind.value} session {self.session_id} "
            f"with {len(self._questions)} questions, limit {time_limit_seconds}s"
        )

    def select_answer(self, position: int, option_index: int) -> None:
        """Record (or overwrite) the chosen option at position."""
        self._require_in_progress("select an answer")
        if not 0 <= position < len(self._questions):
            raise StateError(f"Position {position} is outside the session (0..{len(self._questions) - 1})")

        question = self._questions[position]
        if not 0 <= option_index < len(question.options):
            raise ValidationError(f"Option {option_index} is outside 0..{len(question.options) - 1}")

        self._answers[position] = option_index

    def navigate(self, direction: int) -> int:
        """Move the cursor one question back (-1) or forward (+1). Returns the new position."""
        if direction not in (-1, 1):
            raise ValidationError("direction must be -1 or +1")
        if not self._questions:
            return self.current_position

        last = len(self._questions) - 1
        self.current_position = max(0, min(last, self.current_position + direction))
        return self.current_position

    def tick(self, elapsed_seconds: int = 1) -> None:
        """Count down the clock; reaching zero forces finish()."""
        if elapsed_seconds < 0:
            raise ValidationError("elapsed_seconds must not be negative")
        if self.status != AssessmentStatus.IN_PROGRESS:
            return

        self.remaining_seconds = max(0, self.remaining_seconds - elapsed_seconds)
        if self.remaining_seconds == 0:
            logger.info(f"Session {self.session_id} ran out of time")
            self.finish()

    def finish(self) -> AssessmentResult:
        """
        Score the session and move it to Finished.

        Calling finish() again returns the same result without recomputing it.
        """
        if self.status == AssessmentStatus.FINISHED and self._result is not None:
            return self._result
        if self.status == AssessmentStatus.NOT_STARTED:
            raise StateError(f"Session {self.session_id} has not been started")

        self._result = self._score()
        self.status = AssessmentStatus.FINISHED
        logger.info(
            f"Finished session {self.session_id}: "
            f"{self._result.score}/{self._result.total_questions} "
            f"({'passed' if self._result.is_passed else 'failed'})"
        )

        if self.on_finish is not None:
            self.on_finish(self, self._result)
        return self._result

    # ============= Views =============

    @property
    def result(self) -> Optional[AssessmentResult]:
        return self._result

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self._questions]

    @property
    def answers(self) -> Dict[int, int]:
        return dict(self._answers)

    def public_questions(self) -> List[QuestionPublic]:
        """Session questions without answer keys, in session order."""
        return [
            QuestionPublic(
                id=q.id,
                category=q.category,
                text=q.text,
                options=list(q.options),
                position=position,
            )
            for position, q in enumerate(self._questions)
        ]

    def progress(self) -> AssessmentProgress:
        return AssessmentProgress(
            session_id=self.session_id,
            kind=self.kind,
            status=self.status,
            current_position=self.current_position,
            remaining_seconds=self.remaining_seconds,
            answered_count=len(self._answers),
            total_questions=len(self._questions),
        )

    # ============= Helpers =============

    def _require_in_progress(self, action: str) -> None:
        if self.status != AssessmentStatus.IN_PROGRESS:
            raise StateError(f"Cannot {action}: session {self.session_id} is {self.status.value}")

    def _score(self) -> AssessmentResult:
        score = 0
        tallies: Dict[Category, List[int]] = {}
        incorrect: List[str] = []

        for position, question in enumerate(self._questions):
            is_correct = self._answers.get(position) == question.correct_option_index
            bucket = tallies.setdefault(question.category, [0, 0])
            bucket[0] += 1
            if is_correct:
                score += 1
                bucket[1] += 1
            else:
                incorrect.append(question.id)

        total = len(self._questions)
        return AssessmentResult(
            session_id=self.session_id,
            kind=self.kind,
            score=score,
            total_questions=total,
            percentage=round_percentage(score, total),
            pass_cutoff=self.pass_cutoff,
            is_passed=score >= self.pass_cutoff,
            time_used_seconds=self.time_limit_seconds - self.remaining_seconds,
            category_stats={
                category: CategoryTally(total=counts[0], correct=counts[1])
                for category, counts in tallies.items()
            },
            incorrect_question_ids=incorrect,
            completed_at=self._clock(),
        )
