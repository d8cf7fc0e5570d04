"""
Question pool provider backed by the local mirror of the content service.
"""
import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, PersistenceError
from app.core.study.categories import Category
from app.models.question import Question as QuestionModel
from app.schemas.question import Question

logger = logging.getLogger(__name__)


class QuestionService:
    """Serves validated questions for assessment sessions."""

    def __init__(self, db: Session):
        self.db = db

    def get_pool(self, category: Optional[Category] = None) -> List[Question]:
        """
        All usable questions, optionally restricted to one category.

        Rows that do not form a valid four-option question are skipped.
        """
        try:
            query = self.db.query(QuestionModel)
            if category is not None:
                query = query.filter(QuestionModel.category == category.value)
            rows = query.order_by(QuestionModel.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading question pool: {e}")
            raise PersistenceError("Failed to load question pool") from e

        return self._to_questions(rows)

    def get_by_ids(self, question_ids: List[str]) -> List[Question]:
        """
        Questions for question_ids, in the given order.

        Raises:
            NotFoundError: If any id is not in the pool
        """
        if not question_ids:
            return []
        try:
            rows = self.db.query(QuestionModel).filter(
                QuestionModel.id.in_(question_ids)
            ).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading questions {question_ids}: {e}")
            raise PersistenceError("Failed to load questions") from e

        by_id = {q.id: q for q in self._to_questions(rows)}
        missing = [qid for qid in question_ids if qid not in by_id]
        if missing:
            raise NotFoundError(f"Questions not found: {', '.join(missing)}")
        return [by_id[qid] for qid in question_ids]

    def add_questions(self, questions: Iterable[Question]) -> int:
        """Insert or replace questions in the local mirror."""
        count = 0
        try:
            for question in questions:
                self.db.merge(QuestionModel(
                    id=question.id,
                    category=question.category.value,
                    text=question.text,
                    options=list(question.options),
                    correct_option_index=question.correct_option_index,
                    explanation=question.explanation,
                ))
                count += 1
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error storing questions: {e}")
            raise PersistenceError("Failed to store questions") from e
        return count

    def _to_questions(self, rows) -> List[Question]:
        questions = []
        for row in rows:
            try:
                questions.append(Question.model_validate(row))
            except PydanticValidationError as e:
                logger.warning(f"Skipping malformed question {row.id}: {e}")
        return questions
