"""
Answer event model - append-only log of submitted answers.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from app.db.base import Base


class AnswerEvent(Base):
    """One learner answering one question. Never updated."""

    __tablename__ = "answer_events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    category = Column(String(32), nullable=False)
    question_id = Column(String, nullable=False)

    chosen_option = Column(Integer, nullable=False)
    correct_option = Column(Integer, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    time_spent_seconds = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_answer_events_user_recent", "user_id", "created_at"),
        Index("ix_answer_events_user_incorrect", "user_id", "is_correct", "created_at"),
    )
