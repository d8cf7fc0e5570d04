"""
Assessment result model - one row per finished mock exam or review session.
"""
from sqlalchemy import Column, Integer, String, Boolean, JSON, DateTime

from app.db.base import Base


class AssessmentRecord(Base):
    """Persisted outcome of a finished assessment session."""

    __tablename__ = "assessment_results"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String, unique=True, nullable=False)  # written exactly once
    user_id = Column(String, nullable=False, index=True)
    kind = Column(String(32), nullable=False, default="mock_exam")  # mock_exam, review

    score = Column(Integer, nullable=False)
    total_questions = Column(Integer, nullable=False)
    percentage = Column(Integer, nullable=False)
    pass_cutoff = Column(Integer, nullable=False)
    is_passed = Column(Boolean, nullable=False)
    time_used_seconds = Column(Integer, nullable=False)

    # Format: {"minpou": {"total": 14, "correct": 9}, ...}
    category_stats = Column(JSON, nullable=False)
    incorrect_question_ids = Column(JSON, nullable=False)

    completed_at = Column(DateTime(timezone=True), nullable=False)
