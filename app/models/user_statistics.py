"""
Aggregate statistics models.

Counters are only ever changed with in-place increments; the streak columns
are last-write-wins.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, UniqueConstraint
from sqlalchemy.sql import func

from app.db.base import Base


class UserStats(Base):
    """Cumulative statistics of one user."""

    __tablename__ = "user_statistics"

    user_id = Column(String, primary_key=True)

    total_questions = Column(Integer, nullable=False, default=0)
    correct_answers = Column(Integer, nullable=False, default=0)
    total_study_time = Column(Integer, nullable=False, default=0)  # seconds

    study_days = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_study_date = Column(Date, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class CategoryStats(Base):
    """Per-category answer counts of one user (one row per category)."""

    __tablename__ = "category_statistics"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    category = Column(String(32), nullable=False)
    total = Column(Integer, nullable=False, default=0)
    correct = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("user_id", "category", name="uq_category_statistics_user_category"),
    )
