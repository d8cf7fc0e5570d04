"""
Question model - local mirror of the external question content service.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from app.db.base import Base


class Question(Base):
    """Four-option exam question."""

    __tablename__ = "questions"

    id = Column(String, primary_key=True, index=True)
    category = Column(String(32), nullable=False, index=True)
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # List of 4 option strings
    correct_option_index = Column(Integer, nullable=False)
    explanation = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
