"""
Pydantic schemas for account record management.
"""
from pydantic import BaseModel


class AccountRecordsDeleted(BaseModel):
    """Counts of rows removed by an account reset."""

    answer_events: int
    statistics: int
    assessment_results: int
    abandoned_sessions: int
