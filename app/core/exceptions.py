"""
Error taxonomy for the study engine.

ValidationError and StateError are caller mistakes and are never retried.
PersistenceError means the backing store rejected a read or write.
"""
from typing import Optional


class StudyEngineError(Exception):
    """Base class for every error raised by the study engine."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StudyEngineError):
    """Malformed input (bad category, empty id, negative time, empty pool)."""


class StateError(StudyEngineError):
    """Action not valid for the current assessment session status."""


class NotFoundError(StudyEngineError):
    """Referenced question or session does not exist."""


class PersistenceError(StudyEngineError):
    """The backing store rejected a read or write."""


class StatisticsUpdateError(PersistenceError):
    """
    The answer event was stored but the user's statistics could not be updated.

    The aggregate is stale relative to the event log until the next successful
    update.
    """

    def __init__(self, message: str, event_id: Optional[int] = None):
        super().__init__(message)
        self.event_id = event_id
