"""
Cancellable countdown task driving AssessmentSession.tick().
"""
import asyncio
import logging
from typing import Optional

from app.core.study.assessment import AssessmentSession
from app.schemas.assessment import AssessmentStatus

logger = logging.getLogger(__name__)


class SessionTimer:
    """
    Ticks one session every `period` seconds on the running event loop.

    cancel() may be called any number of times, including from code that runs
    inside a tick (e.g. the session's on_finish hook).
    """

    def __init__(self, session: AssessmentSession, tick_seconds: int = 1, period: float = 1.0):
        self.session = session
        self.tick_seconds = tick_seconds
        self.period = period
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Schedule the countdown. Must be called with a running event loop."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"assessment-timer-{self.session.session_id}"
        )

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is current:
            # The loop below exits on its own once the session is finished
            return
        task.cancel()
        logger.debug(f"Cancelled timer of session {self.session.session_id}")

    async def _run(self) -> None:
        while self.session.status == AssessmentStatus.IN_PROGRESS:
            await asyncio.sleep(self.period)
            self.session.tick(self.tick_seconds)
