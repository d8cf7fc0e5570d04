"""
In-process registry of running assessment sessions.

Owns each session's timer and the one-shot persistence of its result. All
methods run on the event loop; store calls are pushed to the thread pool.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError, PersistenceError
from app.core.study.assessment import AssessmentSession
from app.core.study.session_timer import SessionTimer
from app.db.base import SessionLocal
from app.schemas.assessment import AssessmentKind, AssessmentResult, AssessmentStatus
from app.schemas.question import Question
from app.services.result_store import AssessmentResultStore

logger = logging.getLogger(__name__)

RESULT_WRITE_ATTEMPTS = 2


def scaled_pass_cutoff(
    total_questions: int,
    cutoff: Optional[int] = None,
    full_length: Optional[int] = None
) -> int:
    """
    Pass mark for a session of total_questions.

    The configured cutoff applies to a full-length exam; shorter sessions
    need the same proportion, rounded up.
    """
    cutoff = settings.MOCK_EXAM_PASS_CUTOFF if cutoff is None else cutoff
    full_length = full_length or settings.MOCK_EXAM_QUESTION_COUNT
    if total_questions >= full_length:
        return cutoff
    return -(-total_questions * cutoff // full_length)


@dataclass
class _Entry:
    user_id: str
    session: AssessmentSession
    timer: SessionTimer
    persist_task: Optional["asyncio.Task"] = None
    forget_handle: Optional[asyncio.TimerHandle] = None


class AssessmentSessionRegistry:
    """Running sessions keyed by session id."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        tick_seconds: Optional[int] = None,
        period: float = 1.0,
        finished_retention: Optional[float] = None
    ):
        self.session_factory = session_factory
        self.tick_seconds = tick_seconds or settings.ASSESSMENT_TICK_SECONDS
        self.period = period
        self.finished_retention = (
            settings.FINISHED_SESSION_RETENTION_SECONDS if finished_retention is None else finished_retention
        )
        self._entries: Dict[str, _Entry] = {}

    async def start(
        self,
        user_id: str,
        pool: Sequence[Question],
        size: int,
        time_limit_seconds: int,
        kind: AssessmentKind = AssessmentKind.MOCK_EXAM,
        pass_cutoff: Optional[int] = None
    ) -> AssessmentSession:
        """Create, start and begin timing a new session for user_id."""
        distinct = len({q.id for q in pool})
        if pass_cutoff is None:
            pass_cutoff = scaled_pass_cutoff(min(size, distinct))

        self._drop_finished(user_id)

        session = AssessmentSession(pass_cutoff=pass_cutoff, kind=kind, on_finish=self._on_finish)
        session.start(pool, size, time_limit_seconds)

        timer = SessionTimer(session, tick_seconds=self.tick_seconds, period=self.period)
        self._entries[session.session_id] = _Entry(user_id=user_id, session=session, timer=timer)
        timer.start()
        return session

    def get(self, user_id: str, session_id: str) -> AssessmentSession:
        return self._get_entry(user_id, session_id).session

    async def finish(self, user_id: str, session_id: str) -> Tuple[AssessmentResult, Optional[int], bool]:
        """
        Finish the session (or collect the result of an expired one).

        Returns:
            Tuple of (result, result_id, persisted)
        """
        entry = self._get_entry(user_id, session_id)
        result = entry.session.finish()

        result_id: Optional[int] = None
        persisted = False
        if entry.persist_task is not None:
            result_id, persisted = await entry.persist_task

        return result, result_id, persisted

    def abandon(self, user_id: str, session_id: str) -> None:
        """Drop a session without storing anything."""
        entry = self._get_entry(user_id, session_id)
        self._release(session_id, entry)
        logger.info(f"Abandoned session {session_id} of user {user_id}")

    async def abandon_for_user(self, user_id: str) -> int:
        """
        Drop every session of user_id and wait for result writes already running.

        Once this returns, nothing of user_id is left to be stored.

        Returns:
            Number of sessions dropped
        """
        entries = [
            (session_id, entry) for session_id, entry in self._entries.items()
            if entry.user_id == user_id
        ]
        pending = []
        for session_id, entry in entries:
            self._release(session_id, entry)
            if entry.persist_task is not None and not entry.persist_task.done():
                pending.append(entry.persist_task)
        if pending:
            logger.info(f"Waiting for {len(pending)} result writes of user {user_id}")
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info(f"Abandoned {len(entries)} sessions of user {user_id}")
        return len(entries)

    def active_sessions(self) -> List[AssessmentSession]:
        return [entry.session for entry in self._entries.values()]

    async def shutdown(self) -> None:
        """Cancel every timer and wait for pending result writes."""
        pending = []
        for entry in self._entries.values():
            entry.timer.cancel()
            if entry.forget_handle is not None:
                entry.forget_handle.cancel()
            if entry.persist_task is not None and not entry.persist_task.done():
                pending.append(entry.persist_task)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info(f"Session registry shut down ({len(self._entries)} sessions dropped)")
        self._entries.clear()

    # ============= Helpers =============

    def _get_entry(self, user_id: str, session_id: str) -> _Entry:
        entry = self._entries.get(session_id)
        if entry is None or entry.user_id != user_id:
            raise NotFoundError(f"Assessment session {session_id} not found")
        return entry

    def _drop_finished(self, user_id: str) -> None:
        """Forget finished sessions of user_id whose result write has completed."""
        for session_id, entry in list(self._entries.items()):
            if entry.user_id != user_id or entry.session.status != AssessmentStatus.FINISHED:
                continue
            if entry.persist_task is None or entry.persist_task.done():
                self._release(session_id, entry)

    def _release(self, session_id: str, entry: _Entry) -> None:
        entry.timer.cancel()
        if entry.forget_handle is not None:
            entry.forget_handle.cancel()
        if self._entries.get(session_id) is entry:
            del self._entries[session_id]

    def _on_finish(self, session: AssessmentSession, result: AssessmentResult) -> None:
        entry = self._entries.get(session.session_id)
        if entry is None:
            return
        entry.timer.cancel()
        entry.persist_task = asyncio.get_running_loop().create_task(
            self._persist(entry.user_id, result)
        )
        entry.persist_task.add_done_callback(
            lambda task: self._schedule_forget(session.session_id, entry)
        )

    def _schedule_forget(self, session_id: str, entry: _Entry) -> None:
        """Keep a finished session for repeated finish calls, then drop it."""
        if self._entries.get(session_id) is not entry:
            return
        entry.forget_handle = asyncio.get_running_loop().call_later(
            self.finished_retention, self._forget, session_id, entry
        )

    def _forget(self, session_id: str, entry: _Entry) -> None:
        entry.forget_handle = None
        if self._entries.get(session_id) is entry:
            del self._entries[session_id]
            logger.info(f"Released finished session {session_id} of user {entry.user_id}")

    async def _persist(self, user_id: str, result: AssessmentResult) -> Tuple[Optional[int], bool]:
        for attempt in range(1, RESULT_WRITE_ATTEMPTS + 1):
            try:
                result_id = await run_in_threadpool(self._save_result, user_id, result)
                logger.info(f"Stored result {result_id} of session {result.session_id}")
                return result_id, True
            except PersistenceError as e:
                logger.warning(
                    f"Storing result of session {result.session_id} failed "
                    f"(attempt {attempt}/{RESULT_WRITE_ATTEMPTS}): {e.message}"
                )
        logger.error(f"Result of session {result.session_id} was not stored")
        return None, False

    def _save_result(self, user_id: str, result: AssessmentResult) -> int:
        db = self.session_factory()
        try:
            return AssessmentResultStore(db).save(user_id, result)
        finally:
            db.close()


session_registry = AssessmentSessionRegistry()
