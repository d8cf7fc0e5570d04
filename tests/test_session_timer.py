import asyncio
import time

import pytest

from app.core.exceptions import NotFoundError
from app.core.study.assessment import AssessmentSession
from app.core.study.session_timer import SessionTimer
from app.db.base import SessionLocal
from app.schemas.assessment import AssessmentKind, AssessmentStatus
from app.services.account_service import delete_user_records
from app.services.result_store import AssessmentResultStore
from app.services.session_registry import AssessmentSessionRegistry, scaled_pass_cutoff
from tests.helpers import make_pool

PERIOD = 0.01


def test_timer_forces_finish_once():
    finished = []

    async def scenario():
        session = AssessmentSession(pass_cutoff=1, on_finish=lambda s, r: finished.append(r))
        session.start(make_pool(3), 3, time_limit_seconds=3)
        timer = SessionTimer(session, tick_seconds=1, period=PERIOD)
        timer.start()
        await asyncio.sleep(PERIOD * 30)
        return session, timer

    session, timer = asyncio.run(scenario())

    assert session.status == AssessmentStatus.FINISHED
    assert session.result.time_used_seconds == 3
    assert len(finished) == 1
    assert not timer.running


def test_cancel_stops_countdown():
    async def scenario():
        session = AssessmentSession(pass_cutoff=1)
        session.start(make_pool(3), 3, time_limit_seconds=100)
        timer = SessionTimer(session, tick_seconds=1, period=PERIOD)
        timer.start()
        await asyncio.sleep(PERIOD * 3)
        timer.cancel()
        timer.cancel()
        await asyncio.sleep(PERIOD)
        remaining = session.remaining_seconds
        await asyncio.sleep(PERIOD * 10)
        return session, timer, remaining

    session, timer, remaining = asyncio.run(scenario())

    assert not timer.running
    assert session.remaining_seconds == remaining
    assert session.status == AssessmentStatus.IN_PROGRESS


def test_cancel_from_inside_tick():
    timers = []

    def on_finish(session, result):
        timers[0].cancel()

    async def scenario():
        session = AssessmentSession(pass_cutoff=1, on_finish=on_finish)
        session.start(make_pool(2), 2, time_limit_seconds=2)
        timer = SessionTimer(session, tick_seconds=1, period=PERIOD)
        timers.append(timer)
        timer.start()
        await asyncio.sleep(PERIOD * 20)
        return session, timer

    session, timer = asyncio.run(scenario())

    assert session.status == AssessmentStatus.FINISHED
    assert not timer.running


def test_cancel_before_start_is_a_no_op():
    session = AssessmentSession(pass_cutoff=1)
    timer = SessionTimer(session)
    timer.cancel()
    assert not timer.running


@pytest.mark.parametrize("total, expected", [(50, 35), (60, 35), (10, 7), (8, 6), (2, 2), (1, 1)])
def test_scaled_pass_cutoff(total, expected):
    assert scaled_pass_cutoff(total, cutoff=35, full_length=50) == expected


def test_registry_persists_expired_session_once(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start("user-1", make_pool(4), 4, time_limit_seconds=2, pass_cutoff=1)
        session.select_answer(0, 0)
        await asyncio.sleep(PERIOD * 30)
        first = await registry.finish("user-1", session.session_id)
        second = await registry.finish("user-1", session.session_id)
        return session, first, second

    session, first, second = asyncio.run(scenario())

    result, result_id, persisted = first
    assert persisted is True
    assert result_id is not None
    assert result.score == 1
    assert result.time_used_seconds == 2
    assert second == first

    stored = AssessmentResultStore(db).list_for_user("user-1", 10)
    assert len(stored) == 1
    assert stored[0].session_id == session.session_id


def test_registry_manual_finish_cancels_timer(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start(
            "user-1", make_pool(3), 3, time_limit_seconds=1000, kind=AssessmentKind.REVIEW
        )
        result, result_id, persisted = await registry.finish("user-1", session.session_id)
        remaining = session.remaining_seconds
        await asyncio.sleep(PERIOD * 5)
        return session, result, persisted, remaining

    session, result, persisted, remaining = asyncio.run(scenario())

    assert persisted is True
    assert result.kind == AssessmentKind.REVIEW
    assert session.remaining_seconds == remaining
    # three questions scale the cutoff to ceil(3 * 35 / 50)
    assert result.pass_cutoff == 3


def test_registry_abandon_persists_nothing(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start("user-1", make_pool(3), 3, time_limit_seconds=2, pass_cutoff=1)
        registry.abandon("user-1", session.session_id)
        await asyncio.sleep(PERIOD * 20)
        return session

    session = asyncio.run(scenario())

    assert session.status == AssessmentStatus.IN_PROGRESS
    assert AssessmentResultStore(db).list_for_user("user-1", 10) == []
    with pytest.raises(NotFoundError):
        registry.get("user-1", session.session_id)


def test_registry_hides_sessions_of_other_users(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start("user-1", make_pool(3), 3, time_limit_seconds=100)
        try:
            registry.get("user-2", session.session_id)
        finally:
            await registry.shutdown()

    with pytest.raises(NotFoundError):
        asyncio.run(scenario())


def test_shutdown_cancels_timers(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start("user-1", make_pool(3), 3, time_limit_seconds=100)
        await registry.shutdown()
        remaining = session.remaining_seconds
        await asyncio.sleep(PERIOD * 5)
        return session, remaining

    session, remaining = asyncio.run(scenario())

    assert session.remaining_seconds == remaining
    assert registry.active_sessions() == []


def test_account_deletion_waits_for_running_result_write(db):
    def slow_session_factory():
        time.sleep(0.2)
        return SessionLocal()

    registry = AssessmentSessionRegistry(session_factory=slow_session_factory, period=PERIOD)

    async def scenario():
        await registry.start("user-1", make_pool(3), 3, time_limit_seconds=1, pass_cutoff=1)
        await asyncio.sleep(PERIOD * 5)
        abandoned = await registry.abandon_for_user("user-1")
        deleted = delete_user_records(db, "user-1")
        await asyncio.sleep(0.3)
        return abandoned, deleted

    abandoned, deleted = asyncio.run(scenario())

    assert abandoned == 1
    assert deleted["assessment_results"] == 1
    assert AssessmentResultStore(db).list_for_user("user-1", 10) == []
    assert registry.active_sessions() == []


def test_expired_sessions_are_released_after_retention(db):
    registry = AssessmentSessionRegistry(
        session_factory=SessionLocal, period=PERIOD, finished_retention=PERIOD
    )
    users = [f"user-{n}" for n in range(5)]

    async def scenario():
        session_ids = []
        for n, user_id in enumerate(users):
            session = await registry.start(user_id, make_pool(3), 3, time_limit_seconds=n + 1, pass_cutoff=1)
            session_ids.append(session.session_id)
        await asyncio.sleep(PERIOD * 40)
        return session_ids

    session_ids = asyncio.run(scenario())

    assert registry.active_sessions() == []
    with pytest.raises(NotFoundError):
        registry.get(users[0], session_ids[0])
    for user_id in users:
        assert len(AssessmentResultStore(db).list_for_user(user_id, 10)) == 1


def test_finished_session_is_kept_during_retention(db):
    registry = AssessmentSessionRegistry(session_factory=SessionLocal, period=PERIOD)

    async def scenario():
        session = await registry.start("user-1", make_pool(3), 3, time_limit_seconds=100, pass_cutoff=1)
        first = await registry.finish("user-1", session.session_id)
        await asyncio.sleep(PERIOD * 5)
        second = await registry.finish("user-1", session.session_id)
        await registry.shutdown()
        return first, second

    first, second = asyncio.run(scenario())

    assert second == first
