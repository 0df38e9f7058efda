from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import pytest

from gym_checkin.attendance.model import ClosedSession, OpenSession, SessionDraft
from gym_checkin.attendance.service import AttendanceService
from gym_checkin.core.exceptions import DuplicateOpenSession
from gym_checkin.gyms.model import Gym


class InMemorySessions:
    """Session store fake with the same guarantees as the MySQL adapter.

    One OPEN row per (member, gym) and a conditional close, both under a lock.
    ``pause_reads(n)`` makes the next n ``find_open`` calls wait on a barrier
    after reading, so tests can force concurrent scans onto the same snapshot.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[str, object] = {}
        self._id = 0
        self._barrier: Optional[threading.Barrier] = None
        self._paused_reads = 0

    def pause_reads(self, parties: int) -> None:
        self._barrier = threading.Barrier(parties, timeout=5)
        self._paused_reads = parties

    def find_open(self, member_id: str, gym_id: str, *, limit: int = 2):
        with self._lock:
            rows = [
                r for r in self._rows.values()
                if isinstance(r, OpenSession) and r.member_id == member_id and r.gym_id == gym_id
            ]
            rows.sort(key=lambda r: (r.check_in_time, int(r.session_id)), reverse=True)
            wait = self._paused_reads > 0
            if wait:
                self._paused_reads -= 1
        if wait:
            self._barrier.wait()
        return rows[:limit]

    def insert_open(self, draft: SessionDraft) -> str:
        with self._lock:
            for r in self._rows.values():
                if isinstance(r, OpenSession) and r.member_id == draft.member_id and r.gym_id == draft.gym_id:
                    raise DuplicateOpenSession("open session exists")
            return self._add(draft)

    def force_insert_open(self, draft: SessionDraft) -> str:
        """Skip the uniqueness check to simulate corrupted data."""
        with self._lock:
            return self._add(draft)

    def _add(self, draft: SessionDraft) -> str:
        self._id += 1
        session_id = str(self._id)
        self._rows[session_id] = OpenSession(
            session_id=session_id,
            member_id=draft.member_id,
            gym_id=draft.gym_id,
            check_in_time=draft.check_in_time,
            date_key=draft.date_key,
            method=draft.method,
        )
        return session_id

    def close_if_open(self, session_id: str, *, check_out_time: datetime, duration_minutes: int) -> bool:
        with self._lock:
            r = self._rows.get(session_id)
            if not isinstance(r, OpenSession):
                return False
            self._rows[session_id] = ClosedSession(
                session_id=r.session_id,
                member_id=r.member_id,
                gym_id=r.gym_id,
                check_in_time=r.check_in_time,
                check_out_time=check_out_time,
                duration_minutes=duration_minutes,
                date_key=r.date_key,
                method=r.method,
            )
            return True

    def list_for_member(self, member_id: str, limit: int):
        with self._lock:
            items = [r for r in self._rows.values() if r.member_id == member_id]
        items.sort(key=lambda r: (r.check_in_time, int(r.session_id)), reverse=True)
        return items[:limit]

    def get(self, session_id: str):
        return self._rows.get(session_id)

    def all(self):
        return list(self._rows.values())


@dataclass
class InMemoryGyms:
    gyms: dict[str, Gym]

    def get_by_id(self, gym_id: str) -> Optional[Gym]:
        return self.gyms.get(gym_id)


@pytest.fixture
def sessions() -> InMemorySessions:
    return InMemorySessions()


@pytest.fixture
def gyms() -> InMemoryGyms:
    return InMemoryGyms({
        "g1": Gym(gym_id="g1", name="Downtown", is_active=True),
        "g-closed": Gym(gym_id="g-closed", name="Old Town", is_active=False),
    })


@pytest.fixture
def service(sessions, gyms) -> AttendanceService:
    return AttendanceService(sessions, gyms)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 10, 0, 0, tzinfo=timezone.utc)
