from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import AttendanceSession, OpenSession, SessionDraft


class AttendanceSessionRepository(Protocol):
    def find_open(self, member_id: str, gym_id: str, *, limit: int = 2) -> Sequence[OpenSession]:
        """OPEN sessions for the pair, newest check-in first.

        More than one row means the uniqueness invariant was broken upstream.
        """

        raise NotImplementedError

    def insert_open(self, draft: SessionDraft) -> str:
        """Create an OPEN session and return its id.

        Must raise DuplicateOpenSession if the pair already has an OPEN session.
        """

        raise NotImplementedError

    def close_if_open(self, session_id: str, *, check_out_time: datetime, duration_minutes: int) -> bool:
        """Conditional update: close only if the row is still OPEN.

        Returns False when nothing was updated.
        """

        raise NotImplementedError

    def list_for_member(self, member_id: str, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError
