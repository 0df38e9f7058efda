from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Sequence

from mysql.connector import errorcode
from mysql.connector import errors as mysql_errors

from ..core.enums import CheckInMethod, SessionStatus
from ..core.exceptions import DuplicateOpenSession, StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_mysql_datetime, to_mysql_datetime
from .model import AttendanceSession, ClosedSession, OpenSession, SessionDraft
from .repository import AttendanceSessionRepository

_COLUMNS = """
    session_id, member_id, gym_id, check_in_time, check_out_time,
    status, date_key, duration_minutes, method
"""


def open_key(member_id: str, gym_id: str) -> str:
    # Length prefix keeps the key unambiguous when ids contain the separator.
    return f"{len(member_id)}:{member_id}:{gym_id}"


def _to_session(r: Dict[str, Any]) -> AttendanceSession:
    try:
        status = SessionStatus(r["status"])
        common = dict(
            session_id=str(r["session_id"]),
            member_id=str(r["member_id"]),
            gym_id=str(r["gym_id"]),
            check_in_time=from_mysql_datetime(r["check_in_time"]),
            date_key=str(r["date_key"]),
            method=CheckInMethod(r.get("method") or CheckInMethod.QR_SCAN.value),
        )
        if status == SessionStatus.OPEN:
            return OpenSession(**common)
        return ClosedSession(
            check_out_time=from_mysql_datetime(r["check_out_time"]),
            duration_minutes=int(r["duration_minutes"]),
            **common,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise StoreError(f"Malformed attendance row: {r.get('session_id')!r}") from exc


class MySQLAttendanceSessionRepository(AttendanceSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_open(self, member_id: str, gym_id: str, *, limit: int = 2) -> Sequence[OpenSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE member_id=%s AND gym_id=%s AND status='OPEN'
                ORDER BY check_in_time DESC, session_id DESC
                LIMIT %s
                """,
                (member_id, gym_id, int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def insert_open(self, draft: SessionDraft) -> str:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions
                        (member_id, gym_id, check_in_time, status, date_key, method, open_key)
                    VALUES (%s, %s, %s, 'OPEN', %s, %s, %s)
                    """,
                    (
                        draft.member_id,
                        draft.gym_id,
                        to_mysql_datetime(draft.check_in_time),
                        draft.date_key,
                        draft.method.value,
                        open_key(draft.member_id, draft.gym_id),
                    ),
                )
                return str(cur.lastrowid)
        except mysql_errors.IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateOpenSession(
                    f"Open session already exists for member={draft.member_id} gym={draft.gym_id}"
                ) from exc
            raise StoreError("Attendance insert rejected") from exc

    def close_if_open(self, session_id: str, *, check_out_time: datetime, duration_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET status='CLOSED', check_out_time=%s, duration_minutes=%s, open_key=NULL
                WHERE session_id=%s AND status='OPEN'
                """,
                (to_mysql_datetime(check_out_time), int(duration_minutes), int(session_id)),
            )
            return cur.rowcount > 0

    def list_for_member(self, member_id: str, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE member_id=%s
                ORDER BY check_in_time DESC, session_id DESC
                LIMIT %s
                """,
                (member_id, int(limit)),
            )
            return [_to_session(r) for r in fetchall(cur)]
