from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import as_utc, date_key, format_duration, whole_minutes_between
from ..common.validators import clamp_limit, require_non_empty
from ..core.constants import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    MSG_ALREADY_CHECKED_IN,
    MSG_CHECKED_IN,
    MSG_CHECKED_OUT,
    MSG_FAILED,
    MSG_GYM_NOT_ACCEPTING,
    OPEN_SESSION_PROBE_LIMIT,
)
from ..core.enums import CheckInMethod, ScanOutcome, SessionStatus
from ..core.exceptions import (
    ClockSkew,
    ConflictOnClose,
    DuplicateOpenSession,
    GymNotAccepting,
    StoreError,
    ValidationError,
)
from ..gyms.repository import GymRepository
from .model import AttendanceOutcome, AttendanceSession, ClosedSession, OpenSession, SessionDraft
from .repository import AttendanceSessionRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Turns a scan of a gym code into a check-in or a check-out.

    Whether a scan opens or closes a session is inferred from the store: an
    OPEN session for (member, gym) means check-out, otherwise check-in. The
    store enforces one OPEN session per pair and closes conditionally, so two
    scans racing each other cannot produce two open sessions or a double close.
    """

    def __init__(
        self,
        sessions: AttendanceSessionRepository,
        gyms: GymRepository | None = None,
        *,
        require_active_gym: bool = False,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        if require_active_gym and gyms is None:
            raise ValueError("require_active_gym needs a gym repository")
        self._sessions = sessions
        self._gyms = gyms
        self._require_active_gym = bool(require_active_gym)
        self._history_limit = int(history_limit)

    def record_scan(self, member_id: str, gym_id: str, now: datetime) -> AttendanceOutcome:
        """Apply one scan event. Never raises; failures come back as FAILED."""
        try:
            member_id = require_non_empty(member_id, "Member id")
            gym_id = require_non_empty(gym_id, "Gym code")
            now = as_utc(now)

            open_sessions = self._sessions.find_open(member_id, gym_id, limit=OPEN_SESSION_PROBE_LIMIT)
            if open_sessions:
                return self._close_session(self._current_open(open_sessions), now)
            return self._open_session(member_id, gym_id, now)
        except ValidationError as e:
            logger.info("scan rejected member=%s gym=%s: %s", member_id, gym_id, e)
            return self._failed(str(e))
        except ConflictOnClose as e:
            logger.warning("scan lost close race member=%s gym=%s: %s", member_id, gym_id, e)
            return self._failed(MSG_FAILED)
        except StoreError:
            logger.exception("store error member=%s gym=%s", member_id, gym_id)
            return self._failed(MSG_FAILED)
        except Exception:
            logger.exception("unexpected attendance error member=%s gym=%s", member_id, gym_id)
            return self._failed(MSG_FAILED)

    def _open_session(self, member_id: str, gym_id: str, now: datetime) -> AttendanceOutcome:
        if self._require_active_gym:
            self._ensure_gym_accepting(gym_id)

        draft = SessionDraft(
            member_id=member_id,
            gym_id=gym_id,
            check_in_time=now,
            date_key=date_key(now),
            method=CheckInMethod.QR_SCAN,
        )
        try:
            session_id = self._sessions.insert_open(draft)
        except DuplicateOpenSession:
            # A concurrent scan opened the session first; report its session.
            winner = self._sessions.find_open(member_id, gym_id, limit=1)
            if not winner:
                raise
            logger.info("check-in already done by concurrent scan member=%s gym=%s session=%s",
                        member_id, gym_id, winner[0].session_id)
            return AttendanceOutcome(
                outcome=ScanOutcome.CHECKED_IN,
                message=MSG_ALREADY_CHECKED_IN,
                session_id=winner[0].session_id,
            )

        logger.info("check-in member=%s gym=%s session=%s date=%s", member_id, gym_id, session_id, draft.date_key)
        return AttendanceOutcome(outcome=ScanOutcome.CHECKED_IN, message=MSG_CHECKED_IN, session_id=session_id)

    def _close_session(self, session: OpenSession, now: datetime) -> AttendanceOutcome:
        clock_skew = False
        check_out_time = now
        try:
            duration = self._duration_minutes(session.check_in_time, now)
        except ClockSkew as e:
            logger.warning("clock skew on check-out session=%s: %s", session.session_id, e)
            clock_skew = True
            duration = 0
            check_out_time = session.check_in_time

        if not self._sessions.close_if_open(
            session.session_id,
            check_out_time=check_out_time,
            duration_minutes=duration,
        ):
            raise ConflictOnClose(f"Session {session.session_id} is no longer open")

        logger.info("check-out member=%s gym=%s session=%s duration=%sm",
                    session.member_id, session.gym_id, session.session_id, duration)
        return AttendanceOutcome(
            outcome=ScanOutcome.CHECKED_OUT,
            message=MSG_CHECKED_OUT.format(duration=format_duration(duration)),
            session_id=session.session_id,
            duration_minutes=duration,
            clock_skew=clock_skew,
        )

    @staticmethod
    def _duration_minutes(check_in_time: datetime, now: datetime) -> int:
        minutes = whole_minutes_between(check_in_time, now)
        if minutes < 0:
            raise ClockSkew(f"check-out {now.isoformat()} precedes check-in {check_in_time.isoformat()}")
        return minutes

    @staticmethod
    def _current_open(open_sessions: Sequence[OpenSession]) -> OpenSession:
        # Rows come newest first; more than one OPEN row is a data-integrity fault.
        if len(open_sessions) > 1:
            logger.error(
                "data integrity fault: %d open sessions for member=%s gym=%s; closing session=%s",
                len(open_sessions),
                open_sessions[0].member_id,
                open_sessions[0].gym_id,
                open_sessions[0].session_id,
            )
        return open_sessions[0]

    def _ensure_gym_accepting(self, gym_id: str) -> None:
        gym = self._gyms.get_by_id(gym_id)
        if gym is None or not gym.is_active:
            raise GymNotAccepting(MSG_GYM_NOT_ACCEPTING)

    @staticmethod
    def _failed(message: str) -> AttendanceOutcome:
        return AttendanceOutcome(outcome=ScanOutcome.FAILED, message=message)

    def get_open_session(self, member_id: str, gym_id: str) -> Optional[OpenSession]:
        rows = self._sessions.find_open(
            require_non_empty(member_id, "Member id"),
            require_non_empty(gym_id, "Gym code"),
            limit=OPEN_SESSION_PROBE_LIMIT,
        )
        return self._current_open(rows) if rows else None

    def get_history(self, member_id: str, *, limit: int | None = None) -> Sequence[AttendanceSession]:
        member_id = require_non_empty(member_id, "Member id")
        limit = clamp_limit(limit, default=self._history_limit, maximum=MAX_HISTORY_LIMIT)
        return self._sessions.list_for_member(member_id, limit)

    def get_history_ui(self, member_id: str, *, limit: int | None = None):
        return [self._to_ui(s) for s in self.get_history(member_id, limit=limit)]

    def _to_ui(self, s: AttendanceSession) -> dict:
        closed = isinstance(s, ClosedSession)
        return {
            "session_id": s.session_id,
            "gym_id": s.gym_id,
            "date": s.date_key,
            "check_in": s.check_in_time.strftime("%H:%M:%S"),
            "check_out": s.check_out_time.strftime("%H:%M:%S") if closed else "-",
            "duration": format_duration(s.duration_minutes) if closed else "--",
            "status": {
                SessionStatus.OPEN: "In progress",
                SessionStatus.CLOSED: "Completed",
            }[s.status],
        }
