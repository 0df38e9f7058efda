from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..core.enums import CheckInMethod, ScanOutcome, SessionStatus


@dataclass(frozen=True)
class SessionDraft:
    """A session about to be opened. The store assigns the id."""

    member_id: str
    gym_id: str
    check_in_time: datetime
    date_key: str
    method: CheckInMethod = CheckInMethod.QR_SCAN


@dataclass(frozen=True)
class OpenSession:
    """Domain entity: a visit that has started and not yet ended."""

    session_id: str
    member_id: str
    gym_id: str
    check_in_time: datetime
    date_key: str
    method: CheckInMethod = CheckInMethod.QR_SCAN
    status: SessionStatus = field(default=SessionStatus.OPEN, init=False)


@dataclass(frozen=True)
class ClosedSession:
    """Domain entity: a finished visit. Terminal, never mutated again."""

    session_id: str
    member_id: str
    gym_id: str
    check_in_time: datetime
    check_out_time: datetime
    duration_minutes: int
    date_key: str
    method: CheckInMethod = CheckInMethod.QR_SCAN
    status: SessionStatus = field(default=SessionStatus.CLOSED, init=False)


AttendanceSession = Union[OpenSession, ClosedSession]


@dataclass(frozen=True)
class AttendanceOutcome:
    """Result of one scan, safe to show to the member."""

    outcome: ScanOutcome
    message: str
    session_id: Optional[str] = None
    duration_minutes: Optional[int] = None
    clock_skew: bool = False

    @property
    def success(self) -> bool:
        return self.outcome != ScanOutcome.FAILED

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "outcome": self.outcome.value,
            "message": self.message,
            "session_id": self.session_id,
        }
        if self.outcome == ScanOutcome.CHECKED_OUT:
            data["duration_minutes"] = self.duration_minutes
            data["clock_skew"] = self.clock_skew
        return data
