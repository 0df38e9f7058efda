from __future__ import annotations

from enum import Enum


class SessionStatus(str, Enum):
    """Lifecycle state of an attendance session."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ScanOutcome(str, Enum):
    """What a single scan ended up doing."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    FAILED = "FAILED"


class CheckInMethod(str, Enum):
    QR_SCAN = "QR_SCAN"
