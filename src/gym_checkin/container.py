from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceSessionRepository
from .attendance.repository import AttendanceSessionRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_HISTORY_LIMIT
from .database.connection import DatabaseConnection, DBConfig
from .gyms.mysql_gym_repository import MySQLGymRepository
from .gyms.repository import GymRepository


@dataclass(frozen=True)
class Container:
    sessions_repo: AttendanceSessionRepository
    gyms_repo: GymRepository

    attendance_service: AttendanceService


def build_service_container(
    *,
    sessions_repo: AttendanceSessionRepository,
    gyms_repo: GymRepository,
    require_active_gym: bool = False,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    attendance_service = AttendanceService(
        sessions_repo,
        gyms_repo,
        require_active_gym=require_active_gym,
        history_limit=history_limit,
    )
    return Container(
        sessions_repo=sessions_repo,
        gyms_repo=gyms_repo,
        attendance_service=attendance_service,
    )


def build_container(
    *,
    db_config: dict,
    require_active_gym: bool = False,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_service_container(
        sessions_repo=MySQLAttendanceSessionRepository(conn),
        gyms_repo=MySQLGymRepository(conn),
        require_active_gym=require_active_gym,
        history_limit=history_limit,
    )
