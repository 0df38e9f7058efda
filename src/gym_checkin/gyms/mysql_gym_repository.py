from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Gym
from .repository import GymRepository


class MySQLGymRepository(GymRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, gym_id: str) -> Optional[Gym]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT gym_id, name, is_active FROM gyms WHERE gym_id=%s",
                (gym_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Gym(
                gym_id=str(row["gym_id"]),
                name=row["name"],
                is_active=bool(row.get("is_active", True)),
            )
