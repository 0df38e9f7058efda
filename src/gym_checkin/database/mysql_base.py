from __future__ import annotations

import logging
from contextlib import contextmanager, suppress
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import StoreError, StoreUnavailable
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back on error.

    Connector errors are translated into StoreError subclasses, except
    IntegrityError which callers map to their own conflict types.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StoreUnavailable("Cannot connect to the database") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql_errors.IntegrityError:
        _rollback_quietly(conn)
        raise
    except (mysql_errors.InterfaceError, mysql_errors.OperationalError) as exc:
        _rollback_quietly(conn)
        raise StoreUnavailable("Database connection lost") from exc
    except mysql.connector.Error as exc:
        _rollback_quietly(conn)
        raise StoreError("Database error") from exc
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        with suppress(mysql.connector.Error):
            conn.close()


def _rollback_quietly(conn) -> None:
    # The connection may already be gone; the caller re-raises the first error.
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.debug("rollback failed", exc_info=True)


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_mysql_datetime(value: datetime) -> datetime:
    """DATETIME columns hold naive UTC values."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_mysql_datetime(value: Any) -> Optional[datetime]:
    """Normalize DATETIME values read back from the connector to aware UTC.

    mysql-connector can return DATETIME as:
    - datetime.datetime (naive)
    - string (e.g. '2024-03-01 10:00:00')
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value

    if isinstance(value, (bytes, str)):
        text = value.decode() if isinstance(value, bytes) else value
        try:
            parsed = datetime.fromisoformat(text.strip())
        except ValueError as exc:
            raise StoreError(f"Invalid DATETIME value: {text!r}") from exc
        return parsed.replace(tzinfo=timezone.utc) if parsed.tzinfo is None else parsed

    raise StoreError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
