from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import GatewayError, ValidationError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Driver errors are re-raised as domain errors: unique-key violations as
    ValidationError, everything else as GatewayError.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.warning("database connection failed: %s", e)
        raise GatewayError("Database is unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        logger.warning("integrity error: %s", e)
        raise ValidationError("Record violates a uniqueness or required-field constraint") from e
    except mysql.connector.Error as e:
        conn.rollback()
        logger.warning("database call failed: %s", e)
        raise GatewayError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def new_id() -> str:
    """Row ids are UUID strings assigned at the gateway boundary."""
    return str(uuid.uuid4())
