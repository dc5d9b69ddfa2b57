from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import new_id

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

DEMO_ADMIN = {
    "name": "Admin User",
    "email": "admin@company.com",
    "password": "admin123",
    "department": "Management",
}

DEMO_EMPLOYEES = [
    {
        "name": "John Smith",
        "email": "john@company.com",
        "password": "employee123",
        "department": "Engineering",
        "position": "Frontend Developer",
        "join_date": date(2023, 1, 15),
    },
    {
        "name": "Sarah Johnson",
        "email": "sarah@company.com",
        "password": "employee123",
        "department": "Design",
        "position": "UI/UX Designer",
        "join_date": date(2023, 2, 1),
    },
    {
        "name": "Mike Wilson",
        "email": "mike@company.com",
        "password": "employee123",
        "department": "Marketing",
        "position": "Marketing Specialist",
        "join_date": date(2023, 3, 1),
    },
]


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in _iter_sql_statements(sql):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> None:
    """Create (or reset the passwords of) the demo admin and employees."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        def upsert_account(*, name: str, email: str, password: str, role: str, department: str) -> str:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT id FROM auth_users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                user_id = existing["id"]
                cur.execute(
                    "UPDATE auth_users SET password_hash=%s, email_confirmed=1, confirmation_token=NULL WHERE id=%s",
                    (password_hash, user_id),
                )
                cur.execute(
                    "UPDATE profiles SET name=%s, role=%s, department=%s WHERE user_id=%s",
                    (name, role, department, user_id),
                )
                return user_id

            user_id = new_id()
            cur.execute(
                "INSERT INTO auth_users (id, email, password_hash, email_confirmed) VALUES (%s, %s, %s, 1)",
                (user_id, email, password_hash),
            )
            cur.execute(
                "INSERT INTO profiles (user_id, name, email, role, department) VALUES (%s, %s, %s, %s, %s)",
                (user_id, name, email, role, department),
            )
            return user_id

        upsert_account(role="admin", **DEMO_ADMIN)

        for emp in DEMO_EMPLOYEES:
            user_id = upsert_account(
                name=emp["name"],
                email=emp["email"],
                password=emp["password"],
                role="employee",
                department=emp["department"],
            )
            cur.execute("SELECT id FROM employees WHERE email=%s", (emp["email"],))
            if cur.fetchone():
                cur.execute("UPDATE employees SET user_id=%s WHERE email=%s", (user_id, emp["email"]))
                continue
            cur.execute(
                """
                INSERT INTO employees (id, user_id, name, email, department, position, join_date)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                """,
                (new_id(), user_id, emp["name"], emp["email"], emp["department"], emp["position"], emp["join_date"]),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo accounts ready")


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
