from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "kindergarten_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, skips -- comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
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
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


DEMO_USERS = (
    # name, email, phone, role, password
    ("Admin User", "admin@kindergarten.com", None, "ADMIN", "admin123"),
    ("Sara Staff", "staff@kindergarten.com", None, "STAFF", "staff123"),
    ("Jane Doe", "jane.doe@example.com", "+1234567890", "PARENT", "parent123"),
    ("Peter Parker", "peter.parker@example.com", "+2233445566", "PARENT", "parent123"),
)

DEMO_CHILDREN = (
    # name, parent email, badge token
    ("John Doe", "jane.doe@example.com", "KG-DEMO-0001"),
    ("Lina Doe", "jane.doe@example.com", "KG-DEMO-0002"),
    ("Mary Jane", "peter.parker@example.com", "KG-DEMO-0003"),
)


def ensure_demo_data(db_config: dict) -> None:
    """Idempotent demo seed: admin, staff, two parents and their children."""

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        for name, email, phone, role, password in DEMO_USERS:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO users (name, email, phone_number, role, password_hash)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (name, email, phone, role, generate_password_hash(password)),
            )

        for name, parent_email, token in DEMO_CHILDREN:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (parent_email,))
            parent = cur.fetchone()
            if not parent:
                raise RuntimeError(f"Missing parent row for {parent_email}")
            cur.execute(
                """
                INSERT IGNORE INTO children (name, parent_id, qr_code, status)
                VALUES (%s, %s, %s, 'ABSENT')
                """,
                (name, int(parent["user_id"]), token),
            )

        conn.commit()
        logger.info("Demo data ready (%d users, %d children)", len(DEMO_USERS), len(DEMO_CHILDREN))
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
