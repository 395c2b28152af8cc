from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from ..core.enums import Role
from ..core.exceptions import EmailAlreadyInUse
from ..identity.provider import IdentityProvider
from ..users.model import UserProfile
from ..users.repository import UserRepository
from .connection import DatabaseConnection

log = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # The configured database name wins over the one in schema.sql.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # schema.sql has no string literals containing ';'
    lines = [ln for ln in sql.splitlines() if not ln.strip().startswith("--")]
    for stmt in "\n".join(lines).split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(conn_factory: DatabaseConnection, database: str) -> None:
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, database: str, schema_path: str | Path) -> None:
    ensure_database_exists(conn_factory, database)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    log.info("schema applied from %s", schema_path)


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def ensure_admin_account(
    identity: IdentityProvider,
    users: UserRepository,
    *,
    email: str,
    password: str,
    display_name: str = "Administrator",
) -> str:
    """Create the bootstrap admin (account + profile) unless it already exists.

    Returns the admin uid.
    """
    try:
        uid = identity.create_account(email, password)
    except EmailAlreadyInUse:
        uid = identity.get_uid(email)

    if users.get_by_uid(uid) is None:
        users.save(UserProfile(uid=uid, email=email.lower(), display_name=display_name, role=Role.ADMIN))
        log.info("bootstrap admin profile created for %s", email)
    return uid
