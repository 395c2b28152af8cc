from __future__ import annotations

import logging
import uuid
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..core.exceptions import AuthenticationError, EmailAlreadyInUse
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .provider import IdentityProvider, IdentitySession, check_new_account

log = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


class MySQLIdentityProvider(IdentityProvider):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_account(self, email: str, password: str) -> str:
        email = check_new_account(email, password)
        uid = uuid.uuid4().hex

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid FROM accounts WHERE email=%s", (email,))
            if fetchone(cur):
                raise EmailAlreadyInUse()
            cur.execute(
                "INSERT INTO accounts(uid, email, password_hash) VALUES(%s,%s,%s)",
                (uid, email, generate_password_hash(password)),
            )
        log.info("account created uid=%s", uid)
        return uid

    def sign_in(self, email: str, password: str) -> IdentitySession:
        email = (email or "").strip().lower()
        now: datetime = now_local()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid, email, password_hash FROM accounts WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                raise AuthenticationError(_BAD_CREDENTIALS)

            try:
                ok = check_password_hash(row["password_hash"], password or "")
            except ValueError:
                # unknown hash method in a hand-edited row
                ok = False
            if not ok:
                raise AuthenticationError(_BAD_CREDENTIALS)

            cur.execute("UPDATE accounts SET last_sign_in_at=%s WHERE uid=%s", (now, row["uid"]))
            return IdentitySession(uid=row["uid"], email=row["email"], signed_in_at=now)

    def sign_out(self, uid: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET last_sign_out_at=%s WHERE uid=%s", (now_local(), uid))

    def get_uid(self, email: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid FROM accounts WHERE email=%s", ((email or "").strip().lower(),))
            row = fetchone(cur)
            if not row:
                raise AuthenticationError("Account not found")
            return row["uid"]
