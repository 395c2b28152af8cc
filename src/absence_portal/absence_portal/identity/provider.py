from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from ..common.validators import require_email
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import WeakPassword


@dataclass(frozen=True)
class IdentitySession:
    uid: str
    email: str
    signed_in_at: datetime


class IdentityProvider(Protocol):
    """Account storage and credential checks.

    Implementations raise ``EmailAlreadyInUse``, ``InvalidEmail`` or ``WeakPassword`` from
    ``create_account`` and ``AuthenticationError`` from ``sign_in``.
    """

    def create_account(self, email: str, password: str) -> str:
        """Returns the new opaque user id."""

        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> IdentitySession:
        raise NotImplementedError

    def sign_out(self, uid: str) -> None:
        raise NotImplementedError

    def get_uid(self, email: str) -> str:
        raise NotImplementedError


def check_new_account(email: str, password: str) -> str:
    """Shared create_account rules; returns the normalized email."""
    email = require_email(email)
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPassword()
    return email
