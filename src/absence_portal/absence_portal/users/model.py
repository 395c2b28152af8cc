from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Domain entity: the ``users`` document of one account.

    Note: Credentials live with the identity provider, not here.
    """

    uid: str
    email: str
    display_name: str
    role: Role
    course: Optional[str] = None
    semester: Optional[str] = None
    prn: Optional[str] = None
    faculty_id: Optional[str] = None

    @property
    def approver_id(self) -> str:
        """Id requests are routed by: the faculty id, or the uid when none is set."""
        return self.faculty_id or self.uid
