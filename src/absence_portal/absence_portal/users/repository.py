from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import UserProfile


class UserRepository(Protocol):
    """Repository interface for user profiles.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save(self, profile: UserProfile) -> None:
        """Create or replace the profile keyed by uid."""

        raise NotImplementedError

    def update_faculty(self, uid: str, *, display_name: str, faculty_id: str) -> bool:
        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[UserProfile]:
        raise NotImplementedError
