from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus
from .model import AbsenceRequest, NewAbsenceRequest
from .state import StatusUndo


class RequestRepository(Protocol):
    def create(self, request: NewAbsenceRequest) -> int:
        """Stores a pending request. Returns request_id."""

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[AbsenceRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        student_id: Optional[str] = None,
        faculty_id: Optional[str] = None,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AbsenceRequest]:
        """Newest first. ``limit=None`` returns every match."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        request_id: int,
        expected: RequestStatus,
        status: RequestStatus,
        processed_at: Optional[datetime],
        undo: Optional[StatusUndo],
    ) -> bool:
        """Write the new status only if the stored one is still ``expected``."""

        raise NotImplementedError
