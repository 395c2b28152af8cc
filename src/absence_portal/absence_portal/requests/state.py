"""Approval state machine for absence requests.

``pending -> approved`` and ``pending -> rejected`` hand back a :class:`StatusUndo` carrying
the prior status. Reverting consumes the token, so only one level of undo exists until the
next forward transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError

FORWARD_TARGETS = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


@dataclass(frozen=True)
class StatusUndo:
    previous: RequestStatus


@dataclass(frozen=True)
class StatusChange:
    status: RequestStatus
    undo: Optional[StatusUndo]


def decide(current: RequestStatus, target: RequestStatus) -> StatusChange:
    if target not in FORWARD_TARGETS:
        raise ValidationError(f"Cannot move a request to {target.value}")
    if current != RequestStatus.PENDING:
        raise ValidationError("Request has already been processed")
    return StatusChange(status=target, undo=StatusUndo(previous=current))


def revert(current: RequestStatus, undo: Optional[StatusUndo]) -> StatusChange:
    if undo is None or current == RequestStatus.PENDING:
        raise ValidationError("Nothing to undo")
    return StatusChange(status=undo.previous, undo=None)
