from __future__ import annotations

import pytest

from src.absence_portal.absence_portal.core.enums import RequestStatus
from src.absence_portal.absence_portal.core.exceptions import ValidationError
from src.absence_portal.absence_portal.requests.state import StatusUndo, decide, revert


@pytest.mark.parametrize("target", [RequestStatus.APPROVED, RequestStatus.REJECTED])
def test_pending_request_can_be_decided(target):
    change = decide(RequestStatus.PENDING, target)

    assert change.status is target
    assert change.undo == StatusUndo(previous=RequestStatus.PENDING)


@pytest.mark.parametrize("current", [RequestStatus.APPROVED, RequestStatus.REJECTED])
def test_processed_request_cannot_be_decided_again(current):
    with pytest.raises(ValidationError, match="already been processed"):
        decide(current, RequestStatus.APPROVED)


def test_pending_is_not_a_decision():
    with pytest.raises(ValidationError):
        decide(RequestStatus.PENDING, RequestStatus.PENDING)


def test_revert_restores_previous_status_and_consumes_undo():
    change = decide(RequestStatus.PENDING, RequestStatus.APPROVED)

    reverted = revert(change.status, change.undo)

    assert reverted.status is RequestStatus.PENDING
    assert reverted.undo is None


def test_only_one_level_of_undo():
    change = decide(RequestStatus.PENDING, RequestStatus.REJECTED)
    reverted = revert(change.status, change.undo)

    with pytest.raises(ValidationError, match="Nothing to undo"):
        revert(reverted.status, reverted.undo)


def test_revert_without_token_fails():
    with pytest.raises(ValidationError, match="Nothing to undo"):
        revert(RequestStatus.APPROVED, None)


def test_reverted_request_can_be_decided_again():
    first = decide(RequestStatus.PENDING, RequestStatus.APPROVED)
    back = revert(first.status, first.undo)

    second = decide(back.status, RequestStatus.REJECTED)

    assert second.status is RequestStatus.REJECTED
