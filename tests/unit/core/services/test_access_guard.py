"""Unit tests for AccessGuard (no database needed)."""

import pytest

from src.notevault.core.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from src.notevault.core.models.note import Note
from src.notevault.core.services.access_guard import AccessGuard
from src.notevault.security.password import hash_password


def _note(owner_id=1, protected=False, password="pw"):
    return Note(
        id=10,
        title="t",
        description="d",
        owner_id=owner_id,
        is_protected=protected,
        password_hash=hash_password(password) if protected else None,
    )


def test_require_note_missing():
    with pytest.raises(NotFoundError) as exc:
        AccessGuard.require_note(None)
    assert exc.value.message == "Note not found"


def test_require_owner_checks_existence_first():
    with pytest.raises(NotFoundError):
        AccessGuard.require_owner(None, caller_id=2)


def test_require_owner_rejects_other_users():
    with pytest.raises(ForbiddenError):
        AccessGuard.require_owner(_note(owner_id=1), caller_id=2)


def test_require_owner_returns_note():
    note = _note(owner_id=1)
    assert AccessGuard.require_owner(note, caller_id=1) is note


@pytest.mark.parametrize(
    "protected,caller_id,expected",
    [(False, 1, True), (False, 2, True), (True, 1, True), (True, 2, False)],
)
def test_can_read_content(protected, caller_id, expected):
    assert AccessGuard.can_read_content(_note(owner_id=1, protected=protected), caller_id) is expected


def test_require_readable_blocks_locked_note():
    with pytest.raises(ForbiddenError) as exc:
        AccessGuard.require_readable(_note(owner_id=1, protected=True), caller_id=2)
    assert "Unlock" in exc.value.message


def test_verify_unlock_order_of_checks():
    with pytest.raises(ValidationError):
        AccessGuard.verify_unlock(None, "")
    with pytest.raises(NotFoundError):
        AccessGuard.verify_unlock(None, "pw")
    with pytest.raises(ValidationError):
        AccessGuard.verify_unlock(_note(protected=False), "pw")
    with pytest.raises(UnauthorizedError):
        AccessGuard.verify_unlock(_note(protected=True, password="pw"), "wrong")


def test_verify_unlock_success():
    note = _note(protected=True, password="pw")
    assert AccessGuard.verify_unlock(note, "pw") is note
