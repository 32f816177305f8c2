"""Delete User workflow - ordering, authorization guards, persistence, cancellation.

Tests cover:
    - Each failing step stops the workflow (later collaborators never called)
    - Forbidden / NotAuthorized / self-removal guards and their field tags
    - Closed room and missing member surfaced from the aggregate
    - Persistence rejection rewrapped as BadRequest with empty field tag
    - Cancellation never yields Success and never reaches update()
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, RoomId, UserId,
)
from roomkeeper.core.result import Failure, Rejected, Success
from roomkeeper.core.room import Room
from roomkeeper.services.delete_user import DeleteUserHandler, DeleteUserRequest
from tests.services.fakes import FakeRoomRepository, FakeUserLookup, make_user

ADMIN = make_user(1, room_id=1, is_admin=True, code="c1")
GUEST = make_user(2, room_id=1, code="c2")


def _open_room(*users, room_id: int = 1) -> Room:
    return Room(id=RoomId(room_id), users=tuple(users))


def _closed_room(*users) -> Room:
    return Room(
        id=RoomId(1), users=tuple(users),
        closed_on=datetime.now(timezone.utc) - timedelta(days=1),
    )


def _build(users, rooms, update_result=None):
    log: list = []
    user_lookup = FakeUserLookup(users, log)
    room_repo = FakeRoomRepository(rooms, log, update_result)
    return DeleteUserHandler(room_repo, user_lookup), user_lookup, room_repo, log


def _request(code: str, user_id: int) -> DeleteUserRequest:
    return DeleteUserRequest(AuthCode(code), UserId(user_id))


def _called(log) -> list[str]:
    return [entry[0] for entry in log]


# --- Step 1: resolve target ---------------------------------------------------

async def test_unknown_target_returns_not_found_on_id():
    handler, _, _, log = _build([ADMIN], [_open_room(ADMIN)])
    result = await handler.handle(_request("c1", 2))
    assert isinstance(result, Failure)
    assert result.kind == FailureKind.NOT_FOUND
    assert result.fields == ["id"]
    assert _called(log) == ["get_by_id"]


# --- Step 2: resolve actor ----------------------------------------------------

async def test_unknown_actor_returns_not_found_on_user_code():
    handler, _, _, log = _build([GUEST], [_open_room(GUEST)])
    result = await handler.handle(_request("c1", 2))
    assert result.kind == FailureKind.NOT_FOUND
    assert result.fields == ["userCode"]
    assert _called(log) == ["get_by_id", "get_by_code"]


async def test_lookups_force_fresh_reads():
    handler, _, _, log = _build([ADMIN, GUEST], [_open_room(ADMIN, GUEST)])
    await handler.handle(_request("c1", 2))
    assert ("get_by_id", 2, True) in log
    assert ("get_by_code", "c1", True) in log


# --- Step 3: admin check ------------------------------------------------------

async def test_non_admin_actor_is_forbidden():
    actor = make_user(3, room_id=1, code="c3")
    handler, _, _, log = _build([actor, GUEST], [_open_room(actor, GUEST)])
    result = await handler.handle(_request("c3", 2))
    assert result.kind == FailureKind.FORBIDDEN
    assert result.fields == ["userCode"]
    assert "admin" in result.errors[0].message
    assert "get_by_user_code" not in _called(log)


# --- Step 4: same room --------------------------------------------------------

async def test_actor_in_other_room_is_not_authorized():
    actor = make_user(5, room_id=2, is_admin=True, code="c5")
    target = make_user(6, room_id=1, code="c6")
    handler, _, _, log = _build(
        [actor, target], [_open_room(actor, room_id=2), _open_room(target)],
    )
    result = await handler.handle(_request("c5", 6))
    assert result.kind == FailureKind.NOT_AUTHORIZED
    assert result.fields == ["id"]
    assert _called(log) == ["get_by_id", "get_by_code"]


@pytest.mark.parametrize("target_id", [1, 2])
async def test_cross_room_guard_applies_even_to_admin_targets(target_id):
    actor = make_user(9, room_id=7, is_admin=True, code="c9")
    target = make_user(target_id, room_id=1, is_admin=True)
    handler, _, _, _ = _build([actor, target], [])
    result = await handler.handle(_request("c9", target_id))
    assert result.kind == FailureKind.NOT_AUTHORIZED


# --- Step 5: self-removal -----------------------------------------------------

async def test_admin_cannot_remove_itself():
    handler, _, room_repo, log = _build([ADMIN], [_open_room(ADMIN)])
    result = await handler.handle(_request("c1", 1))
    assert result.kind == FailureKind.BAD_REQUEST
    assert result.fields == ["id"]
    assert room_repo.saved == []
    assert _called(log) == ["get_by_id", "get_by_code"]


# --- Step 6: resolve room -----------------------------------------------------

async def test_room_lookup_failure_propagates_unchanged():
    handler, _, _, log = _build([ADMIN, GUEST], [])
    result = await handler.handle(_request("c1", 2))
    assert result == Failure.of(FailureKind.NOT_FOUND, FieldTag.USER_CODE, "")
    assert "update" not in _called(log)


# --- Step 7: aggregate mutation -----------------------------------------------

async def test_closed_room_returns_bad_request_on_closed_on():
    handler, _, room_repo, log = _build(
        [ADMIN, GUEST], [_closed_room(ADMIN, GUEST)],
    )
    result = await handler.handle(_request("c1", 2))
    assert result.kind == FailureKind.BAD_REQUEST
    assert result.fields == ["room.ClosedOn"]
    assert "update" not in _called(log)
    assert room_repo.saved == []


async def test_target_missing_from_room_members_returns_not_found():
    # Lookup still resolves the user, but the room no longer lists them
    handler, _, _, log = _build([ADMIN, GUEST], [_open_room(ADMIN)])
    result = await handler.handle(_request("c1", 2))
    assert result.kind == FailureKind.NOT_FOUND
    assert result.fields == ["id"]
    assert "update" not in _called(log)


# --- Step 8: persistence ------------------------------------------------------

async def test_persistence_rejection_becomes_bad_request_with_reason():
    handler, _, _, _ = _build(
        [ADMIN, GUEST], [_open_room(ADMIN, GUEST)],
        update_result=Rejected("Room was modified by another request."),
    )
    result = await handler.handle(_request("c1", 2))
    assert result.kind == FailureKind.BAD_REQUEST
    assert result.errors[0].field == ""
    assert result.errors[0].message == "Room was modified by another request."


# --- Step 9: success ----------------------------------------------------------

async def test_admin_removes_participant():
    handler, _, room_repo, log = _build(
        [ADMIN, GUEST], [_open_room(ADMIN, GUEST)],
    )
    result = await handler.handle(_request("c1", 2))
    assert result == Success()
    assert _called(log) == [
        "get_by_id", "get_by_code", "get_by_user_code", "update",
    ]
    assert [u.id for u in room_repo.saved[0].users] == [1]


async def test_repeated_refused_calls_are_identical_and_write_nothing():
    actor = make_user(3, room_id=1, code="c3")
    handler, _, room_repo, _ = _build([actor, GUEST], [_open_room(actor, GUEST)])
    first = await handler.handle(_request("c3", 2))
    second = await handler.handle(_request("c3", 2))
    assert first == second
    assert room_repo.saved == []


# --- Cancellation -------------------------------------------------------------

async def test_cancel_during_lookup_never_reaches_persistence():
    handler, user_lookup, room_repo, log = _build(
        [ADMIN, GUEST], [_open_room(ADMIN, GUEST)],
    )
    user_lookup.gate = asyncio.Event()
    task = asyncio.create_task(handler.handle(_request("c1", 2)))
    await user_lookup.entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert "update" not in _called(log)
    assert room_repo.saved == []


async def test_cancel_during_update_does_not_report_success():
    handler, _, room_repo, _ = _build([ADMIN, GUEST], [_open_room(ADMIN, GUEST)])
    room_repo.gate = asyncio.Event()
    task = asyncio.create_task(handler.handle(_request("c1", 2)))
    await room_repo.entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert room_repo.saved == []
