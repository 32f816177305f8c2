"""Domain Types - verifies identity wrappers and the closed failure-kind set."""

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, RoomId, UserId,
)


def test_identity_types_wrap_primitives():
    assert UserId(7) == 7
    assert RoomId(1) == 1
    assert AuthCode("c1") == "c1"


def test_failure_kind_is_closed_set_of_four():
    assert {k.value for k in FailureKind} == {
        "NotFound", "Forbidden", "NotAuthorized", "BadRequest",
    }


def test_field_tags_match_wire_names():
    assert FieldTag.ID.value == "id"
    assert FieldTag.USER_CODE.value == "userCode"
    assert FieldTag.ROOM_CLOSED_ON.value == "room.ClosedOn"
    assert FieldTag.NONE.value == ""
