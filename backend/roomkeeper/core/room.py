"""Room Aggregate - members, closure state, and the remove-member mutation.

Invariants:
    - Every member's room_id equals the owning Room's id
    - A closed room (closed_on set) is never mutated: membership is frozen
    - remove_user is pure: returns a new Room, never touches persistence
    - removed_user_ids lists exactly the members dropped since the room was
      loaded; persistence deletes those and nothing else
    - version is carried unchanged; only persistence advances it

Design Decisions:
    - Members held in a tuple on a frozen dataclass: removal is a value-level
      filter, no back-references to maintain
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, RoomId, UserId,
)
from roomkeeper.core.result import Failure, Success


@dataclass(frozen=True)
class User:
    """Room participant as seen by the removal workflow."""
    id: UserId
    auth_code: AuthCode
    room_id: RoomId
    is_admin: bool = False


@dataclass(frozen=True)
class Room:
    """Room aggregate root - exclusively owns its members."""
    id: RoomId
    users: tuple[User, ...] = field(default_factory=tuple)
    closed_on: datetime | None = None
    version: int = 1
    removed_user_ids: tuple[UserId, ...] = ()

    def __post_init__(self):
        strays = [u.id for u in self.users if u.room_id != self.id]
        if strays:
            raise ValueError(
                f"Users {strays} do not belong to room {self.id}",
            )

    @property
    def is_closed(self) -> bool:
        return self.closed_on is not None

    def find_user(self, user_id: UserId) -> User | None:
        return next((u for u in self.users if u.id == user_id), None)


def remove_user(room: Room, user_id: UserId) -> Success[Room] | Failure:
    """Remove a member from an open room.

    Closure is checked before membership, so a closed room always reports
    room.ClosedOn whether or not the user is a member.
    """
    if room.is_closed:
        return Failure.of(
            FailureKind.BAD_REQUEST, FieldTag.ROOM_CLOSED_ON,
            "Room is already closed.",
        )
    if room.find_user(user_id) is None:
        return Failure.of(
            FailureKind.NOT_FOUND, FieldTag.ID,
            "User with the specified Id was not found in the room.",
        )
    remaining = tuple(u for u in room.users if u.id != user_id)
    return Success(replace(
        room, users=remaining,
        removed_user_ids=room.removed_user_ids + (user_id,),
    ))
