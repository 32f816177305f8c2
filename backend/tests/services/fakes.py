"""In-memory fakes for the core boundary protocols.

Every call is appended to a shared `log` so tests can assert which
collaborators ran and in which order.
"""

import asyncio

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, RoomId, UserId,
)
from roomkeeper.core.result import Failure, Rejected, Success
from roomkeeper.core.room import Room, User


def make_user(
    user_id: int, room_id: int = 1, is_admin: bool = False,
    code: str | None = None,
) -> User:
    return User(
        id=UserId(user_id),
        auth_code=AuthCode(code or f"code-{user_id}"),
        room_id=RoomId(room_id),
        is_admin=is_admin,
    )


class FakeUserLookup:
    def __init__(self, users, log: list):
        self._users = list(users)
        self.log = log
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()

    async def get_by_id(self, user_id, force_fresh=False):
        self.log.append(("get_by_id", user_id, force_fresh))
        await self._wait()
        for user in self._users:
            if user.id == user_id:
                return Success(user)
        return Failure.of(FailureKind.NOT_FOUND, FieldTag.ID, "")

    async def get_by_code(self, code, force_fresh=False):
        self.log.append(("get_by_code", code, force_fresh))
        await self._wait()
        for user in self._users:
            if user.auth_code == code:
                return Success(user)
        return Failure.of(FailureKind.NOT_FOUND, FieldTag.USER_CODE, "")

    async def _wait(self):
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()


class FakeRoomRepository:
    def __init__(self, rooms, log: list, update_result: Rejected | None = None):
        self._rooms = list(rooms)
        self.log = log
        self.update_result = update_result
        self.saved: list[Room] = []
        self.gate: asyncio.Event | None = None
        self.entered = asyncio.Event()

    async def get_by_user_code(self, code):
        self.log.append(("get_by_user_code", code))
        for room in self._rooms:
            if any(u.auth_code == code for u in room.users):
                return Success(room)
        return Failure.of(FailureKind.NOT_FOUND, FieldTag.USER_CODE, "")

    async def update(self, room):
        self.log.append(("update", room.id))
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.update_result is not None:
            return self.update_result
        self.saved.append(room)
        return Success(room)
