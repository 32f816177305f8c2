"""SQL Repositories - SQLAlchemy implementations of the core boundary protocols.

Invariants:
    - ORM models never cross into core: every row is mapped to a frozen
      domain value (User, Room) before being returned
    - force_fresh / room lookups use populate_existing so rows already in the
      session identity map are re-read from the database
    - update() is atomic: version bump and member deletion commit together,
      or the transaction is rolled back and Rejected is returned
    - update() deletes only room.removed_user_ids; members added by other
      requests after the room was read are never touched
    - A version mismatch is never overwritten (no last-writer-wins)

Design Decisions:
    - Compare-and-swap on rooms.version via UPDATE ... WHERE version = :v;
      rowcount 0 means another request committed first
    - Storage faults on update are reported as Rejected with a generic
      reason; the driver message goes to the log only
"""

import logging
from dataclasses import replace

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, RoomId, UserId,
)
from roomkeeper.core.result import Failure, Rejected, Success
from roomkeeper.core.room import Room, User
from roomkeeper.models.room import RoomModel
from roomkeeper.models.user import UserModel

logger = logging.getLogger(__name__)

CONCURRENT_UPDATE_REASON = "Room was modified by another request."
STORAGE_FAILURE_REASON = "Room could not be saved."


def _to_user(row: UserModel) -> User:
    return User(
        id=UserId(row.id),
        auth_code=AuthCode(row.auth_code),
        room_id=RoomId(row.room_id),
        is_admin=row.is_admin,
    )


def _to_room(row: RoomModel) -> Room:
    return Room(
        id=RoomId(row.id),
        users=tuple(_to_user(u) for u in row.users),
        closed_on=row.closed_on,
        version=row.version,
    )


class SqlUserRepository:
    """Read-only user lookups backed by the users table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_id(
        self, user_id: UserId, force_fresh: bool = False,
    ) -> Success[User] | Failure:
        row = await self._first(
            select(UserModel).where(UserModel.id == user_id), force_fresh,
        )
        if row is None:
            return Failure.of(
                FailureKind.NOT_FOUND, FieldTag.ID,
                "User with the specified Id was not found.",
            )
        return Success(_to_user(row))

    async def get_by_code(
        self, code: AuthCode, force_fresh: bool = False,
    ) -> Success[User] | Failure:
        row = await self._first(
            select(UserModel).where(UserModel.auth_code == code), force_fresh,
        )
        if row is None:
            return Failure.of(
                FailureKind.NOT_FOUND, FieldTag.USER_CODE,
                "User with the specified userCode was not found.",
            )
        return Success(_to_user(row))

    async def _first(self, query, force_fresh: bool) -> UserModel | None:
        if force_fresh:
            query = query.execution_options(populate_existing=True)
        result = await self._db.execute(query)
        return result.scalar_one_or_none()


class SqlRoomRepository:
    """Room lookup by member code, plus version-checked write-back."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_user_code(self, code: AuthCode) -> Success[Room] | Failure:
        query = (
            select(RoomModel)
            .join(UserModel, UserModel.room_id == RoomModel.id)
            .where(UserModel.auth_code == code)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            return Failure.of(
                FailureKind.NOT_FOUND, FieldTag.USER_CODE,
                "Room for the specified userCode was not found.",
            )
        return Success(_to_room(row))

    async def update(self, room: Room) -> Success[Room] | Rejected:
        """Persist closure state and membership if room.version is current."""
        try:
            swapped = await self._db.execute(
                update(RoomModel)
                .where(RoomModel.id == room.id)
                .where(RoomModel.version == room.version)
                .values(version=RoomModel.version + 1, closed_on=room.closed_on)
                .execution_options(synchronize_session=False),
            )
            if swapped.rowcount != 1:
                await self._db.rollback()
                logger.warning(
                    "Stale room version rejected",
                    extra={"room_id": room.id},
                )
                return Rejected(CONCURRENT_UPDATE_REASON)

            if room.removed_user_ids:
                deleted = await self._db.execute(
                    delete(UserModel)
                    .where(UserModel.room_id == room.id)
                    .where(UserModel.id.in_(room.removed_user_ids))
                    .execution_options(synchronize_session=False),
                )
                if deleted.rowcount != len(room.removed_user_ids):
                    await self._db.rollback()
                    logger.warning(
                        "Removed member already gone",
                        extra={"room_id": room.id},
                    )
                    return Rejected(CONCURRENT_UPDATE_REASON)
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error(
                f"Room update failed: {e}", extra={"room_id": room.id},
            )
            return Rejected(STORAGE_FAILURE_REASON)
        return Success(replace(
            room, version=room.version + 1, removed_user_ids=(),
        ))
