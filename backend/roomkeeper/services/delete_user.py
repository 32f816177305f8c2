"""Delete User - admin-gated removal of a participant from a Room.

Invariants:
    - Steps run strictly in order and short-circuit on the first Failure:
      resolve target -> resolve actor -> admin -> same room -> not self
      -> resolve room -> remove member -> persist
    - At most one collaborator call is outstanding at a time
    - Both user lookups use force_fresh=True
    - Lookup and aggregate failures are returned unchanged; only persistence
      rejections are rewrapped (BadRequest, empty field tag, reason verbatim)
    - Cancellation (asyncio.CancelledError) propagates; a cancelled call never
      returns Success, and nothing is persisted before update()

Design Decisions:
    - Handler holds collaborators, request is a plain value: one handler per
      request scope, created by the API dependency
"""

import logging
from dataclasses import dataclass

from roomkeeper.core.domain_types import (
    AuthCode, FailureKind, FieldTag, UserId,
)
from roomkeeper.core.repository_protocols import RoomRepository, UserLookup
from roomkeeper.core.result import Failure, Rejected, Success
from roomkeeper.core.room import remove_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteUserRequest:
    """Acting user's auth code and the id of the participant to remove."""
    user_code: AuthCode
    user_id: UserId


class DeleteUserHandler:
    """Orchestrates the removal workflow over the lookup/persistence protocols."""

    def __init__(self, rooms: RoomRepository, users: UserLookup):
        self._rooms = rooms
        self._users = users

    async def handle(self, request: DeleteUserRequest) -> Success[None] | Failure:
        target_result = await self._users.get_by_id(
            request.user_id, force_fresh=True,
        )
        if isinstance(target_result, Failure):
            return self._reject(target_result, request)
        target = target_result.value

        actor_result = await self._users.get_by_code(
            request.user_code, force_fresh=True,
        )
        if isinstance(actor_result, Failure):
            return self._reject(actor_result, request)
        actor = actor_result.value

        if not actor.is_admin:
            return self._reject(Failure.of(
                FailureKind.FORBIDDEN, FieldTag.USER_CODE,
                "Only an admin may remove participants.",
            ), request)

        if actor.room_id != target.room_id:
            return self._reject(Failure.of(
                FailureKind.NOT_AUTHORIZED, FieldTag.ID,
                "Acting user and target belong to different rooms.",
            ), request)

        if actor.id == target.id:
            return self._reject(Failure.of(
                FailureKind.BAD_REQUEST, FieldTag.ID,
                "An admin cannot remove itself.",
            ), request)

        room_result = await self._rooms.get_by_user_code(request.user_code)
        if isinstance(room_result, Failure):
            return self._reject(room_result, request)

        removal = remove_user(room_result.value, request.user_id)
        if isinstance(removal, Failure):
            return self._reject(removal, request)
        room = removal.value

        update_result = await self._rooms.update(room)
        if isinstance(update_result, Rejected):
            logger.warning(
                f"Room update rejected: {update_result.reason}",
                extra={"user_id": request.user_id, "room_id": room.id},
            )
            return Failure.of(
                FailureKind.BAD_REQUEST, FieldTag.NONE, update_result.reason,
            )

        logger.info(
            "Participant removed from room",
            extra={"user_id": request.user_id, "room_id": room.id},
        )
        return Success()

    @staticmethod
    def _reject(failure: Failure, request: DeleteUserRequest) -> Failure:
        logger.info(
            f"Participant removal refused: {failure.kind.value}",
            extra={
                "user_id": request.user_id,
                "failure_kind": failure.kind.value,
            },
        )
        return failure
