"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - Lookups are read-only; RoomRepository.update is the only write

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - Async in Protocol: boundary methods are async because implementations do IO;
      the pure aggregate logic (core/room.py) never awaits
"""

from typing import Protocol

from roomkeeper.core.domain_types import AuthCode, UserId
from roomkeeper.core.result import Failure, Rejected, Success
from roomkeeper.core.room import Room, User


class UserLookup(Protocol):
    """Read-only user resolution.

    force_fresh=True requires a strongly consistent read (no cached entity).
    """
    async def get_by_id(
        self, user_id: UserId, force_fresh: bool = False,
    ) -> Success[User] | Failure: ...

    async def get_by_code(
        self, code: AuthCode, force_fresh: bool = False,
    ) -> Success[User] | Failure: ...


class RoomRepository(Protocol):
    """Room lookup plus atomic, version-checked write-back."""
    async def get_by_user_code(self, code: AuthCode) -> Success[Room] | Failure: ...

    async def update(self, room: Room) -> Success[Room] | Rejected: ...
