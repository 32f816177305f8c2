"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - UserId and RoomId wrap non-negative ints; never use bare int ids in domain logic
    - FailureKind is a closed set: no other kind may be produced by core or services
    - Field tags are the wire names the API reports back to clients

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
RoomId = NewType("RoomId", int)
AuthCode = NewType("AuthCode", str)

# Largest id a signed 64-bit BIGINT column can hold
MAX_ID = 2**63 - 1


# ─── Enums ───────────────────────────────────────────────────────

class FailureKind(str, Enum):
    """Outcome kinds a removal can fail with."""
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    NOT_AUTHORIZED = "NotAuthorized"
    BAD_REQUEST = "BadRequest"


class FieldTag(str, Enum):
    """Field tags attached to failure details."""
    ID = "id"
    USER_CODE = "userCode"
    ROOM_CLOSED_ON = "room.ClosedOn"
    NONE = ""
