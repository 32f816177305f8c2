"""ORM Models - SQLAlchemy declarative models for rooms and participants.

Invariants:
    - All models inherit from Base (db/base.py)
    - Room is the aggregate root; users are scoped by room_id

Design Decisions:
    - One file per entity
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from roomkeeper.models.room import RoomModel  # noqa: F401
from roomkeeper.models.user import UserModel  # noqa: F401
