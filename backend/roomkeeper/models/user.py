"""User ORM - a participant row owned by exactly one room.

Invariants:
    - auth_code is unique across all users
    - room_id links to the owning room
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomkeeper.db.base import Base
from roomkeeper.models.room import IdType


class UserModel(Base):
    """Participant of a room."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    room_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("rooms.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    auth_code: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    room: Mapped["RoomModel"] = relationship(  # noqa: F821
        "RoomModel", back_populates="users",
    )
