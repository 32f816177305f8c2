"""Room ORM - persists the Room aggregate root and its concurrency token.

Invariants:
    - closed_on NULL <=> room is open
    - version starts at 1 and is advanced only by SqlRoomRepository.update
    - users cascade with the room (delete-orphan): removing a member from
      the collection deletes its row

Design Decisions:
    - Integer surrogate ids (BigInteger on PostgreSQL, Integer on SQLite so
      autoincrement works in tests)
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roomkeeper.db.base import Base

IdType = BigInteger().with_variant(Integer(), "sqlite")


class RoomModel(Base):
    """Room aggregate root - owns its participants."""
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    closed_on: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    users: Mapped[list["UserModel"]] = relationship(
        "UserModel", back_populates="room",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="UserModel.id",
    )
