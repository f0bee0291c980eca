"""
DogAdopt Backend — Dog SQLAlchemy Model
=========================================

What:  ORM model representing the `dogs` table.
How:   Inherits from DeclarativeBase; Alembic reads this for migrations.
Who:   Read and written exclusively through DogRepository.

Table Design:
    - owner_id: set at creation, never updated
    - status / adopted_by_id / adopted_at: change together, exactly once,
      through DogRepository.mark_adopted (a conditional UPDATE)
    - CHECK constraints restate the adoption invariants so that even a
      hand-written SQL statement cannot leave a half-adopted row

Query Patterns:
    - Dogs I registered:  WHERE owner_id = ? [AND status = ?] ORDER BY created_at DESC
      → idx_dogs_owner_status
    - Dogs I adopted:     WHERE adopted_by_id = ? AND status = 'adopted' ORDER BY adopted_at DESC
      → idx_dogs_adopted_by
    - Public listing:     WHERE adopted_by_id IS [NOT] NULL ORDER BY created_at DESC
      → idx_dogs_created_at
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.adoption import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    THANK_YOU_MAX_LENGTH,
    DogRecord,
    DogStatus,
)
from app.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Dog(Base):
    """A dog listed for adoption by its owner."""

    __tablename__ = "dogs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    # 'available' → 'adopted'
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DogStatus.AVAILABLE.value,
    )

    adopted_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=True,
        default=None,
    )
    adopted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
    thank_you_message: Mapped[str] = mapped_column(
        String(THANK_YOU_MAX_LENGTH),
        nullable=False,
        default="",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Display-only joins; always loaded explicitly by the repository
    owner: Mapped[User] = relationship(User, foreign_keys=[owner_id], lazy="raise")
    adopted_by: Mapped[Optional[User]] = relationship(
        User, foreign_keys=[adopted_by_id], lazy="raise"
    )

    __table_args__ = (
        CheckConstraint(
            "(status = 'available' AND adopted_by_id IS NULL AND adopted_at IS NULL) OR "
            "(status = 'adopted' AND adopted_by_id IS NOT NULL AND adopted_at IS NOT NULL)",
            name="ck_dogs_adoption_consistent",
        ),
        CheckConstraint(
            "adopted_by_id IS NULL OR adopted_by_id <> owner_id",
            name="ck_dogs_no_self_adoption",
        ),
        Index("idx_dogs_owner_status", "owner_id", "status"),
        Index("idx_dogs_adopted_by", "adopted_by_id"),
        Index("idx_dogs_status", "status"),
        Index("idx_dogs_created_at", "created_at"),
    )

    def to_record(self) -> DogRecord:
        """Snapshot for the pure adoption rules."""
        return DogRecord(
            id=self.id,
            name=self.name,
            description=self.description,
            owner_id=self.owner_id,
            status=DogStatus(self.status),
            adopter_id=self.adopted_by_id,
            adopted_at=self.adopted_at,
            thank_you_message=self.thank_you_message or "",
        )

    def __repr__(self) -> str:
        return f"<Dog(id={self.id}, name='{self.name}', status='{self.status}')>"
