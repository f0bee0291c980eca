"""
DogAdopt Backend — User SQLAlchemy Model
==========================================

What:  ORM model representing the `users` table.
How:   Stores a unique username and a bcrypt hash. Users are never deleted
       or renamed by the API; dogs reference them as owner and adopter.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """An account that can register dogs and adopt other users' dogs."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Case-sensitive exact match; uniqueness is enforced by the index too,
    # so two racing registrations cannot both succeed
    username: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )

    # bcrypt output ($2b$...), never returned by the API
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
