"""Persistence for User rows."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError
from app.models.user import User
from app.repositories.base import store_errors

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username already exists"


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        with store_errors("get_user", user_id=str(user_id)):
            return await self.session.get(User, user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        with store_errors("get_user_by_username"):
            result = await self.session.execute(
                select(User).where(User.username == username)
            )
            return result.scalar_one_or_none()

    async def create(self, username: str, password_hash: str) -> User:
        """
        Insert a user and flush so the id is assigned.

        A concurrent registration of the same name trips the unique index;
        that surfaces as ConflictError, same as the service's pre-check.
        The request's unit of work then rolls the session back.
        """
        user = User(username=username, password_hash=password_hash)
        with store_errors("create_user"):
            try:
                self.session.add(user)
                await self.session.flush()
            except IntegrityError:
                logger.info("Username '%s' taken by a concurrent registration", username)
                raise ConflictError(USERNAME_TAKEN_MESSAGE, context={"field": "username"})
        return user
