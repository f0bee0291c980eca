"""
DogAdopt Backend — Dog Repository
===================================

What:  All reads and writes of the `dogs` table.
How:   Every read joins the owner and adopter users so responses can show
       usernames. Adoption and removal are single conditional statements:

           UPDATE dogs SET status='adopted', adopted_by_id=:adopter, ...
            WHERE id=:id AND status='available' AND owner_id <> :adopter

           DELETE FROM dogs
            WHERE id=:id AND owner_id=:caller AND status='available'

       Each returns whether a row changed. Two simultaneous adoptions of
       the same dog therefore cannot both succeed: the database applies one
       UPDATE, the other matches zero rows and the service reports a conflict.
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.domain.adoption import DogStatus
from app.domain.pagination import PageRequest
from app.exceptions import DatabaseError
from app.models.dog import Dog
from app.repositories.base import store_errors

logger = logging.getLogger(__name__)


def _with_people(stmt):
    return stmt.options(joinedload(Dog.owner), joinedload(Dog.adopted_by))


class DogRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, dog_id: UUID) -> Optional[Dog]:
        """Fetch a dog with owner and adopter loaded, bypassing stale identity-map state."""
        with store_errors("get_dog", dog_id=str(dog_id)):
            result = await self.session.execute(
                _with_people(select(Dog).where(Dog.id == dog_id)).execution_options(
                    populate_existing=True
                )
            )
            return result.unique().scalar_one_or_none()

    async def create(self, name: str, description: str, owner_id: UUID) -> Dog:
        dog = Dog(
            name=name,
            description=description,
            owner_id=owner_id,
            status=DogStatus.AVAILABLE.value,
            thank_you_message="",
        )
        with store_errors("create_dog", owner_id=str(owner_id)):
            self.session.add(dog)
            await self.session.flush()
        created = await self.get(dog.id)
        if created is None:
            raise DatabaseError(context={"operation": "create_dog", "dog_id": str(dog.id)})
        return created

    async def mark_adopted(
        self,
        dog_id: UUID,
        adopter_id: UUID,
        adopted_at: datetime,
        thank_you_message: str,
    ) -> bool:
        """
        Compare-and-swap available → adopted.

        Returns False when no row matched: the dog vanished, was adopted
        first by someone else, or belongs to `adopter_id`.
        """
        stmt = (
            update(Dog)
            .where(
                Dog.id == dog_id,
                Dog.status == DogStatus.AVAILABLE.value,
                Dog.owner_id != adopter_id,
            )
            .values(
                status=DogStatus.ADOPTED.value,
                adopted_by_id=adopter_id,
                adopted_at=adopted_at,
                thank_you_message=thank_you_message,
                updated_at=adopted_at,
            )
            .execution_options(synchronize_session=False)
        )
        with store_errors("adopt_dog", dog_id=str(dog_id)):
            result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def delete_available(self, dog_id: UUID, owner_id: UUID) -> bool:
        """Delete the dog only if `owner_id` owns it and it is still available."""
        stmt = (
            delete(Dog)
            .where(
                Dog.id == dog_id,
                Dog.owner_id == owner_id,
                Dog.status == DogStatus.AVAILABLE.value,
            )
            .execution_options(synchronize_session=False)
        )
        with store_errors("delete_dog", dog_id=str(dog_id)):
            result = await self.session.execute(stmt)
        return result.rowcount == 1

    # ── Paginated scans ───────────────────────────────────────────────────

    async def list_by_owner(
        self, owner_id: UUID, status: Optional[DogStatus], page: PageRequest
    ) -> Tuple[List[Dog], int]:
        criteria = [Dog.owner_id == owner_id]
        if status is not None:
            criteria.append(Dog.status == status.value)
        return await self._page(criteria, (Dog.created_at.desc(), Dog.id.desc()), page)

    async def list_by_adopter(
        self, adopter_id: UUID, page: PageRequest
    ) -> Tuple[List[Dog], int]:
        criteria = [Dog.adopted_by_id == adopter_id, Dog.status == DogStatus.ADOPTED.value]
        return await self._page(criteria, (Dog.adopted_at.desc(), Dog.id.desc()), page)

    async def list_all(
        self, status: Optional[DogStatus], page: PageRequest
    ) -> Tuple[List[Dog], int]:
        # Public filter is derived from the adopter reference, not the status column
        criteria = []
        if status == DogStatus.AVAILABLE:
            criteria.append(Dog.adopted_by_id.is_(None))
        elif status == DogStatus.ADOPTED:
            criteria.append(Dog.adopted_by_id.is_not(None))
        return await self._page(criteria, (Dog.created_at.desc(), Dog.id.desc()), page)

    async def _page(
        self, criteria: Sequence, order_by: Sequence, page: PageRequest
    ) -> Tuple[List[Dog], int]:
        with store_errors("list_dogs", page=page.page, page_size=page.page_size):
            total = (
                await self.session.execute(
                    select(func.count()).select_from(Dog).where(*criteria)
                )
            ).scalar_one()

            # Past the end: empty page. Also keeps offset/limit within the
            # driver's integer range for arbitrarily large coordinates.
            if page.offset >= total:
                return [], total

            result = await self.session.execute(
                _with_people(select(Dog).where(*criteria))
                .order_by(*order_by)
                .offset(page.offset)
                .limit(min(page.page_size, total))
            )
            dogs = list(result.unique().scalars().all())
        return dogs, total
