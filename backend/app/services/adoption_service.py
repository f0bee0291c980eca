"""
DogAdopt Backend — Adoption Service (Listing Lifecycle)
=========================================================

What:  Registers dogs, adopts them, removes them, and lists them.
How:   Validates input and checks transitions with the pure rules in
       app.domain.adoption, then persists through DogRepository's
       conditional writes.
Who:   Called by the /api/dogs route handlers with a CallerIdentity
       resolved by the access guard.

Adopt flow:
    ┌──────────┐   ┌──────────────┐   ┌───────────────────┐   ┌──────────┐
    │ parse id │──▶│ load + check │──▶│ conditional UPDATE │──▶│ reload   │
    └──────────┘   │ (rules)      │   │ WHERE available    │   │ + joins  │
                   └──────────────┘   └───────────────────┘   └──────────┘
    If the UPDATE matches no row another request won the race; the dog is
    reloaded and the rules re-run against the fresh state, which reports
    the conflict (or not-found if it was removed meanwhile).
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from app.config import Settings
from app.domain.adoption import (
    ALREADY_ADOPTED_MESSAGE,
    adopt,
    check_adoption,
    check_removal,
    parse_status_filter,
    validate_new_dog,
)
from app.domain.identity import CallerIdentity
from app.domain.pagination import PageInfo, page_info, page_request
from app.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from app.models.dog import Dog
from app.repositories.dog_repository import DogRepository

logger = logging.getLogger(__name__)

INVALID_ID_MESSAGE = "Invalid dog ID"


def parse_dog_id(raw: str) -> UUID:
    """Structurally validate a dog ID from the URL."""
    try:
        return UUID(str(raw))
    except (ValueError, AttributeError):
        raise ValidationError(INVALID_ID_MESSAGE, field="id", context={"dog_id": str(raw)[:64]})


class AdoptionService:
    """
    Business logic for the dog listing lifecycle.

    Responsibilities:
        - register_dog(): create an available listing owned by the caller
        - adopt_dog():    one-time available → adopted transition
        - remove_dog():   owner-only delete of an available listing
        - get_dog() / list_*(): reads with pagination metadata
    """

    def __init__(
        self,
        dogs: DogRepository,
        default_page_size: int = 10,
        max_page_size: Optional[int] = None,
    ):
        self.dogs = dogs
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    @classmethod
    def from_settings(cls, dogs: DogRepository, settings: Settings) -> "AdoptionService":
        return cls(
            dogs,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )

    # ── Transitions ───────────────────────────────────────────────────────

    async def register_dog(
        self, caller: CallerIdentity, name: Optional[str], description: Optional[str]
    ) -> Dog:
        """
        Create a listing owned by the caller, status 'available'.

        Raises:
            ValidationError: name/description missing, blank or too long
        """
        clean_name, clean_description = validate_new_dog(name, description)
        dog = await self.dogs.create(clean_name, clean_description, owner_id=caller.id)
        logger.info("Dog registered: %s '%s' by %s", dog.id, dog.name, caller.id)
        return dog

    async def adopt_dog(
        self, caller: CallerIdentity, dog_id: str, message: Optional[str] = None
    ) -> Dog:
        """
        Adopt a dog on behalf of the caller.

        Raises:
            ValidationError: malformed ID or over-long thank-you message
            NotFoundError:   no such dog
            ConflictError:   already adopted (checked before ownership)
            ForbiddenError:  caller registered this dog
        """
        dog_uuid = parse_dog_id(dog_id)
        dog = await self._load(dog_uuid)

        adopted = adopt(dog.to_record(), caller.id, message, datetime.now(timezone.utc))
        swapped = await self.dogs.mark_adopted(
            dog_uuid,
            adopter_id=caller.id,
            adopted_at=adopted.adopted_at,
            thank_you_message=adopted.thank_you_message,
        )
        if not swapped:
            # Lost a race: re-check against what is stored now
            current = await self._load(dog_uuid)
            check_adoption(current.to_record(), caller.id)
            raise ConflictError(ALREADY_ADOPTED_MESSAGE, context={"dog_id": str(dog_uuid)})

        updated = await self._load(dog_uuid)
        logger.info("Dog adopted: %s by %s", dog_uuid, caller.id)
        return updated

    async def remove_dog(self, caller: CallerIdentity, dog_id: str) -> UUID:
        """
        Permanently delete an available dog owned by the caller.

        Raises:
            ValidationError: malformed ID
            NotFoundError:   no such dog
            ForbiddenError:  caller is not the registrant, or the dog is adopted
        """
        dog_uuid = parse_dog_id(dog_id)
        dog = await self._load(dog_uuid)
        check_removal(dog.to_record(), caller.id)

        if not await self.dogs.delete_available(dog_uuid, owner_id=caller.id):
            # Adopted or removed between the read and the delete
            current = await self._load(dog_uuid)
            check_removal(current.to_record(), caller.id)
            raise DatabaseError(context={"operation": "delete_dog", "dog_id": str(dog_uuid)})

        logger.info("Dog removed: %s by %s", dog_uuid, caller.id)
        return dog_uuid

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_dog(self, dog_id: str) -> Dog:
        return await self._load(parse_dog_id(dog_id))

    async def list_registered(
        self,
        caller: CallerIdentity,
        status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Dog], PageInfo]:
        """Dogs the caller registered, newest first, optionally filtered by status."""
        status_filter = parse_status_filter(status)
        request = self._page(page, limit)
        dogs, total = await self.dogs.list_by_owner(caller.id, status_filter, request)
        return dogs, page_info(request, total)

    async def list_adopted(
        self,
        caller: CallerIdentity,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Dog], PageInfo]:
        """Dogs the caller adopted, most recently adopted first."""
        request = self._page(page, limit)
        dogs, total = await self.dogs.list_by_adopter(caller.id, request)
        return dogs, page_info(request, total)

    async def list_dogs(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Tuple[List[Dog], PageInfo]:
        """Public listing of every dog, optionally filtered by adoption state."""
        status_filter = parse_status_filter(status)
        request = self._page(page, limit)
        dogs, total = await self.dogs.list_all(status_filter, request)
        return dogs, page_info(request, total)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, dog_id: UUID) -> Dog:
        dog = await self.dogs.get(dog_id)
        if dog is None:
            raise NotFoundError(resource="dog", resource_id=str(dog_id))
        return dog

    def _page(self, page: int, limit: Optional[int]):
        return page_request(
            page,
            limit if limit is not None else self.default_page_size,
            max_page_size=self.max_page_size,
        )
