"""
DogAdopt Backend — Dog Request/Response Schemas
=================================================

What:  API contract for dog listings, separate from the SQLAlchemy model.
How:   `DogResponse.from_model` flattens a Dog with its joined owner and
       adopter into the public shape; list endpoints wrap a page of them
       with `PaginationMeta`.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

from app.domain.pagination import PageInfo
from app.models.dog import Dog
from app.schemas.auth import UserPublic


class DogCreate(BaseModel):
    """Body of POST /api/dogs. Required-ness is enforced by the adoption rules."""

    name: Optional[str] = Field(default=None, examples=["Buddy"])
    description: Optional[str] = Field(
        default=None, examples=["A friendly Golden Retriever who loves playing fetch."]
    )


class AdoptRequest(BaseModel):
    """Body of PUT /api/dogs/{id}/adopt; the whole body is optional."""

    message: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("message", "thankYouMessage", "thank_you_message"),
        description="Thank-you note for the registrant (max 200 characters)",
    )


class DogResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    status: str = Field(description="available or adopted")
    owner: UserPublic
    adopted_by: Optional[UserPublic] = None
    adopted_at: Optional[datetime] = None
    thank_you_message: str = ""
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, dog: Dog) -> "DogResponse":
        return cls(
            id=dog.id,
            name=dog.name,
            description=dog.description,
            status=dog.status,
            owner=UserPublic.model_validate(dog.owner),
            adopted_by=UserPublic.model_validate(dog.adopted_by) if dog.adopted_by else None,
            adopted_at=dog.adopted_at,
            thank_you_message=dog.thank_you_message or "",
            created_at=dog.created_at,
            updated_at=dog.updated_at,
        )


class PaginationMeta(BaseModel):
    current_page: int
    page_size: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool

    @classmethod
    def from_info(cls, info: PageInfo) -> "PaginationMeta":
        return cls(
            current_page=info.current_page,
            page_size=info.page_size,
            total_pages=info.total_pages,
            total_count=info.total_count,
            has_next=info.has_next,
            has_prev=info.has_prev,
        )


class DogPage(BaseModel):
    """`data` of every list endpoint."""

    dogs: List[DogResponse]
    pagination: PaginationMeta


class DogRemoved(BaseModel):
    id: uuid.UUID
