"""
DogAdopt Backend — Dog Route Handlers
=======================================

What:  The /api/dogs resource.
How:   Extract path/query/body values, resolve the caller where required,
       delegate to AdoptionService, wrap the result in the envelope.

Route Inventory:
    GET    /api/dogs                 public   list all (status, page, limit)
    POST   /api/dogs                 bearer   register a dog
    GET    /api/dogs/registered      bearer   dogs I registered (status, page, limit)
    GET    /api/dogs/adopted         bearer   dogs I adopted (page, limit)
    GET    /api/dogs/{id}            public   one dog
    PUT    /api/dogs/{id}/adopt      bearer   adopt a dog
    DELETE /api/dogs/{id}            bearer   remove my available dog

/registered and /adopted are declared before /{id} so they are not
captured as IDs.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_adoption_service, get_current_caller
from app.domain.identity import CallerIdentity
from app.domain.pagination import PageInfo
from app.models.dog import Dog
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.dog import (
    AdoptRequest,
    DogCreate,
    DogPage,
    DogRemoved,
    DogResponse,
    PaginationMeta,
)
from app.services.adoption_service import AdoptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dogs", tags=["Dogs"])

_AUTH_ERRORS = {401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}}


def _page(dogs: List[Dog], info: PageInfo) -> DogPage:
    return DogPage(
        dogs=[DogResponse.from_model(dog) for dog in dogs],
        pagination=PaginationMeta.from_info(info),
    )


@router.get(
    "",
    response_model=ApiResponse[DogPage],
    summary="List all dogs",
    description="Public listing. `status=available` (alias `registered`) or `status=adopted`.",
)
async def list_dogs(
    status: Optional[str] = Query(default=None, description="available | adopted"),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1, description="Page size (default 10)"),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogPage]:
    dogs, info = await service.list_dogs(status=status, page=page, limit=limit)
    return ApiResponse(data=_page(dogs, info))


@router.post(
    "",
    status_code=201,
    response_model=ApiResponse[DogResponse],
    responses={400: {"description": "Invalid dog fields", "model": ErrorResponse}, **_AUTH_ERRORS},
    summary="Register a dog for adoption",
)
async def register_dog(
    body: Optional[DogCreate] = None,
    caller: CallerIdentity = Depends(get_current_caller),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogResponse]:
    body = body or DogCreate()
    dog = await service.register_dog(caller, body.name, body.description)
    return ApiResponse(message="Dog registered successfully", data=DogResponse.from_model(dog))


@router.get(
    "/registered",
    response_model=ApiResponse[DogPage],
    responses=_AUTH_ERRORS,
    summary="List dogs registered by the caller",
)
async def list_registered_dogs(
    status: Optional[str] = Query(default=None, description="available | adopted"),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    caller: CallerIdentity = Depends(get_current_caller),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogPage]:
    dogs, info = await service.list_registered(caller, status=status, page=page, limit=limit)
    return ApiResponse(data=_page(dogs, info))


@router.get(
    "/adopted",
    response_model=ApiResponse[DogPage],
    responses=_AUTH_ERRORS,
    summary="List dogs adopted by the caller",
)
async def list_adopted_dogs(
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    caller: CallerIdentity = Depends(get_current_caller),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogPage]:
    dogs, info = await service.list_adopted(caller, page=page, limit=limit)
    return ApiResponse(data=_page(dogs, info))


@router.get(
    "/{dog_id}",
    response_model=ApiResponse[DogResponse],
    responses={
        400: {"description": "Invalid dog ID", "model": ErrorResponse},
        404: {"description": "Dog not found", "model": ErrorResponse},
    },
    summary="Get a single dog",
)
async def get_dog(
    dog_id: str,
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogResponse]:
    dog = await service.get_dog(dog_id)
    return ApiResponse(data=DogResponse.from_model(dog))


@router.put(
    "/{dog_id}/adopt",
    response_model=ApiResponse[DogResponse],
    responses={
        400: {"description": "Invalid dog ID or message", "model": ErrorResponse},
        403: {"description": "Cannot adopt your own dog", "model": ErrorResponse},
        404: {"description": "Dog not found", "model": ErrorResponse},
        409: {"description": "Dog already adopted", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Adopt a dog",
)
async def adopt_dog(
    dog_id: str,
    body: Optional[AdoptRequest] = None,
    caller: CallerIdentity = Depends(get_current_caller),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogResponse]:
    message = body.message if body else None
    dog = await service.adopt_dog(caller, dog_id, message)
    return ApiResponse(message="Dog adopted successfully!", data=DogResponse.from_model(dog))


@router.delete(
    "/{dog_id}",
    response_model=ApiResponse[DogRemoved],
    responses={
        400: {"description": "Invalid dog ID", "model": ErrorResponse},
        403: {"description": "Not the registrant, or dog already adopted", "model": ErrorResponse},
        404: {"description": "Dog not found", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Remove a dog you registered",
)
async def remove_dog(
    dog_id: str,
    caller: CallerIdentity = Depends(get_current_caller),
    service: AdoptionService = Depends(get_adoption_service),
) -> ApiResponse[DogRemoved]:
    removed_id = await service.remove_dog(caller, dog_id)
    return ApiResponse(message="Dog removed successfully", data=DogRemoved(id=removed_id))
