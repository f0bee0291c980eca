"""
DogAdopt Backend — Auth Route Handlers
========================================

What:  POST /api/auth/register and POST /api/auth/login.
How:   Thin handlers: parse the JSON body, delegate to AuthService, wrap the
       result in the success envelope. Failures are raised as application
       exceptions and rendered by the global handlers in main.py.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.dependencies import get_auth_service
from app.schemas.auth import AuthPayload, Credentials, UserPublic
from app.schemas.common import ApiResponse, ErrorResponse
from app.services.auth_service import AuthResult, AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def _payload(result: AuthResult) -> AuthPayload:
    return AuthPayload(token=result.token, user=UserPublic.model_validate(result.user))


@router.post(
    "/register",
    status_code=201,
    response_model=ApiResponse[AuthPayload],
    responses={
        400: {"description": "Missing username/password or password too short", "model": ErrorResponse},
        409: {"description": "Username already exists", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    body: Optional[Credentials] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthPayload]:
    body = body or Credentials()
    result = await auth_service.register(body.username, body.password)
    return ApiResponse(message="User registered successfully", data=_payload(result))


@router.post(
    "/login",
    response_model=ApiResponse[AuthPayload],
    responses={
        400: {"description": "Missing username or password", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Authenticate and receive a bearer token",
)
async def login(
    body: Optional[Credentials] = None,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthPayload]:
    body = body or Credentials()
    result = await auth_service.authenticate(body.username, body.password)
    return ApiResponse(message="Logged in successfully", data=_payload(result))
