"""
DogAdopt Backend — FastAPI Dependencies
=========================================

What:  Per-request construction of repositories and services.
How:   Long-lived collaborators (settings, TokenService, AccessGuard) are
       created once by the app factory and kept on `app.state`. Everything
       bound to a database session is built here for each request, so the
       store handle is always passed in explicitly.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_db_session
from app.domain.identity import CallerIdentity
from app.repositories.dog_repository import DogRepository
from app.repositories.user_repository import UserRepository
from app.security import AccessGuard
from app.services.adoption_service import AdoptionService
from app.services.auth_service import AuthService
from app.services.token_service import TokenService

# auto_error=False: a missing header must reach the guard, which reports it
# in the API's own 401 envelope
_bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_access_guard(request: Request) -> AccessGuard:
    return request.app.state.access_guard


def get_auth_service(
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService.from_settings(UserRepository(db), tokens, settings)


def get_adoption_service(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> AdoptionService:
    return AdoptionService.from_settings(DogRepository(db), settings)


async def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    guard: AccessGuard = Depends(get_access_guard),
    db: AsyncSession = Depends(get_db_session),
) -> CallerIdentity:
    """Resolve `Authorization: Bearer <token>` to the calling user."""
    token = credentials.credentials if credentials else None
    return await guard.resolve(token, UserRepository(db))
