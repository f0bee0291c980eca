"""
DogAdopt Backend — Access Guard
=================================

What:  Turns an inbound bearer token into a CallerIdentity, or refuses.
How:   TokenService verifies signature and expiry. In STRICT mode the
       referenced user is then re-read from the store, so tokens of deleted
       accounts stop working immediately; LENIENT mode trusts the claims.

Outcomes:
    no token                 → 401 token_missing   "Access denied. No token provided."
    bad signature / garbage  → 401 token_invalid   "Invalid token."
    expired                  → 401 token_expired   "Token expired."
    STRICT + user gone       → 401 user_not_found  "Token invalid. User not found."
    otherwise                → CallerIdentity(id, username)
"""

import logging
from typing import Optional

from app.domain.identity import CallerIdentity
from app.exceptions import AuthenticationError, AuthFailure
from app.repositories.user_repository import UserRepository
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)


class AccessGuard:
    def __init__(self, tokens: TokenService, strict: bool = True):
        self.tokens = tokens
        self.strict = strict

    async def resolve(
        self, token: Optional[str], users: Optional[UserRepository] = None
    ) -> CallerIdentity:
        if not token:
            raise AuthenticationError(AuthFailure.TOKEN_MISSING)

        claims = self.tokens.verify(token)

        if not self.strict:
            return CallerIdentity(id=claims.user_id, username=claims.username)

        if users is None:
            raise RuntimeError("STRICT access guard needs a UserRepository")
        user = await users.get_by_id(claims.user_id)
        if user is None:
            logger.warning("Token for missing user %s rejected", claims.user_id)
            raise AuthenticationError(AuthFailure.USER_NOT_FOUND)
        return CallerIdentity(id=user.id, username=user.username)
