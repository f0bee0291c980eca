"""
DogAdopt Backend — Token Service
==================================

What:  Issues and verifies the bearer tokens returned by register/login.
How:   PyJWT, HMAC-signed (HS256 by default). Payload: {id, username, iat, exp}.
       Tokens expire `jwt_expiration_hours` after issuance (24 by default);
       there is no refresh, an expired token means logging in again.

Verification failures are split so clients can react differently:
    ExpiredSignatureError            → AuthFailure.TOKEN_EXPIRED
    any other InvalidTokenError,
    or claims that are missing/bad   → AuthFailure.TOKEN_INVALID
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from app.config import Settings
from app.exceptions import AuthenticationError, AuthFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    user_id: UUID
    username: str
    expires_at: datetime


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", expiration_hours: int = 24):
        self.secret = secret
        self.algorithm = algorithm
        self.expiration_hours = expiration_hours

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_hours=settings.jwt_expiration_hours,
        )

    def issue(self, user_id: UUID, username: str) -> str:
        """Create a signed token for the given user."""
        now = datetime.now(timezone.utc)
        payload = {
            "id": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + timedelta(hours=self.expiration_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            AuthenticationError(TOKEN_EXPIRED): signature fine, `exp` in the past
            AuthenticationError(TOKEN_INVALID): anything else wrong with it
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError(AuthFailure.TOKEN_EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.info("Rejected token: %s", type(e).__name__)
            raise AuthenticationError(AuthFailure.TOKEN_INVALID)

        try:
            user_id = UUID(str(payload["id"]))
        except ValueError:
            raise AuthenticationError(AuthFailure.TOKEN_INVALID)

        return TokenClaims(
            user_id=user_id,
            username=str(payload.get("username", "")),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
