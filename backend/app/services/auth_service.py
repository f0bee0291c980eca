"""
DogAdopt Backend — Auth Service (Identity)
============================================

What:  Registers users and authenticates them, returning a bearer token.
How:   bcrypt (cost factor from settings, minimum 10) for password hashing,
       TokenService for token issuance, UserRepository for storage.
       bcrypt runs in a worker thread so hashing never blocks the event loop.

Failure contract:
    missing username/password     → ValidationError (400)
    password too short / too long → ValidationError (400)
    username taken                → ConflictError (409)
    unknown user OR bad password  → AuthenticationError "Invalid credentials" (401)

Login compares against a dummy hash when the username does not exist, so
unknown and known usernames take the same time and return the same error.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import bcrypt

from app.config import Settings
from app.exceptions import AuthenticationError, AuthFailure, ConflictError, ValidationError
from app.models.user import User
from app.repositories.user_repository import USERNAME_TAKEN_MESSAGE, UserRepository
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

REQUIRED_MESSAGE = "Username and password are required"
# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User


class AuthService:
    """Business logic for registration and login."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        bcrypt_rounds: int = 10,
        password_min_length: int = 6,
    ):
        self.users = users
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        self.password_min_length = password_min_length
        self._dummy_hash: Optional[bytes] = None

    @classmethod
    def from_settings(
        cls, users: UserRepository, tokens: TokenService, settings: Settings
    ) -> "AuthService":
        return cls(
            users,
            tokens,
            bcrypt_rounds=settings.bcrypt_rounds,
            password_min_length=settings.password_min_length,
        )

    async def register(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Create an account and log it in.

        Raises:
            ValidationError: Missing field, or password outside length bounds
            ConflictError: Username already exists (exact, case-sensitive match)
        """
        username, password = self._require_credentials(username, password)
        if len(password) < self.password_min_length:
            raise ValidationError(
                f"Password must be at least {self.password_min_length} characters",
                field="password",
            )
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes",
                field="password",
            )

        if await self.users.get_by_username(username) is not None:
            raise ConflictError(USERNAME_TAKEN_MESSAGE, context={"field": "username"})

        password_hash = await self._hash(password)
        user = await self.users.create(username=username, password_hash=password_hash)
        logger.info("User registered: %s (%s)", user.username, user.id)
        return AuthResult(token=self.tokens.issue(user.id, user.username), user=user)

    async def authenticate(self, username: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Verify credentials and issue a token.

        Raises:
            ValidationError: Missing field
            AuthenticationError: Unknown username or wrong password (same message)
        """
        username, password = self._require_credentials(username, password)
        user = await self.users.get_by_username(username)

        if user is None:
            await self._verify(password, await self._get_dummy_hash())
            logger.info("Login failed for unknown username")
            raise AuthenticationError(AuthFailure.INVALID_CREDENTIALS)

        if not await self._verify(password, user.password_hash.encode("utf-8")):
            logger.info("Login failed for user %s", user.id)
            raise AuthenticationError(AuthFailure.INVALID_CREDENTIALS)

        logger.info("User logged in: %s", user.id)
        return AuthResult(token=self.tokens.issue(user.id, user.username), user=user)

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _require_credentials(username: Optional[str], password: Optional[str]):
        # Usernames are trimmed; passwords are taken verbatim
        username = (username or "").strip()
        if not username or not password:
            missing = [f for f, v in (("username", username), ("password", password)) if not v]
            raise ValidationError(
                REQUIRED_MESSAGE,
                errors=[{"field": f, "message": f"{f} is required"} for f in missing],
            )
        return username, password

    async def _hash(self, password: str) -> str:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password.encode("utf-8"), bcrypt.gensalt(rounds=self.bcrypt_rounds)
        )
        return hashed.decode("utf-8")

    async def _verify(self, password: str, hashed: bytes) -> bool:
        candidate = password.encode("utf-8")
        if len(candidate) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return await asyncio.to_thread(bcrypt.checkpw, candidate, hashed)

    async def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(
                bcrypt.hashpw, b"dogadopt-timing-equalizer", bcrypt.gensalt(rounds=self.bcrypt_rounds)
            )
        return self._dummy_hash
