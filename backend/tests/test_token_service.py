"""
DogAdopt Backend — Token Service Unit Tests
=============================================

What we test:
    ✅ Issued tokens verify back to the same user
    ✅ Expired tokens → token_expired
    ✅ Wrong signature, garbage, missing/bad claims → token_invalid
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from app.exceptions import AuthenticationError, AuthFailure
from app.services.token_service import TokenService

SECRET = "unit-test-secret-with-enough-length"


class TestTokenService:
    def setup_method(self):
        self.tokens = TokenService(secret=SECRET, expiration_hours=24)

    def test_issue_then_verify(self):
        user_id = uuid4()
        token = self.tokens.issue(user_id, "sarah")

        claims = self.tokens.verify(token)

        assert claims.user_id == user_id
        assert claims.username == "sarah"
        expected = datetime.now(timezone.utc) + timedelta(hours=24)
        assert abs((claims.expires_at - expected).total_seconds()) < 5

    def test_payload_carries_id_and_username(self):
        user_id = uuid4()
        payload = jwt.decode(
            self.tokens.issue(user_id, "sarah"), SECRET, algorithms=["HS256"]
        )
        assert payload["id"] == str(user_id)
        assert payload["username"] == "sarah"
        assert payload["exp"] - payload["iat"] == 24 * 3600

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"id": str(uuid4()), "username": "old", "iat": past - timedelta(hours=24), "exp": past},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.failure == AuthFailure.TOKEN_EXPIRED
        assert exc_info.value.message == "Token expired."

    def test_wrong_secret(self):
        other = TokenService(secret="another-secret-entirely-different-456")
        with pytest.raises(AuthenticationError) as exc_info:
            self.tokens.verify(other.issue(uuid4(), "mallory"))
        assert exc_info.value.failure == AuthFailure.TOKEN_INVALID
        assert exc_info.value.message == "Invalid token."

    @pytest.mark.parametrize("token", ["garbage", "a.b.c", ""])
    def test_malformed_token(self, token):
        with pytest.raises(AuthenticationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.failure == AuthFailure.TOKEN_INVALID

    def test_missing_id_claim(self):
        token = jwt.encode(
            {"username": "x", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.failure == AuthFailure.TOKEN_INVALID

    def test_non_uuid_id_claim(self):
        token = jwt.encode(
            {"id": "42", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            SECRET,
            algorithm="HS256",
        )
        with pytest.raises(AuthenticationError) as exc_info:
            self.tokens.verify(token)
        assert exc_info.value.failure == AuthFailure.TOKEN_INVALID
