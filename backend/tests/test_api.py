"""
DogAdopt Backend — API Endpoint Tests
=======================================

What:  End-to-end tests through the HTTP layer.
How:   HTTPX AsyncClient over ASGITransport against an app built on a fresh
       in-memory SQLite database (see conftest.py).

What we test:
    ✅ Register/login round trip and auth failures
    ✅ Dog lifecycle: register, adopt, remove, with every refusal
    ✅ Listings, filters and pagination metadata
    ✅ Huge page coordinates serve an empty page, not an error
    ✅ Error envelope for validation, unknown routes and rate limiting
    ✅ Security headers on every response, HSTS in production only
"""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.services.token_service import TokenService


class TestAuthEndpoints:
    @pytest.mark.asyncio
    async def test_register_then_login(self, test_client, test_settings):
        response = await test_client.post(
            "/api/auth/register", json={"username": "sarah", "password": "password123"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["data"]["user"]["username"] == "sarah"
        assert "password" not in str(body["data"]["user"])

        response = await test_client.post(
            "/api/auth/login", json={"username": "sarah", "password": "password123"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Logged in successfully"
        claims = TokenService.from_settings(test_settings).verify(body["data"]["token"])
        assert claims.username == "sarah"
        assert str(claims.user_id) == body["data"]["user"]["id"]

    @pytest.mark.asyncio
    async def test_duplicate_username(self, test_client, register_user):
        await register_user("sarah")

        response = await test_client.post(
            "/api/auth/register", json={"username": "sarah", "password": "other-pass"}
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Username already exists"

    @pytest.mark.asyncio
    async def test_missing_credentials(self, test_client):
        response = await test_client.post("/api/auth/register", json={"username": "sarah"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Username and password are required"
        assert body["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_empty_body(self, test_client):
        response = await test_client.post("/api/auth/login")
        assert response.status_code == 400
        assert response.json()["message"] == "Username and password are required"

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(self, test_client, register_user):
        await register_user("sarah")

        wrong = await test_client.post(
            "/api/auth/login", json={"username": "sarah", "password": "nope-nope"}
        )
        unknown = await test_client.post(
            "/api/auth/login", json={"username": "nobody", "password": "nope-nope"}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["message"] == unknown.json()["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestProtectedRoutes:
    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.post("/api/dogs", json={"name": "Rex", "description": "x"})

        assert response.status_code == 401
        body = response.json()
        assert body["message"] == "Access denied. No token provided."
        assert body["error"] == "token_missing"

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client):
        response = await test_client.get(
            "/api/dogs/registered", headers={"Authorization": "Bearer not.a.token"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token."

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, test_client, test_settings):
        token = TokenService.from_settings(test_settings).issue(uuid4(), "ghost")

        response = await test_client.get(
            "/api/dogs/adopted", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Token invalid. User not found."


class TestDogLifecycle:
    @pytest.mark.asyncio
    async def test_register_dog(self, test_client, register_user):
        alice = await register_user("alice")

        response = await test_client.post(
            "/api/dogs",
            json={"name": "  Buddy ", "description": " Loves fetch "},
            headers=alice["headers"],
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Dog registered successfully"
        dog = body["data"]
        assert dog["name"] == "Buddy"
        assert dog["description"] == "Loves fetch"
        assert dog["status"] == "available"
        assert dog["owner"] == {"id": alice["id"], "username": "alice"}
        assert dog["adopted_by"] is None
        assert dog["adopted_at"] is None

    @pytest.mark.asyncio
    async def test_register_dog_requires_fields(self, test_client, register_user):
        alice = await register_user("alice")

        response = await test_client.post("/api/dogs", json={}, headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["message"] == "Dog name and description are required"

    @pytest.mark.asyncio
    async def test_second_adoption_conflicts(self, test_client, register_user, create_dog):
        alice, bob, carol = [await register_user(n) for n in ("alice", "bob", "carol")]
        max_ = await create_dog(alice, "Max")

        first = await test_client.put(
            f"/api/dogs/{max_['id']}/adopt",
            json={"thankYouMessage": "Thank you!"},
            headers=bob["headers"],
        )
        assert first.status_code == 200
        adopted = first.json()
        assert adopted["message"] == "Dog adopted successfully!"
        assert adopted["data"]["status"] == "adopted"
        assert adopted["data"]["adopted_by"]["username"] == "bob"
        assert adopted["data"]["thank_you_message"] == "Thank you!"

        second = await test_client.put(
            f"/api/dogs/{max_['id']}/adopt", headers=carol["headers"]
        )
        assert second.status_code == 409
        assert second.json()["message"] == "This dog has already been adopted."

        # the owner gets the conflict too, not the self-adoption refusal
        by_owner = await test_client.put(
            f"/api/dogs/{max_['id']}/adopt", headers=alice["headers"]
        )
        assert by_owner.status_code == 409

    @pytest.mark.asyncio
    async def test_cannot_adopt_own_dog(self, test_client, register_user, create_dog):
        alice = await register_user("alice")
        dog = await create_dog(alice, "Rex")

        response = await test_client.put(f"/api/dogs/{dog['id']}/adopt", headers=alice["headers"])

        assert response.status_code == 403
        assert response.json()["message"] == "You cannot adopt your own dog."

    @pytest.mark.asyncio
    async def test_remove_then_gone(self, test_client, register_user, create_dog):
        alice = await register_user("alice")
        charlie = await create_dog(alice, "Charlie")

        response = await test_client.delete(f"/api/dogs/{charlie['id']}", headers=alice["headers"])
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Dog removed successfully"
        assert body["data"] == {"id": charlie["id"]}

        assert (await test_client.get(f"/api/dogs/{charlie['id']}")).status_code == 404
        again = await test_client.delete(f"/api/dogs/{charlie['id']}", headers=alice["headers"])
        assert again.status_code == 404
        assert again.json()["message"] == "Dog not found"

    @pytest.mark.asyncio
    async def test_adopted_dog_cannot_be_removed(self, test_client, register_user, create_dog):
        alice, bob = await register_user("alice"), await register_user("bob")
        luna = await create_dog(alice, "Luna")
        await test_client.put(f"/api/dogs/{luna['id']}/adopt", headers=bob["headers"])

        response = await test_client.delete(f"/api/dogs/{luna['id']}", headers=alice["headers"])

        assert response.status_code == 403
        assert response.json()["message"] == (
            "Cannot remove an adopted dog. Adopted listings cannot be removed."
        )

    @pytest.mark.asyncio
    async def test_only_registrant_may_remove(self, test_client, register_user, create_dog):
        alice, bob = await register_user("alice"), await register_user("bob")
        dog = await create_dog(alice, "Rex")

        response = await test_client.delete(f"/api/dogs/{dog['id']}", headers=bob["headers"])

        assert response.status_code == 403
        assert response.json()["message"] == "You can only remove dogs you registered."

    @pytest.mark.asyncio
    async def test_invalid_dog_id(self, test_client, register_user):
        bob = await register_user("bob")

        adopt = await test_client.put("/api/dogs/not-an-id/adopt", headers=bob["headers"])
        remove = await test_client.delete("/api/dogs/not-an-id", headers=bob["headers"])
        fetch = await test_client.get("/api/dogs/not-an-id")

        for response in (adopt, remove, fetch):
            assert response.status_code == 400
            assert response.json()["message"] == "Invalid dog ID"

    @pytest.mark.asyncio
    async def test_unknown_dog(self, test_client, register_user):
        bob = await register_user("bob")

        response = await test_client.put(f"/api/dogs/{uuid4()}/adopt", headers=bob["headers"])

        assert response.status_code == 404
        assert response.json()["message"] == "Dog not found"


class TestListings:
    @pytest.mark.asyncio
    async def test_registered_and_adopted_views(self, test_client, register_user, create_dog):
        alice, bob = await register_user("alice"), await register_user("bob")
        first = await create_dog(alice, "First")
        await create_dog(alice, "Second")
        await test_client.put(f"/api/dogs/{first['id']}/adopt", headers=bob["headers"])

        mine = await test_client.get("/api/dogs/registered", headers=alice["headers"])
        assert mine.status_code == 200
        data = mine.json()["data"]
        assert [d["name"] for d in data["dogs"]] == ["Second", "First"]
        assert data["pagination"]["total_count"] == 2

        available = await test_client.get(
            "/api/dogs/registered", params={"status": "available"}, headers=alice["headers"]
        )
        assert [d["name"] for d in available.json()["data"]["dogs"]] == ["Second"]

        adopted = await test_client.get("/api/dogs/adopted", headers=bob["headers"])
        assert [d["name"] for d in adopted.json()["data"]["dogs"]] == ["First"]

        nothing = await test_client.get("/api/dogs/adopted", headers=alice["headers"])
        assert nothing.json()["data"]["dogs"] == []

    @pytest.mark.asyncio
    async def test_pagination_metadata(self, test_client, register_user, create_dog):
        alice = await register_user("alice")
        for i in range(5):
            await create_dog(alice, f"Dog {i}")

        response = await test_client.get(
            "/api/dogs/registered", params={"page": 2, "limit": 2}, headers=alice["headers"]
        )

        data = response.json()["data"]
        assert len(data["dogs"]) == 2
        assert data["pagination"] == {
            "current_page": 2,
            "page_size": 2,
            "total_pages": 3,
            "total_count": 5,
            "has_next": True,
            "has_prev": True,
        }

    @pytest.mark.asyncio
    async def test_public_listing_and_filters(self, test_client, register_user, create_dog):
        alice, bob = await register_user("alice"), await register_user("bob")
        adopted = await create_dog(alice, "Adopted")
        await create_dog(alice, "Waiting")
        await test_client.put(f"/api/dogs/{adopted['id']}/adopt", headers=bob["headers"])

        everything = await test_client.get("/api/dogs")
        assert everything.json()["data"]["pagination"]["total_count"] == 2

        for alias in ("available", "registered"):
            response = await test_client.get("/api/dogs", params={"status": alias})
            assert [d["name"] for d in response.json()["data"]["dogs"]] == ["Waiting"]

        response = await test_client.get("/api/dogs", params={"status": "adopted"})
        assert [d["name"] for d in response.json()["data"]["dogs"]] == ["Adopted"]

        bad = await test_client.get("/api/dogs", params={"status": "sleeping"})
        assert bad.status_code == 400

    @pytest.mark.asyncio
    async def test_invalid_page(self, test_client):
        response = await test_client.get("/api/dogs", params={"page": 0})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_huge_page_coordinates(self, test_client, register_user, create_dog):
        alice = await register_user("alice")
        await create_dog(alice, "Only")

        for params in ({"page": 10**19}, {"page": 10**10, "limit": 10**10}):
            response = await test_client.get("/api/dogs", params=params)
            assert response.status_code == 200
            data = response.json()["data"]
            assert data["dogs"] == []
            assert data["pagination"]["total_count"] == 1
            assert data["pagination"]["has_next"] is False

        # an unbounded page size on page 1 serves everything
        response = await test_client.get("/api/dogs", params={"limit": 10**19})
        assert response.status_code == 200
        data = response.json()["data"]
        assert [d["name"] for d in data["dogs"]] == ["Only"]
        assert data["pagination"]["total_pages"] == 1

        mine = await test_client.get(
            "/api/dogs/registered",
            params={"page": 10**19, "limit": 10**19},
            headers=alice["headers"],
        )
        assert mine.status_code == 200
        assert mine.json()["data"]["dogs"] == []


class TestInfrastructure:
    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_index(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert "endpoints" in response.json()

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/api/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route GET /api/nope not found"

    @pytest.mark.asyncio
    async def test_request_id_round_trip(self, test_client):
        response = await test_client.get("/api/nope", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.json()["request_id"] == "abc123"

    @pytest.mark.asyncio
    async def test_security_headers(self, test_client):
        for path in ("/health", "/api/dogs", "/api/nope"):
            response = await test_client.get(path)
            assert response.headers["X-Content-Type-Options"] == "nosniff"
            assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
            assert response.headers["Referrer-Policy"] == "no-referrer"
            # HSTS only in production
            assert "Strict-Transport-Security" not in response.headers

    @pytest.mark.asyncio
    async def test_rate_limit(self, database, test_settings):
        settings = test_settings.model_copy(
            update={"rate_limit_requests": 2, "rate_limit_window": 60}
        )
        app = create_app(settings=settings, database=database)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            assert (await client.get("/api/dogs")).status_code == 200
            assert (await client.get("/api/dogs")).status_code == 200
            limited = await client.get("/api/dogs")
            # outside /api is never limited
            health = await client.get("/health")

        assert limited.status_code == 429
        assert int(limited.headers["Retry-After"]) > 0
        assert limited.json()["error"] == "rate_limited"
        assert health.status_code == 200

    @pytest.mark.asyncio
    async def test_hsts_in_production(self, database, test_settings):
        settings = test_settings.model_copy(update={"environment": "production"})
        app = create_app(settings=settings, database=database)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.headers["Strict-Transport-Security"].startswith("max-age=")
