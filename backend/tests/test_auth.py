"""Tests for registration, login and guest identities."""

PASSWORD = "password123"


class TestRegisterAndLogin:

    async def test_register_returns_token_and_profile(self, client):
        resp = await client.post(
            "/api/auth/register",
            json={"email": "Maya@Mail.com", "password": PASSWORD, "name": "Maya"},
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        assert body["user"]["email"] == "maya@mail.com"
        assert body["user"]["is_guest"] is False

    async def test_duplicate_email_rejected(self, client, register):
        await register("maya@mail.com")
        resp = await client.post(
            "/api/auth/register", json={"email": "MAYA@mail.com", "password": PASSWORD}
        )
        assert resp.status_code == 400

    async def test_duplicate_username_rejected(self, client):
        first = await client.post(
            "/api/auth/register",
            json={"email": "a@mail.com", "password": PASSWORD, "username": "wanderer"},
        )
        assert first.status_code == 201
        second = await client.post(
            "/api/auth/register",
            json={"email": "b@mail.com", "password": PASSWORD, "username": "wanderer"},
        )
        assert second.status_code == 400

    async def test_short_password_rejected(self, client):
        resp = await client.post(
            "/api/auth/register", json={"email": "a@mail.com", "password": "short"}
        )
        assert resp.status_code == 422

    async def test_login_and_me(self, client, register):
        await register("maya@mail.com", "Maya")

        resp = await client.post(
            "/api/auth/login", json={"email": "maya@mail.com", "password": PASSWORD}
        )
        assert resp.status_code == 200
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}

        me = await client.get("/api/auth/me", headers=headers)
        assert me.status_code == 200
        assert me.json()["name"] == "Maya"

    async def test_login_wrong_password(self, client, register):
        await register("maya@mail.com")
        resp = await client.post(
            "/api/auth/login", json={"email": "maya@mail.com", "password": "not-the-password"}
        )
        assert resp.status_code == 401

    async def test_me_requires_token(self, client):
        assert (await client.get("/api/auth/me")).status_code == 401
        bad = await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
        assert bad.status_code == 401


class TestGuestIdentity:

    async def test_guest_token_is_issued_and_reused(self, client):
        first = await client.post("/api/auth/guest")
        assert first.status_code == 200
        token = first.json()["guest_token"]
        assert token.startswith("guest_")
        assert first.json()["profile"]["is_guest"] is True

        second = await client.post("/api/auth/guest")
        assert second.json()["guest_token"] == token
        assert second.json()["profile"]["id"] == first.json()["profile"]["id"]

    async def test_registering_upgrades_guest_in_place(self, client):
        created = await client.post("/api/trips/create-guest", json={"destination": "Lisbon"})
        assert created.status_code == 200
        trip_id = created.json()["trip_id"]
        guest = await client.post("/api/auth/guest")
        guest_id = guest.json()["profile"]["id"]

        resp = await client.post(
            "/api/auth/register", json={"email": "maya@mail.com", "password": PASSWORD}
        )
        assert resp.status_code == 201
        assert resp.json()["user"]["id"] == guest_id
        assert resp.json()["user"]["is_guest"] is False

        client.cookies.clear()
        headers = {"Authorization": f"Bearer {resp.json()['token']}"}
        trip = await client.get(f"/api/trips/{trip_id}", headers=headers)
        assert trip.status_code == 200
        assert trip.json()["user_role"] == "admin"


class TestProfiles:

    async def test_update_and_view_profile(self, client, register):
        headers, user = await register("maya@mail.com", "Maya")

        resp = await client.patch(
            "/api/profiles/me", json={"bio": "Slow travel fan", "location": "Porto"}, headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["bio"] == "Slow travel fan"

        public = await client.get(f"/api/profiles/{user['id']}")
        assert public.json()["location"] == "Porto"
        assert "email" not in public.json()

    async def test_username_must_be_unique(self, client, register):
        first, _ = await register("maya@mail.com")
        second, _ = await register("ines@mail.com")

        assert (await client.patch("/api/profiles/me", json={"username": "wanderer"}, headers=first)).status_code == 200
        taken = await client.patch("/api/profiles/me", json={"username": "wanderer"}, headers=second)
        assert taken.status_code == 400

    async def test_unknown_profile(self, client):
        resp = await client.get("/api/profiles/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404

    async def test_update_needs_sign_in(self, client):
        resp = await client.patch("/api/profiles/me", json={"bio": "?"})
        assert resp.status_code == 401
