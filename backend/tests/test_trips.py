"""Tests for trip CRUD, quick-start trips and role-based access."""
import uuid

import pytest
from sqlalchemy import delete

from app.config import settings
from app.models.trip import TripMember


class TestCreateTrip:

    async def test_creates_trip_with_day_sections(self, client, register, create_trip):
        headers, user = await register("maya@mail.com")
        trip = await create_trip(
            headers, start_date="2026-05-01", end_date="2026-05-03", destination="Lisbon"
        )

        assert trip["created_by"] == user["id"]
        assert trip["duration_days"] == 3
        assert trip["destination_name"] == "Lisbon"

        itinerary = await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)
        sections = itinerary.json()["data"]["sections"]
        assert [s["day_number"] for s in sections] == [1, 2, 3]
        assert [s["position"] for s in sections] == [1, 2, 3]
        assert sections[0]["date"] == "2026-05-01"

    async def test_end_before_start_rejected(self, client, register):
        headers, _ = await register("maya@mail.com")
        resp = await client.post(
            "/api/trips",
            json={"name": "Backwards", "start_date": "2026-05-03", "end_date": "2026-05-01"},
            headers=headers,
        )
        assert resp.status_code == 422

    async def test_requires_authentication(self, client):
        resp = await client.post("/api/trips", json={"name": "Nobody's trip"})
        assert resp.status_code == 401

    async def test_public_trip_gets_slug(self, register, create_trip):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers, privacy_setting="public")
        assert trip["public_slug"]


class TestGuestTrip:

    async def test_quick_start_for_guest(self, client):
        resp = await client.post("/api/trips/create-guest", json={"destination": "Porto"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["is_guest"] is True
        assert body["guest_token"].startswith("guest_")
        assert client.cookies.get(settings.guest_cookie_name) == body["guest_token"]

        itinerary = await client.get(f"/api/trips/{body['trip_id']}/itinerary")
        assert itinerary.status_code == 200
        assert len(itinerary.json()["data"]["sections"]) == settings.guest_trip_days
        titles = [i["title"] for i in itinerary.json()["data"]["items"]]
        assert "Accommodation in Porto" in titles
        assert len(titles) == 4

    async def test_quick_start_for_signed_in_user(self, client, register):
        headers, _ = await register("maya@mail.com")
        resp = await client.post(
            "/api/trips/create-guest",
            json={"destination": "Porto", "custom_name": "Port wine weekend"},
            headers=headers,
        )

        assert resp.json()["is_guest"] is False
        assert resp.json()["guest_token"] is None
        trip = await client.get(f"/api/trips/{resp.json()['trip_id']}", headers=headers)
        assert trip.json()["trip"]["name"] == "Port wine weekend"

    async def test_destination_required(self, client):
        resp = await client.post("/api/trips/create-guest", json={"destination": "  "})
        assert resp.status_code == 400


class TestListTrips:

    async def test_lists_only_member_trips(self, client, register, create_trip):
        maya, _ = await register("maya@mail.com")
        ines, _ = await register("ines@mail.com")
        await create_trip(maya, name="Maya's trip")
        await create_trip(ines, name="Ines's trip")

        resp = await client.get("/api/trips", headers=maya)

        assert resp.status_code == 200
        assert resp.json()["total"] == 1
        assert [t["name"] for t in resp.json()["trips"]] == ["Maya's trip"]

    async def test_invalid_status_filter(self, client, register):
        headers, _ = await register("maya@mail.com")
        resp = await client.get("/api/trips", params={"status": "sunbathing"}, headers=headers)
        assert resp.status_code == 400


class TestTripAccess:

    async def test_private_trip_hidden_from_strangers(self, client, register, create_trip):
        owner, _ = await register("maya@mail.com")
        stranger, _ = await register("ines@mail.com")
        trip = await create_trip(owner)

        assert (await client.get(f"/api/trips/{trip['id']}", headers=stranger)).status_code == 403
        assert (await client.get(f"/api/trips/{trip['id']}")).status_code == 403

    async def test_public_trip_readable_as_viewer(self, client, register, create_trip):
        owner, _ = await register("maya@mail.com")
        trip = await create_trip(owner, privacy_setting="public")

        resp = await client.get(f"/api/trips/{trip['id']}")
        assert resp.status_code == 200
        assert resp.json()["user_role"] == "viewer"

    async def test_missing_trip(self, client, register):
        headers, _ = await register("maya@mail.com")
        resp = await client.get("/api/trips/00000000-0000-0000-0000-000000000000", headers=headers)
        assert resp.status_code == 404

    async def test_creator_without_membership_is_admin(
        self, client, register, create_trip, session_factory
    ):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)
        async with session_factory() as db:
            await db.execute(delete(TripMember).where(TripMember.trip_id == uuid.UUID(trip["id"])))
            await db.commit()

        resp = await client.get(f"/api/trips/{trip['id']}", headers=headers)
        assert resp.json()["user_role"] == "admin"

    async def test_public_page_by_slug(self, client, register, create_trip):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers, privacy_setting="public")

        resp = await client.get(f"/api/trips/public/{trip['public_slug']}")
        assert resp.status_code == 200
        assert resp.json()["trip"]["id"] == trip["id"]

        assert (await client.get("/api/trips/public/nope")).status_code == 404


class TestUpdateTrip:

    async def test_partial_update(self, client, register, create_trip):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)

        resp = await client.patch(
            f"/api/trips/{trip['id']}",
            json={"description": "Pastéis and trams", "playlist_url": "https://open.spotify.com/x"},
            headers=headers,
        )

        assert resp.status_code == 200
        assert resp.json()["description"] == "Pastéis and trams"
        assert resp.json()["name"] == trip["name"]

    async def test_going_public_assigns_slug(self, client, register, create_trip):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)
        assert trip["public_slug"] is None

        resp = await client.patch(
            f"/api/trips/{trip['id']}", json={"privacy_setting": "public"}, headers=headers
        )
        assert resp.json()["public_slug"]

    @pytest.mark.parametrize(
        "payload,status",
        [
            ({}, 400),
            ({"name": None}, 400),
            ({"unknown_field": 1}, 422),
            ({"cover_image_url": "http://example.com/a.jpg"}, 422),
            ({"playlist_url": "https://example.com/playlist"}, 422),
            ({"status": "sunbathing"}, 422),
        ],
    )
    async def test_invalid_updates(self, client, register, create_trip, payload, status):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)
        resp = await client.patch(f"/api/trips/{trip['id']}", json=payload, headers=headers)
        assert resp.status_code == status

    async def test_viewer_cannot_update(self, client, register, create_trip, add_trip_member):
        owner, _ = await register("maya@mail.com")
        viewer, viewer_user = await register("ines@mail.com")
        trip = await create_trip(owner)
        await add_trip_member(trip["id"], viewer_user["id"], "viewer")

        resp = await client.patch(f"/api/trips/{trip['id']}", json={"description": "x"}, headers=viewer)
        assert resp.status_code == 403


class TestDeleteTrip:

    async def test_only_admin_can_delete(self, client, register, create_trip, add_trip_member):
        owner, _ = await register("maya@mail.com")
        editor, editor_user = await register("ines@mail.com")
        trip = await create_trip(owner)
        await add_trip_member(trip["id"], editor_user["id"], "editor")

        assert (await client.delete(f"/api/trips/{trip['id']}", headers=editor)).status_code == 403
        assert (await client.delete(f"/api/trips/{trip['id']}", headers=owner)).status_code == 200
        assert (await client.get(f"/api/trips/{trip['id']}", headers=owner)).status_code == 404


class TestRateLimit:

    async def test_trip_reads_are_limited(self, client, register, create_trip, monkeypatch):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "rate_limit_requests", 2)

        statuses = [
            (await client.get(f"/api/trips/{trip['id']}", headers=headers)).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 429]
        blocked = await client.get(f"/api/trips/{trip['id']}", headers=headers)
        assert int(blocked.headers["Retry-After"]) >= 1
