"""Tests for itinerary templates: saving a trip, starting trips from it, applying it."""
from datetime import date

import pytest

from app.services.template_service import template_end_date


class TestTemplateEndDate:

    def test_inclusive_duration(self):
        assert template_end_date(date(2026, 5, 1), 3) == date(2026, 5, 3)
        assert template_end_date(date(2026, 5, 1), 1) == date(2026, 5, 1)

    def test_no_start(self):
        assert template_end_date(None, 4) is None


@pytest.fixture
async def lisbon_template(client, register, create_trip):
    """A published three-day template saved from a trip with items on days 1 and 3."""
    headers, _ = await register("maya@mail.com")
    trip = await create_trip(
        headers, destination="Lisbon", start_date="2026-05-01", end_date="2026-05-03"
    )
    itinerary = (await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)).json()
    days = {s["day_number"]: s["id"] for s in itinerary["data"]["sections"]}
    for day, title in ((1, "Tram 28"), (1, "Pastéis de Belém"), (3, "Sintra day trip")):
        resp = await client.post(
            f"/api/trips/{trip['id']}/itinerary",
            json={"title": title, "section_id": days[day], "category": "Iconic Landmarks"},
            headers=headers,
        )
        assert resp.status_code == 201

    saved = await client.post(
        "/api/itinerary-templates",
        json={"trip_id": trip["id"], "title": "Three days in Lisbon", "category": "city-break"},
        headers=headers,
    )
    assert saved.status_code == 201, saved.text
    return saved.json(), trip, headers


class TestSaveTemplate:

    async def test_items_grouped_by_day(self, client, lisbon_template):
        template, trip, _ = lisbon_template

        assert template["duration_days"] == 3
        assert template["source_trip_id"] == trip["id"]
        assert template["destination_name"] == "Lisbon"

        detail = await client.get(f"/api/itinerary-templates/{template['slug']}")
        items = detail.json()["items"]
        assert [(i["day"], i["item_order"], i["title"]) for i in items] == [
            (1, 0, "Tram 28"), (1, 1, "Pastéis de Belém"), (3, 0, "Sintra day trip"),
        ]

    async def test_empty_trip_refused(self, client, register, create_trip):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)

        resp = await client.post("/api/itinerary-templates", json={"trip_id": trip["id"]}, headers=headers)
        assert resp.status_code == 400

    async def test_needs_manage_role(self, client, register, lisbon_template, add_trip_member):
        _, trip, _ = lisbon_template
        viewer, viewer_user = await register("ines@mail.com")
        await add_trip_member(trip["id"], viewer_user["id"], "viewer")

        resp = await client.post("/api/itinerary-templates", json={"trip_id": trip["id"]}, headers=viewer)
        assert resp.status_code == 403

    async def test_listing_and_drafts(self, client, register, lisbon_template):
        template, trip, headers = lisbon_template
        draft = await client.post(
            "/api/itinerary-templates",
            json={"trip_id": trip["id"], "title": "Work in progress", "is_published": False},
            headers=headers,
        )
        draft_id = draft.json()["id"]
        stranger, _ = await register("joao@mail.com")

        listed = await client.get("/api/itinerary-templates")
        assert [t["id"] for t in listed.json()] == [template["id"]]
        assert (await client.get(f"/api/itinerary-templates/{draft_id}", headers=headers)).status_code == 200
        assert (await client.get(f"/api/itinerary-templates/{draft_id}", headers=stranger)).status_code == 404


class TestTripFromTemplate:

    async def test_sections_items_and_dates(self, client, register, lisbon_template):
        template, _, _ = lisbon_template
        headers, user = await register("ines@mail.com")

        resp = await client.post(
            f"/api/itinerary-templates/{template['id']}/trips",
            json={"start_date": "2026-09-10", "name": "Lisbon with Ines"},
            headers=headers,
        )

        assert resp.status_code == 201
        trip = resp.json()
        assert trip["name"] == "Lisbon with Ines"
        assert trip["created_by"] == user["id"]
        assert trip["start_date"] == "2026-09-10"
        assert trip["end_date"] == "2026-09-12"
        assert trip["duration_days"] == 3

        itinerary = (await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)).json()["data"]
        sections = {s["id"]: s for s in itinerary["sections"]}
        assert sorted(s["date"] for s in sections.values()) == ["2026-09-10", "2026-09-11", "2026-09-12"]
        placed = sorted((sections[i["section_id"]]["day_number"], i["title"]) for i in itinerary["items"])
        assert placed == [(1, "Pastéis de Belém"), (1, "Tram 28"), (3, "Sintra day trip")]
        assert {i["status"] for i in itinerary["items"]} == {"suggested"}

        role = await client.get(f"/api/trips/{trip['id']}", headers=headers)
        assert role.json()["user_role"] == "admin"

        copied = await client.get(f"/api/itinerary-templates/{template['slug']}")
        assert copied.json()["template"]["copied_count"] == 1

    async def test_without_start_date(self, client, lisbon_template):
        template, _, headers = lisbon_template

        resp = await client.post(f"/api/itinerary-templates/{template['slug']}/trips", json={}, headers=headers)

        trip = resp.json()
        assert trip["name"] == "Three days in Lisbon"
        assert trip["start_date"] is None
        assert trip["end_date"] is None
        itinerary = (await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)).json()["data"]
        assert len(itinerary["sections"]) == 3
        assert len(itinerary["items"]) == 3

    async def test_unknown_template(self, client, lisbon_template):
        _, _, headers = lisbon_template
        resp = await client.post("/api/itinerary-templates/no-such-template/trips", json={}, headers=headers)
        assert resp.status_code == 404


class TestApplyTemplate:

    async def test_appends_days_after_trip(self, client, register, create_trip, lisbon_template):
        template, _, _ = lisbon_template
        headers, _ = await register("ines@mail.com")
        trip = await create_trip(headers, start_date="2026-07-01", end_date="2026-07-02")

        resp = await client.post(f"/api/trips/{trip['id']}/apply-template/{template['id']}", headers=headers)

        assert resp.json() == {"added_items": 3, "new_total_days": 5}
        updated = (await client.get(f"/api/trips/{trip['id']}", headers=headers)).json()["trip"]
        assert updated["end_date"] == "2026-07-05"
        assert updated["duration_days"] == 5

        itinerary = (await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)).json()["data"]
        sintra = next(i for i in itinerary["items"] if i["title"] == "Sintra day trip")
        assert sintra["day_number"] == 5
        assert sintra["date"] == "2026-07-05"

    async def test_needs_manage_role(self, client, register, lisbon_template, add_trip_member, create_trip):
        template, _, _ = lisbon_template
        owner, _ = await register("ines@mail.com")
        contributor, contributor_user = await register("joao@mail.com")
        trip = await create_trip(owner)
        await add_trip_member(trip["id"], contributor_user["id"], "contributor")

        resp = await client.post(f"/api/trips/{trip['id']}/apply-template/{template['id']}", headers=contributor)
        assert resp.status_code == 403
