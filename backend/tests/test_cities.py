"""Tests for the cities of a multi-city trip."""
import pytest


@pytest.fixture
async def trip_with_owner(register, create_trip):
    headers, user = await register("maya@mail.com")
    trip = await create_trip(headers, start_date="2026-05-01", end_date="2026-05-06")
    return trip, headers


async def _add_city(client, trip, headers, destination, **fields):
    resp = await client.post(
        f"/api/trips/{trip['id']}/cities", json={"destination": destination, **fields}, headers=headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestTripCities:

    async def test_add_and_list_in_order(self, client, trip_with_owner):
        trip, headers = trip_with_owner
        lisbon = await _add_city(client, trip, headers, "Lisbon", arrival_date="2026-05-01")
        porto = await _add_city(client, trip, headers, "Porto")

        assert lisbon["position"] == 0
        assert porto["position"] == 1
        assert lisbon["city"]["name"] == "Lisbon"

        listed = await client.get(f"/api/trips/{trip['id']}/cities", headers=headers)
        assert [c["city"]["name"] for c in listed.json()["cities"]] == ["Lisbon", "Porto"]

    async def test_existing_city_reused(self, client, trip_with_owner, create_trip):
        trip, headers = trip_with_owner
        first = await _add_city(client, trip, headers, "Lisbon")
        other_trip = await create_trip(headers, name="Another trip")

        again = await _add_city(client, other_trip, headers, "lisbon")
        assert again["city_id"] == first["city_id"]

        by_id = await client.post(
            f"/api/trips/{other_trip['id']}/cities", json={"city_id": first["city_id"]}, headers=headers
        )
        assert by_id.status_code == 400

    async def test_city_or_destination_required(self, client, trip_with_owner):
        trip, headers = trip_with_owner
        resp = await client.post(f"/api/trips/{trip['id']}/cities", json={}, headers=headers)
        assert resp.status_code == 422

    async def test_update_dates(self, client, trip_with_owner):
        trip, headers = trip_with_owner
        lisbon = await _add_city(client, trip, headers, "Lisbon", arrival_date="2026-05-01")
        url = f"/api/trips/{trip['id']}/cities/{lisbon['city_id']}"

        updated = await client.patch(url, json={"departure_date": "2026-05-03"}, headers=headers)
        assert updated.json()["trip_city"]["departure_date"] == "2026-05-03"

        backwards = await client.patch(url, json={"departure_date": "2026-04-20"}, headers=headers)
        assert backwards.status_code == 400

        fetched = await client.get(url, headers=headers)
        assert fetched.json()["trip_city"]["arrival_date"] == "2026-05-01"

    async def test_remove_detaches_sections_and_closes_gap(self, client, trip_with_owner):
        trip, headers = trip_with_owner
        lisbon = await _add_city(client, trip, headers, "Lisbon")
        await _add_city(client, trip, headers, "Porto")
        await _add_city(client, trip, headers, "Coimbra")
        section = await client.post(
            f"/api/trips/{trip['id']}/itinerary",
            json={"type": "section", "name": "Lisbon days", "trip_city_id": lisbon["id"]},
            headers=headers,
        )
        assert section.json()["data"]["trip_city_id"] == lisbon["id"]

        resp = await client.delete(f"/api/trips/{trip['id']}/cities/{lisbon['city_id']}", headers=headers)
        assert resp.json() == {"success": True, "removed_city_id": lisbon["city_id"]}

        listed = (await client.get(f"/api/trips/{trip['id']}/cities", headers=headers)).json()["cities"]
        assert [(c["city"]["name"], c["position"]) for c in listed] == [("Porto", 0), ("Coimbra", 1)]

        itinerary = (await client.get(f"/api/trips/{trip['id']}/itinerary", headers=headers)).json()
        kept = [s for s in itinerary["data"]["sections"] if s["title"] == "Lisbon days"]
        assert kept[0]["trip_city_id"] is None

    async def test_section_city_must_belong_to_trip(self, client, trip_with_owner, create_trip):
        trip, headers = trip_with_owner
        other_trip = await create_trip(headers, name="Another trip")
        foreign = await _add_city(client, other_trip, headers, "Madrid")

        resp = await client.post(
            f"/api/trips/{trip['id']}/itinerary",
            json={"type": "section", "name": "Madrid", "trip_city_id": foreign["id"]},
            headers=headers,
        )
        assert resp.status_code == 400

    async def test_missing_city(self, client, trip_with_owner):
        trip, headers = trip_with_owner
        resp = await client.get(
            f"/api/trips/{trip['id']}/cities/00000000-0000-0000-0000-000000000000", headers=headers
        )
        assert resp.status_code == 404

    async def test_contributor_cannot_edit(self, client, register, trip_with_owner, add_trip_member):
        trip, headers = trip_with_owner
        contributor, contributor_user = await register("ines@mail.com")
        await add_trip_member(trip["id"], contributor_user["id"], "contributor")
        lisbon = await _add_city(client, trip, headers, "Lisbon")

        added = await client.post(
            f"/api/trips/{trip['id']}/cities", json={"destination": "Porto"}, headers=contributor
        )
        removed = await client.delete(
            f"/api/trips/{trip['id']}/cities/{lisbon['city_id']}", headers=contributor
        )
        listed = await client.get(f"/api/trips/{trip['id']}/cities", headers=contributor)

        assert added.status_code == 403
        assert removed.status_code == 403
        assert len(listed.json()["cities"]) == 1
