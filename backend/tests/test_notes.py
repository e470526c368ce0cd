"""Tests for trip notes and note tags."""
import pytest


@pytest.fixture
async def note_setup(register, create_trip, add_trip_member):
    owner, _ = await register("maya@mail.com")
    contributor, contributor_user = await register("ines@mail.com")
    trip = await create_trip(owner)
    await add_trip_member(trip["id"], contributor_user["id"], "contributor")
    return trip, owner, contributor


def _url(trip, suffix=""):
    return f"/api/trips/{trip['id']}/notes{suffix}"


async def _create_note(client, trip, headers, **fields):
    payload = {"title": "Packing list", "content": "Adapters, sunscreen", **fields}
    resp = await client.post(_url(trip), json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestNotes:

    async def test_create_and_list(self, client, note_setup):
        trip, owner, contributor = note_setup
        note = await _create_note(client, trip, contributor, tags=["packing"])

        assert note["tags"] == ["packing"]
        listed = await client.get(_url(trip), headers=owner)
        assert [n["title"] for n in listed.json()] == ["Packing list"]
        assert listed.json()[0]["tags"] == ["packing"]

    async def test_update_records_editor(self, client, note_setup):
        trip, owner, _ = note_setup
        note = await _create_note(client, trip, owner)

        resp = await client.patch(_url(trip, f"/{note['id']}"), json={"content": "Adapters"}, headers=owner)

        assert resp.json()["content"] == "Adapters"
        assert resp.json()["updated_by"] == note["created_by"]
        assert (await client.patch(_url(trip, f"/{note['id']}"), json={"title": None}, headers=owner)).status_code == 400

    async def test_contributor_edits_only_own(self, client, note_setup):
        trip, owner, contributor = note_setup
        owners_note = await _create_note(client, trip, owner)

        denied = await client.patch(_url(trip, f"/{owners_note['id']}"), json={"content": "x"}, headers=contributor)
        deleted = await client.delete(_url(trip, f"/{owners_note['id']}"), headers=contributor)

        assert denied.status_code == 403
        assert deleted.status_code == 403


class TestNoteTags:

    async def test_replace_tags(self, client, note_setup):
        trip, owner, _ = note_setup
        note = await _create_note(client, trip, owner, tags=["packing", "todo"])
        url = _url(trip, f"/{note['id']}/tags")

        resp = await client.put(url, json={"tags": ["todo", " beach ", ""]}, headers=owner)

        assert resp.status_code == 200
        assert [t["name"] for t in resp.json()["tags"]] == ["beach", "todo"]
        fetched = await client.get(url, headers=owner)
        assert [t["name"] for t in fetched.json()["tags"]] == ["beach", "todo"]

    async def test_tags_are_shared_vocabulary(self, client, note_setup):
        trip, owner, _ = note_setup
        first = await _create_note(client, trip, owner, tags=["beach"])
        second = await _create_note(client, trip, owner, title="Day trips")

        resp = await client.put(_url(trip, f"/{second['id']}/tags"), json={"tags": ["beach"]}, headers=owner)
        first_tags = await client.get(_url(trip, f"/{first['id']}/tags"), headers=owner)

        assert resp.json()["tags"][0]["id"] == first_tags.json()["tags"][0]["id"]

    async def test_clear_tags(self, client, note_setup):
        trip, owner, _ = note_setup
        note = await _create_note(client, trip, owner, tags=["beach"])

        resp = await client.put(_url(trip, f"/{note['id']}/tags"), json={"tags": []}, headers=owner)
        assert resp.json() == {"tags": []}

    async def test_contributor_cannot_manage_tags(self, client, note_setup):
        trip, owner, contributor = note_setup
        note = await _create_note(client, trip, contributor)

        denied = await client.put(_url(trip, f"/{note['id']}/tags"), json={"tags": ["x"]}, headers=contributor)
        readable = await client.get(_url(trip, f"/{note['id']}/tags"), headers=contributor)

        assert denied.status_code == 403
        assert readable.status_code == 200

    async def test_tags_must_be_strings(self, client, note_setup):
        trip, owner, _ = note_setup
        note = await _create_note(client, trip, owner)

        resp = await client.put(_url(trip, f"/{note['id']}/tags"), json={"tags": "beach"}, headers=owner)
        assert resp.status_code == 422

    async def test_note_from_other_trip(self, client, note_setup, create_trip):
        trip, owner, _ = note_setup
        note = await _create_note(client, trip, owner)
        other_trip = await create_trip(owner, name="Another trip")

        resp = await client.get(_url(other_trip, f"/{note['id']}/tags"), headers=owner)
        assert resp.status_code == 404
