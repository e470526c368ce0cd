"""Tests for trip tasks: assignment, tags and votes."""
import pytest


@pytest.fixture
async def task_setup(register, create_trip, add_trip_member):
    owner, owner_user = await register("maya@mail.com")
    contributor, contributor_user = await register("ines@mail.com")
    trip = await create_trip(owner)
    await add_trip_member(trip["id"], contributor_user["id"], "contributor")
    return trip, owner, owner_user, contributor, contributor_user


def _url(trip, suffix=""):
    return f"/api/trips/{trip['id']}/tasks{suffix}"


async def _create_task(client, trip, headers, **fields):
    resp = await client.post(_url(trip), json={"title": "Book the ferry", **fields}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestTasks:

    async def test_create_with_tags(self, client, task_setup):
        trip, owner, owner_user, _, _ = task_setup
        task = await _create_task(client, trip, owner, priority="high", tags=["ferry", " transport ", "ferry", ""])

        assert task["owner_id"] == owner_user["id"]
        assert task["status"] == "suggested"
        assert task["priority"] == "high"
        assert task["tags"] == ["ferry", "transport"]

        second = await _create_task(client, trip, owner, title="Pack")
        assert second["position"] == task["position"] + 1

    async def test_invalid_priority(self, client, task_setup):
        trip, owner, _, _, _ = task_setup
        resp = await client.post(_url(trip), json={"title": "x", "priority": "urgent"}, headers=owner)
        assert resp.status_code == 422

    async def test_filter_by_tag_and_assignee(self, client, task_setup):
        trip, owner, _, _, contributor_user = task_setup
        ferry = await _create_task(client, trip, owner, tags=["transport"])
        await _create_task(client, trip, owner, title="Buy sunscreen", assignee_id=contributor_user["id"])

        by_tag = await client.get(_url(trip), params={"tag": "transport"}, headers=owner)
        assert [t["id"] for t in by_tag.json()] == [ferry["id"]]

        unknown = await client.get(_url(trip), params={"tag": "nothing"}, headers=owner)
        assert unknown.json() == []

        mine = await client.get(_url(trip), params={"assignee_id": contributor_user["id"]}, headers=owner)
        assert [t["title"] for t in mine.json()] == ["Buy sunscreen"]

    async def test_update_replaces_tags(self, client, task_setup):
        trip, owner, _, _, _ = task_setup
        task = await _create_task(client, trip, owner, tags=["ferry"])

        resp = await client.patch(
            _url(trip, f"/{task['id']}"), json={"status": "confirmed", "tags": ["booked"]}, headers=owner
        )

        assert resp.status_code == 200
        assert resp.json()["status"] == "confirmed"
        assert resp.json()["tags"] == ["booked"]

    @pytest.mark.parametrize("field", ["title", "status", "priority", "tags"])
    async def test_required_field_cannot_be_cleared(self, client, task_setup, field):
        trip, owner, _, _, _ = task_setup
        task = await _create_task(client, trip, owner)

        resp = await client.patch(_url(trip, f"/{task['id']}"), json={field: None}, headers=owner)

        assert resp.status_code == 400
        assert resp.json()["detail"] == f"{field} cannot be empty"

    async def test_contributor_edits_only_own_or_assigned(self, client, task_setup):
        trip, owner, _, contributor, contributor_user = task_setup
        others = await _create_task(client, trip, owner)
        assigned = await _create_task(client, trip, owner, title="Pack", assignee_id=contributor_user["id"])

        denied = await client.patch(_url(trip, f"/{others['id']}"), json={"status": "active"}, headers=contributor)
        allowed = await client.patch(_url(trip, f"/{assigned['id']}"), json={"status": "active"}, headers=contributor)

        assert denied.status_code == 403
        assert allowed.status_code == 200

    async def test_delete_by_owner_or_manager(self, client, task_setup):
        trip, owner, _, contributor, _ = task_setup
        owners_task = await _create_task(client, trip, owner)
        own_task = await _create_task(client, trip, contributor, title="Bring snacks")

        assert (await client.delete(_url(trip, f"/{owners_task['id']}"), headers=contributor)).status_code == 403
        assert (await client.delete(_url(trip, f"/{own_task['id']}"), headers=contributor)).status_code == 200
        assert (await client.delete(_url(trip, f"/{owners_task['id']}"), headers=owner)).status_code == 200
        assert (await client.get(_url(trip, f"/{owners_task['id']}"), headers=owner)).status_code == 404


class TestAssignment:

    async def test_assign_and_unassign(self, client, task_setup):
        trip, owner, _, _, contributor_user = task_setup
        task = await _create_task(client, trip, owner)
        url = _url(trip, f"/{task['id']}/assign")

        assigned = await client.post(url, json={"assignee_id": contributor_user["id"]}, headers=owner)
        assert assigned.json()["assignee_id"] == contributor_user["id"]

        cleared = await client.post(url, json={"assignee_id": None}, headers=owner)
        assert cleared.json()["assignee_id"] is None

    async def test_assignee_must_be_member(self, client, register, task_setup):
        trip, owner, _, _, _ = task_setup
        _, outsider = await register("joao@mail.com")
        task = await _create_task(client, trip, owner)

        resp = await client.post(
            _url(trip, f"/{task['id']}/assign"), json={"assignee_id": outsider["id"]}, headers=owner
        )
        assert resp.status_code == 400

        created = await client.post(
            _url(trip), json={"title": "x", "assignee_id": outsider["id"]}, headers=owner
        )
        assert created.status_code == 400

    async def test_contributor_can_only_take_task(self, client, task_setup):
        trip, owner, owner_user, contributor, contributor_user = task_setup
        task = await _create_task(client, trip, owner)
        url = _url(trip, f"/{task['id']}/assign")

        to_owner = await client.post(url, json={"assignee_id": owner_user["id"]}, headers=contributor)
        to_self = await client.post(url, json={"assignee_id": contributor_user["id"]}, headers=contributor)

        assert to_owner.status_code == 403
        assert to_self.status_code == 200


class TestTaskVotes:

    async def test_vote_toggle(self, client, task_setup):
        trip, owner, _, contributor, _ = task_setup
        task = await _create_task(client, trip, owner)
        url = _url(trip, f"/{task['id']}/vote")

        assert (await client.post(url, json={"vote_type": "up"}, headers=owner)).json() == {
            "up": 1, "down": 0, "user_vote": "up",
        }
        assert (await client.post(url, json={"vote_type": "down"}, headers=contributor)).json() == {
            "up": 1, "down": 1, "user_vote": "down",
        }
        assert (await client.post(url, json={"vote_type": "up"}, headers=owner)).json() == {
            "up": 0, "down": 1, "user_vote": None,
        }

        fetched = await client.get(_url(trip, f"/{task['id']}"), headers=owner)
        assert fetched.json()["votes_down"] == 1

    async def test_outsider_cannot_see_tasks(self, client, register, task_setup):
        trip, owner, _, _, _ = task_setup
        outsider, _ = await register("joao@mail.com")
        await _create_task(client, trip, owner)

        assert (await client.get(_url(trip), headers=outsider)).status_code == 403
