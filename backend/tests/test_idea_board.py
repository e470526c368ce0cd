"""Tests for group plans, the idea board and plan-to-trip conversion."""
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.services.idea_service import normalize_position, rank_key


class TestNormalizePosition:

    def test_defaults(self):
        assert normalize_position(None) == {"x": 0, "y": 0, "w": 3, "h": 2}

    def test_partial_position_is_merged_and_coerced(self):
        assert normalize_position({"x": "4", "y": 2.0, "extra": 1}) == {"x": 4, "y": 2, "w": 3, "h": 2}

    def test_bad_value(self):
        with pytest.raises(ValueError):
            normalize_position({"x": "left"})


class TestRankKey:

    def test_orders_by_net_then_up_then_age(self):
        now = datetime.now(timezone.utc)
        ideas = [
            SimpleNamespace(title="newer tie", votes_up=3, votes_down=1, created_at=now),
            SimpleNamespace(title="older tie", votes_up=3, votes_down=1, created_at=now - timedelta(days=1)),
            SimpleNamespace(title="more ups", votes_up=5, votes_down=3, created_at=now),
            SimpleNamespace(title="best", votes_up=4, votes_down=0, created_at=now),
            SimpleNamespace(title="worst", votes_up=0, votes_down=2, created_at=now),
        ]

        ranked = [i.title for i in sorted(ideas, key=rank_key)]

        assert ranked == ["best", "more ups", "older tie", "newer tie", "worst"]


@pytest.fixture
async def group_setup(client, register):
    owner, owner_user = await register("maya@mail.com", "Maya")
    friend, friend_user = await register("ines@mail.com", "Ines")
    created = await client.post("/api/groups", json={"name": "Porto crew"}, headers=owner)
    group = created.json()
    await client.post(f"/api/groups/{group['id']}/members", json={"user_id": friend_user["id"]}, headers=owner)
    return SimpleNamespace(
        group=group, owner=owner, owner_user=owner_user, friend=friend, friend_user=friend_user,
        url=f"/api/groups/{group['id']}",
    )


async def _idea(client, setup, headers, **fields):
    payload = {"title": "Idea", "type": "activity", **fields}
    resp = await client.post(f"{setup.url}/ideas", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _plan(client, setup, name="Summer 2026"):
    resp = await client.post(f"{setup.url}/plans", json={"name": name}, headers=setup.owner)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestIdeas:

    async def test_create_with_default_position(self, client, group_setup):
        idea = await _idea(client, group_setup, group_setup.friend, title="Port tasting")

        assert idea["position"] == {"x": 0, "y": 0, "w": 3, "h": 2}
        assert idea["created_by"] == group_setup.friend_user["id"]
        assert idea["plan_id"] is None

    async def test_outsider_cannot_post(self, client, register, group_setup):
        outsider, _ = await register("joao@mail.com")
        resp = await client.post(
            f"{group_setup.url}/ideas", json={"title": "Sneaky", "type": "note"}, headers=outsider
        )
        assert resp.status_code == 403

    async def test_invalid_type(self, client, group_setup):
        resp = await client.post(
            f"{group_setup.url}/ideas", json={"title": "x", "type": "dream"}, headers=group_setup.owner
        )
        assert resp.status_code == 422

    async def test_filter_by_plan(self, client, group_setup):
        plan = await _plan(client, group_setup)
        in_plan = await _idea(client, group_setup, group_setup.owner, title="In plan", plan_id=plan["id"])
        loose = await _idea(client, group_setup, group_setup.owner, title="Loose")
        url = f"{group_setup.url}/ideas"

        by_plan = await client.get(url, params={"plan_id": plan["id"]}, headers=group_setup.owner)
        unassigned = await client.get(url, params={"plan_id": "null"}, headers=group_setup.owner)
        everything = await client.get(url, headers=group_setup.owner)
        invalid = await client.get(url, params={"plan_id": "nope"}, headers=group_setup.owner)

        assert [i["id"] for i in by_plan.json()] == [in_plan["id"]]
        assert [i["id"] for i in unassigned.json()] == [loose["id"]]
        assert len(everything.json()) == 2
        assert invalid.status_code == 400

    async def test_batch_positions(self, client, group_setup):
        first = await _idea(client, group_setup, group_setup.owner)
        second = await _idea(client, group_setup, group_setup.friend)

        resp = await client.put(
            f"{group_setup.url}/ideas/positions",
            json={"positions": [
                {"idea_id": first["id"], "position": {"x": 6, "y": 1}},
                {"idea_id": second["id"], "position": {"x": 0, "y": 4, "w": 2, "h": 2}},
            ]},
            headers=group_setup.friend,
        )

        assert resp.json() == {"success": True, "updated": 2}
        fetched = await client.get(f"{group_setup.url}/ideas/{first['id']}", headers=group_setup.owner)
        assert fetched.json()["position"] == {"x": 6, "y": 1, "w": 3, "h": 2}

    async def test_only_author_or_admin_edits(self, client, group_setup):
        owners_idea = await _idea(client, group_setup, group_setup.owner)
        friends_idea = await _idea(client, group_setup, group_setup.friend)

        denied = await client.patch(
            f"{group_setup.url}/ideas/{owners_idea['id']}", json={"title": "Mine now"}, headers=group_setup.friend
        )
        own = await client.patch(
            f"{group_setup.url}/ideas/{friends_idea['id']}", json={"title": "Edited"}, headers=group_setup.friend
        )
        admin = await client.delete(f"{group_setup.url}/ideas/{friends_idea['id']}", headers=group_setup.owner)

        assert denied.status_code == 403
        assert own.json()["title"] == "Edited"
        assert admin.status_code == 200

    @pytest.mark.parametrize("field", ["title", "type"])
    async def test_required_field_cannot_be_cleared(self, client, group_setup, field):
        idea = await _idea(client, group_setup, group_setup.owner, title="Port tasting")

        resp = await client.patch(
            f"{group_setup.url}/ideas/{idea['id']}", json={field: None}, headers=group_setup.owner
        )

        assert resp.status_code == 400
        assert resp.json()["detail"] == f"{field} cannot be empty"

    async def test_votes(self, client, group_setup):
        idea = await _idea(client, group_setup, group_setup.owner)
        vote_url = f"{group_setup.url}/ideas/{idea['id']}/vote"

        await client.post(vote_url, json={"vote_type": "up"}, headers=group_setup.owner)
        down = await client.post(vote_url, json={"vote_type": "down"}, headers=group_setup.friend)
        assert down.json() == {"up": 1, "down": 1, "user_vote": "down"}

        switched = await client.post(vote_url, json={"vote_type": "up"}, headers=group_setup.friend)
        assert switched.json() == {"up": 2, "down": 0, "user_vote": "up"}

        retracted = await client.delete(vote_url, headers=group_setup.friend)
        assert retracted.json() == {"up": 1, "down": 0, "user_vote": None}
        assert (await client.delete(vote_url, headers=group_setup.friend)).status_code == 404


class TestPlans:

    async def test_attach_and_detach(self, client, group_setup):
        plan = await _plan(client, group_setup)
        idea = await _idea(client, group_setup, group_setup.owner)
        ideas_url = f"{group_setup.url}/plans/{plan['id']}/ideas"

        attached = await client.post(ideas_url, json={"idea_ids": [idea["id"]]}, headers=group_setup.friend)
        assert attached.json() == {"success": True, "attached": 1}

        detail = await client.get(f"{group_setup.url}/plans/{plan['id']}", headers=group_setup.owner)
        assert [i["id"] for i in detail.json()["ideas"]] == [idea["id"]]

        detached = await client.request(
            "DELETE", ideas_url, json={"idea_ids": [idea["id"]]}, headers=group_setup.friend
        )
        assert detached.json() == {"success": True, "detached": 1}

    @pytest.mark.parametrize("field", ["name", "status"])
    async def test_plan_required_field_cannot_be_cleared(self, client, group_setup, field):
        plan = await _plan(client, group_setup)
        url = f"{group_setup.url}/plans/{plan['id']}"

        resp = await client.patch(url, json={field: None}, headers=group_setup.owner)

        assert resp.status_code == 400
        detail = await client.get(url, headers=group_setup.owner)
        assert detail.json()["plan"]["name"] == "Summer 2026"

    async def test_summary_groups_ranked_ideas(self, client, group_setup):
        plan = await _plan(client, group_setup)
        porto = await _idea(client, group_setup, group_setup.owner, title="Porto", type="destination", plan_id=plan["id"])
        await _idea(client, group_setup, group_setup.owner, title="Lisbon", type="destination", plan_id=plan["id"])
        await _idea(client, group_setup, group_setup.owner, title="Surf lesson", plan_id=plan["id"])
        await client.post(f"{group_setup.url}/ideas/{porto['id']}/vote", json={"vote_type": "up"}, headers=group_setup.friend)

        resp = await client.get(f"{group_setup.url}/plans/{plan['id']}/summary", headers=group_setup.owner)

        body = resp.json()
        assert body["total_ideas"] == 3
        assert [i["title"] for i in body["by_type"]["destination"]] == ["Porto", "Lisbon"]
        assert [i["title"] for i in body["by_type"]["activity"]] == ["Surf lesson"]

    async def test_everyone_ready_moves_to_voting(self, client, group_setup):
        plan = await _plan(client, group_setup)
        ready_url = f"{group_setup.url}/plans/{plan['id']}/ready"

        first = await client.post(ready_url, json={"is_ready": True}, headers=group_setup.owner)
        assert first.json()["ready_count"] == 1
        assert first.json()["percentage"] == 50
        assert first.json()["status"] == "brainstorming"

        second = await client.post(ready_url, json={"is_ready": True}, headers=group_setup.friend)
        assert second.json()["all_ready"] is True
        assert second.json()["status"] == "voting"

        readiness = await client.get(f"{group_setup.url}/plans/{plan['id']}/readiness", headers=group_setup.owner)
        assert readiness.json()["status"] == "voting"

    async def test_create_trip_from_plan(self, client, group_setup):
        plan = await _plan(client, group_setup)
        pid = plan["id"]
        porto = await _idea(client, group_setup, group_setup.owner, title="Porto", type="destination", plan_id=pid)
        await _idea(client, group_setup, group_setup.owner, title="Lisbon", type="destination", plan_id=pid)
        await _idea(
            client, group_setup, group_setup.friend, title="June", type="date", plan_id=pid,
            start_date="2026-06-10", end_date="2026-06-14",
        )
        await _idea(client, group_setup, group_setup.friend, title="Port tasting", type="activity", plan_id=pid)
        disliked = await _idea(client, group_setup, group_setup.friend, title="Casino", type="place", plan_id=pid)
        await _idea(client, group_setup, group_setup.friend, title="Bring sunscreen", type="note", plan_id=pid)
        await client.post(f"{group_setup.url}/ideas/{porto['id']}/vote", json={"vote_type": "up"}, headers=group_setup.friend)
        await client.post(f"{group_setup.url}/ideas/{disliked['id']}/vote", json={"vote_type": "down"}, headers=group_setup.owner)

        resp = await client.post(f"{group_setup.url}/plans/{pid}/create-trip", headers=group_setup.owner)

        assert resp.status_code == 201
        trip = resp.json()["trip"]
        assert resp.json()["plan_id"] == pid
        assert trip["destination_name"] == "Porto"
        assert trip["start_date"] == "2026-06-10"
        assert trip["duration_days"] == 5

        friend_view = await client.get(f"/api/trips/{trip['id']}", headers=group_setup.friend)
        assert friend_view.json()["user_role"] == "editor"

        itinerary = await client.get(f"/api/trips/{trip['id']}/itinerary", headers=group_setup.owner)
        assert [i["title"] for i in itinerary.json()["data"]["items"]] == ["Port tasting"]

        plan_after = await client.get(f"{group_setup.url}/plans/{pid}", headers=group_setup.owner)
        assert plan_after.json()["plan"]["status"] == "completed"
        assert plan_after.json()["plan"]["trip_id"] == trip["id"]

        again = await client.post(f"{group_setup.url}/plans/{pid}/create-trip", headers=group_setup.owner)
        assert again.status_code == 400

    async def test_only_admin_converts(self, client, group_setup):
        plan = await _plan(client, group_setup)
        resp = await client.post(f"{group_setup.url}/plans/{plan['id']}/create-trip", headers=group_setup.friend)
        assert resp.status_code == 403

    async def test_unknown_plan(self, client, group_setup):
        resp = await client.get(f"{group_setup.url}/plans/{uuid.uuid4()}", headers=group_setup.owner)
        assert resp.status_code == 404
