"""Tests for groups and group membership."""
import pytest

from app.config import settings


async def _create_group(client, headers, **fields):
    resp = await client.post("/api/groups", json={"name": "Porto crew", **fields}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestGroups:

    async def test_create_and_list(self, client, register):
        headers, user = await register("maya@mail.com")
        group = await _create_group(client, headers, emoji="🍷")

        assert group["created_by"] == user["id"]
        assert group["slug"]

        listed = await client.get("/api/groups", headers=headers)
        groups = listed.json()["groups"]
        assert [g["id"] for g in groups] == [group["id"]]
        assert groups[0]["role"] == "admin"
        assert groups[0]["member_count"] == 1

    async def test_guest_group(self, client):
        resp = await client.post("/api/groups/guest", json={"name": "Weekend away"})

        assert resp.status_code == 201
        token = resp.json()["guest_token"]
        assert client.cookies.get(settings.guest_cookie_name) == token

        listed = await client.get("/api/groups")
        assert [g["name"] for g in listed.json()["groups"]] == ["Weekend away"]

    async def test_detail(self, client, register):
        headers, user = await register("maya@mail.com", "Maya")
        group = await _create_group(client, headers)

        resp = await client.get(f"/api/groups/{group['id']}", headers=headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["user_role"] == "admin"
        assert body["plans"] == []
        assert [m["name"] for m in body["members"]] == ["Maya"]

    async def test_private_group_hidden_from_outsiders(self, client, register):
        owner, _ = await register("maya@mail.com")
        outsider, _ = await register("ines@mail.com")
        group = await _create_group(client, owner)

        assert (await client.get(f"/api/groups/{group['id']}", headers=outsider)).status_code == 403

    async def test_public_group_visible_to_anyone(self, client, register):
        owner, _ = await register("maya@mail.com")
        group = await _create_group(client, owner, visibility="public")

        resp = await client.get(f"/api/groups/{group['id']}")
        assert resp.status_code == 200
        assert resp.json()["user_role"] is None

    async def test_update_needs_admin(self, client, register):
        owner, _ = await register("maya@mail.com")
        member, member_user = await register("ines@mail.com")
        group = await _create_group(client, owner)
        await client.post(f"/api/groups/{group['id']}/members", json={"user_id": member_user["id"]}, headers=owner)

        denied = await client.patch(f"/api/groups/{group['id']}", json={"name": "Renamed"}, headers=member)
        allowed = await client.patch(f"/api/groups/{group['id']}", json={"name": "Renamed"}, headers=owner)

        assert denied.status_code == 403
        assert allowed.json()["name"] == "Renamed"
        assert (await client.patch(f"/api/groups/{group['id']}", json={}, headers=owner)).status_code == 400

    @pytest.mark.parametrize("field", ["name", "visibility"])
    async def test_required_field_cannot_be_cleared(self, client, register, field):
        owner, _ = await register("maya@mail.com")
        group = await _create_group(client, owner)

        resp = await client.patch(f"/api/groups/{group['id']}", json={field: None}, headers=owner)

        assert resp.status_code == 400
        detail = await client.get(f"/api/groups/{group['id']}", headers=owner)
        assert detail.json()["group"]["name"] == "Porto crew"

    async def test_delete(self, client, register):
        owner, _ = await register("maya@mail.com")
        group = await _create_group(client, owner)

        assert (await client.delete(f"/api/groups/{group['id']}", headers=owner)).status_code == 200
        assert (await client.get(f"/api/groups/{group['id']}", headers=owner)).status_code == 404


class TestGroupMembers:

    async def test_add_member(self, client, register):
        owner, _ = await register("maya@mail.com")
        _, friend = await register("ines@mail.com")
        group = await _create_group(client, owner)

        resp = await client.post(
            f"/api/groups/{group['id']}/members", json={"user_id": friend["id"]}, headers=owner
        )
        assert resp.status_code == 201
        assert resp.json() == {"user_id": friend["id"], "role": "member", "status": "active"}

        again = await client.post(
            f"/api/groups/{group['id']}/members", json={"user_id": friend["id"]}, headers=owner
        )
        assert again.status_code == 400

    async def test_add_unknown_user(self, client, register):
        owner, _ = await register("maya@mail.com")
        group = await _create_group(client, owner)
        resp = await client.post(
            f"/api/groups/{group['id']}/members",
            json={"user_id": "00000000-0000-0000-0000-000000000000"},
            headers=owner,
        )
        assert resp.status_code == 404

    async def test_member_cannot_add(self, client, register):
        owner, _ = await register("maya@mail.com")
        member, member_user = await register("ines@mail.com")
        _, third = await register("joao@mail.com")
        group = await _create_group(client, owner)
        await client.post(f"/api/groups/{group['id']}/members", json={"user_id": member_user["id"]}, headers=owner)

        resp = await client.post(
            f"/api/groups/{group['id']}/members", json={"user_id": third["id"]}, headers=member
        )
        assert resp.status_code == 403

    async def test_leave_and_remove(self, client, register):
        owner, _ = await register("maya@mail.com")
        ines, ines_user = await register("ines@mail.com")
        _, joao_user = await register("joao@mail.com")
        group = await _create_group(client, owner)
        for user in (ines_user, joao_user):
            await client.post(f"/api/groups/{group['id']}/members", json={"user_id": user["id"]}, headers=owner)

        left = await client.delete(f"/api/groups/{group['id']}/members/{ines_user['id']}", headers=ines)
        removed = await client.delete(f"/api/groups/{group['id']}/members/{joao_user['id']}", headers=owner)

        assert left.json()["status"] == "left"
        assert removed.json()["status"] == "removed"
        members = await client.get(f"/api/groups/{group['id']}/members", headers=owner)
        assert len(members.json()["members"]) == 1

    async def test_removed_member_can_be_readded(self, client, register):
        owner, _ = await register("maya@mail.com")
        ines, ines_user = await register("ines@mail.com")
        group = await _create_group(client, owner)
        url = f"/api/groups/{group['id']}/members"
        await client.post(url, json={"user_id": ines_user["id"]}, headers=owner)
        await client.delete(f"{url}/{ines_user['id']}", headers=ines)

        resp = await client.post(url, json={"user_id": ines_user["id"], "role": "admin"}, headers=owner)
        assert resp.status_code == 201
        assert resp.json()["role"] == "admin"

    async def test_last_admin_rules(self, client, register):
        owner, owner_user = await register("maya@mail.com")
        group = await _create_group(client, owner)

        leave = await client.delete(f"/api/groups/{group['id']}/members/{owner_user['id']}", headers=owner)
        demote = await client.patch(
            f"/api/groups/{group['id']}/members/{owner_user['id']}", json={"role": "member"}, headers=owner
        )

        assert leave.status_code == 400
        assert demote.status_code == 400
