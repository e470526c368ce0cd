"""Tests for trip forms and their responses."""
import pytest


@pytest.fixture
async def form_setup(client, register, create_trip, add_trip_member):
    owner, _ = await register("maya@mail.com")
    member, member_user = await register("ines@mail.com")
    trip = await create_trip(owner)
    await add_trip_member(trip["id"], member_user["id"], "contributor")
    return trip, owner, member


def _form_payload(**overrides):
    payload = {
        "title": "Accommodation preferences",
        "status": "published",
        "questions": [
            {"label": "How much do you want to spend?", "question_type": "rating", "required": True},
            {"label": "Hotel or apartment?", "question_type": "single_choice", "options": ["Hotel", "Apartment"]},
            {"label": "Anything else?", "question_type": "long_text"},
        ],
    }
    payload.update(overrides)
    return payload


async def _create_form(client, trip, headers, **overrides):
    resp = await client.post(f"/api/trips/{trip['id']}/forms", json=_form_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestManageForms:

    async def test_create_with_ordered_questions(self, client, form_setup):
        trip, owner, member = form_setup
        form = await _create_form(client, trip, owner)

        assert [q["position"] for q in form["questions"]] == [0, 1, 2]
        assert form["questions"][0]["required"] is True

        listed = await client.get(f"/api/trips/{trip['id']}/forms", headers=member)
        assert [f["id"] for f in listed.json()] == [form["id"]]

    async def test_contributor_cannot_create(self, client, form_setup):
        trip, _, member = form_setup
        resp = await client.post(f"/api/trips/{trip['id']}/forms", json=_form_payload(), headers=member)
        assert resp.status_code == 403

    async def test_template_questions_are_copied(self, client, form_setup):
        trip, owner, _ = form_setup
        template = await _create_form(client, trip, owner, is_template=True)

        form = await _create_form(
            client, trip, owner,
            title="Copy", template_id=template["id"], questions=[{"label": "Dietary needs?"}],
        )

        labels = [q["label"] for q in form["questions"]]
        assert labels[:3] == [q["label"] for q in template["questions"]]
        assert labels[3] == "Dietary needs?"

    async def test_plain_form_is_not_a_template(self, client, form_setup):
        trip, owner, _ = form_setup
        plain = await _create_form(client, trip, owner)

        resp = await client.post(
            f"/api/trips/{trip['id']}/forms", json=_form_payload(template_id=plain["id"]), headers=owner
        )
        assert resp.status_code == 404

    async def test_template_from_unreadable_trip_refused(self, client, register, create_trip, form_setup):
        trip, owner, _ = form_setup
        private = await _create_form(
            client, trip, owner, status="draft", is_template=True,
            questions=[{"label": "Passport number?"}],
        )
        other, _ = await register("joao@mail.com")
        other_trip = await create_trip(other, name="Joao's trip")

        direct = await client.get(f"/api/forms/{private['id']}", headers=other)
        copied = await client.post(
            f"/api/trips/{other_trip['id']}/forms",
            json={"title": "Copy", "template_id": private["id"]},
            headers=other,
        )

        assert direct.status_code == 403
        assert copied.status_code == 403

    async def test_public_template_usable_from_any_trip(self, client, register, create_trip, form_setup):
        trip, owner, _ = form_setup
        shared = await _create_form(client, trip, owner, is_template=True, visibility="public")
        other, _ = await register("joao@mail.com")
        other_trip = await create_trip(other, name="Joao's trip")

        copied = await client.post(
            f"/api/trips/{other_trip['id']}/forms",
            json={"title": "Copy", "template_id": shared["id"]},
            headers=other,
        )

        assert copied.status_code == 201
        assert len(copied.json()["questions"]) == 3

    async def test_update_and_delete(self, client, form_setup):
        trip, owner, _ = form_setup
        form = await _create_form(client, trip, owner, status="draft")
        url = f"/api/trips/{trip['id']}/forms/{form['id']}"

        patched = await client.patch(url, json={"status": "archived"}, headers=owner)
        assert patched.json()["status"] == "archived"
        assert (await client.patch(url, json={}, headers=owner)).status_code == 400
        for field in ("title", "status", "visibility", "allow_anonymous"):
            assert (await client.patch(url, json={field: None}, headers=owner)).status_code == 400

        assert (await client.delete(url, headers=owner)).status_code == 200
        assert (await client.get(f"/api/forms/{form['id']}", headers=owner)).status_code == 404


class TestResponses:

    async def test_submit_and_summarise(self, client, form_setup):
        trip, owner, member = form_setup
        form = await _create_form(client, trip, owner)
        rating, choice, free_text = [q["id"] for q in form["questions"]]
        url = f"/api/forms/{form['id']}/responses"

        first = await client.post(url, json={"answers": {rating: 4, choice: "Hotel"}}, headers=member)
        second = await client.post(
            url, json={"answers": {rating: 3, choice: "Hotel", free_text: ""}}, headers=owner
        )
        assert first.status_code == 201
        assert second.json()["answers"] == {rating: 3, choice: "Hotel"}

        summary = await client.get(f"/api/forms/{form['id']}/summary", headers=owner)
        body = summary.json()
        assert body["response_count"] == 2
        by_label = {q["label"]: q for q in body["questions"]}
        assert by_label["How much do you want to spend?"]["average"] == 3.5
        assert by_label["Hotel or apartment?"]["counts"] == {"Hotel": 2}

    async def test_summary_needs_manager(self, client, form_setup):
        trip, owner, member = form_setup
        form = await _create_form(client, trip, owner)
        assert (await client.get(f"/api/forms/{form['id']}/summary", headers=member)).status_code == 403

    @pytest.mark.parametrize(
        "answers_for",
        [
            lambda q: {},
            lambda q: {q[0]: "lots"},
            lambda q: {q[0]: 3, "00000000-0000-0000-0000-000000000000": "?"},
        ],
    )
    async def test_invalid_answers(self, client, form_setup, answers_for):
        trip, owner, member = form_setup
        form = await _create_form(client, trip, owner)
        question_ids = [q["id"] for q in form["questions"]]

        resp = await client.post(
            f"/api/forms/{form['id']}/responses", json={"answers": answers_for(question_ids)}, headers=member
        )
        assert resp.status_code == 400

    async def test_draft_form_rejects_responses(self, client, form_setup):
        trip, owner, member = form_setup
        form = await _create_form(client, trip, owner, status="draft")
        rating = form["questions"][0]["id"]

        resp = await client.post(f"/api/forms/{form['id']}/responses", json={"answers": {rating: 5}}, headers=member)
        assert resp.status_code == 400

    async def test_anonymous_needs_permission(self, client, form_setup):
        trip, owner, _ = form_setup
        form = await _create_form(client, trip, owner)
        rating = form["questions"][0]["id"]

        resp = await client.post(f"/api/forms/{form['id']}/responses", json={"answers": {rating: 5}})
        assert resp.status_code == 401

    async def test_public_anonymous_form(self, client, form_setup):
        trip, owner, _ = form_setup
        form = await _create_form(client, trip, owner, visibility="public", allow_anonymous=True)
        rating = form["questions"][0]["id"]

        viewed = await client.get(f"/api/forms/{form['id']}")
        submitted = await client.post(f"/api/forms/{form['id']}/responses", json={"answers": {rating: 5}})

        assert viewed.status_code == 200
        assert submitted.status_code == 201
        assert submitted.json()["respondent_id"] is None

    async def test_private_form_hidden_from_outsiders(self, client, register, form_setup):
        trip, owner, _ = form_setup
        outsider, _ = await register("joao@mail.com")
        form = await _create_form(client, trip, owner)

        assert (await client.get(f"/api/forms/{form['id']}", headers=outsider)).status_code == 403
