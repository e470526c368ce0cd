"""Tests for trip downloads and activity ideas."""
import csv
import io

import pytest


@pytest.fixture
async def planned_trip(client, register, create_trip):
    headers, _ = await register("maya@mail.com", "Maya")
    trip = await create_trip(
        headers,
        destination="Lisbon",
        description="Beach days, seafood and a hike in Sintra",
        start_date="2026-05-01",
        end_date="2026-05-02",
    )
    resp = await client.post(
        f"/api/trips/{trip['id']}/itinerary",
        json={"title": "Tram 28", "day_number": 2, "start_time": "09:30"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return trip, headers


class TestDownloads:

    async def test_calendar(self, client, planned_trip):
        trip, headers = planned_trip

        resp = await client.get(f"/api/trips/{trip['id']}/calendar.ics", headers=headers)

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "text/calendar; charset=utf-8"
        assert resp.headers["content-disposition"] == 'attachment; filename="lisbon-long-weekend.ics"'
        lines = resp.text.split("\r\n")
        assert lines[0] == "BEGIN:VCALENDAR"
        assert "DTSTART;VALUE=DATE:20260501" in lines
        assert "DTEND;VALUE=DATE:20260503" in lines
        assert "DTSTART:20260502T093000" in lines
        assert "DTEND:20260502T103000" in lines
        assert lines.count("BEGIN:VEVENT") == 2

    async def test_itinerary_pdf(self, client, planned_trip):
        trip, headers = planned_trip

        resp = await client.get(f"/api/trips/{trip['id']}/itinerary.pdf", headers=headers)

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF")

    async def test_expenses_csv(self, client, planned_trip):
        trip, headers = planned_trip
        await client.post(
            f"/api/trips/{trip['id']}/expenses",
            json={"title": "Pasteis de nata", "amount": 7.5, "category": "food", "currency": "EUR", "date": "2026-05-01"},
            headers=headers,
        )

        resp = await client.get(f"/api/trips/{trip['id']}/expenses.csv", headers=headers)

        assert resp.headers["content-type"] == "text/csv; charset=utf-8"
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows[0] == ["date", "title", "category", "amount", "currency", "paid_by", "notes"]
        assert rows[1] == ["2026-05-01", "Pasteis de nata", "food", "7.50", "EUR", "Maya", ""]

    async def test_private_trip_hidden(self, client, register, planned_trip):
        trip, _ = planned_trip
        outsider, _ = await register("ines@mail.com")

        resp = await client.get(f"/api/trips/{trip['id']}/calendar.ics", headers=outsider)
        assert resp.status_code == 403


class TestActivityIdeas:

    async def test_ideas_for_trip(self, client, planned_trip):
        trip, headers = planned_trip

        resp = await client.get(f"/api/trips/{trip['id']}/activity-ideas", params={"count": 3}, headers=headers)

        assert resp.status_code == 200
        body = resp.json()
        assert body["destination"] == "Lisbon"
        assert "beach" in body["keywords"]
        assert len(body["ideas"]) == 3
        assert {"title", "description", "category", "activity_type", "duration", "relevance_score"} <= set(body["ideas"][0])

    @pytest.mark.parametrize("count", [0, 21])
    async def test_count_bounds(self, client, planned_trip, count):
        trip, headers = planned_trip
        resp = await client.get(f"/api/trips/{trip['id']}/activity-ideas", params={"count": count}, headers=headers)
        assert resp.status_code == 422
