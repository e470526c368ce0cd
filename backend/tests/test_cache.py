"""Tests for the cache wrapper and public trip page invalidation."""
import uuid

import pytest

from app.services.cache_service import CacheService


class TestDisabledCache:

    async def test_reads_miss_and_writes_report_failure(self):
        cache = CacheService()

        assert await cache.get("anything") is None
        assert await cache.set("anything", {"a": 1}, ttl=60) is False
        assert await cache.get_poll_counts(uuid.uuid4()) is None

    async def test_invalidation_is_harmless(self):
        cache = CacheService()

        await cache.invalidate_poll(uuid.uuid4())
        await cache.invalidate_public_trip(None)
        await cache.close()

    def test_keys(self):
        poll_id = uuid.uuid4()
        assert CacheService.poll_key(poll_id) == f"poll:{poll_id}:counts"
        assert CacheService.public_trip_key("lisbon-3f9a1c") == "trip:public:lisbon-3f9a1c"


class FakeCache:
    """In-memory stand-in for the public trip page cache."""

    def __init__(self):
        self.pages = {}
        self.invalidated = []

    async def get_public_trip(self, slug):
        return self.pages.get(slug)

    async def set_public_trip(self, slug, data):
        self.pages[slug] = data

    async def invalidate_public_trip(self, slug):
        if slug:
            self.invalidated.append(slug)
            self.pages.pop(slug, None)


@pytest.fixture
def fake_cache(monkeypatch):
    cache = FakeCache()
    monkeypatch.setattr("app.services.trip_service.cache_service", cache)
    monkeypatch.setattr("app.services.itinerary_service.cache_service", cache)
    return cache


class TestPublicTripInvalidation:

    async def test_itinerary_edits_refresh_public_page(self, client, register, create_trip, fake_cache):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers, privacy_setting="public")
        slug = trip["public_slug"]
        page_url = f"/api/trips/public/{slug}"
        items_url = f"/api/trips/{trip['id']}/itinerary"

        assert (await client.get(page_url)).status_code == 200
        assert slug in fake_cache.pages

        created = await client.post(items_url, json={"title": "Tram 28"}, headers=headers)
        assert fake_cache.invalidated == [slug]

        page = (await client.get(page_url)).json()
        assert [i["title"] for i in page["items"]] == ["Tram 28"]

        item_id = created.json()["data"]["id"]
        await client.patch(f"{items_url}/{item_id}", json={"title": "Tram 12"}, headers=headers)
        await client.post(f"{items_url}/reorder", json={"item_ids": [item_id]}, headers=headers)
        await client.delete(f"{items_url}/{item_id}", headers=headers)

        assert fake_cache.invalidated == [slug] * 4
        assert (await client.get(page_url)).json()["items"] == []

    async def test_private_trip_edits_skip_cache(self, client, register, create_trip, fake_cache):
        headers, _ = await register("maya@mail.com")
        trip = await create_trip(headers)

        await client.post(f"/api/trips/{trip['id']}/itinerary", json={"title": "Tram 28"}, headers=headers)

        assert fake_cache.invalidated == []
