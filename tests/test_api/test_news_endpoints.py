from datetime import datetime, timedelta

import pytest

from src.news.models.news_article import NewsArticle


def seed(db, count, **overrides):
    now = datetime.now()
    for n in range(count):
        data = dict(
            title=f"Seeded story {n}",
            url=f"https://seed.example.com/{n}",
            source="Seed Wire",
            description=f"Seeded description {n}",
            country="us",
            language="en",
            category="general",
            published_at=now - timedelta(minutes=n),
            fetched_at=now,
        )
        data.update(overrides)
        db.add(NewsArticle(**data))
    db.commit()


class TestNewsEndpoints:
    @pytest.mark.asyncio
    async def test_list_news_paginated(self, async_client, test_db):
        seed(test_db, 45)

        response = await async_client.get("/api/v1/news", params={"page": 2, "size": 20})

        assert response.status_code == 200
        body = response.json()
        assert len(body["articles"]) == 5
        assert body["total_elements"] == 45
        assert body["total_pages"] == 3
        assert body["has_next"] is False
        assert body["has_previous"] is True
        assert body["available_countries"] == ["us"]

    @pytest.mark.asyncio
    async def test_list_news_first_page(self, async_client, test_db):
        seed(test_db, 45)

        response = await async_client.get("/api/v1/news", params={"page": 0, "size": 20})

        assert response.status_code == 200
        body = response.json()
        assert len(body["articles"]) == 20
        assert body["current_page"] == 0
        assert body["has_next"] is True
        assert body["has_previous"] is False

    @pytest.mark.asyncio
    async def test_size_out_of_range_rejected(self, async_client):
        response = await async_client.get("/api/v1/news", params={"size": 101})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_short_keyword_rejected(self, async_client):
        response = await async_client.get("/api/v1/news", params={"keyword": "a"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_PARAMETERS"

    @pytest.mark.asyncio
    async def test_search(self, async_client, test_db):
        seed(test_db, 3)

        ok = await async_client.get("/api/v1/news/search", params={"keyword": "story 1"})
        too_short = await async_client.get("/api/v1/news/search", params={"keyword": "x"})
        missing = await async_client.get("/api/v1/news/search")

        assert ok.status_code == 200
        assert ok.json()["total_elements"] == 1
        assert too_short.status_code == 400
        assert missing.status_code == 400

    @pytest.mark.asyncio
    async def test_today(self, async_client, test_db):
        seed(test_db, 2)

        response = await async_client.get("/api/v1/news/today")

        assert response.status_code == 200
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_refresh_runs_in_background(self, async_client, test_db):
        response = await async_client.post("/api/v1/news/refresh", params={"category": "technology"})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "News refresh initiated successfully"
        assert "timestamp" in body

        stored = test_db.query(NewsArticle).all()
        assert len(stored) == 3
        assert {a.category for a in stored} == {"technology"}

    @pytest.mark.asyncio
    async def test_refresh_then_query_sees_new_articles(self, async_client):
        before = await async_client.get("/api/v1/news")
        await async_client.post("/api/v1/news/refresh")
        after = await async_client.get("/api/v1/news")

        assert before.json()["total_elements"] == 0
        assert after.json()["total_elements"] == 3

    @pytest.mark.asyncio
    async def test_refresh_with_short_keyword_rejected(self, async_client):
        response = await async_client.post("/api/v1/news/refresh", params={"keyword": "a"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_clear_cache(self, async_client, cache):
        cache.set("news", "k", "v")

        response = await async_client.post("/api/v1/news/cache/clear")

        assert response.status_code == 200
        assert response.json()["message"] == "Cache cleared successfully"
        assert cache.get("news", "k") is None
