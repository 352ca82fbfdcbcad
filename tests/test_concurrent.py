"""Tests that concurrent shorten requests never share a short code.

Requests are interleaved on one event loop; the SQLite store runs each call in
its own thread and connection, so inserts genuinely overlap.
"""

import asyncio

import pytest

from conftest import count_rows


@pytest.mark.asyncio
class TestConcurrentAllocation:
    """Stress the allocate-then-insert protocol."""

    async def test_concurrent_service_shortens_are_unique(self, service, db_path):
        concurrency = 100
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]

        codes = await asyncio.gather(*(service.shorten(url) for url in urls))

        assert len(set(codes)) == concurrency
        assert count_rows(db_path) == concurrency
        for code, url in zip(codes, urls):
            assert await service.resolve(code) == url

    async def test_concurrent_shorten_requests(self, client, db_path):
        """Many concurrent POST /api/shorten; all succeed with unique codes."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [
            client.post("/api/shorten", json={"long_url": url})
            for url in urls
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        short_codes = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 201, f"Request {i}: status {r.status_code} body={r.text}"
            data = r.json()
            assert data["long_url"] == urls[i]
            short_codes.append(data["short_code"])

        assert len(short_codes) == len(set(short_codes)), "All short_codes must be unique under concurrency"
        assert count_rows(db_path) == concurrency

    async def test_concurrent_redirect_requests(self, client):
        """Create one short URL, then many concurrent redirects all succeed."""
        create_resp = await client.post(
            "/api/shorten",
            json={"long_url": "https://example.com/redirect-target"},
        )
        assert create_resp.status_code == 201
        short_code = create_resp.json()["short_code"]

        tasks = [
            client.get(f"/{short_code}", follow_redirects=False)
            for _ in range(20)
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 301, f"Request {i}: status {r.status_code}"
            assert r.headers.get("location") == "https://example.com/redirect-target"
