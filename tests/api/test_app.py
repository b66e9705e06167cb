import logging
from unittest.mock import AsyncMock, patch

import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from feedback_collector.config import Settings
from feedback_collector.main import create_app
from feedback_collector.store import FeedbackStore


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Feedback Collector API is running!"
    assert data["timestamp"]


@pytest.mark.asyncio
async def test_unknown_api_path_is_not_found(client):
    resp = await client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"message": "API endpoint not found"}


@pytest.mark.asyncio
async def test_unhandled_error_exposes_detail_in_debug(client):
    with patch.object(FeedbackStore, "find", new=AsyncMock(side_effect=RuntimeError("kaboom"))):
        resp = await client.get("/api/feedback")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Something went wrong!", "error": "kaboom"}


@pytest.mark.asyncio
async def test_unhandled_error_is_logged_with_request_context(client, caplog):
    with patch.object(FeedbackStore, "find", new=AsyncMock(side_effect=RuntimeError("kaboom"))):
        with caplog.at_level(logging.ERROR, logger="FeedbackCollector"):
            await client.get("/api/feedback")
    assert "Unhandled exception occurred" in caplog.text
    assert "method=GET" in caplog.text
    assert "path=/api/feedback" in caplog.text
    assert "RuntimeError: kaboom" in caplog.text


@pytest.mark.asyncio
async def test_unhandled_error_hides_detail_in_production(test_db_url, store):
    app = create_app(Settings(database_url=test_db_url, debug=False, create_all=True), store=store)
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            with patch.object(FeedbackStore, "find", new=AsyncMock(side_effect=RuntimeError("kaboom"))):
                resp = await ac.get("/api/feedback")
    assert resp.status_code == 500
    assert resp.json() == {"message": "Something went wrong!"}


@pytest.mark.asyncio
async def test_dashboard_page(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    body = resp.text
    assert "Feedback Collector" in body
    assert "Bug Report" in body
    # debounce delay from settings
    assert "const DEBOUNCE_MS = 50;" in body


@pytest.mark.asyncio
async def test_dashboard_form_checks_length_limits(client):
    body = (await client.get("/")).text
    assert "name.length > 200" in body
    assert "Name must be at most 200 characters" in body
    assert "email.length > 200" in body
    assert "Email must be at most 200 characters" in body
    assert "message.length > 5000" in body
    assert "Message must be at most 5000 characters" in body
