from datetime import datetime, timedelta, timezone
from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager

from feedback_collector.client import FeedbackGateway, open_gateway
from feedback_collector.config import Settings
from feedback_collector.main import create_app
from feedback_collector.models import Feedback, FeedbackCategory
from feedback_collector.store import FeedbackStore

SEED_BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def test_db_url(tmp_path) -> str:
    db_path = tmp_path / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture()
def settings(test_db_url: str) -> Settings:
    return Settings(
        database_url=test_db_url,
        debug=True,
        create_all=True,
        search_debounce_ms=50,
    )


@pytest.fixture()
def store(test_db_url: str) -> FeedbackStore:
    return FeedbackStore(test_db_url)


@pytest.fixture()
def app(settings: Settings, store: FeedbackStore):
    return create_app(settings, store=store)


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


@pytest_asyncio.fixture()
async def connected_store(store: FeedbackStore) -> AsyncIterator[FeedbackStore]:
    await store.connect(create_tables=True)
    yield store
    await store.close()


@pytest.fixture()
def seed(store: FeedbackStore):
    """
    Insert records directly, bypassing the API.

    Record i is created ``i`` minutes before SEED_BASE_TIME unless
    ``created_at`` is given, so the newest-first order is deterministic.
    """
    async def _seed(count: int = 1, **overrides) -> list:
        records = []
        async with store.session() as session:
            for i in range(count):
                values = {
                    "name": f"User {i}",
                    "email": f"user{i}@example.com",
                    "message": f"Feedback message number {i}",
                    "rating": 4,
                    "category": FeedbackCategory.GENERAL,
                    "created_at": SEED_BASE_TIME - timedelta(minutes=i),
                }
                values.update(overrides)
                record = Feedback(**values)
                session.add(record)
                records.append(record)
            await session.commit()
        return records

    return _seed


@pytest_asyncio.fixture()
async def gateway(app) -> AsyncIterator[FeedbackGateway]:
    """Client gateway talking to the app in-process."""
    async with LifespanManager(app):
        async with open_gateway("http://testserver", transport=ASGITransport(app=app)) as gw:
            yield gw
