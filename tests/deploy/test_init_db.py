"""Tests for deploy/init_db.py schema bootstrap."""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from deploy.init_db import init_db
from feedback_collector.store import FeedbackStore


@pytest.mark.asyncio
async def test_init_db_creates_feedback_table(test_db_url, capsys):
    await init_db(test_db_url)
    assert "initialized successfully" in capsys.readouterr().out

    store = FeedbackStore(test_db_url)
    await store.connect()
    try:
        assert await store.count() == 0
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_init_db_is_idempotent(test_db_url):
    await init_db(test_db_url)
    await init_db(test_db_url)
