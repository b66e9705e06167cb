#!/usr/bin/env python3
"""
Initialize database schema for production.
Run this once after setting up PostgreSQL.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedback_collector.config import load_settings
from feedback_collector.store import FeedbackStore


async def init_db(database_url: str) -> None:
    """Create all tables."""
    store = FeedbackStore(database_url)
    await store.connect(create_tables=True)
    await store.close()
    print("Database schema initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db(load_settings().database_url))
