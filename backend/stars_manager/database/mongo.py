"""
MongoDB connection for the API process.

A single MongoClient is shared by every request; it pools connections
itself. Datetimes come back timezone-aware (UTC).
"""

import logging
from typing import Iterator, Optional

from pymongo import MongoClient
from pymongo.database import Database

from stars_manager.config import settings

logger = logging.getLogger(__name__)

_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            tz_aware=True,
        )
        logger.debug(f"Connected MongoDB client for database {settings.MONGODB_DB_NAME}")
    return _client


def get_database() -> Database:
    return get_client()[settings.MONGODB_DB_NAME]


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_db() -> Iterator[Database]:
    """FastAPI dependency yielding the application database."""
    yield get_database()
