"""
OGCS CRM - MongoDB handle

The handle is built by the app factory and opened/closed by the server
lifecycle events. Routes receive the database through `get_db`.
"""

import logging

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger("database")


class MongoHandle:
    def __init__(self, url: str, db_name: str):
        self.url = url
        self.db_name = db_name
        self.client = None
        self.db = None

    def open(self):
        if self.client is None:
            self.client = AsyncIOMotorClient(self.url)
            self.db = self.client[self.db_name]
            logger.info(f"[DB] Connected to database: {self.db_name}")
        return self.db

    def close(self):
        if self.client is not None:
            self.client.close()
            logger.info(f"[DB] Closed connection to {self.db_name}")
        self.client = None
        self.db = None


async def ensure_indexes(db):
    """Create the indexes the location reports rely on"""
    await db.location_samples.create_index("id", unique=True)
    await db.location_samples.create_index([("owner_id", ASCENDING), ("captured_at", DESCENDING)])
    await db.location_samples.create_index([("captured_at", DESCENDING)])
    await db.users.create_index("id", unique=True)
    await db.users.create_index("email", unique=True)
    await db.sessions.create_index("token")
    await db.sessions.create_index("expires_at")


def get_db(request: Request):
    """FastAPI dependency: the database opened for this app"""
    handle = request.app.state.mongo
    if handle.db is None:
        handle.open()
    return handle.db
