"""
OGCS CRM - Seed Test Users (dev/staging only)
Creates test accounts with predictable credentials.
Run: python scripts/seed_users.py
Reset: python scripts/seed_users.py --reset
"""

import asyncio
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import MONGO_URL, DB_NAME, hash_password, now_iso
from database import MongoHandle, ensure_indexes
from models.auth import VALID_ROLES

# Same password for all test accounts
TEST_PASSWORD = "OgcsTest2026!"

TEST_USERS = [
    {"email": "admin@test.local",  "name": "Admin Test",  "phone": "+91 90000-00001", "role": "admin"},
    {"email": "sales1@test.local", "name": "Sales One",   "phone": "+91 90000-00002", "role": "sales"},
    {"email": "sales2@test.local", "name": "Sales Two",   "phone": "+91 90000-00003", "role": "sales"},
]


async def reset(db):
    """Delete all test.local users and their sessions"""
    users = await db.users.find({"email": {"$regex": "@test\\.local$"}}, {"id": 1}).to_list(length=None)
    ids = [u["id"] for u in users if u.get("id")]
    result = await db.users.delete_many({"email": {"$regex": "@test\\.local$"}})
    await db.sessions.delete_many({"user_id": {"$in": ids}})
    print(f"Deleted {result.deleted_count} test users")


async def seed(db):
    """Create/update test users"""
    for u in TEST_USERS:
        if u["role"] not in VALID_ROLES:
            raise ValueError(f"Invalid role: {u['role']}. Valid: {VALID_ROLES}")
        existing = await db.users.find_one({"email": u["email"]})
        doc = {
            "email": u["email"],
            "password": hash_password(TEST_PASSWORD),
            "name": u["name"],
            "phone": u["phone"],
            "role": u["role"],
            "is_active": True,
        }
        if existing:
            await db.users.update_one({"email": u["email"]}, {"$set": doc})
            print(f"  Updated: {u['email']} ({u['role']})")
        else:
            doc["id"] = str(uuid.uuid4())
            doc["created_at"] = now_iso()
            await db.users.insert_one(doc)
            print(f"  Created: {u['email']} ({u['role']})")


async def main():
    mongo = MongoHandle(MONGO_URL, DB_NAME)
    db = mongo.open()
    await ensure_indexes(db)

    if "--reset" in sys.argv:
        await reset(db)
        print("Reset complete. Run without --reset to re-seed.")
    else:
        await seed(db)
        print(f"\n{len(TEST_USERS)} test users seeded. Password for all: {TEST_PASSWORD}")
        print("Reset: python scripts/seed_users.py --reset")

    mongo.close()


if __name__ == "__main__":
    asyncio.run(main())
