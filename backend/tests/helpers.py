"""
Seed helpers shared by the location tests.
"""

import uuid
from datetime import datetime, timedelta, timezone

from config import hash_password, now_iso
from services.day_window import to_storage

IST = timezone(timedelta(hours=5, minutes=30))
PASSWORD = "OgcsTest2026!"


def ist(year, month, day, hour=0, minute=0, second=0):
    """Aware datetime in India Standard Time."""
    return datetime(year, month, day, hour, minute, second, tzinfo=IST)


async def create_user(db, name="Sales User", email=None, phone="+91 98765-43210",
                      role="sales", is_active=True):
    user = {
        "id": str(uuid.uuid4()),
        "name": name,
        "email": email or f"{uuid.uuid4().hex[:8]}@test.local",
        "phone": phone,
        "role": role,
        "is_active": is_active,
        "password": hash_password(PASSWORD),
        "created_at": now_iso(),
    }
    await db.users.insert_one(dict(user))
    return user


async def create_session(db, user):
    token = f"token-{uuid.uuid4().hex}"
    await db.sessions.insert_one({
        "token": token,
        "user_id": user["id"],
        "created_at": now_iso(),
        "expires_at": (datetime.now(timezone.utc) + timedelta(days=1)).isoformat(),
    })
    return token


def auth_h(token):
    return {"Authorization": f"Bearer {token}"}


async def insert_sample(db, owner_id, captured_at, lat=12.97, lng=77.59, accuracy=None,
                        source="browser"):
    doc = {
        "id": str(uuid.uuid4()),
        "owner_id": owner_id,
        "lat": lat,
        "lng": lng,
        "accuracy": accuracy,
        "captured_at": to_storage(captured_at),
        "source": source,
        "created_at": to_storage(captured_at),
        "updated_at": to_storage(captured_at),
    }
    await db.location_samples.insert_one(doc)
    return doc
