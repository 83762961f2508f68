"""
OGCS CRM - Location Service

Employee location pings and the admin reports built on them:
- record_location_ping: one immutable sample per call, owned by the caller
- list_latest_locations: latest sample per user, joined with the user profile
- get_day_route: one user's samples for a civil day, falling back to the
  last day that has data
- summarize_day_distances / list_daily_routes: per-user routes for a day

Recency is captured_at; equal captured_at values are ordered by _id
(insertion order), the later insert being the more recent.
"""

import asyncio
import logging
import re
import uuid
from collections import defaultdict
from typing import Dict, List, Optional

from config import utc_now
from models.location import LocationPing, LocationSource
from services.day_window import day_window, local_date_of, parse_ymd, as_utc, to_storage
from services.geo import route_distance_km
from services.pagination import clamp_pagination, pagination_meta

logger = logging.getLogger("location_service")

DIGITS_RE = re.compile(r"^[0-9]+$")


class LocationValidationError(ValueError):
    """Invalid input for a location operation (reported as a client error)"""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or []


# ==================== SERIALIZATION ====================

def _iso(moment) -> Optional[str]:
    return as_utc(moment).isoformat() if moment else None


def serialize_sample(doc: Dict) -> Dict:
    """Full sample record"""
    return {
        "id": doc.get("id"),
        "ownerId": doc.get("owner_id"),
        "lat": doc.get("lat"),
        "lng": doc.get("lng"),
        "accuracy": doc.get("accuracy"),
        "capturedAt": _iso(doc.get("captured_at")),
        "source": doc.get("source") or LocationSource.BROWSER.value,
        "createdAt": _iso(doc.get("created_at")),
        "updatedAt": _iso(doc.get("updated_at")),
    }


def serialize_point(doc: Dict) -> Dict:
    """Route point"""
    return {
        "id": doc.get("id"),
        "lat": doc.get("lat"),
        "lng": doc.get("lng"),
        "accuracy": doc.get("accuracy"),
        "capturedAt": _iso(doc.get("captured_at")),
        "source": doc.get("source") or LocationSource.BROWSER.value,
    }


def serialize_employee(owner_id: str, user: Optional[Dict]) -> Dict:
    # Deleted users keep their samples: only ownerId is known then
    user = user or {}
    return {
        "ownerId": owner_id,
        "name": user.get("name"),
        "email": user.get("email"),
        "phone": user.get("phone"),
    }


# ==================== VALIDATION ====================

def validate_owner_id(owner_id: str) -> str:
    try:
        return str(uuid.UUID(owner_id))
    except (ValueError, TypeError, AttributeError):
        raise LocationValidationError("Invalid userId", ["userId"])


def validate_date(date_ymd: str) -> str:
    if not date_ymd:
        raise LocationValidationError("date is required", ["date"])
    try:
        parse_ymd(date_ymd)
    except ValueError:
        raise LocationValidationError("Invalid date, expected YYYY-MM-DD", ["date"])
    return date_ymd


# ==================== PING INGESTION ====================

async def record_location_ping(db, caller_id: str, ping: LocationPing) -> Dict:
    """
    Insert one sample for the authenticated caller and return it.
    The owner is always caller_id and the source is always "browser".
    """
    now = utc_now()
    captured_at = ping.captured_at or now

    doc = {
        "id": str(uuid.uuid4()),
        "owner_id": caller_id,
        "lat": ping.lat,
        "lng": ping.lng,
        "accuracy": ping.accuracy,
        "captured_at": to_storage(captured_at),
        "source": LocationSource.BROWSER.value,
        "created_at": to_storage(now),
        "updated_at": to_storage(now),
    }

    await db.location_samples.insert_one(doc)
    logger.info(
        f"[LOCATION_PING] owner={caller_id} sample={doc['id']} "
        f"captured_at={doc['captured_at'].isoformat()}"
    )
    return serialize_sample(doc)


# ==================== LATEST LOCATION PER USER ====================

def build_search_match(search_text: Optional[str]) -> Optional[Dict]:
    """
    Case-insensitive contains on user name / email / phone.
    A digits-only search also matches the phone digits across separators
    ("9876543210" matches "+91 98765-43210").
    """
    q = (search_text or "").strip()
    if not q:
        return None

    pattern = re.escape(q)
    clauses = [
        {"user.name": {"$regex": pattern, "$options": "i"}},
        {"user.email": {"$regex": pattern, "$options": "i"}},
        {"user.phone": {"$regex": pattern, "$options": "i"}},
    ]
    if DIGITS_RE.match(q):
        clauses.append({"user.phone": {"$regex": r"\D*".join(q)}})
    return {"$or": clauses}


def latest_locations_pipeline(search_text: Optional[str] = None) -> List[Dict]:
    """Latest sample per owner, left-joined with users, optionally filtered"""
    pipeline = [
        {"$sort": {"captured_at": -1, "_id": -1}},
        {"$group": {
            "_id": "$owner_id",
            "lat": {"$first": "$lat"},
            "lng": {"$first": "$lng"},
            "accuracy": {"$first": "$accuracy"},
            "captured_at": {"$first": "$captured_at"},
            "source": {"$first": "$source"},
        }},
        {"$lookup": {
            "from": "users",
            "localField": "_id",
            "foreignField": "id",
            "as": "user",
        }},
        {"$unwind": {"path": "$user", "preserveNullAndEmptyArrays": True}},
    ]

    match = build_search_match(search_text)
    if match:
        pipeline.append({"$match": match})
    return pipeline


def _latest_row(row: Dict) -> Dict:
    owner_id = row["_id"]
    return {
        "ownerId": owner_id,
        "lat": row.get("lat"),
        "lng": row.get("lng"),
        "accuracy": row.get("accuracy"),
        "capturedAt": _iso(row.get("captured_at")),
        "source": row.get("source") or LocationSource.BROWSER.value,
        "employee": serialize_employee(owner_id, row.get("user")),
    }


async def list_latest_locations(
    db,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    search_text: Optional[str] = None,
) -> Dict:
    """
    Paginated roster of each user's latest sample.
    The page query and the count query run concurrently over the same filter.
    """
    page, limit = clamp_pagination(page, limit)
    skip = (page - 1) * limit
    base = latest_locations_pipeline(search_text)

    window = base + [
        # Stable order so consecutive pages never overlap
        {"$sort": {"captured_at": -1, "_id": 1}},
        {"$skip": skip},
        {"$limit": limit},
    ]
    counting = base + [{"$count": "total"}]

    rows, counted = await asyncio.gather(
        db.location_samples.aggregate(window).to_list(length=limit),
        db.location_samples.aggregate(counting).to_list(length=1),
    )
    total = counted[0]["total"] if counted else 0

    return {
        "data": [_latest_row(r) for r in rows],
        "pagination": pagination_meta(page, limit, total),
    }


# ==================== DAY ROUTE ====================

async def _find_day_samples(db, owner_id: str, date_ymd: str) -> List[Dict]:
    start, end = day_window(date_ymd)
    cursor = db.location_samples.find(
        {
            "owner_id": owner_id,
            "captured_at": {"$gte": to_storage(start), "$lte": to_storage(end)},
        },
        sort=[("captured_at", 1), ("_id", 1)],
    )
    return await cursor.to_list(length=None)


async def get_day_route(db, owner_id: str, date_ymd: str) -> Dict:
    """
    Samples of one user for one civil day, ascending by capture time.
    When the day is empty, the last day with any data is returned instead
    (fallback=True, usedDate=that day).
    """
    owner_id = (owner_id or "").strip()
    date_ymd = (date_ymd or "").strip()

    missing = [name for name, value in (("userId", owner_id), ("date", date_ymd)) if not value]
    if missing:
        raise LocationValidationError("userId and date are required", missing)

    owner_id = validate_owner_id(owner_id)
    validate_date(date_ymd)

    rows = await _find_day_samples(db, owner_id, date_ymd)
    if rows:
        points = [serialize_point(r) for r in rows]
        return {
            "data": points,
            "usedDate": date_ymd,
            "fallback": False,
            "distanceKm": route_distance_km(points),
        }

    latest = await db.location_samples.find_one(
        {"owner_id": owner_id},
        sort=[("captured_at", -1), ("_id", -1)],
    )
    if not latest or not latest.get("captured_at"):
        return {
            "data": [],
            "usedDate": date_ymd,
            "fallback": False,
            "distanceKm": 0,
            "message": "No location data exists for this user.",
        }

    used_date = local_date_of(as_utc(latest["captured_at"]))
    rows = await _find_day_samples(db, owner_id, used_date)
    points = [serialize_point(r) for r in rows]

    logger.info(
        f"[DAY_ROUTE_FALLBACK] owner={owner_id} requested={date_ymd} "
        f"used={used_date} points={len(points)}"
    )

    return {
        "data": points,
        "usedDate": used_date,
        "fallback": True,
        "distanceKm": route_distance_km(points),
        "message": f"No data for {date_ymd}. Showing latest available day: {used_date}",
    }


# ==================== ALL USERS FOR A DAY ====================

async def _load_users(db, owner_ids: List[str]) -> Dict[str, Dict]:
    if not owner_ids:
        return {}
    users = await db.users.find(
        {"id": {"$in": owner_ids}},
        {"_id": 0, "password": 0},
    ).to_list(length=None)
    return {u["id"]: u for u in users}


async def _load_day_routes(db, date_ymd: str):
    """Samples of every user for a civil day, grouped by owner (ascending)"""
    start, end = day_window(date_ymd)
    docs = await db.location_samples.find(
        {"captured_at": {"$gte": to_storage(start), "$lte": to_storage(end)}},
        sort=[("owner_id", 1), ("captured_at", 1), ("_id", 1)],
    ).to_list(length=None)

    by_owner = defaultdict(list)
    for doc in docs:
        by_owner[doc["owner_id"]].append(serialize_point(doc))

    users = await _load_users(db, list(by_owner.keys()))
    return by_owner, users


async def summarize_day_distances(db, date_ymd: str) -> Dict:
    """Distance travelled per user on a civil day, plus totals"""
    date_ymd = validate_date((date_ymd or "").strip())
    by_owner, users = await _load_day_routes(db, date_ymd)

    per_user = []
    for owner_id, points in by_owner.items():
        user = users.get(owner_id) or {}
        per_user.append({
            "userId": owner_id,
            "name": user.get("name"),
            "email": user.get("email"),
            "distanceKm": route_distance_km(points),
            "points": len(points),
            "firstPing": points[0]["capturedAt"],
            "lastPing": points[-1]["capturedAt"],
        })

    per_user.sort(key=lambda r: (-r["distanceKm"], (r["name"] or "").lower(), r["userId"]))
    total_km = round(sum(r["distanceKm"] for r in per_user), 2)

    return {
        "data": {
            "date": date_ymd,
            "totalUsers": len(per_user),
            "totalKm": total_km,
            "perUser": per_user,
        }
    }


async def list_daily_routes(db, date_ymd: str) -> Dict:
    """Every user's route on a civil day"""
    date_ymd = validate_date((date_ymd or "").strip())
    by_owner, users = await _load_day_routes(db, date_ymd)

    routes = [
        {
            "user": serialize_employee(owner_id, users.get(owner_id)),
            "points": points,
            "distanceKm": route_distance_km(points),
        }
        for owner_id, points in by_owner.items()
    ]
    routes.sort(key=lambda r: ((r["user"]["name"] or "").lower(), r["user"]["ownerId"]))

    return {"date": date_ymd, "data": routes}
