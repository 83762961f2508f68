"""
OGCS CRM - Routes Locations (field users)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import PyMongoError

from database import get_db
from models.location import LocationPing
from routes.auth import get_current_user
from services.location_service import record_location_ping

router = APIRouter(prefix="/locations", tags=["Locations"])
logger = logging.getLogger("locations")


@router.post("/ping")
async def ping_location(
    data: LocationPing,
    user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """
    Record one location sample for the logged-in user.
    The owner is taken from the session, never from the body.
    """
    try:
        item = await record_location_ping(db, user["id"], data)
    except PyMongoError as e:
        logger.error(f"[LOCATION_PING_FAIL] user={user.get('id')} error={e}")
        raise HTTPException(status_code=500, detail="Failed to record location")

    return {"ok": True, "item": item}
