"""
OGCS CRM - Routes Admin Locations
Latest position per employee, day routes and distance reports.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pymongo.errors import PyMongoError

from database import get_db
from routes.auth import require_admin
from services.location_service import (
    LocationValidationError,
    list_latest_locations,
    get_day_route,
    summarize_day_distances,
    list_daily_routes,
)

router = APIRouter(prefix="/admin/locations", tags=["AdminLocations"])
logger = logging.getLogger("admin_locations")


def _bad_request(e: LocationValidationError):
    return HTTPException(status_code=400, detail=e.message)


@router.get("/latest")
async def latest_locations(
    page: int = 1,
    limit: Optional[int] = None,
    q: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    """Latest location of each employee. Query: page, limit (max 100), q"""
    try:
        return await list_latest_locations(db, page=page, limit=limit, search_text=q)
    except PyMongoError as e:
        logger.error(f"[LATEST_LOCATIONS_FAIL] error={e}")
        raise HTTPException(status_code=500, detail="Failed to load latest locations")


@router.get("/day-route")
async def day_route(
    user_id: Optional[str] = Query(None, alias="userId"),
    date: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    """
    All points of one employee for a day (YYYY-MM-DD).
    Falls back to the latest day with data when the requested day is empty.
    """
    try:
        return await get_day_route(db, user_id, date)
    except LocationValidationError as e:
        raise _bad_request(e)
    except PyMongoError as e:
        logger.error(f"[DAY_ROUTE_FAIL] user_id={user_id} date={date} error={e}")
        raise HTTPException(status_code=500, detail="Failed to load day route")


@router.get("/distance/day")
async def distance_by_day(
    date: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    """Distance travelled per employee for a day"""
    try:
        return await summarize_day_distances(db, date)
    except LocationValidationError as e:
        raise _bad_request(e)
    except PyMongoError as e:
        logger.error(f"[DISTANCE_DAY_FAIL] date={date} error={e}")
        raise HTTPException(status_code=500, detail="Failed to load distance report")


@router.get("/daily-routes")
async def daily_routes(
    date: Optional[str] = None,
    user: dict = Depends(require_admin),
    db=Depends(get_db),
):
    """Routes of every employee for a day"""
    try:
        return await list_daily_routes(db, date)
    except LocationValidationError as e:
        raise _bad_request(e)
    except PyMongoError as e:
        logger.error(f"[DAILY_ROUTES_FAIL] date={date} error={e}")
        raise HTTPException(status_code=500, detail="Failed to load daily routes")
