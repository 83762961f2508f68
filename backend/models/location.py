"""
OGCS CRM - Location models

RULES:
1. lat / lng are required and strictly numeric (no strings, no booleans)
2. accuracy is kept only when numeric, otherwise dropped to None
3. capturedAt falls back to ingestion time when absent or unparseable
4. owner and source never come from the request body
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, validator


class LocationSource(str, Enum):
    BROWSER = "browser"
    MOBILE = "mobile"
    GPS = "gps"
    UNKNOWN = "unknown"


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large to convert to float
        return False


def parse_captured_at(value) -> Optional[datetime]:
    """
    Parse a client capture timestamp.
    Accepts datetime, ISO-8601 strings (naive = UTC, trailing Z allowed)
    and epoch milliseconds. Returns None when the value cannot be read.
    """
    if value is None or value == "":
        return None

    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif _is_number(value):
        if not _finite(value):
            return None
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # in range locally but not once shifted to UTC
        return None


class LocationPing(BaseModel):
    """Body of POST /locations/ping"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    lat: Union[StrictInt, StrictFloat]
    lng: Union[StrictInt, StrictFloat]
    accuracy: Optional[Any] = None
    captured_at: Optional[Any] = Field(None, alias="capturedAt")

    @validator("lat")
    def validate_lat(cls, v):
        if not _finite(v) or not -90 <= v <= 90:
            raise ValueError("lat must be a number between -90 and 90")
        return float(v)

    @validator("lng")
    def validate_lng(cls, v):
        if not _finite(v) or not -180 <= v <= 180:
            raise ValueError("lng must be a number between -180 and 180")
        return float(v)

    @validator("accuracy", pre=True)
    def drop_non_numeric_accuracy(cls, v):
        if _is_number(v) and _finite(v):
            return float(v)
        return None

    @validator("captured_at", pre=True)
    def parse_capture_time(cls, v):
        return parse_captured_at(v)
