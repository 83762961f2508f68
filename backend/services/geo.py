"""
OGCS CRM - Route distance helpers
Great-circle (Haversine) distance over a sequence of {lat, lng} points.
"""

import math
from typing import Dict, Sequence

EARTH_RADIUS_M = 6371000


def haversine_meters(a: Dict, b: Dict) -> float:
    """Distance in metres between two points given as {"lat", "lng"}"""
    lat1 = math.radians(a["lat"])
    lat2 = math.radians(b["lat"])
    d_lat = lat2 - lat1
    d_lng = math.radians(b["lng"] - a["lng"])
    s = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(s), math.sqrt(1 - s))


def route_distance_km(points: Sequence[Dict]) -> float:
    """Sum of consecutive legs, in km rounded to 2 decimals"""
    if not points or len(points) < 2:
        return 0
    meters = 0.0
    for prev, cur in zip(points, points[1:]):
        meters += haversine_meters(prev, cur)
    return round(meters / 1000, 2)
