"""
OGCS CRM - Route distance, civil day windows and pagination policy
Run: cd backend && pytest tests/test_geo_and_windows.py -v
"""

from datetime import datetime, timezone

import pytest

from services.geo import haversine_meters, route_distance_km
from services.day_window import day_window, local_date_of, parse_ymd, as_utc, to_storage
from services.pagination import clamp_pagination, total_pages, pagination_meta


# ═══════════════════════════════════════════════════════════════
# 1. HAVERSINE
# ═══════════════════════════════════════════════════════════════

class TestHaversine:

    def test_identical_points_zero(self):
        p = {"lat": 12.9716, "lng": 77.5946}
        assert haversine_meters(p, p) == 0

    def test_symmetric(self):
        a = {"lat": 12.9716, "lng": 77.5946}
        b = {"lat": 13.0827, "lng": 80.2707}
        assert haversine_meters(a, b) == pytest.approx(haversine_meters(b, a))

    def test_one_degree_latitude(self):
        d = haversine_meters({"lat": 0, "lng": 0}, {"lat": 1, "lng": 0})
        assert d == pytest.approx(111194.93, abs=1)

    def test_route_needs_two_points(self):
        assert route_distance_km([]) == 0
        assert route_distance_km([{"lat": 1, "lng": 1}]) == 0

    def test_route_sums_legs_and_rounds(self):
        pts = [{"lat": 0, "lng": 0}, {"lat": 1, "lng": 0}, {"lat": 2, "lng": 0}]
        assert route_distance_km(pts) == 222.39


# ═══════════════════════════════════════════════════════════════
# 2. DAY WINDOWS (default offset +05:30)
# ═══════════════════════════════════════════════════════════════

class TestDayWindow:

    def test_ist_window(self):
        start, end = day_window("2024-03-01")
        assert start == datetime(2024, 2, 29, 18, 30, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 1, 18, 29, 59, 999000, tzinfo=timezone.utc)

    def test_utc_window_with_explicit_offset(self):
        start, end = day_window("2024-03-01", offset_minutes=0)
        assert start == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 3, 1, 23, 59, 59, 999000, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "2024-3-1", "2024-02-30", "01-03-2024", "2024-03-01T00:00"])
    def test_invalid_dates(self, value):
        with pytest.raises(ValueError):
            parse_ymd(value)

    def test_local_date_crosses_midnight(self):
        # 19:00 UTC is 00:30 the next day in IST
        assert local_date_of(datetime(2024, 3, 1, 19, 0, tzinfo=timezone.utc)) == "2024-03-02"
        assert local_date_of(datetime(2024, 3, 1, 18, 0, tzinfo=timezone.utc)) == "2024-03-01"

    def test_local_date_naive_is_utc(self):
        assert local_date_of(datetime(2024, 3, 1, 19, 0)) == "2024-03-02"

    def test_storage_form_is_naive_utc_millis(self):
        stored = to_storage(datetime(2024, 3, 1, 8, 0, 0, 123456, tzinfo=timezone.utc))
        assert stored.tzinfo is None
        assert stored.microsecond == 123000
        assert as_utc(stored).tzinfo == timezone.utc


# ═══════════════════════════════════════════════════════════════
# 3. PAGINATION POLICY
# ═══════════════════════════════════════════════════════════════

class TestPagination:

    def test_defaults(self):
        assert clamp_pagination() == (1, 20)

    def test_lower_bounds(self):
        assert clamp_pagination(0, 0) == (1, 1)
        assert clamp_pagination(-3, -10) == (1, 1)

    def test_limit_clamped_to_max(self):
        assert clamp_pagination(2, 500) == (2, 100)

    def test_total_pages(self):
        assert total_pages(0, 20) == 1
        assert total_pages(20, 20) == 1
        assert total_pages(21, 20) == 2

    def test_meta(self):
        assert pagination_meta(1, 1, 2) == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
