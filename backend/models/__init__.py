"""
OGCS CRM - Models package

from models import LocationPing, UserLogin, etc.
"""

from .auth import (
    VALID_ROLES,
    UserLogin,
    UserResponse,
)

from .location import (
    LocationSource,
    LocationPing,
    parse_captured_at,
)
