"""
OGCS CRM - Configuration and shared helpers
"""

import os
import hashlib
import secrets
from datetime import datetime, timezone
from pathlib import Path

import pytz
from dotenv import load_dotenv

# Load .env
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'ogcs_crm')

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# Civil day used by every day-route / distance report (minutes east of UTC, default IST)
DAY_UTC_OFFSET_MINUTES = int(os.environ.get('DAY_UTC_OFFSET_MINUTES', '330'))

# Shared pagination policy
PAGE_LIMIT_DEFAULT = int(os.environ.get('PAGE_LIMIT_DEFAULT', '20'))
PAGE_LIMIT_MAX = int(os.environ.get('PAGE_LIMIT_MAX', '100'))

SESSION_TTL_DAYS = int(os.environ.get('SESSION_TTL_DAYS', '7'))


# ==================== HELPERS ====================

def hash_password(password: str) -> str:
    """Hash a password with SHA256"""
    return hashlib.sha256(password.encode()).hexdigest()

def generate_token() -> str:
    """Generate a secure session token"""
    return secrets.token_urlsafe(32)

def utc_now() -> datetime:
    """Current UTC time, truncated to the millisecond precision MongoDB keeps"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)

def now_iso() -> str:
    """Current date/time as ISO string"""
    return datetime.now(timezone.utc).isoformat()

def day_timezone(offset_minutes: int = None):
    """Fixed-offset tzinfo defining the civil day for location reports"""
    if offset_minutes is None:
        offset_minutes = DAY_UTC_OFFSET_MINUTES
    return pytz.FixedOffset(offset_minutes)
