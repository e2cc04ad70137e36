"""
Configuration and shared helpers
"""

import os
import re
import uuid
import secrets
import logging
from datetime import datetime, timezone, timedelta
from pathlib import Path
from typing import Optional

import jwt
from dotenv import load_dotenv
from motor.motor_asyncio import AsyncIOMotorClient
from starlette.concurrency import run_in_threadpool
from werkzeug.security import generate_password_hash, check_password_hash

logger = logging.getLogger("config")

# Load .env
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB
MONGO_URL = os.environ.get('MONGO_URL') or os.environ.get('MONGODB_URI', 'mongodb://localhost:27017')
DB_NAME = os.environ.get('DB_NAME', 'crm_system')

client = AsyncIOMotorClient(MONGO_URL)
db = client[DB_NAME]

# Server
PORT = int(os.environ.get('PORT', '5000'))
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
ALLOW_PUBLIC_REGISTRATION = os.environ.get('ALLOW_PUBLIC_REGISTRATION', 'true').lower() in ('1', 'true', 'yes')

# JWT
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_HOURS = int(os.environ.get('JWT_EXPIRES_HOURS', '24'))
JWT_SECRET = os.environ.get('JWT_SECRET')
if not JWT_SECRET:
    JWT_SECRET = secrets.token_urlsafe(32)
    logger.warning("JWT_SECRET not set, using a random per-process secret (tokens will not survive a restart)")


# ==================== ROLES ====================

ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_AGENT = "agent"
VALID_ROLES = [ROLE_ADMIN, ROLE_MANAGER, ROLE_AGENT]


# ==================== DASHBOARD ====================

# Trend reported when the preceding window has nothing to compare against.
# Keys are "<view>.<metric>"; the fixed trends have no computed counterpart.
DASHBOARD_TREND_FALLBACKS = {
    "admin.customersTrend": 12.5,
    "admin.salesTrend": 12.5,
    "admin.revenueTrend": 15.3,
    "admin.agentsTrend": 5.1,
    "admin.conversionTrend": -2.4,
    "admin.targetTrend": 10.8,
    "agent.salesTrend": 8.2,
    "agent.revenueTrend": 15.3,
    "agent.conversionTrend": -2.4,
    "agent.targetTrend": 10.8,
}

DASHBOARD_PERIODS = ["today", "this_week", "current_month", "last_month", "this_year"]
DEFAULT_DASHBOARD_PERIOD = "current_month"


# ==================== HELPERS ====================

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def is_valid_email_format(email: Optional[str]) -> bool:
    """Basic local@domain.tld shape check"""
    if not email:
        return False
    return bool(EMAIL_REGEX.match(email))


def normalize_email(email: str) -> str:
    return email.lower().strip()


def new_id() -> str:
    return str(uuid.uuid4())


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Current UTC time as an ISO string"""
    return now_utc().isoformat()


def to_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso(value) -> Optional[datetime]:
    """ISO string (or datetime) -> aware UTC datetime, None if unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    try:
        return to_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return None


async def hash_password(password: str) -> str:
    """Salted hash (werkzeug), computed off the event loop"""
    return await run_in_threadpool(generate_password_hash, password)


async def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed or password is None:
        return False
    return await run_in_threadpool(check_password_hash, hashed, password)


def create_access_token(user: dict) -> str:
    """Signs a bearer token valid for JWT_EXPIRES_HOURS"""
    issued_at = now_utc()
    payload = {
        "userId": user["id"],
        "role": user.get("role", ROLE_AGENT),
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises jwt.PyJWTError on bad signature, expiry or malformed token."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
