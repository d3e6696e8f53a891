import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from .config import settings


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form timestamps are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# =========================
# JWT Token Handling
# =========================
def create_jwt_token(data: Dict[str, Any], expires_minutes: int = 60, secret: Optional[str] = None) -> str:
    """Create a session token in the shape the identity provider issues"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire, "aud": settings.JWT_AUDIENCE})
    return jwt.encode(to_encode, secret or settings.SESSION_JWT_SECRET, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str, secret: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Decode and verify a session token; None when it cannot be trusted"""
    key = secret or settings.SESSION_JWT_SECRET
    if not key:
        return None
    try:
        return jwt.decode(
            token,
            key,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None
