# src/wellcoach/interfaces/api/security/auth.py
"""
Bearer tokens issued by the identity provider (HS256, shared secret).

Only decoding is needed in production; `create_access_token` exists for local
development and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from wellcoach.config import settings

JWT_EXPIRE_MIN = 60 * 24


def create_access_token(subject: str, claims: Optional[Dict[str, Any]] = None, expires_minutes: int = JWT_EXPIRE_MIN) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes)
    payload = {
        **(claims or {}),
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
