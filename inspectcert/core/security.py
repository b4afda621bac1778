from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from inspectcert.core.config import settings


ALGORITHM = "HS256"


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Signs a short-lived access token whose subject is the caller identity."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode = {
        "sub": str(subject),
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": "access"
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def verify_access_token(token: str) -> Optional[str]:
    """Returns the token subject, or None if the token is invalid or not an access token."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None

    subject = payload.get("sub")
    if not subject or payload.get("type") != "access":
        return None
    return subject
