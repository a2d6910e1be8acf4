import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from marketplace.config.settings import get_settings


logger = logging.getLogger(__name__)


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def user_id_from_payload(payload: Dict[str, Any]) -> Optional[str]:
    # older tokens carry {"user": {"id": ...}} or a bare {"id": ...}
    if payload.get("sub"):
        return str(payload["sub"])
    user = payload.get("user")
    if isinstance(user, dict) and user.get("id"):
        return str(user["id"])
    if payload.get("id"):
        return str(payload["id"])
    return None
