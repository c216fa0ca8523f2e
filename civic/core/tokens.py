# civic/core/tokens.py
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from jose import jwt, JWTError

from civic.core.config import settings
from civic.core.errors import InvalidToken
from civic.schemas.auth import TokenPair


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)

def _to_epoch_seconds(dt: datetime) -> int:
    return int(dt.timestamp())

def _encode(user, token_type: str, ttl: timedelta, secret: str) -> str:
    now = _now_utc()
    role = getattr(user.role, "value", user.role)
    payload: Dict[str, Any] = {
        "sub": str(user.id),
        "email": user.email,
        "role": role,
        "type": token_type,
        "iat": _to_epoch_seconds(now),
        "exp": _to_epoch_seconds(now + ttl),
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALG)

def issue_tokens(user) -> TokenPair:
    """
    Подписывает пару access/refresh для ``user`` (любой объект с id, email, role).
    У токенов разные секреты и сроки жизни.
    """
    access = _encode(
        user, "access",
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings.JWT_ACCESS_SECRET,
    )
    refresh = _encode(
        user, "refresh",
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        settings.JWT_REFRESH_SECRET,
    )
    return TokenPair(access_token=access, refresh_token=refresh)

def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Возвращает claims валидного access-токена.
    InvalidToken: подпись, срок, тип не "access" или нет sub.
    """
    try:
        payload = jwt.decode(token, settings.JWT_ACCESS_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError as e:
        raise InvalidToken(str(e)) from e
    if payload.get("type") != "access" or not payload.get("sub"):
        raise InvalidToken("not an access token")
    return payload
