# civic/core/deps.py
import re
import logging
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from civic.core.config import settings
from civic.core.errors import Forbidden, InvalidToken, Unauthenticated
from civic.core.roles import has_role
from civic.core.tokens import verify_access_token
from civic.db.session import get_db
from civic.models.enums import UserRole
from civic.models.user import User
from civic.schemas.auth import AuthUser

BEARER_RE = re.compile(r"^Bearer\s+(?P<token>\S+)$", re.IGNORECASE)

logger = logging.getLogger("auth")


def _log(msg: str, **kw):
    if settings.DEBUG_AUTH:
        safe_kw = {k: (v if k != "token" else f"{str(v)[:16]}...") for k, v in kw.items()}
        logger.info("[auth] " + msg + " " + " ".join(f"{k}={v}" for k, v in safe_kw.items()))


def _extract_token(authorization: Optional[str]) -> str:
    if authorization:
        m = BEARER_RE.match(authorization.strip())
        if m:
            return m.group("token")
    raise Unauthenticated("Missing token")


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> AuthUser:
    token = _extract_token(authorization)
    _log("incoming token", token=token, len=len(token))

    # 1) подпись, срок, тип
    try:
        claims = verify_access_token(token)
    except InvalidToken as e:
        _log("token rejected", err=str(e))
        raise Unauthenticated("Invalid token")

    # 2) пользователь должен существовать
    sub = str(claims["sub"])
    user = db.query(User).filter(User.id == sub).first()
    if not user:
        _log("user not found -> 401", sub=sub)
        raise Unauthenticated("Invalid user")

    identity = AuthUser(id=user.id, email=user.email, role=user.role)
    request.state.user = identity
    _log("user resolved", user_id=identity.id, role=identity.role.value)
    return identity


def require_role(*allowed: UserRole):
    allowed_set = frozenset(allowed)

    def dep(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not has_role(user.role, allowed_set):
            _log("role denied", have=user.role.value, need=sorted(r.value for r in allowed_set))
            raise Forbidden()
        return user

    return dep
