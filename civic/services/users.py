import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from civic.core.errors import EmailInUse, InvalidCredentials
from civic.core.security import hash_password, verify_password
from civic.models.enums import UserRole
from civic.models.user import User
from civic.schemas.auth import RegisterRequest

logger = logging.getLogger("civic.users")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(db: Session, data: RegisterRequest) -> User:
    email = _normalize_email(data.email)
    if db.query(User).filter(User.email == email).first():
        raise EmailInUse()
    user = User(
        email=email,
        name=data.name,
        password_hash=hash_password(data.password),
        role=UserRole.USER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # параллельная регистрация с тем же email
        db.rollback()
        raise EmailInUse()
    db.refresh(user)
    logger.info("user registered id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == _normalize_email(email)).first()
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user
