import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Enum
from civic.db.session import Base
from civic.models.enums import UserRole


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role", native_enum=False), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)
