import uuid
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from civic.db.session import Base
from civic.models.user import _now_utc

class Media(Base):
    __tablename__ = "media"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    type = Column(String(50), nullable=False, default="image")
    # индекс в списке media при создании
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    issue = relationship("Issue", back_populates="media")
