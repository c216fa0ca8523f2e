import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from civic.db.session import Base
from civic.models.user import _now_utc

class Vote(Base):
    __tablename__ = "votes"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    issue_id = Column(String(36), ForeignKey("issues.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False)

    # one vote per (issue, user); duplicates are rejected by the store
    __table_args__ = (UniqueConstraint("issue_id", "user_id", name="uq_votes_issue_user"), )

    issue = relationship("Issue", back_populates="votes")
