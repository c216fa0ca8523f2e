import uuid
from sqlalchemy import Column, String, Text, DateTime, Enum, Float, ForeignKey
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from civic.db.session import Base
from civic.models.enums import IssueSeverity, IssueStatus
from civic.models.user import _now_utc


class Issue(Base):
    __tablename__ = "issues"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    severity = Column(Enum(IssueSeverity, name="issue_severity", native_enum=False), nullable=False, default=IssueSeverity.MEDIUM)
    status = Column(Enum(IssueStatus, name="issue_status", native_enum=False), nullable=False, default=IssueStatus.PENDING, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String(255), nullable=True)
    reporter_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_now_utc, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=_now_utc, onupdate=_now_utc, nullable=False)

    reporter = relationship("User", foreign_keys=[reporter_id])
    media = relationship(
        "Media",
        back_populates="issue",
        cascade="all, delete-orphan",
        order_by="Media.position",
        collection_class=ordering_list("position"),
    )
    comments = relationship(
        "Comment", back_populates="issue", cascade="all, delete-orphan", order_by="[Comment.created_at, Comment.id]"
    )
    votes = relationship("Vote", back_populates="issue", cascade="all, delete-orphan")
