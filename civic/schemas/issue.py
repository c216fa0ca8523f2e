from typing import Optional, List
from datetime import datetime

from pydantic import AnyUrl, Field

from civic.models.enums import IssueSeverity, IssueStatus
from civic.schemas.base import CamelModel


# ---------- вход ----------

class MediaIn(CamelModel):
    url: AnyUrl
    type: Optional[str] = Field(None, min_length=1, max_length=50)


class IssueCreate(CamelModel):
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=5)
    category: str = Field(min_length=2, max_length=100)
    severity: Optional[IssueSeverity] = None
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: Optional[str] = Field(None, min_length=3, max_length=255)
    media: Optional[List[MediaIn]] = None


class StatusUpdate(CamelModel):
    status: IssueStatus
    assigned_to: Optional[str] = Field(None, min_length=1)


class CommentCreate(CamelModel):
    body: str = Field(min_length=1)


# ---------- выход ----------

class MediaOut(CamelModel):
    id: str
    url: str
    type: str


class AuthorOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None


class CommentOut(CamelModel):
    id: str
    issue_id: str
    author_id: str
    body: str
    created_at: datetime
    author: Optional[AuthorOut] = None


class IssueOut(CamelModel):
    id: str
    title: str
    description: str
    category: str
    severity: IssueSeverity
    status: IssueStatus
    latitude: float
    longitude: float
    address: Optional[str] = None
    reporter_id: str
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    media: List[MediaOut] = []


class IssueSummaryOut(IssueOut):
    vote_count: int = 0
    comment_count: int = 0


class IssueDetailOut(IssueOut):
    comments: List[CommentOut] = []
    vote_count: int = 0


class IssuePage(CamelModel):
    items: List[IssueSummaryOut]
    total: int
    page: int
    page_size: int


class OkResponse(CamelModel):
    ok: bool = True
