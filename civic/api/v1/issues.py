# civic/api/v1/issues.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from civic.core.deps import get_current_user, require_role
from civic.core.roles import MODERATION_ROLES
from civic.db.session import get_db
from civic.schemas.auth import AuthUser
from civic.schemas.issue import (
    CommentCreate,
    CommentOut,
    IssueCreate,
    IssueDetailOut,
    IssueOut,
    IssuePage,
    IssueSummaryOut,
    OkResponse,
    StatusUpdate,
)
from civic.services import issues as svc

router = APIRouter(prefix="/issues", tags=["issues"])


@router.post("", response_model=IssueOut, status_code=status.HTTP_201_CREATED)
def create_issue(
    payload: IssueCreate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return svc.create_issue(db, payload, user)


@router.get("", response_model=IssuePage)
def list_issues(
    db: Session = Depends(get_db),
    status_: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1, le=svc.MAX_PAGE),
    page_size: int = Query(svc.DEFAULT_PAGE_SIZE, ge=1, alias="pageSize",
                           description=f"Capped at {svc.MAX_PAGE_SIZE}"),
):
    res = svc.list_issues(
        db, status=status_, category=category, search=search, page=page, page_size=page_size,
    )
    items = [
        IssueSummaryOut.model_validate(i).model_copy(update={
            "vote_count": res.vote_counts.get(i.id, 0),
            "comment_count": res.comment_counts.get(i.id, 0),
        })
        for i in res.items
    ]
    return IssuePage(items=items, total=res.total, page=res.page, page_size=res.page_size)


@router.get("/{issue_id}", response_model=IssueDetailOut)
def get_issue(issue_id: str, db: Session = Depends(get_db)):
    issue, votes = svc.get_issue(db, issue_id)
    return IssueDetailOut.model_validate(issue).model_copy(update={"vote_count": votes})


@router.patch(
    "/{issue_id}/status",
    response_model=IssueOut,
    dependencies=[Depends(require_role(*MODERATION_ROLES))],
)
def update_status(issue_id: str, payload: StatusUpdate, db: Session = Depends(get_db)):
    return svc.update_status(db, issue_id, payload)


@router.post("/{issue_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    issue_id: str,
    payload: CommentCreate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return svc.add_comment(db, issue_id, payload.body, user)


@router.get("/{issue_id}/comments", response_model=List[CommentOut])
def list_comments(issue_id: str, db: Session = Depends(get_db)):
    return svc.list_comments(db, issue_id)


@router.post("/{issue_id}/vote", response_model=OkResponse, status_code=status.HTTP_201_CREATED)
def cast_vote(
    issue_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc.cast_vote(db, issue_id, user)
    return OkResponse()


@router.delete("/{issue_id}/vote", response_model=OkResponse)
def remove_vote(
    issue_id: str,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc.remove_vote(db, issue_id, user)
    return OkResponse()
