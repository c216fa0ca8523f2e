# civic/services/issues.py
"""
Жизненный цикл обращений: создание, выборка, модерация, комментарии, голоса.

Каждая функция получает открытую Session и сама коммитит свою единицу работы:
один вызов = одна транзакция. Отсутствующее обращение -> NotFound с запрошенным id.
Права проверяет вызывающий код (зависимости роутов).
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from civic.core.errors import DuplicateVote, NotFound, ValidationFailed
from civic.models.comment import Comment
from civic.models.enums import IssueSeverity, IssueStatus
from civic.models.issue import Issue
from civic.models.media import Media
from civic.models.user import User
from civic.models.vote import Vote
from civic.schemas.auth import AuthUser
from civic.schemas.issue import IssueCreate, StatusUpdate

logger = logging.getLogger("civic.issues")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
MAX_PAGE = 100_000
STATUS_VALUES = frozenset(s.value for s in IssueStatus)


class IssuePageResult(NamedTuple):
    items: List[Issue]
    total: int
    page: int
    page_size: int
    vote_counts: Dict[str, int]
    comment_counts: Dict[str, int]


def _get_issue_or_404(db: Session, issue_id: str) -> Issue:
    issue = db.query(Issue).filter(Issue.id == issue_id).first()
    if not issue:
        raise NotFound("Issue not found", id=issue_id)
    return issue


def _count_by_issue(db: Session, model, issue_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(issue_ids)
    if not ids:
        return {}
    rows = (
        db.query(model.issue_id, func.count(model.id))
        .filter(model.issue_id.in_(ids))
        .group_by(model.issue_id)
        .all()
    )
    return {issue_id: int(n) for issue_id, n in rows}


def clamp_page_size(page_size: Optional[int]) -> int:
    if not page_size or page_size < 1:
        return DEFAULT_PAGE_SIZE
    return min(page_size, MAX_PAGE_SIZE)


# ---------- create / read ----------

def create_issue(db: Session, data: IssueCreate, reporter: AuthUser) -> Issue:
    issue = Issue(
        title=data.title,
        description=data.description,
        category=data.category,
        severity=data.severity or IssueSeverity.MEDIUM,
        status=IssueStatus.PENDING,
        latitude=data.latitude,
        longitude=data.longitude,
        address=data.address,
        reporter_id=reporter.id,
    )
    for m in data.media or []:
        issue.media.append(Media(url=str(m.url), type=m.type or "image"))
    db.add(issue)
    db.commit()  # issue + media одной транзакцией
    db.refresh(issue)
    logger.info("issue created id=%s reporter=%s media=%d", issue.id, reporter.id, len(issue.media))
    return issue


def list_issues(
    db: Session,
    *,
    status: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = DEFAULT_PAGE_SIZE,
) -> IssuePageResult:
    take = clamp_page_size(page_size)
    page = max(page, 1)

    q = db.query(Issue)
    # неизвестный статус просто игнорируем
    if status and status in STATUS_VALUES:
        q = q.filter(Issue.status == IssueStatus(status))
    if category:
        q = q.filter(Issue.category == category)
    if search:
        q = q.filter(or_(
            Issue.title.icontains(search, autoescape=True),
            Issue.description.icontains(search, autoescape=True),
        ))

    total = q.order_by(None).count()
    offset = (page - 1) * take
    if offset >= total:
        # за последней страницей: в БД не ходим
        return IssuePageResult(items=[], total=total, page=page, page_size=take,
                               vote_counts={}, comment_counts={})
    items = (
        q.options(selectinload(Issue.media))
        .order_by(Issue.created_at.desc(), Issue.id.desc())
        .offset(offset)
        .limit(take)
        .all()
    )
    ids = [i.id for i in items]
    return IssuePageResult(
        items=items,
        total=total,
        page=page,
        page_size=take,
        vote_counts=_count_by_issue(db, Vote, ids),
        comment_counts=_count_by_issue(db, Comment, ids),
    )


def get_issue(db: Session, issue_id: str) -> Tuple[Issue, int]:
    """Обращение с media и комментариями (старые сначала, с авторами) и числом голосов."""
    issue = (
        db.query(Issue)
        .options(
            selectinload(Issue.media),
            selectinload(Issue.comments).joinedload(Comment.author),
        )
        .filter(Issue.id == issue_id)
        .first()
    )
    if not issue:
        raise NotFound("Issue not found", id=issue_id)
    votes = db.query(func.count(Vote.id)).filter(Vote.issue_id == issue_id).scalar() or 0
    return issue, int(votes)


# ---------- moderation ----------

def update_status(db: Session, issue_id: str, data: StatusUpdate) -> Issue:
    # переходы между статусами не ограничены: любой из пяти в любой момент
    issue = _get_issue_or_404(db, issue_id)
    if data.assigned_to is not None:
        if not db.query(User.id).filter(User.id == data.assigned_to).first():
            raise ValidationFailed("Assignee not found", assignedTo=data.assigned_to)
        issue.assigned_to = data.assigned_to
    previous = issue.status
    issue.status = data.status
    db.commit()
    db.refresh(issue)
    logger.info("issue status id=%s %s -> %s assigned_to=%s",
                issue.id, previous.value, issue.status.value, issue.assigned_to)
    return issue


# ---------- comments ----------

def add_comment(db: Session, issue_id: str, body: str, author: AuthUser) -> Comment:
    issue = _get_issue_or_404(db, issue_id)
    comment = Comment(issue_id=issue.id, author_id=author.id, body=body)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def list_comments(db: Session, issue_id: str) -> List[Comment]:
    return (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.issue_id == issue_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


# ---------- votes ----------

def cast_vote(db: Session, issue_id: str, user: AuthUser) -> None:
    issue = _get_issue_or_404(db, issue_id)
    db.add(Vote(issue_id=issue.id, user_id=user.id))
    try:
        db.commit()
    except IntegrityError:
        # уникальность (issue_id, user_id) держит сама БД
        db.rollback()
        exists = (
            db.query(Vote.id)
            .filter(Vote.issue_id == issue.id, Vote.user_id == user.id)
            .first()
        )
        if exists:
            raise DuplicateVote()
        raise ValidationFailed("Unable to vote")
    logger.info("vote cast issue=%s user=%s", issue.id, user.id)


def remove_vote(db: Session, issue_id: str, user: AuthUser) -> None:
    issue = _get_issue_or_404(db, issue_id)
    removed = (
        db.query(Vote)
        .filter(Vote.issue_id == issue.id, Vote.user_id == user.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed:
        logger.info("vote removed issue=%s user=%s", issue.id, user.id)
