
import os
from datetime import datetime, timedelta, timezone

import pytest

# окружение до импорта civic.* (settings читаются при импорте)
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "0"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["JWT_ACCESS_SECRET"] = "TEST_ACCESS_SECRET_CHANGE_ME"
os.environ["JWT_REFRESH_SECRET"] = "TEST_REFRESH_SECRET_CHANGE_ME"

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import civic.models  # noqa: F401
from civic.main import create_app
from civic.db.session import Base, SessionLocal, engine
from civic.models.user import User
from civic.models.issue import Issue
from civic.models.enums import UserRole, IssueSeverity, IssueStatus
from civic.core.security import hash_password
from civic.core.tokens import issue_tokens

DEFAULT_PASSWORD = "password1"


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture(scope="session")
def app_instance() -> FastAPI:
    return create_app()

@pytest.fixture(scope="function")
def client(app_instance) -> TestClient:
    with TestClient(app_instance) as c:
        yield c

@pytest.fixture
def make_user(db: Session):
    counter = {"n": 0}

    def _make(role: UserRole = UserRole.USER, email: str = None, name: str = None) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"{role.value.lower()}{counter['n']}@civic.org",
            name=name,
            password_hash=hash_password(DEFAULT_PASSWORD),
            role=role,
        )
        db.add(user); db.commit(); db.refresh(user)
        return user

    return _make

@pytest.fixture
def make_issue(db: Session):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    def _make(reporter: User, **fields) -> Issue:
        counter["n"] += 1
        data = dict(
            title=f"Issue {counter['n']}",
            description="Something is broken here",
            category="roads",
            severity=IssueSeverity.MEDIUM,
            status=IssueStatus.PENDING,
            latitude=40.7,
            longitude=-74.0,
            reporter_id=reporter.id,
            created_at=base + timedelta(minutes=counter["n"]),
        )
        data.update(fields)
        issue = Issue(**data)
        db.add(issue); db.commit(); db.refresh(issue)
        return issue

    return _make

def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_tokens(user).access_token}"}

@pytest.fixture
def auth_headers():
    return bearer

@pytest.fixture
def citizen(make_user) -> User:
    return make_user(UserRole.USER, name="Citizen Kane")

@pytest.fixture
def moderator(make_user) -> User:
    return make_user(UserRole.MODERATOR)

@pytest.fixture
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN)

@pytest.fixture
def issue_payload() -> dict:
    return {
        "title": "Pothole",
        "description": "Large pothole on Main St",
        "category": "roads",
        "latitude": 40.7,
        "longitude": -74.0,
    }
