import pytest

from civic.models.enums import IssueStatus, UserRole
from civic.models.issue import Issue
from civic.models.media import Media


# ---------- create ----------

def test_create_issue_defaults(client, citizen, auth_headers, issue_payload):
    resp = client.post("/issues", json=issue_payload, headers=auth_headers(citizen))
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["status"] == "PENDING"
    assert data["severity"] == "MEDIUM"
    assert data["reporterId"] == citizen.id
    assert data["assignedTo"] is None
    assert data["media"] == []
    assert data["latitude"] == 40.7 and data["longitude"] == -74.0


def test_create_issue_ignores_client_status(client, citizen, auth_headers, issue_payload):
    payload = dict(issue_payload, status="RESOLVED", severity="HIGH")
    data = client.post("/issues", json=payload, headers=auth_headers(citizen)).json()
    assert data["status"] == "PENDING"
    assert data["severity"] == "HIGH"


def test_create_issue_with_media(client, db, citizen, auth_headers, issue_payload):
    payload = dict(issue_payload, address="12 Main St", media=[
        {"url": "https://cdn.civic.org/p/1.jpg"},
        {"url": "https://cdn.civic.org/p/2.mp4", "type": "video"},
    ])
    resp = client.post("/issues", json=payload, headers=auth_headers(citizen))
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["address"] == "12 Main St"
    assert [(m["url"], m["type"]) for m in data["media"]] == [
        ("https://cdn.civic.org/p/1.jpg", "image"),
        ("https://cdn.civic.org/p/2.mp4", "video"),
    ]
    assert db.query(Media).filter(Media.issue_id == data["id"]).count() == 2


@pytest.mark.parametrize("override", [
    {"title": "ab"},
    {"title": "x" * 201},
    {"description": "abcd"},
    {"category": "r"},
    {"severity": "CRITICAL"},
    {"latitude": 90.5},
    {"longitude": -180.5},
    {"latitude": "north"},
    {"address": "ab"},
    {"media": [{"url": "not a url"}]},
])
def test_create_issue_validation(client, db, citizen, auth_headers, issue_payload, override):
    resp = client.post("/issues", json=dict(issue_payload, **override), headers=auth_headers(citizen))
    assert resp.status_code == 400, resp.text
    assert resp.json()["message"] == "Validation failed"
    assert db.query(Issue).count() == 0


def test_create_issue_missing_fields(client, citizen, auth_headers):
    resp = client.post("/issues", json={"title": "Pothole"}, headers=auth_headers(citizen))
    assert resp.status_code == 400
    fields = {e["loc"][-1] for e in resp.json()["errors"]}
    assert {"description", "category", "latitude", "longitude"} <= fields


# ---------- read ----------

def test_get_missing_issue(client):
    resp = client.get("/issues/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Issue not found", "id": "does-not-exist"}


def test_get_issue_detail(client, citizen, make_user, make_issue, auth_headers):
    issue = make_issue(citizen)
    other = make_user(UserRole.USER, name="Bob")

    client.post(f"/issues/{issue.id}/comments", json={"body": "first"}, headers=auth_headers(citizen))
    client.post(f"/issues/{issue.id}/comments", json={"body": "second"}, headers=auth_headers(other))
    client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    client.post(f"/issues/{issue.id}/vote", headers=auth_headers(other))

    resp = client.get(f"/issues/{issue.id}")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["id"] == issue.id
    assert data["voteCount"] == 2
    assert [c["body"] for c in data["comments"]] == ["first", "second"]
    assert data["comments"][0]["author"] == {"id": citizen.id, "email": citizen.email, "name": "Citizen Kane"}
    assert data["comments"][1]["author"] == {"id": other.id, "email": other.email, "name": "Bob"}
    assert "passwordHash" not in data["comments"][0]["author"]


# ---------- list ----------

def test_list_is_public_and_newest_first(client, citizen, make_issue):
    older = make_issue(citizen, title="Older one")
    newer = make_issue(citizen, title="Newer one")
    resp = client.get("/issues")
    assert resp.status_code == 200
    data = resp.json()
    assert [i["id"] for i in data["items"]] == [newer.id, older.id]
    assert data["total"] == 2
    assert data["page"] == 1
    assert data["pageSize"] == 10


def test_list_page_size_capped(client, citizen, make_issue):
    for _ in range(55):
        make_issue(citizen)

    data = client.get("/issues", params={"pageSize": 1000}).json()
    assert len(data["items"]) == 50
    assert data["pageSize"] == 50
    assert data["total"] == 55

    second = client.get("/issues", params={"pageSize": 1000, "page": 2}).json()
    assert len(second["items"]) == 5
    assert second["page"] == 2


def test_list_pagination(client, citizen, make_issue):
    ids = [make_issue(citizen).id for _ in range(5)]
    newest_first = list(reversed(ids))

    p1 = client.get("/issues", params={"page": 1, "pageSize": 2}).json()
    p3 = client.get("/issues", params={"page": 3, "pageSize": 2}).json()
    assert [i["id"] for i in p1["items"]] == newest_first[:2]
    assert [i["id"] for i in p3["items"]] == newest_first[4:]
    assert p1["total"] == p3["total"] == 5


@pytest.mark.parametrize("params", [{"page": 0}, {"page": "abc"}, {"pageSize": 0}])
def test_list_rejects_bad_paging(client, params):
    assert client.get("/issues", params=params).status_code == 400


def test_list_filters(client, citizen, make_issue):
    make_issue(citizen, title="Broken streetlight", category="lighting")
    make_issue(citizen, title="Pothole near school", category="roads", status=IssueStatus.APPROVED)
    make_issue(citizen, title="Graffiti", description="Paint on the POTHOLE sign", category="vandalism")

    def titles(**params):
        return sorted(i["title"] for i in client.get("/issues", params=params).json()["items"])

    assert titles(status="APPROVED") == ["Pothole near school"]
    # неизвестный статус игнорируется
    assert len(titles(status="BOGUS")) == 3
    assert titles(category="roads") == ["Pothole near school"]
    assert titles(category="Roads") == []
    assert titles(search="pothole") == ["Graffiti", "Pothole near school"]
    assert titles(search="pothole", status="PENDING") == ["Graffiti"]
    assert titles(search="100%") == []


def test_list_items_carry_counts_and_media(client, db, citizen, make_issue, auth_headers):
    issue = make_issue(citizen)
    db.add(Media(issue_id=issue.id, url="https://cdn.civic.org/x.jpg")); db.commit()
    client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    client.post(f"/issues/{issue.id}/comments", json={"body": "+1"}, headers=auth_headers(citizen))

    item = client.get("/issues").json()["items"][0]
    assert item["voteCount"] == 1
    assert item["commentCount"] == 1
    assert item["media"][0]["type"] == "image"


# ---------- status ----------

def test_update_status_and_assignee(client, db, citizen, moderator, make_issue, auth_headers):
    issue = make_issue(citizen)
    resp = client.patch(
        f"/issues/{issue.id}/status",
        json={"status": "RESOLVED", "assignedTo": moderator.id},
        headers=auth_headers(moderator),
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "RESOLVED"
    assert resp.json()["assignedTo"] == moderator.id

    # без ограничений на переходы: из RESOLVED обратно в PENDING
    back = client.patch(f"/issues/{issue.id}/status", json={"status": "PENDING"}, headers=auth_headers(moderator))
    assert back.status_code == 200
    assert back.json()["status"] == "PENDING"
    assert back.json()["assignedTo"] == moderator.id

    db.expire_all()
    assert db.get(Issue, issue.id).status == IssueStatus.PENDING


def test_update_status_missing_issue(client, moderator, auth_headers):
    resp = client.patch("/issues/nope/status", json={"status": "APPROVED"}, headers=auth_headers(moderator))
    assert resp.status_code == 404
    assert resp.json() == {"message": "Issue not found", "id": "nope"}


@pytest.mark.parametrize("body", [{"status": "DONE"}, {}, {"status": "approved"}])
def test_update_status_validation(client, citizen, admin, make_issue, auth_headers, body):
    issue = make_issue(citizen)
    resp = client.patch(f"/issues/{issue.id}/status", json=body, headers=auth_headers(admin))
    assert resp.status_code == 400


def test_update_status_unknown_assignee(client, citizen, admin, make_issue, auth_headers):
    issue = make_issue(citizen)
    resp = client.patch(
        f"/issues/{issue.id}/status",
        json={"status": "APPROVED", "assignedTo": "ghost"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Assignee not found"


# ---------- comments ----------

def test_comments_flow(client, citizen, make_issue, auth_headers):
    issue = make_issue(citizen)
    resp = client.post(f"/issues/{issue.id}/comments", json={"body": "Still there"}, headers=auth_headers(citizen))
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["body"] == "Still there"
    assert data["authorId"] == citizen.id
    assert data["issueId"] == issue.id

    client.post(f"/issues/{issue.id}/comments", json={"body": "Getting worse"}, headers=auth_headers(citizen))
    listed = client.get(f"/issues/{issue.id}/comments")
    assert listed.status_code == 200
    assert [c["body"] for c in listed.json()] == ["Still there", "Getting worse"]
    assert listed.json()[0]["author"]["email"] == citizen.email


def test_comment_requires_auth_and_body(client, citizen, make_issue, auth_headers):
    issue = make_issue(citizen)
    assert client.post(f"/issues/{issue.id}/comments", json={"body": "hi"}).status_code == 401
    assert client.post(f"/issues/{issue.id}/comments", json={"body": ""}, headers=auth_headers(citizen)).status_code == 400


def test_comment_on_missing_issue(client, citizen, auth_headers):
    resp = client.post("/issues/nope/comments", json={"body": "hello"}, headers=auth_headers(citizen))
    assert resp.status_code == 404
    assert resp.json()["id"] == "nope"


def test_list_comments_of_unknown_issue_is_empty(client):
    resp = client.get("/issues/nope/comments")
    assert resp.status_code == 200
    assert resp.json() == []


# ---------- votes ----------

def test_vote_twice_is_rejected(client, citizen, make_issue, auth_headers):
    issue = make_issue(citizen)
    first = client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    assert first.status_code == 201
    assert first.json() == {"ok": True}

    second = client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    assert second.status_code == 400
    assert second.json() == {"message": "Already voted"}

    assert client.get(f"/issues/{issue.id}").json()["voteCount"] == 1


def test_remove_vote_is_idempotent(client, citizen, make_issue, auth_headers):
    issue = make_issue(citizen)
    # голоса ещё нет
    resp = client.delete(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen))
    assert client.delete(f"/issues/{issue.id}/vote", headers=auth_headers(citizen)).status_code == 200
    assert client.delete(f"/issues/{issue.id}/vote", headers=auth_headers(citizen)).status_code == 200
    assert client.get(f"/issues/{issue.id}").json()["voteCount"] == 0

    # после снятия можно проголосовать снова
    assert client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen)).status_code == 201


def test_votes_are_per_user(client, citizen, moderator, make_issue, auth_headers):
    issue = make_issue(citizen)
    assert client.post(f"/issues/{issue.id}/vote", headers=auth_headers(citizen)).status_code == 201
    assert client.post(f"/issues/{issue.id}/vote", headers=auth_headers(moderator)).status_code == 201
    client.delete(f"/issues/{issue.id}/vote", headers=auth_headers(moderator))
    assert client.get(f"/issues/{issue.id}").json()["voteCount"] == 1


def test_vote_on_missing_issue(client, citizen, auth_headers):
    assert client.post("/issues/nope/vote", headers=auth_headers(citizen)).status_code == 404
    assert client.delete("/issues/nope/vote", headers=auth_headers(citizen)).status_code == 404


def test_vote_requires_auth(client, citizen, make_issue):
    issue = make_issue(citizen)
    assert client.post(f"/issues/{issue.id}/vote").status_code == 401
    assert client.delete(f"/issues/{issue.id}/vote").status_code == 401


def test_list_rejects_huge_page(client):
    resp = client.get("/issues", params={"page": 10**19})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation failed"


def test_list_past_last_page_is_empty(client, citizen, make_issue):
    make_issue(citizen)
    make_issue(citizen)
    data = client.get("/issues", params={"page": 100_000, "pageSize": 50}).json()
    assert data["items"] == []
    assert data["total"] == 2
    assert data["page"] == 100_000


def test_media_keep_submitted_order(client, citizen, auth_headers, issue_payload):
    urls = [f"https://cdn.civic.org/p/{n}.jpg" for n in range(6)]
    payload = dict(issue_payload, media=[{"url": u} for u in urls])
    created = client.post("/issues", json=payload, headers=auth_headers(citizen)).json()
    assert [m["url"] for m in created["media"]] == urls

    detail = client.get(f"/issues/{created['id']}").json()
    assert [m["url"] for m in detail["media"]] == urls
    listed = client.get("/issues").json()["items"][0]
    assert [m["url"] for m in listed["media"]] == urls
