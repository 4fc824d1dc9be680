import re

from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from database import get_db
from models.post import Post


def write(client, title="hello", files=None, **fields):
    data = {"title": title, "summary": "summary", "content": "content", **fields}
    return client.post("/postWrite", data=data, files=files)


def count_posts(app):
    db = app.state.session_factory()
    try:
        return db.query(Post).count()
    finally:
        db.close()


def test_hello(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello World!"


def test_post_write_requires_login(app, client):
    resp = write(client)
    assert resp.status_code == 200
    assert resp.json() == {"error": "로그인 필요"}
    assert count_posts(app) == 0


def test_post_write_rejects_invalid_token(app, client):
    client.cookies.set("token", "garbage")
    resp = write(client)
    assert resp.json() == {"error": "로그인 필요"}
    assert count_posts(app) == 0


def test_post_write_without_file(app, logged_in):
    resp = write(logged_in, title="first")
    assert resp.status_code == 200
    assert resp.json() == {"message": "게시글 작성 완료"}

    posts = logged_in.get("/postList").json()
    assert len(posts) == 1
    assert posts[0]["title"] == "first"
    assert posts[0]["cover"] is None
    assert posts[0]["author"] == "alice"


def test_post_author_comes_from_token(logged_in):
    write(logged_in, title="spoof", author="mallory")
    post = logged_in.get("/postList").json()[0]
    assert post["author"] == "alice"


def test_post_write_with_file(logged_in, settings):
    resp = write(logged_in, files={"files": ("photo.png", b"\x89PNG fake", "image/png")})
    assert resp.status_code == 200

    post = logged_in.get("/postList").json()[0]
    assert re.fullmatch(r"uploads/\d+-\d+\.png", post["cover"])

    filename = post["cover"].split("/", 1)[1]
    assert (settings.upload_dir / filename).read_bytes() == b"\x89PNG fake"

    served = logged_in.get(f"/{post['cover']}")
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake"


def test_same_filename_stored_twice(logged_in, settings):
    for _ in range(2):
        write(logged_in, files={"files": ("photo.png", b"data", "image/png")})

    stored = sorted(p.name for p in settings.upload_dir.iterdir())
    assert len(stored) == 2
    assert stored[0] != stored[1]
    assert all(re.fullmatch(r"\d+-\d+\.png", name) for name in stored)


def test_missing_upload_is_404(client):
    assert client.get("/uploads/nope.png").status_code == 404


def test_post_list_latest_three(logged_in):
    for i in range(5):
        write(logged_in, title=f"post {i}")

    posts = logged_in.get("/postList").json()
    assert [p["title"] for p in posts] == ["post 4", "post 3", "post 2"]
    assert posts[0]["createdAt"] >= posts[1]["createdAt"] >= posts[2]["createdAt"]
    assert set(posts[0]) == {
        "_id", "title", "summary", "content", "cover", "author", "createdAt", "updatedAt"
    }


def test_post_list_needs_no_login(client):
    resp = client.get("/postList")
    assert resp.status_code == 200
    assert resp.json() == []


class FailingSession:
    def add(self, obj):
        pass

    def commit(self):
        raise SQLAlchemyError("disk on fire")

    def rollback(self):
        pass


def test_failed_insert_removes_upload(app, logged_in, settings):
    app.dependency_overrides[get_db] = lambda: FailingSession()

    resp = write(logged_in, files={"files": ("photo.png", b"data", "image/png")})
    assert resp.status_code == 500
    assert resp.json() == {"error": "게시글 작성 실패"}
    assert "disk on fire" not in resp.text
    assert list(settings.upload_dir.iterdir()) == []


def test_post_list_storage_failure(app):
    class BrokenSession:
        def query(self, model):
            raise SQLAlchemyError("connection refused")

    app.dependency_overrides[get_db] = lambda: BrokenSession()
    resp = TestClient(app).get("/postList")
    assert resp.status_code == 500
    assert resp.json() == {"error": "게시글 목록 조회 실패"}
