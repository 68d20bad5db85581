import pytest

from conftest import auth, register


@pytest.fixture
def post_id(client, category):
    token = register(client, name="Author", email="author@x.com")["token"]
    resp = client.post("/api/posts", json={"title": "T", "content": "C", "category_id": category.id}, headers=auth(token))
    return resp.json()["id"]


def test_create_comment_sets_commenter(client, post_id):
    alice = register(client)
    resp = client.post(
        "/api/comments",
        json={"body": "First!", "post_id": post_id, "user_id": 999},
        headers=auth(alice["token"]),
    )
    assert resp.status_code == 201
    comment = resp.json()
    assert comment["user_id"] == alice["user"]["id"]
    assert comment["author"]["name"] == "Alice"


def test_comment_on_missing_post(client):
    token = register(client)["token"]
    resp = client.post("/api/comments", json={"body": "x", "post_id": 404}, headers=auth(token))
    assert resp.status_code == 400
    assert "post_id" in resp.json()["errors"]


def test_list_comments_filtered_by_post(client, post_id, category):
    token = register(client)["token"]
    other = client.post("/api/posts", json={"title": "O", "content": "C", "category_id": category.id}, headers=auth(token)).json()["id"]
    client.post("/api/comments", json={"body": "a", "post_id": post_id}, headers=auth(token))
    client.post("/api/comments", json={"body": "b", "post_id": other}, headers=auth(token))

    assert len(client.get("/api/comments", headers=auth(token)).json()) == 2
    filtered = client.get("/api/comments", params={"post_id": post_id}, headers=auth(token)).json()
    assert [c["body"] for c in filtered] == ["a"]


def test_commenter_can_edit_and_delete(client, post_id):
    token = register(client)["token"]
    comment_id = client.post("/api/comments", json={"body": "typo", "post_id": post_id}, headers=auth(token)).json()["id"]

    resp = client.put(f"/api/comments/{comment_id}", json={"body": "fixed"}, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["body"] == "fixed"

    assert client.delete(f"/api/comments/{comment_id}", headers=auth(token)).status_code == 200
    assert client.get(f"/api/comments/{comment_id}", headers=auth(token)).status_code == 404


def test_other_users_cannot_edit_or_delete_comment(client, post_id):
    alice = register(client)["token"]
    bob = register(client, name="Bob", email="bob@x.com")["token"]
    comment_id = client.post("/api/comments", json={"body": "mine", "post_id": post_id}, headers=auth(alice)).json()["id"]

    assert client.put(f"/api/comments/{comment_id}", json={"body": "x"}, headers=auth(bob)).status_code == 403
    assert client.delete(f"/api/comments/{comment_id}", headers=auth(bob)).status_code == 403
    assert client.get(f"/api/comments/{comment_id}", headers=auth(alice)).json()["body"] == "mine"


def test_blank_comment_body_is_rejected(client, post_id):
    token = register(client)["token"]
    resp = client.post("/api/comments", json={"body": "   ", "post_id": post_id}, headers=auth(token))
    assert resp.status_code == 400
    assert "body" in resp.json()["errors"]
