from blog.models.access_token import AccessToken
from blog.models.user import User
from conftest import auth, register


def test_register_returns_usable_token(client):
    body = register(client)
    assert body["token_type"] == "Bearer"
    assert body["user"]["email"] == "alice@x.com"

    me = client.get("/api/user", headers=auth(body["token"]))
    assert me.status_code == 200
    assert me.json()["name"] == "Alice"


def test_register_duplicate_email_fails_without_second_row(client, db):
    register(client)
    resp = client.post("/api/register", json={"name": "Other", "email": "alice@x.com", "password": "secret2"})
    assert resp.status_code == 400
    assert "email" in resp.json()["errors"]
    assert db.query(User).filter(User.email == "alice@x.com").count() == 1


def test_register_email_is_case_insensitive(client, db):
    register(client)
    resp = client.post("/api/register", json={"name": "Other", "email": "ALICE@x.com", "password": "secret2"})
    assert resp.status_code == 400
    assert db.query(User).count() == 1


def test_register_validation_errors_are_per_field(client):
    resp = client.post("/api/register", json={"email": "not-an-email", "password": "123"})
    assert resp.status_code == 400
    errors = resp.json()["errors"]
    assert set(errors) == {"name", "email", "password"}


def test_login_with_correct_password(client):
    register(client)
    resp = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"})
    assert resp.status_code == 200
    token = resp.json()["token"]
    assert client.get("/api/user", headers=auth(token)).status_code == 200


def test_login_wrong_password_and_unknown_email_look_the_same(client):
    register(client)
    wrong = client.post("/api/login", json={"email": "alice@x.com", "password": "nope123"})
    unknown = client.post("/api/login", json={"email": "bob@x.com", "password": "secret1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json() == {"message": "Invalid credentials."}


def test_password_is_stored_hashed(client, db):
    register(client)
    user = db.query(User).one()
    assert user.password_hash != "secret1"


def test_protected_endpoint_requires_token(client):
    resp = client.get("/api/posts")
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_garbage_token_is_rejected(client):
    assert client.get("/api/user", headers=auth("not-a-jwt")).status_code == 401


def test_logout_revokes_tokens(client, db):
    token = register(client)["token"]
    resp = client.post("/api/logout", headers=auth(token))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out successfully."}
    assert db.query(AccessToken).count() == 0

    assert client.get("/api/user", headers=auth(token)).status_code == 401
    # second logout with the same token is rejected, not a crash
    assert client.post("/api/logout", headers=auth(token)).status_code == 401


def test_login_after_logout_issues_new_working_token(client):
    old = register(client)["token"]
    client.post("/api/logout", headers=auth(old))
    new = client.post("/api/login", json={"email": "alice@x.com", "password": "secret1"}).json()["token"]
    assert new != old
    assert client.get("/api/user", headers=auth(new)).status_code == 200


def test_register_rejects_blank_name(client, db):
    resp = client.post("/api/register", json={"name": "   ", "email": "alice@x.com", "password": "secret1"})
    assert resp.status_code == 400
    assert set(resp.json()["errors"]) == {"name"}
    assert db.query(User).count() == 0


def test_register_trims_name(client):
    assert register(client, name="  Alice  ")["user"]["name"] == "Alice"
