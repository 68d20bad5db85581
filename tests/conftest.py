import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from blog.auth.deps import get_db
from blog.db.session import Base
from blog.main import create_app
from blog.models.category import Category

CSRF_RE = re.compile(r'name="_token" value="([^"]+)"')


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def category(db):
    cat = Category(name="General")
    db.add(cat)
    db.commit()
    db.refresh(cat)
    return cat


def register(client, name="Alice", email="alice@x.com", password="secret1"):
    resp = client.post("/api/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def csrf_from(html):
    match = CSRF_RE.search(html)
    assert match, "no CSRF token in page"
    return match.group(1)
