import pytest
from sqlalchemy import event

from blog.auth.service import issue_token, login_user, register_user, resolve_token, revoke_tokens
from blog.categories.service import delete_category
from blog.comments.service import create_comment
from blog.errors import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from blog.models.comment import Comment
from blog.models.post import Post
from blog.models.user import User
from blog.posts.service import create_post, delete_post, get_post, list_posts, update_post
from blog.schemas.comment import CommentCreate
from blog.schemas.post import PostCreate, PostUpdate


@pytest.fixture
def alice(db):
    return register_user(db, "Alice", "alice@x.com", "secret1")


@pytest.fixture
def bob(db):
    return register_user(db, "Bob", "bob@x.com", "secret1")


def _post(db, author, category, title="Hi"):
    return create_post(db, PostCreate(title=title, content="World", category_id=category.id), author_id=author.id)


def test_register_rejects_duplicate_email(db, alice):
    with pytest.raises(ValidationError) as exc:
        register_user(db, "Again", "alice@x.com", "secret1")
    assert exc.value.errors == {"email": ["The email has already been taken."]}
    assert db.query(User).count() == 1


def test_login_failures_raise_authentication_error(db, alice):
    with pytest.raises(AuthenticationError):
        login_user(db, "alice@x.com", "wrong-password")
    with pytest.raises(AuthenticationError):
        login_user(db, "nobody@x.com", "secret1")
    assert login_user(db, "alice@x.com", "secret1").id == alice.id


def test_token_round_trip_and_revocation(db, alice):
    token = issue_token(db, alice)
    assert resolve_token(db, token).id == alice.id

    assert revoke_tokens(db, alice.id) == 1
    with pytest.raises(AuthenticationError):
        resolve_token(db, token)
    # nothing left to revoke
    assert revoke_tokens(db, alice.id) == 0


def test_update_and_delete_enforce_authorship(db, alice, bob, category):
    post = _post(db, alice, category)
    with pytest.raises(AuthorizationError):
        update_post(db, post.id, PostUpdate(title="x"), caller_id=bob.id)
    with pytest.raises(AuthorizationError):
        delete_post(db, post.id, caller_id=bob.id)
    with pytest.raises(NotFoundError):
        update_post(db, 999, PostUpdate(title="x"), caller_id=alice.id)


def test_update_ignores_explicit_nulls_for_required_fields(db, alice, category):
    post = _post(db, alice, category)
    updated = update_post(db, post.id, PostUpdate(title=None, image="https://img.example.com/a.png"), caller_id=alice.id)
    assert updated.title == "Hi"
    assert updated.image == "https://img.example.com/a.png"


def test_deleting_category_cascades_to_posts_and_comments(db, alice, bob, category):
    first = _post(db, alice, category, "one")
    second = _post(db, bob, category, "two")
    create_comment(db, CommentCreate(body="c1", post_id=first.id), author_id=bob.id)
    create_comment(db, CommentCreate(body="c2", post_id=second.id), author_id=alice.id)

    delete_category(db, category.id)

    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0
    assert db.query(User).count() == 2


def test_deleting_user_cascades_to_posts_and_comments(db, alice, bob, category):
    post = _post(db, alice, category)
    create_comment(db, CommentCreate(body="mine", post_id=post.id), author_id=alice.id)
    create_comment(db, CommentCreate(body="bob's", post_id=post.id), author_id=bob.id)

    db.delete(db.get(User, alice.id))
    db.commit()

    assert db.query(Post).count() == 0
    assert db.query(Comment).count() == 0


def test_get_post_not_found(db):
    with pytest.raises(NotFoundError):
        get_post(db, 1)


def test_list_posts_query_count_does_not_grow_with_posts(db, engine, alice, bob, category):
    statements = []

    def count(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    def queries_for_list():
        db.expire_all()
        statements.clear()
        event.listen(engine, "before_cursor_execute", count)
        try:
            posts = list_posts(db)
        finally:
            event.remove(engine, "before_cursor_execute", count)
        return posts, len(statements)

    post = _post(db, alice, category, "first")
    create_comment(db, CommentCreate(body="c", post_id=post.id), author_id=bob.id)
    _, with_one = queries_for_list()

    for i in range(5):
        p = _post(db, bob, category, f"more {i}")
        create_comment(db, CommentCreate(body="c", post_id=p.id), author_id=alice.id)
    posts, with_six = queries_for_list()

    assert len(posts) == 6
    assert with_one == with_six
    assert all(p.comments_count == 1 for p in posts)
    assert {p.author.name for p in posts} == {"Alice", "Bob"}
    assert {p.category.name for p in posts} == {"General"}


def test_list_posts_filters_by_author_and_pages(db, alice, bob, category):
    for i in range(3):
        _post(db, alice, category, f"a{i}")
    _post(db, bob, category, "b0")

    assert [p.title for p in list_posts(db, author_id=bob.id)] == ["b0"]
    page = list_posts(db, limit=2, offset=0)
    assert len(page) == 2
    assert page[0].title == "b0"
