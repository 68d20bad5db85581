"""Post use cases.

Every function takes the caller's id explicitly and returns plain ``PostOut``
records; relations are always fetched with the loader options below so a list
costs the same number of queries whatever its length.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload, selectinload
from blog.errors import AuthorizationError, NotFoundError, ValidationError
from blog.models.category import Category
from blog.models.comment import Comment
from blog.models.post import Post
from blog.schemas.post import PostCreate, PostOut, PostUpdate

logger = logging.getLogger(__name__)

# author and category ride along in the main query, comments (with their authors) in one batch
POST_RELATIONS = (
    joinedload(Post.author),
    joinedload(Post.category),
    selectinload(Post.comments).joinedload(Comment.author),
)

# columns that may be overwritten by an update but never set to NULL
_REQUIRED_FIELDS = {"title", "content", "category_id"}


def _ensure_category(db: Session, category_id: int) -> None:
    if db.get(Category, category_id) is None:
        raise ValidationError.for_field("category_id", "The selected category is invalid.")


def _load(db: Session, post_id: int) -> Post:
    post = db.query(Post).options(*POST_RELATIONS).filter(Post.id == post_id).first()
    if post is None:
        raise NotFoundError("Post not found.")
    return post


def _owned(db: Session, post_id: int, caller_id: int) -> Post:
    post = _load(db, post_id)
    if post.user_id != caller_id:
        logger.warning("user id=%s denied access to post id=%s", caller_id, post_id)
        raise AuthorizationError("You are not the author of this post.")
    return post


def list_posts(db: Session, *, author_id: int | None = None, limit: int | None = None, offset: int = 0) -> list[PostOut]:
    query = db.query(Post).options(*POST_RELATIONS)
    if author_id is not None:
        query = query.filter(Post.user_id == author_id)
    query = query.order_by(Post.created_at.desc(), Post.id.desc())
    if limit is not None:
        query = query.offset(offset).limit(limit)
    return [PostOut.model_validate(p) for p in query.all()]


def count_posts(db: Session, *, author_id: int | None = None) -> int:
    query = db.query(func.count(Post.id))
    if author_id is not None:
        query = query.filter(Post.user_id == author_id)
    return query.scalar() or 0


def get_post(db: Session, post_id: int) -> PostOut:
    return PostOut.model_validate(_load(db, post_id))


def get_post_for_edit(db: Session, post_id: int, caller_id: int) -> PostOut:
    return PostOut.model_validate(_owned(db, post_id, caller_id))


def create_post(db: Session, data: PostCreate, author_id: int) -> PostOut:
    _ensure_category(db, data.category_id)
    post = Post(
        title=data.title,
        content=data.content,
        category_id=data.category_id,
        image=data.image,
        user_id=author_id,
    )
    db.add(post)
    db.commit()
    logger.info("user id=%s created post id=%s", author_id, post.id)
    return get_post(db, post.id)


def update_post(db: Session, post_id: int, data: PostUpdate, caller_id: int) -> PostOut:
    post = _owned(db, post_id, caller_id)
    changes = data.model_dump(exclude_unset=True)
    for field in _REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            changes.pop(field)
    if "category_id" in changes:
        _ensure_category(db, changes["category_id"])

    for field, value in changes.items():
        setattr(post, field, value)
    db.commit()
    logger.info("user id=%s updated post id=%s fields=%s", caller_id, post_id, sorted(changes))
    return get_post(db, post_id)


def delete_post(db: Session, post_id: int, caller_id: int) -> None:
    post = _owned(db, post_id, caller_id)
    db.delete(post)
    db.commit()
    logger.info("user id=%s deleted post id=%s", caller_id, post_id)
