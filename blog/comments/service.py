
import logging

from sqlalchemy.orm import Session, joinedload
from blog.errors import AuthorizationError, NotFoundError, ValidationError
from blog.models.comment import Comment
from blog.models.post import Post
from blog.schemas.comment import CommentCreate, CommentOut, CommentUpdate

logger = logging.getLogger(__name__)


def _load(db: Session, comment_id: int) -> Comment:
    comment = (
        db.query(Comment)
        .options(joinedload(Comment.author))
        .filter(Comment.id == comment_id)
        .first()
    )
    if comment is None:
        raise NotFoundError("Comment not found.")
    return comment


def _owned(db: Session, comment_id: int, caller_id: int) -> Comment:
    comment = _load(db, comment_id)
    if comment.user_id != caller_id:
        logger.warning("user id=%s denied access to comment id=%s", caller_id, comment_id)
        raise AuthorizationError("You are not the author of this comment.")
    return comment


def list_comments(db: Session, *, post_id: int | None = None) -> list[CommentOut]:
    query = db.query(Comment).options(joinedload(Comment.author))
    if post_id is not None:
        query = query.filter(Comment.post_id == post_id)
    return [CommentOut.model_validate(c) for c in query.order_by(Comment.id).all()]


def get_comment(db: Session, comment_id: int) -> CommentOut:
    return CommentOut.model_validate(_load(db, comment_id))


def create_comment(db: Session, data: CommentCreate, author_id: int) -> CommentOut:
    if db.get(Post, data.post_id) is None:
        raise ValidationError.for_field("post_id", "The selected post is invalid.")
    comment = Comment(body=data.body, post_id=data.post_id, user_id=author_id)
    db.add(comment)
    db.commit()
    logger.info("user id=%s commented on post id=%s", author_id, data.post_id)
    return get_comment(db, comment.id)


def update_comment(db: Session, comment_id: int, data: CommentUpdate, caller_id: int) -> CommentOut:
    comment = _owned(db, comment_id, caller_id)
    comment.body = data.body
    db.commit()
    return get_comment(db, comment_id)


def delete_comment(db: Session, comment_id: int, caller_id: int) -> None:
    comment = _owned(db, comment_id, caller_id)
    db.delete(comment)
    db.commit()
    logger.info("user id=%s deleted comment id=%s", caller_id, comment_id)
